from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from result import Result

from bundlescope.models.enums import Severity
from bundlescope.models.stats import BundleStats, Chunk, Module, StatsError


@dataclass(slots=True, frozen=True)
class Recommendation:
    severity: Severity
    message: str
    action: str

    def to_dict(self) -> dict[str, Any]:
        return {"severity": self.severity.value, "message": self.message, "action": self.action}


@dataclass(slots=True, frozen=True)
class DuplicateGroup:
    names: tuple[str, ...]
    total_size: int
    savings: int

    def to_dict(self) -> dict[str, Any]:
        return {"names": list(self.names), "totalSize": self.total_size, "savings": self.savings}


@dataclass(slots=True, frozen=True)
class PackageStats:
    name: str
    total_size: int
    gzip_size: int | None
    module_count: int
    modules: tuple[str, ...]
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "totalSize": self.total_size,
            "gzipSize": self.gzip_size,
            "moduleCount": self.module_count,
            "modules": list(self.modules),
            "percentage": self.percentage,
        }


EMPTY_CHUNK = Chunk(id="", name="N/A", size=0)


@dataclass(slots=True, frozen=True)
class ChunkAnalysis:
    average_chunk_size: float = 0.0
    average_modules_per_chunk: float = 0.0
    largest_chunk: Chunk = EMPTY_CHUNK
    smallest_chunk: Chunk = EMPTY_CHUNK
    initial_chunk_size: int = 0
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "averageChunkSize": self.average_chunk_size,
            "averageModulesPerChunk": self.average_modules_per_chunk,
            "largestChunk": self.largest_chunk.to_dict(),
            "smallestChunk": self.smallest_chunk.to_dict(),
            "initialChunkSize": self.initial_chunk_size,
            "recommendations": list(self.recommendations),
        }


@dataclass(slots=True, frozen=True)
class UnusedModule:
    name: str
    size: int
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "size": self.size, "reason": self.reason}


EMPTY_MODULE = Module(name="N/A", size=0, gzip_size=0, percentage=0.0)


@dataclass(slots=True, frozen=True)
class BundleMetrics:
    total_size: int
    total_gzip_size: int
    total_brotli_size: int | None
    module_count: int
    chunk_count: int
    largest_module: Module
    average_module_size: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSize": self.total_size,
            "totalGzipSize": self.total_gzip_size,
            "totalBrotliSize": self.total_brotli_size,
            "moduleCount": self.module_count,
            "chunkCount": self.chunk_count,
            "largestModule": self.largest_module.to_dict(),
            "averageModuleSize": self.average_module_size,
        }


@dataclass(slots=True, frozen=True)
class AnalysisResult:
    bundle_stats: BundleStats
    recommendations: tuple[Recommendation, ...]
    treeshaking_issues: tuple[str, ...]
    duplicates: tuple[DuplicateGroup, ...]
    packages: tuple[PackageStats, ...]
    chunk_analysis: ChunkAnalysis
    unused_modules: tuple[UnusedModule, ...]
    metrics: BundleMetrics
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "bundleStats": self.bundle_stats.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "treeshakingIssues": list(self.treeshaking_issues),
            "duplicates": [d.to_dict() for d in self.duplicates],
            "packages": [p.to_dict() for p in self.packages],
            "chunkAnalysis": self.chunk_analysis.to_dict(),
            "unusedModules": [u.to_dict() for u in self.unused_modules],
            "metrics": self.metrics.to_dict(),
            "timestamp": self.timestamp,
        }


AnalysisOutcome = Result[AnalysisResult, StatsError]
