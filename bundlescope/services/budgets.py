from __future__ import annotations

import math
from dataclasses import dataclass

from bundlescope.config.schema import AppConfig
from bundlescope.models.report import AnalysisResult, BundleMetrics
from bundlescope.models.stats import Module

GZIP_BUDGET_EXIT = 2
INITIAL_BUDGET_EXIT = 3
_MB = 1024 * 1024
# Byte deltas smaller than this (in MB) are not worth reporting.
_MIN_REPORTED_MB = 0.01


@dataclass(slots=True, frozen=True)
class BudgetViolation:
    label: str
    actual_mb: float
    limit_mb: float
    exit_code: int

    @property
    def message(self) -> str:
        return f"{self.label} ({self.actual_mb:.2f}MB) exceeds threshold ({self.limit_mb:g}MB)."


def evaluate_budgets(result: AnalysisResult, config: AppConfig) -> list[BudgetViolation]:
    violations: list[BudgetViolation] = []
    if config.max_gzip_size is not None:
        gzip_mb = result.metrics.total_gzip_size / _MB
        if gzip_mb > config.max_gzip_size:
            violations.append(BudgetViolation("Bundle gzip size", gzip_mb, config.max_gzip_size, GZIP_BUDGET_EXIT))
    if config.max_initial_size is not None:
        initial_mb = result.bundle_stats.initial_size / _MB
        if initial_mb > config.max_initial_size:
            violations.append(
                BudgetViolation("Initial bundle size", initial_mb, config.max_initial_size, INITIAL_BUDGET_EXIT)
            )
    return violations


def budget_exit_code(violations: list[BudgetViolation]) -> int:
    return max((v.exit_code for v in violations), default=0)


@dataclass(slots=True, frozen=True)
class MetricDelta:
    label: str
    baseline: int
    current: int
    is_bytes: bool

    @property
    def difference(self) -> int:
        return self.current - self.baseline

    @property
    def is_significant(self) -> bool:
        if self.is_bytes:
            return abs(self.difference) / _MB >= _MIN_REPORTED_MB
        return self.difference != 0

    def describe(self) -> str:
        """Human-readable delta, or an empty string when not significant."""
        if not self.is_significant:
            return ""
        sign = "+" if self.difference > 0 else "-"
        if self.is_bytes:
            return f"{sign}{abs(self.difference) / _MB:.2f}MB vs baseline"
        return f"{sign}{abs(self.difference)} vs baseline"


def compare_metrics(current: BundleMetrics, baseline: BundleMetrics) -> dict[str, MetricDelta]:
    return {
        "totalSize": MetricDelta("Total Size", baseline.total_size, current.total_size, True),
        "totalGzipSize": MetricDelta("Gzip Size", baseline.total_gzip_size, current.total_gzip_size, True),
        "moduleCount": MetricDelta("Modules", baseline.module_count, current.module_count, False),
        "chunkCount": MetricDelta("Chunks", baseline.chunk_count, current.chunk_count, False),
    }


def large_modules(result: AnalysisResult, threshold: float) -> list[Module]:
    if not math.isfinite(threshold):
        threshold = 5.0
    return [m for m in result.bundle_stats.modules if m.percentage >= threshold]
