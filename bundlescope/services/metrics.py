from __future__ import annotations

from bundlescope.models.report import EMPTY_MODULE, BundleMetrics
from bundlescope.models.stats import BundleStats

# Brotli typically lands ~17% below gzip for JS; a fixed estimate, not a measurement.
BROTLI_RATIO = 0.83


def estimate_brotli(gzip_size: int) -> int | None:
    return round(gzip_size * BROTLI_RATIO) if gzip_size else None


def calculate_metrics(stats: BundleStats) -> BundleMetrics:
    sizes = [m.size for m in stats.modules]
    return BundleMetrics(
        total_size=stats.size,
        total_gzip_size=stats.gzip_size,
        total_brotli_size=estimate_brotli(stats.gzip_size),
        module_count=len(stats.modules),
        chunk_count=len(stats.chunks),
        # Modules are already sorted by size, largest first.
        largest_module=stats.modules[0] if stats.modules else EMPTY_MODULE,
        average_module_size=sum(sizes) / len(sizes) if sizes else 0.0,
    )
