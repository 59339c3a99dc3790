from __future__ import annotations

from bundlescope.config.defaults import default_config
from bundlescope.config.schema import AppConfig
from bundlescope.models.enums import Severity
from bundlescope.models.report import Recommendation
from bundlescope.models.stats import BundleStats
from bundlescope.services.packages import find_duplicates


def generate_recommendations(stats: BundleStats, config: AppConfig | None = None) -> list[Recommendation]:
    """Apply every sizing rule to *stats*; rules are independent and all may fire."""
    config = config or default_config()
    recommendations: list[Recommendation] = []

    gzip_mb = stats.gzip_size / 1024 / 1024
    if stats.gzip_size > config.critical_gzip_bytes:
        recommendations.append(
            Recommendation(
                Severity.CRITICAL,
                f"Bundle size is {gzip_mb:.2f}MB (gzipped)",
                "Implement aggressive code-splitting or consider alternative libraries",
            )
        )
    elif stats.gzip_size > config.warning_gzip_bytes:
        recommendations.append(
            Recommendation(
                Severity.WARNING,
                f"Bundle size is {gzip_mb:.2f}MB (gzipped)",
                "Consider code-splitting frequently used features",
            )
        )

    threshold = config.large_module_threshold
    large = [m for m in stats.modules if m.percentage > threshold]
    if large:
        recommendations.append(
            Recommendation(
                Severity.WARNING,
                f"Found {len(large)} modules exceeding {threshold:g}% of bundle size",
                "Consider extracting to separate chunk or lazy-loading",
            )
        )

    duplicates = find_duplicates(stats.modules, config.top_duplicates)
    if duplicates:
        total_kb = sum(d.total_size for d in duplicates) / 1024
        recommendations.append(
            Recommendation(
                Severity.WARNING,
                f"Found {len(duplicates)} duplicate modules totaling {total_kb:.2f}KB",
                "Use npm dedupe or resolve version conflicts",
            )
        )

    if len(stats.modules) > config.max_module_count:
        recommendations.append(
            Recommendation(
                Severity.INFO,
                f"High module count ({len(stats.modules)}) - may impact build performance",
                "Monitor module growth and consider monorepo approach",
            )
        )

    return recommendations
