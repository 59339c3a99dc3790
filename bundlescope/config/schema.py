from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from bundlescope.models.enums import ReportFormat

# (json_key, attr_name, minimum), shared by from_dict and override clamping.
_INT_FIELDS: tuple[tuple[str, str, int], ...] = (
    ("criticalGzipBytes", "critical_gzip_bytes", 1),
    ("warningGzipBytes", "warning_gzip_bytes", 1),
    ("maxModuleCount", "max_module_count", 1),
    ("topPackages", "top_packages", 1),
    ("topDuplicates", "top_duplicates", 1),
    ("topUnused", "top_unused", 1),
    ("maxTreeshakingIssues", "max_treeshaking_issues", 1),
    ("summaryTopCount", "summary_top_count", 1),
)


def clamp_field(value: int, field_name: str) -> int:
    """Clamp *value* to the minimum defined for *field_name* in _INT_FIELDS."""
    for _, attr, minimum in _INT_FIELDS:
        if attr == field_name:
            return max(minimum, value)
    return value


def _get_int(data: dict[str, Any], json_key: str, default: int, minimum: int) -> int:
    return max(minimum, int(data.get(json_key, default)))


def _get_float(data: dict[str, Any], json_key: str, default: float | None) -> float | None:
    value = data.get(json_key, default)
    return float(value) if value is not None else None


def _get_str(data: dict[str, Any], json_key: str, default: str | None) -> str | None:
    value = data.get(json_key, default)
    return str(value) if value is not None else None


@dataclass(slots=True)
class AppConfig:
    large_module_threshold: float = 5.0
    max_gzip_size: float | None = None
    max_initial_size: float | None = None
    critical_gzip_bytes: int = 500_000
    warning_gzip_bytes: int = 250_000
    max_module_count: int = 500
    top_packages: int = 20
    top_duplicates: int = 10
    top_unused: int = 20
    max_treeshaking_issues: int = 10
    summary_top_count: int = 5
    output: str | None = None
    baseline: str | None = None
    format: ReportFormat = ReportFormat.JSON

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "thresholds": {
                "maxGzipSize": self.max_gzip_size,
                "maxInitialSize": self.max_initial_size,
                "largeModuleThreshold": self.large_module_threshold,
            },
            "output": self.output,
            "baseline": self.baseline,
            "format": self.format.value,
        }
        for json_key, attr, _ in _INT_FIELDS:
            payload[json_key] = getattr(self, attr)
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any], defaults: AppConfig) -> AppConfig:
        thresholds = data.get("thresholds") or {}
        if not isinstance(thresholds, dict):
            raise ValueError("thresholds must be an object")

        large_module = _get_float(thresholds, "largeModuleThreshold", defaults.large_module_threshold)
        format_raw = data.get("format")

        int_kwargs: dict[str, int] = {}
        for json_key, attr, minimum in _INT_FIELDS:
            int_kwargs[attr] = _get_int(data, json_key, getattr(defaults, attr), minimum)

        return cls(
            large_module_threshold=large_module if large_module is not None else defaults.large_module_threshold,
            max_gzip_size=_get_float(thresholds, "maxGzipSize", defaults.max_gzip_size),
            max_initial_size=_get_float(thresholds, "maxInitialSize", defaults.max_initial_size),
            output=_get_str(data, "output", defaults.output),
            baseline=_get_str(data, "baseline", defaults.baseline),
            format=ReportFormat.from_str(format_raw) if format_raw is not None else defaults.format,
            **int_kwargs,
        )


_FIELD_NAMES = frozenset(f.name for f in fields(AppConfig))


def apply_overrides(config: AppConfig, **overrides: Any) -> AppConfig:
    """Return a copy of *config* where every non-None override wins.

    Config-file values stay in place underneath anything not overridden.
    """
    changes: dict[str, Any] = {}
    for name, value in overrides.items():
        if name not in _FIELD_NAMES:
            raise ValueError(f"Unknown config field: {name}")
        if value is None:
            continue
        if name == "format":
            value = ReportFormat.from_str(value)
        elif isinstance(value, int) and not isinstance(value, bool):
            value = clamp_field(value, name)
        changes[name] = value
    return replace(config, **changes)
