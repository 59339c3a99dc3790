from __future__ import annotations

from enum import Enum
from typing import Any


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    @property
    def icon(self) -> str:
        return _SEVERITY_ICONS[self]

    @property
    def style(self) -> str:
        return _SEVERITY_STYLES[self]


_SEVERITY_ICONS: dict[Severity, str] = {
    Severity.CRITICAL: "🔴",
    Severity.WARNING: "🟡",
    Severity.INFO: "🟢",
}

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "green",
}


class StatsErrorCode(str, Enum):
    FILE_NOT_FOUND = "file_not_found"
    PARSE_ERROR = "parse_error"
    BUILD_FAILED = "build_failed"
    SCHEMA_ERROR = "schema_error"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class ReportFormat(str, Enum):
    HTML = "html"
    CSV = "csv"
    MARKDOWN = "markdown"
    JSON = "json"
    DOT = "dot"

    @classmethod
    def from_str(cls, value: Any) -> ReportFormat:
        return _FORMAT_FROM_STR.get(str(value).lower(), cls.JSON)


_FORMAT_FROM_STR: dict[str, ReportFormat] = {
    "html": ReportFormat.HTML,
    "csv": ReportFormat.CSV,
    "markdown": ReportFormat.MARKDOWN,
    "md": ReportFormat.MARKDOWN,
    "json": ReportFormat.JSON,
    "dot": ReportFormat.DOT,
}
