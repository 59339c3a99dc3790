from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, TypeAlias

from result import Result

from bundlescope.models.enums import StatsErrorCode

ProgressCallback = Callable[[str], None]


@dataclass(slots=True, frozen=True)
class StatsDocument:
    """A parsed stats file that passed structural validation."""

    path: str
    data: dict[str, Any]


# Module references as they appear inside a chunk's ``modules`` list: either a
# bare name (size unknown) or an object carrying some of the module fields.
@dataclass(slots=True, frozen=True)
class NameOnlyRef:
    name: str


@dataclass(slots=True, frozen=True)
class DetailedRef:
    name: str
    size: int = 0
    gzip_size: int | None = None
    reasons: tuple[str, ...] = ()
    source: str | None = None


RawModuleRef: TypeAlias = NameOnlyRef | DetailedRef


@dataclass(slots=True, frozen=True)
class Module:
    name: str
    size: int
    gzip_size: int | None = None
    percentage: float = 0.0
    reasons: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "gzipSize": self.gzip_size,
            "percentage": self.percentage,
            "reasons": list(self.reasons),
        }


@dataclass(slots=True, frozen=True)
class Chunk:
    id: str | int
    name: str
    size: int
    gzip_size: int | None = None
    modules: tuple[str, ...] = ()
    initial: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "gzipSize": self.gzip_size,
            "modules": list(self.modules),
            "initial": self.initial,
        }


@dataclass(slots=True, frozen=True)
class BundleStats:
    name: str
    size: int
    gzip_size: int
    modules: tuple[Module, ...] = ()
    chunks: tuple[Chunk, ...] = ()
    initial_size: int = 0
    initial_count: int = 0
    parsed_size: int = 0
    # Original module sources by name; only populated from the flat schema.
    sources: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "gzipSize": self.gzip_size,
            "modules": [m.to_dict() for m in self.modules],
            "chunks": [c.to_dict() for c in self.chunks],
            "isInitialBySize": self.initial_size,
            "isInitialByCount": self.initial_count,
            "parsedSize": self.parsed_size,
        }


@dataclass(slots=True, frozen=True)
class StatsError:
    code: StatsErrorCode
    path: str
    message: str


StatsResult = Result[StatsDocument, StatsError]
