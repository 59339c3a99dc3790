# Module/chunk extraction.
#
# Stats files come in two shapes:
#
#   flat    {"modules": [{name, size, ...}, ...], "chunks": [...]}
#   nested  {"chunks": [{"modules": ["a.js", {name, size, ...}], ...}]}
#
# The flat list wins whenever it is non-empty.  Otherwise the per-chunk lists
# are parsed into RawModuleRef values and merged by name: the same physical
# module shows up in every chunk that includes it, so sizes merge by max and
# never by sum.

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from bundlescope.models.stats import BundleStats, Chunk, DetailedRef, Module, NameOnlyRef, RawModuleRef, StatsDocument
from bundlescope.services.ingest import read_number


def _size(value: Any) -> int:
    number = read_number(value)
    return int(number) if number is not None and number > 0 else 0


def _optional_size(value: Any) -> int | None:
    number = read_number(value)
    return int(number) if number is not None and number >= 0 else None


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def parse_reasons(raw: Any) -> tuple[str, ...]:
    """Normalize a ``reasons`` field to plain strings.

    Entries may be strings or objects with a ``moduleName``; anything else
    (and empty names) is dropped.
    """
    if not isinstance(raw, list):
        return ()
    reasons: list[str] = []
    for item in raw:
        if isinstance(item, str):
            text = item
        elif isinstance(item, dict):
            text = item.get("moduleName") or ""
        else:
            continue
        if text:
            reasons.append(str(text))
    return tuple(reasons)


def parse_module_ref(raw: Any) -> RawModuleRef | None:
    if isinstance(raw, str):
        return NameOnlyRef(name=raw or "unknown")
    if not isinstance(raw, dict):
        return None
    return _detailed_ref(raw)


def _detailed_ref(raw: dict[str, Any]) -> DetailedRef:
    source = raw.get("source")
    return DetailedRef(
        name=str(raw.get("name") or "unknown"),
        size=_size(raw.get("size")),
        gzip_size=_optional_size(raw.get("gzipSize")),
        reasons=parse_reasons(raw.get("reasons")),
        source=source if isinstance(source, str) else None,
    )


@dataclass(slots=True)
class _MergedModule:
    name: str
    size: int = 0
    gzip_size: int | None = None
    reasons: list[str] = field(default_factory=list)

    def merge(self, ref: RawModuleRef) -> None:
        if isinstance(ref, NameOnlyRef):
            return
        self.size = max(self.size, ref.size)
        if ref.gzip_size is not None:
            self.gzip_size = ref.gzip_size if self.gzip_size is None else max(self.gzip_size, ref.gzip_size)
        for reason in ref.reasons:
            if reason not in self.reasons:
                self.reasons.append(reason)


def merge_chunk_modules(chunks: Iterable[Any]) -> list[_MergedModule]:
    """Deduplicate the per-chunk module lists by name, in first-seen order."""
    merged: dict[str, _MergedModule] = {}
    for chunk in chunks:
        if not isinstance(chunk, dict):
            continue
        for raw in _list(chunk, "modules"):
            ref = parse_module_ref(raw)
            if ref is None:
                continue
            entry = merged.get(ref.name)
            if entry is None:
                entry = merged[ref.name] = _MergedModule(name=ref.name)
            entry.merge(ref)
    return list(merged.values())


def _chunk_module_names(chunk: dict[str, Any]) -> tuple[str, ...]:
    names: list[str] = []
    for raw in _list(chunk, "modules"):
        ref = parse_module_ref(raw)
        if ref is not None:
            names.append(ref.name)
    return tuple(names)


def extract_chunks(data: dict[str, Any]) -> list[Chunk]:
    chunks: list[Chunk] = []
    for raw in _list(data, "chunks"):
        if not isinstance(raw, dict):
            continue
        chunk_id = raw.get("id", "")
        if not isinstance(chunk_id, (str, int)) or isinstance(chunk_id, bool):
            chunk_id = str(chunk_id)
        chunks.append(
            Chunk(
                id=chunk_id,
                name=str(raw.get("name") or f"chunk-{chunk_id}"),
                size=_size(raw.get("size")),
                gzip_size=_optional_size(raw.get("gzipSize")),
                modules=_chunk_module_names(raw),
                initial=raw.get("initial") is True,
            )
        )
    return chunks


def _first_nonzero(*candidates: Iterable[int]) -> int:
    # Candidates are lazy so later fallbacks are only summed when needed.
    for candidate in candidates:
        total = sum(candidate)
        if total:
            return total
    return 0


def _merged_sizes(raw_chunks: list[Any], gzip: bool = False) -> Iterator[int]:
    for entry in merge_chunk_modules(raw_chunks):
        yield (entry.gzip_size or 0) if gzip else entry.size


def percentage(size: int, total: int) -> float:
    return size / total * 100 if total > 0 else 0.0


def extract_bundle_stats(document: StatsDocument) -> BundleStats:
    data = document.data
    assets = [a for a in _list(data, "assets") if isinstance(a, dict)]
    flat = [m for m in _list(data, "modules") if isinstance(m, dict)]
    raw_chunks = _list(data, "chunks")

    total_size = _first_nonzero(
        (_size(a.get("size")) for a in assets),
        (_size(m.get("size")) for m in flat),
        _merged_sizes(raw_chunks),
        (_size(c.get("size")) for c in raw_chunks if isinstance(c, dict)),
    )
    total_gzip = _first_nonzero(
        (_size(a.get("gzipSize")) for a in assets),
        (_size(m.get("gzipSize")) for m in flat),
        _merged_sizes(raw_chunks, gzip=True),
        (_size(c.get("gzipSize")) for c in raw_chunks if isinstance(c, dict)),
    )

    sources: dict[str, str] = {}
    modules: list[Module] = []
    if flat:
        for raw in flat:
            ref = _detailed_ref(raw)
            if ref.source is not None:
                sources.setdefault(ref.name, ref.source)
            modules.append(
                Module(
                    name=ref.name,
                    size=ref.size,
                    gzip_size=ref.gzip_size,
                    percentage=percentage(ref.size, total_size),
                    reasons=ref.reasons,
                )
            )
    else:
        for entry in merge_chunk_modules(raw_chunks):
            modules.append(
                Module(
                    name=entry.name,
                    size=entry.size,
                    gzip_size=entry.gzip_size,
                    percentage=percentage(entry.size, total_size),
                    reasons=tuple(entry.reasons),
                )
            )
    # list.sort is stable, so equal sizes keep their input order.
    modules.sort(key=lambda m: m.size, reverse=True)

    chunks = extract_chunks(data)
    parsed_size = read_number(data.get("parsedSize"))
    return BundleStats(
        name=str(data.get("name") or "bundle"),
        size=total_size,
        gzip_size=total_gzip,
        modules=tuple(modules),
        chunks=tuple(chunks),
        initial_size=sum(c.size for c in chunks if c.initial),
        initial_count=len(assets),
        parsed_size=int(parsed_size) if parsed_size is not None else 0,
        sources=sources,
    )
