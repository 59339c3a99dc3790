# Text heuristics over module sources and reason strings.
#
# Neither check parses anything.  Tree-shaking looks for CommonJS markers in
# the raw source, and unused-module detection infers references from the
# free-text ``reasons`` a webpack-style stats dump attaches to each module.
# Both produce false positives and negatives; other bundlers phrase reasons
# differently and will be misclassified.

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence

from bundlescope.models.report import UnusedModule
from bundlescope.models.stats import Chunk, Module

_COMMONJS_MARKERS = ("module.exports", "require(")
_FILE_TOKEN_RE = re.compile(r"\S+\.(?:jsx|tsx|js|ts)\b")
_IGNORED_REASONS = frozenset({"entry", "cjs require"})
UNUSED_REASON = "No references found in module reasons"


def uses_commonjs(source: str) -> bool:
    return any(marker in source for marker in _COMMONJS_MARKERS)


def detect_treeshaking_issues(
    modules: Iterable[Module],
    sources: Mapping[str, str],
    limit: int = 10,
) -> list[str]:
    """Flag modules whose source uses CommonJS, in module order.

    Only modules with a known source (flat ``modules`` schema) can be flagged.
    """
    issues: list[str] = []
    for module in modules:
        if len(issues) >= limit:
            break
        source = sources.get(module.name)
        if source is not None and uses_commonjs(source):
            issues.append(f"{module.name}: Uses CommonJS - reduces tree-shaking effectiveness")
    return issues


def referenced_names(modules: Iterable[Module]) -> set[str]:
    """File-like tokens mentioned in any module's reasons."""
    referenced: set[str] = set()
    for module in modules:
        for reason in module.reasons:
            if reason in _IGNORED_REASONS:
                continue
            referenced.update(_FILE_TOKEN_RE.findall(reason))
    return referenced


def is_entry(module: Module) -> bool:
    return any("entry" in reason for reason in module.reasons)


def find_unused_modules(
    modules: Sequence[Module],
    chunks: Iterable[Chunk],
    limit: int = 20,
) -> list[UnusedModule]:
    in_chunks: set[str] = set()
    for chunk in chunks:
        in_chunks.update(chunk.modules)
    referenced = referenced_names(modules)

    unused = [
        UnusedModule(name=m.name, size=m.size, reason=UNUSED_REASON)
        for m in modules
        if m.size > 0 and m.name in in_chunks and m.name not in referenced and not is_entry(m)
    ]
    unused.sort(key=lambda u: u.size, reverse=True)
    return unused[:limit]
