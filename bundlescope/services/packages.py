from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from bundlescope.models.report import DuplicateGroup, PackageStats
from bundlescope.models.stats import Module
from bundlescope.services.extract import percentage

# "node_modules/<pkg>" or "node_modules/@scope/<pkg>" as a whole path segment.
_PACKAGE_RE = re.compile(r"(?:^|/)node_modules/((?:@[^/]+/)?[^/]+)")


def extract_package_name(path: str) -> str | None:
    """Infer the package a module path belongs to.

    Paths under ``node_modules`` resolve to their (possibly scoped) package,
    using the innermost ``node_modules`` for nested installs.  Anything else
    falls back to the basename, so same-named files group together.
    """
    if not path:
        return None
    normalized = path.replace("\\", "/")
    matches = _PACKAGE_RE.findall(normalized)
    if matches:
        return matches[-1]
    return normalized.rstrip("/").rsplit("/", 1)[-1] or normalized


def group_by_package(modules: Iterable[Module]) -> dict[str, list[Module]]:
    groups: dict[str, list[Module]] = {}
    for module in modules:
        key = extract_package_name(module.name)
        if key is None:
            continue
        groups.setdefault(key, []).append(module)
    return groups


def package_stats(modules: Sequence[Module], total_size: int, limit: int = 20) -> list[PackageStats]:
    packages: list[PackageStats] = []
    for name, members in group_by_package(modules).items():
        size = sum(m.size for m in members)
        gzip_values = [m.gzip_size for m in members if m.gzip_size is not None]
        packages.append(
            PackageStats(
                name=name,
                total_size=size,
                gzip_size=sum(gzip_values) if gzip_values else None,
                module_count=len(members),
                modules=tuple(m.name for m in members),
                percentage=percentage(size, total_size),
            )
        )
    packages.sort(key=lambda p: p.total_size, reverse=True)
    return packages[:limit]


def find_duplicates(modules: Sequence[Module], limit: int = 10) -> list[DuplicateGroup]:
    """Groups of distinct module paths that share a package or basename.

    A group needs at least two members with different full names; one file
    that merely appears twice under its own name is not a duplicate.
    """
    duplicates: list[DuplicateGroup] = []
    for members in group_by_package(modules).values():
        if len(members) < 2 or len({m.name for m in members}) < 2:
            continue
        sizes = [m.size for m in members]
        total = sum(sizes)
        duplicates.append(
            DuplicateGroup(
                names=tuple(m.name for m in members),
                total_size=total,
                savings=total - min(sizes),
            )
        )
    duplicates.sort(key=lambda d: d.total_size, reverse=True)
    return duplicates[:limit]
