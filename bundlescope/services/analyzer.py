from __future__ import annotations

from datetime import UTC, datetime
from typing import Callable

from result import Err, Ok

from bundlescope.config.defaults import default_config
from bundlescope.config.schema import AppConfig
from bundlescope.models.report import AnalysisOutcome, AnalysisResult
from bundlescope.models.stats import ProgressCallback, StatsDocument
from bundlescope.services.chunks import analyze_chunks
from bundlescope.services.extract import extract_bundle_stats
from bundlescope.services.fs import DEFAULT_FS, FileSystem
from bundlescope.services.heuristics import detect_treeshaking_issues, find_unused_modules
from bundlescope.services.ingest import load_stats
from bundlescope.services.metrics import calculate_metrics
from bundlescope.services.packages import find_duplicates, package_stats
from bundlescope.services.recommendations import generate_recommendations

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _iso_timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def analyze(
    document: StatsDocument,
    config: AppConfig | None = None,
    progress_callback: ProgressCallback | None = None,
    clock: Clock = _utc_now,
) -> AnalysisResult:
    """Run every derivation over a validated stats document.

    Each derived view reads the canonical module list independently; the
    only state shared between stages is the extracted ``BundleStats``.
    """
    config = config or default_config()

    def step(name: str) -> None:
        if progress_callback is not None:
            progress_callback(name)

    step("Extracting modules")
    stats = extract_bundle_stats(document)

    step("Grouping packages")
    packages = package_stats(stats.modules, stats.size, config.top_packages)

    step("Detecting duplicates")
    duplicates = find_duplicates(stats.modules, config.top_duplicates)

    step("Checking tree-shaking")
    treeshaking = detect_treeshaking_issues(stats.modules, stats.sources, config.max_treeshaking_issues)

    step("Finding unused modules")
    unused = find_unused_modules(stats.modules, stats.chunks, config.top_unused)

    step("Analyzing chunks")
    chunk_analysis = analyze_chunks(stats.chunks)

    step("Generating recommendations")
    recommendations = generate_recommendations(stats, config)

    step("Calculating metrics")
    metrics = calculate_metrics(stats)

    return AnalysisResult(
        bundle_stats=stats,
        recommendations=tuple(recommendations),
        treeshaking_issues=tuple(treeshaking),
        duplicates=tuple(duplicates),
        packages=tuple(packages),
        chunk_analysis=chunk_analysis,
        unused_modules=tuple(unused),
        metrics=metrics,
        timestamp=_iso_timestamp(clock()),
    )


def analyze_file(
    path: str,
    config: AppConfig | None = None,
    fs: FileSystem = DEFAULT_FS,
    progress_callback: ProgressCallback | None = None,
    clock: Clock = _utc_now,
) -> AnalysisOutcome:
    loaded = load_stats(path, fs, progress_callback)
    if isinstance(loaded, Err):
        return loaded
    return Ok(analyze(loaded.ok_value, config, progress_callback, clock))
