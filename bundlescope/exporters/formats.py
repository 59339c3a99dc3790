from __future__ import annotations

import csv
import io
import json
from datetime import datetime

from bundlescope.exporters.graph import to_dot
from bundlescope.models.enums import ReportFormat
from bundlescope.models.report import AnalysisResult
from bundlescope.services.formatting import format_kb, format_mb

_TOP_ROWS = 20


def to_json(result: AnalysisResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def to_csv(result: AnalysisResult) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    metrics = result.metrics

    writer.writerow(["Metric", "Value"])
    writer.writerow(["Total Size (MB)", format_mb(metrics.total_size)])
    writer.writerow(["Gzip Size (MB)", format_mb(metrics.total_gzip_size)])
    if metrics.total_brotli_size:
        writer.writerow(["Brotli Size (MB)", format_mb(metrics.total_brotli_size)])
    writer.writerow(["Module Count", metrics.module_count])
    writer.writerow(["Chunk Count", metrics.chunk_count])
    writer.writerow([])

    writer.writerow(["Top Modules"])
    writer.writerow(["Module Name", "Size (KB)", "Percentage"])
    for module in result.bundle_stats.modules[:_TOP_ROWS]:
        writer.writerow([module.name, format_kb(module.size), f"{module.percentage:.2f}"])
    writer.writerow([])

    if result.packages:
        writer.writerow(["Packages"])
        writer.writerow(["Package Name", "Size (KB)", "Modules", "Percentage"])
        for pkg in result.packages[:_TOP_ROWS]:
            writer.writerow([pkg.name, format_kb(pkg.total_size), pkg.module_count, f"{pkg.percentage:.2f}"])
        writer.writerow([])

    if result.duplicates:
        writer.writerow(["Duplicates"])
        writer.writerow(["Count", "Total Size (KB)", "Potential Savings (KB)", "Example Names"])
        for dup in result.duplicates:
            writer.writerow([len(dup.names), format_kb(dup.total_size), format_kb(dup.savings), dup.names[0]])

    return buffer.getvalue()


def _generated_at(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return timestamp


def to_markdown(result: AnalysisResult) -> str:
    metrics = result.metrics
    lines = [
        "# Bundle Analysis Report",
        "",
        f"**Generated:** {_generated_at(result.timestamp)}",
        "",
        "## Metrics",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Total Size | {format_mb(metrics.total_size)} MB |",
        f"| Gzip Size | {format_mb(metrics.total_gzip_size)} MB |",
    ]
    if metrics.total_brotli_size:
        lines.append(f"| Brotli Size (est) | {format_mb(metrics.total_brotli_size)} MB |")
    lines += [
        f"| Modules | {metrics.module_count} |",
        f"| Chunks | {metrics.chunk_count} |",
        f"| Avg Module Size | {format_kb(metrics.average_module_size)} KB |",
        f"| Initial Size | {format_mb(result.bundle_stats.initial_size)} MB |",
        "",
        "## Top Modules",
        "",
        "| # | Module | Size (KB) | Percentage |",
        "|---|--------|-----------|------------|",
    ]
    for index, module in enumerate(result.bundle_stats.modules[:_TOP_ROWS], start=1):
        lines.append(f"| {index} | `{module.name}` | {format_kb(module.size)} | {module.percentage:.2f}% |")
    lines.append("")

    if result.packages:
        lines += [
            "## Top Packages",
            "",
            "| # | Package | Size (KB) | Modules | % of Bundle |",
            "|---|---------|-----------|---------|-------------|",
        ]
        for index, pkg in enumerate(result.packages[:_TOP_ROWS], start=1):
            lines.append(
                f"| {index} | `{pkg.name}` | {format_kb(pkg.total_size)} | {pkg.module_count} | {pkg.percentage:.2f}% |"
            )
        lines.append("")

    if result.recommendations:
        lines += ["## Recommendations", ""]
        for rec in result.recommendations:
            lines += [
                f"### {rec.severity.icon} {rec.severity.value.upper()}: {rec.message}",
                "",
                f"**Action:** {rec.action}",
                "",
            ]

    if result.duplicates:
        lines += [
            "## Duplicate Modules",
            "",
            "| Count | Total Size (KB) | Potential Savings (KB) | Example |",
            "|-------|-----------------|------------------------|---------|",
        ]
        for dup in result.duplicates:
            lines.append(
                f"| {len(dup.names)} | {format_kb(dup.total_size)} | {format_kb(dup.savings)} | `{dup.names[0]}` |"
            )
        lines.append("")

    if result.treeshaking_issues:
        lines += ["## Tree-Shaking Issues", ""]
        lines += [f"- {issue}" for issue in result.treeshaking_issues]
        lines.append("")

    chunks = result.chunk_analysis
    if result.bundle_stats.chunks:
        lines += [
            "## Chunks",
            "",
            f"- Average chunk size: {format_kb(chunks.average_chunk_size)} KB",
            f"- Average modules per chunk: {chunks.average_modules_per_chunk:.1f}",
            f"- Largest chunk: `{chunks.largest_chunk.name}` ({format_kb(chunks.largest_chunk.size)} KB)",
            f"- Smallest chunk: `{chunks.smallest_chunk.name}` ({format_kb(chunks.smallest_chunk.size)} KB)",
            f"- Initial chunk size: {format_kb(chunks.initial_chunk_size)} KB",
        ]
        lines += [f"- {advice}" for advice in chunks.recommendations]
        lines.append("")

    if result.unused_modules:
        lines += [
            "## Possibly Unused Modules",
            "",
            "| Module | Size (KB) | Reason |",
            "|--------|-----------|--------|",
        ]
        for unused in result.unused_modules:
            lines.append(f"| `{unused.name}` | {format_kb(unused.size)} | {unused.reason} |")
        lines.append("")

    return "\n".join(lines)


def render_report(result: AnalysisResult, fmt: ReportFormat) -> str:
    renderers = {
        ReportFormat.JSON: to_json,
        ReportFormat.CSV: to_csv,
        ReportFormat.MARKDOWN: to_markdown,
        ReportFormat.DOT: to_dot,
    }
    renderer = renderers.get(fmt)
    if renderer is None:
        msg = f"No renderer for format: {fmt.value}. Use: json, csv, markdown, dot."
        raise ValueError(msg)
    return renderer(result)
