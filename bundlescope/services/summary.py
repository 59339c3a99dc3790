from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from bundlescope.config.schema import AppConfig
from bundlescope.models.enums import Severity
from bundlescope.models.report import AnalysisResult, DuplicateGroup
from bundlescope.models.stats import Module, ProgressCallback, StatsError
from bundlescope.services.budgets import MetricDelta, compare_metrics, large_modules
from bundlescope.services.formatting import format_bytes, format_kb, format_mb, percent_bar, tail

_SHOWN_TREESHAKING = 3


def console_progress(console: Console) -> ProgressCallback:
    def _report(stage: str) -> None:
        console.print(f"[dim]… {escape(stage)}[/dim]")

    return _report


def _delta(deltas: dict[str, MetricDelta] | None, key: str) -> str:
    if deltas is None:
        return ""
    delta = deltas[key]
    text = delta.describe()
    if not text:
        return ""
    # Growth is bad news for a bundle.
    color = "red" if delta.difference > 0 else "green"
    return f" [{color}]({text})[/{color}]"


def _metrics_panel(result: AnalysisResult, baseline: AnalysisResult | None = None) -> Panel:
    metrics = result.metrics
    deltas = compare_metrics(metrics, baseline.metrics) if baseline is not None else None
    lines = [
        f"Total Size: [bold red]{format_mb(metrics.total_size)}MB[/bold red]{_delta(deltas, 'totalSize')}",
        f"Gzip Size: [bold yellow]{format_mb(metrics.total_gzip_size)}MB[/bold yellow]"
        f"{_delta(deltas, 'totalGzipSize')}",
    ]
    if metrics.total_brotli_size is not None:
        lines.append(f"Brotli Size (est): [bold]{format_mb(metrics.total_brotli_size)}MB[/bold]")
    lines += [
        f"Modules: [bold blue]{metrics.module_count}[/bold blue]{_delta(deltas, 'moduleCount')}",
        f"Chunks: [bold blue]{metrics.chunk_count}[/bold blue]{_delta(deltas, 'chunkCount')}",
        f"Avg Module: [bold green]{format_kb(metrics.average_module_size)}KB[/bold green]",
        f"Initial Size: [bold]{format_mb(result.bundle_stats.initial_size)}MB[/bold]",
    ]
    return Panel("\n".join(lines), title="Bundle Metrics", border_style="blue")


def _budget_lines(result: AnalysisResult, config: AppConfig) -> list[str]:
    lines: list[str] = []
    if config.max_gzip_size is not None:
        violated = result.metrics.total_gzip_size / 1024 / 1024 > config.max_gzip_size
        state = "[red]violated[/red]" if violated else "[green]ok[/green]"
        lines.append(f"Max Gzip Threshold: [yellow]{config.max_gzip_size:g}MB[/yellow] ({state})")
    if config.max_initial_size is not None:
        violated = result.bundle_stats.initial_size / 1024 / 1024 > config.max_initial_size
        state = "[red]violated[/red]" if violated else "[green]ok[/green]"
        lines.append(f"Max Initial Threshold: [yellow]{config.max_initial_size:g}MB[/yellow] ({state})")
    return lines


def _top_modules_table(modules: tuple[Module, ...], top_n: int) -> Table:
    table = Table(title=f"Top {top_n} Modules", header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Module")
    table.add_column("Size (KB)", justify="right")
    table.add_column("Share")
    for index, module in enumerate(modules[:top_n], start=1):
        table.add_row(str(index), escape(tail(module.name, 30)), format_kb(module.size), percent_bar(module.percentage))
    return table


def _duplicates_table(duplicates: tuple[DuplicateGroup, ...]) -> Table:
    table = Table(title="Duplicate Modules", header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Count", justify="right")
    table.add_column("Total Size (KB)", justify="right")
    table.add_column("Potential Savings (KB)", justify="right")
    table.add_column("Example Names")
    for index, dup in enumerate(duplicates, start=1):
        table.add_row(
            str(index),
            str(len(dup.names)),
            format_kb(dup.total_size),
            format_kb(dup.savings),
            escape("\n".join(dup.names[:3])),
        )
    return table


def _large_modules_table(modules: list[Module], threshold: float) -> Table:
    table = Table(title=f"Modules >= {threshold:g}% of bundle size", header_style="bold red")
    table.add_column("#", justify="right")
    table.add_column("Module")
    table.add_column("Size (KB)", justify="right")
    table.add_column("% of Bundle", justify="right")
    for index, module in enumerate(modules, start=1):
        table.add_row(str(index), escape(tail(module.name, 60)), format_kb(module.size), f"{module.percentage:.2f}")
    return table


def _print_recommendations(console: Console, result: AnalysisResult) -> None:
    if not result.recommendations:
        return
    console.print("\n[bold cyan]Recommendations[/bold cyan]")
    for rec in result.recommendations:
        console.print(f"{rec.severity.icon} [{rec.severity.style}]{escape(rec.message)}[/{rec.severity.style}]")
        console.print(f"   → {escape(rec.action)}")
    for advice in result.chunk_analysis.recommendations:
        console.print(f"{Severity.INFO.icon} {escape(advice)}")


def _print_treeshaking(console: Console, result: AnalysisResult) -> None:
    issues = result.treeshaking_issues
    if not issues:
        return
    console.print("\n[bold yellow]Tree-Shaking Issues[/bold yellow]")
    for issue in issues[:_SHOWN_TREESHAKING]:
        console.print(f"  • {escape(issue)}")
    if len(issues) > _SHOWN_TREESHAKING:
        console.print(f"  ... and {len(issues) - _SHOWN_TREESHAKING} more")


def _print_duplicates(console: Console, result: AnalysisResult) -> None:
    if not result.duplicates:
        console.print("[bold green]No duplicate modules detected[/bold green]")
        return
    console.print(_duplicates_table(result.duplicates))
    savings = sum(d.savings for d in result.duplicates)
    console.print(f"Potential savings from deduplication: [bold green]{format_bytes(savings)}[/bold green]")


def _print_large_modules(console: Console, result: AnalysisResult, threshold: float) -> None:
    modules = large_modules(result, threshold)
    if not modules:
        console.print(f"[bold green]No modules above {threshold:g}% of bundle size[/bold green]")
        return
    console.print(_large_modules_table(modules, threshold))


def render_summary(
    console: Console,
    result: AnalysisResult,
    config: AppConfig,
    baseline: AnalysisResult | None = None,
) -> None:
    console.print(_metrics_panel(result, baseline))
    for line in _budget_lines(result, config):
        console.print(line)
    console.print(_top_modules_table(result.bundle_stats.modules, config.summary_top_count))
    _print_recommendations(console, result)
    _print_treeshaking(console, result)
    _print_duplicates(console, result)
    _print_large_modules(console, result, config.large_module_threshold)


def render_focused_summary(
    console: Console,
    result: AnalysisResult,
    config: AppConfig,
    duplicates: bool = False,
    large: bool = False,
) -> None:
    console.print(_metrics_panel(result))
    if duplicates:
        _print_duplicates(console, result)
    if large:
        _print_large_modules(console, result, config.large_module_threshold)


def render_error(console: Console, error: StatsError) -> None:
    console.print(
        Panel(escape(error.message), title=f"{error.code.label}: {escape(error.path)}", border_style="red")
    )
