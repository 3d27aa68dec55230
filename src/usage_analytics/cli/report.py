"""Report, series, health and prompt search commands."""

import asyncio
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

import typer
from rich.box import ROUNDED
from rich.table import Table

from usage_analytics.aggregation import DailySeriesAggregator
from usage_analytics.cli._console import (
    console,
    error_panel,
    nl,
    setup_logging,
    warning,
)
from usage_analytics.config import get_settings
from usage_analytics.contracts import HighQualityPromptsResponse
from usage_analytics.dashboard import DashboardService, DashboardSnapshot
from usage_analytics.errors import UsageAnalyticsError
from usage_analytics.sources import (
    HttpUsageSource,
    JsonFileUsageSource,
    UsageDataSource,
)
from usage_analytics.views import METRICS, SeriesMetric


def _build_source(file: Path | None, url: str | None) -> UsageDataSource:
    if file is not None:
        return JsonFileUsageSource(file)
    return HttpUsageSource(base_url=url)


async def _load(
    file: Path | None, url: str | None, days: int | None, policy: str | None
) -> DashboardSnapshot:
    settings = get_settings()
    if policy is not None:
        settings = settings.model_copy(update={"response_time_policy": policy})
    aggregator = DailySeriesAggregator.from_settings(settings)
    source = _build_source(file, url)
    service = DashboardService(source, aggregator=aggregator, settings=settings)
    try:
        return await service.load(days)
    finally:
        if isinstance(source, HttpUsageSource):
            await source.aclose()


def _run_load(
    file: Path | None, url: str | None, days: int | None, policy: str | None
) -> DashboardSnapshot:
    try:
        return asyncio.run(_load(file, url, days, policy))
    except (UsageAnalyticsError, ValueError) as e:
        error_panel(str(e), title="Could not load usage data")
        raise typer.Exit(1)


def _days_option() -> Any:
    return typer.Option(
        None, "--days", "-d", help="Period window in days (7, 30 or 90)"
    )


def _file_option() -> Any:
    return typer.Option(
        None,
        "--file",
        "-f",
        help="Saved /analytics response to read instead of the API",
    )


def report(
    days: int | None = _days_option(),
    file: Path | None = _file_option(),
    url: str | None = typer.Option(
        None, "--url", help="Analytics API URL (overrides USAGE_ANALYTICS_API_URL)"
    ),
    policy: str | None = typer.Option(
        None,
        "--policy",
        help="Response time merge policy: running_mean or weighted_mean",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of tables"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """
    Show the period summary and the daily usage series.

    Examples:
        usage-analytics report --days 7
        usage-analytics report --file analytics.json --json
    """
    setup_logging(verbose=verbose)
    snapshot = _run_load(file, url, days, policy)

    if as_json:
        summary = snapshot.summary
        payload = {
            "period_days": snapshot.period_days,
            "summary": {
                "success_rate_percent": summary.success_rate_percent,
                "improvement_success_rate_percent": (
                    summary.improvement_success_rate_percent
                ),
                "totals": asdict(summary.totals),
            },
            "series": [point.to_dict() for point in snapshot.series],
            "skipped": [exc.reason for exc in snapshot.skipped],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    summary = snapshot.summary
    totals = summary.totals
    nl()
    overview = Table(
        title=f"Last {snapshot.period_days} days",
        box=ROUNDED,
        show_header=False,
        title_justify="left",
    )
    overview.add_column("Metric", style="dim")
    overview.add_column("Value", justify="right")
    overview.add_row("Total requests", f"{totals.total_requests:,}")
    overview.add_row("Score requests", f"{totals.score_requests:,}")
    overview.add_row("Improve requests", f"{totals.improve_requests:,}")
    overview.add_row("Success rate", f"{summary.success_rate_percent:.1f}%")
    overview.add_row(
        "Improvement success rate",
        f"{summary.improvement_success_rate_percent:.1f}%",
    )
    overview.add_row("Avg response time", f"{totals.avg_response_time_ms:.0f}ms")
    overview.add_row(
        "Avg improvement",
        f"+{totals.avg_improvement:.1f}" if totals.avg_improvement else "N/A",
    )
    overview.add_row(
        "Max improvement",
        f"+{totals.max_improvement:.1f}" if totals.max_improvement else "N/A",
    )
    console.print(overview)

    daily = Table(box=ROUNDED, title="Daily usage", title_justify="left")
    daily.add_column("Date")
    daily.add_column("Requests", justify="right")
    daily.add_column("Score", justify="right")
    daily.add_column("Improve", justify="right")
    daily.add_column("Failed", justify="right")
    daily.add_column("Success", justify="right")
    daily.add_column("Latency", justify="right")
    for point in snapshot.series:
        daily.add_row(
            point.date,
            f"{point.total_requests:,}",
            f"{point.score_requests:,}",
            f"{point.improve_requests:,}",
            f"{point.failed_requests:,}",
            f"{point.success_rate}%",
            f"{point.avg_response_time_ms:.0f}ms",
        )
    console.print(daily)

    if snapshot.skipped:
        warning(f"{len(snapshot.skipped)} malformed usage record(s) skipped")
    nl()


def series(
    metric: SeriesMetric = typer.Argument(..., help="Metric to chart"),
    days: int | None = _days_option(),
    file: Path | None = _file_option(),
    url: str | None = typer.Option(None, "--url", help="Analytics API URL"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """Print one metric per day over the period window."""
    setup_logging(verbose=verbose)
    snapshot = _run_load(file, url, days, None)
    points = snapshot.metric(metric)

    if as_json:
        typer.echo(json.dumps([asdict(point) for point in points], indent=2))
        return

    descriptor = METRICS[metric]
    table = Table(
        box=ROUNDED,
        title=descriptor.label,
        title_justify="left",
        min_width=len(descriptor.label) + 4,
    )
    table.add_column("Date")
    table.add_column("Value", justify="right")
    for point in points:
        table.add_row(point.date, descriptor.format(point.value))
    nl()
    console.print(table)
    nl()


def health(
    url: str | None = typer.Option(None, "--url", help="Analytics API URL"),
) -> None:
    """Check that the analytics API is reachable."""
    setup_logging()

    async def _check() -> str:
        async with HttpUsageSource(base_url=url) as source:
            result = await source.check_health()
        return result.status

    try:
        status = asyncio.run(_check())
    except UsageAnalyticsError as e:
        error_panel(str(e), title="Analytics API unreachable")
        raise typer.Exit(1)

    console.print(f"  [green]✓[/green] Analytics API status: {status}")


def prompts(
    term: str = typer.Argument("", help="Text to search for in stored prompts"),
    url: str | None = typer.Option(None, "--url", help="Analytics API URL"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """
    Search the stored high-quality prompt improvements.

    Examples:
        usage-analytics prompts
        usage-analytics prompts "unit tests" --json
    """
    setup_logging()

    async def _search() -> HighQualityPromptsResponse:
        async with HttpUsageSource(base_url=url) as source:
            return await source.search_high_quality_prompts(term)

    try:
        result = asyncio.run(_search())
    except UsageAnalyticsError as e:
        error_panel(str(e), title="Prompt search failed")
        raise typer.Exit(1)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    if not result.prompts:
        if term:
            warning("No prompts found matching your search.")
        else:
            warning("No high-quality prompts available.")
        return

    table = Table(box=ROUNDED, title=f"Searching for: {term!r}" if term else None)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Score", justify="right", no_wrap=True)
    table.add_column("Gain", justify="right", style="green")
    table.add_column("Improved prompt", overflow="fold")
    for prompt in result.prompts:
        gain = prompt.score_improvement
        table.add_row(
            str(prompt.id),
            f"{prompt.original_score:.1f} → {prompt.improved_score:.1f}",
            f"+{gain:.1f}" if gain > 0 else "",
            prompt.improved_prompt,
        )
    nl()
    console.print(table)
    nl()
