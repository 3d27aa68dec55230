"""Chart-facing projections of the daily series.

Both the overview chart and the per-metric drill-down read from the same
`DailySeriesPoint` sequence produced by the aggregator.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from usage_analytics.categories import EndpointCategory
from usage_analytics.models import DailySeriesPoint
from usage_analytics.summary import round_half_up


class SeriesMetric(StrEnum):
    TOTAL_REQUESTS = "total_requests"
    SUCCESS_RATE = "success_rate"
    AVG_RESPONSE_TIME = "avg_response_time"
    SCORE_REQUESTS = "score_requests"
    IMPROVE_REQUESTS = "improve_requests"
    FAILED_REQUESTS = "failed_requests"
    AVG_IMPROVEMENT = "avg_improvement"
    MAX_IMPROVEMENT = "max_improvement"


@dataclass(frozen=True)
class MetricPoint:
    date: str
    value: float


@dataclass(frozen=True)
class MetricDescriptor:
    """Display metadata for a drill-down metric."""

    label: str
    unit: str
    extract: Callable[[DailySeriesPoint], float]

    def format(self, value: float) -> str:
        if self.unit == "%":
            return f"{value:g}%"
        if self.unit == "ms":
            return f"{value:g}ms"
        if self.unit == "score":
            return f"+{value:.1f}"
        return f"{int(value):,}"


METRICS: dict[SeriesMetric, MetricDescriptor] = {
    SeriesMetric.TOTAL_REQUESTS: MetricDescriptor(
        "Requests", "count", lambda point: point.total_requests
    ),
    SeriesMetric.SUCCESS_RATE: MetricDescriptor(
        "Success Rate (%)", "%", lambda point: point.success_rate
    ),
    SeriesMetric.AVG_RESPONSE_TIME: MetricDescriptor(
        "Response Time (ms)",
        "ms",
        lambda point: round_half_up(point.avg_response_time_ms),
    ),
    SeriesMetric.SCORE_REQUESTS: MetricDescriptor(
        "Score Requests",
        "count",
        lambda point: point.requests_for(EndpointCategory.SCORE),
    ),
    SeriesMetric.IMPROVE_REQUESTS: MetricDescriptor(
        "Improve Requests",
        "count",
        lambda point: point.requests_for(EndpointCategory.IMPROVE),
    ),
    SeriesMetric.FAILED_REQUESTS: MetricDescriptor(
        "Failed Requests", "count", lambda point: point.failed_requests
    ),
    SeriesMetric.AVG_IMPROVEMENT: MetricDescriptor(
        "Average Score Improvement", "score", lambda point: point.avg_improvement
    ),
    SeriesMetric.MAX_IMPROVEMENT: MetricDescriptor(
        "Maximum Score Improvement", "score", lambda point: point.max_improvement
    ),
}


def metric_series(
    points: Sequence[DailySeriesPoint], metric: SeriesMetric | str
) -> list[MetricPoint]:
    """Project one metric out of the daily series, keeping date order."""
    descriptor = METRICS[SeriesMetric(metric)]
    return [
        MetricPoint(date=point.date, value=descriptor.extract(point))
        for point in points
    ]


def chart_rows(
    points: Sequence[DailySeriesPoint],
    categories: Sequence[str] | None = None,
) -> list[dict[str, Any]]:
    """Per-category request counts and whole-millisecond latencies per day."""
    rows: list[dict[str, Any]] = []
    for point in points:
        row: dict[str, Any] = {"date": point.date}
        for category in categories if categories is not None else point.categories:
            row[f"{category}_requests"] = point.requests_for(category)
            row[f"{category}_response_time"] = int(
                round_half_up(point.response_time_for(category))
            )
        rows.append(row)
    return rows


__all__ = [
    "METRICS",
    "MetricDescriptor",
    "MetricPoint",
    "SeriesMetric",
    "chart_rows",
    "metric_series",
]
