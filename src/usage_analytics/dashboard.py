"""Dashboard service: fetch a period window and shape it for rendering."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from usage_analytics.aggregation import DailySeriesAggregator
from usage_analytics.config import Settings, get_settings
from usage_analytics.errors import MalformedRecordError
from usage_analytics.models import DailySeriesPoint, PeriodSummary
from usage_analytics.sources import UsageDataSource, validate_window
from usage_analytics.summary import summarize
from usage_analytics.views import MetricPoint, SeriesMetric, metric_series

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything the rendering layer needs for one period window."""

    period_days: int
    series: list[DailySeriesPoint]
    summary: PeriodSummary
    skipped: list[MalformedRecordError] = field(default_factory=list)

    def metric(self, metric: SeriesMetric | str) -> list[MetricPoint]:
        return metric_series(self.series, metric)


class DashboardService:
    """Loads usage windows from a data source and aggregates them."""

    def __init__(
        self,
        source: UsageDataSource,
        *,
        aggregator: DailySeriesAggregator | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._source = source
        self._aggregator = aggregator or DailySeriesAggregator.from_settings(
            self._settings
        )

    @property
    def allowed_windows(self) -> Sequence[int]:
        return self._settings.allowed_windows

    async def load(self, days: int | None = None) -> DashboardSnapshot:
        period_days = validate_window(
            self._settings.default_window_days if days is None else days,
            self._settings.allowed_windows,
        )
        window = await self._source.fetch_window(period_days)
        report = self._aggregator.aggregate_with_report(window.records)
        if report.skipped:
            logger.info(
                "Skipped %d of %d usage records for the %d day window",
                len(report.skipped),
                report.records_seen,
                period_days,
                extra={
                    "period_days": period_days,
                    "records_seen": report.records_seen,
                    "skipped": len(report.skipped),
                    "source": type(self._source).__name__,
                },
            )
        return DashboardSnapshot(
            period_days=window.period_days,
            series=report.points,
            summary=summarize(window.totals, window.period_days),
            skipped=report.skipped,
        )
