"""Daily series aggregation over per-endpoint usage records.

Records (one per endpoint per day) are grouped by calendar day. Within a day
each record is folded into the slot of its normalized category, then the
slots are rolled up into the day's totals:

- counts are summed
- latency means are folded with the configured response-time policy
  (duplicate records within a slot in input order, slots into the day in
  sorted category order)
- the latest improvement average seen for a slot wins

Malformed records are logged and skipped so a single bad row never blanks a
chart. Handing the aggregator something that is not a collection of records
raises `AggregationInputError`.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from usage_analytics.categories import (
    DEFAULT_CATEGORY_MAP,
    CategoryMap,
    EndpointCategory,
)
from usage_analytics.config import Settings
from usage_analytics.errors import AggregationInputError, MalformedRecordError
from usage_analytics.models import CategorySlot, DailySeriesPoint, UsageRecord
from usage_analytics.policies import (
    ResponseTimePolicy,
    get_response_time_policy,
    running_mean,
)
from usage_analytics.records import coerce_record
from usage_analytics.summary import percent, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class _SlotTotals:
    """Internal accumulator for one category on one day."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    avg_response_time_ms: float = 0.0
    avg_score_improvement: float | None = None
    records: int = 0

    def fold(
        self,
        *,
        total_requests: int,
        successful_requests: int,
        failed_requests: int,
        avg_response_time_ms: float,
        policy: ResponseTimePolicy,
    ) -> None:
        if self.records == 0:
            self.avg_response_time_ms = avg_response_time_ms
        else:
            self.avg_response_time_ms = policy(
                self.avg_response_time_ms,
                self.total_requests,
                avg_response_time_ms,
                total_requests,
            )
        self.total_requests += total_requests
        self.successful_requests += successful_requests
        self.failed_requests += failed_requests
        self.records += 1


@dataclass
class _DayTotals:
    slots: dict[str, _SlotTotals] = field(default_factory=dict)


@dataclass(frozen=True)
class AggregationReport:
    """Aggregated points plus the records that were skipped on the way."""

    points: list[DailySeriesPoint]
    skipped: list[MalformedRecordError]
    records_seen: int


def _ensure_collection(records: object) -> Iterable[object]:
    if isinstance(records, str | bytes | bytearray | Mapping) or not isinstance(
        records, Iterable
    ):
        raise AggregationInputError(records)
    return records


class DailySeriesAggregator:
    """Folds usage records into one `DailySeriesPoint` per calendar day."""

    def __init__(
        self,
        categories: CategoryMap | None = None,
        *,
        response_time_policy: ResponseTimePolicy | None = None,
        improvement_category: str = EndpointCategory.IMPROVE,
    ) -> None:
        self.categories = categories or DEFAULT_CATEGORY_MAP
        self.response_time_policy = response_time_policy or running_mean
        self.improvement_category = str(improvement_category)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DailySeriesAggregator":
        categories = DEFAULT_CATEGORY_MAP
        if settings.endpoint_aliases:
            categories = categories.with_aliases(settings.endpoint_aliases)
        return cls(
            categories,
            response_time_policy=get_response_time_policy(
                settings.response_time_policy
            ),
        )

    def aggregate(
        self, records: Iterable[UsageRecord | Mapping[str, object]]
    ) -> list[DailySeriesPoint]:
        return self.aggregate_with_report(records).points

    def aggregate_with_report(
        self, records: Iterable[UsageRecord | Mapping[str, object]]
    ) -> AggregationReport:
        days: dict[str, _DayTotals] = {}
        skipped: list[MalformedRecordError] = []
        seen = 0

        for raw in _ensure_collection(records):
            seen += 1
            try:
                record = coerce_record(raw)
            except MalformedRecordError as exc:
                logger.warning("Skipping malformed usage record: %s", exc.reason)
                skipped.append(exc)
                continue
            self._fold_record(days.setdefault(record.date, _DayTotals()), record)

        points = [self._build_point(day, days[day]) for day in sorted(days)]
        logger.debug(
            "Aggregated %d usage records into %d daily points (%d skipped)",
            seen,
            len(points),
            len(skipped),
            extra={"records_seen": seen, "skipped": len(skipped)},
        )
        return AggregationReport(points=points, skipped=skipped, records_seen=seen)

    def _fold_record(self, day: _DayTotals, record: UsageRecord) -> None:
        category = self.categories.normalize(record.endpoint)
        slot = day.slots.setdefault(category, _SlotTotals())
        slot.fold(
            total_requests=record.total_requests,
            successful_requests=record.successful_requests,
            failed_requests=record.failed_requests,
            avg_response_time_ms=record.avg_response_time_ms,
            policy=self.response_time_policy,
        )
        if record.avg_score_improvement is not None:
            slot.avg_score_improvement = record.avg_score_improvement

    def _build_point(self, date: str, day: _DayTotals) -> DailySeriesPoint:
        rollup = _SlotTotals()
        for category in sorted(day.slots):
            slot = day.slots[category]
            rollup.fold(
                total_requests=slot.total_requests,
                successful_requests=slot.successful_requests,
                failed_requests=slot.failed_requests,
                avg_response_time_ms=slot.avg_response_time_ms,
                policy=self.response_time_policy,
            )

        categories: dict[str, CategorySlot] = {}
        for category in self.categories.tracked:
            slot = day.slots.get(category, _SlotTotals())
            categories[category] = CategorySlot(
                category=category,
                total_requests=slot.total_requests,
                successful_requests=slot.successful_requests,
                failed_requests=slot.failed_requests,
                avg_response_time_ms=round_half_up(slot.avg_response_time_ms, 2),
                avg_score_improvement=slot.avg_score_improvement,
                records=slot.records,
            )

        improvement_slot = day.slots.get(self.improvement_category)
        improvement = 0.0
        if improvement_slot is not None:
            improvement = improvement_slot.avg_score_improvement or 0.0

        return DailySeriesPoint(
            date=date,
            categories=categories,
            total_requests=rollup.total_requests,
            successful_requests=rollup.successful_requests,
            failed_requests=rollup.failed_requests,
            avg_response_time_ms=round_half_up(rollup.avg_response_time_ms, 2),
            success_rate=int(
                percent(rollup.successful_requests, rollup.total_requests, digits=0)
            ),
            # No per-day maximum exists upstream; the average stands in for it.
            avg_improvement=improvement,
            max_improvement=improvement,
        )


def aggregate(
    records: Iterable[UsageRecord | Mapping[str, object]],
    *,
    categories: CategoryMap | None = None,
    response_time_policy: ResponseTimePolicy | None = None,
) -> list[DailySeriesPoint]:
    """Aggregate `records` into daily points, ascending by date."""
    aggregator = DailySeriesAggregator(
        categories, response_time_policy=response_time_policy
    )
    return aggregator.aggregate(records)


__all__ = [
    "AggregationReport",
    "DailySeriesAggregator",
    "aggregate",
]
