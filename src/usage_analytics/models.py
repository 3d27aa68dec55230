"""Typed value records for usage aggregation."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from usage_analytics.categories import EndpointCategory


@dataclass(frozen=True)
class UsageRecord:
    """One endpoint's counters for one calendar day."""

    endpoint: str
    date: str
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    avg_response_time_ms: float = 0.0
    avg_score_improvement: float | None = None
    avg_text_length: float | None = None
    avg_original_score: float | None = None
    avg_improved_score: float | None = None
    prompts_improved: int | None = None


@dataclass(frozen=True)
class DetailTotals:
    """Period-level totals reported alongside the daily records."""

    total_requests: int = 0
    score_requests: int = 0
    improve_requests: int = 0
    avg_improvement: float = 0.0
    max_improvement: float = 0.0
    successful_improvements: int = 0
    total_improvements: int = 0
    avg_response_time_ms: float = 0.0
    successful_requests: int = 0
    failed_requests: int = 0


@dataclass(frozen=True)
class CategorySlot:
    """Per-category aggregate for a single day."""

    category: str
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    avg_response_time_ms: float = 0.0
    avg_score_improvement: float | None = None
    records: int = 0


def _camel_key(category: str, suffix: str) -> str:
    head, *rest = category.replace("-", "_").strip("_/").split("_")
    return head + "".join(part.capitalize() for part in rest) + suffix


@dataclass(frozen=True)
class DailySeriesPoint:
    """Aggregated usage for one calendar day."""

    date: str
    categories: Mapping[str, CategorySlot] = field(default_factory=dict)
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    avg_response_time_ms: float = 0.0
    success_rate: int = 0
    avg_improvement: float = 0.0
    max_improvement: float = 0.0

    def slot(self, category: str) -> CategorySlot:
        slot = self.categories.get(category)
        if slot is None:
            return CategorySlot(category=category)
        return slot

    def requests_for(self, category: str) -> int:
        return self.slot(category).total_requests

    def response_time_for(self, category: str) -> float:
        return self.slot(category).avg_response_time_ms

    @property
    def score_requests(self) -> int:
        return self.requests_for(EndpointCategory.SCORE)

    @property
    def improve_requests(self) -> int:
        return self.requests_for(EndpointCategory.IMPROVE)

    def to_dict(self) -> dict[str, Any]:
        """Flat chart-ready mapping using the dashboard's camelCase keys."""
        row: dict[str, Any] = {
            "date": self.date,
            "totalRequests": self.total_requests,
            "successfulRequests": self.successful_requests,
            "failedRequests": self.failed_requests,
            "avgResponseTime": self.avg_response_time_ms,
        }
        for category, slot in self.categories.items():
            row[_camel_key(category, "Requests")] = slot.total_requests
        row["successRate"] = self.success_rate
        row["avgImprovement"] = self.avg_improvement
        row["maxImprovement"] = self.max_improvement
        return row


@dataclass(frozen=True)
class PeriodSummary:
    """Period-level percentages derived from `DetailTotals`."""

    period_days: int
    totals: DetailTotals
    success_rate_percent: float
    improvement_success_rate_percent: float


__all__ = [
    "CategorySlot",
    "DailySeriesPoint",
    "DetailTotals",
    "PeriodSummary",
    "UsageRecord",
]
