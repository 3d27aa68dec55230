"""Period summary formulas over `DetailTotals`."""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from usage_analytics.models import DetailTotals, PeriodSummary


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero (`round()` would round them to even)."""
    if not math.isfinite(value):
        return 0.0
    exact = Decimal(str(value))
    with localcontext() as ctx:
        # quantize() needs every digit of the result to fit in the context.
        ctx.prec = max(28, exact.adjusted() + digits + 2)
        quantum = Decimal(1).scaleb(-digits)
        return float(exact.quantize(quantum, rounding=ROUND_HALF_UP))


def percent(numerator: float, denominator: float, *, digits: int = 1) -> float:
    """Percentage of `numerator` in `denominator`, or 0 for an empty denominator."""
    if denominator <= 0:
        return 0.0
    return round_half_up(numerator / denominator * 100, digits)


def success_rate_percent(totals: DetailTotals) -> float:
    return percent(totals.successful_requests, totals.total_requests)


def improvement_success_rate_percent(totals: DetailTotals) -> float:
    return percent(totals.successful_improvements, totals.total_improvements)


def summarize(totals: DetailTotals, period_days: int) -> PeriodSummary:
    return PeriodSummary(
        period_days=period_days,
        totals=totals,
        success_rate_percent=success_rate_percent(totals),
        improvement_success_rate_percent=improvement_success_rate_percent(totals),
    )


__all__ = [
    "improvement_success_rate_percent",
    "percent",
    "round_half_up",
    "success_rate_percent",
    "summarize",
]
