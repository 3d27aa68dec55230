"""Response-time merge policies.

When two latency means are folded together (duplicate records for one
category-day, or categories rolled up into a day total) the dashboard has
historically used an unweighted running mean: ``(current + incoming) / 2``.
That is kept as the default so reported numbers do not shift. The
request-weighted mean is available for callers that want the corrected value.

The dashboard also rounded to whole milliseconds after every merge. Here merges
run on unrounded values and only the reported means are rounded (to 2 dp), so
`running_mean` output can differ from the dashboard by sub-millisecond amounts.
"""

from typing import Protocol


class ResponseTimePolicy(Protocol):
    def __call__(
        self,
        current_ms: float,
        current_requests: int,
        incoming_ms: float,
        incoming_requests: int,
    ) -> float: ...


def running_mean(
    current_ms: float,
    current_requests: int,
    incoming_ms: float,
    incoming_requests: int,
) -> float:
    return (current_ms + incoming_ms) / 2


def weighted_mean(
    current_ms: float,
    current_requests: int,
    incoming_ms: float,
    incoming_requests: int,
) -> float:
    total = current_requests + incoming_requests
    if total <= 0:
        return (current_ms + incoming_ms) / 2
    return (current_ms * current_requests + incoming_ms * incoming_requests) / total


RESPONSE_TIME_POLICIES: dict[str, ResponseTimePolicy] = {
    "running_mean": running_mean,
    "weighted_mean": weighted_mean,
}


def get_response_time_policy(name: str) -> ResponseTimePolicy:
    try:
        return RESPONSE_TIME_POLICIES[name]
    except KeyError:
        known = ", ".join(sorted(RESPONSE_TIME_POLICIES))
        raise ValueError(
            f"Unknown response time policy '{name}' (expected one of {known})"
        ) from None


__all__ = [
    "RESPONSE_TIME_POLICIES",
    "ResponseTimePolicy",
    "get_response_time_policy",
    "running_mean",
    "weighted_mean",
]
