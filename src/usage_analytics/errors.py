"""Error taxonomy for usage aggregation and data sources."""

from typing import Any


class UsageAnalyticsError(Exception):
    """Base exception for usage analytics errors."""

    pass


class MalformedRecordError(UsageAnalyticsError, ValueError):
    """Raised when a usage record cannot be aggregated.

    The aggregator catches this and skips the record.
    """

    def __init__(self, reason: str, record: Any = None) -> None:
        self.reason = reason
        self.record = record
        super().__init__(f"Malformed usage record: {reason}")


class AggregationInputError(UsageAnalyticsError, TypeError):
    """Raised when the aggregator is handed something other than a record collection."""

    def __init__(self, received: object) -> None:
        self.received_type = type(received).__name__
        super().__init__(
            f"Expected a collection of usage records, got {self.received_type}"
        )


class InvalidWindowError(UsageAnalyticsError, ValueError):
    """Raised when a period window is not one of the supported sizes."""

    def __init__(self, days: object, allowed: tuple[int, ...]) -> None:
        self.days = days
        self.allowed = allowed
        allowed_text = ", ".join(str(value) for value in allowed)
        super().__init__(
            f"Unsupported period window {days!r} (expected one of {allowed_text})"
        )


class DataSourceError(UsageAnalyticsError, RuntimeError):
    """Raised when a data source cannot produce usage data."""
