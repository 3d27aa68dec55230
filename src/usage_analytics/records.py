"""Validation and coercion of raw usage rows into `UsageRecord` values."""

import datetime as dt
from collections.abc import Mapping
from dataclasses import asdict

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from usage_analytics.errors import MalformedRecordError
from usage_analytics.models import UsageRecord


class _UsageRow(BaseModel):
    """Accepts wire (snake_case), camelCase, and `UsageRecord` field spellings."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    endpoint: str = Field(min_length=1)
    date: str
    total_requests: int = Field(
        default=0, validation_alias=AliasChoices("total_requests", "totalRequests")
    )
    successful_requests: int = Field(
        default=0,
        validation_alias=AliasChoices("successful_requests", "successfulRequests"),
    )
    failed_requests: int = Field(
        default=0, validation_alias=AliasChoices("failed_requests", "failedRequests")
    )
    avg_response_time_ms: float = Field(
        default=0.0,
        validation_alias=AliasChoices(
            "avg_response_time_ms",
            "avg_response_time",
            "avgResponseTimeMs",
            "avgResponseTime",
        ),
    )
    avg_score_improvement: float | None = Field(
        default=None,
        validation_alias=AliasChoices("avg_score_improvement", "avgScoreImprovement"),
    )
    avg_text_length: float | None = Field(
        default=None, validation_alias=AliasChoices("avg_text_length", "avgTextLength")
    )
    avg_original_score: float | None = Field(
        default=None,
        validation_alias=AliasChoices("avg_original_score", "avgOriginalScore"),
    )
    avg_improved_score: float | None = Field(
        default=None,
        validation_alias=AliasChoices("avg_improved_score", "avgImprovedScore"),
    )
    prompts_improved: int | None = Field(
        default=None,
        validation_alias=AliasChoices("prompts_improved", "promptsImproved"),
    )

    @field_validator("endpoint", mode="before")
    @classmethod
    def _strip_endpoint(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, value: object) -> object:
        if isinstance(value, dt.datetime):
            return value.date().isoformat()
        if isinstance(value, dt.date):
            return value.isoformat()
        if isinstance(value, str):
            text = value.strip()
            try:
                return dt.date.fromisoformat(text[:10]).isoformat()
            except ValueError:
                raise ValueError(f"not an ISO calendar date: {value!r}") from None
        return value


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "record"
    return f"{location}: {first.get('msg', 'invalid value')}"


def coerce_record(raw: object) -> UsageRecord:
    """Return a validated `UsageRecord` for `raw` or raise `MalformedRecordError`."""
    if isinstance(raw, UsageRecord):
        payload: Mapping[str, object] = asdict(raw)
    elif isinstance(raw, Mapping):
        payload = raw
    else:
        raise MalformedRecordError(
            f"expected a mapping or UsageRecord, got {type(raw).__name__}", raw
        )

    try:
        row = _UsageRow.model_validate(payload)
    except ValidationError as exc:
        raise MalformedRecordError(_describe(exc), raw) from exc

    return UsageRecord(
        endpoint=row.endpoint,
        date=row.date,
        total_requests=row.total_requests,
        successful_requests=row.successful_requests,
        failed_requests=row.failed_requests,
        avg_response_time_ms=row.avg_response_time_ms,
        avg_score_improvement=row.avg_score_improvement,
        avg_text_length=row.avg_text_length,
        avg_original_score=row.avg_original_score,
        avg_improved_score=row.avg_improved_score,
        prompts_improved=row.prompts_improved,
    )


__all__ = ["coerce_record"]
