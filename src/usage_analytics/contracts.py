"""Analytics API contract payloads.

Mirrors the JSON served by the prompt scoring API. Usage rows under
`usage_stats.stats` are kept as raw mappings here and validated one at a
time by the aggregator, so one malformed row is skipped instead of failing
the whole response.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from usage_analytics.models import DetailTotals


class MetricsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    period_days: int
    stats: list[dict[str, Any]] = Field(default_factory=list)


class DetailedMetricsPayload(BaseModel):
    """Period totals as served by `/analytics`. Missing or null values read as 0."""

    model_config = ConfigDict(extra="ignore")

    total_requests: int = 0
    score_requests: int = 0
    improve_requests: int = 0
    avg_improvement: float = 0.0
    max_improvement: float = 0.0
    successful_improvements: int = 0
    total_improvements: int = 0
    avg_response_time: float = 0.0
    successful_requests: int = 0
    failed_requests: int = 0

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> "DetailedMetricsPayload":
        return cls.model_validate(
            {key: value for key, value in payload.items() if value is not None}
        )

    def to_totals(self) -> DetailTotals:
        return DetailTotals(
            total_requests=self.total_requests,
            score_requests=self.score_requests,
            improve_requests=self.improve_requests,
            avg_improvement=self.avg_improvement,
            max_improvement=self.max_improvement,
            successful_improvements=self.successful_improvements,
            total_improvements=self.total_improvements,
            avg_response_time_ms=self.avg_response_time,
            successful_requests=self.successful_requests,
            failed_requests=self.failed_requests,
        )


class DetailedMetricsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    period_days: int
    metrics: dict[str, Any] = Field(default_factory=dict)

    def to_totals(self) -> DetailTotals:
        return DetailedMetricsPayload.from_wire(self.metrics).to_totals()


class DashboardDataResponse(BaseModel):
    """Combined `/analytics?days=N` payload."""

    model_config = ConfigDict(extra="ignore")

    usage_stats: MetricsResponse
    detailed_metrics: DetailedMetricsResponse


class HealthResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str
    timestamp: str | None = None


class PromptRecord(BaseModel):
    """A stored prompt improvement returned by `/high-quality-prompts`."""

    model_config = ConfigDict(extra="ignore")

    id: int
    original_prompt: str
    improved_prompt: str
    original_score: float
    improved_score: float
    score_improvement: float
    request_timestamp: str


class HighQualityPromptsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    prompts: list[PromptRecord] = Field(default_factory=list)
    search_term: str = ""
    min_score: float = 0.0


__all__ = [
    "DashboardDataResponse",
    "DetailedMetricsPayload",
    "DetailedMetricsResponse",
    "HealthResponse",
    "HighQualityPromptsResponse",
    "MetricsResponse",
    "PromptRecord",
]
