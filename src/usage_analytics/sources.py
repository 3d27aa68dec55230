"""Usage data sources.

A data source answers one question: the usage records and period totals for
a window of N days. The dashboard service receives one through its
constructor; nothing here is a module-level singleton.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, ValidationError

from usage_analytics.config import get_settings
from usage_analytics.contracts import (
    DashboardDataResponse,
    HealthResponse,
    HighQualityPromptsResponse,
)
from usage_analytics.errors import DataSourceError, InvalidWindowError
from usage_analytics.models import DetailTotals, UsageRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageWindow:
    """Raw usage rows and period totals for one window."""

    period_days: int
    records: Sequence[UsageRecord | Mapping[str, Any]] = field(default_factory=tuple)
    totals: DetailTotals = field(default_factory=DetailTotals)


class UsageDataSource(Protocol):
    async def fetch_window(self, days: int) -> UsageWindow: ...


def validate_window(days: object, allowed: Sequence[int] | None = None) -> int:
    """Return `days` if it is a supported period window, else raise."""
    windows = tuple(allowed) if allowed is not None else get_settings().allowed_windows
    if isinstance(days, bool) or not isinstance(days, int) or days not in windows:
        raise InvalidWindowError(days, windows)
    return days


def window_from_dashboard(payload: DashboardDataResponse) -> UsageWindow:
    return UsageWindow(
        period_days=payload.usage_stats.period_days,
        records=tuple(payload.usage_stats.stats),
        totals=payload.detailed_metrics.to_totals(),
    )


class StaticUsageSource:
    """Serves a fixed set of records and totals for any window."""

    def __init__(
        self,
        records: Sequence[UsageRecord | Mapping[str, Any]] = (),
        totals: DetailTotals | None = None,
    ) -> None:
        self._records = tuple(records)
        self._totals = totals or DetailTotals()

    async def fetch_window(self, days: int) -> UsageWindow:
        return UsageWindow(period_days=days, records=self._records, totals=self._totals)


class JsonFileUsageSource:
    """Reads a saved `/analytics` response from disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def fetch_window(self, days: int) -> UsageWindow:
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except OSError as exc:
            raise DataSourceError(f"Could not read {self.path}: {exc}") from exc

        try:
            payload = DashboardDataResponse.model_validate_json(text)
        except ValidationError as exc:
            raise DataSourceError(
                f"{self.path} is not an analytics response "
                f"({exc.error_count()} validation errors)"
            ) from exc

        window = window_from_dashboard(payload)
        if window.period_days != days:
            logger.warning(
                "%s holds a %d day window, %d days were requested",
                self.path,
                window.period_days,
                days,
            )
        return window


class HttpUsageSource:
    """Fetches usage data from the analytics API over HTTP."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        if client is None:
            settings = get_settings()
            client = httpx.AsyncClient(
                base_url=(base_url or settings.api_url).rstrip("/"),
                timeout=timeout_seconds or settings.request_timeout_seconds,
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    async def __aenter__(self) -> "HttpUsageSource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(
        self,
        path: str,
        model: type[BaseModel],
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return model.model_validate(response.json())
        except httpx.HTTPError as exc:
            logger.warning("Analytics API request to %s failed: %s", path, exc)
            raise DataSourceError(f"Request to {path} failed: {exc}") from exc
        except ValueError as exc:
            logger.warning("Invalid payload from analytics API %s: %s", path, exc)
            raise DataSourceError(f"Invalid response from {path}") from exc

    async def fetch_window(self, days: int) -> UsageWindow:
        payload: DashboardDataResponse = await self._get(
            "/analytics", DashboardDataResponse, params={"days": days}
        )
        return window_from_dashboard(payload)

    async def check_health(self) -> HealthResponse:
        return await self._get("/health", HealthResponse)

    async def search_high_quality_prompts(
        self, search_term: str = ""
    ) -> HighQualityPromptsResponse:
        return await self._get(
            "/high-quality-prompts",
            HighQualityPromptsResponse,
            params={"search": search_term},
        )


__all__ = [
    "HttpUsageSource",
    "JsonFileUsageSource",
    "StaticUsageSource",
    "UsageDataSource",
    "UsageWindow",
    "validate_window",
    "window_from_dashboard",
]
