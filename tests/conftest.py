from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from usage_analytics.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch) -> Iterator[None]:
    for name in (
        "USAGE_ANALYTICS_API_URL",
        "USAGE_ANALYTICS_RESPONSE_TIME_POLICY",
        "USAGE_ANALYTICS_DEFAULT_WINDOW_DAYS",
        "USAGE_ANALYTICS_ALLOWED_WINDOWS",
        "USAGE_ANALYTICS_ENDPOINT_ALIASES",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def usage_row(
    endpoint: str,
    date: str,
    total: int,
    *,
    successful: int | None = None,
    failed: int = 0,
    response_time: float = 100.0,
    improvement: float | None = None,
) -> dict[str, Any]:
    row: dict[str, Any] = {
        "endpoint": endpoint,
        "date": date,
        "total_requests": total,
        "successful_requests": total - failed if successful is None else successful,
        "failed_requests": failed,
        "avg_response_time": response_time,
        "avg_text_length": 42.0,
    }
    if improvement is not None:
        row["avg_score_improvement"] = improvement
    return row


@pytest.fixture
def dashboard_payload() -> dict[str, Any]:
    return {
        "usage_stats": {
            "period_days": 30,
            "stats": [
                usage_row(
                    "/improve",
                    "2024-01-02",
                    5,
                    failed=1,
                    response_time=300.0,
                    improvement=2.5,
                ),
                usage_row(
                    "/score-prompt", "2024-01-01", 10, failed=2, response_time=120.0
                ),
                usage_row("/score-prompt", "2024-01-02", 20, response_time=100.0),
            ],
        },
        "detailed_metrics": {
            "period_days": 30,
            "metrics": {
                "total_requests": 35,
                "score_requests": 30,
                "improve_requests": 5,
                "avg_improvement": 2.5,
                "max_improvement": 4.0,
                "successful_improvements": 3,
                "total_improvements": 4,
                "avg_response_time": 173.3,
                "successful_requests": 32,
                "failed_requests": 3,
            },
        },
    }


@pytest.fixture
def dashboard_file(tmp_path: Path, dashboard_payload: dict[str, Any]) -> Path:
    path = tmp_path / "analytics.json"
    path.write_text(json.dumps(dashboard_payload), encoding="utf-8")
    return path
