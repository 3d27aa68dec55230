from __future__ import annotations

import importlib
import json
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from usage_analytics import __version__
from usage_analytics.cli import _version_callback, app
from usage_analytics.sources import HttpUsageSource

# The package re-exports the ``report`` command, shadowing the submodule name.
report_commands = importlib.import_module("usage_analytics.cli.report")

runner = CliRunner()


def test_cli_app_help_and_version() -> None:
    help_result = runner.invoke(app, ["--help"])
    assert help_result.exit_code == 0
    assert "report" in help_result.stdout
    assert "series" in help_result.stdout
    assert "health" in help_result.stdout

    version_result = runner.invoke(app, ["--version"])
    assert version_result.exit_code == 0
    assert __version__ in version_result.stdout


def test_version_callback_noop_when_false() -> None:
    assert _version_callback(False) is None


def test_report_json_from_file(dashboard_file: Path) -> None:
    result = runner.invoke(
        app, ["report", "--file", str(dashboard_file), "--days", "30", "--json"]
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["period_days"] == 30
    assert payload["summary"]["success_rate_percent"] == 91.4
    assert payload["summary"]["improvement_success_rate_percent"] == 75.0
    assert payload["summary"]["totals"]["total_requests"] == 35
    assert [row["date"] for row in payload["series"]] == ["2024-01-01", "2024-01-02"]
    assert payload["series"][1]["improveRequests"] == 5
    assert payload["skipped"] == []


def test_report_tables_from_file(dashboard_file: Path) -> None:
    result = runner.invoke(app, ["report", "--file", str(dashboard_file)])

    assert result.exit_code == 0, result.output
    assert "Last 30 days" in result.output
    assert "Success rate" in result.output
    assert "91.4%" in result.output
    assert "2024-01-02" in result.output


def test_report_weighted_policy(dashboard_file: Path) -> None:
    result = runner.invoke(
        app,
        [
            "report",
            "--file",
            str(dashboard_file),
            "--policy",
            "weighted_mean",
            "--json",
        ],
    )

    assert result.exit_code == 0, result.output
    # (300 * 5 + 100 * 20) / 25
    assert json.loads(result.stdout)["series"][1]["avgResponseTime"] == 140.0


def test_report_rejects_bad_window_policy_and_missing_file(
    dashboard_file: Path, tmp_path: Path
) -> None:
    bad_window = runner.invoke(
        app, ["report", "--file", str(dashboard_file), "--days", "14"]
    )
    assert bad_window.exit_code == 1
    assert "Unsupported period window" in bad_window.output

    bad_policy = runner.invoke(
        app, ["report", "--file", str(dashboard_file), "--policy", "median"]
    )
    assert bad_policy.exit_code == 1
    assert "Unknown response time policy" in bad_policy.output

    missing = runner.invoke(app, ["report", "--file", str(tmp_path / "nope.json")])
    assert missing.exit_code == 1
    assert "Could not load usage data" in missing.output


def test_series_json_and_table(dashboard_file: Path) -> None:
    as_json = runner.invoke(
        app, ["series", "improve_requests", "--file", str(dashboard_file), "--json"]
    )
    assert as_json.exit_code == 0, as_json.output
    assert json.loads(as_json.stdout) == [
        {"date": "2024-01-01", "value": 0},
        {"date": "2024-01-02", "value": 5},
    ]

    table = runner.invoke(
        app, ["series", "avg_improvement", "--file", str(dashboard_file)]
    )
    assert table.exit_code == 0, table.output
    assert "Average Score Improvement" in table.output
    assert "Average Score\nImprovement" not in table.output
    assert "+2.5" in table.output


def test_series_rejects_unknown_metric(dashboard_file: Path) -> None:
    result = runner.invoke(app, ["series", "latency", "--file", str(dashboard_file)])

    assert result.exit_code != 0


def test_invalid_policy_fails_before_an_api_client_is_built(monkeypatch) -> None:
    built: list[object] = []

    def _record_build(file, url):
        built.append((file, url))
        raise AssertionError("source should not be built")

    monkeypatch.setattr(report_commands, "_build_source", _record_build)

    result = runner.invoke(app, ["report", "--policy", "median"])

    assert result.exit_code == 1
    assert "Unknown response time policy" in result.output
    assert built == []


PROMPT = {
    "id": 7,
    "original_prompt": "write tests",
    "improved_prompt": "write pytest unit tests for the parser module",
    "original_score": 4.0,
    "improved_score": 8.5,
    "score_improvement": 4.5,
    "request_timestamp": "2024-01-02T09:00:00Z",
}


@pytest.fixture
def prompt_api(monkeypatch) -> list[httpx.Request]:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        term = request.url.params["search"]
        return httpx.Response(
            200,
            json={
                "prompts": [PROMPT] if term in ("", "pytest") else [],
                "search_term": term,
                "min_score": 8.0,
            },
        )

    def _source(*, base_url=None):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=base_url or "http://analytics.test",
        )
        return HttpUsageSource(client)

    monkeypatch.setattr(report_commands, "HttpUsageSource", _source)
    return seen


def test_prompts_lists_matches_as_table_and_json(prompt_api) -> None:
    table = runner.invoke(app, ["prompts", "pytest"])
    assert table.exit_code == 0, table.output
    assert "+4.5" in table.output
    assert "4.0 → 8.5" in table.output

    as_json = runner.invoke(app, ["prompts", "pytest", "--json"])
    assert as_json.exit_code == 0, as_json.output
    payload = json.loads(as_json.stdout)
    assert payload["search_term"] == "pytest"
    assert payload["prompts"][0]["id"] == 7

    assert [request.url.params["search"] for request in prompt_api] == [
        "pytest",
        "pytest",
    ]


def test_prompts_reports_empty_results(prompt_api) -> None:
    searched = runner.invoke(app, ["prompts", "haiku"])
    assert searched.exit_code == 0, searched.output
    assert "No prompts found matching your search." in searched.output

    listing = runner.invoke(app, ["prompts"])
    assert listing.exit_code == 0, listing.output
    assert "4.0 → 8.5" in listing.output
    assert prompt_api[-1].url.params["search"] == ""
