from __future__ import annotations

import json
from pathlib import Path

import pendulum
import pytest
from typer.testing import CliRunner

from sourcermetrics.cli import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


@pytest.fixture
def data_files(tmp_path: Path) -> dict[str, Path]:
    created = pendulum.datetime(2025, 3, 1, 8, 0, 0)
    jobs = [
        {
            "id": "J-1",
            "sourcerId": "sourcer-aaaa-1111",
            "status": "Completed",
            "createdAt": created.to_iso8601_string(),
            "updatedAt": created.add(hours=4).to_iso8601_string(),
            "companyName": "Acme",
            "candidatesRequested": 10,
        },
        {
            "id": "J-2",
            "sourcerId": "sourcer-aaaa-1111",
            "status": "Completed",
            "createdAt": created.to_iso8601_string(),
            "updatedAt": created.add(hours=8).to_iso8601_string(),
            "companyName": "Acme",
            "candidatesRequested": 10,
        },
        {
            "id": "J-3",
            "sourcerId": "sourcer-bbbb-2222",
            "status": "Claimed",
            "createdAt": created.to_iso8601_string(),
            "updatedAt": created.add(hours=1).to_iso8601_string(),
            "companyName": "Globex",
        },
        {
            "id": "J-4",
            "sourcerId": None,
            "status": "Unclaimed",
            "createdAt": created.to_iso8601_string(),
            "updatedAt": created.to_iso8601_string(),
        },
    ]
    candidates = [
        {"id": f"C-{idx}", "jobId": "J-1" if idx < 5 else "J-2", "submittedAt": created.add(hours=3).to_iso8601_string()}
        for idx in range(10)
    ]
    scores = {"C-0": {"score": 90, "reasoning": "x"}, "C-5": {"score": 70, "reasoning": "y"}, "C-6": {"score": 0}}
    profiles = [{"id": "sourcer-aaaa-1111", "name": "Grace Hopper"}]

    paths = {
        "jobs": tmp_path / "jobs.jsonl",
        "candidates": tmp_path / "candidates.json",
        "scores": tmp_path / "scores.json",
        "profiles": tmp_path / "profiles.json",
    }
    paths["jobs"].write_text("\n".join(json.dumps(job) for job in jobs), encoding="utf-8")
    write_json(paths["candidates"], candidates)
    write_json(paths["scores"], scores)
    write_json(paths["profiles"], profiles)
    return paths


def test_cli_leaderboard_writes_output(tmp_path: Path, runner: CliRunner, data_files) -> None:
    output_path = tmp_path / "out" / "leaderboard.json"
    audit_path = tmp_path / "audit.jsonl"

    result = runner.invoke(
        app,
        [
            "leaderboard",
            "--jobs", str(data_files["jobs"]),
            "--candidates", str(data_files["candidates"]),
            "--match-scores", str(data_files["scores"]),
            "--profiles", str(data_files["profiles"]),
            "--window", "alltime",
            "--output", str(output_path),
            "--audit-log", str(audit_path),
        ],
    )

    assert result.exit_code == 0, result.output
    rendered = json.loads(output_path.read_text(encoding="utf-8"))

    assert rendered["metadata"]["job_count"] == 4
    assert rendered["metadata"]["candidate_count"] == 10
    assert rendered["metadata"]["errors"] == []
    assert rendered["metadata"]["preset"] == "match-score-v2"
    top, second = rendered["leaderboard"]
    assert top["name"] == "Grace Hopper"
    assert top["rank"] == 1
    assert top["avg_candidate_rating"] == 80
    assert top["speed_score"] == 75
    assert top["performance_score"] == 66
    assert top["avg_completion_hours"] == 6.0
    assert second["name"] == "Sourcer sourcer-..."
    assert second["avg_candidate_rating"] == "N/A"
    assert rendered["summary"]["active_sourcers"] == 2

    audit_lines = audit_path.read_text(encoding="utf-8").strip().splitlines()
    assert [json.loads(line)["rank"] for line in audit_lines] == [1, 2]


def test_cli_leaderboard_with_config_and_preset(tmp_path: Path, runner: CliRunner, data_files) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "engine:\n  window: alltime\n  sort_by: speed\n",
        encoding="utf-8",
    )
    output_path = tmp_path / "leaderboard.json"

    result = runner.invoke(
        app,
        [
            "leaderboard",
            "--jobs", str(data_files["jobs"]),
            "--candidates", str(data_files["candidates"]),
            "--config", str(config_path),
            "--preset", "A",
            "--output", str(output_path),
        ],
    )

    assert result.exit_code == 0, result.output
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["sort_by"] == "speed"
    assert rendered["metadata"]["quality_method"] == "static_acceptance"
    # a sourcer with no completed jobs averages 0 hours and sorts first by speed
    assert [row["sourcer_id"] for row in rendered["leaderboard"]] == [
        "sourcer-bbbb-2222",
        "sourcer-aaaa-1111",
    ]
    assert rendered["leaderboard"][1]["acceptance_rate"] == 100
    assert rendered["leaderboard"][1]["performance_score"] == 80


def test_cli_rejects_unknown_preset(runner: CliRunner, data_files) -> None:
    result = runner.invoke(
        app,
        [
            "leaderboard",
            "--jobs", str(data_files["jobs"]),
            "--candidates", str(data_files["candidates"]),
            "--preset", "preset-z",
        ],
    )

    assert result.exit_code != 0


def test_cli_rejects_non_mapping_config(tmp_path: Path, runner: CliRunner, data_files) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "leaderboard",
            "--jobs", str(data_files["jobs"]),
            "--candidates", str(data_files["candidates"]),
            "--config", str(config_path),
        ],
    )

    assert result.exit_code != 0


def test_cli_analytics(tmp_path: Path, runner: CliRunner, data_files) -> None:
    output_path = tmp_path / "analytics.json"

    result = runner.invoke(
        app,
        [
            "analytics",
            "--jobs", str(data_files["jobs"]),
            "--candidates", str(data_files["candidates"]),
            "--window", "all",
            "--output", str(output_path),
        ],
    )

    assert result.exit_code == 0, result.output
    analytics = json.loads(output_path.read_text(encoding="utf-8"))["analytics"]
    assert analytics["window"] == "alltime"
    assert analytics["completion_rate"] == 50
    assert analytics["status_distribution"] == {"unclaimed": 1, "claimed": 1, "completed": 2}
    assert analytics["avg_completion_display"] == "6h 0m"
    assert [company["company_name"] for company in analytics["company_activity"]] == ["Acme", "Globex"]
    assert analytics["company_activity"][0]["avg_delivery_days"] == 1.0


def test_cli_rejects_unknown_resolver_setting(tmp_path: Path, runner: CliRunner, data_files) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("resolvers:\n  match_score:\n    min_score: 5\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "leaderboard",
            "--jobs", str(data_files["jobs"]),
            "--candidates", str(data_files["candidates"]),
            "--config", str(config_path),
        ],
    )

    assert result.exit_code == 2
    assert not isinstance(result.exception, TypeError)
