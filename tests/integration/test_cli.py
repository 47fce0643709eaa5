from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from skillscoring.cli import app

ANSWER = (
    "I would start by mapping the companies that run large distributed databases and list the teams "
    "that maintain them. Then I would review conference speaker lists, engineering blogs and open source "
    "commit history to find people who shipped storage engines. Each week I would share a shortlist of "
    "twenty profiles with the hiring manager and refine the criteria based on their feedback."
)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


def write_games(path: Path) -> None:
    games = {
        "games": [
            {
                "game_id": "G-PLAN",
                "title": "Database engineer sourcing plan",
                "task": "Describe how you would source distributed database engineers.",
                "skill_category": "general",
                "difficulty": "medium",
                "references": [
                    {"text": "Map target companies, then mine conference talks and commit history.", "score": 90},
                ],
            }
        ]
    }
    path.write_text(yaml.safe_dump(games), encoding="utf-8")


def test_cli_scores_request_and_writes_output(tmp_path: Path, runner: CliRunner) -> None:
    games_path = tmp_path / "games.yaml"
    request_path = tmp_path / "request.json"
    output_path = tmp_path / "out" / "result.json"
    write_games(games_path)
    write_json(request_path, {"game_id": "G-PLAN", "player_id": "P-1", "submission_text": ANSWER, "hints_used": 1})

    result = runner.invoke(
        app,
        [
            "score",
            "--request",
            str(request_path),
            "--games",
            str(games_path),
            "--output",
            str(output_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "1 seed references" in result.output
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["app_version"] == "0.1.0"
    scored = rendered["result"]
    assert scored["game_id"] == "G-PLAN"
    assert scored["used_ai_scoring"] is False
    assert scored["hint_penalty"] == 3
    assert scored["feedback"]["structured"]["validation_only_notice"]
    assert 0 <= scored["final_score"] <= 100


def test_cli_reports_unknown_game(tmp_path: Path, runner: CliRunner) -> None:
    games_path = tmp_path / "games.yaml"
    request_path = tmp_path / "request.json"
    write_games(games_path)
    write_json(request_path, {"game_id": "missing", "player_id": "P-1", "submission_text": ANSWER})

    result = runner.invoke(
        app,
        [
            "score",
            "--request",
            str(request_path),
            "--games",
            str(games_path),
            "--output",
            str(tmp_path / "result.json"),
        ],
    )

    assert result.exit_code == 1
    assert "game_not_found" in result.output
    assert not (tmp_path / "result.json").exists()


def test_cli_validate_prints_validator_result(runner: CliRunner) -> None:
    result = runner.invoke(app, ["validate", "--category", "boolean", "--text", "React Vue senior"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["score"] == 75
    assert payload["checks"]["has_and"] is False


def test_cli_validate_requires_text(runner: CliRunner) -> None:
    result = runner.invoke(app, ["validate", "--category", "general"])

    assert result.exit_code != 0
