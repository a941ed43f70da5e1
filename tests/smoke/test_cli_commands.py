"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(args: list[str], timeout: int = 30, env: dict[str, str] | None = None) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m contextual_fsrs.cli'
        timeout: Maximum time to wait
        env: Extra environment variables

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    result = subprocess.run(
        [sys.executable, "-m", "contextual_fsrs.cli", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
        env={**os.environ, "COLUMNS": "120", **(env or {})},
    )

    return result.returncode, result.stdout, result.stderr


@pytest.fixture
def card_file(tmp_path):
    path = tmp_path / "card.json"
    path.write_text(
        json.dumps(
            {
                "cardId": "osi-model",
                "difficulty": 5,
                "stability": 4,
                "lastReviewed": "2023-12-28T09:00:00",
                "performanceHistory": [{"rating": "good", "timestamp": "2023-12-28T09:00:00"}],
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def response_file(tmp_path):
    path = tmp_path / "response.json"
    path.write_text(
        json.dumps(
            {
                "rating": "good",
                "responseTime": 4200,
                "contextualFactors": {
                    "sessionFatigueIndex": 0.2,
                    "cognitiveLoadAtTime": 0.9,
                    "timeOfDay": "2024-01-01T09:00:00",
                },
            }
        ),
        encoding="utf-8",
    )
    return path


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command(["--help"])

        assert code == 0, f"Help failed: {stderr}"
        assert "review" in stdout
        assert "params" in stdout

    def test_review_help(self):
        code, stdout, stderr = run_cli_command(["review", "--help"])

        assert code == 0, f"Help failed: {stderr}"
        assert "--target-retention" in stdout


class TestParamsCommand:
    def test_default_parameters(self):
        code, stdout, stderr = run_cli_command(["params"], env={"FSRS_PARAMETERS": ""})

        assert code == 0, f"params failed: {stderr}"
        assert "w20" in stdout
        assert "defaults" in stdout

    def test_invalid_parameters_in_environment(self):
        code, stdout, _ = run_cli_command(["params"], env={"FSRS_PARAMETERS": "1,2,3"})

        assert code == 1
        assert "Invalid settings" in stdout


class TestReviewCommand:
    def test_review_prints_outcome(self, card_file, response_file):
        code, stdout, stderr = run_cli_command(["review", str(card_file), str(response_file)])

        assert code == 0, f"review failed: {stderr}"
        assert "osi-model" in stdout
        assert "Next interval" in stdout
        assert "Explanation" in stdout

    def test_review_with_stats(self, card_file, response_file):
        code, stdout, stderr = run_cli_command(["review", str(card_file), str(response_file), "--stats"])

        assert code == 0, f"review failed: {stderr}"
        assert "dsrCalculations" in stdout

    def test_review_with_profile(self, tmp_path, card_file, response_file):
        profile = tmp_path / "profile.json"
        profile.write_text(json.dumps({"userId": "u-1", "fsrsParameters": [1.0] * 21}), encoding="utf-8")

        code, stdout, stderr = run_cli_command(
            ["review", str(card_file), str(response_file), "--profile", str(profile), "--target-retention", "0.85"]
        )

        assert code == 0, f"review failed: {stderr}"

    def test_invalid_rating_exits_with_error(self, tmp_path, card_file):
        bad = tmp_path / "bad.json"
        bad.write_text(
            json.dumps(
                {
                    "rating": "meh",
                    "responseTime": 1000,
                    "contextualFactors": {"timeOfDay": "2024-01-01T09:00:00"},
                }
            ),
            encoding="utf-8",
        )

        code, stdout, _ = run_cli_command(["review", str(card_file), str(bad)])

        assert code == 1
        assert "Invalid response" in stdout
        assert "rating" in stdout

    def test_malformed_json_exits_with_error(self, tmp_path, response_file):
        bad = tmp_path / "card.json"
        bad.write_text("{not json", encoding="utf-8")

        code, stdout, _ = run_cli_command(["review", str(bad), str(response_file)])

        assert code == 1
        assert "Invalid card" in stdout

    def test_missing_file(self, response_file):
        code, _, _ = run_cli_command(["review", "does-not-exist.json", str(response_file)])

        assert code != 0
