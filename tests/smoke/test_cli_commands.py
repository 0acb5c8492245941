"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import io
import json
import os
import subprocess
import sys
from datetime import timedelta
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def cli(tmp_path):
    """Runner bound to a throwaway SQLite database."""
    env = {
        **os.environ,
        "DATABASE_URL": f"sqlite:///{tmp_path / 'memcurve.db'}",
        "LOG_LEVEL": "WARNING",
        "COLUMNS": "200",
    }

    def run_cli_command(*args: str, timeout: int = 30) -> tuple[int, str, str]:
        """
        Run a CLI command and return exit code, stdout, stderr.

        Args:
            args: Arguments after 'python -m memcurve.cli.main'
            timeout: Maximum time to wait

        Returns:
            Tuple of (exit_code, stdout, stderr)
        """
        result = subprocess.run(
            [sys.executable, "-m", "memcurve.cli.main", *args],
            cwd=PROJECT_ROOT,
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return result.returncode, result.stdout, result.stderr

    return run_cli_command


def exported_items(cli, path: Path) -> list[dict]:
    code, _, stderr = cli("export", str(path))
    assert code == 0, f"Export failed: {stderr}"
    return json.loads(path.read_text(encoding="utf-8"))["items"]


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, cli):
        code, stdout, stderr = cli("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "Commands" in stdout
        for command in ("add", "review", "plan", "forecast", "remind"):
            assert command in stdout

    def test_review_help(self, cli):
        code, stdout, stderr = cli("review", "--help")

        assert code == 0, f"Review help failed: {stderr}"
        assert "--fail" in stdout


class TestCLIWorkflow:
    """Add, review and inspect items end to end."""

    def test_init_db(self, cli):
        code, stdout, stderr = cli("init-db")

        assert code == 0, f"init-db failed: {stderr}"
        assert "3 categories" in stdout

    def test_add_and_review(self, cli, tmp_path):
        code, stdout, stderr = cli("add", "der Apfel - the apple", "-c", "vocab", "-d", "easy")
        assert code == 0, f"Add failed: {stderr}"
        assert "Added" in stdout

        [item] = exported_items(cli, tmp_path / "before.json")
        assert len(item["intervals"]) == 7
        assert item["difficulty"] == "easy"

        code, stdout, stderr = cli("review", item["id"][:8], "--fail", "-t", "4")
        assert code == 0, f"Review failed: {stderr}"
        assert "missed" in stdout

        [item] = exported_items(cli, tmp_path / "after.json")
        assert item["review_count"] == 1
        assert item["retention_rate"] == 80.0
        assert len(item["intervals"]) == 8

    def test_review_unknown_item(self, cli):
        code, stdout, _ = cli("review", "does-not-exist")

        assert code == 1
        assert "No unique item" in stdout

    @pytest.mark.parametrize(
        "args",
        [
            ("schedule",),
            ("plan", "--max", "5"),
            ("urgent",),
            ("forgotten",),
            ("forecast", "--days", "3"),
            ("stats",),
            ("categories",),
        ],
    )
    def test_report_commands_run(self, cli, args):
        cli("add", "E = mc^2", "-c", "formula", "-d", "hard")

        code, stdout, stderr = cli(*args)

        assert code == 0, f"{args[0]} failed: {stderr}"
        assert stdout.strip()

    def test_export_import(self, cli, tmp_path):
        cli("add", "mitochondria", "-c", "concept")
        backup = tmp_path / "backup.json"
        exported_items(cli, backup)

        cli("add", "ribosome", "-c", "concept")
        code, stdout, stderr = cli("import", str(backup))

        assert code == 0, f"Import failed: {stderr}"
        assert "Imported 1 items" in stdout
        assert len(exported_items(cli, tmp_path / "check.json")) == 1


class TestItemsTable:
    """Retention shown in tables follows the supplied clock."""

    def render(self, table) -> str:
        from rich.console import Console

        console = Console(file=io.StringIO(), width=200, color_system=None)
        console.print(table)
        return console.file.getvalue()

    def test_now_column_uses_given_time(self, make_item, base_time):
        from memcurve.cli.main import _items_table

        item = make_item()

        fresh = self.render(_items_table("Plan", [item], base_time))
        decayed = self.render(_items_table("Plan", [item], base_time + timedelta(days=2)))

        assert "100.0%" in fresh
        assert "100.0%" not in decayed
        assert "0.0%" in decayed
