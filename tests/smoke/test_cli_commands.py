"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work against a
throwaway SQLite database.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(args: list[str], database_url: str | None = None, timeout: int = 60) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m adaptive_tutor.cli.main'
        database_url: Passed as --database-url when given
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    command = [sys.executable, "-m", "adaptive_tutor.cli.main"]
    if database_url:
        command += ["--database-url", database_url]
    command += args

    env = dict(os.environ)
    env.pop("DATABASE_URL", None)
    env["GEMINI_API_KEY"] = ""
    env["LOG_FILE"] = ""
    env["COLUMNS"] = "200"
    env["PYTHONIOENCODING"] = "utf-8"

    result = subprocess.run(
        command,
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
        env=env,
    )
    return result.returncode, result.stdout, result.stderr


@pytest.fixture
def db_url(tmp_path):
    """SQLite database with tables created."""
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    code, _, stderr = run_cli_command(["db", "init"], url)
    assert code == 0, f"db init failed: {stderr}"
    return url


@pytest.fixture
def seeded_db(db_url):
    code, _, stderr = run_cli_command(["curriculum", "seed"], db_url)
    assert code == 0, f"seed failed: {stderr}"
    return db_url


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command(["--help"])

        assert code == 0, f"Help failed: {stderr}"
        assert "Commands" in stdout
        for group in ("db", "curriculum", "progress", "attempts", "report"):
            assert group in stdout

    @pytest.mark.parametrize("group", ["db", "curriculum", "progress", "attempts", "report"])
    def test_group_help(self, group):
        code, stdout, stderr = run_cli_command([group, "--help"], "sqlite://")
        assert code == 0, f"{group} help failed: {stderr}"


class TestDatabaseCommands:
    def test_init_is_idempotent(self, db_url):
        code, stdout, _ = run_cli_command(["db", "init"], db_url)
        assert code == 0
        assert "Database initialized" in stdout

    def test_check(self, db_url):
        code, stdout, _ = run_cli_command(["db", "check"], db_url)
        assert code == 0
        assert "reachable" in stdout


class TestCurriculumCommands:
    def test_seed_then_reseed(self, db_url):
        code, stdout, _ = run_cli_command(["curriculum", "seed"], db_url)
        assert code == 0
        assert "Seeded 8 subjects" in stdout

        code, stdout, _ = run_cli_command(["curriculum", "seed"], db_url)
        assert code == 0
        assert "already exist" in stdout

    def test_list_with_modules(self, seeded_db):
        code, stdout, stderr = run_cli_command(["curriculum", "list", "--modules"], seeded_db)
        assert code == 0, stderr
        assert "C++ Programming" in stdout
        assert "Pointers" in stdout


class TestProgressCommands:
    def test_enroll_and_show(self, seeded_db):
        code, stdout, stderr = run_cli_command(["progress", "enroll", "s1", "cpp"], seeded_db)
        assert code == 0, stderr
        assert "enrolled in cpp" in stdout

        code, stdout, stderr = run_cli_command(["progress", "show", "s1", "cpp"], seeded_db)
        assert code == 0, stderr
        assert "Completed 0/5 modules" in stdout

    def test_unknown_subject_fails(self, seeded_db):
        code, stdout, _ = run_cli_command(["progress", "enroll", "s1", "klingon"], seeded_db)
        assert code == 1
        assert "not found" in stdout

    def test_show_without_enrollment_fails(self, seeded_db):
        code, _, _ = run_cli_command(["progress", "show", "s1", "cpp"], seeded_db)
        assert code == 1


class TestAttemptAndReportCommands:
    def test_attempts_require_a_filter(self, seeded_db):
        code, stdout, _ = run_cli_command(["attempts", "list"], seeded_db)
        assert code == 1
        assert "--student" in stdout

    def test_attempts_empty(self, seeded_db):
        code, stdout, _ = run_cli_command(["attempts", "list", "--student", "s1"], seeded_db)
        assert code == 0
        assert "No attempts found" in stdout

    def test_invalid_module_id(self, seeded_db):
        code, stdout, _ = run_cli_command(["attempts", "list", "--module", "not-a-uuid"], seeded_db)
        assert code == 1
        assert "Invalid module id" in stdout

    def test_students_empty(self, seeded_db):
        code, stdout, _ = run_cli_command(["report", "students"], seeded_db)
        assert code == 0
        assert "No attempts recorded yet" in stdout

    def test_report_requires_api_key(self, seeded_db):
        code, stdout, _ = run_cli_command(["report", "generate", "s1", "cpp"], seeded_db)
        assert code == 1
        assert "GEMINI_API_KEY" in stdout


class TestInfoCommands:
    def test_info(self, db_url):
        code, stdout, stderr = run_cli_command(["info"], db_url)
        assert code == 0, stderr
        assert "Mastery threshold" in stdout

    def test_version(self, db_url):
        code, stdout, _ = run_cli_command(["version"], db_url)
        assert code == 0
        assert "adaptive-tutor" in stdout
