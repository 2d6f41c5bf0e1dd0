"""Tests for CLI tool."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

EXAMPLE_FILE = Path("examples/basic_usage.py")


def run_cli(*args: str, stdin: str | None = None) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "shapedecode.cli.main", *args],
        capture_output=True,
        text=True,
        input=stdin,
    )


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert "shapedecode: structured decoding for Python types" in result.stdout
    assert "--analyze" in result.stdout
    assert "--decode" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = run_cli("--version")
    assert result.returncode == 0
    assert "shapedecode 0.1.0" in result.stdout


def test_cli_analyze_example_file() -> None:
    """Test CLI --analyze with a real example file."""
    if not EXAMPLE_FILE.exists():
        pytest.skip("Example file not found")

    result = run_cli("--analyze", str(EXAMPLE_FILE))
    assert result.returncode == 0
    assert "records loaded" in result.stdout
    assert "StatusReport" in result.stdout
    assert "vehicleId (vehicle_id)" in result.stdout
    assert "deny (strict)" in result.stdout
    assert "flatten" in result.stdout


def test_cli_analyze_file_without_records(tmp_path: Path) -> None:
    """A file with no Record classes is reported, not an error."""
    empty = tmp_path / "empty.py"
    empty.write_text("X = 1\n")

    result = run_cli("--analyze", str(empty))
    assert result.returncode == 0
    assert "No Record classes found" in result.stdout


def test_cli_analyze_missing_file() -> None:
    """Test CLI --analyze with missing file."""
    result = run_cli("--analyze", "nonexistent.py")
    assert result.returncode == 1
    assert "Error" in result.stderr or "not found" in result.stderr.lower()


def test_cli_decode_stdin() -> None:
    """Test CLI --decode reading JSON from stdin."""
    if not EXAMPLE_FILE.exists():
        pytest.skip("Example file not found")

    result = run_cli(
        "--decode",
        f"{EXAMPLE_FILE}:User",
        stdin='{"extra1": "z", "login": "y", "id": "x"}',
    )
    assert result.returncode == 0, result.stderr
    assert json.loads(result.stdout) == {"id": "x", "username": "y", "extra1": "z"}


def test_cli_decode_input_file(tmp_path: Path) -> None:
    """Test CLI --decode with --input."""
    if not EXAMPLE_FILE.exists():
        pytest.skip("Example file not found")

    data = tmp_path / "report.json"
    data.write_text('{"vehicleId": 1, "depthCm": 2}')

    result = run_cli("--decode", f"{EXAMPLE_FILE}:StatusReport", "--input", str(data))
    assert result.returncode == 0, result.stderr
    assert json.loads(result.stdout) == {"vehicleId": 1, "depthCm": 2, "battery": 100, "note": None}


def test_cli_decode_error(tmp_path: Path) -> None:
    """Decode errors go to stderr with exit code 1."""
    if not EXAMPLE_FILE.exists():
        pytest.skip("Example file not found")

    data = tmp_path / "report.json"
    data.write_text('{"vehicleId": 1, "depthCm": 2, "speed": 3}')

    result = run_cli("--decode", f"{EXAMPLE_FILE}:StatusReport", "--input", str(data))
    assert result.returncode == 1
    assert "unknown field `speed`" in result.stderr


def test_cli_decode_bad_target() -> None:
    result = run_cli("--decode", "no-colon-here", stdin="{}")
    assert result.returncode == 1
    assert "FILE:TYPE" in result.stderr


def test_cli_verbose_logs_to_stderr() -> None:
    """--verbose turns on debug logging from the library."""
    if not EXAMPLE_FILE.exists():
        pytest.skip("Example file not found")

    result = run_cli("--verbose", "--decode", f"{EXAMPLE_FILE}:User", stdin='{"id": "x", "login": "y"}')
    assert result.returncode == 0
    assert "shapedecode.codec" in result.stderr


def test_cli_no_args() -> None:
    """Test CLI with no arguments (should show help)."""
    result = run_cli()
    assert result.returncode == 0
    assert "shapedecode: structured decoding for Python types" in result.stdout
