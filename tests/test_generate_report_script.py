"""Tests for the offline report generation script."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from scripts import generate_report


def _write_daily(tmp_path: Path, payload) -> Path:
    path = tmp_path / "records.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_prints_report_for_daily_records(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    daily = _write_daily(
        tmp_path, {"2025-01-01": "Planned the sprint", "2025-01-02": "Shipped login", "2025-01-03": " "}
    )

    exit_code = generate_report.main(
        ["--name", "Alex", "--daily", str(daily), "--latency", "0"]
    )

    assert exit_code == generate_report.EXIT_OK
    out = capsys.readouterr().out
    assert out.startswith("## Self-Assessment Report")
    assert "- Record 1: Shipped login\n- Record 2: Planned the sprint" in out
    assert "Record 3" not in out


def test_writes_markdown_file(tmp_path: Path) -> None:
    daily = _write_daily(tmp_path, [{"date": "2025-01-02", "content": "Shipped login"}])
    csv_file = tmp_path / "tasks.csv"
    csv_file.write_text("Task\nWrite docs\n", encoding="utf-8")
    out_dir = tmp_path / "reports"

    exit_code = generate_report.main(
        [
            "--name",
            "Alex",
            "--daily",
            str(daily),
            "--file",
            str(csv_file),
            "--output-dir",
            str(out_dir),
            "--latency",
            "0",
        ]
    )

    assert exit_code == generate_report.EXIT_OK
    report = out_dir / f"report_{date.today().isoformat()}.md"
    content = report.read_text(encoding="utf-8")
    assert "### File Data Analysis" in content
    assert "tasks.csv" in content


def test_no_data_exit_code(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = generate_report.main(["--name", "Alex", "--latency", "0"])

    assert exit_code == generate_report.EXIT_NO_DATA
    assert "No data" in capsys.readouterr().err


def test_invalid_input_exit_code(tmp_path: Path) -> None:
    daily = _write_daily(tmp_path, {"02/01/2025": "Wrong date format"})

    exit_code = generate_report.main(["--name", "Alex", "--daily", str(daily)])
    assert exit_code == generate_report.EXIT_INPUT_ERROR

    missing = generate_report.main(["--name", "Alex", "--file", str(tmp_path / "nope.csv")])
    assert missing == generate_report.EXIT_INPUT_ERROR
