"""Markdown export of a generated report."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional


def report_filename(on: Optional[date] = None) -> str:
    """``report_<YYYY-MM-DD>.md`` for ``on`` (default: today)."""
    return f"report_{(on or date.today()).isoformat()}.md"


def write_report(content: str, directory: str | Path, *, on: Optional[date] = None) -> Path:
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / report_filename(on)
    path.write_text(content, encoding="utf-8")
    return path


__all__ = ["report_filename", "write_report"]
