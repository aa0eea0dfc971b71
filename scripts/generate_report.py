#!/usr/bin/env python
"""Generate a self-assessment draft offline from local files.

Example usages::

    # Daily records stored as {"2025-01-02": "Shipped login page", ...}
    python -m scripts.generate_report --name "Alex" --daily records.json

    # Combine with a spreadsheet export and write report_<date>.md
    python -m scripts.generate_report --name "Alex" --daily records.json \
        --file tasks.xlsx --output-dir reports/
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import pydantic

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from selfreview.core.config import get_settings  # noqa: E402
from selfreview.core.errors import ReportError  # noqa: E402
from selfreview.core.logging import configure_logging  # noqa: E402
from selfreview.dependencies import get_gemini_client  # noqa: E402
from selfreview.schemas import DailyRecordEntry  # noqa: E402
from selfreview.services import (  # noqa: E402
    Action,
    ActionType,
    ReportGenerator,
    SpreadsheetImporter,
    StateStore,
    has_data_to_generate,
    run_report_graph,
    write_report,
)

EXIT_OK = 0
EXIT_NO_DATA = 2
EXIT_INPUT_ERROR = 3


def _load_daily_records(path: Path) -> Dict[str, DailyRecordEntry]:
    """Accept either ``{date: content}`` or ``[{"date": ..., "content": ...}]``."""
    raw: Any = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        items = [{"date": date, "content": content} for date, content in raw.items()]
    else:
        items = list(raw)
    entries = [DailyRecordEntry.model_validate(item) for item in items]
    return {entry.date: entry for entry in entries if entry.content.strip()}


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    generation = settings.generation
    if args.latency is not None:
        generation = generation.model_copy(update={"simulated_latency_seconds": args.latency})

    store = StateStore()
    store.dispatch(Action(ActionType.SET_USER_NAME, args.name))
    store.dispatch(Action(ActionType.SET_USER_JOB, args.job or ""))

    if args.daily:
        for entry in _load_daily_records(Path(args.daily)).values():
            store.dispatch(Action(ActionType.ADD_DAILY_RECORD, entry))

    if args.file:
        file_path = Path(args.file)
        result = SpreadsheetImporter().parse(file_path.name, file_path.read_bytes())
        store.dispatch(Action(ActionType.SET_FILE, file_path.name))
        store.dispatch(Action(ActionType.SET_FILE_UPLOADED, True))
        store.dispatch(Action(ActionType.SET_FILE_DATA, result))
        store.dispatch(Action(ActionType.SET_FILE_PARSED, True))

    if not has_data_to_generate(store.state):
        print("No data to generate a report from.", file=sys.stderr)
        return EXIT_NO_DATA

    gemini = get_gemini_client() if generation.use_remote_model else None
    content = await run_report_graph(store.state, ReportGenerator(generation, gemini))
    if args.output_dir:
        path = write_report(content, args.output_dir)
        print(f"Wrote {path}")
    else:
        print(content)
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a self-assessment report draft.")
    parser.add_argument("--name", required=True, help="Name shown on the report.")
    parser.add_argument("--job", default="", help="Job title used as context.")
    parser.add_argument("--daily", help="JSON file with daily records.")
    parser.add_argument("--file", help="Excel or CSV file with supporting data.")
    parser.add_argument(
        "--output-dir",
        dest="output_dir",
        default=None,
        help="Write report_<date>.md here instead of printing to stdout.",
    )
    parser.add_argument(
        "--latency",
        type=float,
        default=None,
        help="Override GENERATION_SIMULATED_LATENCY for this run.",
    )
    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)

    try:
        return asyncio.run(_run(args))
    except (ReportError, pydantic.ValidationError, json.JSONDecodeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
