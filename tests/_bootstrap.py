"""Test helper that normalizes sys.path and environment defaults."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_SCRATCH_DIR = Path(tempfile.mkdtemp(prefix="selfreview-tests-"))

_DEFAULT_ENV_VARS: dict[str, str] = {
    "APP_ENV": "test",
    "APP_LOG_LEVEL": "WARNING",
    "JIRA_PROXY_BASE_URL": "http://proxy.test",
    "DAILY_API_BASE_URL": "http://daily.test/",
    "DAILY_RECORD_DB_PATH": str(_SCRATCH_DIR / "daily_records.db"),
    "LOCAL_CACHE_DB_PATH": str(_SCRATCH_DIR / "local_state.db"),
    "GENERATION_USE_REMOTE": "false",
    "GENERATION_SIMULATED_LATENCY": "0",
}

for key, value in _DEFAULT_ENV_VARS.items():
    os.environ.setdefault(key, value)
