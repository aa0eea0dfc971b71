"""
Logging utilities for the API service, the report session and the CLI.

Every entrypoint calls ``configure_logging`` once with the configured level.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a pipe-delimited format on stdout."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # httpx logs every request at INFO, which includes tracker credentials in URLs.
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
