"""Logging configuration for the SObject source."""

from __future__ import annotations

import logging
import os

# Loggers that report resolved filters and generated SOQL at DEBUG.
QUERY_LOGGERS: tuple[str, ...] = ("src.filters.resolver", "src.sobject.query")


def configure_logging(level: str | None = None, *, debug_queries: bool = False) -> None:
    """Configure Python logging for the process.

    With `debug_queries`, resolved filters and generated SOQL are logged even when the root level
    is above DEBUG.
    """

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if debug_queries:
        for name in QUERY_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)
