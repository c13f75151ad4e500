"""Tests for logging configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from src.config.logging import QUERY_LOGGERS, configure_logging


@pytest.fixture(autouse=True)
def _restore_levels() -> Iterator[None]:
    saved = {name: logging.getLogger(name).level for name in QUERY_LOGGERS}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_debug_queries_enables_query_loggers() -> None:
    configure_logging("WARNING", debug_queries=True)

    for name in QUERY_LOGGERS:
        assert logging.getLogger(name).level == logging.DEBUG


def test_query_loggers_untouched_by_default() -> None:
    for name in QUERY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)

    configure_logging("INFO")

    for name in QUERY_LOGGERS:
        assert logging.getLogger(name).level == logging.NOTSET
