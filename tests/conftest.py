"""Pytest configuration for test isolation.

The shared SQLAlchemy engine in ``db.client`` is process-global and the CLI
configures the package logger once per process. Both would leak state across
tests (an engine bound to another test's SQLite file, or a logger that no
longer propagates to ``caplog``), so every test starts from a clean slate:
no ``DATABASE_URL`` in the environment, no engine, and unconfigured logging.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
from db.client import dispose_engine

from statement_categorizer import logging_setup


@pytest.fixture(autouse=True)
def _isolate_database(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    dispose_engine()
    yield
    dispose_engine()


@pytest.fixture(autouse=True)
def _reset_package_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("STATEMENT_CATEGORIZER_LOG_LEVEL", raising=False)
    yield
    logger = logging.getLogger("statement_categorizer")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logging_setup._CONFIGURED = False
