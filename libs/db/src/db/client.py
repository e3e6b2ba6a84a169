"""Database access for the shop registry.

One engine per process, bound to ``DATABASE_URL`` (or the URL passed by the
caller) the first time a session is requested. The categorizer only ever
reads, so :func:`session_scope` is all most callers need::

    with session_scope(database_url=url) as session:
        rows = session.execute(query).all()

Binding a second, different URL is refused until :func:`dispose_engine` drops
the current engine; the CLI never needs that, the test suite does.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

_ENGINE: Engine | None = None
_SESSION_MAKER: sessionmaker[Session] | None = None
_DB_URL: str | None = None


def _resolve_url(override: str | None) -> str:
    url = override or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; cannot load the shop registry")
    return url


def _bind(url: str) -> sessionmaker[Session]:
    global _ENGINE, _SESSION_MAKER, _DB_URL
    if _SESSION_MAKER is not None:
        if url != _DB_URL:
            raise RuntimeError(
                f"database engine is bound to another URL; call dispose_engine() "
                f"before switching to {url!r}"
            )
        return _SESSION_MAKER

    _ENGINE = create_engine(url, pool_pre_ping=True)
    _SESSION_MAKER = sessionmaker(bind=_ENGINE, expire_on_commit=False, class_=Session)
    _DB_URL = url
    return _SESSION_MAKER


def get_engine(*, database_url: str | None = None) -> Engine:
    _bind(_resolve_url(database_url))
    if _ENGINE is None:  # pragma: no cover - set together with the session maker
        raise RuntimeError("database engine was not created")
    return _ENGINE


def dispose_engine() -> None:
    """Close pooled connections and unbind, so another URL can be used."""

    global _ENGINE, _SESSION_MAKER, _DB_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = _SESSION_MAKER = _DB_URL = None


def get_session(*, database_url: str | None = None) -> Session:
    return _bind(_resolve_url(database_url))()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Session that commits when the block succeeds and rolls back otherwise."""

    session = get_session(database_url=database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "get_engine",
    "dispose_engine",
    "get_session",
    "session_scope",
]
