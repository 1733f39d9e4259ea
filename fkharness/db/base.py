"""SQLAlchemy engine and session lifecycle.

The harness targets an ephemeral in-memory SQLite store by default. This
module only manages connection lifecycle; the declarative model lives in
`fkharness.models.entities`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from fkharness.config import DatabaseConfig, load_config

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def create_store_engine(url: str | None = None, config: DatabaseConfig | None = None) -> Engine:
    """Build a new Engine for the given URL.

    Every call yields an independent store. For SQLite in-memory URLs a
    StaticPool keeps the single connection alive across sessions, so all units
    of work see the same ephemeral database.
    """
    cfg = config or load_config().database
    if url:
        cfg = cfg.model_copy(update={"url": url})

    kwargs: dict = {"echo": False}
    if cfg.is_in_memory:
        kwargs.update({
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        })
    engine = create_engine(cfg.url, **kwargs)
    if cfg.is_sqlite and cfg.sqlite_foreign_keys:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    logger.info("store_engine_created url=%s foreign_keys=%s", engine.url, cfg.sqlite_foreign_keys)
    return engine


def get_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Yield a session for one unit of work.

    Commits on normal exit; rolls back and re-raises on any exception. The
    session is always closed.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.error("DB session error; transaction rolled back", exc_info=True)
        raise
    finally:
        session.close()
