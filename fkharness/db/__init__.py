"""Database bootstrap utilities for the harness.

This module exposes convenience imports for engine/session construction and
schema creation from the entity model. The DB layer is intentionally minimal
and leaves change tracking entirely to the SQLAlchemy session.
"""

from fkharness.db.base import create_store_engine, get_sessionmaker, session_scope
from fkharness.db.schema import create_schema, drop_schema

__all__ = [
    "create_store_engine",
    "get_sessionmaker",
    "session_scope",
    "create_schema",
    "drop_schema",
]
