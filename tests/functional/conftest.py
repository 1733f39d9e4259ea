from __future__ import annotations

"""Functional test bootstrap for the foreign-key update harness.

Every test gets its own in-memory SQLite store; nothing is shared between
tests except the process environment, which points the harness at an
ephemeral database before any store is opened.
"""

import os

import pytest

os.environ["TEST_DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.pop("DATABASE_URL", None)


@pytest.fixture()
def store():
    """A fresh, empty store with both tables created."""
    from fkharness.logic.harness import open_store

    s = open_store()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def seeded_store(store):
    """A fresh store holding Child 1, Child 2 and Parent 1 -> Child 1."""
    from fkharness.logic.harness import seed_store

    seed_store(store.session_factory)
    return store
