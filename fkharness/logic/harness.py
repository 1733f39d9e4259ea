"""Verification harness for foreign-key partial updates.

Seeds a fresh store with two Child rows (ids 1 and 2) and one Parent (id 1,
referencing Child 1), runs one update variant in its own unit of work and
captures row counts and field values before and after. Every unit of work
(seed, update, verify) uses a short-lived session against the store's single
connection. Persistence exceptions are never caught here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from fkharness.config import HarnessConfig, load_config
from fkharness.db.base import create_store_engine, get_sessionmaker, session_scope
from fkharness.db.schema import create_schema, drop_schema
from fkharness.logic.partial_update import UpdateVariant, load_parent, update_parent_foreign_key
from fkharness.models.entities import Child, Parent

logger = logging.getLogger(__name__)

SEED_CHILD_IDS = (1, 2)
SEED_PARENT_ID = 1
SEED_FOREIGN_KEY = 1


@dataclass(frozen=True)
class StoreSnapshot:
    parent_count: int
    child_count: int
    foreign_key: Optional[int]
    child_id: Optional[int]

    @property
    def consistent(self) -> bool:
        return self.foreign_key is not None and self.foreign_key == self.child_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parent_count": self.parent_count,
            "child_count": self.child_count,
            "foreign_key": self.foreign_key,
            "child_id": self.child_id,
        }


@dataclass(frozen=True)
class ScenarioOutcome:
    variant: UpdateVariant
    foreign_key: int
    eager: bool
    before: StoreSnapshot
    after: StoreSnapshot

    @property
    def rows_preserved(self) -> bool:
        return (
            self.before.parent_count == self.after.parent_count
            and self.before.child_count == self.after.child_count
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variant": self.variant.value,
            "foreign_key": self.foreign_key,
            "eager": self.eager,
            "rows_preserved": self.rows_preserved,
            "before": self.before.to_dict(),
            "after": self.after.to_dict(),
        }


class Store:
    """One ephemeral database: engine, schema and session factory."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory: sessionmaker = get_sessionmaker(engine)

    def session(self):
        return session_scope(self.session_factory)

    def close(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_store(url: str | None = None, config: HarnessConfig | None = None) -> Store:
    """Create a fresh store with both tables in place and no rows."""
    cfg = config or load_config()
    engine = create_store_engine(url, cfg.database)
    drop_schema(engine)
    create_schema(engine)
    return Store(engine)


def seed_store(factory: sessionmaker) -> None:
    """Insert Child 1, Child 2 and Parent 1 referencing Child 1."""
    with session_scope(factory) as session:
        session.add(Parent(id=SEED_PARENT_ID, child=Child(id=SEED_FOREIGN_KEY)))
        for child_id in SEED_CHILD_IDS:
            if child_id != SEED_FOREIGN_KEY:
                session.add(Child(id=child_id))
    logger.info("store_seeded parents=1 children=%s", len(SEED_CHILD_IDS))


def count_rows(session: Session, model: type) -> int:
    return session.scalar(select(func.count()).select_from(model)) or 0


def take_snapshot(factory: sessionmaker) -> StoreSnapshot:
    with session_scope(factory) as session:
        parent_count = count_rows(session, Parent)
        child_count = count_rows(session, Child)
        foreign_key: Optional[int] = None
        child_id: Optional[int] = None
        if parent_count:
            parent = load_parent(session, eager=True)
            foreign_key = parent.child_id
            child_id = parent.child.id if parent.child is not None else None
        return StoreSnapshot(parent_count, child_count, foreign_key, child_id)


def run_scenario(
    variant: UpdateVariant | str,
    fk_new: int,
    eager: bool = True,
    store: Store | None = None,
    seed: bool = True,
) -> ScenarioOutcome:
    """Seed (optionally), update and verify on `store` or a new store.

    A store created here is disposed before returning, including on failure.
    """
    variant = UpdateVariant(variant)
    owned = store is None
    target = store or open_store()
    try:
        if seed:
            seed_store(target.session_factory)
        before = take_snapshot(target.session_factory)
        with target.session() as session:
            update_parent_foreign_key(session, fk_new, variant, eager=eager)
        after = take_snapshot(target.session_factory)
    finally:
        if owned:
            target.close()

    outcome = ScenarioOutcome(variant, fk_new, eager, before, after)
    logger.info(
        "scenario_complete variant=%s fk=%s eager=%s rows_preserved=%s after=%s",
        variant.value,
        fk_new,
        eager,
        outcome.rows_preserved,
        outcome.after.to_dict(),
    )
    return outcome


def compare_outcomes(first: ScenarioOutcome, second: ScenarioOutcome) -> list[str]:
    """Return the after-state fields on which two outcomes disagree."""
    a, b = first.after.to_dict(), second.after.to_dict()
    return sorted(key for key in a if a[key] != b[key])


__all__ = [
    "StoreSnapshot",
    "ScenarioOutcome",
    "Store",
    "open_store",
    "seed_store",
    "count_rows",
    "take_snapshot",
    "run_scenario",
    "compare_outcomes",
]
