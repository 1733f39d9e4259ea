"""Update operator, field-copying mapper and verification harness."""

from fkharness.logic.harness import (
    ScenarioOutcome,
    Store,
    StoreSnapshot,
    compare_outcomes,
    count_rows,
    open_store,
    run_scenario,
    seed_store,
    take_snapshot,
)
from fkharness.logic.mapper import Mapper, MapperConfiguration, TypeMap
from fkharness.logic.partial_update import UpdateVariant, update_parent_foreign_key

__all__ = [
    "Mapper",
    "MapperConfiguration",
    "TypeMap",
    "UpdateVariant",
    "update_parent_foreign_key",
    "ScenarioOutcome",
    "Store",
    "StoreSnapshot",
    "compare_outcomes",
    "count_rows",
    "open_store",
    "run_scenario",
    "seed_store",
    "take_snapshot",
]
