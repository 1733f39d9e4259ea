"""Functional tests for foreign-key partial updates.

Each test seeds Child 1, Child 2 and Parent 1 -> Child 1 on a fresh store,
performs one update variant and checks row counts and field values. The
association-null variants are asserted on their documented outcome: the
flush blanks the NOT NULL foreign key, the store rejects it and the unit of
work is rolled back without deleting anything.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from fkharness.logic.harness import compare_outcomes, run_scenario, take_snapshot
from fkharness.logic.partial_update import (
    UpdateVariant,
    build_mapper,
    update_parent_foreign_key,
)

SAFE_VARIANTS = [UpdateVariant.MAPPER, UpdateVariant.MANUAL]
NULLING_VARIANTS = [UpdateVariant.MAPPER_WITH_ASSOCIATION, UpdateVariant.MANUAL_WITH_ASSOCIATION]


@pytest.mark.parametrize("eager", [True, False])
@pytest.mark.parametrize("variant", SAFE_VARIANTS)
def test_noop_foreign_key_update_keeps_rows(store, variant, eager):
    outcome = run_scenario(variant, 1, eager=eager, store=store)
    assert outcome.rows_preserved
    assert outcome.after.parent_count == 1
    assert outcome.after.child_count == 2
    assert outcome.after.foreign_key == 1
    assert outcome.after.child_id == 1


@pytest.mark.parametrize("eager", [True, False])
@pytest.mark.parametrize("variant", SAFE_VARIANTS)
def test_changed_foreign_key_repoints_without_deleting(store, variant, eager):
    outcome = run_scenario(variant, 2, eager=eager, store=store)
    assert outcome.before.foreign_key == 1
    assert outcome.rows_preserved
    assert outcome.after.parent_count == 1
    assert outcome.after.child_count == 2
    assert outcome.after.foreign_key == 2
    assert outcome.after.child_id == 2
    assert outcome.after.consistent


@pytest.mark.parametrize("eager", [True, False])
@pytest.mark.parametrize("fk_new", [1, 2])
def test_mapper_and_manual_assignment_are_equivalent(fk_new, eager):
    mapped = run_scenario(UpdateVariant.MAPPER, fk_new, eager=eager)
    manual = run_scenario(UpdateVariant.MANUAL, fk_new, eager=eager)
    assert compare_outcomes(mapped, manual) == []
    assert mapped.after == manual.after


@pytest.mark.parametrize("eager", [True, False])
@pytest.mark.parametrize("fk_new", [1, 2])
@pytest.mark.parametrize("variant", NULLING_VARIANTS)
def test_nulling_association_is_rejected_and_rolled_back(store, variant, fk_new, eager):
    with pytest.raises(IntegrityError) as excinfo:
        run_scenario(variant, fk_new, eager=eager, store=store)
    assert "NOT NULL" in str(excinfo.value.orig)

    snap = take_snapshot(store.session_factory)
    assert snap.parent_count == 1
    assert snap.child_count == 2
    assert snap.foreign_key == 1
    assert snap.child_id == 1


def test_noop_update_is_idempotent(store):
    first = run_scenario(UpdateVariant.MAPPER, 1, store=store)
    second = run_scenario(UpdateVariant.MAPPER, 1, store=store, seed=False)
    assert first.after == second.after
    assert second.after.parent_count == 1
    assert second.after.child_count == 2


def test_association_stays_stale_until_reload(seeded_store):
    with seeded_store.session() as session:
        parent = update_parent_foreign_key(session, 2, UpdateVariant.MAPPER, eager=True)
        assert parent.child_id == 2
        assert parent.child.id == 1

    snap = take_snapshot(seeded_store.session_factory)
    assert snap.foreign_key == 2
    assert snap.child_id == 2


def test_resolve_association_repoints_in_session(seeded_store):
    with seeded_store.session() as session:
        parent = update_parent_foreign_key(
            session, 2, UpdateVariant.MANUAL, eager=True, resolve_association=True
        )
        assert parent.child_id == 2
        assert parent.child.id == 2

    snap = take_snapshot(seeded_store.session_factory)
    assert (snap.parent_count, snap.child_count, snap.foreign_key, snap.child_id) == (1, 2, 2, 2)


def test_foreign_key_to_missing_child_is_rejected(store):
    with pytest.raises(IntegrityError) as excinfo:
        run_scenario(UpdateVariant.MANUAL, 99, store=store)
    assert "FOREIGN KEY" in str(excinfo.value.orig)
    assert take_snapshot(store.session_factory).foreign_key == 1


def test_variant_accepts_string_values(store):
    outcome = run_scenario("mapper", 2, store=store)
    assert outcome.variant is UpdateVariant.MAPPER
    assert outcome.to_dict()["after"]["foreign_key"] == 2


def test_variant_flags():
    assert UpdateVariant.MAPPER.uses_mapper and not UpdateVariant.MAPPER.nulls_association
    assert not UpdateVariant.MANUAL.uses_mapper
    assert UpdateVariant.MAPPER_WITH_ASSOCIATION.nulls_association
    assert UpdateVariant.MANUAL_WITH_ASSOCIATION.nulls_association


def test_build_mapper_declares_association_only_for_convention_variant():
    safe = build_mapper(UpdateVariant.MAPPER).configuration.type_maps[0]
    nulling = build_mapper(UpdateVariant.MAPPER_WITH_ASSOCIATION).configuration.type_maps[0]
    assert safe.fields == ("child_id",)
    assert "child" in nulling.fields
