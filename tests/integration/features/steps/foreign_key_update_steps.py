"""Behave step definitions for the foreign-key update feature.

Steps drive the harness directly against the per-scenario store opened in
`environment.before_scenario`. Outcomes are appended to `context.outcomes`
so comparison steps can inspect every update made in a scenario.
"""

from __future__ import annotations

from behave import given, then, use_step_matcher, when  # type: ignore
from sqlalchemy.exc import IntegrityError

from fkharness.logic.harness import compare_outcomes, open_store, run_scenario, seed_store, take_snapshot


use_step_matcher("re")


@given(r"a store seeded with children 1 and 2 and parent 1 referencing child 1")
def step_given_seeded_store(context):
    seed_store(context.store.session_factory)


@when(
    r'the foreign key is set to (?P<fk>\d+) using the "(?P<variant>[a-z_]+)" update '
    r"with the association (?P<loading>loaded|unloaded)(?P<fresh> on a fresh store)?"
)
def step_when_foreign_key_set(context, fk, variant, loading, fresh=None):
    eager = loading == "loaded"
    try:
        if fresh:
            with open_store(context.test_database_url) as other:
                seed_store(other.session_factory)
                outcome = run_scenario(variant, int(fk), eager=eager, store=other, seed=False)
        else:
            outcome = run_scenario(variant, int(fk), eager=eager, store=context.store, seed=False)
    except IntegrityError as exc:
        context.error = exc
        return
    context.outcomes.append(outcome)


@then(r"the store holds (?P<parents>\d+) parents? and (?P<children>\d+) children")
def step_then_store_holds(context, parents, children):
    snap = take_snapshot(context.store.session_factory)
    assert snap.parent_count == int(parents), f"expected {parents} parents, got {snap.parent_count}"
    assert snap.child_count == int(children), f"expected {children} children, got {snap.child_count}"


@then(r"the parent references child (?P<fk>\d+)")
def step_then_parent_references(context, fk):
    snap = take_snapshot(context.store.session_factory)
    assert snap.foreign_key == int(fk), f"expected foreign key {fk}, got {snap.foreign_key}"


@then(r"the reloaded association resolves to child (?P<fk>\d+)")
def step_then_association_resolves(context, fk):
    snap = take_snapshot(context.store.session_factory)
    assert snap.child_id == int(fk), f"expected child {fk}, got {snap.child_id}"


@then(r"both updates end in the same state")
def step_then_same_state(context):
    assert context.error is None, f"unexpected persistence error: {context.error}"
    assert len(context.outcomes) == 2, f"expected two outcomes, got {len(context.outcomes)}"
    first, second = context.outcomes
    diff = compare_outcomes(first, second)
    assert diff == [], f"outcomes differ on {diff}"


@then(r"the update is rejected by the store")
def step_then_rejected(context):
    assert isinstance(context.error, IntegrityError), "expected the flush to be rejected"
    assert "NOT NULL" in str(context.error.orig)
