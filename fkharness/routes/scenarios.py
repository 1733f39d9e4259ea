"""Scenario endpoints: run one foreign-key update variant on a fresh store."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body
from pydantic import BaseModel, Field

from fkharness.logic.harness import run_scenario
from fkharness.logic.partial_update import UpdateVariant


router = APIRouter()
logger = logging.getLogger(__name__)


class ScenarioRequest(BaseModel):
    foreign_key: int = Field(gt=0)
    eager: bool = True


@router.get(
    "/scenarios",
    summary="List the documented update variants",
    operation_id="listScenarios",
    tags=["Scenarios"],
)
def list_scenarios():
    return {
        "variants": [
            {
                "variant": v.value,
                "uses_mapper": v.uses_mapper,
                "nulls_association": v.nulls_association,
            }
            for v in UpdateVariant
        ]
    }


@router.post(
    "/scenarios/{variant}",
    summary="Seed a fresh store, update the parent's foreign key and report row counts",
    operation_id="runScenario",
    tags=["Scenarios"],
)
def run_scenario_endpoint(variant: UpdateVariant, payload: ScenarioRequest = Body(...)):
    logger.info("scenario_requested variant=%s fk=%s eager=%s", variant.value, payload.foreign_key, payload.eager)
    outcome = run_scenario(variant, payload.foreign_key, eager=payload.eager)
    return outcome.to_dict()
