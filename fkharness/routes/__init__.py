"""APIRouter registration for the diagnostic API."""

from __future__ import annotations

from fastapi import APIRouter

from fkharness.routes.scenarios import router as scenarios_router


api_router = APIRouter()
api_router.include_router(scenarios_router)

__all__ = ["api_router"]
