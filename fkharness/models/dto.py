"""Pydantic models for detached update payloads.

These mirror the entity shapes without the primary key of the parent, which
is the identity of the row being updated and never part of the payload.
"""

from __future__ import annotations

from pydantic import BaseModel


class ChildDTO(BaseModel):
    id: int


class ParentDTO(BaseModel):
    child_id: int
    child: ChildDTO | None = None


__all__ = ["ChildDTO", "ParentDTO"]
