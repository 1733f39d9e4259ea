"""Foreign-key partial update regression harness.

This package reproduces an interaction between an ORM's change tracking and a
generic field-copying mapper: updating a parent's foreign-key scalar through
the mapper must not delete (or blank out) the related child on flush. Storage
lives in `fkharness/db/`, entities and DTOs in `fkharness/models/`, and the
update operator plus verification harness in `fkharness/logic/`.
"""

from __future__ import annotations

from fkharness.main import create_app

__all__ = ["create_app"]
