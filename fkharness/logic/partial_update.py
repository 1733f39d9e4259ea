"""Partial update of a parent's foreign key.

The operator loads the first Parent (optionally with its Child eagerly
attached), changes only `child_id` and flushes. The Parent's `child`
association is left alone unless the caller nulls it.

Association-null policy: when `child` is set to None and `child_id` to a
non-null value in the same unit of work, SQLAlchemy's many-to-one dependency
processor applies the association change at flush and blanks `child_id`.
Because `parent.child_id` is NOT NULL, the flush raises
`sqlalchemy.exc.IntegrityError`; no row is deleted and the enclosing session
scope rolls the transaction back.
"""

from __future__ import annotations

import logging
from enum import Enum

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from fkharness.logic.mapper import Mapper, MapperConfiguration
from fkharness.models.dto import ParentDTO
from fkharness.models.entities import Child, Parent

logger = logging.getLogger(__name__)


class UpdateVariant(str, Enum):
    MAPPER = "mapper"
    MANUAL = "manual"
    MAPPER_WITH_ASSOCIATION = "mapper_with_association"
    MANUAL_WITH_ASSOCIATION = "manual_with_association"

    @property
    def uses_mapper(self) -> bool:
        return self in (UpdateVariant.MAPPER, UpdateVariant.MAPPER_WITH_ASSOCIATION)

    @property
    def nulls_association(self) -> bool:
        return self in (UpdateVariant.MAPPER_WITH_ASSOCIATION, UpdateVariant.MANUAL_WITH_ASSOCIATION)


def build_mapper(variant: UpdateVariant) -> Mapper:
    """Return the mapper a mapper-driven variant uses.

    `MAPPER` declares only `child_id`. `MAPPER_WITH_ASSOCIATION` follows the
    member-name convention, so the payload's `child` (None) is copied as well.
    """
    configuration = MapperConfiguration()
    if variant is UpdateVariant.MAPPER_WITH_ASSOCIATION:
        configuration.create_map(ParentDTO, Parent)
    else:
        configuration.create_map(ParentDTO, Parent, fields=("child_id",))
    configuration.assert_configuration_is_valid()
    return Mapper(configuration)


def load_parent(session: Session, eager: bool = True) -> Parent:
    """Fetch the first Parent row, raising NoResultFound when there is none."""
    stmt = select(Parent).order_by(Parent.id).limit(1)
    if eager:
        stmt = stmt.options(selectinload(Parent.child))
    return session.scalars(stmt).one()


def apply_foreign_key(parent: Parent, fk_new: int) -> Parent:
    parent.child_id = fk_new
    return parent


def null_association(parent: Parent) -> Parent:
    parent.child = None
    return parent


def map_foreign_key(mapper: Mapper, parent: Parent, fk_new: int) -> Parent:
    return mapper.map(ParentDTO(child_id=fk_new), parent)


def repoint_association(session: Session, parent: Parent, fk_new: int) -> Parent:
    """Point `parent.child` at Child `fk_new` when that row exists."""
    child = session.get(Child, fk_new)
    if child is not None:
        parent.child = child
    return parent


def update_parent_foreign_key(
    session: Session,
    fk_new: int,
    variant: UpdateVariant = UpdateVariant.MANUAL,
    eager: bool = True,
    resolve_association: bool = False,
) -> Parent:
    """Change the first Parent's foreign key to `fk_new` and flush.

    Commit belongs to the caller's session scope.
    """
    variant = UpdateVariant(variant)
    parent = load_parent(session, eager=eager)
    previous = parent.child_id

    if variant is UpdateVariant.MANUAL:
        apply_foreign_key(parent, fk_new)
    elif variant is UpdateVariant.MANUAL_WITH_ASSOCIATION:
        null_association(parent)
        apply_foreign_key(parent, fk_new)
    else:
        map_foreign_key(build_mapper(variant), parent, fk_new)

    if resolve_association and not variant.nulls_association:
        repoint_association(session, parent, fk_new)

    logger.info(
        "foreign_key_update variant=%s parent_id=%s previous=%s new=%s eager=%s",
        variant.value,
        parent.id,
        previous,
        fk_new,
        eager,
    )
    session.flush()
    return parent


__all__ = [
    "UpdateVariant",
    "build_mapper",
    "load_parent",
    "apply_foreign_key",
    "null_association",
    "map_foreign_key",
    "repoint_association",
    "update_parent_foreign_key",
]
