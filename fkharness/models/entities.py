"""ORM models for Parent and Child with caller-assigned primary keys."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


def assigned_key() -> Column:
    """Integer primary key whose value is always supplied by the caller."""
    return Column(Integer, primary_key=True, autoincrement=False)


class Child(Base):  # type: ignore[valid-type]
    __tablename__ = "child"

    id = assigned_key()

    def __repr__(self) -> str:
        return f"Child(id={self.id!r})"


class Parent(Base):  # type: ignore[valid-type]
    __tablename__ = "parent"

    id = assigned_key()
    child_id = Column(Integer, ForeignKey("child.id"), nullable=False)
    # Plain many-to-one: no delete or delete-orphan cascade toward Child
    child = relationship(Child, lazy="select")

    def __repr__(self) -> str:
        return f"Parent(id={self.id!r}, child_id={self.child_id!r})"


__all__ = ["Base", "Child", "Parent", "assigned_key"]
