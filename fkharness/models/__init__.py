from fkharness.models.dto import ChildDTO, ParentDTO
from fkharness.models.entities import Base, Child, Parent, assigned_key

__all__ = ["Base", "Child", "Parent", "assigned_key", "ChildDTO", "ParentDTO"]
