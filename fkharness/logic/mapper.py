"""Generic field-copying mapper from pydantic payloads onto existing objects.

A type map declares which fields flow from a source model to a target type.
Mapping copies exactly those fields onto a pre-existing target instance and
never touches anything else on the target. When no field list is given, the
map follows the member-name convention: every source field that the target
also declares is copied, including fields whose source value is None.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields as dataclass_fields, is_dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect

from fkharness.errors import MappingConfigurationError, MappingError

logger = logging.getLogger(__name__)


def _source_fields(source_type: type) -> Tuple[str, ...]:
    fields = getattr(source_type, "model_fields", None)
    if not isinstance(fields, dict):
        raise TypeError(f"{source_type.__name__} is not a pydantic model")
    return tuple(fields)


def _target_members(target_type: type) -> Dict[str, Optional[type]]:
    """Return target member names mapped to the related class (relationships only)."""
    mapper = sa_inspect(target_type, raiseerr=False)
    if mapper is not None and hasattr(mapper, "attrs"):
        members: Dict[str, Optional[type]] = {key: None for key in mapper.attrs.keys()}
        for rel in mapper.relationships:
            members[rel.key] = rel.mapper.class_
        return members
    model_fields = getattr(target_type, "model_fields", None)
    if isinstance(model_fields, dict):
        return {name: None for name in model_fields}
    if is_dataclass(target_type):
        return {f.name: None for f in dataclass_fields(target_type)}
    return {name: None for name in vars(target_type) if not name.startswith("_")}


@dataclass(frozen=True)
class TypeMap:
    source_type: type
    target_type: type
    fields: Tuple[str, ...]
    explicit: bool

    def describe(self) -> str:
        return f"{self.source_type.__name__}->{self.target_type.__name__}[{','.join(self.fields)}]"


class MapperConfiguration:
    """Registry of type maps keyed by (source type, target type)."""

    def __init__(self) -> None:
        self._maps: Dict[Tuple[type, type], TypeMap] = {}

    def create_map(
        self,
        source_type: type,
        target_type: type,
        fields: Iterable[str] | None = None,
    ) -> TypeMap:
        source_fields = _source_fields(source_type)
        if fields is None:
            members = _target_members(target_type)
            declared = tuple(name for name in source_fields if name in members)
            explicit = False
        else:
            declared = tuple(fields)
            explicit = True
        type_map = TypeMap(source_type, target_type, declared, explicit)
        self._maps[(source_type, target_type)] = type_map
        logger.debug("type_map_registered map=%s", type_map.describe())
        return type_map

    def find_map(self, source_type: type, target_type: type | None = None) -> TypeMap | None:
        if target_type is not None:
            return self._maps.get((source_type, target_type))
        candidates = [m for (src, _), m in self._maps.items() if src is source_type]
        return candidates[0] if len(candidates) == 1 else None

    def assert_configuration_is_valid(self) -> None:
        problems: list[str] = []
        for type_map in self._maps.values():
            source_fields = set(_source_fields(type_map.source_type))
            members = _target_members(type_map.target_type)
            for name in type_map.fields:
                if name not in source_fields:
                    problems.append(f"{type_map.source_type.__name__}.{name} does not exist")
                if name not in members:
                    problems.append(f"{type_map.target_type.__name__}.{name} does not exist")
        if problems:
            raise MappingConfigurationError(problems)

    @property
    def type_maps(self) -> Tuple[TypeMap, ...]:
        return tuple(self._maps.values())


class Mapper:
    """Applies type maps from a MapperConfiguration."""

    def __init__(self, configuration: MapperConfiguration) -> None:
        self.configuration = configuration

    def map(self, source: BaseModel, target: Any) -> Any:
        """Copy the declared fields of `source` onto `target` and return it."""
        type_map = self.configuration.find_map(type(source), type(target))
        if type_map is None:
            raise MappingError(type(source), type(target))
        related = _target_members(type_map.target_type)
        for name in type_map.fields:
            value = getattr(source, name)
            if isinstance(value, BaseModel):
                value = self._map_nested(value, getattr(target, name, None), related.get(name))
            setattr(target, name, value)
        logger.debug("mapped map=%s", type_map.describe())
        return target

    def map_new(self, source: BaseModel, target_type: type) -> Any:
        if self.configuration.find_map(type(source), target_type) is None:
            raise MappingError(type(source), target_type)
        return self.map(source, target_type())

    def _map_nested(self, value: BaseModel, existing: Any, related_type: type | None) -> Any:
        type_map = self.configuration.find_map(type(value), related_type)
        if type_map is None:
            raise MappingError(type(value), related_type or object)
        if existing is not None and isinstance(existing, type_map.target_type):
            return self.map(value, existing)
        return self.map(value, type_map.target_type())


__all__ = ["MapperConfiguration", "Mapper", "TypeMap"]
