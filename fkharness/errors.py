"""Exceptions raised by the field-copying mapper.

Persistence failures are not wrapped: SQLAlchemy exceptions propagate to the
caller unchanged.
"""

from __future__ import annotations


class FkHarnessError(Exception):
    """Base class for harness errors."""


class MappingError(FkHarnessError):
    """Raised when a mapping is requested for an unregistered type pair."""

    def __init__(self, source_type: type, target_type: type) -> None:
        self.source_type = source_type
        self.target_type = target_type
        super().__init__(
            f"Missing type map configuration: {source_type.__name__} -> {target_type.__name__}"
        )


class MappingConfigurationError(FkHarnessError):
    """Raised when a type map declares fields that do not exist."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("Invalid mapper configuration: " + "; ".join(self.problems))


__all__ = ["FkHarnessError", "MappingError", "MappingConfigurationError"]
