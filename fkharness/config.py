"""Configuration utilities for the harness.

This module loads configuration with the following rules:
- Primary source: `fkharness_config.json` at the project root (optional).
- Overrides: environment variables, including any loaded from a local `.env`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


ROOT_CONFIG = Path("fkharness_config.json")
DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"
logger = logging.getLogger(__name__)


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _truthy(text: object) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    url: str = Field(default=DEFAULT_DATABASE_URL)
    sqlite_foreign_keys: bool = Field(default=True)
    echo_sql: bool = Field(default=False)

    @field_validator("url")
    @classmethod
    def url_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.url must be a non-empty string")
        return v.strip()

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_in_memory(self) -> bool:
        return self.is_sqlite and ":memory:" in self.url


class ScenarioConfig(BaseModel):
    eager_load: bool = Field(default=True)
    default_foreign_key: int = Field(default=2, gt=0)


class HarnessConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    scenario: ScenarioConfig = Field(default_factory=ScenarioConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config(config_path: Path | None = None) -> HarnessConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables (a local `.env` never overrides real ones)
    2) `fkharness_config.json` at the project root
    3) Defaults: shared in-memory SQLite with foreign keys enforced
    """

    load_dotenv(find_dotenv(usecwd=True), override=False)
    base = _read_json_file(config_path or ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    # Database
    url = _env("TEST_DATABASE_URL") or _env("DATABASE_URL") or _base("database.url") or DEFAULT_DATABASE_URL
    foreign_keys_text = _env("FKHARNESS_SQLITE_FOREIGN_KEYS") or _base("database.sqlite_foreign_keys", "true")
    echo_text = _env("FKHARNESS_ECHO_SQL") or _base("database.echo_sql", "false")

    # Scenario defaults
    eager_text = _env("FKHARNESS_EAGER_LOAD") or _base("scenario.eager_load", "true")
    fk_text = _env("FKHARNESS_DEFAULT_FOREIGN_KEY") or _base("scenario.default_foreign_key", "2")

    try:
        cfg = HarnessConfig(
            database=DatabaseConfig(
                url=url,
                sqlite_foreign_keys=_truthy(foreign_keys_text),
                echo_sql=_truthy(echo_text),
            ),
            scenario=ScenarioConfig(
                eager_load=_truthy(eager_text),
                default_foreign_key=str(fk_text).strip(),
            ),
        )
        return cfg
    except PydanticValidationError as e:
        logger.error("Invalid harness configuration: %s", e)
        raise


__all__ = [
    "HarnessConfig",
    "DatabaseConfig",
    "ScenarioConfig",
    "DEFAULT_DATABASE_URL",
    "load_config",
]
