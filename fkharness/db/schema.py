"""Schema creation from the declarative entity model.

Tables are created by reflecting the mapped entities at startup. There is no
migration journal; every store is ephemeral.
"""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from fkharness.models.entities import Base

logger = logging.getLogger(__name__)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)
    logger.info("schema_created tables=%s", ",".join(sorted(Base.metadata.tables)))


def drop_schema(engine: Engine) -> None:
    Base.metadata.drop_all(engine)
    logger.info("schema_dropped tables=%s", ",".join(sorted(Base.metadata.tables)))
