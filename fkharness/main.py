"""Diagnostic FastAPI application for the foreign-key update harness.

Each request runs one scenario against its own ephemeral store, so requests
never share database state.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from fkharness.config import load_config
from fkharness.http.problem import (
    handle_http_exception,
    handle_integrity_error,
    handle_request_validation_error,
    handle_unexpected_error,
)
from fkharness.logging_setup import configure_logging
from fkharness.routes import api_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    # Configure global logging before app instantiation so all modules emit
    cfg = load_config()
    configure_logging(echo_sql=cfg.database.echo_sql)
    app = FastAPI(title="fk-update-harness")
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    app.include_router(api_router)
    logger.info("app_created database_url=%s", cfg.database.url)
    return app
