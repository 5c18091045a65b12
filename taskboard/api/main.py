"""
Entry point of the Taskboard API.

`create_app` wires the routers, the exception handlers and the read-only
settings together; `app` is the instance built from the configured settings.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from taskboard.api.routers import health, tasks
from taskboard.auth import AuthorizationGate
from taskboard.configs import Settings, get_settings
from taskboard.db_models import init_db
from taskboard.errors import ApiError
from taskboard.exception_handlers import api_error, http_exception, unhandled_exception, validation_exception
from taskboard.logging_setup import setup_logging


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        if settings.secret_key == Settings.secret_key:
            logger.warning("Using the default secret key; set TASKBOARD_SECRET_KEY")
        init_db(settings.database_path)  # Initialize database
        yield

    app = FastAPI(
        lifespan=lifespan,
        title="Taskboard API",
        version="0.1.0",
        exception_handlers={
            ApiError: api_error,
            HTTPException: http_exception,
            RequestValidationError: validation_exception,
            Exception: unhandled_exception,
        },
    )
    app.state.settings = settings
    app.state.gate = AuthorizationGate.from_settings(settings)

    app.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
    app.include_router(health.router, tags=["Health"])
    return app


app = create_app()
