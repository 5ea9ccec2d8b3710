"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_registry.api import users
from user_registry.config import Settings, get_settings
from user_registry.database import create_db_engine, create_session_factory, init_db

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_ERROR = "name and email are required"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    engine = create_db_engine(app.state.settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # A failed bootstrap is logged by init_db; requests then fail individually
    await run_in_threadpool(init_db, engine)

    yield

    engine.dispose()
    logger.info("Database connection pool closed")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors in the {"error": ...} envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject incomplete request bodies with 400."""
    logger.debug(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": REQUIRED_FIELDS_ERROR},
    )


async def catch_unhandled_errors(request: Request, call_next) -> Response:
    """Log unexpected failures and answer with an opaque 500.

    Installed inside the CORS middleware so the 500 still carries CORS headers.
    """
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": users.INTERNAL_ERROR},
        )


def build_openapi(app: FastAPI) -> dict[str, Any]:
    """Generate the OpenAPI schema without the 422 responses the app never sends."""
    if app.openapi_schema:
        return app.openapi_schema

    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    for path_item in schema.get("paths", {}).values():
        for operation in path_item.values():
            operation.get("responses", {}).pop("422", None)
    component_schemas = schema.get("components", {}).get("schemas", {})
    component_schemas.pop("HTTPValidationError", None)
    component_schemas.pop("ValidationError", None)

    app.openapi_schema = schema
    return schema


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for the given settings."""
    settings = settings or get_settings()

    app = FastAPI(
        title="User Registry API",
        description="List and create users backed by a relational table",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.openapi = partial(build_openapi, app)

    # Added before CORS so that CORS wraps it
    app.middleware("http")(catch_unhandled_errors)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register routers
    app.include_router(users.router)

    return app
