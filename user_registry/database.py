"""Database configuration and session management."""

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from user_registry.config import Settings

logger = logging.getLogger(__name__)

Base: Any = declarative_base()


def _connect_args(settings: Settings) -> dict[str, Any]:
    """Build driver connect arguments for the configured backend."""
    backend = make_url(settings.database_url).get_backend_name()
    if backend == "sqlite":
        return {"check_same_thread": False}
    if backend != "postgresql":
        return {}

    connect_args: dict[str, Any] = {
        "sslmode": settings.database_sslmode,
        "connect_timeout": settings.database_connect_timeout,
    }
    if settings.database_statement_timeout_ms:
        connect_args["options"] = f"-c statement_timeout={settings.database_statement_timeout_ms}"
    return connect_args


def create_db_engine(settings: Settings) -> Engine:
    """Create the process-wide engine and its connection pool."""
    return create_engine(
        settings.database_url,
        connect_args=_connect_args(settings),
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to the given engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine) -> bool:
    """Create the users table if it does not exist yet.

    Safe to call on every startup: existing tables are left untouched.
    Failures are logged and reported through the return value instead of
    raised, so the server keeps serving and requests fail individually.
    """
    # Import all models here so they are registered with Base.metadata
    from user_registry import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception("Failed to create the users table")
        return False

    logger.info("users table verified/created")
    return True
