"""User persistence service."""

import logging
import sqlite3
from typing import Any

from sqlalchemy import Row, insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from user_registry.models.user import User

logger = logging.getLogger(__name__)

# SQLSTATE for unique_violation in PostgreSQL
PG_UNIQUE_VIOLATION = "23505"


class UserStoreError(Exception):
    """The user store could not complete the operation."""


class EmailAlreadyRegisteredError(UserStoreError):
    """A user with the given email already exists."""

    def __init__(self, email: str):
        super().__init__(f"email already registered: {email}")
        self.email = email


def is_unique_violation(error: IntegrityError) -> bool:
    """Check the driver error code for a unique constraint violation."""
    orig: Any = error.orig
    # psycopg 3 exposes sqlstate, psycopg2 exposes pgcode
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == PG_UNIQUE_VIOLATION
    return getattr(orig, "sqlite_errorcode", None) == sqlite3.SQLITE_CONSTRAINT_UNIQUE


class UserService:
    """Service for reading and writing users."""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> list[Row]:
        """Get the names of all users, most recently created first."""
        try:
            return (
                self.db.query(User.name)
                .order_by(User.created_at.desc(), User.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UserStoreError("failed to list users") from e

    def create_user(self, name: str, email: str) -> Row:
        """Insert a user and return its id, name and email."""
        stmt = (
            insert(User)
            .values(name=name, email=email)
            .returning(User.id, User.name, User.email)
        )
        try:
            row = self.db.execute(stmt).one()
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                raise EmailAlreadyRegisteredError(email) from e
            raise UserStoreError("failed to create user") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UserStoreError("failed to create user") from e

        logger.info(f"Created user {row.id}")
        return row
