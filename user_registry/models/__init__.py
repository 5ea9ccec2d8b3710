"""SQLAlchemy models."""

from user_registry.models.user import User

__all__ = ["User"]
