"""Pydantic schemas for API requests and responses."""

from user_registry.schemas.user import ErrorResponse, UserCreate, UserNameResponse, UserResponse

__all__ = [
    "UserCreate",
    "UserResponse",
    "UserNameResponse",
    "ErrorResponse",
]
