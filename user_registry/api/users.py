"""User API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from user_registry.database import get_db
from user_registry.schemas.user import ErrorResponse, UserCreate, UserNameResponse, UserResponse
from user_registry.services.users import EmailAlreadyRegisteredError, UserService, UserStoreError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal server error"

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
) -> UserService:
    """Get user service with dependencies."""
    return UserService(db)


@router.get(
    "",
    response_model=list[UserNameResponse],
    responses={500: {"model": ErrorResponse}},
)
def list_users(
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get the names of all users, newest first."""
    try:
        rows = service.list_users()
    except UserStoreError:
        logger.exception("Failed to list users")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR,
        ) from None

    return [UserNameResponse.model_validate(row) for row in rows]


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def create_user(
    user_data: UserCreate,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Create a new user."""
    try:
        row = service.create_user(user_data.name, user_data.email)
    except EmailAlreadyRegisteredError:
        logger.info("Rejected duplicate email on user creation")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="this email is already registered",
        ) from None
    except UserStoreError:
        logger.exception("Failed to create user")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR,
        ) from None

    return UserResponse.model_validate(row)
