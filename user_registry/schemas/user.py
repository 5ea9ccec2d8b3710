"""User schemas."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class UserCreate(BaseModel):
    """Create a new user."""

    name: StrictStr = Field(..., min_length=1)
    email: StrictStr = Field(..., min_length=1)


class UserResponse(BaseModel):
    """A newly created user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class UserNameResponse(BaseModel):
    """Entry in the user listing."""

    model_config = ConfigDict(from_attributes=True)

    name: str


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing request."""

    error: str
