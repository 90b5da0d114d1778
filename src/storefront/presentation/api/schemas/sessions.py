"""Session schemas for request/response models.

Request fields the handlers validate themselves (email, password, token)
are optional here, so a missing value yields a user error envelope
instead of a schema validation error.
"""

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    email: str | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    password: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "first_name": "Ada",
                "last_name": "Lovelace",
                "email": "ada@example.com",
                "age": 36,
                "password": "Analytical@1843",
            },
        },
    )


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: str | None = None
    password: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "ada@example.com",
                "password": "Analytical@1843",
            },
        },
    )


class RestorePasswordRequest(BaseModel):
    """Request schema for requesting a restore-password email."""

    email: str | None = None


class ResetPasswordRequest(BaseModel):
    """Request schema for resetting a password with a token."""

    token: str | None = None
    password: str | None = None


class UserResponse(BaseModel):
    """Password-free user data."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    age: int | None = None
    role: str

    model_config = ConfigDict(from_attributes=True)


class SuccessPayloadResponse(BaseModel):
    status: Literal["success"] = "success"
    payload: Any


class SuccessMessageResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error: str
