"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr
    password: str = Field(
        ..., min_length=6, max_length=20, description="User password (6-20 characters)"
    )


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    id: str
    name: str
    email: str
    verified: bool
    message: str


class VerifyRequest(BaseModel):
    """
    Request model for email verification.

    Length is checked by the domain so malformed codes get a 400, not a 422.
    """

    code: str = Field(..., description="64-character verification code from the email link")


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    verified: bool


class VerifyResponse(BaseModel):
    """Response model for verification, fresh or already verified."""

    success: bool
    message: str
    user: UserResponse


class LoginRequest(BaseModel):
    """Request model for credential login."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Response model for successful login."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    access_token: str = Field(..., alias="accessToken")


class ProtectedResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
