"""
Backend request and response models.

Pydantic models for the bodies exchanged with the auth backend.
"""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SendOtpRequest(BaseModel):
    """Request body for POST /api/auth/send-otp."""

    email: str
    mode: Literal["signup"] = "signup"


class VerifyOtpRequest(BaseModel):
    """Request body for POST /api/auth/verify-otp."""

    email: str
    otp: str


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register."""

    name: str
    email: str
    password: str
    otp: str


class UserPayload(BaseModel):
    """User object returned by the register endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: str | int = Field(default="", validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    email: str
    role: str = "student"


class RegisterResponse(BaseModel):
    """Response body for a successful registration."""

    model_config = ConfigDict(extra="ignore")

    token: str
    user: UserPayload


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint."""

    model_config = ConfigDict(extra="ignore")

    message: str = ""
