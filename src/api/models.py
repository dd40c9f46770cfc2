"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, EmailStr, Field


class SendCodeRequest(BaseModel):
    """Request model for sending a verification code."""

    email: EmailStr


class VerifyRequest(BaseModel):
    """Request model for redeeming a code and receiving the document."""

    email: EmailStr
    code: str = Field(
        ...,
        min_length=6,
        max_length=6,
        pattern=r"^[0-9]{6}$",
        description="6-digit verification code",
    )


class MessageResponse(BaseModel):
    """Response model for a successful operation."""

    ok: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    ok: bool = False
    message: str
