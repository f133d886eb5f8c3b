"""Pydantic request/response schemas."""

from sermon_wizard.schemas.auth import LoginRequest, TokenResponse
from sermon_wizard.schemas.verses import (
    VerseCategoryResponse,
    VerseCategorySummary,
    VerseGroupOut,
    VerseIndexResponse,
    VerseOut,
)
from sermon_wizard.schemas.wizard import (
    ErrorResponse,
    NextStepRequest,
    SermonResponse,
    StepResponse,
)

__all__ = [
    "ErrorResponse",
    "LoginRequest",
    "NextStepRequest",
    "SermonResponse",
    "StepResponse",
    "TokenResponse",
    "VerseCategoryResponse",
    "VerseCategorySummary",
    "VerseGroupOut",
    "VerseIndexResponse",
    "VerseOut",
]
