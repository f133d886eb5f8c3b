"""Wizard step/response protocol schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NextStepRequest(BaseModel):
    """Answer for one wizard step.

    ``response`` is the only accepted name for the answer; unknown fields such
    as ``userResponse`` are rejected instead of being silently ignored.
    Content checks (empty answer, step range) happen in the wizard so they
    produce the wizard's own error messages.
    """

    model_config = ConfigDict(extra="forbid")

    response: str | None = None
    step: int | None = Field(None, strict=True)


class StepResponse(BaseModel):
    """Next question to show."""

    question: str
    options: list[str]
    step: int


class SermonResponse(BaseModel):
    """Final generated sermon."""

    sermon: str


class ErrorResponse(BaseModel):
    error: str
