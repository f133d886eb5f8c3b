"""Wizard API routes: one question per request, sermon on the last step."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import JSONResponse

from sermon_wizard.api.deps import (
    enforce_rate_limit,
    get_session_store,
    get_wizard,
    require_access,
    set_conversation_cookie,
)
from sermon_wizard.schemas.wizard import (
    ErrorResponse,
    NextStepRequest,
    SermonResponse,
    StepResponse,
)
from sermon_wizard.services.wizard import (
    NextQuestion,
    SermonWizard,
    SessionStore,
    WizardError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def question_payload(question: NextQuestion) -> dict:
    return StepResponse(
        question=question.question,
        options=list(question.options),
        step=question.step,
    ).model_dump()


@router.post(
    "/conversation",
    response_model=StepResponse,
    dependencies=[Depends(require_access)],
)
def start_conversation(
    store: SessionStore = Depends(get_session_store),
    wizard: SermonWizard = Depends(get_wizard),
    conversation_id: str | None = Cookie(None),
) -> JSONResponse:
    """Start a fresh conversation and return the first question."""
    store.discard(conversation_id)
    session = store.create()
    response = JSONResponse(content=question_payload(wizard.first_question()))
    set_conversation_cookie(response, session.conversation_id)
    return response


@router.post(
    "/next-step",
    response_model=StepResponse | SermonResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    dependencies=[Depends(require_access), Depends(enforce_rate_limit)],
)
async def next_step(
    body: NextStepRequest,
    store: SessionStore = Depends(get_session_store),
    wizard: SermonWizard = Depends(get_wizard),
    conversation_id: str | None = Cookie(None),
) -> JSONResponse:
    """Record the answer for ``step`` and return the next question or the sermon."""
    session = store.get_or_create(conversation_id)
    try:
        outcome = await wizard.advance(session, body.step, body.response)
    except WizardError as exc:
        logger.info("Wizard step rejected: status=%d error=%s", exc.status_code, exc.message)
        response = JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    else:
        if isinstance(outcome, NextQuestion):
            content = question_payload(outcome)
        else:
            content = SermonResponse(sermon=outcome.sermon).model_dump()
        response = JSONResponse(content=content)

    # Re-set on every step so the cookie lifetime tracks session inactivity
    set_conversation_cookie(response, session.conversation_id)
    return response
