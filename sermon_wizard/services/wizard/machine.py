"""
Sermon wizard state machine.

Pipeline: topic → audience → sermon type → duration → generation

``transition`` is the pure part: it validates one (step, answer) pair, records
it on the conversation session and says what happens next. ``SermonWizard``
wraps it with the side effects: the single bounded LLM call on the last step
and clearing the session once a sermon has been produced.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

from sermon_wizard.llm.errors import ConfigurationError, UpstreamError
from sermon_wizard.llm.provider import LLMProvider
from sermon_wizard.prompts.loader import render_prompt
from sermon_wizard.services.wizard.errors import (
    GenerationFailedError,
    MissingFieldsError,
    WizardValidationError,
)
from sermon_wizard.services.wizard.session_store import ConversationSession
from sermon_wizard.services.wizard.steps import (
    FIRST_STEP,
    LAST_STEP,
    STEP_DEFINITIONS,
    Step,
    is_long_duration,
    parse_step,
)

logger = logging.getLogger(__name__)

SERMON_PROMPT_TEMPLATE = "sermon_v1"
DEFAULT_TIMEOUT_MS = 30000


class WizardState(IntEnum):
    AWAITING_TOPIC = 1
    AWAITING_AUDIENCE = 2
    AWAITING_SERMON_TYPE = 3
    AWAITING_DURATION = 4
    COMPLETED = 5


def current_state(session: ConversationSession) -> WizardState:
    """First step still missing an answer, or COMPLETED when all are set."""
    for step in Step:
        if session.get_answer(step) is None:
            return WizardState(step.value)
    return WizardState.COMPLETED


@dataclass(frozen=True)
class NextQuestion:
    question: str
    options: tuple[str, ...]
    step: int

    @classmethod
    def for_step(cls, step: Step) -> NextQuestion:
        definition = STEP_DEFINITIONS[step]
        return cls(
            question=definition.prompt_text,
            options=definition.options,
            step=definition.step_number,
        )


@dataclass(frozen=True)
class GenerationRequest:
    """The four collected answers, ready to be turned into a prompt."""

    topic: str
    audience: str
    sermon_type: str
    duration: str


@dataclass(frozen=True)
class SermonResult:
    sermon: str


def _clean_answer(answer: object) -> str:
    if not isinstance(answer, str) or not answer.strip():
        raise WizardValidationError("Por favor, informe uma resposta para esta etapa.")
    return answer.strip()


def build_generation_request(session: ConversationSession) -> GenerationRequest:
    """Snapshot the session answers; raises MissingFieldsError if any slot is empty."""
    missing = session.missing_fields()
    if missing:
        raise MissingFieldsError(missing)
    return GenerationRequest(
        topic=session.topic,
        audience=session.audience,
        sermon_type=session.sermon_type,
        duration=session.duration,
    )


def build_prompt(request: GenerationRequest) -> str:
    return render_prompt(
        SERMON_PROMPT_TEMPLATE,
        TOPIC=request.topic,
        AUDIENCE=request.audience,
        SERMON_TYPE=request.sermon_type,
        DURATION=request.duration,
    )


def transition(
    session: ConversationSession, step: object, answer: object
) -> NextQuestion | GenerationRequest:
    """Apply one wizard answer.

    Both inputs are validated before anything is recorded. Steps 1-3 yield the
    next question from the step table; step 4 yields the generation request
    (or raises MissingFieldsError if earlier answers are absent). Resubmitting
    a step overwrites its previous answer.

    Raises:
        WizardValidationError: Step outside 1..4 or empty answer.
        MissingFieldsError: Step 4 reached before every answer was collected.
    """
    parsed = parse_step(step)
    cleaned = _clean_answer(answer)
    session.set_answer(parsed, cleaned)
    if parsed is LAST_STEP:
        return build_generation_request(session)
    return NextQuestion.for_step(Step(parsed + 1))


class SermonWizard:
    """Drives a conversation session through the wizard and the LLM call."""

    def __init__(
        self,
        provider_factory: Callable[[], LLMProvider],
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        self._provider_factory = provider_factory
        self.timeout_ms = timeout_ms

    def first_question(self) -> NextQuestion:
        return NextQuestion.for_step(FIRST_STEP)

    async def advance(
        self, session: ConversationSession, step: object, answer: object
    ) -> NextQuestion | SermonResult:
        outcome = transition(session, step, answer)
        logger.debug(
            "Wizard step accepted: step=%s state=%s",
            step,
            current_state(session).name,
        )
        if isinstance(outcome, NextQuestion):
            return outcome
        return await self._generate(session, outcome)

    async def generate(self, session: ConversationSession) -> SermonResult:
        """Generate the sermon from a fully answered session."""
        return await self._generate(session, build_generation_request(session))

    async def _generate(
        self, session: ConversationSession, request: GenerationRequest
    ) -> SermonResult:
        prompt = build_prompt(request)
        try:
            provider = self._provider_factory()
        except ConfigurationError as exc:
            logger.error("Sermon generation unavailable: %s", exc)
            raise GenerationFailedError() from exc

        if is_long_duration(request.duration):
            logger.info("Generating long sermon (duration=%s)", request.duration)

        try:
            text = await provider.complete(prompt, self.timeout_ms)
        except UpstreamError as exc:
            # Answers are kept so the caller can resubmit the last step.
            logger.error("Sermon generation failed: kind=%s error=%s", exc.kind, exc)
            raise GenerationFailedError() from exc

        session.clear()
        logger.info("Sermon generated: chars=%d", len(text))
        return SermonResult(sermon=text)
