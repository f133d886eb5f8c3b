"""Sermon wizard: step table, conversation sessions and the state machine."""

from sermon_wizard.services.wizard.errors import (
    GenerationFailedError,
    MissingFieldsError,
    WizardError,
    WizardValidationError,
)
from sermon_wizard.services.wizard.machine import (
    NextQuestion,
    SermonResult,
    SermonWizard,
    WizardState,
    current_state,
    transition,
)
from sermon_wizard.services.wizard.session_store import ConversationSession, SessionStore
from sermon_wizard.services.wizard.steps import STEP_DEFINITIONS, Step, StepDefinition

__all__ = [
    "ConversationSession",
    "GenerationFailedError",
    "MissingFieldsError",
    "NextQuestion",
    "STEP_DEFINITIONS",
    "SermonResult",
    "SermonWizard",
    "SessionStore",
    "Step",
    "StepDefinition",
    "WizardError",
    "WizardState",
    "WizardValidationError",
    "current_state",
    "transition",
]
