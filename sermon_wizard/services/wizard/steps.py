"""Static step-definition table for the sermon wizard."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from sermon_wizard.services.wizard.errors import WizardValidationError


class Step(IntEnum):
    """Wizard steps in the order they are asked."""

    TOPIC = 1
    AUDIENCE = 2
    SERMON_TYPE = 3
    DURATION = 4

    @property
    def slot(self) -> str:
        """Conversation session attribute that stores this step's answer."""
        return _SLOTS[self]


_SLOTS = {
    Step.TOPIC: "topic",
    Step.AUDIENCE: "audience",
    Step.SERMON_TYPE: "sermon_type",
    Step.DURATION: "duration",
}

FIRST_STEP = Step.TOPIC
LAST_STEP = Step.DURATION


@dataclass(frozen=True)
class StepDefinition:
    step_number: int
    prompt_text: str
    options: tuple[str, ...] = ()


STEP_DEFINITIONS: dict[Step, StepDefinition] = {
    Step.TOPIC: StepDefinition(
        step_number=1,
        prompt_text="Qual é o tema do sermão?",
    ),
    Step.AUDIENCE: StepDefinition(
        step_number=2,
        prompt_text="Que tipo de público você vai pregar?",
        options=(
            "A) Crianças",
            "B) Adolescentes",
            "C) Jovens",
            "D) Adultos",
            "E) Casais",
            "F) Idosos",
            "G) Público misto",
        ),
    ),
    Step.SERMON_TYPE: StepDefinition(
        step_number=3,
        prompt_text="Qual o tipo de sermão?",
        options=(
            "A) Expositivo",
            "B) Temático",
            "C) Textual",
            "D) Narrativo",
            "E) Evangelístico",
        ),
    ),
    Step.DURATION: StepDefinition(
        step_number=4,
        prompt_text="Qual a duração desejada do sermão?",
        options=(
            "Entre 1 e 10 min",
            "Entre 10 e 20 min",
            "Entre 20 e 30 min",
            "Entre 30 e 40 min",
            "Entre 40 e 50 min",
            "Entre 50 e 60 min",
            "Acima de 1 hora",
        ),
    ),
}

# The client shows a longer loading sequence for these.
LONG_DURATIONS = frozenset({"Entre 40 e 50 min", "Entre 50 e 60 min", "Acima de 1 hora"})


def parse_step(value: object) -> Step:
    """Return the Step for a raw step number, rejecting anything outside 1..4."""
    # bool is an int subclass; True must not pass as step 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise WizardValidationError("Etapa inválida.")
    try:
        return Step(value)
    except ValueError:
        raise WizardValidationError("Etapa inválida.") from None


def get_step_definition(step: int) -> StepDefinition:
    """Look up the definition for a step number."""
    return STEP_DEFINITIONS[parse_step(step)]


def is_long_duration(duration: str | None) -> bool:
    return duration in LONG_DURATIONS
