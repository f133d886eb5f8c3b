"""Wizard error hierarchy. Each error carries the HTTP status and user-facing message."""

from __future__ import annotations


class WizardError(Exception):
    """Base class for errors surfaced to the wizard caller as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class WizardValidationError(WizardError):
    """Unknown step number or empty/missing answer. Nothing is recorded."""

    status_code = 400


class MissingFieldsError(WizardError):
    """Generation attempted before all four answers were collected."""

    status_code = 400

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            "Responda todas as etapas antes de gerar o sermão. "
            f"Faltando: {', '.join(missing)}."
        )
        self.missing = missing


class GenerationFailedError(WizardError):
    """Upstream generation failed or is not configured. The cause is logged, never shown."""

    status_code = 500

    def __init__(self) -> None:
        super().__init__("Não foi possível gerar o sermão. Tente novamente em instantes.")
