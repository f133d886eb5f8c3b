"""
LLM provider abstraction.

A provider performs exactly one completion call per invocation. Deadlines are
enforced by the provider; retries are never performed here.
"""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    @abstractmethod
    async def complete(self, prompt: str, timeout_ms: int) -> str:
        """Send prompt as a single user message and return the completion text.

        Raises:
            UpstreamError: On timeout, non-2xx status, network failure or a
                response that does not have the chat-completion shape.
        """
        ...
