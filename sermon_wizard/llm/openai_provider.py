"""
OpenAI LLM provider implementation.

Uses the openai Python SDK (>=1.0.0) with the async client. Each call is a
single attempt raced against a deadline; when the deadline fires the request
task is cancelled, which closes the underlying httpx connection.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
)

from sermon_wizard.llm.errors import (
    UpstreamBadStatus,
    UpstreamMalformed,
    UpstreamNetwork,
    UpstreamTimeout,
)
from sermon_wizard.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 3500


class OpenAIProvider(LLMProvider):
    """Concrete LLM provider backed by the OpenAI chat-completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        base_url: str | None = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        # Single attempt only: the SDK's own retry loop is switched off.
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    # ------------------------------------------------------------------
    # LLMProvider interface
    # ------------------------------------------------------------------

    async def complete(self, prompt: str, timeout_ms: int) -> str:
        """Send prompt to OpenAI and return the first completion's text."""
        create_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        timeout_s = timeout_ms / 1000

        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(**create_kwargs, timeout=timeout_s),
                timeout=timeout_s,
            )
        except (asyncio.TimeoutError, APITimeoutError) as exc:
            logger.error("OpenAI call timed out after %d ms (model=%s)", timeout_ms, self.model)
            raise UpstreamTimeout(timeout_ms) from exc
        except APIStatusError as exc:
            logger.error("OpenAI returned HTTP %s: %s", exc.status_code, exc)
            raise UpstreamBadStatus(exc.status_code, str(exc)) from exc
        except APIConnectionError as exc:
            logger.error("OpenAI connection error: %s", exc)
            raise UpstreamNetwork(str(exc)) from exc
        except APIError as exc:
            # Any other SDK error means the response could not be read as a completion
            logger.error("OpenAI response could not be read: %s", exc)
            raise UpstreamMalformed(str(exc)) from exc
        elapsed = time.monotonic() - start

        text = _extract_text(response)

        usage = getattr(response, "usage", None)
        prompt_tokens = getattr(usage, "prompt_tokens", 0) or 0
        completion_tokens = getattr(usage, "completion_tokens", 0) or 0
        prompt_preview = (prompt[:100] + "...") if len(prompt) > 100 else prompt
        logger.info(
            "LLM call: model=%s prompt_preview=%r tokens_in=%d tokens_out=%d latency=%.2fs",
            self.model,
            prompt_preview,
            prompt_tokens,
            completion_tokens,
            elapsed,
        )
        logger.debug("LLM prompt (full): %s", prompt)
        return text


def _extract_text(response: Any) -> str:
    """Return choices[0].message.content or raise UpstreamMalformed."""
    choices = getattr(response, "choices", None)
    if not choices:
        raise UpstreamMalformed("Completion has no choices")
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        raise UpstreamMalformed("Completion message has no text content")
    return content
