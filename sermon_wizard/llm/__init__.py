"""LLM provider abstraction. One bounded completion call per sermon."""

from sermon_wizard.llm.errors import (
    ConfigurationError,
    UpstreamBadStatus,
    UpstreamError,
    UpstreamMalformed,
    UpstreamNetwork,
    UpstreamTimeout,
)
from sermon_wizard.llm.openai_provider import OpenAIProvider
from sermon_wizard.llm.provider import LLMProvider
from sermon_wizard.llm.router import get_llm_provider

__all__ = [
    "ConfigurationError",
    "LLMProvider",
    "OpenAIProvider",
    "UpstreamBadStatus",
    "UpstreamError",
    "UpstreamMalformed",
    "UpstreamNetwork",
    "UpstreamTimeout",
    "get_llm_provider",
]
