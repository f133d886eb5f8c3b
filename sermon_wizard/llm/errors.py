"""
Upstream LLM error taxonomy.

Every failure of a completion call is reported as one of the UpstreamError
subclasses so callers can log the specific kind while returning a single
generic message to the end user.
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """LLM provider cannot be built from the current settings (e.g. missing API key)."""


class UpstreamError(Exception):
    """Base class for failures of the upstream completion call."""

    kind = "upstream_error"


class UpstreamTimeout(UpstreamError):
    """The completion did not arrive before the deadline; the request was cancelled."""

    kind = "timeout"

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Upstream call exceeded {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class UpstreamBadStatus(UpstreamError):
    """The upstream endpoint answered with a non-2xx status."""

    kind = "bad_status"

    def __init__(self, status_code: int, message: str = "") -> None:
        detail = f"Upstream returned HTTP {status_code}"
        super().__init__(f"{detail}: {message}" if message else detail)
        self.status_code = status_code


class UpstreamMalformed(UpstreamError):
    """The response could not be read as a chat completion."""

    kind = "malformed_response"


class UpstreamNetwork(UpstreamError):
    """Connection-level failure (DNS, refused, reset)."""

    kind = "network"
