"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import json
import logging
import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache
from typing import Optional

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


def _parse_monthly_passwords(raw: str) -> dict[int, str]:
    """Parse MONTHLY_PASSWORDS JSON ({"1": "...", ..., "12": "..."}) into month -> password.

    Invalid JSON or out-of-range months are logged and skipped; an empty result
    disables the access gate.
    """
    raw = raw.strip()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("MONTHLY_PASSWORDS is not valid JSON: %s", e)
        return {}
    if not isinstance(data, dict):
        logger.error("MONTHLY_PASSWORDS must be a JSON object keyed by month number")
        return {}
    table: dict[int, str] = {}
    for key, value in data.items():
        try:
            month = int(key)
        except (TypeError, ValueError):
            logger.warning("MONTHLY_PASSWORDS: ignoring non-numeric month %r", key)
            continue
        if not 1 <= month <= 12 or not isinstance(value, str) or not value:
            logger.warning("MONTHLY_PASSWORDS: ignoring invalid entry for month %r", key)
            continue
        table[month] = value
    return table


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Sermon Wizard"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3); only the customer import uses it
    database_url: str = "postgresql+psycopg://localhost:5432/sermon_wizard_dev"
    db_connect_timeout: int = 10  # seconds

    # Security
    secret_key: str = ""

    # LLM
    llm_provider: str = "openai"
    llm_api_key: Optional[str] = None
    llm_model: str = "gpt-4o-mini"
    llm_base_url: Optional[str] = None
    llm_timeout_ms: int = 30000
    llm_temperature: float = 0.7
    llm_max_tokens: int = 3500

    # Conversation sessions (in-memory, per process)
    session_ttl_seconds: int = 1800  # 30 minutes of inactivity
    session_max_entries: int = 10000

    # Access gate: month number -> shared password. Empty = gate disabled.
    monthly_passwords: dict[int, str] = {}
    # IANA zone whose calendar decides which month's password is valid
    access_timezone: str = "America/Sao_Paulo"

    # Link appended to shared verse text. Empty = the app's own base URL.
    share_url: str = ""

    # Per-client fixed window on /api/next-step. 0 = disabled.
    rate_limit_per_minute: int = 0

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        raw_url = os.getenv("DATABASE_URL", self.database_url)
        # Ensure psycopg3 driver if URL uses generic postgresql:// (or Render's postgres://)
        if raw_url.startswith("postgres://"):
            raw_url = raw_url.replace("postgres://", "postgresql://", 1)
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.secret_key = os.getenv("SECRET_KEY", "")

        self.llm_provider = os.getenv("LLM_PROVIDER", self.llm_provider)
        # OPENAI_API_KEY kept as a fallback for existing deployments
        self.llm_api_key = os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY") or None
        self.llm_model = os.getenv("LLM_MODEL", self.llm_model)
        self.llm_base_url = os.getenv("LLM_BASE_URL") or None
        self.llm_timeout_ms = int(os.getenv("LLM_TIMEOUT_MS", str(self.llm_timeout_ms)))
        self.llm_temperature = float(os.getenv("LLM_TEMPERATURE", str(self.llm_temperature)))
        self.llm_max_tokens = int(os.getenv("LLM_MAX_TOKENS", str(self.llm_max_tokens)))

        self.session_ttl_seconds = int(
            os.getenv("SESSION_TTL_SECONDS", str(self.session_ttl_seconds))
        )
        self.session_max_entries = int(
            os.getenv("SESSION_MAX_ENTRIES", str(self.session_max_entries))
        )

        self.monthly_passwords = _parse_monthly_passwords(os.getenv("MONTHLY_PASSWORDS", ""))
        self.access_timezone = os.getenv("ACCESS_TIMEZONE", self.access_timezone)
        self.share_url = os.getenv("SHARE_URL", self.share_url).strip()

        self.rate_limit_per_minute = int(
            os.getenv("RATE_LIMIT_PER_MINUTE", str(self.rate_limit_per_minute))
        )

    @property
    def access_gate_enabled(self) -> bool:
        """True when a monthly password table is configured."""
        return bool(self.monthly_passwords)
