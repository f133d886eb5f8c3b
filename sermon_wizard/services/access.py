"""Access gate: month-keyed shared password and JWT access tokens.

The month is read in the configured access timezone (``ACCESS_TIMEZONE``), so
the password turns over at local midnight. Tokens never outlive the month
they were issued in.
"""

from __future__ import annotations

import hmac
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Mapping, Optional
from zoneinfo import ZoneInfo

from jose import JWTError, jwt

from sermon_wizard.config import get_settings

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 24
ACCESS_SUBJECT = "wizard"


def access_zone() -> ZoneInfo:
    """Timezone the monthly password calendar follows.

    Raises:
        zoneinfo.ZoneInfoNotFoundError: If ACCESS_TIMEZONE is not a known IANA name.
    """
    return ZoneInfo(get_settings().access_timezone)


def current_access_date(now: datetime | None = None) -> date:
    """Today's date in the access timezone."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(access_zone()).date()


def end_of_access_month(now: datetime | None = None) -> datetime:
    """Local midnight that starts the next month, as an aware datetime."""
    local = (now or datetime.now(timezone.utc)).astimezone(access_zone())
    if local.month == 12:
        return datetime(local.year + 1, 1, 1, tzinfo=local.tzinfo)
    return datetime(local.year, local.month + 1, 1, tzinfo=local.tzinfo)


def access_token_expiry(
    now: datetime | None = None, expires_delta: Optional[timedelta] = None
) -> datetime:
    """Token lifetime, capped at the end of the current access month."""
    now = now or datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS))
    return min(expire, end_of_access_month(now))


def password_for_month(month: int, table: Mapping[int, str]) -> str | None:
    """Return the shared password for a month number (1-12), or None if unset."""
    return table.get(month)


def verify_access_password(
    password: str,
    table: Mapping[int, str] | None = None,
    today: date | None = None,
) -> bool:
    """Check password against the current month's entry only.

    Previous months' passwords stop working when the month turns.
    """
    if table is None:
        table = get_settings().monthly_passwords
    today = today or current_access_date()
    expected = password_for_month(today.month, table)
    if not expected:
        logger.warning("No access password configured for month %d", today.month)
        return False
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


def create_access_token(
    data: dict | None = None,
    expires_delta: Optional[timedelta] = None,
    now: datetime | None = None,
) -> str:
    """Create a signed JWT access token."""
    settings = get_settings()
    to_encode = {"sub": ACCESS_SUBJECT}
    to_encode.update(data or {})
    to_encode.update({"exp": access_token_expiry(now, expires_delta)})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token. Returns payload or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("sub") != ACCESS_SUBJECT:
        return None
    return payload
