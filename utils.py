import logging
from datetime import date, datetime, time, timezone
from typing import Any, Iterable, Optional

log = logging.getLogger("hotelmol")


def ensure_utc(value: datetime) -> datetime:
    # Naive timestamps coming out of the lead tables are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Return an aware UTC datetime for a DB/ISO timestamp, or None if it can't be read."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None

    s = value.strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(s))
    except ValueError:
        return None


def parse_date_bound(value: Any) -> Optional[datetime]:
    """Parse a dateFrom/dateTo filter value.

    A date-only string (YYYY-MM-DD) is midnight UTC of that day; a full ISO
    timestamp is taken as-is, naive meaning UTC. Anything unreadable yields
    None so the bound is simply not applied.
    """
    if value is None or value == "":
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        log.warning("Ignoring malformed date bound: %r", value)
    return parsed


def scrub(text: str, secrets: Iterable[Optional[str]]) -> str:
    """Replace configured secrets in a log/error string."""
    for secret in secrets:
        # short values would redact half the message
        if secret and len(secret) > 5:
            text = text.replace(secret, "[REDACTED]")
    return text
