"""
UTC timestamp helpers. Stored timestamps are naive UTC.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as naive UTC, the form written to the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_now_iso() -> str:
    """Current time as an ISO 8601 string with offset."""
    return datetime.now(timezone.utc).isoformat()


def from_iso(iso_string: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into naive UTC

    Args:
        iso_string: Timestamp as sent by the remote API, "Z" suffix allowed

    Returns:
        Parsed datetime, or None for empty or unparseable input
    """
    if not iso_string:
        return None
    try:
        parsed = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
