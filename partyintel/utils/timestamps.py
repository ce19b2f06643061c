from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

# Upstream emits up to nanosecond precision; datetime keeps microseconds.
_FRACTION = re.compile(r"\.(\d+)")


def parse_iso_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp into an aware datetime, or None."""
    if not raw:
        return None
    value = raw.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def local_midnight(now: Optional[datetime] = None) -> datetime:
    """Start of the current day in the local timezone of `now`."""
    current = now if now is not None else datetime.now().astimezone()
    if current.tzinfo is None:
        current = current.astimezone()
    return current.replace(hour=0, minute=0, second=0, microsecond=0)


def to_iso_utc(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
