import re
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

EAST_AFRICA = ZoneInfo("Africa/Nairobi")

# en-KE short layout, e.g. 19/10/2026, 14:05:03
DISPLAY_FORMAT = "%d/%m/%Y, %H:%M:%S"

# fromisoformat before 3.11 takes only 3 or 6 fraction digits; Go emits up to 9
_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> datetime:
    """Parse a server timestamp. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(value: Any) -> str:
    if value is None or value == "":
        return ""
    try:
        dt = parse_timestamp(value)
    except ValueError:
        return str(value)
    return dt.astimezone(EAST_AFRICA).strftime(DISPLAY_FORMAT)
