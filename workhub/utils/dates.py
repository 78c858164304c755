# workhub/utils/dates.py
from datetime import date, datetime, timezone
from typing import Any

# Non-ISO shapes browsers commonly accept for a plain day
FALLBACK_FORMATS = ("%Y/%m/%d", "%b %d, %Y", "%B %d, %Y", "%d %b %Y", "%d %B %Y")


def _parse_text(text: str) -> datetime | None:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def safe_date(value: Any) -> datetime | None:
    """
    Parses a loosely-typed date into an aware UTC datetime.

    Strings may be ISO-8601 (a trailing Z is accepted) or one of
    FALLBACK_FORMATS ("2024/01/01", "Jan 1, 2024", "1 January 2024").
    Returns None for empty, unparseable or out-of-range input instead of
    raising.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        parsed = _parse_text(value.strip())
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # offset pushes the instant past datetime.min / datetime.max
        return None


def is_past(value: Any) -> bool:
    parsed = safe_date(value)
    return parsed is not None and parsed < datetime.now(timezone.utc)


def is_future(value: Any) -> bool:
    parsed = safe_date(value)
    return parsed is not None and parsed > datetime.now(timezone.utc)


def parse_iso_day(value: str) -> date | None:
    """Strict YYYY-MM-DD parse used for holiday dates."""
    if not isinstance(value, str) or len(value) != 10:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
