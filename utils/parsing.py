"""Parsers for wizard text input."""

from datetime import datetime

from domain.errors import ValidationError

DATE_FORMATS = ("%d.%m.%Y %H:%M", "%d.%m.%Y")
DEFAULT_EVENT_HOUR = 18
SKIP_MARK = "-"


def parse_event_date(text: str, now: datetime) -> datetime:
    """Parse ``DD.MM.YYYY HH:MM`` (single-digit hour/minute allowed) or ``DD.MM.YYYY``.

    A bare date gets the default start time 18:00. Dates before ``now``
    are rejected.
    """
    raw = " ".join(text.split())
    date = None
    for fmt in DATE_FORMATS:
        try:
            date = datetime.strptime(raw, fmt)
        except ValueError:
            continue
        if fmt == "%d.%m.%Y":
            date = date.replace(hour=DEFAULT_EVENT_HOUR)
        break

    if date is None:
        raise ValidationError("Invalid date format, expected DD.MM.YYYY HH:MM")
    if date < now:
        raise ValidationError("Event date cannot be in the past")
    return date


def parse_positive_int(text: str) -> int:
    value = _parse_int(text)
    if value <= 0:
        raise ValidationError("Value must be greater than 0")
    return value


def parse_price(text: str) -> int:
    value = _parse_int(text)
    if value < 0:
        raise ValidationError("Price cannot be negative")
    return value


def _parse_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise ValidationError(f"Not a number: {text.strip()!r}") from None


def optional_text(text: str | None) -> str:
    """Wizard answer for an optional step: ``-`` means skip."""
    value = (text or "").strip()
    return "" if value == SKIP_MARK else value


def wizard_text(text: str | None) -> str:
    """Answer for a required text step; empty for blank input and for commands."""
    value = (text or "").strip()
    if value.startswith("/"):
        return ""
    return value
