"""Date parsing and days-to-expiry arithmetic.

Every function that depends on the current date takes an explicit ``today``
so callers (and tests) can pin the calendar; ``None`` means the local date
at the time of the call.
"""
from __future__ import annotations

from datetime import date, datetime, time
from email.utils import parsedate_to_datetime
from typing import Any, Iterable, List, Optional

from renewals.core.models import DATE_PAIRS, CustomerRecord

_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
]


def _local_date(value: datetime) -> date:
    if value.tzinfo:
        value = value.astimezone()
    return value.date()


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse ``value`` into a datetime, keeping the time of day.

    Naive results are local time. Plain dates become local midnight.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    text = str(value).strip()
    if not text:
        return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    try:
        iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
        return datetime.fromisoformat(iso_text)
    except ValueError:
        pass

    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def parse_date(value: Any) -> Optional[date]:
    """Parse ``value`` permissively into a local calendar date.

    Accepts ``date``/``datetime`` objects, strict ``YYYY-MM-DD`` strings, ISO
    instants such as ``2024-05-01T17:00:00.000Z`` (converted to local time),
    day-first slash/dash dates and RFC 2822 strings. Anything else is
    ``None``.
    """

    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_datetime(value)
    return _local_date(parsed) if parsed else None


def to_input_date(value: Any) -> str:
    """Return ``value`` as a strict ``YYYY-MM-DD`` string, or ``""``."""

    parsed = parse_date(value)
    return parsed.isoformat() if parsed else ""


def days_until(value: Any, today: Optional[date] = None) -> Optional[int]:
    """Whole calendar days from ``today`` to ``value``; negative when overdue."""

    target = parse_date(value)
    if target is None:
        return None
    current = today or date.today()
    return (target - current).days


def expiry_distances(customer: CustomerRecord, today: Optional[date] = None) -> List[Optional[int]]:
    """Days until each expiry date, in act, tax, voluntary order."""

    current = today or date.today()
    return [days_until(getattr(customer, expiry), current) for _, _, expiry in DATE_PAIRS]


def min_days(distances: Iterable[Optional[int]]) -> Optional[int]:
    known = [value for value in distances if value is not None]
    return min(known) if known else None


def min_expiry(customer: CustomerRecord, today: Optional[date] = None) -> Optional[int]:
    """Smallest days-until across the three expiry dates, ``None`` if none set."""

    return min_days(expiry_distances(customer, today))
