from __future__ import annotations

from datetime import date, datetime
from enum import Enum

SUNDAY = 6


class DateRejection(str, Enum):
    INVALID = "invalid"
    SUNDAY = "sunday"
    PAST = "past"
    TOO_FAR = "too_far"


def parse_canonical_date(canonical: str) -> date | None:
    """Strictly parse a DD/MM/YYYY string into a real calendar date."""
    parts = canonical.split("/")
    if len(parts) != 3 or len(parts[0]) != 2 or len(parts[1]) != 2 or len(parts[2]) != 4:
        return None
    try:
        return datetime.strptime(canonical, "%d/%m/%Y").date()
    except ValueError:
        return None


def one_year_after(day: date) -> date:
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        # 29 February
        return day.replace(year=day.year + 1, day=28)


def check_booking_date(canonical: str, today: date) -> DateRejection | None:
    """Return why a canonical date cannot be booked, or None when it can."""
    parsed = parse_canonical_date(canonical)
    if parsed is None:
        return DateRejection.INVALID
    if parsed.weekday() == SUNDAY:
        return DateRejection.SUNDAY
    if parsed < today:
        return DateRejection.PAST
    if parsed > one_year_after(today):
        return DateRejection.TOO_FAR
    return None
