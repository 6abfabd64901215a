from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from dateutil.relativedelta import relativedelta

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"


def today() -> date:
    return date.today()


def current_month_str() -> str:
    return today().strftime(MONTH_FORMAT)


def parse_date(date_str: str) -> Optional[date]:
    """Parse a YYYY-MM-DD string, returning None on failure."""
    if not date_str:
        return None
    try:
        return datetime.strptime(date_str, DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def is_iso_date(value) -> bool:
    """True only for zero-padded YYYY-MM-DD strings, the form dates are compared in."""
    if not isinstance(value, str):
        return False
    parsed = parse_date(value)
    return parsed is not None and format_date(parsed) == value


def month_of(date_str: str) -> str:
    return date_str[:7]


def shift_month(month_str: str, months: int) -> str:
    """Move a YYYY-MM string by a number of calendar months."""
    first = datetime.strptime(month_str, MONTH_FORMAT).date()
    return (first + relativedelta(months=months)).strftime(MONTH_FORMAT)


def subtract(d: date, days: int = 0, months: int = 0, years: int = 0) -> date:
    """Calendar-aware subtraction.

    Month and year steps keep the day of month, clamped to the last day of
    the target month (2024-03-31 minus one month is 2024-02-29).
    """
    return d - relativedelta(days=days, months=months, years=years)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
