"""
Primitive Parsers
Flexible date and amount parsing shared by every importer, plus small date
helpers used when the source does not carry a value.
"""

import calendar
import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

logger = logging.getLogger(__name__)

# Tried in order; the first pattern that parses wins
DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%d-%m-%Y",
    "%b %d, %Y",
)

_AMOUNT_NOISE = re.compile(r'[^\d.,+\-]')
_WHITESPACE = re.compile(r'\s+')


def parse_flexible_date(text: Optional[str]) -> tuple[Optional[datetime], bool]:
    """
    Parse a date or date-time written in any of the supported layouts.

    Args:
        text: Raw date text, e.g. "2024-01-05T08:00:00", "05/01/2024", "Jan 05, 2024"

    Returns:
        (datetime, True) on success, (None, False) when no pattern matches
    """
    if not text or not isinstance(text, str):
        return None, False

    cleaned = _WHITESPACE.sub(" ", text.strip())
    if not cleaned:
        return None, False

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt), True
        except ValueError:
            continue

    logger.debug(f"Unparseable date: {cleaned!r}")
    return None, False


def parse_amount(text) -> tuple[Optional[Decimal], bool]:
    """
    Parse a money amount, ignoring currency symbols and thousands separators.

    Args:
        text: Raw amount such as "$1,234.50", "-$4.50", "+120.00"

    Returns:
        (Decimal, True) on success, (None, False) if nothing numeric remains
    """
    if text is None:
        return None, False

    clean = _AMOUNT_NOISE.sub("", str(text)).replace(",", "")
    if not clean:
        return None, False

    try:
        amount = Decimal(clean)
    except InvalidOperation:
        logger.debug(f"Invalid amount format: {text!r}")
        return None, False

    if not amount.is_finite():
        return None, False
    return amount, True


def month_bounds(day: date) -> tuple[date, date]:
    """First and last day of the month containing ``day``."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = day.month - 1 + months
    year = day.year + index // 12
    month = index % 12 + 1
    return day.replace(year=year, month=month, day=min(day.day, calendar.monthrange(year, month)[1]))


def truncate(text: Optional[str], limit: int) -> str:
    """Trim and cut to at most ``limit`` characters."""
    if not text:
        return ""
    return text.strip()[:limit].strip()
