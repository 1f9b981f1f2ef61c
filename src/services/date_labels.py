"""
Date codes embedded in human-written labels.

Project names carry their dates as compact digit codes, e.g.
"Bali Retreat 05-071225" (5-7 Dec 2025), "Gala 150625" (15 Jun 2025) or
"0625 Roadshow" (June 2025). Years are two digits in the 2000s.
"""

import calendar
import re
from datetime import date
from typing import Callable, Optional

from loguru import logger

from ..models.directory import DateInterval

# Digit guards stop a shorter code from matching inside a longer digit run
# ("011325" is not the month-year code "0113").
RANGE_PATTERN = re.compile(r"(?<!\d)(\d{2})-(\d{2})(\d{2})(\d{2})(?!\d)")
FULL_DATE_PATTERN = re.compile(r"(?<!\d)(\d{2})(\d{2})(\d{2})(?!\d)")
MONTH_YEAR_PATTERN = re.compile(r"(?<!\d)(\d{2})(\d{2})(?!\d)")


def _make_date(year_token: str, month_token: str, day: int) -> Optional[date]:
    month = int(month_token)
    if not 1 <= month <= 12:
        return None
    try:
        return date(2000 + int(year_token), month, day)
    except ValueError:
        return None


def _range_interval(match: re.Match) -> Optional[DateInterval]:
    start_day, end_day, month, year = match.groups()
    start = _make_date(year, month, int(start_day))
    end = _make_date(year, month, int(end_day))
    if start is None or end is None or start > end:
        return None
    return DateInterval(start=start, end=end)


def _full_date_interval(match: re.Match) -> Optional[DateInterval]:
    day, month, year = match.groups()
    day_value = _make_date(year, month, int(day))
    if day_value is None:
        return None
    return DateInterval(start=day_value, end=day_value)


def _month_year_interval(match: re.Match) -> Optional[DateInterval]:
    month, year = match.groups()
    first = _make_date(year, month, 1)
    if first is None:
        return None
    last_day = calendar.monthrange(first.year, first.month)[1]
    return DateInterval(start=first, end=first.replace(day=last_day))


# Most specific first: the month-year code is a substring of the others
PATTERNS: list[tuple[str, re.Pattern, Callable[[re.Match], Optional[DateInterval]]]] = [
    ("range", RANGE_PATTERN, _range_interval),
    ("full_date", FULL_DATE_PATTERN, _full_date_interval),
    ("month_year", MONTH_YEAR_PATTERN, _month_year_interval),
]


def parse_date_label(label: str) -> Optional[DateInterval]:
    """
    Extract the date interval encoded in a label.

    Patterns are tried in priority order (DD-DDMMYY, DDMMYY, MMYY). The first
    one that matches and yields a valid calendar date wins; a pattern that
    matches but yields an impossible date (month 13, 31 June) falls through to
    the next one.

    Args:
        label: Free text such as a project name

    Returns:
        Inclusive DateInterval, or None when no valid code is present
    """
    if not label:
        return None

    for name, pattern, build in PATTERNS:
        match = pattern.search(label)
        if match is None:
            continue
        interval = build(match)
        if interval is not None:
            logger.debug("Date code parsed", pattern=name, code=match.group(0))
            return interval

    return None
