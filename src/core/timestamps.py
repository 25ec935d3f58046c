"""Date and time parsing for pasted chat transcripts.

Both parsers are pure and never raise: anything they cannot make sense of
comes back as ``None`` and the caller decides how to degrade.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser

MONTHS = {
    "january": 1, "jan": 1, "february": 2, "feb": 2, "march": 3, "mar": 3,
    "april": 4, "apr": 4, "may": 5, "june": 6, "jun": 6, "july": 7, "jul": 7,
    "august": 8, "aug": 8, "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10, "november": 11, "nov": 11, "december": 12, "dec": 12,
}
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_MONTH_ALTERNATION = "|".join(sorted(MONTHS, key=len, reverse=True))
_MONTH_DAY_RE = re.compile(rf"\b({_MONTH_ALTERNATION})[\s.]*(\d{{1,2}})(?:st|nd|rd|th)?\b", re.IGNORECASE)
_YEAR_SUFFIX_RE = re.compile(r",\s*(\d{4})$")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

_CLOCK = r"(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])?"
_TIME_RE = re.compile(rf"^{_CLOCK}$")
_RELATIVE_RE = re.compile(rf"^(today|yesterday)\s+at\s+{_CLOCK}$", re.IGNORECASE)
_WEEKDAY_RE = re.compile(rf"^({'|'.join(WEEKDAYS)})(?:\s+at\s+{_CLOCK})?$", re.IGNORECASE)
_MONTH_DAY_TIME_RE = re.compile(
    rf"^([A-Za-z]+)\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?(?:,?\s+(\d{{4}}))?(?:\s+at\s+{_CLOCK})?$",
    re.IGNORECASE,
)
_LINKED_RE = re.compile(r"^\[([^\]]+)\]\(https?://[^)]+\)$", re.IGNORECASE)


def _clock_time(hours: str, minutes: str, seconds: Optional[str], meridiem: Optional[str]) -> time:
    hour = int(hours)
    if meridiem:
        if hour < 1 or hour > 12:
            raise ValueError(f"invalid 12-hour clock value: {hours}")
        is_pm = meridiem.lower() == "pm"
        if is_pm and hour != 12:
            hour += 12
        elif not is_pm and hour == 12:
            hour = 0
    return time(hour, int(minutes), int(seconds or 0))


def _most_recent_weekday(name: str, today: date) -> date:
    """Return the last past occurrence of a weekday (a week ago for today's name)."""

    target = WEEKDAYS.index(name.lower())
    days_ago = (today.weekday() - target) % 7 or 7
    return today - timedelta(days=days_ago)


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """Parse a day label such as ``March 15, 2024`` or ``Friday, March 15th``.

    Accepts ``YYYY-MM-DD``, ``Month Day[, Year]`` anywhere in the string
    (weekday prefixes are ignored), ``Today`` and ``Yesterday``. A missing
    year means the current year. Rollovers such as Feb 30 are rejected.
    """

    if not date_str:
        return None
    cleaned = date_str.strip()
    today = date.today()

    lowered = cleaned.lower()
    if lowered == "today":
        return today
    if lowered == "yesterday":
        return today - timedelta(days=1)

    try:
        iso = _ISO_DATE_RE.match(cleaned)
        if iso:
            return date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))

        month_day = _MONTH_DAY_RE.search(cleaned)
        if month_day:
            year_match = _YEAR_SUFFIX_RE.search(cleaned)
            year = int(year_match.group(1)) if year_match else today.year
            return date(year, MONTHS[month_day.group(1).lower()], int(month_day.group(2)))
    except ValueError:
        return None

    if not re.search(r"\d", cleaned):
        return None
    try:
        return date_parser.parse(cleaned, default=datetime(today.year, 1, 1)).date()
    except (ValueError, OverflowError):
        return None


def parse_slack_timestamp(ts: Optional[str], context_date: Optional[date] = None) -> Optional[datetime]:
    """Parse a chat timestamp into a naive datetime.

    Clock-only values (``10:30 AM``, ``14:05``) land on ``context_date`` or
    today. ``Today at``/``Yesterday at``/weekday forms resolve relative to the
    real current day; month-day forms take their year from ``context_date``.
    """

    if not ts:
        return None
    cleaned = ts.strip()
    linked = _LINKED_RE.match(cleaned)
    if linked:
        return parse_slack_timestamp(linked.group(1), context_date)
    cleaned = cleaned.strip("[]()").strip()
    if not cleaned:
        return None

    today = date.today()
    base = context_date or today

    try:
        match = _TIME_RE.match(cleaned)
        if match:
            return datetime.combine(base, _clock_time(*match.groups()))

        match = _RELATIVE_RE.match(cleaned)
        if match:
            day = today if match.group(1).lower() == "today" else today - timedelta(days=1)
            return datetime.combine(day, _clock_time(*match.groups()[1:]))

        match = _WEEKDAY_RE.match(cleaned)
        if match:
            day = _most_recent_weekday(match.group(1), today)
            if match.group(2) is None:
                return datetime.combine(day, time())
            return datetime.combine(day, _clock_time(*match.groups()[1:]))

        match = _MONTH_DAY_TIME_RE.match(cleaned)
        if match and match.group(1).lower() in MONTHS:
            year = int(match.group(3)) if match.group(3) else base.year
            day = date(year, MONTHS[match.group(1).lower()], int(match.group(2)))
            if match.group(4) is None:
                return datetime.combine(day, time())
            return datetime.combine(day, _clock_time(*match.groups()[3:]))

        if re.match(r"^\d{4}-\d{2}-\d{2}", cleaned):
            parsed = datetime.fromisoformat(cleaned)
            return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed
    except ValueError:
        return None

    return None


def carries_date(ts: Optional[str]) -> bool:
    """Return True when a timestamp label names a day, not just a clock time."""

    if not ts:
        return False
    cleaned = ts.strip()
    linked = _LINKED_RE.match(cleaned)
    if linked:
        cleaned = linked.group(1)
    return not _TIME_RE.match(cleaned.strip("[]()").strip())
