"""Date utility functions for clockidup."""
import re
from datetime import datetime, time, timezone, timedelta
from typing import Optional, Tuple

import dateparser

from ..errors import DateParseError

ISO_DAY = "%Y-%m-%d"

# dateparser rejects "last tuesday", a bare "tuesday" resolves to the same past day.
LAST_WEEKDAY = re.compile(r"^last\s+(?=(mon|tues|wednes|thurs|fri|satur|sun)day$)", re.IGNORECASE)

DATE_HELP = """'{}' is not a valid date. The date must be of the form:

    2021-12-31
    today
    yesterday
    three days ago
    3 days ago
    wednesday
    monday
    last tuesday"""


def rfc3339_utc(dt: datetime) -> str:
    """Format an instant as RFC 3339 in UTC, e.g. 2021-01-26T06:02:00Z.

    Args:
        dt: Timezone-aware datetime

    Returns:
        Datetime string with a 'Z' suffix
    """
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_clockify_time(value: Optional[str]) -> Optional[datetime]:
    """Parse a Clockify timestamp such as 2021-07-03T13:30:00Z.

    Returns None for an empty value, which Clockify uses for the end of a
    time entry that is still running.
    """
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def day_window(day: datetime) -> Tuple[datetime, datetime]:
    """Get the first and last second of the given day, keeping its tzinfo.

    Args:
        day: Any instant of the day

    Returns:
        Tuple of (start, end) where start is 00:00:00 and end is 23:59:59
    """
    start = datetime.combine(day.date(), time.min, tzinfo=day.tzinfo)
    end = datetime.combine(day.date(), time(23, 59, 59), tzinfo=day.tzinfo)
    return start, end


def local_now() -> datetime:
    return datetime.now(timezone.utc).astimezone()


def parse_day(text: str, now: Optional[datetime] = None) -> datetime:
    """Parse a day given on the command line.

    Accepts YYYY-MM-DD as well as natural language such as "yesterday",
    "monday" or "3 days ago". Ambiguous weekdays are resolved to the past.

    Args:
        text: The day as typed by the user
        now: Reference instant for relative dates (defaults to now)

    Returns:
        Local midnight of the parsed day, timezone-aware

    Raises:
        DateParseError: text is not a date
    """
    now = (now or local_now()).astimezone()
    try:
        parsed = datetime.strptime(text, ISO_DAY)
    except ValueError:
        parsed = dateparser.parse(LAST_WEEKDAY.sub("", text.strip()), settings={
            "PREFER_DATES_FROM": "past",
            "RELATIVE_BASE": now.replace(tzinfo=None),
        })
    if parsed is None:
        raise DateParseError(DATE_HELP.format(text))

    # Keep the calendar day only, in the local timezone.
    naive_midnight = datetime.combine(parsed.date(), time.min)
    return naive_midnight.astimezone()


def is_within_last_week(day: datetime, now: datetime) -> bool:
    """Tell whether day is close enough to now to be named by its weekday."""
    return day > now - timedelta(days=6)


def day_str(day: datetime, now: datetime) -> str:
    """Format a day as its weekday name when recent, otherwise as YYYY-MM-DD."""
    if is_within_last_week(day, now):
        return day.strftime("%A")
    return day.strftime(ISO_DAY)
