from datetime import datetime, timedelta

import pytz

from odessa import config

DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

SUNDAY = 6
SUNDAY_MORNING_CUTOFF_HOUR = 16


def venue_tz():
    return pytz.timezone(config.TIMEZONE)


def now_local():
    """Current time in the venue timezone."""
    return datetime.now(pytz.UTC).astimezone(venue_tz())


def to_local(value):
    """Convert an aware datetime to the venue timezone; naive values are taken as venue-local."""
    tz = venue_tz()
    if value.tzinfo is None:
        return tz.localize(value)
    return value.astimezone(tz)


def parse_event_datetime(value):
    """
    Parse an event date from the ticketing API into a venue-local aware datetime.
    Handles: "2025-08-03 10:00:00", "2025-08-03T10:00:00Z", "2025-08-03T10:00:00+02:00", "2025-08-03"
    Returns None when the value can't be parsed.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    return to_local(parsed)


def week_range(day):
    """Return (monday, sunday) dates for the week containing day."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def day_label(value):
    return DAY_LABELS[value.weekday()]


def is_sunday_morning(value):
    return value.weekday() == SUNDAY and value.hour < SUNDAY_MORNING_CUTOFF_HOUR


def time_text(value):
    """
    "today" for Sunday morning events (before 16:00), "tonight" for everything else.
    Lowercase; callers capitalize when it opens a sentence.
    """
    if value and is_sunday_morning(value):
        return "today"
    return "tonight"


def format_event_when(value):
    """e.g. "Sunday, Aug 3 at 10:00"."""
    return f"{DAY_NAMES[value.weekday()]}, {MONTH_LABELS[value.month - 1]} {value.day} at {value:%H:%M}"


def _plural(count, unit):
    return f"{count} {unit}{'' if count == 1 else 's'}"


def _split_delta(target, now):
    total_minutes = int((target - now).total_seconds() // 60)
    days, rem = divmod(total_minutes, 60 * 24)
    hours, minutes = divmod(rem, 60)
    return days, hours, minutes


def relative_time(target, now):
    """Coarse "In 2 days, 3 hours" style description used by /next."""
    days, hours, _ = _split_delta(target, now)
    if days > 0:
        return f"In {_plural(days, 'day')}, {_plural(hours, 'hour')}"
    if hours > 0:
        return f"In {_plural(hours, 'hour')}"
    return "Starting soon!"


def countdown_text(target, now):
    """Finer "2 days, 3 hours, 5 minutes" countdown used by /countdown."""
    days, hours, minutes = _split_delta(target, now)
    if days > 0:
        return f"{_plural(days, 'day')}, {_plural(hours, 'hour')}, {_plural(minutes, 'minute')}"
    if hours > 0:
        return f"{_plural(hours, 'hour')}, {_plural(minutes, 'minute')}"
    if minutes > 0:
        return _plural(minutes, "minute")
    return "Starting now!"
