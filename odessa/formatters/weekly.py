from html import escape

from odessa import config
from odessa.dj_lookup import best_link, get_dj_info
from odessa.utils.dates import SUNDAY, day_label
from odessa.utils.event_types import short_label
from odessa.utils.names import NAME_SEPARATOR
from odessa.utils.urls import sanitize_url

HEADER = "🪩 <b><u>This Week</u></b> 🌴🎶"
EMPTY_TEXT = "No events found for this week."


def tickets_keyboard():
    return {"inline_keyboard": [[{"text": "🎫 Tickets", "url": config.TICKETS_URL}]]}


def performer_html(name, lookup=get_dj_info):
    """Escaped performer name, linked to their best link when one is known."""
    link = sanitize_url(best_link(lookup(name)), default=None)
    if link:
        return f'<a href="{escape(link)}">{escape(name)}</a>'
    return escape(name)


def event_line(event, label, lookup=get_dj_info):
    names = event.get("dj_names") or ([event["dj_name"]] if event.get("dj_name") else ["TBA"])
    performers = escape(NAME_SEPARATOR).join(performer_html(name, lookup) for name in names)
    return f"<b>🗓️ {day_label(event['starts_at'])}: {label} | {performers}</b>"


def _labels(events):
    """
    Short type labels per event. When a Sunday has several events, the first
    is the morning session.
    """
    labels = [short_label(e.get("event_type")) for e in events]
    sunday = [i for i, e in enumerate(events) if e["starts_at"].weekday() == SUNDAY]
    if len(sunday) > 1:
        labels[sunday[0]] = "Morning ED"
    return labels


def format_weekly_schedule(events, lookup=get_dj_info):
    """
    Render the week's events as a single message with the weekly video and a
    tickets button. Returns a one-message schedule.
    """
    if not events:
        return [{"text": EMPTY_TEXT}]

    events = sorted(events, key=lambda e: e["starts_at"])
    lines = [event_line(e, label, lookup) for e, label in zip(events, _labels(events))]

    message = {
        "text": HEADER + "\n\n" + "\n".join(lines),
        "keyboard": tickets_keyboard(),
    }
    if config.WEEKLY_VIDEO_FILE_ID:
        message["video"] = config.WEEKLY_VIDEO_FILE_ID
    return [message]
