from html import escape

from odessa.dj_lookup import get_dj_info
from odessa.utils.dates import is_sunday_morning, time_text
from odessa.utils.event_types import long_label
from odessa.utils.names import join_names
from odessa.utils.urls import sanitize_url

EMPTY_TEXT = "🎭 <b>Today's Schedule</b>\n\nNo events scheduled for today."


def dj_buttons(ticket_url, record):
    """One row: tickets, then whichever DJ links are valid."""
    buttons = []
    ticket = sanitize_url(ticket_url)
    if ticket:
        buttons.append({"text": "🎟️ TICKETS", "url": ticket})

    if record:
        for key, text in (("soundcloud", "🎧 LISTEN"), ("instagram", "📸 INSTAGRAM"), ("website", "🌐 WEBSITE")):
            url = sanitize_url(record.get(key), default=None)
            if url:
                buttons.append({"text": text, "url": url})

    return {"inline_keyboard": [buttons]} if buttons else None


def _message(text, record=None, keyboard=None):
    message = {"text": text}
    if record and record.get("photo"):
        message["photo"] = record["photo"]
    if keyboard:
        message["keyboard"] = keyboard
    return message


def _performers(event):
    if event.get("dj_names"):
        return event["dj_names"]
    return [event.get("dj_name") or "TBA"]


def event_message(event, lookup=get_dj_info):
    """Message for one event; back-to-back pairings are named together without a profile."""
    names = _performers(event)
    if len(names) > 1:
        record, display = None, join_names(names)
    else:
        record = lookup(names[0])
        display = record["name"] if record else names[0]
    when = time_text(event["starts_at"]).capitalize()
    label = long_label(event.get("event_type"), event["starts_at"])

    text = f"🎶 {when} {label} with <b>{escape(display)}</b> 🎶"
    if record and record.get("short_description"):
        text += f"\n\n{escape(record['short_description'])}"

    return _message(text, record, dj_buttons(event.get("ticket_url"), record))


def b2b_messages(event, lookup=get_dj_info):
    """Intro announcing the pairing, then one message per performer."""
    names = event["dj_names"]
    when = time_text(event["starts_at"]).capitalize()
    label = long_label(event.get("event_type"), event["starts_at"])

    messages = [{"text": f"🌟 {when} with <b>{escape(join_names(names))}</b> ✨\n\n🎶 {label} B2B 🎶"}]
    for name in names:
        record = lookup(name)
        if record and record.get("short_description"):
            text = escape(record["short_description"])
        else:
            text = f"<b>{escape(name)}</b>"
        messages.append(_message(text, record, dj_buttons(event.get("ticket_url"), record)))
    return messages


def multi_event_intro(events):
    """Intro for a day with several events, naming up to two performers."""
    when = "Today" if any(is_sunday_morning(e["starts_at"]) for e in events) else "Tonight"

    unique = []
    for event in events:
        for name in _performers(event):
            if name not in unique:
                unique.append(name)

    if len(unique) == 1:
        return f"🌟 <b>{when}</b> with <b>{escape(unique[0])}</b> ✨\n\nMultiple events with the same DJ!"

    names = escape(join_names(unique[:2]))
    remaining = len(unique) - 2
    if remaining > 0:
        names = f"{names} &amp; {remaining} more"
    return f"🌟 <b>{when}</b> with <b>{names}</b> ✨\n\nA day filled with amazing music!"


def format_whosplaying(events, lookup=get_dj_info):
    """Build today's who's-playing schedule as a list of messages."""
    if not events:
        return [{"text": EMPTY_TEXT}]

    events = sorted(events, key=lambda e: e["starts_at"])
    if len(events) == 1:
        event = events[0]
        if len(event.get("dj_names") or []) > 1:
            return b2b_messages(event, lookup)
        return [event_message(event, lookup)]

    return [{"text": multi_event_intro(events)}] + [event_message(e, lookup) for e in events]
