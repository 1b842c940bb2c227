"""
Texts for the informational commands (/next, /countdown, /dj, /discover,
/venue, /location, /types, /start, /help, /commands).
Each builder returns a schedule: a list of message dicts.
"""

from html import escape

from odessa import config
from odessa.dj_lookup import all_dj_names, get_dj_info, random_dj
from odessa.utils.dates import countdown_text, format_event_when, now_local, relative_time
from odessa.utils.urls import sanitize_url

MAPS_URL = f"https://maps.google.com/?q={config.VENUE_LATITUDE},{config.VENUE_LONGITUDE}"

NO_UPCOMING_TEXT = "🚢 No upcoming events found. Check back later!"

START_TEXT = """🤖 <b>Welcome to the Odessa Schedule Bot!</b>

I can help you check who's playing today at Odessa boat events in Amsterdam.

<b>Available commands:</b>
• /whosplaying - Check who is facilitating today
• /schedule - View this week's schedule
• /help - Show this help message

Just send /whosplaying to get started! 🌴🎶"""

HELP_TEXT = """🤖 <b>Odessa Schedule Bot Help</b>

<b>Commands:</b>
• /whosplaying - Check who is facilitating today
• /schedule - View the week's schedule
• /help - Show this help message"""

COMMANDS_TEXT = """🤖 <b>Available Commands</b>

<b>Events & Schedule:</b>
• /whosplaying - Who's facilitating today
• /schedule - This week's schedule
• /next - Next upcoming event
• /countdown - Countdown to next event

<b>DJ Info:</b>
• /dj [name] - DJ profile lookup
• /discover - Discover a random DJ

<b>Venue & Info:</b>
• /venue - Boat location & practical info
• /location - Get map pin
• /types - Event types explained

<b>Help:</b>
• /start - Welcome message
• /help - Quick help
• /commands - This list"""

TYPES_TEXT = """🎭 <b>Event Types at Odessa</b>

🌅 <b>Ecstatic Dance (ED)</b>
Free-form dancing to a DJ-guided journey.
Sunday mornings are "Morning ED"!

🍫 <b>Cacao Ecstatic Dance</b>
Heart-opening cacao ceremony followed
by ecstatic dance.

🌈 <b>Queerstatic</b>
LGBTQ+ inclusive dance celebration.

🎵 <b>Live Music</b>
Live musicians creating the sonic journey.

🌌 <b>Journey</b>
Deeper, longer explorations of sound
and movement.

━━━━━━━━━━━━━━━━━━━━━
All events are sober, barefoot,
and phone-free spaces. 🙏"""

VENUE_TEXT = f"""🚢 <b>{config.VENUE_NAME}</b>

📍 NDSM Wharf, Amsterdam
🗺️ Coordinates: {config.VENUE_LATITUDE}° N, {config.VENUE_LONGITUDE}° E

🚌 <b>Getting there:</b>
• Ferry 901/907 from Centraal (free!)
• Bus 38 to NDSM Werf
• Bike parking available

📝 <b>Good to know:</b>
• Barefoot dancing space
• Phone-free environment
• Bring water bottle
• Dress comfortably

🌐 {config.TICKETS_URL.split("://", 1)[-1]}"""

LOCATION_TEXT = f"""📍 <b>Odessa Location</b>

🚢 NDSM Wharf, Amsterdam

Open in Google Maps:
{MAPS_URL}"""

# Sent when building a reply fails
APOLOGIES = {
    "/whosplaying": (
        "❌ <b>Error fetching today's schedule</b>\n\n"
        "Sorry, I couldn't fetch today's schedule. Please try again later.\n\n"
        "If this problem persists, contact the bot administrator."
    ),
    "/schedule": (
        "❌ <b>Error fetching weekly schedule</b>\n\n"
        "Sorry, I couldn't fetch this week's schedule. Please try again later.\n\n"
        "If this problem persists, contact the bot administrator."
    ),
    "/next": "❌ Sorry, I couldn't fetch the next event. Please try again later.",
    "/countdown": "❌ Sorry, I couldn't fetch the countdown. Please try again later.",
    "/dj": "❌ Sorry, I couldn't fetch DJ info. Please try again later.",
    "/discover": "❌ Sorry, I couldn't fetch a random DJ. Please try again later.",
    "/location": "❌ Sorry, I couldn't send the location. Please try again.",
}
DEFAULT_APOLOGY = "❌ Sorry, something went wrong. Please try again later."


def _text(text, keyboard=None, photo=None):
    message = {"text": text}
    if keyboard:
        message["keyboard"] = keyboard
    if photo:
        message["photo"] = photo
    return message


def _row(*buttons):
    row = [b for b in buttons if b]
    return {"inline_keyboard": [row]} if row else None


def _button(text, url):
    url = sanitize_url(url, default=None)
    return {"text": text, "url": url} if url else None


def start_message():
    return [_text(START_TEXT)]


def help_message():
    return [_text(HELP_TEXT)]


def commands_message():
    return [_text(COMMANDS_TEXT)]


def types_message():
    return [_text(TYPES_TEXT)]


def venue_message():
    keyboard = {
        "inline_keyboard": [[
            {"text": "📍 GOOGLE MAPS", "url": MAPS_URL},
            {"text": "🎫 TICKETS", "url": config.TICKETS_URL},
        ]]
    }
    return [_text(VENUE_TEXT, keyboard)]


def location_message():
    return [_text(LOCATION_TEXT)]


def apology(command):
    return [_text(APOLOGIES.get(command, DEFAULT_APOLOGY))]


def next_event_message(event, now=None, lookup=get_dj_info):
    """/next: when, what and how long until the next event."""
    if not event:
        return [_text(NO_UPCOMING_TEXT)]

    now = now or now_local()
    starts_at = event["starts_at"]
    record = lookup(event["dj_name"]) if event.get("dj_name") else None

    text = (
        "🚀 <b>Next up on Odessa:</b>\n\n"
        f"🗓️ {format_event_when(starts_at)}\n"
        f"🎶 {escape(event['title'])}\n"
        f"⏰ {relative_time(starts_at, now)}"
    )
    keyboard = _row(
        _button("🎫 TICKETS", event.get("ticket_url")),
        _button("🎧 LISTEN", record.get("soundcloud") if record else None),
    )
    return [_text(text, keyboard, record.get("photo") if record else None)]


def countdown_message(event, now=None):
    """/countdown: a finer countdown to the next event."""
    if not event:
        return [_text(NO_UPCOMING_TEXT)]

    now = now or now_local()
    starts_at = event["starts_at"]
    title = event["title"]
    event_name = title.split(" with ")[0] or title

    text = (
        f"⏱️ <b>Countdown to {escape(event_name)}</b>\n\n"
        f"🎶 DJ: {escape(event.get('dj_name') or 'TBA')}\n"
        f"📅 {format_event_when(starts_at)}\n\n"
        f"⏳ <b>{countdown_text(starts_at, now)}</b>\n\n"
        "The boat is calling! 🚢"
    )
    return [_text(text, _row(_button("🎫 TICKETS", event.get("ticket_url"))))]


def dj_list_message(names=None):
    names = sorted(all_dj_names() if names is None else names, key=str.lower)
    listing = "\n".join(f"• {escape(name)}" for name in names)
    text = f"🎧 <b>Odessa DJs</b>\n\nChoose a DJ to learn more:\n\n{listing}\n\n<i>Usage: /dj Samaya</i>"
    return [_text(text)]


def dj_profile_message(name, lookup=get_dj_info):
    """/dj <name>: profile with description, links and a listen button."""
    record = lookup(name)
    if not record:
        return [_text(f'❌ DJ "{escape(name)}" not found. Try /dj to see all available DJs.')]

    text = f"🎧 <b>{escape(record['name'].upper())}</b>"
    if record.get("short_description"):
        text += f'\n\n"{escape(record["short_description"])}"'

    links = []
    for key, icon, label in (("soundcloud", "🔗", "SoundCloud"), ("instagram", "📸", "Instagram"), ("website", "🌐", "Website")):
        url = sanitize_url(record.get(key), default=None)
        if url:
            links.append(f'{icon} <a href="{escape(url)}">{label}</a>')
    if links:
        text += "\n\n" + "\n".join(links)

    keyboard = _row(_button("🎧 LISTEN ON SOUNDCLOUD", record.get("soundcloud")))
    return [_text(text, keyboard, record.get("photo"))]


def discover_message(record=None):
    """/discover: a random DJ from the roster."""
    record = record or random_dj()
    if not record:
        return [_text("❌ No DJs found in the database.")]

    text = f"🎲 <b>Discover a DJ</b>\n\n✨ <b>{escape(record['name'].upper())}</b> ✨"
    if record.get("short_description"):
        text += f'\n\n"{escape(record["short_description"])}"'
    text += "\n\nGive them a listen before the next event!"

    keyboard = _row(_button("🎧 LISTEN ON SOUNDCLOUD", record.get("soundcloud")))
    return [_text(text, keyboard, record.get("photo"))]
