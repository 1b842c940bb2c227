"""
Chat command handlers.

Each handler takes (client, chat_id, args) and returns the schedule (list of
message dicts) to reply with. handle_update routes a Bot API update to the
right handler, sends the reply and turns failures into an apology message.
"""

import time
import traceback

from odessa import config
from odessa import hipsy
from odessa import registry
from odessa.formatters import info
from odessa.formatters.weekly import format_weekly_schedule
from odessa.formatters.whosplaying import format_whosplaying
from odessa.pipeline.groups import add_group, is_group_or_channel
from odessa.telegram import TelegramError, send_schedule


class RateLimiter:
    """Allow one request per user per window."""

    def __init__(self, window_seconds=None):
        self.window_seconds = config.RATE_LIMIT_SECONDS if window_seconds is None else window_seconds
        self._last_seen = {}

    def allow(self, user_id, now=None):
        now = time.monotonic() if now is None else now
        # Forget users whose window has expired
        self._last_seen = {
            uid: seen for uid, seen in self._last_seen.items() if now - seen < self.window_seconds
        }
        if user_id in self._last_seen:
            return False
        self._last_seen[user_id] = now
        return True


_limiter = RateLimiter()


def whosplaying(client, chat_id, args):
    return format_whosplaying(hipsy.get_events_for_day())


def schedule(client, chat_id, args):
    return format_weekly_schedule(hipsy.get_events_for_week())


def next_event(client, chat_id, args):
    return info.next_event_message(hipsy.find_next_event())


def countdown(client, chat_id, args):
    return info.countdown_message(hipsy.find_next_event())


def dj(client, chat_id, args):
    name = args.strip()
    if not name:
        return info.dj_list_message()
    return info.dj_profile_message(name)


def discover(client, chat_id, args):
    return info.discover_message()


def location(client, chat_id, args):
    client.send_location(chat_id, config.VENUE_LATITUDE, config.VENUE_LONGITUDE)
    return info.location_message()


def start(client, chat_id, args):
    return info.start_message()


def help_(client, chat_id, args):
    return info.help_message()


def commands(client, chat_id, args):
    return info.commands_message()


def venue(client, chat_id, args):
    return info.venue_message()


def types(client, chat_id, args):
    return info.types_message()


def parse_command(text):
    """
    Split "/dj@OdessaBot Samaya" into ("/dj", "Samaya").
    Returns (None, "") for anything that isn't a command.
    """
    text = (text or "").strip()
    if not text.startswith("/"):
        return None, ""
    head, _, args = text.partition(" ")
    command = head.split("@", 1)[0].lower()
    return command, args.strip()


def _message_of(update):
    return update.get("message") or update.get("channel_post") or update.get("edited_message")


def handle_update(update, client, limiter=None, log_func=None):
    """
    Handle one Bot API update (from getUpdates or a webhook body).
    Returns the command that was handled, or None when the update was ignored.
    """
    log = log_func or print
    limiter = limiter or _limiter

    message = _message_of(update)
    if not message or "chat" not in message:
        return None

    chat_id = message["chat"]["id"]
    if is_group_or_channel(chat_id):
        try:
            add_group(chat_id)
        except OSError as e:
            log(f"  Warning: could not track group {chat_id}: {e}")

    command, args = parse_command(message.get("text"))
    handler = registry.get_commands().get(command)
    if not handler:
        return None

    user_id = (message.get("from") or {}).get("id", chat_id)
    if command in config.RATE_LIMITED_COMMANDS:
        if not limiter.allow(user_id):
            log(f"  Rate limited {command} for user {user_id}")
            return None
        try:
            client.send_chat_action(chat_id, "typing")
        except TelegramError as e:
            log(f"  Warning: typing indicator failed: {e}")

    log(f"Handling {command} for chat {chat_id}")
    try:
        reply = handler(client, chat_id, args)
    except Exception as e:
        log(f"  ERROR: {command} failed: {e}")
        log(f"  Traceback:\n{traceback.format_exc()}")
        reply = info.apology(command)

    try:
        send_schedule(client, chat_id, reply, log_func=log)
    except TelegramError as e:
        log(f"  ERROR: Failed to reply to {chat_id}: {e}")

    return command
