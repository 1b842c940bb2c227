import pytest

from odessa import config
from odessa import hipsy
from odessa.commands import RateLimiter, handle_update, parse_command
from odessa.formatters import info
from odessa.formatters.whosplaying import EMPTY_TEXT
from odessa.pipeline.groups import load_groups
from odessa.telegram import TelegramError


class FakeClient:
    def __init__(self):
        self.calls = []

    def send_message(self, chat_id, text, keyboard=None):
        self.calls.append(("message", chat_id, text))

    def send_photo(self, chat_id, photo, caption=None, keyboard=None):
        self.calls.append(("photo", chat_id, caption))

    def send_video(self, chat_id, video, caption=None, keyboard=None):
        self.calls.append(("video", chat_id, caption))

    def send_location(self, chat_id, latitude, longitude):
        self.calls.append(("location", chat_id, (latitude, longitude)))

    def send_chat_action(self, chat_id, action="typing"):
        self.calls.append(("action", chat_id, action))


def update(text, chat_id=-100, user_id=7):
    return {
        "update_id": 1,
        "message": {
            "message_id": 10,
            "from": {"id": user_id, "first_name": "Sam"},
            "chat": {"id": chat_id, "type": "group" if chat_id < 0 else "private"},
            "text": text,
        },
    }


def quiet(*_):
    pass


@pytest.fixture(autouse=True)
def groups_path(tmp_path, monkeypatch):
    path = tmp_path / "groups.json"
    monkeypatch.setattr(config, "GROUPS_PATH", path)
    return path


def test_parse_command():
    assert parse_command("/dj@OdessaBot Samaya") == ("/dj", "Samaya")
    assert parse_command("/WHOSPLAYING") == ("/whosplaying", "")
    assert parse_command("/dj  Ma'rifa ") == ("/dj", "Ma'rifa")
    assert parse_command("hello /start") == (None, "")
    assert parse_command(None) == (None, "")


def test_start_replies_and_tracks_group(groups_path):
    client = FakeClient()

    handled = handle_update(update("/start"), client, limiter=RateLimiter(60), log_func=quiet)

    assert handled == "/start"
    assert client.calls == [("message", -100, info.START_TEXT)]
    assert load_groups(groups_path) == [-100]


def test_private_chat_not_tracked(groups_path):
    client = FakeClient()

    handle_update(update("/help", chat_id=42), client, limiter=RateLimiter(60), log_func=quiet)

    assert client.calls == [("message", 42, info.HELP_TEXT)]
    assert load_groups(groups_path) == []


def test_plain_text_and_unknown_commands_ignored():
    client = FakeClient()
    limiter = RateLimiter(60)

    assert handle_update(update("hello everyone"), client, limiter=limiter, log_func=quiet) is None
    assert handle_update(update("/unknown"), client, limiter=limiter, log_func=quiet) is None
    assert handle_update({"update_id": 2, "callback_query": {}}, client, limiter=limiter, log_func=quiet) is None
    assert client.calls == []


def test_whosplaying_shows_typing_and_is_rate_limited(monkeypatch):
    monkeypatch.setattr(hipsy, "get_events_for_day", lambda: [])
    client = FakeClient()
    limiter = RateLimiter(60)

    assert handle_update(update("/whosplaying@OdessaBot"), client, limiter=limiter, log_func=quiet) == "/whosplaying"
    assert client.calls == [("action", -100, "typing"), ("message", -100, EMPTY_TEXT)]

    # Same user again within the window
    assert handle_update(update("/whosplaying"), client, limiter=limiter, log_func=quiet) is None
    assert len(client.calls) == 2

    # A different user is not limited
    assert handle_update(update("/whosplaying", user_id=8), client, limiter=limiter, log_func=quiet) == "/whosplaying"


def test_rate_limiter_window():
    limiter = RateLimiter(60)
    assert limiter.allow(1, now=100.0) is True
    assert limiter.allow(1, now=130.0) is False
    assert limiter.allow(1, now=161.0) is True


def test_failure_sends_apology(monkeypatch):
    def boom():
        raise RuntimeError("Failed to fetch events from Hipsy: down")

    monkeypatch.setattr(hipsy, "get_events_for_week", boom)
    client = FakeClient()

    handle_update(update("/schedule"), client, limiter=RateLimiter(60), log_func=quiet)

    assert client.calls[-1] == ("message", -100, info.APOLOGIES["/schedule"])


def test_typing_failure_does_not_block_reply(monkeypatch):
    monkeypatch.setattr(hipsy, "get_events_for_day", lambda: [])

    class NoTyping(FakeClient):
        def send_chat_action(self, chat_id, action="typing"):
            raise TelegramError("sendChatAction", "Forbidden")

    client = NoTyping()
    handle_update(update("/whosplaying"), client, limiter=RateLimiter(60), log_func=quiet)

    assert client.calls == [("message", -100, EMPTY_TEXT)]


def test_location_sends_pin_then_text():
    client = FakeClient()

    handle_update(update("/location"), client, limiter=RateLimiter(60), log_func=quiet)

    assert client.calls == [
        ("location", -100, (config.VENUE_LATITUDE, config.VENUE_LONGITUDE)),
        ("message", -100, info.LOCATION_TEXT),
    ]


def test_dj_without_name_lists_roster(monkeypatch):
    monkeypatch.setattr(info, "all_dj_names", lambda: ["Samaya", "Leela"])
    client = FakeClient()

    handle_update(update("/dj"), client, limiter=RateLimiter(60), log_func=quiet)

    assert "• Leela\n• Samaya" in client.calls[0][2]


def test_next_with_no_upcoming_events(monkeypatch):
    monkeypatch.setattr(hipsy, "find_next_event", lambda: None)
    client = FakeClient()

    handle_update(update("/next"), client, limiter=RateLimiter(60), log_func=quiet)

    assert client.calls == [("message", -100, info.NO_UPCOMING_TEXT)]


def test_channel_posts_are_handled(groups_path):
    client = FakeClient()
    channel_update = {"update_id": 3, "channel_post": {"chat": {"id": -1009, "type": "channel"}, "text": "/types"}}

    assert handle_update(channel_update, client, limiter=RateLimiter(60), log_func=quiet) == "/types"
    assert client.calls == [("message", -1009, info.TYPES_TEXT)]
    assert load_groups(groups_path) == [-1009]


def test_unwritable_groups_file_still_replies(tmp_path, monkeypatch):
    # A directory in place of the groups file makes every write fail
    monkeypatch.setattr(config, "GROUPS_PATH", tmp_path)
    client = FakeClient()
    logged = []

    handled = handle_update(update("/help"), client, limiter=RateLimiter(60), log_func=logged.append)

    assert handled == "/help"
    assert client.calls == [("message", -100, info.HELP_TEXT)]
    assert any("could not track group -100" in line for line in logged)


def test_rate_limiter_forgets_expired_users():
    limiter = RateLimiter(60)
    limiter.allow(1, now=100.0)
    limiter.allow(2, now=130.0)

    assert limiter.allow(3, now=170.0) is True
    assert set(limiter._last_seen) == {2, 3}
