from datetime import date, datetime, timedelta

from odessa import config
from odessa.utils.dates import (
    countdown_text,
    format_event_when,
    parse_event_datetime,
    relative_time,
    time_text,
    to_local,
    week_range,
)
from odessa.utils.event_types import (
    CACAO_ED,
    ED,
    JOURNEY,
    LIVE_MUSIC,
    QUEERSTATIC,
    classify_event_type,
    long_label,
    short_label,
)
from odessa.utils.names import extract_dj_name, is_placeholder_name, join_names, split_dj_names
from odessa.utils.urls import is_valid_url, sanitize_url, to_public_event_url


def test_extract_dj_name_patterns():
    assert extract_dj_name("Ecstatic Dance | Divana") == "Divana"
    assert extract_dj_name("Cacao ED w/ Leela") == "Leela"
    assert extract_dj_name("Sunday Ecstatic Dance with Samaya") == "Samaya"
    assert extract_dj_name("Queerstatic") is None
    assert extract_dj_name("") is None


def test_extract_dj_name_feat_by_and_dash():
    assert extract_dj_name("Ecstatic Dance feat. Yarl") == "Yarl"
    assert extract_dj_name("Cacao Ceremony by Inphiknight") == "Inphiknight"
    assert extract_dj_name("Ecstatic Dance - Jethro") == "Jethro"
    assert extract_dj_name("Ecstatic Dance – Henners") == "Henners"


def test_extract_dj_name_strips_decoration():
    assert extract_dj_name("Ecstatic Dance | Samaya (live) 🌴") == "Samaya"


def test_split_dj_names_b2b():
    assert split_dj_names("Divana b2b Leela") == ["Divana", "Leela"]
    assert split_dj_names("RubyDub & Anica") == ["RubyDub", "Anica"]
    assert split_dj_names("Samaya") == ["Samaya"]
    assert split_dj_names(None) == []


def test_split_dj_names_plus_and_x():
    assert split_dj_names("Henners + Jethro") == ["Henners", "Jethro"]
    assert split_dj_names("Yarl x Anica") == ["Yarl", "Anica"]
    assert split_dj_names("Yarl X Anica") == ["Yarl", "Anica"]
    # x inside a name is not a separator
    assert split_dj_names("Xavi") == ["Xavi"]
    assert split_dj_names("Maxx Leela") == ["Maxx Leela"]


def test_placeholder_names():
    assert is_placeholder_name("TBA") is True
    assert is_placeholder_name(" tbd ") is True
    assert is_placeholder_name(None) is True
    assert is_placeholder_name("Samaya") is False
    assert join_names(["A", "B"]) == "A & B"


def test_classify_event_type():
    assert classify_event_type("Ecstatic Dance | Samaya") == ED
    assert classify_event_type("Cacao Ecstatic Dance | Leela") == CACAO_ED
    assert classify_event_type("Cacao ED w/ Leela") == CACAO_ED
    assert classify_event_type("Queerstatic | Inphiknight") == QUEERSTATIC
    assert classify_event_type("Ecstatic Journey | Yarl") == JOURNEY
    assert classify_event_type("Live Music Night") == LIVE_MUSIC
    assert classify_event_type("Red Wedding Workshop") is None
    assert classify_event_type(None) is None


def test_event_type_labels():
    sunday = to_local(datetime(2026, 8, 2, 10, 0))
    saturday = to_local(datetime(2026, 8, 1, 20, 0))
    assert long_label(ED, sunday) == "Morning Ecstatic Dance"
    assert long_label(ED, saturday) == "Ecstatic Dance"
    assert long_label(None) == "Event"
    assert short_label(JOURNEY) == "Journey"
    assert short_label(CACAO_ED) == "Cacao ED"


def test_parse_event_datetime_variants():
    local = parse_event_datetime("2026-08-02 10:00:00")
    assert local.date() == date(2026, 8, 2)
    assert local.hour == 10
    assert str(local.tzinfo) == config.TIMEZONE

    # UTC input is converted to Amsterdam summer time
    utc = parse_event_datetime("2026-08-02T08:00:00Z")
    assert utc.hour == 10

    assert parse_event_datetime("2026-08-02").hour == 0
    assert parse_event_datetime("garbage") is None
    assert parse_event_datetime(None) is None


def test_week_range_monday_to_sunday():
    assert week_range(date(2026, 7, 29)) == (date(2026, 7, 27), date(2026, 8, 2))
    assert week_range(date(2026, 7, 27)) == (date(2026, 7, 27), date(2026, 8, 2))
    assert week_range(date(2026, 8, 2)) == (date(2026, 7, 27), date(2026, 8, 2))


def test_time_text_today_vs_tonight():
    assert time_text(to_local(datetime(2026, 8, 2, 10, 0))) == "today"
    assert time_text(to_local(datetime(2026, 8, 2, 18, 0))) == "tonight"
    assert time_text(to_local(datetime(2026, 8, 1, 20, 0))) == "tonight"


def test_format_event_when():
    assert format_event_when(to_local(datetime(2026, 8, 2, 10, 0))) == "Sunday, Aug 2 at 10:00"


def test_relative_time():
    now = datetime(2026, 7, 30, 12, 0)
    assert relative_time(now + timedelta(days=2, hours=3), now) == "In 2 days, 3 hours"
    assert relative_time(now + timedelta(days=1, hours=1), now) == "In 1 day, 1 hour"
    assert relative_time(now + timedelta(hours=1, minutes=10), now) == "In 1 hour"
    assert relative_time(now + timedelta(minutes=20), now) == "Starting soon!"


def test_countdown_text():
    now = datetime(2026, 7, 30, 12, 0)
    assert countdown_text(now + timedelta(days=1, minutes=5), now) == "1 day, 0 hours, 5 minutes"
    assert countdown_text(now + timedelta(hours=2, minutes=1), now) == "2 hours, 1 minute"
    assert countdown_text(now + timedelta(minutes=45), now) == "45 minutes"
    assert countdown_text(now + timedelta(seconds=30), now) == "Starting now!"


def test_url_validation():
    assert is_valid_url("https://soundcloud.com/samaya") is True
    assert is_valid_url("javascript:alert(1)") is False
    assert is_valid_url("soundcloud.com/samaya") is False
    assert is_valid_url("") is False
    assert sanitize_url("not a url") == config.TICKETS_URL
    assert sanitize_url("not a url", default=None) is None
    assert sanitize_url(" https://example.com ") == "https://example.com"


def test_to_public_event_url():
    assert (
        to_public_event_url("https://api.hipsy.nl/shop/128407-queerstatic")
        == "https://hipsy.nl/event/128407-queerstatic"
    )
    assert to_public_event_url("https://hipsy.nl/event/1") == "https://hipsy.nl/event/1"
    assert to_public_event_url(None) is None
