import re

from odessa.utils.dates import SUNDAY

ED = "ED"
CACAO_ED = "Cacao ED"
QUEERSTATIC = "Queerstatic"
LIVE_MUSIC = "Live Music"
JOURNEY = "Ecstatic Journey"

EVENT_TYPES = [ED, CACAO_ED, QUEERSTATIC, LIVE_MUSIC, JOURNEY]

SHORT_LABELS = {
    ED: "ED",
    CACAO_ED: "Cacao ED",
    QUEERSTATIC: "Queerstatic",
    LIVE_MUSIC: "Live Music",
    JOURNEY: "Journey",
}

LONG_LABELS = {
    ED: "Ecstatic Dance",
    CACAO_ED: "Cacao Ecstatic Dance",
    QUEERSTATIC: "Queerstatic",
    LIVE_MUSIC: "Live Music",
    JOURNEY: "Journey",
}

DEFAULT_LABEL = "Event"

_ED_WORD = re.compile(r"\bed\b")


def classify_event_type(title):
    """
    Detect the event type from its title using keyword analysis.
    Priority order: queerstatic > cacao > journey > ecstatic dance > live music.
    Returns None if uncertain.
    """
    if not title:
        return None

    text = title.lower()
    mentions_ed = "ecstatic" in text or bool(_ED_WORD.search(text))

    if "queerstatic" in text:
        return QUEERSTATIC
    if "cacao" in text and mentions_ed:
        return CACAO_ED
    if "journey" in text:
        return JOURNEY
    if "ecstatic dance" in text or _ED_WORD.search(text):
        return ED
    if "live" in text:
        return LIVE_MUSIC
    return None


def short_label(event_type):
    """Compact label for the weekly overview ("ED", "Cacao ED", ...)."""
    return SHORT_LABELS.get(event_type, DEFAULT_LABEL)


def long_label(event_type, starts_at=None):
    """
    Spelled-out label for who's-playing messages.
    Plain ED on a Sunday is the morning session.
    """
    if event_type == ED and starts_at is not None and starts_at.weekday() == SUNDAY:
        return "Morning Ecstatic Dance"
    return LONG_LABELS.get(event_type, DEFAULT_LABEL)
