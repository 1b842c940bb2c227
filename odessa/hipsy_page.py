import re
from datetime import date, datetime, timedelta
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from odessa import config
from odessa.utils.dates import now_local, to_local
from odessa.utils.event_types import classify_event_type
from odessa.utils.http import request_with_retry
from odessa.utils.names import extract_dj_name, split_dj_names

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "maa": 3, "mrt": 3, "apr": 4, "mei": 5, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "okt": 10, "oct": 10, "nov": 11, "dec": 12,
}

CARD_SELECTOR = '[data-testid="event-card"], .event-card, .event-item'
TITLE_SELECTOR = 'h3, .event-title, [data-testid="event-title"]'
DATE_SELECTOR = '.event-date, [data-testid="event-date"], .date'

_MONTH_DATE = re.compile(r"(\d{1,2})\s+(" + "|".join(MONTHS) + r")[a-z]*\.?(?:\s+(\d{4}))?", re.IGNORECASE)
_SLASH_DATE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
_ISO_DATE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")
_TIME = re.compile(r"(\d{1,2})[:.](\d{2})")


def parse_date_text(text, today=None):
    """
    Parse the date shown on an event card.
    Handles: "zo 12 aug 10:00", "12 August 2026", "12/08/2026", "2026-08-12 20:00"
    Cards without a year are assumed to be within the coming months.
    Returns a venue-local datetime or None.
    """
    if not text:
        return None

    today = today or now_local().date()
    text = text.strip()
    parsed = None

    try:
        match = _ISO_DATE.search(text)
        if match:
            parsed = date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        else:
            match = _SLASH_DATE.search(text)
            if match:
                parsed = date(int(match.group(3)), int(match.group(2)), int(match.group(1)))
            else:
                match = _MONTH_DATE.search(text)
                if match:
                    day = int(match.group(1))
                    month = MONTHS[match.group(2).lower()[:3]]
                    year = int(match.group(3)) if match.group(3) else today.year
                    parsed = date(year, month, day)
                    if not match.group(3) and parsed < today - timedelta(days=180):
                        parsed = date(year + 1, month, day)
    except (ValueError, KeyError):
        return None

    if parsed is None:
        return None

    hour, minute = 0, 0
    remainder = text[match.end():]
    time_match = _TIME.search(remainder)
    if time_match and int(time_match.group(1)) < 24 and int(time_match.group(2)) < 60:
        hour, minute = int(time_match.group(1)), int(time_match.group(2))

    return to_local(datetime(parsed.year, parsed.month, parsed.day, hour, minute))


def parse_page(html, base_url=None, today=None):
    """Yield event dicts from the public organisation page."""
    base_url = base_url or config.TICKETS_URL
    soup = BeautifulSoup(html, "html.parser")

    for card in soup.select(CARD_SELECTOR):
        title_tag = card.select_one(TITLE_SELECTOR)
        title = title_tag.get_text(" ", strip=True) if title_tag else ""
        if not title:
            continue

        date_tag = card.select_one(DATE_SELECTOR)
        date_text = date_tag.get_text(" ", strip=True) if date_tag else ""
        starts_at = parse_date_text(date_text, today=today)
        if not starts_at:
            continue

        link = card.select_one('a[href*="ticket"], a[href*="event"], a[href*="book"]') or card.find("a", href=True)
        ticket_url = urljoin(config.HIPSY_PUBLIC_URL + "/", link["href"]) if link and link.get("href") else base_url

        img = card.find("img")
        dj_name = extract_dj_name(title)
        slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")

        yield {
            "id": f"{slug}-{starts_at.date().isoformat()}",
            "title": title,
            "date": date_text,
            "starts_at": starts_at,
            "picture": img.get("src") if img else None,
            "ticket_url": ticket_url,
            "dj_name": dj_name,
            "dj_names": split_dj_names(dj_name),
            "event_type": classify_event_type(title),
            "description": "",
        }


def scrape_events_page(log_func=None):
    """Scrape the public organisation page. Returns [] on any fetch error."""
    log = log_func or print
    try:
        resp = request_with_retry(
            "GET",
            config.TICKETS_URL,
            headers=config.HIPSY_PAGE_HEADERS,
            timeout=config.HIPSY_TIMEOUT,
            log_func=log,
            label="Hipsy page",
        )
        resp.raise_for_status()
    except requests.exceptions.RequestException as e:
        log(f"    Hipsy page: ERROR - {e}")
        return []

    events = list(parse_page(resp.text))
    log(f"    Hipsy page: {len(events)} events")
    return events
