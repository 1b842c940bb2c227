import time

import requests

from odessa import config
from odessa.hipsy_page import scrape_events_page
from odessa.utils.dates import now_local, parse_event_datetime, week_range
from odessa.utils.event_types import classify_event_type
from odessa.utils.http import request_with_retry
from odessa.utils.names import extract_dj_name, split_dj_names
from odessa.utils.urls import to_public_event_url


def _headers():
    headers = dict(config.HIPSY_HEADERS)
    if config.HIPSY_API_KEY:
        headers["Authorization"] = f"Bearer {config.HIPSY_API_KEY}"
    return headers


def _failure(error):
    return {"events": [], "total_count": 0, "success": False, "error": error}


def parse_event(raw):
    """Map one ticketing API record to an event dict."""
    title = (raw.get("title") or "").strip()
    dj_name = extract_dj_name(title)
    ticket_url = raw.get("url_ticketshop") or raw.get("url_hipsy")

    return {
        "id": str(raw.get("id", "")),
        "title": title,
        "date": raw.get("date"),
        "starts_at": parse_event_datetime(raw.get("date")),
        "picture": raw.get("picture") or raw.get("picture_small"),
        "ticket_url": to_public_event_url(ticket_url),
        "dj_name": dj_name,
        "dj_names": split_dj_names(dj_name),
        "event_type": classify_event_type(title),
        "description": raw.get("description") or "",
    }


def get_events(page=1, period="upcoming", limit=50, log_func=None):
    """
    Fetch one page of events for the organisation.
    period: "upcoming", "past" or "all".
    Never raises; failures come back with success=False and an error message.
    """
    log = log_func or print
    url = f"{config.HIPSY_BASE_URL}/organisation/{config.HIPSY_ORGANISATION}/events"
    params = {"page": page, "limit": limit, "period": period}

    try:
        resp = request_with_retry(
            "GET",
            url,
            params=params,
            headers=_headers(),
            timeout=config.HIPSY_TIMEOUT,
            log_func=log,
            label="Hipsy",
        )
        resp.raise_for_status()
        data = resp.json()
    except requests.exceptions.Timeout:
        log(f"    Hipsy: request timed out (page {page}, {period})")
        return _failure("API request timed out")
    except (requests.exceptions.RequestException, ValueError) as e:
        log(f"    Hipsy: ERROR - {e}")
        return _failure(str(e))

    records = data.get("data") if isinstance(data, dict) else None
    if not isinstance(records, list):
        log("    Hipsy: invalid response format")
        return _failure("Invalid response format")

    events = [parse_event(record) for record in records if isinstance(record, dict)]
    return {"events": events, "total_count": len(events), "success": True, "error": None}


def _in_range(event, start, end):
    starts_at = event.get("starts_at")
    return starts_at is not None and start <= starts_at.date() <= end


def get_events_between(start, end, log_func=None):
    """
    Collect events whose venue-local date falls within [start, end] (dates).
    Walks upcoming pages first, then past pages when the range begins before today.
    Returns (events, success) where success is False if the first page failed.
    """
    log = log_func or print
    today = now_local().date()
    by_id = {}
    success = True

    periods = ["upcoming"]
    if start < today:
        periods.append("past")

    for period in periods:
        for page in range(1, config.HIPSY_MAX_PAGES + 1):
            result = get_events(page=page, period=period, limit=30, log_func=log)
            if not result["success"]:
                log(f"    Hipsy: failed to fetch {period} page {page}: {result['error']}")
                if page == 1 and period == "upcoming":
                    success = False
                break

            if not result["events"]:
                break

            for event in result["events"]:
                if _in_range(event, start, end):
                    by_id.setdefault(event["id"], event)

            # Upcoming pages are date-ordered, so once a page runs past the range we're done.
            if period == "upcoming":
                dates = [e["starts_at"].date() for e in result["events"] if e.get("starts_at")]
                if dates and min(dates) > end:
                    break

            time.sleep(config.HIPSY_PAGE_DELAY)

    events = sorted(by_id.values(), key=lambda e: e["starts_at"])
    return events, success


def get_events_for_week(day=None, log_func=None):
    """Events for Monday to Sunday of the week containing day (default: today)."""
    log = log_func or print
    day = day or now_local().date()
    monday, sunday = week_range(day)
    events, success = get_events_between(monday, sunday, log_func=log)

    if not success:
        log("    Hipsy API unavailable, falling back to the public event page...")
        events = [e for e in scrape_events_page(log_func=log) if _in_range(e, monday, sunday)]
        events.sort(key=lambda e: e["starts_at"])

    return events


def get_events_for_day(day=None, log_func=None):
    """Events starting on the given venue-local date (default: today)."""
    day = day or now_local().date()
    result = get_events(page=1, period="upcoming", limit=10, log_func=log_func)
    if not result["success"]:
        raise RuntimeError(f"Failed to fetch events from Hipsy: {result['error']}")

    events = [e for e in result["events"] if _in_range(e, day, day)]
    return sorted(events, key=lambda e: e["starts_at"])


def find_next_event(now=None, log_func=None):
    """Return the first upcoming event starting at or after now, or None."""
    now = now or now_local()
    result = get_events(page=1, period="upcoming", limit=10, log_func=log_func)
    if not result["success"]:
        raise RuntimeError(f"Failed to fetch events from Hipsy: {result['error']}")

    upcoming = [e for e in result["events"] if e.get("starts_at") and e["starts_at"] >= now]
    if not upcoming:
        return None
    return min(upcoming, key=lambda e: e["starts_at"])
