from urllib.parse import urlparse

from odessa import config


def is_valid_url(url):
    """Only absolute http(s) URLs are allowed in chat buttons and links."""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def sanitize_url(url, default=config.TICKETS_URL):
    """Return url if valid, else default (which may be None to drop the link)."""
    if is_valid_url(url):
        return url.strip()
    return default


def to_public_event_url(url):
    """
    Rewrite ticket-shop API links to the public event page.
    https://api.hipsy.nl/shop/128407-queerstatic -> https://hipsy.nl/event/128407-queerstatic
    """
    if not url:
        return url
    prefix = "https://api.hipsy.nl/shop/"
    if url.startswith(prefix):
        return f"{config.HIPSY_PUBLIC_URL}/event/{url[len(prefix):]}"
    return url
