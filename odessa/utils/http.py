import random
import time

import requests


def backoff_delay(attempt, base=2):
    """Exponential backoff with jitter: 2s, 4s, 8s... plus up to a second."""
    return (base ** (attempt + 1)) + random.uniform(0, 1)


def request_with_retry(method, url, max_retries=2, log_func=None, label=None, **kwargs):
    """
    Send an HTTP request, retrying timeouts, connection errors and 5xx responses.
    Returns the last response (callers check status). Raises the last
    request exception when every attempt failed to get a response.
    """
    log = log_func or print
    label = label or url

    for attempt in range(max_retries):
        try:
            resp = requests.request(method, url, **kwargs)
            if resp.status_code >= 500 and attempt < max_retries - 1:
                wait = backoff_delay(attempt)
                log(f"    {label}: HTTP {resp.status_code}, retry {attempt + 1}/{max_retries} in {wait:.1f}s")
                time.sleep(wait)
                continue
            return resp
        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            if attempt < max_retries - 1:
                wait = backoff_delay(attempt)
                log(f"    {label}: Retry {attempt + 1}/{max_retries} after {type(e).__name__}...")
                time.sleep(wait)
            else:
                raise
    return None
