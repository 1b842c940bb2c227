"""
DJ / facilitator metadata lookup.

Sources, in order:
  1) Wix CMS "Team" collection (when WIX_API_KEY and WIX_SITE_ID are set)
  2) Local dataset (data/djs.json, plus Musical_Facilitators.csv when present)
"""

import csv
import json
import random
import re
import time

import requests

from odessa import config
from odessa.utils.names import is_placeholder_name

# Local dataset, keyed by display name
_local_djs = {}
_local_loaded = False

# Wix collection cache: list of records plus fetch time
_wix_records = None
_wix_fetched_at = 0


def normalize_dj_name(name):
    """Normalize DJ names for matching (Ma'rifa == Ma-rifa == ma’rifa)."""
    if not name:
        return ""
    normalized = name.strip().lower()
    normalized = re.sub(r"['‘’`]", "-", normalized)
    normalized = re.sub(r"[-–—]", "-", normalized)
    normalized = re.sub(r"\s+", " ", normalized)
    return normalized


def _record(name, photo=None, short_description=None, soundcloud=None, instagram=None, website=None):
    return {
        "name": name,
        "photo": photo or None,
        "short_description": short_description or None,
        "soundcloud": soundcloud or None,
        "instagram": instagram or None,
        "website": website or None,
    }


def _record_from_json(name, entry):
    entry = entry or {}
    return _record(
        name,
        photo=entry.get("photo"),
        short_description=entry.get("shortDescription"),
        soundcloud=entry.get("soundcloud") or entry.get("link"),
        instagram=entry.get("instagram"),
        website=entry.get("website"),
    )


def _load_csv(path):
    """Musical_Facilitators.csv columns: name, image, short description, _, soundcloud, instagram, website, email."""
    records = {}
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        next(reader, None)
        for row in reader:
            if len(row) < 7 or not row[0].strip():
                continue
            name = row[0].strip()
            records[name] = _record(
                name,
                photo=row[1].strip(),
                short_description=row[2].strip(),
                soundcloud=row[4].strip(),
                instagram=row[5].strip(),
                website=row[6].strip(),
            )
    return records


def load_local_djs(path=None, csv_path=None):
    """Load the local DJ dataset (JSON first, CSV entries fill in names the JSON lacks)."""
    global _local_djs, _local_loaded
    path = path or config.DJ_DATA_PATH
    csv_path = csv_path or config.DJ_CSV_PATH
    djs = {}

    try:
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            for name, entry in data.items():
                djs[name] = _record_from_json(name, entry)
            print(f"  Loaded {len(djs)} DJ records from {path.name}")
    except (OSError, json.JSONDecodeError) as e:
        print(f"  Warning: Could not load DJ data: {e}")

    try:
        if csv_path.exists():
            for name, record in _load_csv(csv_path).items():
                djs.setdefault(name, record)
    except (OSError, csv.Error) as e:
        print(f"  Warning: Could not load DJ CSV: {e}")

    _local_djs = djs
    _local_loaded = True
    return _local_djs


def ensure_local_loaded():
    if not _local_loaded:
        load_local_djs()


def match_record(name, records_by_name):
    """
    Find a record by name: exact, then normalized, then partial containment
    ("Ruby" finds "RubyDub"). Partial matching needs at least 4 characters.
    """
    if not name:
        return None
    if name in records_by_name:
        return records_by_name[name]

    target = normalize_dj_name(name)
    normalized = {normalize_dj_name(key): record for key, record in records_by_name.items()}
    if target in normalized:
        return normalized[target]

    if len(target) < 4:
        return None
    compact_target = target.replace(" ", "")
    for key, record in normalized.items():
        compact_key = key.replace(" ", "")
        if len(compact_key) >= 4 and (compact_target in compact_key or compact_key in compact_target):
            return record
    return None


def find_local_dj(name):
    ensure_local_loaded()
    return match_record(name, _local_djs)


def wix_configured():
    return bool(config.WIX_API_KEY and config.WIX_SITE_ID)


def wix_image_url(value):
    """Convert wix:image://v1/<media-id>/<file>#... into a static media URL."""
    if not value:
        return None
    if value.startswith("wix:image://v1/"):
        media_id = value[len("wix:image://v1/"):].split("/")[0]
        return f"{config.WIX_MEDIA_URL}/{media_id}" if media_id else None
    return value


def _record_from_wix(item):
    return _record(
        (item.get("title") or "").strip(),
        photo=wix_image_url(item.get("photo")),
        short_description=item.get("shortDescription"),
        soundcloud=item.get("website"),
        instagram=item.get("website2"),
        website=item.get("website1"),
    )


def fetch_wix_djs(page_size=100, max_pages=10):
    """Fetch the whole Team collection from Wix Data. Raises on API errors."""
    headers = {
        "Content-Type": "application/json",
        "Authorization": config.WIX_API_KEY,
        "wix-site-id": config.WIX_SITE_ID,
    }
    items = []
    for page in range(max_pages):
        body = {
            "collectionId": config.WIX_COLLECTION,
            "query": {"paging": {"limit": page_size, "offset": page * page_size}},
        }
        resp = requests.post(f"{config.WIX_BASE_URL}/items/query", headers=headers, json=body, timeout=15)
        resp.raise_for_status()
        data = resp.json()
        batch = data.get("dataItems") or data.get("items") or []
        items.extend(item.get("data", item) for item in batch)

        total = (data.get("pagingMetadata") or {}).get("total")
        if len(batch) < page_size or (total is not None and len(items) >= total):
            break

    return [_record_from_wix(item) for item in items if item.get("title")]


def get_wix_djs():
    """Cached Wix records; an empty list when unconfigured or unavailable."""
    global _wix_records, _wix_fetched_at
    if not wix_configured():
        return []

    now = time.time()
    if _wix_records is not None and now - _wix_fetched_at < config.WIX_CACHE_DURATION:
        return _wix_records

    try:
        _wix_records = fetch_wix_djs()
        print(f"  Loaded {len(_wix_records)} DJ records from Wix CMS")
    except (requests.exceptions.RequestException, ValueError) as e:
        print(f"  Warning: Wix CMS lookup failed: {e}")
        _wix_records = []
    _wix_fetched_at = now
    return _wix_records


def clear_cache():
    global _wix_records, _wix_fetched_at, _local_djs, _local_loaded
    _wix_records = None
    _wix_fetched_at = 0
    _local_djs = {}
    _local_loaded = False


def get_dj_info(name):
    """Return the DJ record for name (CMS first, then local data), or None."""
    if is_placeholder_name(name):
        return None

    wix_by_name = {record["name"]: record for record in get_wix_djs()}
    record = match_record(name, wix_by_name)
    if record:
        return record
    return find_local_dj(name)


def all_dj_names():
    """Sorted names across the CMS and the local dataset."""
    ensure_local_loaded()
    names = {record["name"] for record in get_wix_djs()}
    names.update(_local_djs.keys())
    return sorted(names, key=str.lower)


def random_dj():
    names = all_dj_names()
    if not names:
        return None
    return get_dj_info(random.choice(names))


def best_link(record):
    """Best single link for a DJ: SoundCloud, then Instagram, then website."""
    if not record:
        return None
    for key in ("soundcloud", "instagram", "website"):
        if record.get(key):
            return record[key]
    return None
