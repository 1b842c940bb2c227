import re

# Order matters: the pipe form is how the series titles nearly all events.
DJ_NAME_PATTERNS = [
    re.compile(r"\|\s*([^|]+)$"),
    re.compile(r"\bw/\s*(.+)$", re.IGNORECASE),
    re.compile(r"\bwith\s+(.+)$", re.IGNORECASE),
    re.compile(r"\bfeat\.?\s+(.+)$", re.IGNORECASE),
    re.compile(r"\bby\s+(.+)$", re.IGNORECASE),
    re.compile(r"\s[-–—]\s*(.+)$"),
]

B2B_SEPARATOR = re.compile(r"\s+(?:b2b|&|\+|x)\s+", re.IGNORECASE)

PLACEHOLDER_NAMES = {"tba", "tbd", "tbc", "unknown"}

NAME_SEPARATOR = " & "


def clean_dj_name(name):
    """Strip whitespace and trailing decoration like emoji or "(live)"."""
    if not name:
        return None
    name = re.sub(r"\((?:live|dj set|set)\)", " ", name, flags=re.IGNORECASE)
    name = re.sub(r"[^\w\s'’&+.\-]+$", "", name.strip())
    name = re.sub(r"\s+", " ", name).strip(" -")
    return name or None


def extract_dj_name(title):
    """
    Extract the performer part of an event title.
    "Ecstatic Dance | Divana" -> "Divana", "Cacao ED w/ Leela" -> "Leela".
    Returns None when no pattern matches.
    """
    if not title:
        return None

    for pattern in DJ_NAME_PATTERNS:
        match = pattern.search(title)
        if match:
            name = clean_dj_name(match.group(1))
            if name:
                return name
    return None


def split_dj_names(name):
    """
    Split a back-to-back pairing into individual performers.
    "Divana b2b Leela" -> ["Divana", "Leela"]; a single name gives a one-item list.
    """
    if not name:
        return []
    parts = [clean_dj_name(part) for part in B2B_SEPARATOR.split(name)]
    return [part for part in parts if part]


def is_placeholder_name(name):
    return not name or name.strip().lower() in PLACEHOLDER_NAMES


def join_names(names):
    return NAME_SEPARATOR.join(names)
