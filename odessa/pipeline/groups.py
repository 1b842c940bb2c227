import json

from odessa import config


def is_group_or_channel(chat_id):
    """Telegram groups and channels have negative chat ids."""
    try:
        return int(chat_id) < 0
    except (TypeError, ValueError):
        return False


def load_groups(path=None):
    """Load tracked group/channel ids. A missing or unreadable file gives []."""
    path = path or config.GROUPS_PATH
    try:
        if path.exists():
            with open(path, "r") as f:
                data = json.load(f)
            return [int(g) for g in data.get("groups", [])]
    except (OSError, ValueError, AttributeError) as e:
        print(f"  Warning: Could not load groups: {e}")
    return []


def save_groups(groups, path=None):
    path = path or config.GROUPS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump({"groups": list(groups)}, f, indent=2)


def add_group(chat_id, path=None):
    """
    Track a group or channel id. Private chats are ignored.
    Returns True when the id was newly added.
    """
    if not is_group_or_channel(chat_id):
        return False

    chat_id = int(chat_id)
    groups = load_groups(path)
    if chat_id in groups:
        return False

    groups.append(chat_id)
    save_groups(groups, path)
    print(f"  Added new group/channel: {chat_id}")
    return True
