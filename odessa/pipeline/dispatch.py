import time
from dataclasses import dataclass
from typing import Optional

from odessa import config
from odessa.pipeline.groups import is_group_or_channel, load_groups
from odessa.telegram import TelegramError, send_schedule


@dataclass
class ChatDelivery:
    """Outcome of sending one schedule to one chat."""
    chat_id: int
    messages_sent: int = 0
    error: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def failed(self):
        return self.error is not None


def configured_chat_ids(value=None):
    """Parse the comma separated TELEGRAM_GROUP_CHAT_ID, keeping group/channel ids only."""
    value = config.TELEGRAM_GROUP_CHAT_ID if value is None else value
    ids = []
    for part in (value or "").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            chat_id = int(part)
        except ValueError:
            print(f"  Warning: ignoring invalid chat id {part!r}")
            continue
        if is_group_or_channel(chat_id):
            ids.append(chat_id)
    return ids


def broadcast_targets(configured=None, tracked=None):
    """Configured ids first, then tracked groups. Order-preserving, no duplicates."""
    configured = configured_chat_ids() if configured is None else configured
    tracked = load_groups() if tracked is None else tracked

    targets = []
    for chat_id in list(configured) + list(tracked):
        if chat_id not in targets:
            targets.append(chat_id)
    return targets


def broadcast(messages, chat_ids, client, log_func=None):
    """
    Send the same schedule to every chat, one chat at a time.
    A failing chat is logged and counted; the rest still get the schedule.
    Returns {chat_id: ChatDelivery}.
    """
    log = log_func or print
    results = {}

    for chat_id in chat_ids:
        delivery = ChatDelivery(chat_id=chat_id)
        start_time = time.time()
        try:
            delivery.messages_sent = send_schedule(client, chat_id, messages, log_func=log)
            log(f"  Sent {delivery.messages_sent} messages to {chat_id}")
        except TelegramError as e:
            delivery.error = str(e)
            log(f"  ERROR: Failed to send to {chat_id}: {e}")
        delivery.duration_ms = (time.time() - start_time) * 1000
        results[chat_id] = delivery

    return results
