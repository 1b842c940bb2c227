import time

import requests

from odessa import config
from odessa.utils.http import request_with_retry


class TelegramError(Exception):
    """A Bot API call failed (network error, HTTP error or ok=false)."""

    def __init__(self, method, description, error_code=None):
        super().__init__(f"{method} failed: {description}")
        self.method = method
        self.description = description
        self.error_code = error_code


class TelegramClient:
    """Thin Bot API client. Every send uses HTML parse mode."""

    def __init__(self, token=None, log_func=None, max_rate_limit_retries=2):
        self.token = token or config.TELEGRAM_BOT_TOKEN
        if not self.token:
            raise ValueError("TELEGRAM_BOT_TOKEN is not set")
        self.log = log_func or print
        self.max_rate_limit_retries = max_rate_limit_retries

    def _url(self, method):
        return f"{config.TELEGRAM_API_URL}/bot{self.token}/{method}"

    def call(self, method, payload=None, timeout=15):
        """POST a Bot API method and return its `result`. Raises TelegramError."""
        payload = {k: v for k, v in (payload or {}).items() if v is not None}

        for attempt in range(self.max_rate_limit_retries + 1):
            try:
                resp = request_with_retry(
                    "POST",
                    self._url(method),
                    json=payload,
                    timeout=timeout,
                    log_func=self.log,
                    label=f"Telegram {method}",
                )
            except requests.exceptions.RequestException as e:
                raise TelegramError(method, str(e)) from e

            try:
                data = resp.json()
            except ValueError:
                data = {"ok": False, "description": f"HTTP {resp.status_code}"}

            if resp.status_code == 429 and attempt < self.max_rate_limit_retries:
                retry_after = (data.get("parameters") or {}).get("retry_after", 1)
                self.log(f"    Telegram {method}: rate limited, waiting {retry_after}s")
                time.sleep(retry_after)
                continue

            if not data.get("ok"):
                raise TelegramError(
                    method,
                    data.get("description") or f"HTTP {resp.status_code}",
                    data.get("error_code") or resp.status_code,
                )
            return data.get("result")

        raise TelegramError(method, "rate limited", 429)

    def send_message(self, chat_id, text, keyboard=None):
        return self.call("sendMessage", {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
            "reply_markup": keyboard,
        })

    def send_photo(self, chat_id, photo, caption=None, keyboard=None):
        return self.call("sendPhoto", {
            "chat_id": chat_id,
            "photo": photo,
            "caption": caption,
            "parse_mode": "HTML" if caption else None,
            "reply_markup": keyboard,
        })

    def send_video(self, chat_id, video, caption=None, keyboard=None):
        return self.call("sendVideo", {
            "chat_id": chat_id,
            "video": video,
            "caption": caption,
            "parse_mode": "HTML" if caption else None,
            "reply_markup": keyboard,
        })

    def send_location(self, chat_id, latitude, longitude):
        return self.call("sendLocation", {
            "chat_id": chat_id,
            "latitude": latitude,
            "longitude": longitude,
        })

    def send_chat_action(self, chat_id, action="typing"):
        return self.call("sendChatAction", {"chat_id": chat_id, "action": action})

    def get_me(self):
        return self.call("getMe")

    def get_updates(self, offset=None, timeout=None):
        timeout = config.TELEGRAM_POLL_TIMEOUT if timeout is None else timeout
        return self.call(
            "getUpdates",
            {"offset": offset, "timeout": timeout, "allowed_updates": ["message", "channel_post"]},
            timeout=timeout + 10,
        )


def _send_media(client, chat_id, kind, media, text, keyboard):
    """Send one photo or video. Returns True when the text still needs its own message."""
    send = client.send_video if kind == "video" else client.send_photo
    if len(text) <= config.TELEGRAM_CAPTION_LIMIT:
        send(chat_id, media, caption=text, keyboard=keyboard)
        return False
    # Caption too long: bare media, then the text carrying the buttons
    send(chat_id, media)
    return True


def send_schedule(client, chat_id, messages, log_func=None):
    """
    Send a schedule (list of message dicts) to one chat, in order.
    Media that fails to send falls back to a plain text message with the same
    buttons. Returns the number of Bot API messages sent; text failures raise.
    """
    log = log_func or print
    sent = 0

    for message in messages:
        text = message.get("text") or ""
        keyboard = message.get("keyboard")

        text_pending = True
        for kind in ("video", "photo"):
            media = message.get(kind)
            if not media:
                continue
            try:
                text_pending = _send_media(client, chat_id, kind, media, text, keyboard)
            except TelegramError as e:
                log(f"    Telegram: {kind} failed for chat {chat_id} ({e.description}), trying next fallback")
                continue
            sent += 1
            break

        if text_pending and text:
            client.send_message(chat_id, text, keyboard=keyboard)
            sent += 1

    return sent
