"""
Status message delivery: Telegram bot or log output.
"""

import logging

import requests

from lp_hedge.core.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramNotifier:
    """Sends text messages to one chat via the Telegram Bot API."""

    def __init__(self, bot_token: str, chat_id: str, timeout: float = 10.0, session=None):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout
        self.session = session or requests.Session()

    def push(self, text: str) -> None:
        url = f"{TELEGRAM_API_BASE}/bot{self.bot_token}/sendMessage"
        payload = {"chat_id": self.chat_id, "text": text}
        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise CollaboratorFailure(f"Telegram sendMessage failed: {e}") from e


class LogNotifier:
    """Fallback when no chat is configured."""

    def push(self, text: str) -> None:
        logger.info("Status:\n%s", text)
