"""Telegram notification adapter — implements NotificationPort.

Delivery failures are logged and reported as False so one unreachable chat
never interrupts a broadcast.
"""

from __future__ import annotations

import logging

from telegram import Bot
from telegram.error import TelegramError

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """Telegram implementation of NotificationPort."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def send_message(self, chat_id: int, text: str) -> bool:
        try:
            await self._bot.send_message(chat_id=chat_id, text=text)
        except TelegramError as exc:
            logger.error("Failed to deliver message to chat %d: %s", chat_id, exc)
            return False
        return True
