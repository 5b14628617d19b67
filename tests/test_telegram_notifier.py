"""Tests for the Telegram NotificationPort adapter."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.error import TelegramError

from double_assistant.adapters.telegram_notifier import TelegramNotifier


@pytest.mark.asyncio
async def test_send_message_success():
    bot = MagicMock()
    bot.send_message = AsyncMock()
    assert await TelegramNotifier(bot).send_message(42, "hello") is True
    bot.send_message.assert_awaited_once_with(chat_id=42, text="hello")


@pytest.mark.asyncio
async def test_send_message_failure():
    bot = MagicMock()
    bot.send_message = AsyncMock(side_effect=TelegramError("Forbidden: bot was blocked"))
    assert await TelegramNotifier(bot).send_message(42, "hello") is False
