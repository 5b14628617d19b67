"""Notification port — abstract interface for pushing text to a chat.

Receivers only get read-only text; they never touch session state.
"""

from __future__ import annotations

from typing import Protocol


class NotificationPort(Protocol):
    """Abstract notification interface for delivering replies to a chat."""

    async def send_message(self, chat_id: int, text: str) -> bool: ...
