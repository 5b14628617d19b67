"""Conversation mode state machine.

    setup ──complete_setup()──> normal <──toggle_task_adding()──> task-adding

setup is left exactly once. Nothing moves a session back into it.
"""

from __future__ import annotations

import logging

from double_assistant.data.models import ConversationMode, Session

logger = logging.getLogger(__name__)


def initial_mode(user_name: str) -> ConversationMode:
    """Mode for a freshly constructed or restored session."""
    return ConversationMode.NORMAL if user_name.strip() else ConversationMode.SETUP


class ConversationModeMachine:
    """The only writer of Session.mode."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def mode(self) -> ConversationMode:
        return self._session.mode

    def complete_setup(self) -> ConversationMode:
        if self._session.mode is ConversationMode.SETUP:
            logger.info("Setup completed, switching to normal mode")
        self._session.mode = ConversationMode.NORMAL
        return self._session.mode

    def toggle_task_adding(self) -> ConversationMode:
        """Explicit user action: flip between chat and task-adding."""
        current = self._session.mode
        if current is ConversationMode.SETUP:
            logger.warning("Ignoring mode toggle while setup is still pending")
            return current

        if current is ConversationMode.TASK_ADDING:
            self._session.mode = ConversationMode.NORMAL
        else:
            self._session.mode = ConversationMode.TASK_ADDING
        logger.info("Conversation mode toggled: %s -> %s", current.value, self._session.mode.value)
        return self._session.mode

    def force_normal(self) -> ConversationMode:
        """Called after any task addition. Never leaves setup implicitly."""
        if self._session.mode is ConversationMode.TASK_ADDING:
            self._session.mode = ConversationMode.NORMAL
        return self._session.mode
