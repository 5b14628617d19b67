"""
Double Assistant — Conversation Orchestrator.

Glue between the components: owns the transcript of one Session, classifies
each user message, dispatches it to exactly one handler and persists the
result. Returns Reply objects and never talks to a transport directly; the
chat front end decides how to render them.
"""

from __future__ import annotations

import logging
import random
import sqlite3
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

from double_assistant.core.classifier import Intent, classify
from double_assistant.core.mode import ConversationModeMachine, initial_mode
from double_assistant.core.reminder_parser import parse_reminder
from double_assistant.core.responder import (
    Chooser,
    Reply,
    checkin_reply,
    completion_replies,
    generate_response,
    greeting_replies,
    mode_reply,
    reminder_reply,
    setup_replies,
    tasks_added_replies,
    welcome_back_reply,
)
from double_assistant.core.task_extractor import extract_tasks
from double_assistant.core.task_manager import TaskManager, TaskStats
from double_assistant.data.models import ConversationMode, Message, Sender, Session, utc_now

if TYPE_CHECKING:
    from double_assistant.ports.session_port import SessionStorePort

logger = logging.getLogger(__name__)


class Assistant:
    """One user's conversation: state, dispatch and persistence."""

    def __init__(
        self,
        store: SessionStorePort,
        choose: Chooser = random.choice,
        reminder_offset: timedelta = timedelta(seconds=60),
        task_due_after: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._choose = choose
        self._reminder_offset = reminder_offset
        self._task_due_after = task_due_after
        self._clock = clock
        self._session = self._restore()
        self._tasks = TaskManager(self._session)
        self._modes = ConversationModeMachine(self._session)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def _restore(self) -> Session:
        try:
            session = self._store.load()
        except (sqlite3.Error, OSError) as exc:
            logger.error("Session load failed, starting empty: %s", exc)
            session = None

        if session is None:
            return Session(mode=initial_mode(""))
        return session

    @property
    def session(self) -> Session:
        return self._session

    @property
    def mode(self) -> ConversationMode:
        return self._modes.mode

    def persist(self) -> bool:
        """Best-effort save. The in-memory session stays authoritative."""
        try:
            saved = self._store.save(self._session)
        except (sqlite3.Error, OSError) as exc:
            logger.error("Session save raised: %s", exc)
            return False
        if not saved:
            logger.warning("Session save failed, continuing in memory")
        return saved

    def _emit(self, replies: list[Reply]) -> list[Reply]:
        for reply in replies:
            self._session.transcript.append(
                Message(
                    text=reply.text,
                    sender=Sender.ASSISTANT,
                    timestamp=self._clock(),
                    is_task=reply.is_task,
                )
            )
        return replies

    # ------------------------------------------------------------------
    # Public: messages
    # ------------------------------------------------------------------

    def greet(self) -> list[Reply]:
        """Opening lines: ask for a name during setup, else welcome back."""
        if self.mode is ConversationMode.SETUP:
            replies = greeting_replies()
        else:
            replies = [welcome_back_reply(self._session.user_name)]
        self._emit(replies)
        self.persist()
        return replies

    def receive(self, text: str) -> bool:
        """Record a user message. Blank input is ignored and returns False."""
        if not text or not text.strip():
            return False
        self._session.transcript.append(
            Message(text=text, sender=Sender.USER, timestamp=self._clock())
        )
        return True

    def respond(self, text: str) -> list[Reply]:
        """Classify an already received message and run its handler."""
        intent = classify(text, self.mode)

        if intent is Intent.SETUP:
            replies = self._finish_setup(text)
        elif intent is Intent.TASK:
            replies = self._add_tasks(text)
        elif intent is Intent.ALARM:
            replies = self._set_reminder(text)
        else:
            response = generate_response(intent, text, self._session, choose=self._choose)
            replies = [Reply(response)] if response else []

        self._emit(replies)
        self.persist()
        return replies

    def handle_message(self, text: str) -> list[Reply]:
        """receive() + respond() without any typing delay."""
        if not self.receive(text):
            return []
        return self.respond(text)

    # ------------------------------------------------------------------
    # Public: explicit user actions
    # ------------------------------------------------------------------

    def complete_task(self, task_id: str) -> list[Reply]:
        """Complete a task by id. Unknown ids produce no replies."""
        result = self._tasks.complete_task(task_id, now=self._clock())
        if result is None:
            return []

        replies = completion_replies(result.task, result.all_done, choose=self._choose)
        self._emit(replies)
        self.persist()
        return replies

    def complete_task_at(self, position: int) -> list[Reply]:
        """Complete the n-th active task (1-based)."""
        task = self._tasks.active_task_at(position)
        if task is None:
            logger.info("No active task at position %d", position)
            return []
        return self.complete_task(task.id)

    def toggle_mode(self) -> list[Reply]:
        """Flip task-adding mode and announce the mode now in effect."""
        replies = [mode_reply(self._modes.toggle_task_adding())]
        self._emit(replies)
        self.persist()
        return replies

    def stats(self) -> TaskStats:
        return self._tasks.stats()

    def stats_reply(self) -> Reply:
        reply = Reply(generate_response(Intent.STATS, "", self._session, choose=self._choose))
        self._emit([reply])
        self.persist()
        return reply

    def check_in(self, kind: str) -> list[Reply]:
        """Daily check-in; skipped until setup has been completed."""
        if not self._session.is_setup:
            return []
        replies = [checkin_reply(kind)]
        self._emit(replies)
        self.persist()
        return replies

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _finish_setup(self, text: str) -> list[Reply]:
        name = text.strip()
        self._session.user_name = name
        self._session.is_setup = True
        self._modes.complete_setup()
        logger.info("Setup completed for '%s'", name)
        return setup_replies(name)

    def _add_tasks(self, text: str) -> list[Reply]:
        tasks = extract_tasks(text, now=self._clock(), due_after=self._task_due_after)
        self._tasks.add_tasks(tasks)
        return tasks_added_replies(tasks)

    def _set_reminder(self, text: str) -> list[Reply]:
        alarm = parse_reminder(text, now=self._clock(), offset=self._reminder_offset)
        if alarm is not None:
            self._session.alarms.append(alarm)
        return [reminder_reply(alarm is not None)]
