"""
Double Assistant — Data Models.

The Memory pillar: tasks, reminders and the chat transcript live in one
Session per chat, restored from storage at startup and saved after every
change. Task collections are only mutated by TaskManager; the mode is only
mutated by ConversationModeMachine.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def new_id() -> str:
    """Opaque unique token for messages, tasks and alarms."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Sender(Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConversationMode(Enum):
    SETUP = "setup"
    NORMAL = "normal"
    TASK_ADDING = "task-adding"


@dataclass(frozen=True)
class Message:
    """One transcript entry. Never mutated after it is appended."""

    text: str
    sender: Sender
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=utc_now)
    is_task: bool = False   # task confirmation lines in the "added" burst


@dataclass
class Task:
    """A task extracted from a user message.

    Pending tasks sit in Session.active_tasks; completed ones in
    Session.completed_tasks. Session.all_tasks always holds both.
    """

    text: str
    created_at: datetime
    due_date: datetime                    # created_at + 24h by default
    id: str = field(default_factory=new_id)
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    completed_at: datetime | None = None


@dataclass
class Alarm:
    """A reminder record created by the reminder parser."""

    message: str                          # the user's full request
    time: datetime
    id: str = field(default_factory=new_id)
    active: bool = True


@dataclass
class Session:
    """Everything restorable about one user's assistant."""

    user_name: str = ""
    is_setup: bool = False
    active_tasks: list[Task] = field(default_factory=list)
    completed_tasks: list[Task] = field(default_factory=list)
    all_tasks: list[Task] = field(default_factory=list)
    transcript: list[Message] = field(default_factory=list)
    alarms: list[Alarm] = field(default_factory=list)
    mode: ConversationMode = ConversationMode.SETUP
