"""
Double Assistant — Persisted session records.

Shared JSON contract for a stored Session. Field names keep the camelCase
shape the assistant has always written, so older payloads still load:

{
    "userName": "Sam",
    "isSetup": true,
    "currentTasks": [...],
    "completedTasks": [...],
    "allTasks": [...],
    "messages": [...],
    "alarms": [...],
    "conversationMode": "normal"
}

Every top-level field is optional and falls back to the empty-session default.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from pydantic import BaseModel, Field, field_validator

from double_assistant.core.mode import initial_mode
from double_assistant.data.models import (
    Alarm,
    ConversationMode,
    Message,
    Priority,
    Sender,
    Session,
    Task,
    utc_now,
)

logger = logging.getLogger(__name__)

_DEFAULT_DUE_AFTER = timedelta(hours=24)


def _coerce_id(v: object) -> object:
    # Early payloads used numeric timestamps as ids
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class TaskRecord(BaseModel):
    id: str
    text: str
    completed: bool = False
    createdAt: datetime = Field(default_factory=utc_now)
    dueDate: datetime | None = None
    priority: str = Priority.MEDIUM.value
    completedAt: datetime | None = None

    coerce_id = field_validator("id", mode="before")(_coerce_id)

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, v: str | None) -> str:
        values = {p.value for p in Priority}
        return v if v in values else Priority.MEDIUM.value


class MessageRecord(BaseModel):
    id: str
    text: str
    sender: str
    timestamp: datetime = Field(default_factory=utc_now)
    isTask: bool = False

    coerce_id = field_validator("id", mode="before")(_coerce_id)

    @field_validator("sender", mode="before")
    @classmethod
    def parse_sender(cls, v: str) -> str:
        # the assistant used to be stored under its persona name
        if v == "double":
            return Sender.ASSISTANT.value
        return v


class AlarmRecord(BaseModel):
    id: str
    message: str
    time: datetime
    active: bool = True

    coerce_id = field_validator("id", mode="before")(_coerce_id)


class SessionRecord(BaseModel):
    userName: str = ""
    isSetup: bool = False
    currentTasks: list[TaskRecord] = []
    completedTasks: list[TaskRecord] = []
    allTasks: list[TaskRecord] = []
    messages: list[MessageRecord] = []
    alarms: list[AlarmRecord] = []
    conversationMode: str | None = None


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def _task_to_record(task: Task) -> TaskRecord:
    return TaskRecord(
        id=task.id,
        text=task.text,
        completed=task.completed,
        createdAt=task.created_at,
        dueDate=task.due_date,
        priority=task.priority.value,
        completedAt=task.completed_at,
    )


def _record_to_task(record: TaskRecord) -> Task:
    due_date = record.dueDate or record.createdAt + _DEFAULT_DUE_AFTER
    return Task(
        id=record.id,
        text=record.text,
        completed=record.completed,
        created_at=record.createdAt,
        due_date=due_date,
        priority=Priority(record.priority),
        completed_at=record.completedAt,
    )


def _restore_mode(user_name: str, stored: str | None) -> ConversationMode:
    """Pick the mode for a restored session.

    No name means setup never finished. Otherwise setup is never
    re-entered, whatever was stored.
    """
    mode = initial_mode(user_name)
    if mode is ConversationMode.SETUP:
        return mode
    if stored == ConversationMode.TASK_ADDING.value:
        return ConversationMode.TASK_ADDING
    return ConversationMode.NORMAL


def session_to_record(session: Session) -> SessionRecord:
    return SessionRecord(
        userName=session.user_name,
        isSetup=session.is_setup,
        currentTasks=[_task_to_record(t) for t in session.active_tasks],
        completedTasks=[_task_to_record(t) for t in session.completed_tasks],
        allTasks=[_task_to_record(t) for t in session.all_tasks],
        messages=[
            MessageRecord(
                id=m.id,
                text=m.text,
                sender=m.sender.value,
                timestamp=m.timestamp,
                isTask=m.is_task,
            )
            for m in session.transcript
        ],
        alarms=[
            AlarmRecord(id=a.id, message=a.message, time=a.time, active=a.active)
            for a in session.alarms
        ],
        conversationMode=session.mode.value,
    )


def record_to_session(record: SessionRecord) -> Session:
    """Rebuild a Session, filling every missing field with its default."""
    transcript = []
    for m in record.messages:
        try:
            sender = Sender(m.sender)
        except ValueError:
            logger.warning("Skipping message %s with unknown sender '%s'", m.id, m.sender)
            continue
        transcript.append(
            Message(id=m.id, text=m.text, sender=sender, timestamp=m.timestamp, is_task=m.isTask)
        )

    return Session(
        user_name=record.userName,
        is_setup=record.isSetup,
        active_tasks=[_record_to_task(t) for t in record.currentTasks],
        completed_tasks=[_record_to_task(t) for t in record.completedTasks],
        all_tasks=[_record_to_task(t) for t in record.allTasks],
        transcript=transcript,
        alarms=[
            Alarm(id=a.id, message=a.message, time=a.time, active=a.active)
            for a in record.alarms
        ],
        mode=_restore_mode(record.userName, record.conversationMode),
    )
