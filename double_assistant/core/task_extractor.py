"""
Double Assistant — Task Extractor.

Turns a raw message body into normalized Task records: one per meaningful
line, list markers and "task:"/"todo:" prefixes removed, source order kept.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from double_assistant.core.patterns import BULLET_PREFIX, KEYWORD_PREFIX, NUMBER_PREFIX
from double_assistant.data.models import Priority, Task, utc_now

logger = logging.getLogger(__name__)

_MIN_TASK_LENGTH = 3        # cleaned line must be longer than this
_MIN_FALLBACK_LENGTH = 5    # whole message must be longer than this
_DEFAULT_DUE_AFTER = timedelta(hours=24)


def clean_line(line: str) -> str:
    """Strip numbering, then a bullet, then a task/todo prefix."""
    cleaned = NUMBER_PREFIX.sub("", line, count=1)
    cleaned = BULLET_PREFIX.sub("", cleaned, count=1)
    cleaned = KEYWORD_PREFIX.sub("", cleaned, count=1)
    return cleaned.strip()


def extract_task_texts(task_text: str) -> list[str]:
    """Return the cleaned task strings found in *task_text*, in order."""
    lines = [line for line in task_text.split("\n") if line.strip()]

    texts = [
        cleaned for cleaned in (clean_line(line) for line in lines)
        if len(cleaned) > _MIN_TASK_LENGTH
    ]

    # No list-like structure survived: the whole message is one task
    whole = task_text.strip()
    if not texts and len(whole) > _MIN_FALLBACK_LENGTH:
        texts = [whole]

    return texts


def extract_tasks(
    task_text: str,
    now: datetime | None = None,
    due_after: timedelta = _DEFAULT_DUE_AFTER,
) -> list[Task]:
    """Build new pending Task records from a message body.

    Args:
        task_text: Raw message, possibly multi-line.
        now: Creation instant; defaults to the current UTC time.
        due_after: Offset from creation to the due date.

    Returns:
        Tasks in source-line order. Empty when nothing meaningful was found.
    """
    if now is None:
        now = utc_now()

    tasks = [
        Task(
            text=text,
            created_at=now,
            due_date=now + due_after,
            priority=Priority.MEDIUM,
        )
        for text in extract_task_texts(task_text)
    ]
    logger.debug("Extracted %d task(s) from %d chars", len(tasks), len(task_text))
    return tasks
