"""
Double Assistant — Task Lifecycle Manager.

Owns the three task collections of a Session:

- active_tasks:    pending tasks, in creation order
- completed_tasks: completed copies, in completion order
- all_tasks:       every task ever created, exactly once, latest state

All mutation of those lists goes through TaskManager.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime

from double_assistant.core.mode import ConversationModeMachine
from double_assistant.data.models import Session, Task, utc_now

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    """Outcome of a successful completion."""

    task: Task          # the completed copy
    all_done: bool      # True when no active tasks remain


@dataclass
class TaskStats:
    completed: int
    pending: int
    total: int
    success_rate: int   # whole percent, 0 when there are no tasks


class TaskManager:
    """Creation, completion and statistics for one session's tasks."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._modes = ConversationModeMachine(session)

    def add_tasks(self, tasks: list[Task]) -> int:
        """Append new tasks and return how many were added.

        Always drops the session back to normal mode, even when nothing
        was added.
        """
        self._session.active_tasks.extend(tasks)
        self._session.all_tasks.extend(tasks)
        self._modes.force_normal()

        if tasks:
            logger.info("Added %d task(s), %d now active", len(tasks), len(self._session.active_tasks))
        return len(tasks)

    def find_active(self, task_id: str) -> Task | None:
        for task in self._session.active_tasks:
            if task.id == task_id:
                return task
        return None

    def active_task_at(self, position: int) -> Task | None:
        """1-based lookup used by the /done <n> command."""
        if 1 <= position <= len(self._session.active_tasks):
            return self._session.active_tasks[position - 1]
        return None

    def complete_task(self, task_id: str, now: datetime | None = None) -> CompletionResult | None:
        """Mark an active task as completed.

        Returns None (and changes nothing) when *task_id* is not active,
        which also makes repeated completions of the same task no-ops.
        """
        task = self.find_active(task_id)
        if task is None:
            logger.info("Task %s not found among active tasks", task_id)
            return None

        done = replace(task, completed=True, completed_at=now or utc_now())

        self._session.active_tasks = [t for t in self._session.active_tasks if t.id != task_id]
        self._session.completed_tasks.append(done)
        self._session.all_tasks = [
            done if t.id == task_id else t for t in self._session.all_tasks
        ]

        all_done = not self._session.active_tasks
        logger.info("Task %s completed: '%s' (all done: %s)", task_id, done.text, all_done)
        return CompletionResult(task=done, all_done=all_done)

    def stats(self) -> TaskStats:
        completed = len(self._session.completed_tasks)
        total = len(self._session.all_tasks)
        # half-up rounding: 1 of 8 done is 13%, not 12%
        success_rate = math.floor(completed / total * 100 + 0.5) if total > 0 else 0
        return TaskStats(
            completed=completed,
            pending=len(self._session.active_tasks),
            total=total,
            success_rate=success_rate,
        )
