"""
Double Assistant — Intent Classifier.

Decides what a raw user message means given the current conversation mode.
Rule-based and deterministic: the first matching rule wins, so the order of
checks in classify() is part of the contract.
"""

from __future__ import annotations

import logging
from enum import Enum

from double_assistant.core.patterns import (
    ADD_TASK_PHRASES,
    ALARM_PHRASES,
    COMPLETION_PHRASES,
    DISTRACTION_PHRASES,
    STATS_PHRASES,
    contains_any,
    matches_any,
)
from double_assistant.data.models import ConversationMode

logger = logging.getLogger(__name__)

# Lines longer than this count as "substantial" in a multi-line message
_SUBSTANTIAL_LINE = 15


class Intent(Enum):
    SETUP = "setup"
    TASK = "task"
    TASK_COMPLETION = "task-completion"
    STATS = "stats"
    ALARM = "alarm"
    DISTRACTION = "distraction"
    CONVERSATION = "conversation"


def is_task_message(message: str) -> bool:
    """Heuristic: does this message look like a task dump?

    Multi-line input counts as tasks when any line matches a task rule or is
    longer than 15 characters. A single line needs an explicit rule match,
    so ordinary chat is not turned into tasks.
    """
    lines = [line for line in message.split("\n") if line.strip()]

    if len(lines) >= 2:
        return any(
            matches_any(line) or len(line) > _SUBSTANTIAL_LINE for line in lines
        )

    return matches_any(message)


def classify(message: str, mode: ConversationMode) -> Intent:
    """Map a message plus the current mode to exactly one Intent."""
    msg = message.lower().strip()

    if mode is ConversationMode.SETUP:
        intent = Intent.SETUP
    elif contains_any(msg, ADD_TASK_PHRASES) or mode is ConversationMode.TASK_ADDING:
        intent = Intent.TASK
    elif contains_any(msg, COMPLETION_PHRASES):
        intent = Intent.TASK_COMPLETION
    elif contains_any(msg, STATS_PHRASES):
        intent = Intent.STATS
    elif contains_any(msg, ALARM_PHRASES):
        intent = Intent.ALARM
    elif contains_any(msg, DISTRACTION_PHRASES):
        intent = Intent.DISTRACTION
    elif is_task_message(message):
        intent = Intent.TASK
    else:
        intent = Intent.CONVERSATION

    logger.debug("Classified %r (mode=%s) as %s", msg[:40], mode.value, intent.value)
    return intent
