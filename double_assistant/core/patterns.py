"""
Double Assistant — Pattern Library.

Deterministic detection rules shared by the intent classifier, the task
extractor and the reminder parser. Every rule is a pure predicate; nothing
here has side effects.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Task-like line rules (order matters only for readability, any match wins)
# ---------------------------------------------------------------------------

LIST_MARKER = re.compile(r"^(\d+\.|•|-)\s*.+", re.MULTILINE)
KEYWORD_COLON = re.compile(r"(?:task|todo|do|complete|finish|accomplish).*:", re.IGNORECASE)
INTENT_PHRASE = re.compile(r"(?:need to|have to|must|should|will|gonna)\s+.{10,}", re.IGNORECASE)
TIME_TASK = re.compile(r"(?:tomorrow|today|this week).*(?:do|complete|finish)", re.IGNORECASE)

TASK_PATTERNS: tuple[re.Pattern[str], ...] = (
    LIST_MARKER,
    KEYWORD_COLON,
    INTENT_PHRASE,
    TIME_TASK,
)

# ---------------------------------------------------------------------------
# Extraction prefixes, stripped in this order
# ---------------------------------------------------------------------------

NUMBER_PREFIX = re.compile(r"^\d+\.\s*")
BULLET_PREFIX = re.compile(r"^[-•]\s*")
KEYWORD_PREFIX = re.compile(r"^(?:task|todo):\s*", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Intent keyword tables (lower-case containment checks)
# ---------------------------------------------------------------------------

ADD_TASK_PHRASES = ("add task", "new task")
COMPLETION_PHRASES = ("completed", "finished", "done with")
STATS_PHRASES = ("progress", "stats", "how many")
ALARM_PHRASES = ("remind me", "alarm", "notification")
DISTRACTION_PHRASES = ("facebook", "youtube", "instagram", "tiktok", "social media")

# Reminder time expression: "in 2 hours", "at 3pm", "10 minutes"
REMINDER_TIME = re.compile(r"(\d+)\s*(hour|minute|am|pm)", re.IGNORECASE)


def matches_any(text: str) -> bool:
    """Return True if any task-like rule matches *text*."""
    return any(pattern.search(text) for pattern in TASK_PATTERNS)


def contains_any(text: str, phrases: tuple[str, ...]) -> bool:
    """Case-sensitive containment; callers pass lower-cased text."""
    return any(phrase in text for phrase in phrases)
