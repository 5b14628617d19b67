"""Reminder parser — pure business logic.

Detects a coarse time expression ("in 2 hours", "at 3pm", "10 minutes") in a
reminder request and materializes an Alarm record. Only the presence of a
time unit is checked; the fire time is a configurable default offset from
now, not a computed schedule.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from double_assistant.core.patterns import REMINDER_TIME
from double_assistant.data.models import Alarm, utc_now

logger = logging.getLogger(__name__)

_DEFAULT_OFFSET = timedelta(seconds=60)


@dataclass
class TimeExpression:
    """The first time expression found in a message."""

    amount: int
    unit: str     # "hour" | "minute" | "am" | "pm", lower-cased


def find_time_expression(message: str) -> TimeExpression | None:
    """Return the first "<number> <unit>" expression, or None."""
    match = REMINDER_TIME.search(message)
    if match is None:
        return None
    return TimeExpression(amount=int(match.group(1)), unit=match.group(2).lower())


def parse_reminder(
    message: str,
    now: datetime | None = None,
    offset: timedelta = _DEFAULT_OFFSET,
) -> Alarm | None:
    """Build an active Alarm for *message*, or None if no time was given.

    None is an expected outcome: the caller answers with a clarifying
    prompt instead of retrying.

    Args:
        message: The user's full reminder request.
        now: Reference instant; defaults to the current UTC time.
        offset: Placeholder delay until the alarm fires.
    """
    expression = find_time_expression(message)
    if expression is None:
        logger.info("No time expression in reminder request: %s", message[:80])
        return None

    if now is None:
        now = utc_now()

    alarm = Alarm(message=message, time=now + offset, active=True)
    logger.info(
        "Reminder parsed (%d %s), placeholder fire time %s",
        expression.amount, expression.unit, alarm.time.isoformat(),
    )
    return alarm
