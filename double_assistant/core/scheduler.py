"""
Double Assistant — Daily Check-ins.

Morning check-in: a proactive push at MORNING_CHECKIN_HOUR asking whether
the user is ready for today's goals.

Evening check-in: a push at EVENING_CHECKIN_HOUR asking how the tasks went.

A check-in is an action on the chat's MessageDispatcher, so it lands in the
transcript after any reply still in flight, never between a user message
and its answer. Delivery goes through whatever send function the
dispatcher was built with.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from double_assistant.core.dispatcher import MessageDispatcher

logger = logging.getLogger(__name__)

CHECKIN_KINDS = ("morning", "evening")


async def send_checkins(
    chat_ids: list[int],
    get_dispatcher: Callable[[int], MessageDispatcher],
    kind: str,
) -> int:
    """Queue a check-in on every chat's dispatcher.

    Chats that have not finished setup get no message: the queued action
    returns no replies for them. A failure for one chat is logged and the
    loop moves on.

    Returns:
        Number of chats the check-in was queued for.
    """
    if kind not in CHECKIN_KINDS:
        raise ValueError(f"Unknown check-in kind: {kind!r}")

    queued = 0
    for chat_id in chat_ids:
        try:
            dispatcher = get_dispatcher(chat_id)
            dispatcher.submit_action(partial(dispatcher.assistant.check_in, kind))
            queued += 1
        except Exception as exc:
            logger.error("Failed to queue %s check-in for %d: %s", kind, chat_id, exc)

    logger.info("%s check-in queued for %d chat(s)", kind.capitalize(), queued)
    return queued
