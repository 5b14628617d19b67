"""
Double Assistant — Message Dispatcher.

Serial, single-worker event queue for one chat. A user message is recorded
in the transcript as soon as it is submitted; its reply is computed after a
short "typing" pause and delivered in submission order. Explicit actions
(task completion buttons) go through the same queue so all session
mutations stay ordered.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Awaitable, Callable

if TYPE_CHECKING:
    from double_assistant.core.assistant import Assistant
    from double_assistant.core.responder import Reply

logger = logging.getLogger(__name__)

SendFn = Callable[["Reply"], Awaitable[None]]
_Action = Callable[[], "list[Reply]"]


class MessageDispatcher:
    """Feeds one Assistant from a FIFO queue and delivers its replies."""

    def __init__(
        self,
        assistant: Assistant,
        send: SendFn,
        reply_delay: float = 0.8,
        follow_up_delay: float = 1.5,
    ) -> None:
        self._assistant = assistant
        self._send = send
        self._reply_delay = reply_delay
        self._follow_up_delay = follow_up_delay
        self._queue: asyncio.Queue[tuple[_Action, bool]] = asyncio.Queue()
        self._worker: asyncio.Task | None = None

    @property
    def assistant(self) -> Assistant:
        return self._assistant

    def submit(self, text: str) -> bool:
        """Queue a user message. Blank input is dropped and returns False."""
        if not self._assistant.receive(text):
            return False
        self._enqueue(lambda: self._assistant.respond(text), typing=True)
        return True

    def submit_action(self, action: _Action) -> None:
        """Queue an explicit action whose replies need no typing pause."""
        self._enqueue(action, typing=False)

    def _enqueue(self, action: _Action, typing: bool) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._run())
        self._queue.put_nowait((action, typing))

    async def drain(self) -> None:
        """Wait until every queued item has been processed."""
        await self._queue.join()

    async def close(self) -> None:
        """Cancel the worker; items still queued are dropped."""
        if self._worker is None:
            return
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None

    async def _run(self) -> None:
        while True:
            action, typing = await self._queue.get()
            try:
                if typing and self._reply_delay > 0:
                    await asyncio.sleep(self._reply_delay)
                replies = action()
                await self._deliver(replies)
            except Exception as exc:
                logger.error("Failed to process queued item: %s", exc)
            finally:
                self._queue.task_done()

    async def _deliver(self, replies: list[Reply]) -> None:
        for reply in replies:
            if reply.follow_up and self._follow_up_delay > 0:
                await asyncio.sleep(self._follow_up_delay)
            await self._send(reply)
