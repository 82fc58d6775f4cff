"""
Result-delivery channels: run a callback on a chosen execution context.
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Dispatcher(Protocol):
    def post(self, callback: Callable[[], None]) -> None: ...


class CallbackQueue:
    """
    Thread-safe queue of callbacks drained by its owning thread.

    Any thread may post; callbacks only run inside run_pending(), on the
    thread that calls it.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Callable[[], None]] = queue.SimpleQueue()
        self.owner = threading.current_thread()

    def post(self, callback: Callable[[], None]) -> None:
        self._queue.put(callback)

    def run_pending(self, timeout: float | None = None) -> int:
        """
        Run queued callbacks and return how many ran.

        With a timeout, wait up to that long for the first callback to arrive.
        """
        count = 0
        block = timeout is not None
        while True:
            try:
                callback = self._queue.get(block=block, timeout=timeout) if block else self._queue.get_nowait()
            except queue.Empty:
                return count
            block = False
            try:
                callback()
            except Exception:
                logger.exception("Callback %r failed", callback)
            count += 1

    def __len__(self) -> int:
        return self._queue.qsize()


class LoopDispatcher:
    """Deliver callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop

    def post(self, callback: Callable[[], None]) -> None:
        self.loop.call_soon_threadsafe(callback)


class ImmediateDispatcher:
    """Run callbacks right away on the posting thread."""

    def post(self, callback: Callable[[], None]) -> None:
        callback()
