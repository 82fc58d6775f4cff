"""
Background decoding: run decode_and_orient on a worker pool and deliver
the result back to the caller's execution context.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

from cameraview.services.decoder import (
    DecodedImage,
    DecodeError,
    decode_and_orient,
    validate_scale,
)
from cameraview.utils.dispatch import CallbackQueue, Dispatcher, LoopDispatcher

logger = logging.getLogger(__name__)


@dataclass
class DecodeResult:
    """Outcome of one background decode: an image or the error that prevented it."""

    image: DecodedImage | None = None
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.image is not None


BitmapCallback = Callable[[DecodeResult], None]


class DecodeService:
    """
    Runs decodes off the calling thread.

    Each call gets its own task and buffers; nothing is shared between calls,
    so results of concurrent requests may arrive in any order.
    """

    def __init__(self, max_workers: int = 1) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cameraview-decode")
        self.callbacks = CallbackQueue()

    def decode_bitmap(
        self,
        source: bytes,
        scale: float | None = None,
        callback: BitmapCallback | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> Future[DecodeResult]:
        """
        Enqueue a decode and return immediately.

        An invalid scale raises InvalidScaleError here, before anything is
        scheduled. Decode failures never raise; they come back as a failed
        DecodeResult through the future and the callback.
        """
        validate_scale(scale)
        if callback is not None and dispatcher is None:
            dispatcher = self._default_dispatcher()
        return self._executor.submit(self._run, source, scale, callback, dispatcher)

    async def decode_bitmap_async(self, source: bytes, scale: float | None = None) -> DecodeResult:
        return await asyncio.wrap_future(self.decode_bitmap(source, scale))

    def process_callbacks(self, timeout: float | None = None) -> int:
        """Run callbacks queued for the thread that created this service."""
        return self.callbacks.run_pending(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "DecodeService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _default_dispatcher(self) -> Dispatcher:
        try:
            return LoopDispatcher(asyncio.get_running_loop())
        except RuntimeError:
            return self.callbacks

    def _run(
        self,
        source: bytes,
        scale: float | None,
        callback: BitmapCallback | None,
        dispatcher: Dispatcher | None,
    ) -> DecodeResult:
        try:
            result = DecodeResult(image=decode_and_orient(source, scale))
        except DecodeError as exc:
            logger.warning("Decode failed: %s", exc)
            result = DecodeResult(error=exc)
        except Exception as exc:
            logger.exception("Unexpected error while decoding")
            error = DecodeError(f"Unexpected error while decoding: {exc}")
            error.__cause__ = exc
            result = DecodeResult(error=error)
        if callback is not None and dispatcher is not None:
            dispatcher.post(lambda: callback(result))
        return result
