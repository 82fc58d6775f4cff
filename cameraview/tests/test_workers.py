from __future__ import annotations

import asyncio
import threading
from io import BytesIO
from unittest.mock import patch

import pytest
from PIL import Image

from cameraview.services.decoder import DecodeError, InvalidScaleError
from cameraview.services.workers import DecodeResult, DecodeService
from cameraview.utils.dispatch import ImmediateDispatcher


def _make_image_bytes(size: tuple[int, int], orientation: int | None = None, color: str = "red") -> bytes:
    image = Image.new("RGB", size, color=color)
    exif = Image.Exif()
    if orientation is not None:
        exif[274] = orientation
    buffer = BytesIO()
    image.save(buffer, format="JPEG", exif=exif.tobytes())
    return buffer.getvalue()


def _truncated_bytes() -> bytes:
    image = Image.effect_noise((64, 64), 80).convert("RGB")
    buffer = BytesIO()
    image.save(buffer, format="JPEG")
    data = buffer.getvalue()
    return data[: len(data) // 2]


def test_callback_runs_on_the_requesting_thread() -> None:
    with DecodeService(max_workers=1) as service:
        seen: list[tuple[DecodeResult, threading.Thread]] = []

        future = service.decode_bitmap(
            _make_image_bytes((12, 6), orientation=6),
            callback=lambda result: seen.append((result, threading.current_thread())),
        )
        future.result(timeout=5)
        assert seen == []  # nothing runs until the owner drains its queue

        assert service.process_callbacks(timeout=5) == 1

    result, thread = seen[0]
    assert thread is threading.current_thread()
    assert result.ok
    assert result.image is not None
    assert result.image.size == (12, 6)


def test_future_carries_the_result() -> None:
    with DecodeService() as service:
        result = service.decode_bitmap(_make_image_bytes((8, 8)), scale=0.5).result(timeout=5)

    assert result.ok
    assert result.error is None
    assert result.image is not None and result.image.size == (8, 8)


def test_truncated_source_is_delivered_as_failure() -> None:
    results: list[DecodeResult] = []
    with DecodeService() as service:
        future = service.decode_bitmap(_truncated_bytes(), callback=results.append, dispatcher=ImmediateDispatcher())
        outcome = future.result(timeout=5)

    assert not outcome.ok
    assert outcome.image is None
    assert isinstance(outcome.error, DecodeError)
    assert results == [outcome]


@pytest.mark.parametrize("scale", [0, 1.5])
def test_invalid_scale_raises_synchronously_without_scheduling(scale: float) -> None:
    with DecodeService() as service:
        with patch.object(service._executor, "submit") as submit:
            with pytest.raises(InvalidScaleError):
                service.decode_bitmap(b"", scale=scale, callback=lambda result: None)
        submit.assert_not_called()
        assert service.process_callbacks() == 0


def test_concurrent_decodes_are_independent() -> None:
    wide = _make_image_bytes((40, 10), orientation=1, color="red")
    tall = _make_image_bytes((10, 40), orientation=3, color="blue")

    with DecodeService(max_workers=2) as service:
        futures = {
            "wide": service.decode_bitmap(wide),
            "tall": service.decode_bitmap(tall, scale=1.0),
        }
        results = {name: future.result(timeout=5) for name, future in futures.items()}

    assert results["wide"].image is not None and results["wide"].image.size == (40, 10)
    assert results["tall"].image is not None and results["tall"].image.size == (10, 40)
    r, _, b = results["wide"].image.image.getpixel((20, 5))
    assert r > 200 and b < 60
    r, _, b = results["tall"].image.image.getpixel((5, 20))
    assert b > 200 and r < 60
    assert results["wide"].image.image is not results["tall"].image.image


def test_unexpected_errors_become_failed_results() -> None:
    with DecodeService() as service:
        with patch("cameraview.services.workers.decode_and_orient", side_effect=RuntimeError("boom")):
            result = service.decode_bitmap(b"whatever").result(timeout=5)

    assert not result.ok
    assert isinstance(result.error, DecodeError)
    assert isinstance(result.error.__cause__, RuntimeError)


def test_async_variant_and_loop_delivery() -> None:
    async def scenario() -> tuple[DecodeResult, DecodeResult, bool]:
        loop_thread = threading.current_thread()
        delivered: asyncio.Future[DecodeResult] = asyncio.get_running_loop().create_future()
        on_loop: list[bool] = []

        def callback(result: DecodeResult) -> None:
            on_loop.append(threading.current_thread() is loop_thread)
            delivered.set_result(result)

        with DecodeService() as service:
            awaited = await service.decode_bitmap_async(_make_image_bytes((6, 6)))
            service.decode_bitmap(_make_image_bytes((6, 6)), callback=callback)
            via_callback = await asyncio.wait_for(delivered, timeout=5)
        return awaited, via_callback, on_loop == [True]

    awaited, via_callback, on_loop = asyncio.run(scenario())

    assert awaited.ok
    assert via_callback.ok
    assert on_loop
