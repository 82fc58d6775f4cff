"""
Camera availability checks over a pluggable enumerator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Mapping, Protocol

logger = logging.getLogger(__name__)


class Facing(str, Enum):
    BACK = "back"
    FRONT = "front"


@dataclass(frozen=True)
class CameraInfo:
    """One camera sensor. facing is None when the backend cannot tell."""

    index: int
    facing: Facing | None = None
    label: str = ""


class CameraEnumerator(Protocol):
    def cameras(self) -> Iterable[CameraInfo]: ...


def has_cameras(enumerator: CameraEnumerator) -> bool:
    """Whether the device has any usable camera sensor."""
    return any(True for _ in enumerator.cameras())


def has_camera_facing(enumerator: CameraEnumerator, facing: Facing | str) -> bool:
    """Whether a camera with the given facing exists, so a session can be started."""
    wanted = Facing(facing)
    return any(info.facing == wanted for info in enumerator.cameras())


class OpenCVCameraEnumerator:
    """Probe video capture indices with OpenCV."""

    def __init__(self, max_index: int = 4, facing_hints: Mapping[str | int, str] | None = None) -> None:
        self.max_index = max_index
        self.facing_hints = {int(k): Facing(v) for k, v in (facing_hints or {}).items()}

    def cameras(self) -> List[CameraInfo]:
        try:
            import cv2
        except ImportError as exc:
            raise ImportError(
                "opencv-python not available. Install the 'cameras' extra to enable camera probing."
            ) from exc

        found: List[CameraInfo] = []
        for index in range(self.max_index + 1):
            capture = cv2.VideoCapture(index)
            try:
                ok = capture.isOpened() and capture.read()[0]
            finally:
                capture.release()
            if ok:
                found.append(CameraInfo(index=index, facing=self.facing_hints.get(index), label=f"Camera {index}"))
        logger.debug("Found %d camera(s): %s", len(found), [c.index for c in found])
        return found
