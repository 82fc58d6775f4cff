"""
EXIF orientation handling: reading the tag and mapping it to a rotation/flip.

See http://sylvana.net/jpegcrop/exif_orientation.html for the tag semantics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from io import BytesIO

from PIL import ExifTags, Image

logger = logging.getLogger(__name__)

ORIENTATION_TAG_ID = int(ExifTags.Base.Orientation)  # 274 / 0x0112


class OrientationTag(IntEnum):
    """The eight canonical EXIF orientation values."""

    NORMAL = 1
    FLIP_HORIZONTAL = 2
    ROTATE_180 = 3
    FLIP_VERTICAL = 4
    TRANSPOSE = 5
    ROTATE_90 = 6
    TRANSVERSE = 7
    ROTATE_270 = 8


@dataclass(frozen=True)
class Transform:
    """Clockwise rotation in degrees plus whether the image is mirrored."""

    rotation: int = 0
    flip: bool = False

    @property
    def is_identity(self) -> bool:
        return self.rotation == 0 and not self.flip


NO_CORRECTION = Transform()

_TRANSFORMS: dict[OrientationTag, Transform] = {
    OrientationTag.NORMAL: Transform(0, False),
    OrientationTag.FLIP_HORIZONTAL: Transform(0, True),
    OrientationTag.ROTATE_180: Transform(180, False),
    OrientationTag.FLIP_VERTICAL: Transform(180, True),
    OrientationTag.ROTATE_90: Transform(90, False),
    OrientationTag.TRANSPOSE: Transform(90, True),
    OrientationTag.ROTATE_270: Transform(270, False),
    OrientationTag.TRANSVERSE: Transform(270, True),
}


def extract_transform(tag: OrientationTag | int | None) -> Transform:
    """Map an orientation tag to a Transform; unknown or missing values mean no correction."""
    if tag is None:
        return NO_CORRECTION
    try:
        return _TRANSFORMS[OrientationTag(tag)]
    except (ValueError, TypeError):
        return NO_CORRECTION


def read_orientation_tag(source: bytes) -> OrientationTag | None:
    """
    Read the EXIF orientation tag from an encoded image header.

    Returns None when the header cannot be parsed, the tag is absent or its
    value is not one of the canonical eight. Never raises for bad metadata.
    """
    try:
        with Image.open(BytesIO(source)) as image:
            value = image.getexif().get(ORIENTATION_TAG_ID)
    except Exception as exc:
        logger.debug("Orientation metadata unavailable: %s", exc)
        return None
    if value is None:
        return None
    try:
        return OrientationTag(int(value))
    except (ValueError, TypeError):
        logger.debug("Ignoring non-canonical orientation value %r", value)
        return None
