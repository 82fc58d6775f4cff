"""
Decode encoded images and correct their orientation from EXIF metadata.

Pixel decoding is delegated to Pillow; this module only reads the orientation
tag and applies the matching scale + rotation. Mirroring is detected but not
applied to the output geometry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO

import numpy as np
from PIL import Image

from cameraview.utils.affine import AffineTransform
from cameraview.utils.orientation import Transform, extract_transform, read_orientation_tag

logger = logging.getLogger(__name__)

_RESAMPLE_MODES = {"RGB", "RGBA", "L", "I", "F"}


class CameraViewError(Exception):
    """Base class for library errors."""


class InvalidScaleError(CameraViewError, ValueError):
    """Scale factor outside (0.0, 1.0]."""


class DecodeError(CameraViewError):
    """The source buffer could not be decoded into pixels."""


@dataclass
class DecodedImage:
    """Decoded, oriented pixels. The caller owns the image."""

    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def to_array(self) -> np.ndarray:
        """Copy the pixels into a (height, width[, bands]) array."""
        return np.asarray(self.image).copy()


def validate_scale(scale: float | None) -> None:
    if scale is None:
        return
    if not 0.0 < scale <= 1.0:
        raise InvalidScaleError(f"Scale needs to be between 0.0 and 1.0, got {scale!r}")


def decode_pixels(source: bytes) -> Image.Image:
    """Fully decode the source buffer; raise DecodeError on any codec failure."""
    try:
        with Image.open(BytesIO(source)) as image:
            image.load()
            decoded = image.copy()
        if decoded.mode not in _RESAMPLE_MODES:
            decoded = decoded.convert("RGBA")
    except Exception as exc:
        raise DecodeError(f"Unable to decode image ({len(source)} bytes): {exc}") from exc
    return decoded


def build_matrix(transform: Transform, scale: float | None) -> AffineTransform:
    """Scale first (if any), then rotate. The flip component is not applied."""
    matrix = AffineTransform.identity()
    if scale is not None:
        matrix = AffineTransform.scaling(scale)
    if transform.rotation != 0 or transform.flip:
        matrix = matrix.then(AffineTransform.rotation(transform.rotation))
    return matrix


def apply_matrix(image: Image.Image, matrix: AffineTransform) -> Image.Image:
    """
    Resample image through matrix into a buffer of the same size.

    The mapped source rectangle is shifted so its bounds start at the origin.
    """
    if matrix.is_identity:
        return image
    left, top, _, _ = matrix.map_bounds(image.width, image.height)
    placed = matrix.then(AffineTransform.translation(-left, -top))
    # Pillow wants the output -> input mapping
    inverse = placed.inverse()
    return image.transform(
        image.size,
        Image.Transform.AFFINE,
        inverse.coefficients(),
        resample=Image.Resampling.BILINEAR,
    )


def decode_and_orient(source: bytes, scale: float | None = None) -> DecodedImage:
    """Decode source and apply EXIF rotation plus optional scale."""
    validate_scale(scale)
    tag = read_orientation_tag(source)
    transform = extract_transform(tag)
    image = decode_pixels(source)
    matrix = build_matrix(transform, scale)
    logger.debug(
        "Decoded %dx%d image, orientation=%s rotation=%d flip=%s scale=%s",
        image.width,
        image.height,
        tag,
        transform.rotation,
        transform.flip,
        scale,
    )
    return DecodedImage(apply_matrix(image, matrix))
