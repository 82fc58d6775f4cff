"""
Minimal 2D affine transform in image coordinates (x right, y down).

A transform maps (x, y) to (a*x + b*y + c, d*x + e*y + f). Positive rotation
angles turn clockwise on screen.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

Point = Tuple[float, float]
Bounds = Tuple[float, float, float, float]

# exact values for quarter turns so 90 degree rotations stay pixel-aligned
_QUARTER_TURNS: dict[int, Tuple[float, float]] = {
    0: (1.0, 0.0),
    90: (0.0, 1.0),
    180: (-1.0, 0.0),
    270: (0.0, -1.0),
}


@dataclass(frozen=True)
class AffineTransform:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0
    e: float = 1.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls()

    @classmethod
    def scaling(cls, sx: float, sy: float | None = None) -> "AffineTransform":
        return cls(a=sx, e=sx if sy is None else sy)

    @classmethod
    def translation(cls, tx: float, ty: float) -> "AffineTransform":
        return cls(c=tx, f=ty)

    @classmethod
    def rotation(cls, degrees: float) -> "AffineTransform":
        """Clockwise rotation about the origin."""
        normalized = degrees % 360
        if normalized in _QUARTER_TURNS:
            cos, sin = _QUARTER_TURNS[int(normalized)]
        else:
            radians = math.radians(normalized)
            cos, sin = math.cos(radians), math.sin(radians)
        return cls(a=cos, b=-sin, d=sin, e=cos)

    @property
    def is_identity(self) -> bool:
        return self == AffineTransform()

    def then(self, other: "AffineTransform") -> "AffineTransform":
        """Return the transform that applies self first, then other."""
        return AffineTransform(
            a=other.a * self.a + other.b * self.d,
            b=other.a * self.b + other.b * self.e,
            c=other.a * self.c + other.b * self.f + other.c,
            d=other.d * self.a + other.e * self.d,
            e=other.d * self.b + other.e * self.e,
            f=other.d * self.c + other.e * self.f + other.f,
        )

    def inverse(self) -> "AffineTransform":
        det = self.a * self.e - self.b * self.d
        if det == 0:
            raise ValueError("Affine transform is not invertible")
        a = self.e / det
        b = -self.b / det
        d = -self.d / det
        e = self.a / det
        return AffineTransform(
            a=a,
            b=b,
            c=-(a * self.c + b * self.f),
            d=d,
            e=e,
            f=-(d * self.c + e * self.f),
        )

    def map_point(self, point: Point) -> Point:
        x, y = point
        return (self.a * x + self.b * y + self.c, self.d * x + self.e * y + self.f)

    def map_bounds(self, width: float, height: float) -> Bounds:
        """Axis-aligned bounds (left, top, right, bottom) of the mapped rectangle (0, 0, width, height)."""
        corners = [self.map_point(p) for p in ((0, 0), (width, 0), (0, height), (width, height))]
        xs = [x for x, _ in corners]
        ys = [y for _, y in corners]
        return min(xs), min(ys), max(xs), max(ys)

    def coefficients(self) -> Tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)
