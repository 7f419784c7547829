"""
Core transform types and math utilities.

Provides the scale + translation transform applied to the displayed image,
and the rectangle the image covers in viewport coordinates.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np


TRANSFORM_FIELDS = ("scale_x", "scale_y", "tx", "ty")


@dataclass(frozen=True)
class Point2D:
    """A 2D point."""
    x: float
    y: float


@dataclass(frozen=True)
class TransformDelta:
    """
    An incremental change: translate by (dx, dy), then scale by `factor`
    about the focal point (focal_x, focal_y).
    """
    dx: float = 0.0
    dy: float = 0.0
    factor: float = 1.0
    focal_x: float = 0.0
    focal_y: float = 0.0


@dataclass(frozen=True)
class AffineTransform:
    """
    An axis-aligned affine transform: per-axis scale + translation.

    Maps image point p to viewport point p':
        x' = scale_x * x + tx
        y' = scale_y * y + ty

    The 3x3 matrix is:
        [[scale_x, 0,       tx],
         [0,       scale_y, ty],
         [0,       0,       1 ]]
    """
    scale_x: float = 1.0
    scale_y: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls()

    @property
    def scale(self) -> float:
        """The horizontal scale, used as the transform's scale everywhere."""
        return self.scale_x

    @property
    def matrix(self) -> np.ndarray:
        """Get the 3x3 homogeneous matrix."""
        return np.array([
            [self.scale_x, 0.0, self.tx],
            [0.0, self.scale_y, self.ty],
            [0.0, 0.0, 1.0],
        ], dtype=np.float64)

    @classmethod
    def from_matrix(cls, m: np.ndarray) -> "AffineTransform":
        """Build from a 3x3 (or 2x3) matrix, ignoring any skew terms."""
        return cls(
            scale_x=float(m[0, 0]),
            scale_y=float(m[1, 1]),
            tx=float(m[0, 2]),
            ty=float(m[1, 2]),
        )

    def map_point(self, p: Point2D) -> Point2D:
        """Apply this transform to a point."""
        vec = np.array([p.x, p.y, 1.0])
        result = self.matrix @ vec
        return Point2D(x=float(result[0]), y=float(result[1]))

    def post_translate(self, dx: float, dy: float) -> "AffineTransform":
        return replace(self, tx=self.tx + dx, ty=self.ty + dy)

    def post_scale(
        self,
        sx: float,
        sy: float,
        px: float = 0.0,
        py: float = 0.0,
    ) -> "AffineTransform":
        """
        Scale by (sx, sy) about the viewport point (px, py).

        The pivot keeps its screen position: a point that mapped to (px, py)
        before still maps there afterwards.
        """
        pivot = np.array([
            [sx, 0.0, px - sx * px],
            [0.0, sy, py - sy * py],
            [0.0, 0.0, 1.0],
        ], dtype=np.float64)
        return AffineTransform.from_matrix(pivot @ self.matrix)

    def compose(self, delta: TransformDelta) -> "AffineTransform":
        """Apply an incremental translate followed by a scale-about-point."""
        moved = self.post_translate(delta.dx, delta.dy)
        if delta.factor == 1.0:
            return moved
        return moved.post_scale(delta.factor, delta.factor, delta.focal_x, delta.focal_y)

    def with_field(self, name: str, value: float) -> "AffineTransform":
        """Return a copy with a single component replaced."""
        if name not in TRANSFORM_FIELDS:
            raise ValueError(f"Unknown transform field: {name}")
        return replace(self, **{name: value})

    def to_params_dict(self) -> dict:
        """Get transform parameters as a dictionary."""
        return {
            "scale_x": round(self.scale_x, 6),
            "scale_y": round(self.scale_y, 6),
            "tx": round(self.tx, 4),
            "ty": round(self.ty, 4),
        }


def interpolate(a: AffineTransform, b: AffineTransform, t: float) -> AffineTransform:
    """Linear blend of every component; `t` is clamped to [0, 1]."""
    t = min(1.0, max(0.0, t))
    if t == 1.0:
        return b
    return AffineTransform(
        scale_x=a.scale_x + (b.scale_x - a.scale_x) * t,
        scale_y=a.scale_y + (b.scale_y - a.scale_y) * t,
        tx=a.tx + (b.tx - a.tx) * t,
        ty=a.ty + (b.ty - a.ty) * t,
    )


def values_equal(a: AffineTransform, b: AffineTransform, abs_tol: float = 0.0) -> bool:
    """Component-wise comparison; exact unless a tolerance is given."""
    if abs_tol == 0.0:
        return a == b
    return all(
        math.isclose(getattr(a, name), getattr(b, name), rel_tol=0.0, abs_tol=abs_tol)
        for name in TRANSFORM_FIELDS
    )


@dataclass(frozen=True)
class DisplayedBounds:
    """Rectangle covered by the displayed image, in viewport coordinates."""
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @classmethod
    def empty(cls) -> "DisplayedBounds":
        return cls()

    @classmethod
    def from_transform(
        cls,
        transform: AffineTransform,
        image_width: Optional[float],
        image_height: Optional[float],
    ) -> "DisplayedBounds":
        """Bounds of an image of intrinsic size (w, h) under `transform`."""
        if not image_width or not image_height:
            return cls.empty()
        top_left = transform.map_point(Point2D(0.0, 0.0))
        bottom_right = transform.map_point(Point2D(image_width, image_height))
        return cls(
            left=top_left.x,
            top=top_left.y,
            right=bottom_right.x,
            bottom=bottom_right.y,
        )

    def to_dict(self) -> dict:
        return {
            "left": self.left,
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
        }
