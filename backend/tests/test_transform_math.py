"""
Unit tests for transform math - verifies scale/translate composition and layout.
"""

import pytest
import numpy as np

from pinchzoom.services.transform import (
    AffineTransform,
    DisplayedBounds,
    Point2D,
    TransformDelta,
    interpolate,
    values_equal,
)
from pinchzoom.services.layout import ScaleType, fit_transform


class TestAffineTransform:
    """Tests for AffineTransform class."""

    def test_identity_maps_points_unchanged(self):
        t = AffineTransform.identity()
        result = t.map_point(Point2D(x=100, y=200))

        assert abs(result.x - 100) < 1e-10
        assert abs(result.y - 200) < 1e-10

    def test_scale_and_translation(self):
        """x' = sx * x + tx, y' = sy * y + ty."""
        t = AffineTransform(scale_x=2.0, scale_y=3.0, tx=10.0, ty=-5.0)
        result = t.map_point(Point2D(x=4, y=6))

        assert abs(result.x - 18) < 1e-10
        assert abs(result.y - 13) < 1e-10

    def test_matrix_format(self):
        t = AffineTransform(scale_x=1.5, scale_y=2.5, tx=100.0, ty=50.0)
        m = t.matrix

        assert m.shape == (3, 3)
        assert np.allclose(m, [[1.5, 0, 100], [0, 2.5, 50], [0, 0, 1]])

    def test_from_matrix_round_trip(self):
        t = AffineTransform(scale_x=1.5, scale_y=2.5, tx=100.0, ty=50.0)
        assert AffineTransform.from_matrix(t.matrix) == t

    def test_post_translate(self):
        t = AffineTransform(scale_x=2.0, scale_y=2.0, tx=1.0, ty=2.0).post_translate(10, -20)

        assert t.tx == 11.0
        assert t.ty == -18.0
        assert t.scale_x == 2.0

    def test_post_scale_keeps_pivot_fixed(self):
        """The image point under the pivot stays under the pivot."""
        before = AffineTransform(scale_x=1.3, scale_y=1.3, tx=-12.0, ty=7.5)
        px, py = 40.0, 65.0
        image_point = Point2D(x=(px - before.tx) / before.scale_x, y=(py - before.ty) / before.scale_y)

        after = before.post_scale(2.5, 2.5, px, py)
        mapped = after.map_point(image_point)

        assert abs(after.scale_x - 3.25) < 1e-10
        assert abs(mapped.x - px) < 1e-9
        assert abs(mapped.y - py) < 1e-9

    def test_post_scale_is_pivot_matrix_product(self):
        """Scaling about (px, py) is T(p) * S * T(-p) applied after the transform."""
        t = AffineTransform(scale_x=1.5, scale_y=1.5, tx=10.0, ty=-20.0)
        to_origin = np.array([[1, 0, -40], [0, 1, -60], [0, 0, 1]], dtype=np.float64)
        scale = np.diag([2.0, 2.0, 1.0])
        back = np.array([[1, 0, 40], [0, 1, 60], [0, 0, 1]], dtype=np.float64)

        expected = back @ scale @ to_origin @ t.matrix
        assert np.allclose(t.post_scale(2.0, 2.0, 40.0, 60.0).matrix, expected)

    def test_compose_translates_then_scales(self):
        delta = TransformDelta(dx=10.0, dy=0.0, factor=2.0, focal_x=0.0, focal_y=0.0)
        t = AffineTransform.identity().compose(delta)

        # translate to tx=10, then scale about origin doubles it
        assert t == AffineTransform(scale_x=2.0, scale_y=2.0, tx=20.0, ty=0.0)

    def test_compose_without_scale(self):
        t = AffineTransform.identity().compose(TransformDelta(dx=3.0, dy=4.0))
        assert t == AffineTransform(tx=3.0, ty=4.0)

    def test_with_field(self):
        t = AffineTransform().with_field("ty", 42.0)
        assert t.ty == 42.0
        assert t.tx == 0.0

    def test_with_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown transform field"):
            AffineTransform().with_field("rotation", 1.0)

    def test_params_dict(self):
        params = AffineTransform(scale_x=1.5, scale_y=1.5, tx=100.0, ty=50.0).to_params_dict()
        assert params == {"scale_x": 1.5, "scale_y": 1.5, "tx": 100.0, "ty": 50.0}


class TestInterpolate:
    """Tests for interpolate and values_equal."""

    def test_midpoint(self):
        a = AffineTransform(scale_x=1.0, scale_y=1.0, tx=0.0, ty=0.0)
        b = AffineTransform(scale_x=3.0, scale_y=5.0, tx=10.0, ty=-10.0)

        mid = interpolate(a, b, 0.5)
        assert mid == AffineTransform(scale_x=2.0, scale_y=3.0, tx=5.0, ty=-5.0)

    def test_end_is_exact(self):
        a = AffineTransform(scale_x=1.0, scale_y=1.0, tx=0.1, ty=0.2)
        b = AffineTransform(scale_x=2.7, scale_y=2.7, tx=-13.3, ty=7.1)

        assert interpolate(a, b, 1.0) == b

    def test_t_is_clamped(self):
        a = AffineTransform(tx=0.0)
        b = AffineTransform(tx=10.0)

        assert interpolate(a, b, -1.0) == a
        assert interpolate(a, b, 2.0) == b

    def test_values_equal_exact_and_tolerant(self):
        a = AffineTransform(tx=1.0)
        b = AffineTransform(tx=1.0 + 1e-9)

        assert not values_equal(a, b)
        assert values_equal(a, b, abs_tol=1e-6)
        assert values_equal(a, AffineTransform(tx=1.0))


class TestDisplayedBounds:
    """Tests for DisplayedBounds."""

    def test_from_transform(self):
        t = AffineTransform(scale_x=2.0, scale_y=2.0, tx=-50.0, ty=-50.0)
        bounds = DisplayedBounds.from_transform(t, 100, 100)

        assert bounds.to_dict() == {"left": -50.0, "top": -50.0, "right": 150.0, "bottom": 150.0}
        assert bounds.width == 200.0
        assert bounds.height == 200.0
        assert not bounds.is_empty

    def test_no_image_is_empty(self):
        bounds = DisplayedBounds.from_transform(AffineTransform(), None, None)

        assert bounds.is_empty
        assert bounds == DisplayedBounds.empty()

    def test_zero_size_is_empty(self):
        assert DisplayedBounds.from_transform(AffineTransform(), 0, 100).is_empty


class TestFitTransform:
    """Tests for the rest layout of each scale type."""

    def test_fit_center_landscape(self):
        """200x100 image in a 100x100 viewport: half size, centered vertically."""
        t = fit_transform(ScaleType.FIT_CENTER, 100, 100, 200, 100)
        assert t == AffineTransform(scale_x=0.5, scale_y=0.5, tx=0.0, ty=25.0)

    def test_fit_start_and_end(self):
        start = fit_transform(ScaleType.FIT_START, 100, 100, 200, 100)
        end = fit_transform(ScaleType.FIT_END, 100, 100, 200, 100)

        assert (start.tx, start.ty) == (0.0, 0.0)
        assert (end.tx, end.ty) == (0.0, 50.0)

    def test_fit_xy_is_non_uniform(self):
        t = fit_transform(ScaleType.FIT_XY, 100, 100, 200, 50)
        assert t == AffineTransform(scale_x=0.5, scale_y=2.0, tx=0.0, ty=0.0)

    def test_center_does_not_scale(self):
        t = fit_transform(ScaleType.CENTER, 100, 100, 20, 40)
        assert t == AffineTransform(scale_x=1.0, scale_y=1.0, tx=40.0, ty=30.0)

    def test_center_crop_fills(self):
        t = fit_transform(ScaleType.CENTER_CROP, 100, 100, 200, 100)
        assert t == AffineTransform(scale_x=1.0, scale_y=1.0, tx=-50.0, ty=0.0)

    def test_center_inside_never_upscales(self):
        small = fit_transform(ScaleType.CENTER_INSIDE, 100, 100, 20, 20)
        large = fit_transform(ScaleType.CENTER_INSIDE, 100, 100, 400, 200)

        assert small.scale == 1.0
        assert (small.tx, small.ty) == (40.0, 40.0)
        assert large.scale == 0.25

    def test_matrix_and_missing_sizes_are_identity(self):
        assert fit_transform(ScaleType.MATRIX, 100, 100, 200, 100) == AffineTransform.identity()
        assert fit_transform(ScaleType.FIT_CENTER, 100, 100, 0, 100) == AffineTransform.identity()
        assert fit_transform(ScaleType.FIT_CENTER, 0, 100, 200, 100) == AffineTransform.identity()
