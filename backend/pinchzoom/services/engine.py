"""
Transform engine.

Owns the canonical transform of the displayed image and the session start
state, and applies pan/scale/double-tap intents under the configured
constraints. Once a gesture ends it asks the ResetPolicy what to do and
hands the result to the Animator.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from pinchzoom.services.animator import Animator
from pinchzoom.services.layout import ScaleType, fit_transform
from pinchzoom.services.options import ZoomOptions
from pinchzoom.services.reset import ResetAction, ResetPolicy
from pinchzoom.services.transform import AffineTransform, DisplayedBounds

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class CapturedSession:
    """Start state captured on the first gesture after a (re)layout."""
    start_transform: AffineTransform
    start_scale: float
    calculated_min_scale: float
    calculated_max_scale: float


class TransformEngine:
    """Applies gesture intents to the image transform."""

    def __init__(
        self,
        options: Optional[ZoomOptions] = None,
        clock: Optional[Callable[[], float]] = None,
        render_sink: Optional[Callable[[AffineTransform], None]] = None,
        scale_type: ScaleType = ScaleType.FIT_CENTER,
    ):
        self.options = options or ZoomOptions.from_settings()
        self.clock = clock or monotonic_ms
        self.render_sink = render_sink
        self.scale_type = scale_type

        self.viewport_width = 0.0
        self.viewport_height = 0.0
        self.image_width: Optional[float] = None
        self.image_height: Optional[float] = None

        self.transform = AffineTransform.identity()
        self.bounds = DisplayedBounds.empty()
        self.session: Optional[CapturedSession] = None
        self.animator = Animator()

        self.pinch_start_scale: Optional[float] = None
        self.scale_by = 1.0
        self.current_scale_factor = 1.0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_attached(self) -> bool:
        """True once the viewport has a size."""
        return self.viewport_width > 0 and self.viewport_height > 0

    @property
    def has_image(self) -> bool:
        return bool(self.image_width) and bool(self.image_height)

    @property
    def is_captured(self) -> bool:
        return self.session is not None

    @property
    def is_animating(self) -> bool:
        return self.animator.is_running()

    def ensure_session(self) -> bool:
        """
        Capture the start state if it is not captured yet.

        Returns:
            True if a session is available. False before the first layout
            or while the transform has no usable scale.
        """
        if self.session is not None:
            return True
        if not self.is_attached:
            return False

        start = self.transform
        if start.scale <= 0:
            logger.warning(f"Cannot capture session from scale {start.scale}")
            return False

        self.session = CapturedSession(
            start_transform=start,
            start_scale=start.scale,
            calculated_min_scale=self.options.min_scale * start.scale,
            calculated_max_scale=self.options.max_scale * start.scale,
        )
        self.current_scale_factor = 1.0
        logger.debug(
            f"Captured session: start scale {start.scale:.4f}, "
            f"range [{self.session.calculated_min_scale:.4f}, "
            f"{self.session.calculated_max_scale:.4f}]"
        )
        return True

    def invalidate_session(self) -> None:
        """Drop the start state; it is captured again on the next gesture."""
        self.session = None
        self.pinch_start_scale = None
        self.scale_by = 1.0

    def begin_step(self) -> None:
        """Refresh derived state before a touch step is processed."""
        self._refresh_bounds()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def set_viewport(self, width: float, height: float) -> None:
        if (width, height) == (self.viewport_width, self.viewport_height):
            return
        self.viewport_width = max(0.0, float(width))
        self.viewport_height = max(0.0, float(height))
        self.relayout()

    def set_image(self, width: Optional[float], height: Optional[float]) -> None:
        """Swap the image; a missing or zero size means no image."""
        if not width or not height or width <= 0 or height <= 0:
            width, height = None, None
        self.image_width = float(width) if width else None
        self.image_height = float(height) if height else None
        self.relayout()

    def clear_image(self) -> None:
        self.set_image(None, None)

    def set_scale_type(self, scale_type: ScaleType) -> None:
        self.scale_type = scale_type
        self.relayout()

    def set_transform(self, transform: AffineTransform) -> None:
        """Host-driven transform change, e.g. for the MATRIX scale type."""
        self.animator.cancel()
        self._apply(transform)

    def relayout(self) -> None:
        """Cancel animations, forget the session and snap to the rest layout."""
        self.animator.cancel()
        self.invalidate_session()
        self.current_scale_factor = 1.0
        if self.scale_type != ScaleType.MATRIX:
            self._apply(self.layout_transform())
        else:
            self._refresh_bounds()

    def layout_transform(self) -> AffineTransform:
        if not self.has_image:
            return AffineTransform.identity()
        return fit_transform(
            self.scale_type,
            self.viewport_width,
            self.viewport_height,
            self.image_width,
            self.image_height,
        )

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def allow_translate(self) -> bool:
        return self.options.translatable and self.current_scale_factor > 1.0

    def on_pan_delta(
        self,
        dx: float,
        dy: float,
        pinch_in_progress: bool = False,
    ) -> AffineTransform:
        """
        Translate the image by (dx, dy) after bounds clamping.

        Ignored unless translation is enabled and the image is zoomed in
        beyond its starting scale.
        """
        if self.session is None or not self.has_image:
            return self.transform
        if not self.allow_translate():
            return self.transform

        self._refresh_bounds()
        x_distance = self._axis_distance(
            dx, self.bounds.left, self.bounds.right, self.viewport_width, pinch_in_progress
        )
        y_distance = self._axis_distance(
            dy, self.bounds.top, self.bounds.bottom, self.viewport_height, pinch_in_progress
        )
        return self._apply(self.transform.post_translate(x_distance, y_distance))

    def _axis_distance(
        self,
        distance: float,
        start: float,
        end: float,
        extent: float,
        pinch_in_progress: bool,
    ) -> float:
        if self.options.restrict_bounds:
            distance = self._restricted_distance(distance, start, end, extent, pinch_in_progress)

        # prevents the image from translating an infinite distance offscreen
        if end + distance < 0:
            distance = -end
        elif start + distance > extent:
            distance = extent - start

        return distance

    @staticmethod
    def _restricted_distance(
        distance: float,
        start: float,
        end: float,
        extent: float,
        pinch_in_progress: bool,
    ) -> float:
        """
        Keep the image's edges against the viewport's edges.

        A larger-than-viewport image may not pull an edge inward past the
        viewport edge. A smaller one may not push an edge outward past it.
        Neither rule applies while a pinch is in progress.
        """
        if pinch_in_progress:
            return distance

        if end - start >= extent:
            if start <= 0 and start + distance > 0:
                return -start
            if end >= extent and end + distance < extent:
                return extent - end
        else:
            if start >= 0 and start + distance < 0:
                return -start
            if end <= extent and end + distance > extent:
                return extent - end
        return distance

    # ------------------------------------------------------------------
    # Scale
    # ------------------------------------------------------------------

    def on_scale_begin(self) -> None:
        self.pinch_start_scale = self.transform.scale

    def on_scale_delta(
        self,
        focal_x: float,
        focal_y: float,
        raw_factor: float,
    ) -> AffineTransform:
        """
        Scale about the focal point towards pinch-start scale * raw_factor.

        The projected scale, not the per-step factor, is clamped to the
        calculated range.
        """
        if not self.options.zoomable or self.session is None or not self.has_image:
            return self.transform

        current = self.transform.scale
        if current == 0:
            return self.transform

        start_scale = self.pinch_start_scale if self.pinch_start_scale is not None else current
        scale_by = (start_scale * raw_factor) / current

        # what the scaling should end up at after the transformation
        projected = scale_by * current
        if projected < self.session.calculated_min_scale:
            scale_by = self.session.calculated_min_scale / current
        elif projected > self.session.calculated_max_scale:
            scale_by = self.session.calculated_max_scale / current

        self.scale_by = scale_by
        return self._apply(self.transform.post_scale(scale_by, scale_by, focal_x, focal_y))

    def on_scale_end(self) -> None:
        self.scale_by = 1.0
        self.pinch_start_scale = None

    # ------------------------------------------------------------------
    # Gesture end, reset and centering
    # ------------------------------------------------------------------

    def on_gesture_ended(self) -> Optional[ResetAction]:
        """Run the auto-reset policy for the finished gesture."""
        self.scale_by = 1.0
        if self.session is None:
            return None

        self._refresh_bounds()
        action = ResetPolicy.decide(
            self.options.auto_reset_mode,
            self.transform.scale,
            self.session.start_scale,
        )
        logger.debug(
            f"Gesture ended at scale {self.transform.scale:.4f} "
            f"({self.options.auto_reset_mode.value}) -> {action.value}"
        )
        if action == ResetAction.FULL_RESET:
            self.reset()
        else:
            self.center()
        return action

    def rest_transform(self) -> AffineTransform:
        """Where a full reset goes: the start transform, or the layout."""
        if self.session is not None:
            return self.session.start_transform
        return self.layout_transform()

    def reset(self, animate: Optional[bool] = None) -> None:
        """
        Reset the image to its starting transform.

        Args:
            animate: Animate instead of snapping; defaults to the
                `animate_on_reset` option
        """
        if animate is None:
            animate = self.options.animate_on_reset
        target = self.rest_transform()
        if animate:
            self.animator.start(
                self.transform, target, self.options.reset_duration_ms, self.clock()
            )
        else:
            self.animator.cancel()
            self._apply(target)

    def center(self) -> None:
        """Animate the translation back towards the nearest edges."""
        if not self.options.auto_center:
            return
        self._refresh_bounds()
        corrections = ResetPolicy.center_corrections(
            self.bounds, self.viewport_width, self.viewport_height, self.options.auto_center
        )
        now = self.clock()
        for correction in corrections:
            self.animator.start_axis(
                correction.field,
                getattr(self.transform, correction.field),
                correction.target,
                self.options.reset_duration_ms,
                now,
            )

    def on_double_tap_zoom(self, focal_x: float, focal_y: float) -> None:
        """Zoom in about the focal point, or back out if already zoomed."""
        if self.session is None:
            return
        if self.transform.scale != self.session.start_scale:
            target = self.session.start_transform
            logger.debug("Double tap: zooming back to start")
        else:
            factor = self.options.double_tap_scale_factor
            target = self.transform.post_scale(factor, factor, focal_x, focal_y)
            logger.debug(f"Double tap: zooming by {factor} at ({focal_x:.1f}, {focal_y:.1f})")
        self.animator.start(
            self.transform, target, self.options.reset_duration_ms, self.clock()
        )

    # ------------------------------------------------------------------
    # Animation
    # ------------------------------------------------------------------

    def tick(self, now_ms: Optional[float] = None) -> Optional[AffineTransform]:
        """Advance animations; returns the new transform or None if idle."""
        if now_ms is None:
            now_ms = self.clock()
        result = self.animator.tick(now_ms, self.transform)
        if result is None:
            return None
        return self._apply(result)

    def cancel_animation(self) -> None:
        self.animator.cancel()

    # ------------------------------------------------------------------

    def _refresh_bounds(self) -> None:
        self.bounds = DisplayedBounds.from_transform(
            self.transform, self.image_width, self.image_height
        )

    def _apply(self, transform: AffineTransform) -> AffineTransform:
        self.transform = transform
        self._refresh_bounds()
        if self.session is not None:
            self.current_scale_factor = transform.scale / self.session.start_scale
        if self.render_sink is not None:
            self.render_sink(transform)
        return transform
