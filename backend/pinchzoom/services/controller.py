"""
Host-facing zoom controller.

Plays the part of an image view's touch handler: feeds pointer events
through the classifier, dispatches the intents to the engine, and exposes
the option setters a host wires to its UI.
"""

import logging
from typing import Callable, List, Optional

from pinchzoom.services.engine import TransformEngine
from pinchzoom.services.gestures import (
    GestureClassifier,
    Intent,
    IntentKind,
    PointerEvent,
    PointerPhase,
    TapSignal,
)
from pinchzoom.services.layout import ScaleType
from pinchzoom.services.options import AutoResetMode, InvalidConfiguration, ZoomOptions
from pinchzoom.services.transform import AffineTransform

logger = logging.getLogger(__name__)

# Option changes that require the start state to be captured again
SESSION_OPTIONS = ("min_scale", "max_scale", "double_tap_scale_factor")


class ZoomController:
    """Classifier + engine, driven by one caller at a time."""

    def __init__(
        self,
        options: Optional[ZoomOptions] = None,
        clock: Optional[Callable[[], float]] = None,
        render_sink: Optional[Callable[[AffineTransform], None]] = None,
        scale_type: ScaleType = ScaleType.FIT_CENTER,
    ):
        options = options.copy() if options is not None else ZoomOptions.from_settings()
        options.validate()
        self.engine = TransformEngine(
            options=options,
            clock=clock,
            render_sink=render_sink,
            scale_type=scale_type,
        )
        self.classifier = GestureClassifier()
        self.enabled = True

    @property
    def options(self) -> ZoomOptions:
        return self.engine.options

    @property
    def transform(self) -> AffineTransform:
        return self.engine.transform

    @property
    def current_scale_factor(self) -> float:
        return self.engine.current_scale_factor

    @property
    def is_animating(self) -> bool:
        return self.engine.is_animating

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_event(self, event: PointerEvent) -> List[Intent]:
        """
        Process one pointer event.

        Returns:
            The intents that were applied. Empty when the controller is
            disabled, has nothing to do, or has not been laid out yet.
        """
        if not self.enabled or not (self.options.zoomable or self.options.translatable):
            return []
        if not self.engine.is_attached:
            logger.debug(f"Ignoring {event.phase.value} before first layout")
            return []

        if event.phase == PointerPhase.DOWN:
            # the user's touch takes over from any running animation
            self.engine.cancel_animation()

        if not self.engine.ensure_session():
            return []

        self.engine.begin_step()
        intents = self.classifier.on_event(event)
        for intent in intents:
            self._dispatch(intent)
        return intents

    def handle_tap(self, signal: TapSignal) -> None:
        if signal == TapSignal.DOUBLE_TAP_CONFIRMED and not self.options.double_tap_to_zoom:
            # still resolves the pending single tap so the drag goes through
            signal = TapSignal.SINGLE_TAP_CONFIRMED
        self.classifier.on_tap(signal)

    def _dispatch(self, intent: Intent) -> None:
        engine = self.engine
        if intent.kind == IntentKind.PAN:
            engine.on_pan_delta(intent.dx, intent.dy, intent.pinch_in_progress)
        elif intent.kind == IntentKind.SCALE_BEGIN:
            engine.on_scale_begin()
        elif intent.kind == IntentKind.SCALE:
            engine.on_scale_delta(intent.focal_x, intent.focal_y, intent.factor)
        elif intent.kind == IntentKind.SCALE_END:
            engine.on_scale_end()
        elif intent.kind == IntentKind.TAP_DOUBLE:
            engine.on_double_tap_zoom(intent.focal_x, intent.focal_y)
        elif intent.kind == IntentKind.GESTURE_END:
            engine.on_gesture_ended()

    def tick(self, now_ms: Optional[float] = None) -> Optional[AffineTransform]:
        return self.engine.tick(now_ms)

    def reset(self, animate: Optional[bool] = None) -> None:
        self.engine.reset(animate)

    def should_disallow_parent_intercept(self) -> bool:
        """Whether an enclosing scroller should keep its hands off the touch."""
        return (
            self.classifier.state.current_pointer_count > 1
            or self.engine.current_scale_factor > 1.0
            or self.engine.is_animating
        )

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def set_viewport(self, width: float, height: float) -> None:
        self.engine.set_viewport(width, height)

    def set_image(self, width: Optional[float], height: Optional[float]) -> None:
        self.engine.set_image(width, height)
        self.classifier.reset()

    def clear_image(self) -> None:
        self.set_image(None, None)

    def set_scale_type(self, scale_type: ScaleType) -> None:
        self.engine.set_scale_type(scale_type)

    def set_enabled(self, enabled: bool) -> None:
        """Disabling puts the image back in its pre-zoom layout."""
        self.enabled = enabled
        if not enabled:
            self.engine.relayout()
            self.classifier.reset()

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def update_options(self, **changes) -> ZoomOptions:
        """
        Apply option changes atomically.

        Raises:
            InvalidConfiguration: If the resulting scale range is invalid.
                The previous options stay in effect.
            ValueError: For unknown option names
        """
        unknown = set(changes) - set(self.options.to_dict())
        if unknown:
            raise ValueError(f"Unknown options: {sorted(unknown)}")

        candidate = self.options.copy()
        for name, value in changes.items():
            setattr(candidate, name, value)
        if isinstance(candidate.auto_reset_mode, int):
            candidate.auto_reset_mode = AutoResetMode.from_int(candidate.auto_reset_mode)
        elif not isinstance(candidate.auto_reset_mode, AutoResetMode):
            candidate.auto_reset_mode = AutoResetMode(candidate.auto_reset_mode)

        try:
            candidate.validate()
        except InvalidConfiguration as e:
            logger.warning(f"Rejected options {changes}: {e.message}")
            raise

        self.engine.options = candidate
        if any(name in changes for name in SESSION_OPTIONS):
            self.engine.invalidate_session()
        return candidate

    def set_scale_range(self, min_scale: float, max_scale: float) -> None:
        self.update_options(min_scale=min_scale, max_scale=max_scale)

    def set_double_tap_scale_factor(self, factor: float) -> None:
        self.update_options(double_tap_scale_factor=factor)

    def set_zoomable(self, zoomable: bool) -> None:
        self.update_options(zoomable=zoomable)

    def set_translatable(self, translatable: bool) -> None:
        self.update_options(translatable=translatable)

    def set_restrict_bounds(self, restrict_bounds: bool) -> None:
        self.update_options(restrict_bounds=restrict_bounds)

    def set_animate_on_reset(self, animate_on_reset: bool) -> None:
        self.update_options(animate_on_reset=animate_on_reset)

    def set_auto_center(self, auto_center: bool) -> None:
        self.update_options(auto_center=auto_center)

    def set_double_tap_to_zoom(self, double_tap_to_zoom: bool) -> None:
        self.update_options(double_tap_to_zoom=double_tap_to_zoom)

    def set_auto_reset_mode(self, mode: AutoResetMode) -> None:
        self.update_options(auto_reset_mode=mode)

    # ------------------------------------------------------------------

    def snapshot(self) -> dict:
        """Current state as plain values."""
        engine = self.engine
        session = engine.session
        return {
            "transform": engine.transform.to_params_dict(),
            "bounds": engine.bounds.to_dict(),
            "current_scale_factor": engine.current_scale_factor,
            "is_animating": engine.is_animating,
            "is_captured": session is not None,
            "start_scale": session.start_scale if session else None,
            "enabled": self.enabled,
            "scale_type": engine.scale_type.value,
            "viewport_width": engine.viewport_width,
            "viewport_height": engine.viewport_height,
            "image_width": engine.image_width,
            "image_height": engine.image_height,
            "disallow_parent_intercept": self.should_disallow_parent_intercept(),
        }
