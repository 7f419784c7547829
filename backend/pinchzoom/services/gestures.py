"""
Gesture classification.

Turns normalized pointer events and tap-detector signals into intents the
transform engine understands:
- PAN: focal point moved while a gesture is active
- SCALE_BEGIN / SCALE / SCALE_END: two-finger pinch lifecycle
- TAP_SINGLE / TAP_DOUBLE: tap-detector results, which suppress dragging
- POINTER_COUNT_CHANGE: fingers were added or lifted
- GESTURE_END: last pointer went up or the gesture was cancelled
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pinchzoom.services.transform import Point2D

logger = logging.getLogger(__name__)


class PointerPhase(str, Enum):
    """Phase of a pointer event."""
    DOWN = "DOWN"
    MOVE = "MOVE"
    UP = "UP"
    CANCEL = "CANCEL"


class TapSignal(str, Enum):
    """Signals delivered by the external tap detector."""
    SINGLE_TAP_UP = "SINGLE_TAP_UP"
    DOUBLE_TAP_CONFIRMED = "DOUBLE_TAP_CONFIRMED"
    SINGLE_TAP_CONFIRMED = "SINGLE_TAP_CONFIRMED"


class IntentKind(str, Enum):
    PAN = "PAN"
    SCALE_BEGIN = "SCALE_BEGIN"
    SCALE = "SCALE"
    SCALE_END = "SCALE_END"
    TAP_SINGLE = "TAP_SINGLE"
    TAP_DOUBLE = "TAP_DOUBLE"
    POINTER_COUNT_CHANGE = "POINTER_COUNT_CHANGE"
    GESTURE_END = "GESTURE_END"


@dataclass(frozen=True)
class PointerEvent:
    """
    A normalized pointer event.

    `focal_x`/`focal_y` is the centroid of the active pointers.
    `pinch_scale_factor` is the span ratio relative to the previous event
    and is only meaningful while `pinch_in_progress` is set.
    """
    phase: PointerPhase
    pointer_count: int = 1
    focal_x: float = 0.0
    focal_y: float = 0.0
    pinch_scale_factor: Optional[float] = None
    pinch_in_progress: bool = False

    @property
    def focal_point(self) -> Point2D:
        return Point2D(x=self.focal_x, y=self.focal_y)


@dataclass(frozen=True)
class Intent:
    """A classified intent. Only the fields relevant to `kind` are set."""
    kind: IntentKind
    dx: float = 0.0
    dy: float = 0.0
    focal_x: float = 0.0
    focal_y: float = 0.0
    factor: float = 1.0
    pointer_count: int = 0
    pinch_in_progress: bool = False

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "dx": self.dx,
            "dy": self.dy,
            "focal_x": self.focal_x,
            "focal_y": self.focal_y,
            "factor": self.factor,
            "pointer_count": self.pointer_count,
            "pinch_in_progress": self.pinch_in_progress,
        }


@dataclass
class GestureState:
    """Per-gesture bookkeeping, mutated only by the classifier."""
    previous_pointer_count: int = 1
    current_pointer_count: int = 0
    last_focal_point: Point2D = field(default_factory=lambda: Point2D(0.0, 0.0))
    is_pinch_in_progress: bool = False
    single_tap_pending: bool = False
    double_tap_pending: bool = False
    # The active gesture delivered a double tap; the rest of it is not a drag
    double_tap_gesture: bool = False
    gesture_active: bool = False
    # Product of the per-event pinch factors since the pinch began
    pinch_factor: float = 1.0


class GestureClassifier:
    """Maps raw pointer events plus tap signals to engine intents."""

    def __init__(self):
        self.state = GestureState()

    def reset(self) -> None:
        """Forget everything, including the previous pointer count."""
        self.state = GestureState()

    def on_tap(self, signal: TapSignal) -> None:
        """Record a tap-detector signal; it takes effect on the next event."""
        state = self.state
        if signal == TapSignal.SINGLE_TAP_UP:
            state.single_tap_pending = True
            state.double_tap_pending = False
        elif signal == TapSignal.DOUBLE_TAP_CONFIRMED:
            state.double_tap_pending = True
            state.single_tap_pending = False
        elif signal == TapSignal.SINGLE_TAP_CONFIRMED:
            state.single_tap_pending = False
        logger.debug(f"Tap signal {signal.value}")

    def on_event(self, event: PointerEvent) -> List[Intent]:
        """
        Classify a pointer event.

        Args:
            event: Normalized pointer event

        Returns:
            Intents in the order the engine must apply them. Empty for
            events outside an active gesture (e.g. UP with no DOWN).
        """
        state = self.state
        count = event.pointer_count
        focal = event.focal_point
        ending = event.phase in (PointerPhase.UP, PointerPhase.CANCEL)
        intents: List[Intent] = []

        state.current_pointer_count = count

        if event.phase == PointerPhase.DOWN:
            state.gesture_active = True
            # A fresh touch means any earlier single tap has been resolved
            state.single_tap_pending = False
            state.double_tap_gesture = False

        if not state.gesture_active:
            state.previous_pointer_count = count
            return intents

        if state.double_tap_pending:
            state.double_tap_pending = False
            state.single_tap_pending = False
            state.double_tap_gesture = not ending
            intents.append(Intent(IntentKind.TAP_DOUBLE, focal_x=focal.x, focal_y=focal.y))
        elif state.double_tap_gesture:
            # still the double-tap gesture: no drag, no auto-reset on release
            pass
        elif state.single_tap_pending:
            intents.append(Intent(IntentKind.TAP_SINGLE, focal_x=focal.x, focal_y=focal.y))
        else:
            intents.extend(self._track_pinch(event))

            if event.phase == PointerPhase.DOWN or count != state.previous_pointer_count:
                # Origins shifted; restart from here so the image does not jump
                state.last_focal_point = focal
                if count != state.previous_pointer_count:
                    intents.append(Intent(IntentKind.POINTER_COUNT_CHANGE, pointer_count=count))
            elif event.phase == PointerPhase.MOVE:
                last = state.last_focal_point
                intents.append(Intent(
                    IntentKind.PAN,
                    dx=focal.x - last.x,
                    dy=focal.y - last.y,
                    pinch_in_progress=state.is_pinch_in_progress,
                ))
                if state.is_pinch_in_progress and event.pinch_scale_factor is not None:
                    state.pinch_factor *= event.pinch_scale_factor
                    intents.append(Intent(
                        IntentKind.SCALE,
                        focal_x=focal.x,
                        focal_y=focal.y,
                        factor=state.pinch_factor,
                    ))
                state.last_focal_point = focal

            if ending:
                if state.is_pinch_in_progress:
                    intents.append(Intent(IntentKind.SCALE_END))
                intents.append(Intent(IntentKind.GESTURE_END))

        if ending:
            state.gesture_active = False
            state.double_tap_gesture = False
            state.is_pinch_in_progress = False
            state.pinch_factor = 1.0

        state.previous_pointer_count = count
        return intents

    def _track_pinch(self, event: PointerEvent) -> List[Intent]:
        """Emit pinch begin/end transitions."""
        state = self.state
        if event.pinch_in_progress and not state.is_pinch_in_progress:
            state.is_pinch_in_progress = True
            state.pinch_factor = 1.0
            return [Intent(IntentKind.SCALE_BEGIN)]
        if not event.pinch_in_progress and state.is_pinch_in_progress and event.phase == PointerPhase.MOVE:
            state.is_pinch_in_progress = False
            state.pinch_factor = 1.0
            return [Intent(IntentKind.SCALE_END)]
        return []
