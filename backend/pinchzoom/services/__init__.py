"""
Gesture, transform and session services.
"""

from pinchzoom.services.transform import (
    AffineTransform,
    DisplayedBounds,
    Point2D,
    TransformDelta,
    interpolate,
    values_equal,
)
from pinchzoom.services.layout import ScaleType, fit_transform
from pinchzoom.services.options import (
    AutoResetMode,
    InvalidConfiguration,
    ZoomError,
    ZoomOptions,
)
from pinchzoom.services.gestures import (
    GestureClassifier,
    Intent,
    IntentKind,
    PointerEvent,
    PointerPhase,
    TapSignal,
)
from pinchzoom.services.animator import Animator, AnimationKind, AnimationRun
from pinchzoom.services.reset import ResetAction, ResetPolicy
from pinchzoom.services.engine import TransformEngine
from pinchzoom.services.controller import ZoomController
from pinchzoom.services.sessions import SessionRegistry, session_registry

__all__ = [
    "AffineTransform",
    "DisplayedBounds",
    "Point2D",
    "TransformDelta",
    "interpolate",
    "values_equal",
    "ScaleType",
    "fit_transform",
    "AutoResetMode",
    "InvalidConfiguration",
    "ZoomError",
    "ZoomOptions",
    "GestureClassifier",
    "Intent",
    "IntentKind",
    "PointerEvent",
    "PointerPhase",
    "TapSignal",
    "Animator",
    "AnimationKind",
    "AnimationRun",
    "ResetAction",
    "ResetPolicy",
    "TransformEngine",
    "ZoomController",
    "SessionRegistry",
    "session_registry",
]
