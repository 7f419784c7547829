"""
Zoom behaviour options and their validation.
"""

import math
from dataclasses import dataclass, fields, replace
from enum import Enum

from pinchzoom.config import settings


class AutoResetMode(str, Enum):
    """
    How the image resets once interaction stops.

    UNDER resets when the image is at or below its starting scale, OVER
    when at or above, ALWAYS in both cases and NEVER not at all. Modes that
    do not reset still re-center the image when it drifts off-screen.
    """
    UNDER = "UNDER"
    OVER = "OVER"
    ALWAYS = "ALWAYS"
    NEVER = "NEVER"

    @classmethod
    def from_int(cls, value: int) -> "AutoResetMode":
        """Map the integer codes 0-3 to modes; anything else is UNDER."""
        return {
            1: cls.OVER,
            2: cls.ALWAYS,
            3: cls.NEVER,
        }.get(value, cls.UNDER)

    def to_int(self) -> int:
        return ["UNDER", "OVER", "ALWAYS", "NEVER"].index(self.value)


class ZoomError(Exception):
    """Error raised by the zoom engine."""
    def __init__(self, code: str, message: str, details: dict = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidConfiguration(ZoomError):
    """Scale range constraints were violated."""
    def __init__(self, message: str, details: dict = None):
        super().__init__("INVALID_CONFIGURATION", message, details)


@dataclass
class ZoomOptions:
    """Configuration read by the engine. Owned by the controller."""
    zoomable: bool = True
    translatable: bool = True
    restrict_bounds: bool = False
    animate_on_reset: bool = True
    auto_center: bool = True
    double_tap_to_zoom: bool = True
    auto_reset_mode: AutoResetMode = AutoResetMode.UNDER
    min_scale: float = 0.6
    max_scale: float = 8.0
    double_tap_scale_factor: float = 3.0
    reset_duration_ms: int = 200

    @classmethod
    def from_settings(cls) -> "ZoomOptions":
        """Build validated defaults from the global settings."""
        options = cls(
            zoomable=settings.default_zoomable,
            translatable=settings.default_translatable,
            restrict_bounds=settings.default_restrict_bounds,
            animate_on_reset=settings.default_animate_on_reset,
            auto_center=settings.default_auto_center,
            double_tap_to_zoom=settings.default_double_tap_to_zoom,
            auto_reset_mode=AutoResetMode(settings.default_auto_reset_mode.upper()),
            min_scale=settings.default_min_scale,
            max_scale=settings.default_max_scale,
            double_tap_scale_factor=settings.default_double_tap_scale_factor,
            reset_duration_ms=settings.reset_duration_ms,
        )
        options.validate()
        return options

    def validate(self) -> None:
        """
        Check the scale range and clamp the double-tap factor into it.

        Raises:
            InvalidConfiguration: If min >= max, either is not positive, or
                a scale value is not a finite number
        """
        details = {"min_scale": self.min_scale, "max_scale": self.max_scale}
        if not (math.isfinite(self.min_scale) and math.isfinite(self.max_scale)):
            raise InvalidConfiguration("minScale and maxScale must be finite", details)
        if not math.isfinite(self.double_tap_scale_factor):
            raise InvalidConfiguration(
                "doubleTapToZoomScaleFactor must be finite",
                {"double_tap_scale_factor": self.double_tap_scale_factor},
            )
        if self.min_scale >= self.max_scale:
            raise InvalidConfiguration("minScale must be less than maxScale", details)
        if self.min_scale <= 0:
            raise InvalidConfiguration("minScale must be greater than 0", details)
        if self.max_scale <= 0:
            raise InvalidConfiguration("maxScale must be greater than 0", details)

        if self.double_tap_scale_factor > self.max_scale:
            self.double_tap_scale_factor = self.max_scale
        if self.double_tap_scale_factor < self.min_scale:
            self.double_tap_scale_factor = self.min_scale

    def copy(self) -> "ZoomOptions":
        return replace(self)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
