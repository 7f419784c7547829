"""
End-of-gesture reset policy.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from pinchzoom.services.options import AutoResetMode
from pinchzoom.services.transform import DisplayedBounds


class ResetAction(str, Enum):
    FULL_RESET = "FULL_RESET"    # Back to the start transform
    CENTER = "CENTER"            # Only pull the image back on-screen


@dataclass(frozen=True)
class AxisCorrection:
    """Target translation for one axis."""
    field: str  # "tx" or "ty"
    target: float


class ResetPolicy:
    """Decides what happens when the user lets go of the image."""

    @staticmethod
    def decide(
        mode: AutoResetMode,
        current_scale: float,
        start_scale: float,
    ) -> ResetAction:
        if mode == AutoResetMode.UNDER:
            return ResetAction.FULL_RESET if current_scale <= start_scale else ResetAction.CENTER
        if mode == AutoResetMode.OVER:
            return ResetAction.FULL_RESET if current_scale >= start_scale else ResetAction.CENTER
        if mode == AutoResetMode.ALWAYS:
            return ResetAction.FULL_RESET
        return ResetAction.CENTER

    @staticmethod
    def center_corrections(
        bounds: DisplayedBounds,
        viewport_width: float,
        viewport_height: float,
        auto_center: bool = True,
    ) -> List[AxisCorrection]:
        """
        Per-axis translation targets that bring the image back to the edges.

        When the image is wider than the viewport, a gap at either edge is
        closed. When it is narrower, an edge hanging outside is pulled in,
        left before right. Height is handled the same way, independently.
        """
        if not auto_center or bounds.is_empty:
            return []

        corrections = []
        x = _axis_target(bounds.left, bounds.right, viewport_width)
        if x is not None:
            corrections.append(AxisCorrection(field="tx", target=x))
        y = _axis_target(bounds.top, bounds.bottom, viewport_height)
        if y is not None:
            corrections.append(AxisCorrection(field="ty", target=y))
        return corrections


def _axis_target(start: float, end: float, extent: float):
    """Target for the leading edge on one axis, or None if it is fine."""
    if end - start > extent:
        # the leading edge is too far to the interior
        if start > 0:
            return 0.0
        if end < extent:
            return start + extent - end
    else:
        # leading edge is pulled in before the trailing edge is considered
        if start < 0:
            return 0.0
        if end > extent:
            return start + extent - end
    return None
