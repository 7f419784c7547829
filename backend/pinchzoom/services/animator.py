"""
Tick-driven transform animation.

A run interpolates from a begin transform to a target transform over a
fixed duration. The host advances it by calling `tick(now_ms, current)`
from whatever loop it has (frame callback, timer, test harness).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from pinchzoom.services.transform import (
    TRANSFORM_FIELDS,
    AffineTransform,
    interpolate,
)

logger = logging.getLogger(__name__)


class AnimationKind(str, Enum):
    FULL_TRANSFORM = "FULL_TRANSFORM"  # All four components
    SINGLE_AXIS = "SINGLE_AXIS"        # One component, others follow current


@dataclass(frozen=True)
class AnimationRun:
    """One in-flight animation."""
    begin: AffineTransform
    target: AffineTransform
    start_ms: float
    duration_ms: float
    kind: AnimationKind = AnimationKind.FULL_TRANSFORM
    field: Optional[str] = None

    def fraction(self, now_ms: float) -> float:
        """Elapsed fraction clamped to [0, 1]."""
        if self.duration_ms <= 0:
            return 1.0
        return min(1.0, max(0.0, (now_ms - self.start_ms) / self.duration_ms))

    def value_at(self, now_ms: float, current: AffineTransform) -> AffineTransform:
        t = self.fraction(now_ms)
        if self.kind == AnimationKind.FULL_TRANSFORM:
            return interpolate(self.begin, self.target, t)
        begin_value = getattr(self.begin, self.field)
        target_value = getattr(self.target, self.field)
        if t >= 1.0:
            value = target_value
        else:
            value = begin_value + (target_value - begin_value) * t
        return current.with_field(self.field, value)


class Animator:
    """
    Holds the active runs.

    A full-transform run excludes every other run. Single-axis runs are
    keyed by field so an X and a Y correction can play together; a new run
    on a field replaces the old one.
    """

    FULL_KEY = "*"

    def __init__(self):
        self._runs: Dict[str, AnimationRun] = {}

    def start(
        self,
        begin: AffineTransform,
        target: AffineTransform,
        duration_ms: float,
        now_ms: float,
    ) -> AnimationRun:
        """Launch a full-transform run, superseding everything in flight."""
        if self._runs:
            logger.debug(f"Superseding {len(self._runs)} running animation(s)")
        run = AnimationRun(
            begin=begin,
            target=target,
            start_ms=now_ms,
            duration_ms=duration_ms,
        )
        self._runs = {self.FULL_KEY: run}
        return run

    def start_axis(
        self,
        field: str,
        begin_value: float,
        target_value: float,
        duration_ms: float,
        now_ms: float,
    ) -> AnimationRun:
        """Launch a run on a single component."""
        if field not in TRANSFORM_FIELDS:
            raise ValueError(f"Unknown transform field: {field}")
        self._runs.pop(self.FULL_KEY, None)
        base = AffineTransform.identity()
        run = AnimationRun(
            begin=base.with_field(field, begin_value),
            target=base.with_field(field, target_value),
            start_ms=now_ms,
            duration_ms=duration_ms,
            kind=AnimationKind.SINGLE_AXIS,
            field=field,
        )
        self._runs[field] = run
        return run

    def tick(
        self,
        now_ms: float,
        current: Optional[AffineTransform] = None,
    ) -> Optional[AffineTransform]:
        """
        Advance every run to `now_ms`.

        Args:
            now_ms: Monotonic time in milliseconds
            current: Transform single-axis runs write into; identity if omitted

        Returns:
            The resulting transform, or None when nothing is running.
            Completed runs emit their exact target and are dropped.
        """
        if not self._runs:
            return None

        result = current if current is not None else AffineTransform.identity()
        for key, run in list(self._runs.items()):
            result = run.value_at(now_ms, result)
            if run.fraction(now_ms) >= 1.0:
                del self._runs[key]
        return result

    def is_running(self) -> bool:
        return bool(self._runs)

    def cancel(self) -> None:
        """Abandon all runs; later ticks return None."""
        if self._runs:
            logger.debug("Animation cancelled")
        self._runs = {}

    @property
    def runs(self) -> Dict[str, AnimationRun]:
        return dict(self._runs)
