"""
Shared fixtures for the pinch-zoom engine tests.

Provides a manual clock and laid-out engines/controllers.
"""
import sys
from pathlib import Path

import pytest

# Ensure the backend directory is importable when running from the repo root
sys.path.insert(0, str(Path(__file__).parent.parent))

from pinchzoom.services.controller import ZoomController
from pinchzoom.services.engine import TransformEngine
from pinchzoom.services.layout import ScaleType
from pinchzoom.services.options import ZoomOptions


class FakeClock:
    """Monotonic milliseconds, advanced by hand."""

    def __init__(self, start_ms: float = 1000.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> float:
        self.now_ms += ms
        return self.now_ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def options():
    """Library defaults, independent of environment settings."""
    return ZoomOptions()


@pytest.fixture
def engine(clock, options):
    """100x100 image filling a 100x100 viewport at scale 1, session captured."""
    engine = TransformEngine(options=options, clock=clock, scale_type=ScaleType.FIT_CENTER)
    engine.set_viewport(100, 100)
    engine.set_image(100, 100)
    assert engine.ensure_session()
    return engine


@pytest.fixture
def controller(clock, options):
    """Controller laid out like the `engine` fixture, session not yet captured."""
    controller = ZoomController(options=options, clock=clock)
    controller.set_viewport(100, 100)
    controller.set_image(100, 100)
    return controller
