#!/usr/bin/env python3
"""
Script to replay a recorded gesture trace through a zoom controller.

The trace is a JSON file:

    {
        "viewport": {"width": 1080, "height": 1920},
        "image": {"width": 4000, "height": 3000},
        "scale_type": "FIT_CENTER",
        "options": {"restrict_bounds": true},
        "steps": [
            {"t": 0, "event": {"phase": "DOWN", "focal_x": 500, "focal_y": 900}},
            {"t": 16, "tap": "SINGLE_TAP_UP"},
            {"t": 32, "tick": true}
        ]
    }

Each step carries a timestamp in milliseconds and one of `event`, `tap`,
`tick` or `reset`.

Usage:
    python scripts/replay_gestures.py <trace.json> [--every-frame MS] [--json]

Examples:
    # Print the transform after every step
    python scripts/replay_gestures.py traces/pinch.json

    # Also tick animations every 16 ms between steps, output JSON lines
    python scripts/replay_gestures.py traces/double_tap.json --every-frame 16 --json
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path to import pinchzoom modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from pinchzoom.services.controller import ZoomController
from pinchzoom.services.gestures import PointerEvent, PointerPhase, TapSignal
from pinchzoom.services.layout import ScaleType
from pinchzoom.services.options import InvalidConfiguration, ZoomOptions


class ReplayClock:
    """Clock driven by the trace timestamps."""

    def __init__(self):
        self.now_ms = 0.0

    def __call__(self) -> float:
        return self.now_ms


def load_trace(path: Path) -> dict:
    if not path.exists():
        print(f"Error: Trace not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, "r") as f:
        return json.load(f)


def build_controller(trace: dict, clock: ReplayClock) -> ZoomController:
    """
    Lay out a controller as the trace describes.

    Raises:
        InvalidConfiguration: If the trace options give an invalid scale range
        ValueError: For unknown option names, modes or scale types
    """
    controller = ZoomController(
        options=ZoomOptions.from_settings(),
        clock=clock,
        scale_type=ScaleType(trace.get("scale_type", ScaleType.FIT_CENTER.value)),
    )
    controller.update_options(**trace.get("options", {}))
    viewport = trace["viewport"]
    controller.set_viewport(viewport["width"], viewport["height"])
    image = trace.get("image")
    if image:
        controller.set_image(image["width"], image["height"])
    return controller


def parse_event(data: dict) -> PointerEvent:
    return PointerEvent(
        phase=PointerPhase(data["phase"]),
        pointer_count=data.get("pointer_count", 1),
        focal_x=data.get("focal_x", 0.0),
        focal_y=data.get("focal_y", 0.0),
        pinch_scale_factor=data.get("pinch_scale_factor"),
        pinch_in_progress=data.get("pinch_in_progress", False),
    )


def report(controller: ZoomController, t: float, label: str, as_json: bool) -> None:
    state = controller.snapshot()
    if as_json:
        print(json.dumps({"t": t, "step": label, **state}))
        return
    tr = state["transform"]
    print(
        f"{t:8.1f}ms  {label:<24} "
        f"scale=({tr['scale_x']:.4f}, {tr['scale_y']:.4f}) "
        f"translate=({tr['tx']:.2f}, {tr['ty']:.2f}) "
        f"factor={state['current_scale_factor']:.3f}"
        f"{'  [animating]' if state['is_animating'] else ''}"
    )


def replay(trace: dict, every_frame: float = None, as_json: bool = False) -> None:
    clock = ReplayClock()
    controller = build_controller(trace, clock)
    report(controller, 0.0, "layout", as_json)

    for step in trace.get("steps", []):
        t = float(step.get("t", clock.now_ms))

        # Play frames between the previous step and this one
        if every_frame:
            while controller.is_animating and clock.now_ms + every_frame < t:
                clock.now_ms += every_frame
                controller.tick()
                report(controller, clock.now_ms, "frame", as_json)

        clock.now_ms = t
        if "event" in step:
            event = parse_event(step["event"])
            intents = controller.handle_event(event)
            label = f"{event.phase.value}" + (
                f" [{','.join(i.kind.value for i in intents)}]" if intents else ""
            )
        elif "tap" in step:
            controller.handle_tap(TapSignal(step["tap"]))
            label = step["tap"]
        elif "reset" in step:
            controller.reset(animate=step.get("animate"))
            label = "reset"
        else:
            controller.tick()
            label = "tick"
        report(controller, t, label, as_json)

    # Let any trailing animation finish
    if every_frame:
        while controller.is_animating:
            clock.now_ms += every_frame
            controller.tick()
            report(controller, clock.now_ms, "frame", as_json)


def main():
    parser = argparse.ArgumentParser(
        description="Replay a gesture trace through the zoom engine",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "trace",
        type=Path,
        help="Path to a JSON gesture trace",
    )

    parser.add_argument(
        "--every-frame",
        type=float,
        default=None,
        help="Tick animations at this interval (ms) between steps",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON object per line instead of a table",
    )

    args = parser.parse_args()

    trace = load_trace(args.trace)
    try:
        replay(trace, every_frame=args.every_frame, as_json=args.json)
    except InvalidConfiguration as e:
        print(f"Error: {e.message} {e.details}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
