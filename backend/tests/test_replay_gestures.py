"""
Tests for the gesture trace replay script.
"""

import json

import pytest

from pinchzoom.services.options import AutoResetMode
from scripts.replay_gestures import ReplayClock, build_controller, main, replay


LAYOUT = {
    "viewport": {"width": 100, "height": 100},
    "image": {"width": 100, "height": 100},
}


def json_lines(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines()]


class TestBuildController:
    """Tests for build_controller."""

    def test_applies_trace_options(self):
        trace = {**LAYOUT, "options": {"auto_reset_mode": "ALWAYS", "restrict_bounds": True}}
        controller = build_controller(trace, ReplayClock())

        assert controller.options.auto_reset_mode == AutoResetMode.ALWAYS
        assert controller.options.restrict_bounds
        assert controller.engine.image_width == 100.0

    def test_unknown_option_rejected(self):
        trace = {**LAYOUT, "options": {"rotate": True}}

        with pytest.raises(ValueError, match="Unknown options"):
            build_controller(trace, ReplayClock())


class TestReplay:
    """Tests for replaying whole traces."""

    def test_pinch_trace(self, capsys):
        trace = {**LAYOUT, "steps": [
            {"t": 0, "event": {"phase": "DOWN", "focal_x": 50, "focal_y": 50}},
            {"t": 16, "event": {"phase": "MOVE", "pointer_count": 2, "focal_x": 50,
                                "focal_y": 50, "pinch_in_progress": True}},
            {"t": 32, "event": {"phase": "MOVE", "pointer_count": 2, "focal_x": 50,
                                "focal_y": 50, "pinch_scale_factor": 2.0, "pinch_in_progress": True}},
            {"t": 48, "event": {"phase": "UP", "pointer_count": 2, "focal_x": 50, "focal_y": 50}},
        ]}

        replay(trace, as_json=True)
        lines = json_lines(capsys)

        assert [line["step"] for line in lines] == [
            "layout",
            "DOWN",
            "MOVE [SCALE_BEGIN,POINTER_COUNT_CHANGE]",
            "MOVE [PAN,SCALE]",
            "UP [SCALE_END,GESTURE_END]",
        ]
        assert lines[-1]["transform"] == {"scale_x": 2.0, "scale_y": 2.0, "tx": -50.0, "ty": -50.0}

    def test_double_tap_trace_plays_frames(self, capsys):
        trace = {**LAYOUT, "steps": [
            {"t": 0, "event": {"phase": "DOWN", "focal_x": 50, "focal_y": 50}},
            {"t": 16, "tap": "DOUBLE_TAP_CONFIRMED"},
            {"t": 32, "event": {"phase": "UP", "focal_x": 50, "focal_y": 50}},
        ]}

        replay(trace, every_frame=16, as_json=True)
        lines = json_lines(capsys)

        assert lines[3]["step"] == "UP [TAP_DOUBLE]"
        assert lines[-1]["step"] == "frame"
        assert lines[-1]["transform"]["scale_x"] == 3.0
        assert lines[-1]["is_animating"] is False


class TestMain:
    """Tests for the command line entry point."""

    def test_unknown_option_exits(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "trace.json"
        path.write_text(json.dumps({**LAYOUT, "options": {"rotate": True}}))
        monkeypatch.setattr("sys.argv", ["replay_gestures.py", str(path)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Unknown options" in capsys.readouterr().err

    def test_invalid_scale_range_exits(self, tmp_path, monkeypatch):
        path = tmp_path / "trace.json"
        path.write_text(json.dumps({**LAYOUT, "options": {"min_scale": 2.0, "max_scale": 1.0}}))
        monkeypatch.setattr("sys.argv", ["replay_gestures.py", str(path)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1

    def test_missing_trace_exits(self, tmp_path, monkeypatch):
        monkeypatch.setattr("sys.argv", ["replay_gestures.py", str(tmp_path / "missing.json")])

        with pytest.raises(SystemExit):
            main()
