"""
Unit tests for gesture classification.
"""

from pinchzoom.services.gestures import (
    GestureClassifier,
    IntentKind,
    PointerEvent,
    PointerPhase,
    TapSignal,
)


def down(x=0.0, y=0.0, count=1):
    return PointerEvent(PointerPhase.DOWN, pointer_count=count, focal_x=x, focal_y=y)


def move(x=0.0, y=0.0, count=1, factor=None, pinching=False):
    return PointerEvent(
        PointerPhase.MOVE,
        pointer_count=count,
        focal_x=x,
        focal_y=y,
        pinch_scale_factor=factor,
        pinch_in_progress=pinching,
    )


def up(x=0.0, y=0.0, count=1):
    return PointerEvent(PointerPhase.UP, pointer_count=count, focal_x=x, focal_y=y)


def kinds(intents):
    return [i.kind for i in intents]


class TestSingleFingerDrag:
    """Tests for one-pointer gestures."""

    def test_down_emits_nothing(self):
        classifier = GestureClassifier()
        assert classifier.on_event(down(10, 10)) == []
        assert classifier.state.gesture_active

    def test_move_emits_pan_delta(self):
        """PAN carries the focal point movement since the last event."""
        classifier = GestureClassifier()
        classifier.on_event(down(10, 10))

        first = classifier.on_event(move(15, 7))
        second = classifier.on_event(move(20, 7))

        assert kinds(first) == [IntentKind.PAN]
        assert (first[0].dx, first[0].dy) == (5.0, -3.0)
        assert (second[0].dx, second[0].dy) == (5.0, 0.0)
        assert not first[0].pinch_in_progress

    def test_up_ends_gesture(self):
        classifier = GestureClassifier()
        classifier.on_event(down())

        assert kinds(classifier.on_event(up())) == [IntentKind.GESTURE_END]
        assert not classifier.state.gesture_active

    def test_cancel_ends_gesture(self):
        classifier = GestureClassifier()
        classifier.on_event(down())

        intents = classifier.on_event(PointerEvent(PointerPhase.CANCEL))
        assert kinds(intents) == [IntentKind.GESTURE_END]

    def test_up_without_down_is_ignored(self):
        classifier = GestureClassifier()
        assert classifier.on_event(up()) == []
        assert classifier.on_event(move(5, 5)) == []


class TestPointerCount:
    """Tests for pointer count changes."""

    def test_count_change_restarts_focal_tracking(self):
        """The event that changes the count does not pan."""
        classifier = GestureClassifier()
        classifier.on_event(down(10, 10))

        changed = classifier.on_event(move(50, 50, count=2))
        after = classifier.on_event(move(52, 50, count=2))

        assert kinds(changed) == [IntentKind.POINTER_COUNT_CHANGE]
        assert changed[0].pointer_count == 2
        assert kinds(after) == [IntentKind.PAN]
        assert after[0].dx == 2.0

    def test_previous_count_survives_gesture_end(self):
        classifier = GestureClassifier()
        classifier.on_event(down())
        classifier.on_event(move(count=2))
        classifier.on_event(up(count=2))

        assert classifier.state.previous_pointer_count == 2

    def test_reset_forgets_previous_count(self):
        classifier = GestureClassifier()
        classifier.on_event(down(count=3))
        classifier.reset()

        assert classifier.state.previous_pointer_count == 1
        assert not classifier.state.gesture_active


class TestPinch:
    """Tests for pinch lifecycle intents."""

    def test_pinch_begin(self):
        classifier = GestureClassifier()
        classifier.on_event(down(50, 50))

        intents = classifier.on_event(move(50, 50, count=2, pinching=True))

        assert kinds(intents) == [IntentKind.SCALE_BEGIN, IntentKind.POINTER_COUNT_CHANGE]
        assert classifier.state.is_pinch_in_progress

    def test_scale_factor_accumulates_from_pinch_start(self):
        """Per-event span ratios multiply into the factor since the pinch began."""
        classifier = GestureClassifier()
        classifier.on_event(down(50, 50))
        classifier.on_event(move(50, 50, count=2, pinching=True))

        first = classifier.on_event(move(50, 50, count=2, factor=1.5, pinching=True))
        second = classifier.on_event(move(50, 50, count=2, factor=2.0, pinching=True))

        assert kinds(first) == [IntentKind.PAN, IntentKind.SCALE]
        assert first[0].pinch_in_progress
        assert first[1].factor == 1.5
        assert second[1].factor == 3.0
        assert (second[1].focal_x, second[1].focal_y) == (50.0, 50.0)

    def test_pinch_stops_mid_gesture(self):
        classifier = GestureClassifier()
        classifier.on_event(down(50, 50))
        classifier.on_event(move(50, 50, count=2, pinching=True))

        intents = classifier.on_event(move(50, 50, count=2))

        assert kinds(intents) == [IntentKind.SCALE_END, IntentKind.PAN]
        assert classifier.state.pinch_factor == 1.0

    def test_up_during_pinch_ends_scale_then_gesture(self):
        classifier = GestureClassifier()
        classifier.on_event(down(50, 50))
        classifier.on_event(move(50, 50, count=2, pinching=True))

        intents = classifier.on_event(up(50, 50, count=1))

        assert kinds(intents) == [
            IntentKind.POINTER_COUNT_CHANGE,
            IntentKind.SCALE_END,
            IntentKind.GESTURE_END,
        ]
        assert not classifier.state.is_pinch_in_progress

    def test_new_pinch_starts_from_one(self):
        classifier = GestureClassifier()
        classifier.on_event(down())
        classifier.on_event(move(count=2, pinching=True))
        classifier.on_event(move(count=2, factor=2.0, pinching=True))
        classifier.on_event(up(count=2))

        classifier.on_event(down(count=2))
        classifier.on_event(move(count=2, pinching=True))
        intents = classifier.on_event(move(count=2, factor=1.25, pinching=True))

        assert intents[-1].factor == 1.25


class TestTaps:
    """Tests for tap-detector signals."""

    def test_double_tap_takes_priority(self):
        """A pending double tap suppresses drag and pinch handling."""
        classifier = GestureClassifier()
        classifier.on_event(down(30, 40))
        classifier.on_tap(TapSignal.DOUBLE_TAP_CONFIRMED)

        intents = classifier.on_event(move(80, 90, count=2, factor=2.0, pinching=True))

        assert kinds(intents) == [IntentKind.TAP_DOUBLE]
        assert (intents[0].focal_x, intents[0].focal_y) == (80.0, 90.0)
        assert not classifier.state.is_pinch_in_progress
        assert not classifier.state.double_tap_pending

    def test_double_tap_confirmed_before_down_owns_the_gesture(self):
        """Once DOWN delivers the double tap, the rest of that gesture is silent."""
        classifier = GestureClassifier()
        classifier.on_tap(TapSignal.DOUBLE_TAP_CONFIRMED)

        on_down = classifier.on_event(down(30, 40))
        on_move = classifier.on_event(move(45, 40, count=2, factor=1.5, pinching=True))
        on_up = classifier.on_event(up(45, 40))

        assert kinds(on_down) == [IntentKind.TAP_DOUBLE]
        assert on_move == []
        assert on_up == []
        assert not classifier.state.double_tap_gesture

    def test_next_gesture_after_double_tap_drags(self):
        classifier = GestureClassifier()
        classifier.on_tap(TapSignal.DOUBLE_TAP_CONFIRMED)
        classifier.on_event(down(30, 40))
        classifier.on_event(up(30, 40))

        classifier.on_event(down(10, 10))
        assert kinds(classifier.on_event(move(15, 10))) == [IntentKind.PAN]
        assert kinds(classifier.on_event(up(15, 10))) == [IntentKind.GESTURE_END]

    def test_single_tap_up_suppresses_gesture_end(self):
        classifier = GestureClassifier()
        classifier.on_event(down(10, 10))
        classifier.on_tap(TapSignal.SINGLE_TAP_UP)

        intents = classifier.on_event(up(10, 10))

        assert kinds(intents) == [IntentKind.TAP_SINGLE]
        assert not classifier.state.gesture_active

    def test_single_tap_confirmed_releases_drag(self):
        classifier = GestureClassifier()
        classifier.on_event(down(10, 10))
        classifier.on_tap(TapSignal.SINGLE_TAP_UP)
        classifier.on_tap(TapSignal.SINGLE_TAP_CONFIRMED)

        assert kinds(classifier.on_event(move(12, 10))) == [IntentKind.PAN]

    def test_single_tap_up_cancels_pending_double(self):
        classifier = GestureClassifier()
        classifier.on_tap(TapSignal.DOUBLE_TAP_CONFIRMED)
        classifier.on_tap(TapSignal.SINGLE_TAP_UP)

        assert classifier.state.single_tap_pending
        assert not classifier.state.double_tap_pending

    def test_down_resolves_single_tap(self):
        classifier = GestureClassifier()
        classifier.on_tap(TapSignal.SINGLE_TAP_UP)
        classifier.on_event(down(10, 10))

        assert not classifier.state.single_tap_pending
        assert kinds(classifier.on_event(move(11, 10))) == [IntentKind.PAN]

    def test_intent_to_dict(self):
        classifier = GestureClassifier()
        classifier.on_event(down(0, 0))
        pan = classifier.on_event(move(3, 4))[0]

        data = pan.to_dict()
        assert data["kind"] == "PAN"
        assert (data["dx"], data["dy"]) == (3.0, 4.0)
