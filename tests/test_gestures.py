import random

import pytest

from conftest import make_observation
from handtrack.gesture_recognizer import (
    Gesture, HandState, is_pointing, next_tap_gesture,
)
from handtrack.landmarks import RING_PIP, RING_TIP, HandObservation

FRAME_MS = 33


def run(recognizer, observations, start_ms=0, previous=None):
    """Feed observations one frame apart and collect every state."""
    states = []
    for i, obs in enumerate(observations):
        previous = recognizer.update(previous, obs, start_ms + i * FRAME_MS, track_id=0)
        states.append(previous)
    return states


def test_tap_down_after_crossing_engage_threshold(recognizer):
    states = run(recognizer, [make_observation(pinch=d) for d in (0.08, 0.05, 0.02, 0.08)])
    assert [s.gesture for s in states] == [
        Gesture.OPEN, Gesture.OPEN, Gesture.TAP_DOWN, Gesture.TAP_UP,
    ]


def test_tap_held_until_release_threshold(recognizer):
    # 0.05 sits inside the hysteresis band and must not release
    states = run(recognizer, [make_observation(pinch=d) for d in (0.02, 0.02, 0.05, 0.05, 0.07, 0.07)])
    assert [s.gesture for s in states] == [
        Gesture.TAP_DOWN, Gesture.TAP_HELD, Gesture.TAP_HELD, Gesture.TAP_HELD,
        Gesture.TAP_UP, Gesture.OPEN,
    ]


def test_retouch_right_after_release(recognizer):
    states = run(recognizer, [make_observation(pinch=d) for d in (0.02, 0.08, 0.02)])
    assert [s.gesture for s in states] == [Gesture.TAP_DOWN, Gesture.TAP_UP, Gesture.TAP_DOWN]


def test_tap_machine_never_skips_states():
    allowed = {
        Gesture.OPEN: {Gesture.OPEN, Gesture.TAP_DOWN},
        Gesture.TAP_DOWN: {Gesture.TAP_HELD, Gesture.TAP_UP},
        Gesture.TAP_HELD: {Gesture.TAP_HELD, Gesture.TAP_UP},
        Gesture.TAP_UP: {Gesture.OPEN, Gesture.TAP_DOWN},
    }
    rng = random.Random(7)
    gesture = Gesture.OPEN
    for _ in range(2000):
        nxt = next_tap_gesture(gesture, rng.uniform(0.0, 0.1), 0.04, 0.06)
        assert nxt in allowed[gesture]
        gesture = nxt


def test_first_observation_seeds_cursor(recognizer):
    state = recognizer.update(None, make_observation(cursor=(0.2, 0.7)), 0, track_id=3)
    assert state.track_id == 3
    assert state.smoothed_cursor == pytest.approx((0.2, 0.7))


def test_cursor_lerps_toward_fingertip(recognizer):
    states = run(recognizer, [make_observation(cursor=(0.5, 0.5)), make_observation(cursor=(0.6, 0.5))])
    assert states[1].smoothed_cursor == pytest.approx((0.53, 0.5))


def test_cursor_converges_on_still_hand(recognizer):
    observations = [make_observation(cursor=(0.5, 0.5))] + [make_observation(cursor=(0.6, 0.4))] * 40
    states = run(recognizer, observations)
    assert states[-1].smoothed_cursor == pytest.approx((0.6, 0.4), abs=1e-4)


def test_update_returns_new_state(recognizer):
    previous = recognizer.update(None, make_observation(pinch=0.1), 0, track_id=0)
    current = recognizer.update(previous, make_observation(pinch=0.01), FRAME_MS)
    assert previous.gesture == Gesture.OPEN
    assert current.gesture == Gesture.TAP_DOWN
    assert current is not previous


def test_depth_and_pinch_distance_reported(recognizer):
    state = recognizer.update(None, make_observation(pinch=0.03, depth=-0.2), 0)
    assert state.index_depth == pytest.approx(-0.2)
    assert state.pinch_distance == pytest.approx(0.03)
    assert len(state.landmarks) == 21


def test_pointing_detection():
    assert is_pointing(make_observation(pointing=True))
    assert not is_pointing(make_observation(pointing=False))


def test_pointing_needs_other_fingers_curled():
    obs = make_observation(pointing=True)
    points = list(obs.landmarks)
    # Raise the ring fingertip above its PIP joint
    ring_pip = points[RING_PIP]
    points[RING_TIP] = (ring_pip[0], ring_pip[1] - 0.05, 0.0)
    assert not is_pointing(HandObservation.from_points(0, points))


def test_observation_needs_21_landmarks():
    with pytest.raises(ValueError):
        HandObservation.from_points(0, [(0.0, 0.0, 0.0)] * 20)


def double_tap_frames(gaps):
    return [make_observation(middle_gap=g) for g in gaps]


def test_quick_double_tap_fires_once(recognizer):
    states = run(recognizer, double_tap_frames([0.1, 0.01, 0.1, 0.01, 0.1, 0.1, 0.1]))
    fired = [s.middle_index_double_tap for s in states]
    assert fired == [False, False, False, False, True, False, False]
    assert states[4].tap_count == 0


def test_third_tap_does_not_fire_again(recognizer):
    states = run(recognizer, double_tap_frames([0.1, 0.01, 0.1, 0.01, 0.1, 0.01, 0.1]))
    assert sum(s.middle_index_double_tap for s in states) == 1
    assert states[-1].tap_count == 1


def test_slow_taps_never_double(recognizer):
    first = run(recognizer, double_tap_frames([0.1, 0.01, 0.1]))
    # Second tap completes well outside the window
    second = run(recognizer, double_tap_frames([0.01, 0.1]), start_ms=700, previous=first[-1])
    assert not any(s.middle_index_double_tap for s in first + second)
    assert second[-1].tap_count == 1


def test_stale_tap_count_resets(recognizer):
    states = run(recognizer, double_tap_frames([0.1, 0.01, 0.1]))
    assert states[-1].tap_count == 1
    idle = recognizer.update(states[-1], make_observation(), 1000)
    assert idle.tap_count == 0
    assert not idle.middle_index_double_tap


def test_double_tap_does_not_touch_pinch_gesture(recognizer):
    states = run(recognizer, double_tap_frames([0.1, 0.01, 0.1, 0.01, 0.1]))
    assert all(s.gesture == Gesture.OPEN for s in states)


def test_hand_state_defaults():
    state = HandState(track_id=1)
    assert state.gesture == Gesture.OPEN
    assert not state.gesture.is_engaged
    assert Gesture.TAP_HELD.is_engaged
