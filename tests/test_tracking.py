import pytest

from conftest import make_observation
from handtrack.gesture_recognizer import Gesture
from handtrack.track_assigner import TrackAssigner


@pytest.fixture
def assigner(tracking_config, recognizer):
    return TrackAssigner(tracking_config, recognizer)


def test_new_hands_get_new_ids(assigner):
    states = assigner.update([
        make_observation(cursor=(0.3, 0.5), slot=0),
        make_observation(cursor=(0.7, 0.5), slot=1),
    ], 0)
    assert [s.track_id for s in states] == [0, 1]
    assert assigner.track_count == 2


def test_identity_follows_position_not_slot(assigner):
    assigner.update([
        make_observation(cursor=(0.3, 0.5), slot=0),
        make_observation(cursor=(0.7, 0.5), slot=1),
    ], 0)
    # Estimator swaps slot order between frames
    states = assigner.update([
        make_observation(cursor=(0.71, 0.5), slot=0),
        make_observation(cursor=(0.31, 0.5), slot=1),
    ], 33)
    assert [s.track_id for s in states] == [1, 0]


def test_gesture_state_stays_with_its_hand(assigner):
    assigner.update([
        make_observation(cursor=(0.3, 0.5), pinch=0.01, slot=0),
        make_observation(cursor=(0.7, 0.5), slot=1),
    ], 0)
    states = assigner.update([
        make_observation(cursor=(0.7, 0.5), slot=0),
        make_observation(cursor=(0.3, 0.5), pinch=0.01, slot=1),
    ], 33)
    by_id = {s.track_id: s for s in states}
    assert by_id[0].gesture == Gesture.TAP_HELD
    assert by_id[1].gesture == Gesture.OPEN


def test_far_jump_starts_new_track(assigner):
    assigner.update([make_observation(cursor=(0.1, 0.5))], 0)
    states = assigner.update([make_observation(cursor=(0.9, 0.5))], 33)
    assert states[0].track_id == 1


def test_track_survives_short_dropout(assigner):
    assigner.update([make_observation(cursor=(0.5, 0.5), pinch=0.01)], 0)
    for i in range(3):
        assigner.update([], 33 * (i + 1))
    assert assigner.track_ids == (0,)

    states = assigner.update([make_observation(cursor=(0.5, 0.5), pinch=0.01)], 200)
    assert states[0].track_id == 0
    assert states[0].gesture == Gesture.TAP_HELD


def test_track_expires_after_max_missed_frames(assigner):
    assigner.update([make_observation(cursor=(0.5, 0.5), pinch=0.01)], 0)
    for i in range(4):
        assigner.update([], 33 * (i + 1))
    assert assigner.track_count == 0
    assert assigner.get_state(0) is None

    # Reappearing hand is a new track with fresh state
    states = assigner.update([make_observation(cursor=(0.5, 0.5), pinch=0.1)], 500)
    assert states[0].track_id == 1
    assert states[0].gesture == Gesture.OPEN


def test_ids_are_never_reused(assigner):
    seen = []
    for cycle in range(3):
        start = cycle * 1000
        states = assigner.update([make_observation()], start)
        seen.append(states[0].track_id)
        for i in range(4):
            assigner.update([], start + 33 * (i + 1))
    assert seen == [0, 1, 2]


def test_reset_clears_tracks(assigner):
    assigner.update([make_observation()], 0)
    assigner.reset()
    assert assigner.track_count == 0
