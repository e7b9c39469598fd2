import pytest

from handtrack.config import Config, GestureConfig, InteractionConfig, TrackingConfig
from handtrack.gesture_recognizer import Gesture, GestureRecognizer, HandState
from handtrack.landmarks import (
    HandObservation, NUM_LANDMARKS,
    INDEX_PIP, INDEX_TIP, MIDDLE_PIP, MIDDLE_TIP, PINKY_PIP, PINKY_TIP,
    RING_PIP, RING_TIP, THUMB_TIP, WRIST,
)

VIEWPORT = (1000.0, 1000.0)


def make_observation(cursor=(0.5, 0.5), pinch=0.1, middle_gap=0.1,
                     pointing=True, depth=0.0, slot=0):
    """
    Synthetic hand: index tip at ``cursor`` (z = depth), thumb tip ``pinch``
    to its right, middle tip ``middle_gap`` to its left.
    """
    cx, cy = cursor
    points = [(cx, cy + 0.2, 0.0)] * NUM_LANDMARKS
    points[WRIST] = (cx, cy + 0.3, 0.0)
    points[INDEX_TIP] = (cx, cy, depth)
    points[INDEX_PIP] = (cx, cy + 0.05 if pointing else cy - 0.05, 0.0)
    points[THUMB_TIP] = (cx + pinch, cy, depth)
    points[MIDDLE_TIP] = (cx - middle_gap, cy, depth)
    # Curled fingers: tip below PIP; open hand: tip above PIP
    curl = 0.05 if pointing else -0.05
    points[MIDDLE_PIP] = (cx - middle_gap, cy - curl, 0.0)
    points[RING_TIP] = (cx + 0.05, cy + 0.1, 0.0)
    points[RING_PIP] = (cx + 0.05, cy + 0.1 - curl, 0.0)
    points[PINKY_TIP] = (cx + 0.08, cy + 0.1, 0.0)
    points[PINKY_PIP] = (cx + 0.08, cy + 0.1 - curl, 0.0)
    return HandObservation.from_points(slot, points)


def screen_to_cursor(x, y, viewport=VIEWPORT):
    """Inverse of the mirrored screen mapping."""
    return (1.0 - x / viewport[0], y / viewport[1])


def make_hand(track_id=0, screen=(500.0, 500.0), gesture=Gesture.OPEN,
              pointing=True, depth=0.0, double_tap=False):
    return HandState(
        track_id=track_id,
        gesture=gesture,
        smoothed_cursor=screen_to_cursor(*screen),
        is_pointing=pointing,
        index_depth=depth,
        middle_index_double_tap=double_tap,
    )


@pytest.fixture
def gesture_config():
    return GestureConfig()


@pytest.fixture
def recognizer(gesture_config):
    return GestureRecognizer(gesture_config)


@pytest.fixture
def tracking_config():
    return TrackingConfig(max_match_distance=0.25, max_missed_frames=3)


@pytest.fixture
def interaction_config():
    # Unit depth scale: hand depths in tests are already in layout units
    return InteractionConfig(depth_scale=1.0)


@pytest.fixture
def config():
    return Config()
