"""
Gesture recognition from hand landmarks.
Detects the index-thumb tap lifecycle, index-middle double taps and pointing,
and smooths the index fingertip into a cursor.
"""
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional, Tuple

from .config import GestureConfig
from .landmarks import (
    HandObservation, Landmark, distance_3d,
    INDEX_PIP, INDEX_TIP, MIDDLE_PIP, MIDDLE_TIP,
    RING_PIP, RING_TIP, PINKY_PIP, PINKY_TIP,
)


class Gesture(Enum):
    """Tap/pinch lifecycle states."""
    OPEN = auto()
    TAP_DOWN = auto()   # Just touched (one frame)
    TAP_HELD = auto()   # Maintaining touch
    TAP_UP = auto()     # Just released (one frame)

    @property
    def is_engaged(self) -> bool:
        return self in (Gesture.TAP_DOWN, Gesture.TAP_HELD)


@dataclass
class HandState:
    """Per-hand gesture state carried from frame to frame."""
    track_id: int
    gesture: Gesture = Gesture.OPEN
    double_tap_gesture: Gesture = Gesture.OPEN
    tap_count: int = 0
    last_tap_timestamp: Optional[float] = None  # ms
    smoothed_cursor: Tuple[float, float] = (0.0, 0.0)
    is_pointing: bool = False
    middle_index_double_tap: bool = False
    pinch_distance: float = 0.0
    index_depth: float = 0.0  # Raw index-tip z
    handedness: str = "Unknown"
    landmarks: Tuple[Landmark, ...] = field(default=(), repr=False)


def next_tap_gesture(current: Gesture, distance: float,
                     engage: float, release: float) -> Gesture:
    """
    Advance the tap state machine by exactly one frame.

    Distances below ``engage`` count as touching, above ``release`` as apart;
    the band in between keeps the current engaged/disengaged side.
    """
    touching = distance < engage
    apart = distance > release

    if current == Gesture.OPEN:
        return Gesture.TAP_DOWN if touching else Gesture.OPEN
    if current == Gesture.TAP_DOWN:
        return Gesture.TAP_UP if apart else Gesture.TAP_HELD
    if current == Gesture.TAP_HELD:
        return Gesture.TAP_UP if apart else Gesture.TAP_HELD
    # TAP_UP
    return Gesture.TAP_DOWN if touching else Gesture.OPEN


def next_double_tap_gesture(current: Gesture, distance: float,
                            engage: float, release: float) -> Gesture:
    """Reduced tap machine without a held state: DOWN stays DOWN until release."""
    if current == Gesture.OPEN:
        return Gesture.TAP_DOWN if distance < engage else Gesture.OPEN
    if current == Gesture.TAP_DOWN:
        return Gesture.TAP_UP if distance > release else Gesture.TAP_DOWN
    return Gesture.TAP_DOWN if distance < engage else Gesture.OPEN


def is_pointing(observation: HandObservation) -> bool:
    """
    Index extended, other fingers curled.

    Compares fingertip and PIP joint heights only (y grows downwards),
    since curled fingers fold down in the camera frame.
    """
    lm = observation.landmarks
    index_extended = lm[INDEX_TIP][1] < lm[INDEX_PIP][1]
    others_curled = all(
        lm[tip][1] > lm[pip][1]
        for tip, pip in ((MIDDLE_TIP, MIDDLE_PIP), (RING_TIP, RING_PIP), (PINKY_TIP, PINKY_PIP))
    )
    return index_extended and others_curled


class GestureRecognizer:
    """
    Turns one hand observation into the next HandState.

    The recognizer keeps no per-hand state of its own: ``update`` takes the
    previous state and returns a new one, so the same instance serves every
    tracked hand.
    """

    def __init__(self, config: GestureConfig):
        """
        Initialize gesture recognizer.

        Args:
            config: Gesture detection thresholds
        """
        self._config = config

    def initial_state(self, track_id: int, observation: HandObservation) -> HandState:
        """State for a hand seen for the first time: OPEN, cursor seeded to the fingertip."""
        tip = observation.index_tip
        return HandState(track_id=track_id, smoothed_cursor=(tip[0], tip[1]))

    def update(
        self,
        previous: Optional[HandState],
        observation: HandObservation,
        timestamp_ms: float,
        track_id: Optional[int] = None,
    ) -> HandState:
        """
        Compute the next state for one hand.

        Args:
            previous: State from the last frame this hand was seen, or None
            observation: Landmarks for this frame
            timestamp_ms: Frame time in milliseconds
            track_id: Identity for a new hand (ignored when previous is given)
        """
        if previous is None:
            previous = self.initial_state(
                track_id if track_id is not None else observation.index,
                observation,
            )
        cfg = self._config

        # Cursor: first-order low-pass on the index tip
        tip = observation.index_tip
        sx, sy = previous.smoothed_cursor
        smoothed = (
            sx + (tip[0] - sx) * cfg.lerp_factor,
            sy + (tip[1] - sy) * cfg.lerp_factor,
        )

        pinch_dist = distance_3d(observation.index_tip, observation.thumb_tip)
        gesture = next_tap_gesture(
            previous.gesture, pinch_dist, cfg.tap_threshold, cfg.release_threshold
        )

        double_tap, tap_count, last_tap, double_gesture = self._update_double_tap(
            previous, observation, timestamp_ms
        )

        return replace(
            previous,
            gesture=gesture,
            double_tap_gesture=double_gesture,
            tap_count=tap_count,
            last_tap_timestamp=last_tap,
            smoothed_cursor=smoothed,
            is_pointing=is_pointing(observation),
            middle_index_double_tap=double_tap,
            pinch_distance=pinch_dist,
            index_depth=tip[2],
            handedness=observation.handedness,
            landmarks=observation.landmarks,
        )

    def _update_double_tap(
        self,
        previous: HandState,
        observation: HandObservation,
        now: float,
    ) -> Tuple[bool, int, Optional[float], Gesture]:
        """Count index-middle tap completions; two inside the window make a double tap."""
        cfg = self._config
        window = cfg.double_tap_window_ms

        tap_count = previous.tap_count
        last_tap = previous.last_tap_timestamp

        # A lone stale tap must not pair with a much later one
        if tap_count > 0 and last_tap is not None and now - last_tap > window:
            tap_count = 0

        distance = distance_3d(observation.index_tip, observation.middle_tip)
        gesture = next_double_tap_gesture(
            previous.double_tap_gesture, distance,
            cfg.middle_index_tap_threshold, cfg.middle_index_release_threshold,
        )

        fired = False
        if previous.double_tap_gesture == Gesture.TAP_DOWN and gesture == Gesture.TAP_UP:
            if last_tap is not None and now - last_tap < window:
                tap_count += 1
            else:
                tap_count = 1
            last_tap = now

            if tap_count >= 2:
                fired = True
                tap_count = 0

        return fired, tap_count, last_tap, gesture
