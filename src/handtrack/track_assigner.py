"""
Multi-hand tracking with persistent ID assignment.
Matches each frame's observations to live tracks by cursor distance and
expires tracks that stay unmatched for too long.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .config import TrackingConfig
from .gesture_recognizer import GestureRecognizer, HandState
from .landmarks import HandObservation

logger = logging.getLogger(__name__)


@dataclass
class HandTrack:
    """A tracked hand with persistent ID and its last gesture state."""
    track_id: int
    state: HandState
    missed_frames: int = 0
    frames_tracked: int = 1


class TrackAssigner:
    """Assigns persistent IDs to detected hands across frames."""

    def __init__(self, config: TrackingConfig, recognizer: GestureRecognizer):
        self._config = config
        self._recognizer = recognizer
        self._tracks: Dict[int, HandTrack] = {}
        self._next_id = 0

    def update(
        self,
        observations: Sequence[HandObservation],
        timestamp_ms: float,
    ) -> List[HandState]:
        """
        Update tracking with this frame's observations.

        Returns:
            One HandState per observation, in observation order.
        """
        matches = self._match(observations)
        states: List[HandState] = []
        matched_ids = set()

        for obs_idx, observation in enumerate(observations):
            track_id = matches.get(obs_idx)
            if track_id is None:
                track_id = self._next_id
                self._next_id += 1
                state = self._recognizer.update(None, observation, timestamp_ms, track_id=track_id)
                self._tracks[track_id] = HandTrack(track_id=track_id, state=state)
                logger.debug("New hand tracked: ID=%d (slot %d)", track_id, observation.index)
            else:
                track = self._tracks[track_id]
                state = self._recognizer.update(track.state, observation, timestamp_ms)
                track.state = state
                track.missed_frames = 0
                track.frames_tracked += 1
            matched_ids.add(track_id)
            states.append(state)

        self._expire(matched_ids)
        return states

    def _match(self, observations: Sequence[HandObservation]) -> Dict[int, int]:
        """Greedy nearest-first matching of observation index -> track ID."""
        if not observations or not self._tracks:
            return {}

        track_ids = list(self._tracks.keys())
        obs_xy = np.array([o.index_tip[:2] for o in observations], dtype=float)
        track_xy = np.array(
            [self._tracks[t].state.smoothed_cursor for t in track_ids], dtype=float
        )
        # (num_obs, num_tracks) distance matrix
        dists = np.linalg.norm(obs_xy[:, None, :] - track_xy[None, :, :], axis=2)

        matches: Dict[int, int] = {}
        used_tracks = set()
        for flat in np.argsort(dists, axis=None):
            obs_idx, track_idx = np.unravel_index(flat, dists.shape)
            obs_idx, track_idx = int(obs_idx), int(track_idx)
            if dists[obs_idx, track_idx] > self._config.max_match_distance:
                break
            if obs_idx in matches or track_idx in used_tracks:
                continue
            matches[obs_idx] = track_ids[track_idx]
            used_tracks.add(track_idx)
        return matches

    def _expire(self, matched_ids: set) -> None:
        lost_ids = []
        for track_id, track in self._tracks.items():
            if track_id in matched_ids:
                continue
            track.missed_frames += 1
            if track.missed_frames > self._config.max_missed_frames:
                lost_ids.append(track_id)

        for track_id in lost_ids:
            logger.debug("Hand lost: ID=%d", track_id)
            del self._tracks[track_id]

    def get_state(self, track_id: int) -> Optional[HandState]:
        track = self._tracks.get(track_id)
        return track.state if track else None

    @property
    def track_count(self) -> int:
        return len(self._tracks)

    @property
    def track_ids(self) -> Tuple[int, ...]:
        return tuple(self._tracks.keys())

    def reset(self):
        """Clear all tracking state."""
        self._tracks.clear()
