"""
Hand landmark containers shared by the tracker, recognizer and dispatcher.
Kept free of camera/MediaPipe imports so the core can run without them.
"""
from dataclasses import dataclass
import math
from typing import Sequence, Tuple

Landmark = Tuple[float, float, float]

NUM_LANDMARKS = 21

# MediaPipe landmark indices
WRIST = 0
THUMB_CMC = 1
THUMB_MCP = 2
THUMB_IP = 3
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_DIP = 7
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_DIP = 11
MIDDLE_TIP = 12
RING_MCP = 13
RING_PIP = 14
RING_DIP = 15
RING_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_DIP = 19
PINKY_TIP = 20

# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]


@dataclass(frozen=True)
class HandObservation:
    """
    One detected hand in one frame.

    Attributes:
        index: Estimator slot for this frame (0 or 1). Not an identity.
        landmarks: 21 (x, y, z) tuples, x/y normalized 0-1 in the camera frame
        handedness: 'Left', 'Right' or 'Unknown'
        confidence: Detection confidence 0-1
    """
    index: int
    landmarks: Tuple[Landmark, ...]
    handedness: str = "Unknown"
    confidence: float = 1.0

    def __post_init__(self):
        if len(self.landmarks) != NUM_LANDMARKS:
            raise ValueError(
                f"Expected {NUM_LANDMARKS} landmarks, got {len(self.landmarks)}"
            )

    @classmethod
    def from_points(
        cls,
        index: int,
        points: Sequence[Sequence[float]],
        handedness: str = "Unknown",
        confidence: float = 1.0,
    ) -> "HandObservation":
        """Build an observation from any sequence of (x, y, z) triples."""
        landmarks = tuple(
            (float(p[0]), float(p[1]), float(p[2]) if len(p) > 2 else 0.0)
            for p in points
        )
        return cls(index=index, landmarks=landmarks,
                   handedness=handedness, confidence=confidence)

    def get(self, index: int) -> Landmark:
        """Get landmark by index."""
        return self.landmarks[index]

    @property
    def thumb_tip(self) -> Landmark:
        return self.landmarks[THUMB_TIP]

    @property
    def index_tip(self) -> Landmark:
        return self.landmarks[INDEX_TIP]

    @property
    def middle_tip(self) -> Landmark:
        return self.landmarks[MIDDLE_TIP]

    @property
    def wrist(self) -> Landmark:
        return self.landmarks[WRIST]


def distance_3d(p1: Landmark, p2: Landmark) -> float:
    """Euclidean distance between two landmarks."""
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    dz = p1[2] - p2[2]
    return math.sqrt(dx*dx + dy*dy + dz*dz)
