"""
MediaPipe Hand Tracker wrapper using the Tasks API.
Handles camera capture and multi-hand landmark detection.
"""
import logging
import time
from pathlib import Path
from typing import List, Optional, Sequence

import cv2
import mediapipe as mp
import numpy as np

from .config import Config, CameraConfig, MediaPipeConfig
from .gesture_recognizer import HandState
from .landmarks import HAND_CONNECTIONS, HandObservation

logger = logging.getLogger(__name__)

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)


class HandTracker:
    """
    Camera capture plus MediaPipe hand landmarker in VIDEO mode.

    Landmarks are reported in raw camera coordinates. The preview returned by
    get_frame_with_hands is mirrored, matching the dispatcher's screen mapping.
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: AirSpace configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        self._model_path = Path(model_path or self.DEFAULT_MODEL_PATH)

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def start(self) -> bool:
        """
        Start camera capture and MediaPipe.

        Returns:
            True if started successfully, False otherwise.
        """
        if self._is_running:
            return True

        if not self._model_path.exists():
            logger.error("Model file not found: %s (download from %s)", self._model_path, MODEL_URL)
            return False

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            logger.error("Could not open camera %d", self._camera_config.device_id)
            return False

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=self._mp_config.max_num_hands,
            min_hand_detection_confidence=self._mp_config.min_detection_confidence,
            min_tracking_confidence=self._mp_config.min_tracking_confidence,
        )

        self._landmarker = HandLandmarker.create_from_options(options)
        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._is_running = True
        logger.info("Hand tracker started (camera %d, %d hands)",
                    self._camera_config.device_id, self._mp_config.max_num_hands)
        return True

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None

    def get_observations(self) -> Optional[List[HandObservation]]:
        """
        Capture a frame and detect hands.

        Returns:
            Observations in estimator slot order (possibly empty), or None if
            no new frame could be read.
        """
        if not self._is_running or self._cap is None or self._landmarker is None:
            return None

        ret, frame = self._cap.read()
        if not ret:
            return None

        self._frame_count += 1

        # Detect on the raw frame; screen mapping mirrors x once
        self._last_frame = frame

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        # MediaPipe VIDEO mode needs strictly monotonic timestamps
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        observations = []
        for slot, hand_landmarks in enumerate(result.hand_landmarks or []):
            handedness = result.handedness[slot][0] if slot < len(result.handedness) else None
            observations.append(HandObservation.from_points(
                slot,
                [(lm.x, lm.y, lm.z) for lm in hand_landmarks],
                handedness=handedness.category_name if handedness else "Unknown",
                confidence=handedness.score if handedness else 1.0,
            ))
        return observations

    def get_frame_with_hands(
        self,
        hands: Sequence[HandState],
        black_background: bool = False
    ) -> Optional[np.ndarray]:
        """
        Get last frame with skeleton and smoothed cursor for each hand.

        Returns:
            Frame with hands drawn, or None if no frame available.
        """
        if self._last_frame is None:
            return None

        if black_background:
            frame = np.zeros_like(self._last_frame)
        else:
            frame = cv2.flip(self._last_frame, 1)

        h, w = frame.shape[:2]
        for hand in hands:
            points = [(int((1 - x) * w), int(y * h)) for x, y, _ in hand.landmarks]
            for start_idx, end_idx in HAND_CONNECTIONS:
                cv2.line(frame, points[start_idx], points[end_idx], (0, 255, 0), 2)
            for point in points:
                cv2.circle(frame, point, 4, (0, 255, 0), -1)

            cx, cy = hand.smoothed_cursor
            color = (0, 0, 255) if hand.gesture.is_engaged else (255, 255, 255)
            cv2.circle(frame, (int((1 - cx) * w), int(cy * h)), 12, color, 2)

        return frame

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def frame_count(self) -> int:
        return self._frame_count
