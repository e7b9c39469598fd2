"""
Background worker for hand tracking and spatial interaction.
Runs in a separate QThread to avoid blocking the UI.
"""
import logging
import threading
import time
from typing import List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from spatial.engine import InteractionEngine
from spatial.layout import LayoutSnapshot

from .hand_tracker import HandTracker
from .landmarks import HandObservation

logger = logging.getLogger(__name__)


class SpatialWorker(QObject):
    """
    Worker class that pulls hand observations and advances the engine.

    A capture thread runs the (slow) landmark detector as fast as the camera
    allows and leaves its latest result in a slot. The frame loop consumes the
    slot once; when nothing new has arrived the engine is told so and reuses
    the previous hand states.
    """
    # Signals
    frame_processed = pyqtSignal(object)  # Emits FrameResult
    command_issued = pyqtSignal(object)   # Emits each Command
    hands_lost = pyqtSignal()
    error = pyqtSignal(str)

    def __init__(self, config, layout: LayoutSnapshot, target_fps: int = 60, parent=None):
        super().__init__(parent)
        self._config = config
        self._target_fps = target_fps
        self._tracker: Optional[HandTracker] = None
        self._engine: Optional[InteractionEngine] = None
        self._is_running = False

        self._latest_observations: Optional[List[HandObservation]] = None
        self._observations_lock = threading.Lock()
        self._capture_thread: Optional[threading.Thread] = None

        self._layout = layout
        self._layout_lock = threading.Lock()

    def set_layout(self, layout: LayoutSnapshot) -> None:
        """Called from the UI thread whenever targets move."""
        with self._layout_lock:
            self._layout = layout

    def _capture_loop(self):
        """Background thread to pull camera frames as fast as possible."""
        while self._is_running:
            try:
                observations = self._tracker.get_observations()
            except Exception:
                logger.exception("Capture thread error")
                time.sleep(0.1)  # Cool down on error
                continue
            if observations is not None:
                with self._observations_lock:
                    self._latest_observations = observations

    def start_process(self):
        """Main frame loop. Runs in the worker thread."""
        self._tracker = HandTracker(self._config)
        self._engine = InteractionEngine(self._config)

        if not self._tracker.start():
            self.error.emit("Could not open camera or hand landmark model")
            return

        self._is_running = True
        self._capture_thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._capture_thread.start()

        min_interval = 1.0 / self._target_fps
        last_time = time.perf_counter()
        had_hands = False

        try:
            while self._is_running:
                loop_start = time.perf_counter()
                dt = loop_start - last_time
                last_time = loop_start

                with self._observations_lock:
                    observations = self._latest_observations
                    self._latest_observations = None  # Consume it
                with self._layout_lock:
                    layout = self._layout

                result = self._engine.advance(dt, observations, layout)

                if result.fresh:
                    self.frame_processed.emit(result)
                    for command in result.commands:
                        self.command_issued.emit(command)
                    if had_hands and not result.hand_states:
                        self.hands_lost.emit()
                    had_hands = bool(result.hand_states)

                elapsed = time.perf_counter() - loop_start
                sleep_time = min_interval - elapsed
                if sleep_time > 0:
                    time.sleep(sleep_time)

        except Exception as e:
            logger.exception("Worker loop failed")
            self.error.emit(f"Worker Exception: {e}")
        finally:
            self._is_running = False
            if self._capture_thread:
                self._capture_thread.join(timeout=1.0)
            if self._tracker:
                self._tracker.stop()

    def stop_process(self):
        """Signal the loop to stop and release resources in worker thread."""
        self._is_running = False
