"""
AirSpace - Hand-Gesture Spatial Launcher

Entry point for the application.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

logger = logging.getLogger("airspace")


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="AirSpace - Hand-Gesture Spatial Launcher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device index (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show camera preview with hands, targets and highlights",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional rotating log file",
    )

    return parser.parse_args()


class DemoScene:
    """
    Minimal stand-in for the presentation layer: applies commands to a grid
    flag and one window, and rebuilds hit-test targets from them.
    """

    DOCK_BUTTONS = ("grid", "camera", "zoom", "recenter")

    def __init__(self, config):
        from spatial.layout import build_dock_targets, build_icon_targets

        ui = config.ui
        self._ui = ui
        self.viewport = (ui.viewport_width, ui.viewport_height)
        self.grid_visible = True
        self.window = None
        self.icons = build_icon_targets(
            ui.apps, self.viewport, ui.arc_radius, ui.arc_angle, ui.grid_plane
        )
        self.dock = build_dock_targets(self.viewport, self.DOCK_BUTTONS, ui.dock_plane)

    def layout(self):
        from spatial.layout import LayoutSnapshot, build_window_targets

        drag_handle = close_button = None
        if self.window is not None:
            drag_handle, close_button = build_window_targets(self.window, self._ui.window_plane)
        return LayoutSnapshot(
            viewport=self.viewport,
            icons=self.icons,
            dock_buttons=self.dock,
            drag_handle=drag_handle,
            close_button=close_button,
            window=self.window,
            window_plane=self._ui.window_plane,
            dock_plane=self._ui.dock_plane,
            grid_visible=self.grid_visible and self.window is None,
        )

    def apply(self, result):
        from spatial.commands import CloseWindow, OpenApp, ToggleGrid

        for command in result.commands:
            logger.info("Command: %s", command)
            if isinstance(command, OpenApp):
                self.grid_visible = False
            elif isinstance(command, CloseWindow):
                self.grid_visible = True
            elif isinstance(command, ToggleGrid):
                self.grid_visible = not self.grid_visible
        self.window = result.window


def run_debug(config):
    """
    Run with an OpenCV preview - shows camera feed with hands and targets.
    Useful for tuning depth tolerances.
    """
    import time
    import cv2
    from handtrack.hand_tracker import HandTracker
    from spatial.engine import InteractionEngine
    from spatial.layout import to_screen

    tracker = HandTracker(config)
    engine = InteractionEngine(config)
    scene = DemoScene(config)

    print("Starting debug preview...")
    print("Press 'q' to quit")
    print("-" * 40)

    if not tracker.start():
        print("ERROR: Could not open camera or model")
        return 1

    last = time.perf_counter()
    try:
        while True:
            now = time.perf_counter()
            observations = tracker.get_observations()
            result = engine.advance(now - last, observations, scene.layout())
            last = now
            scene.apply(result)

            frame = tracker.get_frame_with_hands(result.hand_states)
            if frame is None:
                continue
            h, w = frame.shape[:2]
            sx, sy = w / scene.viewport[0], h / scene.viewport[1]
            layout = scene.layout()
            highlight = result.highlight

            # Preview is mirrored, same as the screen mapping
            def draw(target, color):
                r = target.rect
                cv2.rectangle(frame, (int(r.left * sx), int(r.top * sy)),
                              (int(r.right * sx), int(r.bottom * sy)), color, 2)

            if layout.grid_visible:
                for icon in layout.icons:
                    if icon.target_id == highlight.pressed_icon:
                        draw(icon, (0, 0, 255))
                    elif icon.target_id == highlight.hovered_icon:
                        draw(icon, (0, 255, 255))
                    else:
                        draw(icon, (200, 200, 200))
            for button in layout.dock_buttons:
                draw(button, (0, 255, 255) if button.target_id == highlight.hovered_dock else (120, 120, 120))
            if layout.drag_handle is not None:
                draw(layout.drag_handle, (255, 128, 0))
                draw(layout.close_button, (0, 0, 255))

            for i, hand in enumerate(result.hand_states):
                px, py = to_screen(hand.smoothed_cursor, scene.viewport)
                cv2.drawMarker(frame, (int(px * sx), int(py * sy)), (255, 0, 255),
                               cv2.MARKER_CROSS, 16, 2)
                text = f"#{hand.track_id} {hand.gesture.name}{' PT' if hand.is_pointing else ''}"
                text += f" z={hand.index_depth * config.interaction.depth_scale:.0f}"
                cv2.putText(frame, text, (10, 30 + i * 25),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)

            cv2.imshow("AirSpace Debug", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

    finally:
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_headless(config):
    """Run the tracking worker on a QThread and log every command."""
    import signal
    import atexit
    from PyQt5.QtCore import QCoreApplication, QThread, Qt
    from handtrack.worker import SpatialWorker

    app = QCoreApplication(sys.argv)
    scene = DemoScene(config)

    thread = QThread()
    worker = SpatialWorker(config, scene.layout())
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_frame(result):
        scene.apply(result)
        worker.set_layout(scene.layout())

    thread.started.connect(worker.start_process)
    worker.frame_processed.connect(handle_frame, Qt.QueuedConnection)
    worker.hands_lost.connect(lambda: logger.info("Hands lost"), Qt.QueuedConnection)
    worker.error.connect(lambda msg: logger.error("WORKER ERROR: %s", msg), Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main():
    """Main entry point."""
    args = parse_args()

    from handtrack import load_config
    from handtrack.logger import setup_logging

    setup_logging(args.log_level, args.log_file)
    config = load_config(args.config)

    # Apply CLI overrides
    if args.camera is not None:
        config.camera.device_id = args.camera
    if args.debug:
        config.ui.debug_overlay = True

    print("AirSpace starting...")
    print(f"  Camera: {config.camera.device_id}")
    print(f"  Apps: {', '.join(config.ui.apps)}")
    print(f"  Debug: {args.debug}")
    print()

    if args.debug:
        return run_debug(config)
    return run_headless(config)


if __name__ == "__main__":
    sys.exit(main())
