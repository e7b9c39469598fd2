"""
Spatial interaction dispatcher.

Maps hand states onto the UI layout each frame: window drag and two-hand
resize, window close, launcher icons and dock buttons. Presses are gated on
fingertip depth relative to each target's plane, so a hand merely hovering
in front of far-away UI does not trigger it.

Rules are evaluated per hand in priority order and the first one that acts
wins for that hand this frame:

1. active window drag
2. two-hand resize
3. window controls (drag handle, close button)
4. launcher icons
5. dock buttons

Double taps issue TakePhoto independently of the above.
"""
from dataclasses import dataclass, field, replace
import logging
import math
from typing import List, Optional, Sequence, Set

from handtrack.config import InteractionConfig
from handtrack.gesture_recognizer import Gesture, HandState

from .commands import (
    Command, CloseWindow, DOCK_COMMANDS, OpenApp, TakePhoto,
    WindowPosition, WindowSize,
)
from .layout import ActiveWindow, LayoutSnapshot, Point, centered_window, to_screen
from .session import (
    IconPress, InteractionSession, NoGrab, ResizeSession, WindowDrag, describe_grab,
)

logger = logging.getLogger(__name__)


@dataclass
class Highlight:
    """Hover/press feedback for the presentation layer."""
    hovered_icon: Optional[str] = None
    pressed_icon: Optional[str] = None
    hovered_dock: Optional[str] = None
    dragging: bool = False
    resizing: bool = False


@dataclass
class DispatchResult:
    highlight: Highlight = field(default_factory=Highlight)
    commands: List[Command] = field(default_factory=list)
    window: Optional[ActiveWindow] = None
    dock_active: bool = False


class SpatialDispatcher:
    """Turns hand states plus a layout snapshot into UI commands."""

    def __init__(self, config: InteractionConfig):
        self._config = config

    def hand_depth(self, hand: HandState) -> float:
        """Index fingertip depth in layout units; more negative reaches further in."""
        return hand.index_depth * self._config.depth_scale

    def dispatch(
        self,
        hands: Sequence[HandState],
        layout: LayoutSnapshot,
        session: InteractionSession,
        window: Optional[ActiveWindow],
    ) -> DispatchResult:
        """
        Evaluate one frame.

        Args:
            hands: Hand states for this frame
            layout: Current UI targets
            session: Interaction session, updated in place
            window: Current active window, or None

        Returns:
            DispatchResult with highlight, commands and the updated window.
        """
        result = DispatchResult(window=window)
        handled: Set[int] = set()

        self._update_drag(hands, layout, session, result, handled)
        self._update_resize(hands, layout, session, result, handled)

        for hand in hands:
            if hand.track_id in handled:
                continue

            if hand.gesture == Gesture.TAP_UP:
                released = session.release(hand.track_id)
                if not isinstance(released, NoGrab):
                    logger.debug("Hand %d released %s", hand.track_id, describe_grab(released))

            if self._window_controls(hand, hands, layout, session, result):
                continue
            if self._icon_grid(hand, layout, session, result):
                continue
            self._dock(hand, layout, result)

        for hand in hands:
            if hand.middle_index_double_tap:
                logger.debug("Double tap on hand %d", hand.track_id)
                result.commands.append(TakePhoto())

        result.highlight.hovered_dock = self._hovered_dock(hands, layout)
        result.highlight.dragging = session.is_dragging
        result.highlight.resizing = session.is_resizing
        return result

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _update_drag(self, hands, layout, session, result, handled) -> None:
        owner = session.drag_owner()
        if owner is None:
            return

        hand = next((h for h in hands if h.track_id == owner), None)
        if hand is None or result.window is None:
            session.release(owner)
            logger.debug("Drag cancelled: hand %d gone", owner)
            return

        grab = session.grab_for(owner)
        x, y = self._screen(hand, layout)
        position = (x - grab.offset[0], y - grab.offset[1])
        result.window = replace(result.window, position=position)
        result.commands.append(WindowPosition(*position))

        if hand.gesture == Gesture.TAP_UP:
            session.release(owner)
            logger.debug("Drag ended by hand %d at (%.0f, %.0f)", owner, *position)
        handled.add(owner)

    def _update_resize(self, hands, layout, session, result, handled) -> None:
        window = result.window
        tolerance = self._config.window_depth_tolerance
        qualifies = (
            window is not None
            and not session.is_dragging
            and len(hands) == 2
            and all(
                h.gesture.is_engaged
                and abs(self.hand_depth(h) - layout.window_plane) <= tolerance
                for h in hands
            )
        )

        if not qualifies:
            if session.resize is not None:
                logger.debug("Resize ended")
                session.resize = None
            return

        handled.update(h.track_id for h in hands)
        distance = self._distance(self._screen(hands[0], layout), self._screen(hands[1], layout))

        if session.resize is None:
            width, height = window.size
            session.resize = ResizeSession(distance, width, height)
            logger.debug("Resize started: distance=%.1f size=%.0fx%.0f", distance, width, height)
            return

        ref = session.resize
        if ref.reference_distance <= 0:
            return

        scale = distance / ref.reference_distance
        size = (
            max(self._config.min_window_width, ref.reference_width * scale),
            max(self._config.min_window_height, ref.reference_height * scale),
        )
        result.window = replace(window, size=size)
        result.commands.append(WindowSize(*size))

    def _window_controls(self, hand, hands, layout, session, result) -> bool:
        """Start a drag from the handle, or push through the close button."""
        window = result.window
        if window is None or session.is_resizing or len(hands) != 1:
            return False
        if not (hand.is_pointing and hand.gesture == Gesture.TAP_DOWN):
            return False

        x, y = self._screen(hand, layout)
        depth = self.hand_depth(hand)

        handle = layout.drag_handle
        if (handle is not None and handle.rect.contains(x, y)
                and abs(depth - handle.depth) <= self._config.window_depth_tolerance):
            offset = (x - window.position[0], y - window.position[1])
            session.set_grab(hand.track_id, WindowDrag(offset))
            logger.debug("Drag started by hand %d on window %s", hand.track_id, window.id)
            return True

        close = layout.close_button
        if close is not None and close.rect.contains(x, y) and depth < close.depth:
            result.commands.append(CloseWindow())
            result.window = None
            session.clear()
            logger.debug("Window %s closed by hand %d", window.id, hand.track_id)
            return True

        return False

    def _icon_grid(self, hand, layout, session, result) -> bool:
        """Hover when near an icon's plane, press when reached through it."""
        if not layout.grid_visible or result.window is not None or not hand.is_pointing:
            return False

        x, y = self._screen(hand, layout)
        depth = self.hand_depth(hand)
        icon = next((t for t in layout.icons if t.rect.contains(x, y)), None)
        if icon is None:
            return False

        if abs(depth - icon.depth) <= self._config.icon_hover_tolerance:
            result.highlight.hovered_icon = icon.target_id
        pressed = depth <= icon.depth - self._config.icon_press_offset
        if not pressed:
            return False
        result.highlight.pressed_icon = icon.target_id

        if hand.gesture != Gesture.TAP_DOWN:
            return False

        session.set_grab(hand.track_id, IconPress(icon.target_id))
        result.commands.append(OpenApp(icon.target_id))
        result.window = centered_window(
            icon.target_id, layout.viewport, self._config.window_size_for(icon.target_id)
        )
        logger.debug("Open app %s by hand %d", icon.target_id, hand.track_id)
        return True

    def _dock(self, hand, layout, result) -> bool:
        """Dock buttons live on the screen plane and fire when pushed past it."""
        if hand.gesture != Gesture.TAP_DOWN:
            return False

        x, y = self._screen(hand, layout)
        depth = self.hand_depth(hand)
        for button in layout.dock_buttons:
            if not button.rect.contains(x, y) or not depth < button.depth:
                continue
            command_cls = DOCK_COMMANDS.get(button.target_id)
            if command_cls is None:
                logger.warning("Dock button %r has no command", button.target_id)
                return False
            result.commands.append(command_cls())
            result.dock_active = True
            logger.debug("Dock %s pressed by hand %d", button.target_id, hand.track_id)
            return True
        return False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _hovered_dock(self, hands, layout) -> Optional[str]:
        for hand in hands:
            x, y = self._screen(hand, layout)
            for button in layout.dock_buttons:
                if button.rect.contains(x, y):
                    return button.target_id
        return None

    @staticmethod
    def _screen(hand: HandState, layout: LayoutSnapshot) -> Point:
        return to_screen(hand.smoothed_cursor, layout.viewport)

    @staticmethod
    def _distance(p1: Point, p2: Point) -> float:
        dx = p1[0] - p2[0]
        dy = p1[1] - p2[1]
        return math.sqrt(dx*dx + dy*dy)
