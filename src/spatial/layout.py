"""
UI target geometry: screen rectangles with depth planes, the active window,
and the per-frame layout snapshot handed to the dispatcher.

Helpers at the bottom compute the launcher's arc layout, the dock row and a
window's drag handle / close button, for the debug preview and for tests.
"""
from dataclasses import dataclass
import math
from typing import Iterable, Optional, Sequence, Tuple

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned screen rectangle in pixels."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Point:
        return (self.left + self.width / 2, self.top + self.height / 2)

    def contains(self, x: float, y: float) -> bool:
        """Edges count as inside."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class UITarget:
    """A named screen rectangle living on a depth plane."""
    target_id: str
    rect: Rect
    depth: float


@dataclass(frozen=True)
class ActiveWindow:
    id: str
    position: Point
    size: Tuple[float, float]
    title: str = ""


@dataclass(frozen=True)
class LayoutSnapshot:
    """Everything the presentation layer shows this frame, as hit-test targets."""
    viewport: Tuple[float, float]
    icons: Tuple[UITarget, ...] = ()
    dock_buttons: Tuple[UITarget, ...] = ()
    drag_handle: Optional[UITarget] = None
    close_button: Optional[UITarget] = None
    window: Optional[ActiveWindow] = None
    window_plane: float = -400.0
    dock_plane: float = 0.0
    grid_visible: bool = True


def to_screen(cursor: Point, viewport: Tuple[float, float]) -> Point:
    """Normalized cursor -> pixels, mirrored horizontally to match the preview."""
    width, height = viewport
    return ((1.0 - cursor[0]) * width, cursor[1] * height)


def arc_icon_depth(index: int, count: int, radius: float, angle_step: float,
                   grid_plane: float) -> float:
    """Depth of an icon on the launcher arc; outer icons curve further back."""
    angle = math.radians((index - (count - 1) / 2) * angle_step)
    return grid_plane - radius * (1 - math.cos(angle))


def build_icon_targets(
    app_ids: Sequence[str],
    viewport: Tuple[float, float],
    radius: float = 800.0,
    angle_step: float = 8.0,
    grid_plane: float = -600.0,
    icon_size: float = 96.0,
    spacing: float = 20.0,
) -> Tuple[UITarget, ...]:
    """Icons in a centered row, pushed sideways and back along the arc."""
    count = len(app_ids)
    vw, vh = viewport
    targets = []
    for i, app_id in enumerate(app_ids):
        offset = i - (count - 1) / 2
        arc_x = math.sin(math.radians(offset * angle_step)) * radius
        cx = vw / 2 + offset * (icon_size + spacing) + arc_x
        cy = vh / 2
        rect = Rect(cx - icon_size / 2, cy - icon_size / 2, icon_size, icon_size)
        depth = arc_icon_depth(i, count, radius, angle_step, grid_plane)
        targets.append(UITarget(app_id, rect, depth))
    return tuple(targets)


def build_dock_targets(
    viewport: Tuple[float, float],
    button_ids: Iterable[str] = ("grid", "camera", "recenter"),
    dock_plane: float = 0.0,
    button_size: float = 48.0,
    gap: float = 24.0,
    bottom_margin: float = 40.0,
) -> Tuple[UITarget, ...]:
    """Dock buttons in a row centered at the bottom of the viewport."""
    button_ids = list(button_ids)
    vw, vh = viewport
    total = len(button_ids) * button_size + (len(button_ids) - 1) * gap
    left = (vw - total) / 2
    top = vh - bottom_margin - button_size
    return tuple(
        UITarget(button_id, Rect(left + i * (button_size + gap), top, button_size, button_size), dock_plane)
        for i, button_id in enumerate(button_ids)
    )


def build_window_targets(
    window: ActiveWindow,
    window_plane: float = -400.0,
    title_bar_height: float = 56.0,
    close_size: float = 32.0,
    handle_height: float = 32.0,
) -> Tuple[UITarget, UITarget]:
    """
    Drag handle along the bottom edge and close button in the title bar.

    Returns:
        (drag_handle, close_button)
    """
    x, y = window.position
    width, height = window.size
    drag_handle = UITarget(
        "drag_handle", Rect(x, y + height - handle_height, width, handle_height), window_plane
    )
    margin = (title_bar_height - close_size) / 2
    close_button = UITarget(
        "close_button",
        Rect(x + width - margin - close_size, y + margin, close_size, close_size),
        window_plane,
    )
    return drag_handle, close_button


def centered_window(app_id: str, viewport: Tuple[float, float],
                    size: Tuple[float, float], title: str = "") -> ActiveWindow:
    vw, vh = viewport
    width, height = size
    return ActiveWindow(
        id=app_id,
        position=((vw - width) / 2, (vh - height) / 2),
        size=(width, height),
        title=title or app_id.title(),
    )
