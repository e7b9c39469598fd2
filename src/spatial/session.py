"""
Interaction session state: what each hand is holding, and the two-hand
resize reference while one is in progress.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class NoGrab:
    pass


@dataclass(frozen=True)
class WindowDrag:
    """Cursor minus window position, captured when the drag started."""
    offset: Tuple[float, float]


@dataclass(frozen=True)
class IconPress:
    icon_id: str


Grab = Union[NoGrab, WindowDrag, IconPress]

NO_GRAB = NoGrab()


@dataclass(frozen=True)
class ResizeSession:
    reference_distance: float
    reference_width: float
    reference_height: float


@dataclass
class InteractionSession:
    grabs: Dict[int, Grab] = field(default_factory=dict)
    resize: Optional[ResizeSession] = None

    def grab_for(self, track_id: int) -> Grab:
        return self.grabs.get(track_id, NO_GRAB)

    def set_grab(self, track_id: int, grab: Grab) -> None:
        if isinstance(grab, NoGrab):
            self.grabs.pop(track_id, None)
        else:
            self.grabs[track_id] = grab

    def release(self, track_id: int) -> Grab:
        """Drop whatever this hand holds and return it."""
        return self.grabs.pop(track_id, NO_GRAB)

    def drag_owner(self) -> Optional[int]:
        for track_id, grab in self.grabs.items():
            if isinstance(grab, WindowDrag):
                return track_id
        return None

    @property
    def is_dragging(self) -> bool:
        return self.drag_owner() is not None

    @property
    def is_resizing(self) -> bool:
        return self.resize is not None

    @property
    def owns_window(self) -> bool:
        """While dragging or resizing the dispatcher's window copy is authoritative."""
        return self.is_dragging or self.is_resizing

    def clear(self) -> None:
        self.grabs.clear()
        self.resize = None


def describe_grab(grab: Grab) -> str:
    if isinstance(grab, NoGrab):
        return "none"
    if isinstance(grab, WindowDrag):
        return f"window-drag{grab.offset}"
    if isinstance(grab, IconPress):
        return f"icon-press({grab.icon_id})"
    raise TypeError(f"Unknown grab: {grab!r}")
