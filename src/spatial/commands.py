"""
UI commands issued by the dispatcher. They are the only way the interaction
core affects the presentation and window-management layers.
"""
from dataclasses import dataclass
from typing import Dict, Type


class Command:
    """Base class for dispatcher output."""


@dataclass(frozen=True)
class OpenApp(Command):
    app_id: str


@dataclass(frozen=True)
class CloseWindow(Command):
    pass


@dataclass(frozen=True)
class ToggleGrid(Command):
    pass


@dataclass(frozen=True)
class FlipCamera(Command):
    pass


@dataclass(frozen=True)
class ToggleZoom(Command):
    pass


@dataclass(frozen=True)
class RecenterView(Command):
    pass


@dataclass(frozen=True)
class TakePhoto(Command):
    pass


@dataclass(frozen=True)
class WindowPosition(Command):
    x: float
    y: float


@dataclass(frozen=True)
class WindowSize(Command):
    width: float
    height: float


# Dock button id -> command it issues when pushed
DOCK_COMMANDS: Dict[str, Type[Command]] = {
    "grid": ToggleGrid,
    "camera": FlipCamera,
    "zoom": ToggleZoom,
    "recenter": RecenterView,
}
