"""
AirSpace Spatial Interaction Module

Depth-aware dispatch of hand gestures onto launcher icons, dock buttons and
the active window.
"""
from .commands import (
    Command, OpenApp, CloseWindow, ToggleGrid, FlipCamera, ToggleZoom,
    RecenterView, TakePhoto, WindowPosition, WindowSize,
)
from .layout import ActiveWindow, LayoutSnapshot, Rect, UITarget
from .session import InteractionSession, NoGrab, WindowDrag, IconPress, ResizeSession
from .dispatcher import SpatialDispatcher, DispatchResult, Highlight
from .engine import InteractionEngine, FrameContext, FrameResult

__all__ = [
    'Command',
    'OpenApp',
    'CloseWindow',
    'ToggleGrid',
    'FlipCamera',
    'ToggleZoom',
    'RecenterView',
    'TakePhoto',
    'WindowPosition',
    'WindowSize',
    'ActiveWindow',
    'LayoutSnapshot',
    'Rect',
    'UITarget',
    'InteractionSession',
    'NoGrab',
    'WindowDrag',
    'IconPress',
    'ResizeSession',
    'SpatialDispatcher',
    'DispatchResult',
    'Highlight',
    'InteractionEngine',
    'FrameContext',
    'FrameResult',
]
