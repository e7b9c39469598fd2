"""
Frame-driven interaction engine.

``InteractionEngine.advance(dt, observations, layout)`` runs one frame:
hand observations are matched to persistent tracks, each track's gesture
state is advanced, and the dispatcher turns the resulting hand states into
UI commands. All mutable state lives in a ``FrameContext`` so the engine can
be driven from a timer, a render loop or a test.
"""
from dataclasses import dataclass, field
import logging
from typing import List, Optional, Sequence

from handtrack.config import Config
from handtrack.gesture_recognizer import GestureRecognizer, HandState
from handtrack.landmarks import HandObservation
from handtrack.track_assigner import TrackAssigner

from .commands import Command
from .dispatcher import Highlight, SpatialDispatcher
from .layout import ActiveWindow, LayoutSnapshot
from .session import InteractionSession

logger = logging.getLogger(__name__)


@dataclass
class FrameContext:
    """Everything carried from one frame to the next."""
    tracks: TrackAssigner
    session: InteractionSession = field(default_factory=InteractionSession)
    window: Optional[ActiveWindow] = None
    clock_ms: float = 0.0
    last_activity_ms: float = 0.0
    hands: List[HandState] = field(default_factory=list)
    highlight: Highlight = field(default_factory=Highlight)


@dataclass
class FrameResult:
    hand_states: List[HandState]
    commands: List[Command]
    highlight: Highlight
    window: Optional[ActiveWindow]
    dock_active: bool = False
    dock_collapsed: bool = False
    fresh: bool = True  # False when the estimator had no new result


class InteractionEngine:
    """
    Runs the gesture engine and the dispatcher once per frame.

    Pass ``observations=None`` to ``advance`` when the pose estimator has not
    produced anything since the last frame: the previous hand states are
    returned unchanged and nothing is dispatched. An empty list means no hands
    are visible.
    """

    def __init__(self, config: Config):
        self._config = config
        self._recognizer = GestureRecognizer(config.gestures)
        self._dispatcher = SpatialDispatcher(config.interaction)
        self._dock_timeout_ms = config.dock.hide_timeout_ms
        self.context = self.new_context()

    def new_context(self) -> FrameContext:
        return FrameContext(tracks=TrackAssigner(self._config.tracking, self._recognizer))

    def reset(self) -> None:
        """Drop all hand and interaction state."""
        self.context = self.new_context()

    def advance(
        self,
        dt: float,
        observations: Optional[Sequence[HandObservation]],
        layout: LayoutSnapshot,
    ) -> FrameResult:
        """
        Advance one frame.

        Args:
            dt: Seconds since the previous call
            observations: This frame's hands, or None if the estimator has
                nothing new
            layout: Current UI targets

        Returns:
            FrameResult with hand states and the commands to apply.
        """
        ctx = self.context
        ctx.clock_ms += dt * 1000.0

        if observations is None:
            return FrameResult(
                hand_states=list(ctx.hands),
                commands=[],
                highlight=ctx.highlight,
                window=ctx.window,
                dock_collapsed=self._dock_collapsed(),
                fresh=False,
            )

        hands = ctx.tracks.update(observations, ctx.clock_ms)

        if not ctx.session.owns_window:
            ctx.window = layout.window

        dispatched = self._dispatcher.dispatch(hands, layout, ctx.session, ctx.window)
        ctx.window = dispatched.window
        ctx.hands = hands
        ctx.highlight = dispatched.highlight

        if hands or dispatched.dock_active:
            ctx.last_activity_ms = ctx.clock_ms

        for command in dispatched.commands:
            logger.debug("Command: %s", command)

        return FrameResult(
            hand_states=list(hands),
            commands=dispatched.commands,
            highlight=dispatched.highlight,
            window=dispatched.window,
            dock_active=dispatched.dock_active,
            dock_collapsed=self._dock_collapsed(),
        )

    def _dock_collapsed(self) -> bool:
        ctx = self.context
        return ctx.clock_ms - ctx.last_activity_ms > self._dock_timeout_ms
