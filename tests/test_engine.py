import pytest

from conftest import VIEWPORT, make_observation
from spatial.commands import TakePhoto
from spatial.engine import InteractionEngine
from spatial.layout import ActiveWindow, LayoutSnapshot, build_window_targets

WINDOW = ActiveWindow("photos", (100.0, 100.0), (600.0, 450.0), "Photos")


@pytest.fixture
def engine(config):
    return InteractionEngine(config)


@pytest.fixture
def layout():
    return LayoutSnapshot(viewport=VIEWPORT)


def window_layout(window=WINDOW):
    handle, close = build_window_targets(window, -400.0)
    return LayoutSnapshot(
        viewport=VIEWPORT, drag_handle=handle, close_button=close,
        window=window, grid_visible=False,
    )


def test_clock_advances_in_milliseconds(engine, layout):
    engine.advance(0.5, [], layout)
    engine.advance(0.25, None, layout)
    assert engine.context.clock_ms == pytest.approx(750.0)


def test_stale_frame_reuses_previous_hands(engine, layout):
    first = engine.advance(0.033, [make_observation(pinch=0.01)], layout)
    stale = engine.advance(0.033, None, layout)
    assert not stale.fresh
    assert stale.commands == []
    assert stale.hand_states == first.hand_states


def test_empty_observations_clear_hands(engine, layout):
    engine.advance(0.033, [make_observation()], layout)
    result = engine.advance(0.033, [], layout)
    assert result.fresh
    assert result.hand_states == []


def test_dock_collapses_after_inactivity(engine, layout):
    assert not engine.advance(1.0, [], layout).dock_collapsed
    assert engine.advance(3.5, [], layout).dock_collapsed

    # Any visible hand counts as activity
    assert not engine.advance(0.1, [make_observation()], layout).dock_collapsed


def test_dock_collapses_during_stale_frames(engine, layout):
    engine.advance(0.1, [make_observation()], layout)
    assert engine.advance(5.0, None, layout).dock_collapsed


def test_window_follows_layout_when_idle(engine):
    result = engine.advance(0.033, [], window_layout())
    assert result.window == WINDOW
    assert engine.advance(0.033, [], LayoutSnapshot(viewport=VIEWPORT)).window is None


def test_drag_moves_window_through_engine(engine):
    layout = window_layout()
    # Index tip over the drag handle at the window plane, pinching
    grab = make_observation(cursor=(0.6, 0.53), pinch=0.01, depth=-0.4)
    started = engine.advance(0.033, [grab], layout)
    assert started.highlight.dragging

    move = make_observation(cursor=(0.55, 0.56), pinch=0.01, depth=-0.4)
    moved = engine.advance(0.033, [move], layout)
    # Smoothed cursor moved 30% of the way: screen (415, 539)
    assert moved.window.position == pytest.approx((115.0, 109.0))
    assert engine.context.session.owns_window


def test_double_tap_takes_one_photo(engine, layout):
    photos = []
    for gap in (0.1, 0.01, 0.1, 0.01, 0.1, 0.1):
        result = engine.advance(0.033, [make_observation(middle_gap=gap)], layout)
        photos.append(result.commands.count(TakePhoto()))
    assert photos == [0, 0, 0, 0, 1, 0]


def test_reset_drops_state(engine, layout):
    engine.advance(0.033, [make_observation()], layout)
    engine.reset()
    assert engine.context.hands == []
    assert engine.context.tracks.track_count == 0
    assert engine.context.clock_ms == 0.0
