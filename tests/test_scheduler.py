import numpy as np
import pytest

from mandelbrot_viewer.config import ViewerConfig
from mandelbrot_viewer.scheduler import InputState, RenderScheduler, SchedulerState
from mandelbrot_viewer.view import ViewState, screen_center
from mandelbrot_viewer.workers import WorkerPool


@pytest.fixture
def scheduler(small_config, pool, palette, clock):
    return RenderScheduler(small_config, pool, palette, clock=clock)


def test_starts_dirty_at_initial_view(scheduler, small_config):
    assert scheduler.state is SchedulerState.DIRTY
    assert scheduler.view == ViewState(100.0, -2.5, -1.5)
    assert scheduler.frame is None


def test_first_tick_renders(scheduler):
    frame = scheduler.tick()

    assert frame is not None
    assert scheduler.state is SchedulerState.IDLE
    assert scheduler.render_count == 1
    assert frame.view == scheduler.view


def test_idle_tick_returns_same_frame_without_rendering(scheduler, clock):
    first = scheduler.tick()
    clock.advance(10)

    assert scheduler.tick() is first
    assert scheduler.tick(InputState()) is first
    assert scheduler.render_count == 1


def test_input_marks_dirty_and_updates_view_immediately(scheduler):
    scheduler.render_now()
    before = scheduler.view

    scheduler.apply_input(InputState(right=True))

    assert scheduler.state is SchedulerState.DIRTY
    assert scheduler.view.offset_x == pytest.approx(before.offset_x + 10.0 / before.zoom)


def test_render_is_rate_limited_by_cooldown(scheduler, clock):
    first = scheduler.tick()

    clock.advance(0.1)
    frame = scheduler.tick(InputState(left=True))
    assert frame is first
    assert scheduler.state is SchedulerState.DIRTY
    assert scheduler.render_count == 1

    clock.advance(0.05)
    assert scheduler.tick() is first

    clock.advance(0.1)
    frame = scheduler.tick()
    assert frame is not first
    assert scheduler.render_count == 2
    assert scheduler.state is SchedulerState.IDLE


def test_input_compounds_while_waiting_for_cooldown(scheduler, clock):
    scheduler.tick()
    start = scheduler.view

    for _ in range(3):
        clock.advance(0.01)
        scheduler.tick(InputState(down=True))

    assert scheduler.render_count == 1
    assert scheduler.view.offset_y == pytest.approx(start.offset_y + 30.0 / start.zoom)

    clock.advance(1.0)
    frame = scheduler.tick()
    assert frame.view == scheduler.view


def test_pending_change_is_rendered_without_further_input(scheduler, clock):
    scheduler.tick()
    clock.advance(0.05)
    scheduler.tick(InputState(zoom_in=True))

    clock.advance(1.0)
    scheduler.tick()

    assert scheduler.render_count == 2
    assert scheduler.frame.view == scheduler.view


def test_all_held_directions_apply(scheduler):
    start = scheduler.view
    scheduler.apply_input(InputState(left=True, up=True))
    assert scheduler.view.offset_x == pytest.approx(start.offset_x - 0.1)
    assert scheduler.view.offset_y == pytest.approx(start.offset_y - 0.1)


def test_zoom_out_wins_when_both_zoom_keys_held(scheduler):
    start = scheduler.view
    scheduler.apply_input(InputState(zoom_in=True, zoom_out=True))
    assert scheduler.view.zoom == pytest.approx(start.zoom / 1.1)


def test_zoom_keeps_center(scheduler, small_config):
    center = screen_center(scheduler.view, small_config.width, small_config.height)
    scheduler.zoom_in()
    scheduler.zoom_in()
    after = screen_center(scheduler.view, small_config.width, small_config.height)
    assert after == pytest.approx(center)


def test_no_input_reports_no_movement(scheduler):
    scheduler.render_now()
    assert scheduler.apply_input(InputState()) is False
    assert scheduler.state is SchedulerState.IDLE


def test_reset_view(scheduler, small_config):
    scheduler.render_now()
    scheduler.pan(50, 50)
    scheduler.zoom(3.0)
    scheduler.reset_view()
    assert scheduler.view == small_config.initial_view()
    assert scheduler.state is SchedulerState.DIRTY


def test_worker_failure_keeps_previous_frame(small_config, palette, clock):
    broken = {"on": False}

    def kernel(task, max_iter):
        if broken["on"]:
            raise RuntimeError("worker died")
        return np.zeros((len(task.rows), task.width), dtype=np.int32)

    with WorkerPool(small_config.workers, small_config.max_iter, kernel=kernel) as pool:
        scheduler = RenderScheduler(small_config, pool, palette, clock=clock)
        good = scheduler.tick()

        broken["on"] = True
        clock.advance(1.0)
        frame = scheduler.tick(InputState(right=True))

        assert frame is good
        assert scheduler.frame is good
        assert scheduler.render_count == 1
        assert scheduler.state is SchedulerState.IDLE

        # The next input-driven cycle retries and succeeds
        broken["on"] = False
        clock.advance(1.0)
        frame = scheduler.tick(InputState(right=True))
        assert frame is not good
        assert frame.view == scheduler.view


def test_displayed_frame_matches_a_single_snapshot(scheduler, clock):
    scheduler.tick()
    for _ in range(5):
        clock.advance(0.3)
        frame = scheduler.tick(InputState(zoom_in=True, right=True))
        assert frame.view == scheduler.view


def test_zero_cooldown_renders_every_dirty_tick(small_config, pool, palette, clock):
    config = ViewerConfig(width=16, height=10, max_iter=30, workers=4, render_cooldown=0.0)
    scheduler = RenderScheduler(config, pool, palette, clock=clock)
    scheduler.tick()
    clock.advance(0.001)
    scheduler.tick(InputState(up=True))
    assert scheduler.render_count == 2


def test_cooldown_must_be_strictly_exceeded(pool, palette, clock):
    config = ViewerConfig(width=16, height=10, max_iter=30, workers=4, render_cooldown=0.25)
    scheduler = RenderScheduler(config, pool, palette, clock=clock)
    first = scheduler.tick()

    clock.advance(0.25)
    assert scheduler.tick(InputState(left=True)) is first

    clock.advance(0.125)
    assert scheduler.tick() is not first
