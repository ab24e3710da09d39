"""
Render scheduling: decide when the current view needs a new frame.

Input is applied to the ViewState every tick, but the expensive render
only runs when the view has changed (DIRTY) and at least render_cooldown
seconds have passed since the previous render. The last good frame is
returned on every tick whether or not a new one was computed.
"""

import enum
import logging
import time
from dataclasses import dataclass

from . import view as vt
from .renderer import render_frame
from .workers import WorkerError

logger = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    IDLE = "idle"    # Displayed frame matches the view
    DIRTY = "dirty"  # View changed since the last render


@dataclass(frozen=True)
class InputState:
    """Directional and zoom key states polled once per tick."""

    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    zoom_in: bool = False
    zoom_out: bool = False


class RenderScheduler:
    """
    Owns the current ViewState and rate-limits re-rendering.

    Usage:
        scheduler = RenderScheduler(config, pool, palette)
        scheduler.render_now()          # initial frame
        # In your game loop:
        frame = scheduler.tick(InputState(left=True))
        display(frame)

    Args:
        config: ViewerConfig
        pool: WorkerPool used by render_frame
        palette: Frozen palette from build_palette
        clock: Monotonic clock returning seconds (injectable for tests)
    """

    def __init__(self, config, pool, palette, clock=time.monotonic):
        self.config = config
        self.pool = pool
        self.palette = palette
        self.clock = clock

        self._view = config.initial_view()
        self._state = SchedulerState.DIRTY
        self._frame = None
        self._last_render = None

        self.render_count = 0
        self.last_render_seconds = None

    @property
    def view(self):
        return self._view

    @property
    def state(self):
        return self._state

    @property
    def frame(self):
        """The most recent successfully rendered Frame (None before the first)."""
        return self._frame

    def _set_view(self, new_view):
        self._view = new_view
        self._state = SchedulerState.DIRTY

    # -- View operations. Each applies immediately and marks the view dirty.

    def pan(self, dx, dy):
        self._set_view(vt.pan(self._view, dx, dy))

    def pan_left(self):
        self._set_view(vt.pan_left(self._view, self.config.pan_speed))

    def pan_right(self):
        self._set_view(vt.pan_right(self._view, self.config.pan_speed))

    def pan_up(self):
        self._set_view(vt.pan_up(self._view, self.config.pan_speed))

    def pan_down(self):
        self._set_view(vt.pan_down(self._view, self.config.pan_speed))

    def zoom(self, factor):
        self._set_view(
            vt.zoom_centered(self._view, factor, self.config.width, self.config.height)
        )

    def zoom_in(self):
        self._set_view(vt.zoom_in(
            self._view, self.config.zoom_factor, self.config.width, self.config.height
        ))

    def zoom_out(self):
        self._set_view(vt.zoom_out(
            self._view, self.config.zoom_factor, self.config.width, self.config.height
        ))

    def reset_view(self):
        self._set_view(self.config.initial_view())

    def apply_input(self, keys):
        """
        Apply one tick of polled key state.

        Every held direction pans, then a centered zoom is applied. When both
        zoom keys are held, zoom out wins.

        Returns:
            True if the view changed
        """
        moved = False
        if keys.left:
            self.pan_left()
            moved = True
        if keys.right:
            self.pan_right()
            moved = True
        if keys.up:
            self.pan_up()
            moved = True
        if keys.down:
            self.pan_down()
            moved = True

        if keys.zoom_out:
            self.zoom_out()
            moved = True
        elif keys.zoom_in:
            self.zoom_in()
            moved = True
        return moved

    def cooldown_elapsed(self, now=None):
        if self._last_render is None:
            return True
        if now is None:
            now = self.clock()
        return now - self._last_render > self.config.render_cooldown

    def render_now(self):
        """
        Render the current view immediately, ignoring the cooldown.

        On worker failure the previous frame is kept, the error is logged and
        the scheduler goes back to IDLE so the next view change retries.

        Returns:
            True if a new frame was produced
        """
        snapshot = self._view
        started = self.clock()
        try:
            frame = render_frame(
                snapshot, self.config.width, self.config.height, self.pool, self.palette
            )
        except WorkerError as err:
            logger.warning("Render cycle abandoned, keeping previous frame: %s", err)
            self._last_render = self.clock()
            if self._view == snapshot:
                self._state = SchedulerState.IDLE
            return False

        finished = self.clock()
        self._frame = frame
        self._last_render = finished
        self.last_render_seconds = finished - started
        self.render_count += 1
        # Input applied while rendering keeps the scheduler dirty.
        if self._view == snapshot:
            self._state = SchedulerState.IDLE
        return True

    def tick(self, keys=None):
        """
        Advance one tick: apply input, render if due, return the current frame.

        Args:
            keys: InputState polled this tick, or None for no input

        Returns:
            The current Frame (possibly unchanged from the previous tick)
        """
        if keys is not None:
            self.apply_input(keys)

        if self._state is SchedulerState.DIRTY and self.cooldown_elapsed():
            self.render_now()
        return self._frame
