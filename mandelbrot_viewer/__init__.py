"""
Mandelbrot Set Viewer Package

An interactive Mandelbrot set explorer using Pygame for display and Numba
for JIT-compiled computation on a persistent pool of render workers.

Quick Start:
    from mandelbrot_viewer import run
    run()

Or from command line:
    python -m mandelbrot_viewer

Package Structure:
    - config.py: Immutable startup configuration and settings.json loading
    - colormaps.py: Frozen iteration -> RGBA palette and color ramps
    - compute.py: JIT-compiled escape-time functions
    - view.py: ViewState and pixel <-> complex transforms (pan, centered zoom)
    - workers.py: Persistent render worker pool
    - renderer.py: Row partitioning and frame assembly
    - scheduler.py: Dirty tracking and rate-limited re-rendering
    - app.py: Window, input polling and display

Controls:
    - Arrow keys: Pan
    - = / -: Zoom in/out around the screen center
    - R: Reset to default view
    - ESC: Quit
"""

from .colormaps import COLORMAPS, build_palette, list_colormap_names
from .compute import escape_time
from .config import ConfigError, ViewerConfig, load_settings
from .renderer import Frame, partition_rows, render_frame
from .scheduler import InputState, RenderScheduler, SchedulerState
from .view import ViewState, complex_to_pixel, pan, pixel_to_complex, zoom_centered
from .workers import RenderResult, RenderTask, WorkerError, WorkerPool


def run(config=None):
    """Start the viewer window (imports pygame lazily)."""
    from .app import run as _run
    _run(config)


__version__ = "1.0.0"
__all__ = [
    "run",
    "COLORMAPS",
    "build_palette",
    "list_colormap_names",
    "escape_time",
    "ConfigError",
    "ViewerConfig",
    "load_settings",
    "Frame",
    "partition_rows",
    "render_frame",
    "InputState",
    "RenderScheduler",
    "SchedulerState",
    "ViewState",
    "complex_to_pixel",
    "pan",
    "pixel_to_complex",
    "zoom_centered",
    "RenderResult",
    "RenderTask",
    "WorkerError",
    "WorkerPool",
]
