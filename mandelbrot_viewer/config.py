"""
Startup configuration for the Mandelbrot viewer.

All tunables live in one frozen ViewerConfig that is built once at startup
and passed to every component. Values can come from the defaults below, an
optional settings.json file, and command line overrides (in that order).
"""

import json
import logging
import math
import os
from dataclasses import dataclass, field, fields

from .colormaps import COLORMAPS
from .view import ViewState

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the viewer configuration is unusable."""


def _default_workers():
    return os.cpu_count() or 1


@dataclass(frozen=True)
class ViewerConfig:
    """
    Immutable viewer configuration.

    Attributes:
        width, height: Viewport size in pixels
        max_iter: Iteration cap; points reaching it are drawn black
        initial_zoom: Starting zoom in pixels per complex-plane unit
        initial_offset_x, initial_offset_y: Complex coordinate of pixel (0, 0)
        workers: Number of persistent render workers
        render_cooldown: Minimum seconds between two render cycles
        pan_speed: Screen pixels panned per tick while a key is held
        zoom_factor: Zoom multiplier per tick (zoom out uses its inverse)
        colormap: Name of the palette ramp (see colormaps.COLORMAPS)
        fps: Target tick rate of the window loop
    """

    width: int = 400
    height: int = 300
    max_iter: int = 100
    initial_zoom: float = 100.0
    initial_offset_x: float = -2.5
    initial_offset_y: float = -1.5
    workers: int = field(default_factory=_default_workers)
    render_cooldown: float = 0.2
    pan_speed: float = 10.0
    zoom_factor: float = 1.1
    colormap: str = "Grayscale"
    fps: int = 60

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ConfigError(f"viewport must be at least 1x1, got {self.width}x{self.height}")
        if self.max_iter < 1:
            raise ConfigError(f"max_iter must be >= 1, got {self.max_iter}")
        if not math.isfinite(self.initial_zoom) or self.initial_zoom <= 0:
            raise ConfigError(f"initial_zoom must be a positive number, got {self.initial_zoom}")
        if not (math.isfinite(self.initial_offset_x) and math.isfinite(self.initial_offset_y)):
            raise ConfigError("initial offsets must be finite")
        if self.workers < 1:
            raise ConfigError(f"workers must be >= 1, got {self.workers}")
        if self.render_cooldown < 0:
            raise ConfigError(f"render_cooldown must be >= 0, got {self.render_cooldown}")
        if self.pan_speed < 0:
            raise ConfigError(f"pan_speed must be >= 0, got {self.pan_speed}")
        if not self.zoom_factor > 1.0:
            raise ConfigError(f"zoom_factor must be > 1, got {self.zoom_factor}")
        if self.colormap not in COLORMAPS:
            raise ConfigError(
                f"unknown colormap {self.colormap!r}, expected one of {sorted(COLORMAPS)}"
            )
        if self.fps < 1:
            raise ConfigError(f"fps must be >= 1, got {self.fps}")

    @classmethod
    def from_settings(cls, settings, **overrides):
        """
        Build a config from a settings mapping plus explicit overrides.

        Unknown keys are logged and ignored. Overrides whose value is None
        are treated as "not given" so argparse namespaces can be passed
        straight through.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in dict(settings).items():
            if key in known:
                values[key] = value
            else:
                logger.warning("Ignoring unknown setting %r", key)
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in known:
                raise ConfigError(f"unknown config field {key!r}")
            values[key] = value
        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    def initial_view(self):
        """The ViewState the viewer starts at (and resets to)."""
        return ViewState(self.initial_zoom, self.initial_offset_x, self.initial_offset_y)


def load_settings(path):
    """
    Load settings from a JSON file.

    A missing file is not an error and yields an empty dict. A file that
    exists but does not hold a JSON object raises ConfigError.
    """
    try:
        with open(path, 'r') as f:
            settings = json.load(f)
    except FileNotFoundError:
        logger.info("No settings file at %s, using defaults", path)
        return {}
    except json.JSONDecodeError as e:
        raise ConfigError(f"could not parse {path}: {e}") from e

    if not isinstance(settings, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return settings
