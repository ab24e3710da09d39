"""
Palette construction for the Mandelbrot viewer.

A palette maps every iteration count in [0, max_iter] to an RGBA color.
It is built once at startup and frozen (the numpy array is made read-only),
so render workers can share it without any locking.

Each ramp below takes an intensity v in [0, 255] and returns an (r, g, b)
tuple. To add a new ramp:
1. Define a ramp_xxx(v) function
2. Add it to the COLORMAPS dictionary at the bottom of this file
"""

import numpy as np

IN_SET_COLOR = (0, 0, 0, 255)  # Opaque black for points that never escape
ALPHA = 255


def _clamp(x):
    return int(min(255, max(0, x)))


def ramp_grayscale(v):
    """Grayscale: black -> white. Shows the raw iteration structure."""
    return v, v, v


def ramp_hot(v):
    """Hot: black -> red -> orange -> yellow -> white."""
    t = v / 255
    return (
        _clamp(255 * min(1, t * 2.5)),
        _clamp(255 * max(0, (t - 0.4) * 2.5)),
        _clamp(255 * max(0, (t - 0.7) * 3.3)),
    )


def ramp_ocean(v):
    """Ocean: deep blue -> cyan -> white."""
    t = v / 255
    return (
        _clamp(255 * max(0, (t - 0.5) * 2)),
        _clamp(255 * t),
        _clamp(50 + 205 * t),
    )


def ramp_forest(v):
    """Forest: dark green -> lime -> yellow."""
    t = v / 255
    return (
        _clamp(255 * max(0, (t - 0.3) * 1.4)),
        _clamp(80 + 175 * t),
        _clamp(255 * max(0, (t - 0.7) * 3.3)),
    )


def ramp_purple(v):
    """Purple: deep purple -> magenta -> pink -> white."""
    t = v / 255
    return (
        _clamp(100 + 155 * t),
        _clamp(255 * max(0, (t - 0.3) * 1.4)),
        _clamp(80 + 175 * t),
    )


# Registry of available ramps.
# Keys are display names, values are ramp functions.
COLORMAPS = {
    'Grayscale': ramp_grayscale,
    'Hot': ramp_hot,
    'Ocean': ramp_ocean,
    'Forest': ramp_forest,
    'Purple': ramp_purple,
}


def intensity(i, max_iter):
    """round(255 * i / max_iter), rounding halves up."""
    return (510 * i + max_iter) // (2 * max_iter)


def build_palette(max_iter, ramp='Grayscale'):
    """
    Build the frozen iteration-count -> RGBA lookup table.

    Args:
        max_iter: Maximum iteration count (>= 1)
        ramp: Key from COLORMAPS

    Returns:
        Read-only uint8 array of shape (max_iter + 1, 4). Row i < max_iter is
        the ramp color at intensity round(255 * i / max_iter); row max_iter
        is opaque black.

    Raises:
        ValueError if max_iter < 1, KeyError if the ramp is unknown
    """
    if max_iter < 1:
        raise ValueError(f"max_iter must be >= 1, got {max_iter}")
    ramp_fn = COLORMAPS[ramp]

    palette = np.zeros((max_iter + 1, 4), dtype=np.uint8)
    for i in range(max_iter):
        palette[i, :3] = ramp_fn(intensity(i, max_iter))
        palette[i, 3] = ALPHA
    palette[max_iter] = IN_SET_COLOR

    palette.setflags(write=False)
    return palette


def list_colormap_names():
    """Get list of available ramp names."""
    return list(COLORMAPS.keys())
