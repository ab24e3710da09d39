"""
Escape-time computation using Numba JIT compilation.

These are the performance-critical functions run by the render workers.
They are compiled with nogil=True so several worker threads can run them
at the same time on different row ranges.

The escape test uses the squared magnitude (no sqrt per step) and the
"<= 4.0" comparison with the counter incremented after each step, so a
point is counted as escaped on the first iteration whose |z|^2 is
strictly greater than 4.
"""

import numpy as np
from numba import jit

ESCAPE_RADIUS_SQUARED = 4.0


@jit(nopython=True, nogil=True, cache=True)
def escape_time(cr, ci, max_iter):
    """
    Count iterations of z <- z^2 + c, starting from z = 0, until |z|^2 > 4.

    Args:
        cr, ci: Real and imaginary parts of c
        max_iter: Iteration cap

    Returns:
        Iteration count in [0, max_iter]; max_iter means "never escaped".
    """
    zr = 0.0
    zi = 0.0
    iteration = 0
    while zr * zr + zi * zi <= ESCAPE_RADIUS_SQUARED and iteration < max_iter:
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        iteration += 1
    return iteration


@jit(nopython=True, nogil=True, cache=True)
def compute_rows(row_start, row_stop, width, zoom, offset_x, offset_y, max_iter):
    """
    Compute iteration counts for the pixel rows [row_start, row_stop).

    Args:
        row_start, row_stop: Half-open range of pixel rows
        width: Number of pixels per row
        zoom: Pixels per complex-plane unit
        offset_x, offset_y: Complex coordinate of pixel (0, 0)
        max_iter: Iteration cap

    Returns:
        int32 array of shape (row_stop - row_start, width), row-major.
    """
    n_rows = max(row_stop - row_start, 0)
    result = np.empty((n_rows, width), dtype=np.int32)

    for r in range(n_rows):
        ci = (row_start + r) / zoom + offset_y
        for px in range(width):
            cr = px / zoom + offset_x
            result[r, px] = escape_time(cr, ci, max_iter)

    return result


def compute_task(task, max_iter):
    """Run compute_rows for a RenderTask. This is the default worker kernel."""
    view = task.view
    return compute_rows(
        task.rows.start, task.rows.stop, task.width,
        float(view.zoom), float(view.offset_x), float(view.offset_y),
        max_iter
    )


def warmup_jit():
    """
    Warm up JIT compilation with a tiny dummy render.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first real frame.
    """
    escape_time(0.0, 0.0, 2)
    compute_rows(0, 2, 2, 1.0, 0.0, 0.0, 2)
