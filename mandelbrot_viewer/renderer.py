"""
Frame assembly: split the viewport into row blocks, render them on the
worker pool and stitch the results into one RGBA pixel buffer.

Rows are split into one contiguous block per worker. Results are placed by
the start row of their block, never by arrival order, so the output is the
same whichever worker finishes first.
"""

import logging
import time
from dataclasses import dataclass

import numpy as np

from .view import ViewState
from .workers import RenderTask, WorkerError

logger = logging.getLogger(__name__)


def partition_rows(height, parts):
    """
    Split [0, height) into `parts` contiguous, ordered, disjoint ranges.

    Every range gets height // parts rows and the first height % parts
    ranges get one extra row. For height=10, parts=4 this gives
    [0,3), [3,6), [6,8), [8,10). When parts > height the trailing ranges
    are empty.
    """
    if parts < 1:
        raise ValueError(f"parts must be >= 1, got {parts}")
    if height < 0:
        raise ValueError(f"height must be >= 0, got {height}")

    base, extra = divmod(height, parts)
    ranges = []
    start = 0
    for i in range(parts):
        stop = start + base + (1 if i < extra else 0)
        ranges.append(range(start, stop))
        start = stop
    return ranges


@dataclass(frozen=True)
class Frame:
    """
    A fully rendered viewport.

    Attributes:
        pixels: Read-only uint8 array (height, width, 4), RGBA, row-major
        view: The ViewState snapshot every pixel was computed from
    """

    pixels: np.ndarray
    view: ViewState

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def height(self):
        return self.pixels.shape[0]

    def tobytes(self):
        """Packed RGBA bytes, ready for pygame.image.frombuffer."""
        return self.pixels.tobytes()


def render_frame(view, width, height, pool, palette):
    """
    Render one frame for `view` on the worker pool.

    Args:
        view: ViewState snapshot shared by every task of this cycle
        width, height: Viewport size in pixels
        pool: WorkerPool that computes the row blocks
        palette: (max_iter + 1, 4) uint8 lookup table from build_palette

    Returns:
        A new Frame. The buffer is only exposed once every row is written.

    Raises:
        WorkerError if any worker fails or returns a malformed block
    """
    start_time = time.perf_counter()

    tasks = [
        RenderTask(rows=rows, view=view, width=width, height=height)
        for rows in partition_rows(height, pool.size)
    ]
    results = pool.submit_and_collect(tasks)

    iterations = np.empty((height, width), dtype=np.int32)
    for result in sorted(results, key=lambda r: r.rows.start):
        block = np.asarray(result.iterations)
        if block.shape != (len(result.rows), width):
            raise WorkerError(
                f"rows [{result.rows.start}, {result.rows.stop}) came back with "
                f"shape {block.shape}, expected {(len(result.rows), width)}"
            )
        if block.size and (block.min() < 0 or block.max() >= len(palette)):
            raise WorkerError(
                f"rows [{result.rows.start}, {result.rows.stop}) contain iteration "
                f"counts outside [0, {len(palette) - 1}]"
            )
        iterations[result.rows.start:result.rows.stop] = block

    pixels = palette[iterations]
    pixels.setflags(write=False)

    logger.debug(
        "Rendered %dx%d frame on %d workers in %.1f ms (zoom=%g)",
        width, height, pool.size, (time.perf_counter() - start_time) * 1000, view.zoom
    )
    return Frame(pixels=pixels, view=view)
