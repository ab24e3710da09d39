import pytest

from mandelbrot_viewer.colormaps import build_palette
from mandelbrot_viewer.config import ViewerConfig
from mandelbrot_viewer.workers import WorkerPool


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def small_config():
    return ViewerConfig(width=16, height=10, max_iter=30, workers=4)


@pytest.fixture
def palette(small_config):
    return build_palette(small_config.max_iter)


@pytest.fixture
def pool(small_config):
    pool = WorkerPool(small_config.workers, small_config.max_iter)
    yield pool
    pool.shutdown()


@pytest.fixture
def clock():
    return FakeClock()
