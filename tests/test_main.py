import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

pygame = pytest.importorskip("pygame")

from mandelbrot_viewer import __main__ as cli  # noqa: E402
from mandelbrot_viewer.app import MandelbrotApp  # noqa: E402
from mandelbrot_viewer.config import ViewerConfig  # noqa: E402
from mandelbrot_viewer.scheduler import InputState  # noqa: E402


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    import logging
    logger = logging.getLogger("mandelbrot_viewer")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_main_builds_config_from_flags_and_settings(tmp_path, monkeypatch):
    settings = tmp_path / "settings.json"
    settings.write_text('{"max_iter": 64, "width": 320}')
    started = []
    monkeypatch.setattr(cli, "run", started.append)

    code = cli.main(["--settings", str(settings), "--width", "200", "--workers", "3",
                     "--cooldown", "0.5", "--log-level", "WARNING"])

    assert code == 0
    config = started[0]
    assert config.width == 200
    assert config.height == 300
    assert config.max_iter == 64
    assert config.workers == 3
    assert config.render_cooldown == 0.5


def test_main_rejects_bad_config(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "run", lambda config: pytest.fail("should not start"))
    code = cli.main(["--settings", str(tmp_path / "missing.json"), "--zoom", "0",
                     "--log-level", "ERROR"])
    assert code == 2


def test_app_draws_frames_headless():
    app = MandelbrotApp(ViewerConfig(width=32, height=24, max_iter=20, workers=2))
    app._init_pygame()
    app._init_components()
    try:
        app.scheduler.render_now()
        frame = app.scheduler.frame
        app._draw(frame)
        surface = app._surface

        # An unchanged frame reuses the same surface
        app._draw(app.scheduler.tick())
        assert app._surface is surface

        app._draw(None)
        assert isinstance(app._poll_keys(), InputState)
    finally:
        app.pool.shutdown()
        pygame.quit()
