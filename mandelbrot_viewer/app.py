"""
Main application module for the Mandelbrot viewer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- Polling keyboard state once per tick
- Handing the latest frame to the screen
- The text overlay

All fractal work is delegated to RenderScheduler and the worker pool.
"""

import logging

import pygame

from .colormaps import build_palette
from .compute import warmup_jit
from .config import ViewerConfig
from .scheduler import InputState, RenderScheduler
from .view import screen_center
from .workers import WorkerPool

logger = logging.getLogger(__name__)


class MandelbrotApp:
    """
    Pygame window around the render scheduler.

    Controls:
        Arrow keys: Pan
        = / +: Zoom in (centered)
        -: Zoom out (centered)
        R: Reset to the initial view
        ESC: Quit
    """

    CAPTION = "Mandelbrot Viewer"
    OVERLAY_COLOR = (255, 255, 0)
    FONT_SIZE = 20

    def __init__(self, config=None):
        self.config = config or ViewerConfig()

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.font = None

        self.pool = None
        self.scheduler = None

        # Surface for the frame currently on screen
        self._surface = None
        self._surface_bytes = None
        self._surface_frame = None

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._init_components()
        try:
            self._warmup_and_initial_render()

            self.running = True
            while self.running:
                self._handle_events()
                frame = self.scheduler.tick(self._poll_keys())
                self._draw(frame)
                self.clock.tick(self.config.fps)
        finally:
            self.pool.shutdown()
            pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode((self.config.width, self.config.height))
        pygame.display.set_caption(self.CAPTION)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, self.FONT_SIZE)

    def _init_components(self):
        """Build palette, worker pool and scheduler."""
        palette = build_palette(self.config.max_iter, self.config.colormap)
        self.pool = WorkerPool(self.config.workers, self.config.max_iter)
        self.scheduler = RenderScheduler(self.config, self.pool, palette)

    def _warmup_and_initial_render(self):
        """Warm up JIT and do the initial render."""
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit()
        self.scheduler.render_now()
        pygame.display.set_caption(
            f"{self.CAPTION} - arrows to pan, +/- to zoom, R to reset"
        )

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_r:
                    self.scheduler.reset_view()

    def _poll_keys(self):
        """Snapshot the held keys as an InputState."""
        keys = pygame.key.get_pressed()
        return InputState(
            left=keys[pygame.K_LEFT],
            right=keys[pygame.K_RIGHT],
            up=keys[pygame.K_UP],
            down=keys[pygame.K_DOWN],
            zoom_in=keys[pygame.K_EQUALS] or keys[pygame.K_PLUS] or keys[pygame.K_KP_PLUS],
            zoom_out=keys[pygame.K_MINUS] or keys[pygame.K_KP_MINUS],
        )

    def _draw(self, frame):
        """Draw the current frame and overlay."""
        if frame is None:
            self.screen.fill((0, 0, 0))
        else:
            if frame is not self._surface_frame:
                # frombuffer shares memory, so the bytes must outlive the surface
                self._surface_bytes = frame.tobytes()
                self._surface = pygame.image.frombuffer(
                    self._surface_bytes, (frame.width, frame.height), "RGBA"
                )
                self._surface_frame = frame
            self.screen.blit(self._surface, (0, 0))

        self._draw_overlay()
        pygame.display.flip()

    def _draw_overlay(self):
        view = self.scheduler.view
        center_re, center_im = screen_center(view, self.config.width, self.config.height)
        text = f"zoom {view.zoom:.4g}  center {center_re:+.6f} {center_im:+.6f}i"
        if self.scheduler.last_render_seconds is not None:
            text += f"  render {self.scheduler.last_render_seconds * 1000:.0f} ms"
        surface = self.font.render(text, True, self.OVERLAY_COLOR)
        self.screen.blit(surface, (8, 8))


def run(config=None):
    """
    Run the Mandelbrot viewer.

    Args:
        config: ViewerConfig (default: ViewerConfig())
    """
    app = MandelbrotApp(config)
    try:
        app.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
