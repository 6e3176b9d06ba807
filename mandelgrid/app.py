"""
Main application module for the Mandelbrot visualizer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- Keyboard input (pan, zoom, reset)
- Presenting the grid's pixel buffer

All computation happens in FractalGrid; the app only turns key presses
into grid commands and blits the finished buffer after each command.
"""

import logging

import pygame

from .compute import warmup_jit
from .errors import InvalidZoom
from .grid import FractalGrid
from .settings import load_settings


logger = logging.getLogger(__name__)

TITLE = "Fractal Generator"


def command_for_key(key, sensitivity):
    """
    Translate a pygame key code into a grid command.

    Arrow keys pan by `sensitivity` pixels; comma and period zoom in and
    out by half of it.

    Returns:
        ('pan', dx, dy), ('zoom', pixels), ('reset',), ('quit',) or None
    """
    if key == pygame.K_LEFT:
        return ('pan', -sensitivity, 0)
    if key == pygame.K_RIGHT:
        return ('pan', sensitivity, 0)
    if key == pygame.K_UP:
        return ('pan', 0, -sensitivity)
    if key == pygame.K_DOWN:
        return ('pan', 0, sensitivity)
    if key == pygame.K_COMMA:
        return ('zoom', sensitivity // 2)
    if key == pygame.K_PERIOD:
        return ('zoom', -(sensitivity // 2))
    if key == pygame.K_r:
        return ('reset',)
    if key == pygame.K_ESCAPE:
        return ('quit',)
    return None


class MandelbrotApp:
    """
    pygame window presenting a FractalGrid.

    Handles the event loop and redraws only after the grid has been
    recomputed by a command.
    """

    FPS = 60

    def __init__(self, grid, sensitivity=10):
        """
        Initialize the application.

        Args:
            grid: The FractalGrid to drive and display
            sensitivity: Pixels per pan key press (zoom uses half)
        """
        self.grid = grid
        self.sensitivity = sensitivity

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.surface = None

        self.dirty = False
        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._warmup_and_initial_render()

        self.running = True
        while self.running:
            self._handle_events()
            if self.dirty:
                self._draw()
            self.clock.tick(self.FPS)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.grid.resolution_x, self.grid.resolution_y),
            pygame.DOUBLEBUF
        )
        pygame.display.set_caption("Compiling (first run only)...")
        self.clock = pygame.time.Clock()

    def _warmup_and_initial_render(self):
        """Warm up JIT and do initial render."""
        self.screen.fill((0, 0, 0))
        pygame.display.flip()
        warmup_jit()
        self.grid.update()
        self.dirty = True

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                command = command_for_key(event.key, self.sensitivity)
                if command is not None:
                    self.apply(command)

    def apply(self, command):
        """Run one command against the grid."""
        action = command[0]
        if action == 'quit':
            self.running = False
            return
        try:
            if action == 'pan':
                self.grid.pan_fractal(command[1], command[2])
            elif action == 'zoom':
                self.grid.zoom_fractal(command[1])
            elif action == 'reset':
                self.grid.reset_view()
        except InvalidZoom as e:
            logger.warning("Zoom rejected: %s", e)
            return
        self.dirty = True

    def _draw(self):
        """Blit the grid's buffer and update the caption."""
        self.surface = pygame.surfarray.make_surface(self.grid.rgb.swapaxes(0, 1))
        self.screen.blit(self.surface, (0, 0))
        pygame.display.flip()
        self.dirty = False

        seconds = self.grid.last_update_seconds
        if seconds is not None:
            pygame.display.set_caption(f"{TITLE} - {seconds * 1000:.0f} ms")


def run(settings=None):
    """
    Run the Mandelbrot visualizer.

    Args:
        settings: Validated settings dict (default: load_settings())
    """
    settings = settings or load_settings()
    with FractalGrid.from_settings(settings) as grid:
        app = MandelbrotApp(grid, settings['sensitivity'])
        try:
            app.run()
        except KeyboardInterrupt:
            pygame.quit()
