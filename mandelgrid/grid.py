"""
The fractal grid: pixel buffer, viewport and recomputation.

FractalGrid owns everything one rendered image depends on and recomputes
the whole image on every update. A single in-flight gate serializes
updates, pan/zoom commands and reads, and each update fills fresh arrays
that are swapped in only once every region has been written, so a reader
never sees a partially computed buffer.
"""

import enum
import logging
import threading
import time
from collections import namedtuple

import numpy as np

from .colormaps import get_color_scheme, get_default_color_scheme
from .errors import DegenerateResolution
from .scheduler import RegionJob, Scheduler, make_executor
from .viewport import DEFAULT_WORLD_MAX, DEFAULT_WORLD_MIN, Viewport


logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1000


Pixel = namedtuple('Pixel', ['x', 'y', 'color'])


class GridState(enum.Enum):
    IDLE = 'idle'
    RECOMPUTING = 'recomputing'


class FractalGrid:
    """
    Escape-time image of the Mandelbrot set at a fixed resolution.

    Usage:
        grid = FractalGrid(800, 600, max_iterations=500)
        grid.update()
        grid.pan_fractal(10, 0)
        grid.zoom_fractal(5)
        image = grid.rgb  # (600, 800, 3) uint8, read-only

    The buffer is empty (all zeros) until the first update().

    Attributes:
        resolution_x, resolution_y: Grid dimensions
        max_iterations: Iteration budget per pixel
        viewport: The Viewport mapping pixels to the complex plane
        color_scheme: The ColorScheme used for every pixel
        scheduler: The Scheduler distributing regions to workers
    """

    def __init__(self, resolution_x, resolution_y, max_iterations=DEFAULT_MAX_ITERATIONS,
                 world_min=DEFAULT_WORLD_MIN, world_max=DEFAULT_WORLD_MAX,
                 color_scheme=None, scheduler=None):
        if resolution_x <= 1 or resolution_y <= 1:
            raise DegenerateResolution(resolution_x, resolution_y)
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")

        self.resolution_x = int(resolution_x)
        self.resolution_y = int(resolution_y)
        self.max_iterations = int(max_iterations)
        self.viewport = Viewport(self.resolution_x, self.resolution_y, world_min, world_max)
        self.color_scheme = color_scheme or get_default_color_scheme()
        self.scheduler = scheduler or Scheduler()

        self._iterations, self._rgb = self._allocate()
        self._state = GridState.IDLE
        self._gate = threading.Lock()
        self.last_update_seconds = None

    @classmethod
    def from_settings(cls, settings):
        """
        Build a grid from a settings dict (see settings.load_settings).

        Settings are expected to be validated already.
        """
        scheme = get_color_scheme(
            settings['color_scheme'],
            background=settings['background_color'],
            foreground=settings['foreground_color'],
            sentinel=settings['sentinel_color'],
        )
        scheduler = Scheduler(
            partitions=settings['partitions'],
            layout=settings['layout'],
            executor=make_executor(settings['executor'], settings['workers']),
        )
        return cls(
            settings['resolution_x'], settings['resolution_y'],
            max_iterations=settings['max_iterations'],
            world_min=complex(*settings['world_min']),
            world_max=complex(*settings['world_max']),
            color_scheme=scheme,
            scheduler=scheduler,
        )

    def __repr__(self):
        return (f"FractalGrid({self.resolution_x}x{self.resolution_y}, "
                f"max_iterations={self.max_iterations}, scheme={self.color_scheme.name!r}, "
                f"state={self._state.value})")

    def __len__(self):
        return self.resolution_x * self.resolution_y

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """Release the scheduler's workers."""
        self.scheduler.close()

    @property
    def state(self):
        return self._state

    def _allocate(self):
        iterations = np.zeros((self.resolution_y, self.resolution_x), dtype=np.int32)
        rgb = np.zeros((self.resolution_y, self.resolution_x, 3), dtype=np.uint8)
        return iterations, rgb

    def _recompute(self):
        """Fill fresh arrays for the current viewport and swap them in. Gate must be held."""
        self._state = GridState.RECOMPUTING
        try:
            iterations, rgb = self._allocate()
            job = RegionJob(self.viewport.state(), self.resolution_x, self.resolution_y,
                            self.max_iterations, self.color_scheme, iterations, rgb)
            start = time.perf_counter()
            self.scheduler.run(job)
            self.last_update_seconds = time.perf_counter() - start

            iterations.flags.writeable = False
            rgb.flags.writeable = False
            self._iterations, self._rgb = iterations, rgb
        finally:
            self._state = GridState.IDLE
        logger.debug("Updated %dx%d grid in %.3fs (%r)", self.resolution_x,
                     self.resolution_y, self.last_update_seconds, self.viewport)

    def update(self):
        """Recompute every pixel for the current viewport."""
        with self._gate:
            self._recompute()

    def pan_fractal(self, pixel_dx, pixel_dy):
        """Pan by a pixel delta and recompute."""
        with self._gate:
            self.viewport.pan(pixel_dx, pixel_dy)
            self._recompute()

    def zoom_fractal(self, pixels):
        """
        Zoom in (positive) or out (negative) by `pixels` and recompute.

        Raises:
            InvalidZoom if the zoom would collapse the view; nothing is
            changed or recomputed in that case.
        """
        with self._gate:
            self.viewport.zoom(pixels)
            self._recompute()

    def reset_view(self):
        """Return to the initial rectangle with no pan, and recompute."""
        with self._gate:
            self.viewport.reset()
            self._recompute()

    @property
    def rgb(self):
        """Read-only (resolution_y, resolution_x, 3) uint8 color buffer."""
        with self._gate:
            return self._rgb

    @property
    def iterations(self):
        """Read-only (resolution_y, resolution_x) divergence iteration counts."""
        with self._gate:
            return self._iterations

    def pixel_at(self, x, y):
        """Pixel record at screen position (x, y)."""
        if not (0 <= x < self.resolution_x and 0 <= y < self.resolution_y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.resolution_x}x{self.resolution_y} grid")
        rgb = self.rgb
        return Pixel(x, y, tuple(int(v) for v in rgb[y, x]))

    def pixels(self):
        """
        All pixel records in buffer order (index x + resolution_x * y).

        Returns a list taken from one consistent buffer.
        """
        rgb = self.rgb
        flat = rgb.reshape(-1, 3).tolist()
        width = self.resolution_x
        return [Pixel(index % width, index // width, tuple(color))
                for index, color in enumerate(flat)]
