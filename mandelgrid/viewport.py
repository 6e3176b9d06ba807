"""
Mapping between the pixel grid and the complex plane.

The Viewport holds the world rectangle currently visible and the pan
offset in pixels. Panning only moves the offset, so it is exactly
reversible; zooming moves both corners toward (or away from) each other
by a whole number of pixel steps.
"""

import logging
import math
from collections import namedtuple

from .errors import DegenerateResolution, InvalidViewport, InvalidZoom


logger = logging.getLogger(__name__)

DEFAULT_WORLD_MIN = complex(-2.5, -1.5)
DEFAULT_WORLD_MAX = complex(1.5, 1.5)


# Immutable snapshot handed to the compute kernels for one update
ViewState = namedtuple('ViewState', ['world_min', 'world_max', 'pan_offset_x', 'pan_offset_y'])


def _check_rectangle(world_min, world_max):
    return (math.isfinite(world_min.real) and math.isfinite(world_min.imag)
            and math.isfinite(world_max.real) and math.isfinite(world_max.imag)
            and world_min.real < world_max.real
            and world_min.imag < world_max.imag)


class Viewport:
    """
    World-space rectangle mapped onto a resolution_x by resolution_y grid.

    Usage:
        view = Viewport(800, 600)
        c = view.to_complex(400, 300)
        view.pan(10, 0)
        view.zoom(5)

    Attributes:
        resolution_x, resolution_y: Grid dimensions (> 1)
        world_min, world_max: Rectangle corners as complex numbers
        pan_offset_x, pan_offset_y: Accumulated pan in pixels
    """

    def __init__(self, resolution_x, resolution_y, world_min=DEFAULT_WORLD_MIN,
                 world_max=DEFAULT_WORLD_MAX):
        if resolution_x <= 1 or resolution_y <= 1:
            raise DegenerateResolution(resolution_x, resolution_y)
        world_min = complex(world_min)
        world_max = complex(world_max)
        if not _check_rectangle(world_min, world_max):
            raise InvalidViewport(
                f"world_min {world_min} must be strictly below world_max {world_max} "
                f"on both axes"
            )

        self.resolution_x = int(resolution_x)
        self.resolution_y = int(resolution_y)
        self.world_min = world_min
        self.world_max = world_max
        self.pan_offset_x = 0
        self.pan_offset_y = 0

        self._initial = (world_min, world_max)

    def __repr__(self):
        return (f"Viewport({self.resolution_x}x{self.resolution_y}, "
                f"min={self.world_min}, max={self.world_max}, "
                f"pan=({self.pan_offset_x}, {self.pan_offset_y}))")

    @property
    def step(self):
        """World distance between neighbouring pixels as (real, imag)."""
        return ((self.world_max.real - self.world_min.real) / (self.resolution_x - 1),
                (self.world_max.imag - self.world_min.imag) / (self.resolution_y - 1))

    @property
    def bounds(self):
        """Corners actually sampled after panning, as (min, max) complex numbers."""
        return (self.to_complex(0, 0),
                self.to_complex(self.resolution_x - 1, self.resolution_y - 1))

    def state(self):
        """Snapshot of the mutable state for one recomputation."""
        return ViewState(self.world_min, self.world_max, self.pan_offset_x, self.pan_offset_y)

    def to_complex(self, x, y):
        """
        Map a pixel coordinate to the complex plane.

        Matches the arithmetic of compute.compute_region exactly, so the
        value returned here is the c the kernels iterate for (x, y).
        """
        real = (self.world_min.real + (x + self.pan_offset_x)
                * (self.world_max.real - self.world_min.real) / (self.resolution_x - 1))
        imag = (self.world_min.imag + (y + self.pan_offset_y)
                * (self.world_max.imag - self.world_min.imag) / (self.resolution_y - 1))
        return complex(real, imag)

    def pan(self, delta_x, delta_y):
        """Shift the sampled window opposite to (delta_x, delta_y) pixels."""
        self.pan_offset_x -= int(delta_x)
        self.pan_offset_y -= int(delta_y)

    def zoom(self, pixels):
        """
        Zoom in (positive) or out (negative) by a number of pixel steps.

        Both corners move by `pixels` steps; the imaginary step is the real
        step scaled by resolution_y / resolution_x to keep the screen's
        aspect ratio.

        Raises:
            InvalidZoom if the new rectangle would be empty, inverted or
            not finite. The viewport is left unchanged in that case.
        """
        pixels = int(pixels)
        step_x = (self.world_max.real - self.world_min.real) / (self.resolution_x - 1)
        step_y = step_x * self.resolution_y / self.resolution_x

        new_max = complex(self.world_max.real - pixels * step_x,
                          self.world_max.imag - pixels * step_y)
        new_min = complex(self.world_min.real + pixels * step_x,
                          self.world_min.imag + pixels * step_y)

        if not _check_rectangle(new_min, new_max):
            raise InvalidZoom(pixels)

        self.world_min = new_min
        self.world_max = new_max
        logger.debug("Zoomed by %d pixels: min=%s max=%s", pixels, new_min, new_max)

    def reset(self):
        """Restore the construction-time rectangle and clear the pan offset."""
        self.world_min, self.world_max = self._initial
        self.pan_offset_x = 0
        self.pan_offset_y = 0
