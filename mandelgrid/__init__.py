"""
Mandelbrot Set Grid Package

Computes and colors the Mandelbrot set over a rectangle of the complex
plane at a fixed pixel resolution, with Numba JIT-compiled kernels and
parallel region scheduling. Panning and zooming recompute the whole grid.

Quick Start:
    from mandelgrid import FractalGrid
    with FractalGrid(800, 600, max_iterations=500) as grid:
        grid.update()
        image = grid.rgb

Or from command line:
    python -m mandelgrid

Package Structure:
    - viewport.py: Pixel to complex-plane mapping, pan and zoom
    - compute.py: JIT-compiled escape-time and region kernels
    - colormaps.py: Cheap (linear) and expensive (smoothed HSV) color schemes
    - scheduler.py: Grid partitioning and execution strategies
    - grid.py: FractalGrid, the pixel buffer and its recomputation
    - settings.py: Configuration loading and validation
    - app.py: pygame window and key bindings

Controls:
    - Arrow keys: Pan
    - Comma / Period: Zoom in / out
    - R: Reset to default view
    - ESC: Quit
"""

from .colormaps import (
    COLOR_SCHEMES,
    ColorScheme,
    get_color_cheap,
    get_color_expensive,
    get_color_scheme,
    list_color_scheme_names,
)
from .compute import evaluate
from .errors import (
    DegenerateResolution,
    FractalError,
    InvalidViewport,
    InvalidZoom,
    SettingsError,
)
from .grid import FractalGrid, GridState, Pixel
from .scheduler import (
    ParallelForExecutor,
    Region,
    Scheduler,
    SequentialExecutor,
    ThreadExecutor,
    make_executor,
    partition,
)
from .settings import load_settings
from .viewport import Viewport

__version__ = "1.0.0"
__all__ = [
    "COLOR_SCHEMES",
    "ColorScheme",
    "DegenerateResolution",
    "FractalError",
    "FractalGrid",
    "GridState",
    "InvalidViewport",
    "InvalidZoom",
    "ParallelForExecutor",
    "Pixel",
    "Region",
    "Scheduler",
    "SequentialExecutor",
    "SettingsError",
    "ThreadExecutor",
    "Viewport",
    "evaluate",
    "get_color_cheap",
    "get_color_expensive",
    "get_color_scheme",
    "list_color_scheme_names",
    "load_settings",
    "make_executor",
    "partition",
]
