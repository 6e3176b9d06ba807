"""
Exceptions raised by the fractal grid.

Construction-time errors (DegenerateResolution, InvalidViewport,
SettingsError) are fatal and should be reported before any window is
shown. InvalidZoom is recoverable: the rejected zoom leaves the viewport
exactly as it was.
"""


class FractalError(Exception):
    """Base class for all mandelgrid errors."""


class DegenerateResolution(FractalError, ValueError):
    """Resolution of 1 pixel or less on an axis (pixel mapping divides by res - 1)."""

    def __init__(self, resolution_x, resolution_y):
        super().__init__(
            f"Resolution must be greater than 1 on both axes, got "
            f"{resolution_x}x{resolution_y}"
        )
        self.resolution_x = resolution_x
        self.resolution_y = resolution_y


class InvalidViewport(FractalError, ValueError):
    """World rectangle whose min corner is not strictly below its max corner."""


class InvalidZoom(FractalError, ValueError):
    """Zoom that would collapse or invert the world rectangle."""

    def __init__(self, pixels, message=None):
        super().__init__(message or f"Zoom by {pixels} pixels would collapse the view")
        self.pixels = pixels


class SettingsError(FractalError, ValueError):
    """Malformed configuration value."""
