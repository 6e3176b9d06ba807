"""
Color scheme definitions for Mandelbrot visualization.

Two schemes map an escape-time result to an RGB color:
- cheap: linear interpolation between a background and a foreground
  color by iteration / max_iter
- expensive: smooth (continuous) iteration count pushed through an
  HSV -> RGB conversion

The scalar color functions are JIT-compiled so the region kernels in
compute.py can call them per pixel. A scheme is selected once per grid
and described by an immutable ColorScheme tuple.

To add a new scheme:
1. Define a create_scheme_xxx() function that returns a ColorScheme
2. Add it to the COLOR_SCHEMES dictionary at the bottom of this file
"""

import math
from collections import namedtuple

from numba import jit


SCHEME_CHEAP = 0
SCHEME_EXPENSIVE = 1

# Hue is 0.95 + 20 * smooth degrees, at fixed saturation and value
HUE_OFFSET = 0.95
HUE_SCALE = 20.0
SATURATION = 0.8
VALUE = 1.0

NAMED_COLORS = {
    'black': (0, 0, 0),
    'white': (255, 255, 255),
    'red': (255, 0, 0),
    'green': (0, 255, 0),
    'blue': (0, 0, 255),
    'yellow': (255, 255, 0),
    'magenta': (255, 0, 255),
    'cyan': (0, 255, 255),
    'orange': (255, 154, 0),
}

DEFAULT_BACKGROUND = NAMED_COLORS['cyan']
DEFAULT_FOREGROUND = NAMED_COLORS['black']
DEFAULT_SENTINEL = NAMED_COLORS['black']


ColorScheme = namedtuple('ColorScheme', ['name', 'kind', 'background', 'foreground', 'sentinel'])
ColorScheme.__doc__ = """
Immutable color configuration of a grid.

kind is SCHEME_CHEAP or SCHEME_EXPENSIVE. background/foreground drive the
cheap scheme; sentinel replaces pixels the expensive scheme cannot color.
"""


@jit(nopython=True, nogil=True, cache=True)
def _clamp_channel(value):
    if value < 0:
        return 0
    if value > 255:
        return 255
    return value


@jit(nopython=True, nogil=True, cache=True)
def linear_color(iteration, max_iter, background, foreground):
    """
    Interpolate linearly from background (iteration 0) to foreground
    (iteration == max_iter). Channels are rounded half up.
    """
    p = iteration / max_iter
    r = int(math.floor(p * (foreground[0] - background[0]) + background[0] + 0.5))
    g = int(math.floor(p * (foreground[1] - background[1]) + background[1] + 0.5))
    b = int(math.floor(p * (foreground[2] - background[2]) + background[2] + 0.5))
    return _clamp_channel(r), _clamp_channel(g), _clamp_channel(b)


@jit(nopython=True, nogil=True, cache=True)
def hsv_to_rgb(hue, saturation, value, sentinel):
    """
    Convert an HSV color (hue in degrees) to an 8-bit RGB tuple.

    The hue is brought into [0, 360) by repeated +/-360 steps. Sectors are
    60 degrees wide and inclusive-low/exclusive-high; anything left over
    after wrapping lands in the last sector.
    """
    if not math.isfinite(hue):
        return sentinel

    h = hue
    while h < 0.0:
        h += 360.0
    while h >= 360.0:
        h -= 360.0

    c = value * saturation
    x = c * (1.0 - abs((h / 60.0) % 2.0 - 1.0))
    m = value - c

    if h < 60.0:
        r_, g_, b_ = c, x, 0.0
    elif h < 120.0:
        r_, g_, b_ = x, c, 0.0
    elif h < 180.0:
        r_, g_, b_ = 0.0, c, x
    elif h < 240.0:
        r_, g_, b_ = 0.0, x, c
    elif h < 300.0:
        r_, g_, b_ = x, 0.0, c
    else:
        r_, g_, b_ = c, 0.0, x

    r = int((r_ + m) * 255)
    g = int((g_ + m) * 255)
    b = int((b_ + m) * 255)
    return _clamp_channel(r), _clamp_channel(g), _clamp_channel(b)


@jit(nopython=True, nogil=True, cache=True)
def smooth_color(iteration, zr, zi, max_iter, sentinel):
    """
    Color from the continuous escape value n + 1 - log(log|z|) / log(2).

    Points that never escaped, points whose |z| is at or below 1 (the
    double log is undefined there) and non-finite results get the
    sentinel color.
    """
    if iteration >= max_iter:
        return sentinel

    magnitude = math.sqrt(zr * zr + zi * zi)
    if not magnitude > 1.0 or math.isinf(magnitude):
        return sentinel

    smooth = iteration + 1 - math.log(math.log(magnitude)) / math.log(2.0)
    hue = HUE_OFFSET + HUE_SCALE * smooth
    if hue == 0.0 or not math.isfinite(hue):
        return sentinel
    return hsv_to_rgb(hue, SATURATION, VALUE, sentinel)


def get_color_cheap(iteration, max_iterations, background=DEFAULT_BACKGROUND,
                    foreground=DEFAULT_FOREGROUND):
    """Cheap (linear) color for an iteration count, as an (r, g, b) tuple."""
    return tuple(int(v) for v in linear_color(
        int(iteration), int(max_iterations),
        parse_color(background), parse_color(foreground)))


def get_color_expensive(iteration, final_z, max_iterations, sentinel=DEFAULT_SENTINEL):
    """Expensive (smoothed HSV) color for an escape result, as an (r, g, b) tuple."""
    final_z = complex(final_z)
    return tuple(int(v) for v in smooth_color(
        int(iteration), final_z.real, final_z.imag, int(max_iterations),
        parse_color(sentinel)))


def parse_color(value):
    """
    Normalize a color to an (r, g, b) tuple of ints.

    Accepts a name from NAMED_COLORS, a '#rrggbb' string or any
    sequence of three integers in [0, 255].

    Raises:
        ValueError if the value is not a recognizable color
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text in NAMED_COLORS:
            return NAMED_COLORS[text]
        if text.startswith('#') and len(text) == 7:
            try:
                return tuple(int(text[i:i + 2], 16) for i in (1, 3, 5))
            except ValueError:
                pass
        raise ValueError(f"Unknown color: {value!r}")

    try:
        channels = tuple(int(v) for v in value)
    except (TypeError, ValueError):
        raise ValueError(f"Unknown color: {value!r}") from None
    if len(channels) != 3 or any(not 0 <= v <= 255 for v in channels):
        raise ValueError(f"Color must be three channels in [0, 255], got {value!r}")
    return channels


def create_scheme_cheap(background=DEFAULT_BACKGROUND, foreground=DEFAULT_FOREGROUND,
                        sentinel=DEFAULT_SENTINEL):
    """
    Cheap scheme: O(1) linear blend, background -> foreground.

    The default cyan -> black blend paints the set itself black.
    """
    return ColorScheme('cheap', SCHEME_CHEAP, parse_color(background),
                       parse_color(foreground), parse_color(sentinel))


def create_scheme_expensive(background=DEFAULT_BACKGROUND, foreground=DEFAULT_FOREGROUND,
                            sentinel=DEFAULT_SENTINEL):
    """
    Expensive scheme: smoothed hue bands, sentinel color inside the set.

    background/foreground are carried for completeness but unused.
    """
    return ColorScheme('expensive', SCHEME_EXPENSIVE, parse_color(background),
                       parse_color(foreground), parse_color(sentinel))


# Registry of all available color schemes.
# Keys are names used in settings and on the command line.
COLOR_SCHEMES = {
    'cheap': create_scheme_cheap,
    'expensive': create_scheme_expensive,
}


def get_color_scheme(name, **colors):
    """
    Get a color scheme by name.

    Args:
        name: Key from COLOR_SCHEMES
        **colors: background/foreground/sentinel overrides

    Returns:
        ColorScheme

    Raises:
        KeyError if name not found
    """
    return COLOR_SCHEMES[name](**colors)


def get_default_color_scheme():
    """Get the default color scheme (cheap, cyan -> black)."""
    return create_scheme_cheap()


def list_color_scheme_names():
    """Get list of available color scheme names."""
    return list(COLOR_SCHEMES.keys())
