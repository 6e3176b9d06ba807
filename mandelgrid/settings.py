"""
Construction-time configuration.

Defaults live in settings.json next to this module. A user settings file
is merged over the defaults, and command line flags are merged over that
with apply_overrides(). Every value is validated before a grid is built.
"""

import json
import logging
import os

from .colormaps import COLOR_SCHEMES, parse_color
from .errors import SettingsError
from .scheduler import EXECUTORS, LAYOUTS


logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

DEFAULT_SETTINGS = {
    'max_iterations': 1000,
    'resolution_x': 1000,
    'resolution_y': 800,
    'world_min': [-2.5, -1.5],
    'world_max': [1.5, 1.5],
    'color_scheme': 'cheap',
    'background_color': 'cyan',
    'foreground_color': 'black',
    'sentinel_color': 'black',
    'sensitivity': 10,
    'executor': 'threads',
    'workers': None,
    'partitions': 8,
    'layout': 'bands',
}


def _read_json(path):
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not load settings from %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings in %s: expected a JSON object", path)
        return {}
    return data


def _positive_int(settings, key, allow_none=False):
    value = settings[key]
    if value is None and allow_none:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise SettingsError(f"{key} must be a positive integer, got {value!r}")
    return value


def _corner(settings, key):
    value = settings[key]
    try:
        real, imag = value
        return [float(real), float(imag)]
    except (TypeError, ValueError):
        raise SettingsError(f"{key} must be a [real, imag] pair, got {value!r}") from None


def _choice(settings, key, choices):
    value = settings[key]
    if value not in choices:
        raise SettingsError(f"{key} must be one of {', '.join(choices)}, got {value!r}")
    return value


def validate_settings(settings):
    """
    Check and normalize a complete settings dict.

    Colors are normalized to (r, g, b) tuples and world corners to
    [real, imag] float pairs.

    Raises:
        SettingsError on the first invalid value
    """
    validated = dict(settings)
    for key in ('max_iterations', 'resolution_x', 'resolution_y', 'sensitivity', 'partitions'):
        validated[key] = _positive_int(settings, key)
    validated['workers'] = _positive_int(settings, 'workers', allow_none=True)
    validated['world_min'] = _corner(settings, 'world_min')
    validated['world_max'] = _corner(settings, 'world_max')
    validated['color_scheme'] = _choice(settings, 'color_scheme', list(COLOR_SCHEMES))
    validated['executor'] = _choice(settings, 'executor', list(EXECUTORS))
    validated['layout'] = _choice(settings, 'layout', LAYOUTS)
    for key in ('background_color', 'foreground_color', 'sentinel_color'):
        try:
            validated[key] = parse_color(settings[key])
        except ValueError as e:
            raise SettingsError(f"{key}: {e}") from None
    return validated


def load_settings(path=None):
    """
    Load settings, merging the packaged defaults and an optional user file.

    A missing or unparsable file is logged and skipped; unknown keys are
    logged and ignored.

    Args:
        path: Optional path to a JSON settings file

    Returns:
        Validated settings dict
    """
    settings = dict(DEFAULT_SETTINGS)
    sources = [DEFAULT_SETTINGS_PATH]
    if path is not None:
        sources.append(path)

    for source in sources:
        for key, value in _read_json(source).items():
            if key not in DEFAULT_SETTINGS:
                logger.warning("Ignoring unknown setting %r in %s", key, source)
                continue
            settings[key] = value
    return validate_settings(settings)


def apply_overrides(settings, **overrides):
    """Return a validated copy of `settings` with the non-None overrides applied."""
    merged = dict(settings)
    for key, value in overrides.items():
        if key not in DEFAULT_SETTINGS:
            raise SettingsError(f"Unknown setting {key!r}")
        if value is not None:
            merged[key] = value
    return validate_settings(merged)
