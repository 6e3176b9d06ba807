import logging

import pygame
import pytest

from mandelgrid.app import MandelbrotApp, command_for_key


@pytest.mark.parametrize("key, command", [
    (pygame.K_LEFT, ("pan", -10, 0)),
    (pygame.K_RIGHT, ("pan", 10, 0)),
    (pygame.K_UP, ("pan", 0, -10)),
    (pygame.K_DOWN, ("pan", 0, 10)),
    (pygame.K_COMMA, ("zoom", 5)),
    (pygame.K_PERIOD, ("zoom", -5)),
    (pygame.K_r, ("reset",)),
    (pygame.K_ESCAPE, ("quit",)),
    (pygame.K_SPACE, None),
])
def test_key_bindings(key, command):
    assert command_for_key(key, 10) == command


def test_pan_command_updates_grid(small_grid):
    app = MandelbrotApp(small_grid, sensitivity=10)
    app.apply(("pan", 10, 0))
    assert small_grid.viewport.pan_offset_x == -10
    assert app.dirty


def test_rejected_zoom_is_logged_not_raised(small_grid, caplog):
    app = MandelbrotApp(small_grid)
    before = small_grid.viewport.state()
    with caplog.at_level(logging.WARNING, logger="mandelgrid.app"):
        app.apply(("zoom", 10 ** 6))
    assert small_grid.viewport.state() == before
    assert not app.dirty
    assert "Zoom rejected" in caplog.text


def test_quit_command_stops_loop(small_grid):
    app = MandelbrotApp(small_grid)
    app.running = True
    app.apply(("quit",))
    assert not app.running
