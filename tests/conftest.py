import pytest

from mandelgrid.grid import FractalGrid
from mandelgrid.scheduler import Scheduler


@pytest.fixture
def small_grid():
    grid = FractalGrid(24, 18, max_iterations=40, world_min=complex(-2.0, -1.5),
                       world_max=complex(2.0, 1.5), scheduler=Scheduler(partitions=4))
    yield grid
    grid.close()
