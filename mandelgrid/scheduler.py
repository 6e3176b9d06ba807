"""
Parallel work distribution for full-grid recomputation.

The grid is split into disjoint rectangular regions (row bands or tiles)
and one task per region is handed to an execution strategy:
- SequentialExecutor: runs the regions one after another (fallback)
- ThreadExecutor: a bounded thread pool; the region kernel releases the
  GIL, so regions really run side by side
- ParallelForExecutor: one Numba prange kernel over the region list

Every region writes only its own slots of the output arrays, so no
locking is needed while computing, and all strategies produce the same
buffer bit for bit.
"""

import logging
import os
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor

import numba
import numpy as np

from .compute import compute_region, compute_regions


logger = logging.getLogger(__name__)

DEFAULT_PARTITIONS = 8
LAYOUTS = ('bands', 'tiles')


Region = namedtuple('Region', ['x', 'y', 'width', 'height'])


def _split(length, parts):
    """Cut range(length) into `parts` contiguous, nearly equal spans."""
    parts = max(1, min(parts, length))
    edges = [k * length // parts for k in range(parts + 1)]
    return [(start, stop - start) for start, stop in zip(edges, edges[1:])]


def partition_bands(resolution_x, resolution_y, count):
    """Split the grid into `count` full-width row bands."""
    return [Region(0, y, resolution_x, height)
            for y, height in _split(resolution_y, count)]


def partition_tiles(resolution_x, resolution_y, columns, rows):
    """Split the grid into a columns x rows arrangement of tiles (2 x 2 gives quadrants)."""
    return [Region(x, y, width, height)
            for y, height in _split(resolution_y, rows)
            for x, width in _split(resolution_x, columns)]


def _factor_pair(count):
    """Most square (columns, rows) pair with columns * rows == count."""
    rows = int(count ** 0.5)
    while count % rows:
        rows -= 1
    return count // rows, rows


def partition(resolution_x, resolution_y, count=DEFAULT_PARTITIONS, layout='bands'):
    """
    Partition the grid into at most `count` disjoint regions.

    Every pixel belongs to exactly one region. When `count` exceeds the
    number of rows (or columns), fewer, non-empty regions are returned.

    Args:
        resolution_x, resolution_y: Grid dimensions
        count: Requested number of regions (>= 1)
        layout: 'bands' for row bands, 'tiles' for a 2-D tiling

    Returns:
        List of Region tuples in row-major order
    """
    if count < 1:
        raise ValueError(f"Partition count must be at least 1, got {count}")
    if layout == 'bands':
        return partition_bands(resolution_x, resolution_y, count)
    if layout == 'tiles':
        columns, rows = _factor_pair(count)
        return partition_tiles(resolution_x, resolution_y, columns, rows)
    raise ValueError(f"Unknown layout {layout!r}, expected one of {', '.join(LAYOUTS)}")


class RegionJob:
    """
    Everything a worker needs to compute regions of one update.

    The viewport snapshot and color scheme are read-only for the whole
    update; the output arrays are shared, each region writing only its
    own slots.
    """

    def __init__(self, view_state, resolution_x, resolution_y, max_iterations,
                 color_scheme, iterations, rgb):
        self.view_state = view_state
        self.resolution_x = resolution_x
        self.resolution_y = resolution_y
        self.max_iterations = max_iterations
        self.color_scheme = color_scheme
        self.iterations = iterations
        self.rgb = rgb

    def _kernel_args(self):
        state = self.view_state
        scheme = self.color_scheme
        return (state.world_min.real, state.world_min.imag,
                state.world_max.real, state.world_max.imag,
                state.pan_offset_x, state.pan_offset_y,
                self.resolution_x, self.resolution_y, self.max_iterations,
                scheme.kind, scheme.background, scheme.foreground, scheme.sentinel)

    def __call__(self, region):
        compute_region(*self._kernel_args(), region.x, region.y, region.width,
                       region.height, self.iterations, self.rgb)

    def run_parallel(self, regions):
        table = np.array(regions, dtype=np.int64).reshape(-1, 4)
        compute_regions(table, *self._kernel_args(), self.iterations, self.rgb)


class SequentialExecutor:
    """Runs regions one after another on the calling thread."""

    name = 'sequential'

    def run(self, job, regions):
        for region in regions:
            job(region)

    def close(self):
        pass


class ThreadExecutor:
    """
    Runs one task per region on a bounded thread pool.

    The pool is created on first use and reused across updates. Any
    exception raised by a task is re-raised by run().
    """

    name = 'threads'

    def __init__(self, workers=None):
        self.workers = workers or os.cpu_count() or 1
        self._pool = None

    def run(self, job, regions):
        if self._pool is None:
            self._pool = ThreadPoolExecutor(max_workers=self.workers,
                                            thread_name_prefix='mandelgrid')
        futures = [self._pool.submit(job, region) for region in regions]
        for future in futures:
            future.result()

    def close(self):
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None


class ParallelForExecutor:
    """Runs all regions inside one Numba prange kernel."""

    name = 'parallel-for'

    def __init__(self, workers=None):
        self.workers = workers

    def run(self, job, regions):
        if self.workers:
            numba.set_num_threads(min(self.workers, numba.config.NUMBA_NUM_THREADS))
        job.run_parallel(regions)

    def close(self):
        pass


# Registry of execution strategies by name
EXECUTORS = {
    SequentialExecutor.name: SequentialExecutor,
    ThreadExecutor.name: ThreadExecutor,
    ParallelForExecutor.name: ParallelForExecutor,
}


def make_executor(name, workers=None):
    """
    Create an execution strategy by name.

    Args:
        name: Key from EXECUTORS ('sequential', 'threads', 'parallel-for')
        workers: Worker count for the parallel strategies (None = CPU count)
    """
    if name not in EXECUTORS:
        raise ValueError(f"Unknown executor {name!r}, expected one of {', '.join(EXECUTORS)}")
    if name == SequentialExecutor.name:
        return SequentialExecutor()
    return EXECUTORS[name](workers)


class Scheduler:
    """
    Partitions the grid and dispatches one task per region.

    Usage:
        scheduler = Scheduler(partitions=8, executor=ThreadExecutor())
        scheduler.run(job)
        scheduler.close()

    Without an executor the regions run sequentially.
    """

    def __init__(self, partitions=DEFAULT_PARTITIONS, layout='bands', executor=None):
        if partitions < 1:
            raise ValueError(f"Partition count must be at least 1, got {partitions}")
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown layout {layout!r}, expected one of {', '.join(LAYOUTS)}")
        self.partitions = partitions
        self.layout = layout
        self.executor = executor or SequentialExecutor()
        self._regions = {}

    def __repr__(self):
        return (f"Scheduler(partitions={self.partitions}, layout={self.layout!r}, "
                f"executor={self.executor.name!r})")

    def regions(self, resolution_x, resolution_y):
        key = (resolution_x, resolution_y)
        if key not in self._regions:
            self._regions[key] = partition(resolution_x, resolution_y,
                                           self.partitions, self.layout)
        return self._regions[key]

    def run(self, job):
        """Compute every region of the job's grid."""
        regions = self.regions(job.resolution_x, job.resolution_y)
        logger.debug("Dispatching %d regions to %s executor", len(regions), self.executor.name)
        self.executor.run(job, regions)

    def close(self):
        self.executor.close()
