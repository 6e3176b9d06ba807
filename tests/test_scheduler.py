import numpy as np
import pytest

from mandelgrid.colormaps import create_scheme_cheap, create_scheme_expensive
from mandelgrid.scheduler import (
    ParallelForExecutor,
    Region,
    RegionJob,
    Scheduler,
    SequentialExecutor,
    ThreadExecutor,
    make_executor,
    partition,
    partition_tiles,
)
from mandelgrid.viewport import Viewport


def coverage(regions, resolution_x, resolution_y):
    counts = np.zeros((resolution_y, resolution_x), dtype=int)
    for region in regions:
        counts[region.y:region.y + region.height, region.x:region.x + region.width] += 1
    return counts


@pytest.mark.parametrize("layout", ["bands", "tiles"])
@pytest.mark.parametrize("size", [(2, 2), (7, 3), (64, 48), (13, 101)])
@pytest.mark.parametrize("count", [1, 2, 4, 6, 9, 16, 500])
def test_partition_covers_every_pixel_once(layout, size, count):
    regions = partition(size[0], size[1], count, layout)
    assert (coverage(regions, *size) == 1).all()
    assert all(region.width > 0 and region.height > 0 for region in regions)
    assert len(regions) <= count


def test_four_tiles_are_quadrants():
    assert partition(10, 8, 4, "tiles") == [
        Region(0, 0, 5, 4), Region(5, 0, 5, 4),
        Region(0, 4, 5, 4), Region(5, 4, 5, 4),
    ]


def test_bands_span_full_width():
    regions = partition(10, 9, 3, "bands")
    assert regions == [Region(0, 0, 10, 3), Region(0, 3, 10, 3), Region(0, 6, 10, 3)]


def test_tiles_with_explicit_shape():
    assert len(partition_tiles(30, 20, 3, 2)) == 6


@pytest.mark.parametrize("count, layout", [(0, "bands"), (4, "spiral")])
def test_partition_rejects_bad_arguments(count, layout):
    with pytest.raises(ValueError):
        partition(10, 10, count, layout)


def make_job(scheme, resolution=(37, 23), max_iterations=60):
    view = Viewport(*resolution, complex(-2.2, -1.2), complex(0.8, 1.2))
    view.pan(4, -3)
    view.zoom(2)
    iterations = np.zeros((resolution[1], resolution[0]), dtype=np.int32)
    rgb = np.zeros((resolution[1], resolution[0], 3), dtype=np.uint8)
    return RegionJob(view.state(), resolution[0], resolution[1], max_iterations,
                     scheme, iterations, rgb)


@pytest.mark.parametrize("scheme", [create_scheme_cheap(), create_scheme_expensive()])
def test_all_strategies_produce_identical_buffers(scheme):
    reference = make_job(scheme)
    Scheduler(partitions=1, executor=SequentialExecutor()).run(reference)

    strategies = [
        Scheduler(partitions=5, layout="bands", executor=SequentialExecutor()),
        Scheduler(partitions=4, layout="tiles", executor=ThreadExecutor(4)),
        Scheduler(partitions=16, layout="bands", executor=ThreadExecutor(3)),
        Scheduler(partitions=6, layout="tiles", executor=ParallelForExecutor()),
    ]
    for scheduler in strategies:
        job = make_job(scheme)
        scheduler.run(job)
        scheduler.close()
        assert np.array_equal(job.iterations, reference.iterations), scheduler
        assert np.array_equal(job.rgb, reference.rgb), scheduler


def test_default_scheduler_runs_sequentially():
    assert isinstance(Scheduler().executor, SequentialExecutor)


def test_thread_executor_propagates_worker_errors():
    def failing_job(region):
        if region.y > 0:
            raise RuntimeError("boom")

    executor = ThreadExecutor(2)
    try:
        with pytest.raises(RuntimeError, match="boom"):
            executor.run(failing_job, partition(4, 4, 2))
    finally:
        executor.close()


def test_thread_executor_pool_is_released_on_close():
    executor = ThreadExecutor(2)
    executor.run(lambda region: None, partition(4, 4, 2))
    assert executor._pool is not None
    executor.close()
    assert executor._pool is None


def test_make_executor():
    assert isinstance(make_executor("sequential"), SequentialExecutor)
    threads = make_executor("threads", 3)
    assert isinstance(threads, ThreadExecutor) and threads.workers == 3
    assert isinstance(make_executor("parallel-for"), ParallelForExecutor)
    with pytest.raises(ValueError):
        make_executor("gpu")


@pytest.mark.parametrize("kwargs", [{"partitions": 0}, {"layout": "rings"}])
def test_scheduler_rejects_bad_configuration(kwargs):
    with pytest.raises(ValueError):
        Scheduler(**kwargs)
