"""
Escape-time computation functions using Numba JIT compilation.

This module contains the performance-critical kernels:
- The escape-time evaluator for a single complex constant
- A region kernel that maps pixels to the complex plane, iterates them,
  colors them and writes them into caller-owned buffers
- A parallel-for kernel that runs the region kernel over a list of
  disjoint regions with prange

None of the kernels use fastmath, so every execution strategy produces
bit-identical buffers. The region kernel is compiled with nogil so that
thread pools can run regions concurrently.
"""

import numpy as np
from numba import jit, prange

from .colormaps import SCHEME_CHEAP, SCHEME_EXPENSIVE, linear_color, smooth_color


ESCAPE_RADIUS_SQUARED = 4.0


@jit(nopython=True, nogil=True, cache=True)
def escape_time(cr, ci, max_iter):
    """
    Iterate z <- z² + c from z = 0 until |z|² > 4 or max_iter steps.

    Args:
        cr, ci: Real and imaginary parts of c
        max_iter: Iteration budget

    Returns:
        (iteration, zr, zi): The step at which the loop stopped and the
        last computed z. iteration == max_iter means the point did not
        escape within the budget.
    """
    zr = 0.0
    zi = 0.0
    iteration = 0
    while iteration < max_iter and zr * zr + zi * zi <= ESCAPE_RADIUS_SQUARED:
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        iteration += 1
    return iteration, zr, zi


def evaluate(c, max_iterations):
    """
    Evaluate the escape time of a single complex constant.

    Args:
        c: Complex constant (anything complex() accepts)
        max_iterations: Positive iteration budget

    Returns:
        (iteration_count, final_z) with final_z a Python complex
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be positive, got {max_iterations}")
    c = complex(c)
    iteration, zr, zi = escape_time(c.real, c.imag, int(max_iterations))
    return int(iteration), complex(zr, zi)


@jit(nopython=True, nogil=True, cache=True)
def compute_region(min_r, min_i, max_r, max_i, offset_x, offset_y, res_x, res_y,
                   max_iter, scheme, background, foreground, sentinel,
                   start_x, start_y, compute_w, compute_h, iterations, rgb):
    """
    Compute one rectangular region of the grid, writing into existing arrays.

    Only the slots of the region are touched, so disjoint regions can be
    computed concurrently on the same output arrays.

    Args:
        min_r, min_i, max_r, max_i: World rectangle corners
        offset_x, offset_y: Pan offset in pixels
        res_x, res_y: Full grid dimensions
        max_iter: Iteration budget
        scheme: SCHEME_CHEAP or SCHEME_EXPENSIVE
        background, foreground, sentinel: RGB tuples
        start_x, start_y: Top-left corner of the region
        compute_w, compute_h: Size of the region
        iterations: (res_y, res_x) int32 array, modified in place
        rgb: (res_y, res_x, 3) uint8 array, modified in place
    """
    for py in range(compute_h):
        actual_py = start_y + py
        ci = min_i + (actual_py + offset_y) * (max_i - min_i) / (res_y - 1)
        for px in range(compute_w):
            actual_px = start_x + px
            cr = min_r + (actual_px + offset_x) * (max_r - min_r) / (res_x - 1)

            iteration, zr, zi = escape_time(cr, ci, max_iter)

            if scheme == SCHEME_EXPENSIVE:
                r, g, b = smooth_color(iteration, zr, zi, max_iter, sentinel)
            else:
                r, g, b = linear_color(iteration, max_iter, background, foreground)

            iterations[actual_py, actual_px] = iteration
            rgb[actual_py, actual_px, 0] = r
            rgb[actual_py, actual_px, 1] = g
            rgb[actual_py, actual_px, 2] = b


@jit(nopython=True, parallel=True, cache=True)
def compute_regions(regions, min_r, min_i, max_r, max_i, offset_x, offset_y,
                    res_x, res_y, max_iter, scheme, background, foreground,
                    sentinel, iterations, rgb):
    """
    Run compute_region over every row of `regions` with a parallel-for.

    Args:
        regions: (N, 4) int64 array of (x, y, width, height) rows that
            partition the grid
        Remaining arguments as for compute_region.
    """
    for k in prange(regions.shape[0]):
        compute_region(min_r, min_i, max_r, max_i, offset_x, offset_y,
                       res_x, res_y, max_iter, scheme, background, foreground,
                       sentinel, regions[k, 0], regions[k, 1], regions[k, 2],
                       regions[k, 3], iterations, rgb)


def warmup_jit():
    """
    Warm up JIT compilation with small dummy arrays.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first real update.
    """
    iterations = np.zeros((4, 4), dtype=np.int32)
    rgb = np.zeros((4, 4, 3), dtype=np.uint8)
    black = (0, 0, 0)
    white = (255, 255, 255)
    for scheme in (SCHEME_CHEAP, SCHEME_EXPENSIVE):
        compute_region(-2.0, -2.0, 2.0, 2.0, 0, 0, 4, 4, 10, scheme,
                       black, white, black, 0, 0, 4, 4, iterations, rgb)
    regions = np.array([[0, 0, 4, 2], [0, 2, 4, 2]], dtype=np.int64)
    compute_regions(regions, -2.0, -2.0, 2.0, 2.0, 0, 0, 4, 4, 10, SCHEME_CHEAP,
                    black, white, black, iterations, rgb)
