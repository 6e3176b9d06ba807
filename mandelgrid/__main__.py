"""
Allow running the package directly: python -m mandelgrid
"""

import argparse
import logging
import sys

from .colormaps import list_color_scheme_names
from .errors import FractalError
from .scheduler import EXECUTORS, LAYOUTS
from .settings import apply_overrides, load_settings


logger = logging.getLogger("mandelgrid")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="mandelgrid",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Interactive Mandelbrot set explorer",
    )
    parser.add_argument(
        "--settings",
        help="JSON settings file merged over the packaged defaults",
    )
    parser.add_argument(
        "--max-iter",
        type=int,
        help="the max iterations to perform per pixel",
    )
    parser.add_argument(
        "--size",
        type=int,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        help="the dimensions of the grid, in pixels",
    )
    parser.add_argument(
        "--scheme",
        choices=list_color_scheme_names(),
        help="color scheme",
    )
    parser.add_argument(
        "--background",
        help="background color of the cheap scheme (name or #rrggbb)",
    )
    parser.add_argument(
        "--foreground",
        help="foreground color of the cheap scheme (name or #rrggbb)",
    )
    parser.add_argument(
        "--executor",
        choices=list(EXECUTORS),
        help="how regions are computed",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="worker count for the parallel executors",
    )
    parser.add_argument(
        "--partitions",
        type=int,
        help="number of regions the grid is split into",
    )
    parser.add_argument(
        "--layout",
        choices=LAYOUTS,
        help="region shape",
    )
    parser.add_argument(
        "--sensitivity",
        type=int,
        help="pixels per pan key press (zoom uses half)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging verbosity",
    )
    return parser.parse_args(argv)


def build_settings(args):
    """Load settings and apply the command line overrides."""
    resolution_x, resolution_y = args.size if args.size else (None, None)
    return apply_overrides(
        load_settings(args.settings),
        max_iterations=args.max_iter,
        resolution_x=resolution_x,
        resolution_y=resolution_y,
        color_scheme=args.scheme,
        background_color=args.background,
        foreground_color=args.foreground,
        executor=args.executor,
        workers=args.workers,
        partitions=args.partitions,
        layout=args.layout,
        sensitivity=args.sensitivity,
    )


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = build_settings(args)
    except FractalError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    from .app import run

    try:
        run(settings)
    except FractalError as e:
        logger.error("%s", e)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
