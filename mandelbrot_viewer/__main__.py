"""
Command line entry point: python -m mandelbrot_viewer
"""
import sys
from argparse import ArgumentParser

from .app import run
from .config import ConfigError, ViewerConfig, load_settings
from .logger_setup import setup_logging


def build_parser():
    parser = ArgumentParser(prog="mandelbrot_viewer",
                            description="Interactive Mandelbrot viewer with a persistent render worker pool")

    parser.add_argument('--settings', dest='settings', metavar='PATH', default='settings.json',
                        help='JSON file with config values (default: settings.json, optional)')
    parser.add_argument('--width', type=int, dest='width', help='viewport width in pixels')
    parser.add_argument('--height', type=int, dest='height', help='viewport height in pixels')
    parser.add_argument('--max-iter', type=int, dest='max_iter', help='maximum iteration count')
    parser.add_argument('--zoom', type=float, dest='initial_zoom',
                        help='initial zoom in pixels per complex-plane unit')
    parser.add_argument('--offset-x', type=float, dest='initial_offset_x',
                        help='real coordinate of the top-left pixel')
    parser.add_argument('--offset-y', type=float, dest='initial_offset_y',
                        help='imaginary coordinate of the top-left pixel')
    parser.add_argument('--workers', type=int, dest='workers',
                        help='number of render workers (default: CPU count)')
    parser.add_argument('--cooldown', type=float, dest='render_cooldown',
                        help='minimum seconds between renders')
    parser.add_argument('--pan-speed', type=float, dest='pan_speed',
                        help='screen pixels panned per tick')
    parser.add_argument('--zoom-factor', type=float, dest='zoom_factor',
                        help='zoom multiplier per tick (> 1)')
    parser.add_argument('--colormap', dest='colormap', help='palette ramp name')
    parser.add_argument('--fps', type=int, dest='fps', help='target ticks per second')

    parser.add_argument('--log-level', dest='log_level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--log-file', dest='log_file', default=None)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_level, args.log_file)

    overrides = vars(args).copy()
    for key in ('settings', 'log_level', 'log_file'):
        overrides.pop(key)

    try:
        config = ViewerConfig.from_settings(load_settings(args.settings), **overrides)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    logger.info("Starting viewer %dx%d, max_iter=%d, %d workers",
                config.width, config.height, config.max_iter, config.workers)
    run(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
