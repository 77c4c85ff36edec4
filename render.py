import os
import re
import sys
import logging

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])

# Only matters when the TensorFlow backend gets imported.
if not _cli_verbose and os.environ.get("TF_CPP_MIN_LOG_LEVEL") is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


from argparse import ArgumentParser, ArgumentTypeError

from mandelbrot_raster import (
    ConfigError,
    PngFileSink,
    RenderConfig,
    SinkError,
    render_to_sink,
)
from mandelbrot_raster.config import DEFAULT_ESCAPE_BOUND, DEFAULT_RESOLUTION

_PAIR_SEPARATOR = re.compile(r"(?<=[0-9.])[xX×](?=[-+0-9.])")


def _split_pair(value: str, what: str) -> tuple[str, str]:
    parts = _PAIR_SEPARATOR.split(value.strip())
    if len(parts) != 2:
        raise ArgumentTypeError(f"{what} must look like AxB, got '{value}'")
    return parts[0], parts[1]


def parse_resolution(value: str) -> tuple[int, int]:
    width_str, height_str = _split_pair(value, "resolution")
    try:
        width, height = int(width_str), int(height_str)
    except ValueError:
        raise ArgumentTypeError(f"resolution must be two integers WIDTHxHEIGHT, got '{value}'") from None
    if width < 1 or height < 1:
        raise ArgumentTypeError(f"resolution must be positive, got '{value}'")
    return width, height


def parse_location(value: str) -> tuple[float, float]:
    x_str, y_str = _split_pair(value, "location")
    try:
        return float(x_str), float(y_str)
    except ValueError:
        raise ArgumentTypeError(f"location must be two numbers XxY, got '{value}'") from None


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ArgumentTypeError(f"expected an integer, got '{value}'") from None
    if number < 1:
        raise ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser():
    parser = ArgumentParser(description="Render the Mandelbrot set to a PNG image.")

    parser.add_argument('--resolution', type=parse_resolution,
                        dest='resolution', help='image size in pixels, e.g. 1920x1080',
                        metavar='WIDTHxHEIGHT', default=DEFAULT_RESOLUTION)

    parser.add_argument('--size', type=float,
                        dest='size', help='multiplier applied to the resolution',
                        metavar='SIZE', default=1.0)

    parser.add_argument('--location', type=parse_location,
                        dest='location', help='offsets subtracted from the sampled coordinates, e.g. 1.5x0.5',
                        metavar='XxY', default=(0.0, 0.0))

    parser.add_argument('--zoom', type=float,
                        dest='zoom', help='height of the viewport in the complex plane',
                        metavar='ZOOM', default=2.0)

    parser.add_argument('--iterations', type=positive_int,
                        dest='iterations', help='maximum number of iterations per pixel',
                        metavar='N', default=256)

    parser.add_argument('--mode', type=str,
                        dest='mode', help='pixel coloring: "smooth" or "banded"',
                        metavar='MODE', default='smooth')

    parser.add_argument('--escape-bound', type=float, default=None,
                        dest='escape_bound',
                        help=f'bound on |z|^2 past which a point has escaped (default {DEFAULT_ESCAPE_BOUND:g}); must be > 1')

    parser.add_argument('--legacy-bound', action='store_true',
                        dest='legacy_bound',
                        help='derive the escape bound from the color mode, reproducing older renders.')

    parser.add_argument('--backend', choices=['python', 'tensorflow'], default='python',
                        help='evaluator used for the escape-time iteration.')

    parser.add_argument('--gpu', action='store_true',
                        help='with the tensorflow backend, run on the first GPU when one is present.')

    parser.add_argument('--output', type=str,
                        dest='output', help='destination PNG file',
                        metavar='PATH', default='output.png')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging and progress output.')

    return parser


def resolve_config(opt, parser: ArgumentParser) -> RenderConfig:
    try:
        return RenderConfig.build(
            resolution=opt.resolution,
            location=opt.location,
            zoom=opt.zoom,
            iterations=opt.iterations,
            mode=opt.mode,
            escape_bound=opt.escape_bound,
            legacy_bound=opt.legacy_bound,
            size=opt.size,
        )
    except ConfigError as exc:
        parser.error(str(exc))


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)
    if VERBOSE:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if opt.gpu and opt.backend != 'tensorflow':
        parser.error("--gpu requires --backend tensorflow.")

    config = resolve_config(opt, parser)
    log("%dx%d, location (%g, %g), zoom %g, %d iterations, %s mode, escape bound %g" % (
        config.width, config.height, config.offset_x, config.offset_y,
        config.viewport_height, config.max_iterations, config.mode.value, config.escape_bound,
    ))

    rows = None
    if opt.backend == 'tensorflow':
        from mandelbrot_raster.accelerated import available_device, render_rows_accelerated

        device = available_device(prefer_gpu=opt.gpu)
        log("Using TensorFlow on %s" % device)
        rows = render_rows_accelerated(config, device=device)

    def progress(y, height):
        log("row {0} out of {1}".format(y + 1, height), end='\r' if y + 1 < height else '\n')

    sink = PngFileSink(opt.output)
    try:
        render_to_sink(config, sink, rows=rows, progress=progress)
    except SinkError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    log("Wrote %s" % sink.path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
