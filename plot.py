import logging
import os
import sys
import warnings

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

from argparse import ArgumentParser, ArgumentTypeError

from mandelplot import (
    KERNELS,
    ImageSaveError,
    Palette,
    RenderConfig,
    Viewport,
    __version__,
    default_workers,
    render,
    save_png,
)

log = logging.getLogger("mandelplot")


def positive_int(value: str) -> int:
    number = non_negative_int(value)
    if number == 0:
        raise ArgumentTypeError(f"expected a positive integer, got '{value}'")
    return number


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise ArgumentTypeError(f"expected an integer, got '{value}'") from exc
    if number < 0:
        raise ArgumentTypeError(f"expected a non-negative integer, got '{value}'")
    return number


def parse_dimensions(value: str) -> tuple[int, int]:
    """Parse ``WIDTHxHEIGHT`` into a pair of positive integers."""

    width, sep, height = value.partition("x")
    if not sep:
        raise ArgumentTypeError(f"dimensions must look like WIDTHxHEIGHT, got '{value}'")
    return positive_int(width), positive_int(height)


def build_parser():
    parser = ArgumentParser(prog="mandelplot", description="Render the Mandelbrot set to a PNG image.")

    parser.add_argument('-i', '--max_iter', type=non_negative_int,
                        dest='max_iter', help='maximum amount of iterations to decide whether a point escapes to infinity',
                        metavar='MAX_ITER', default=1000)

    parser.add_argument('-d', '--image_dimensions', type=parse_dimensions,
                        dest='dimensions', help='image dimensions (WIDTHxHEIGHT)',
                        metavar='DIMENSIONS', default=(7680, 4320))

    parser.add_argument('-n', '--image_name', type=str,
                        dest='image_name', help='output image name, ".png" is appended',
                        metavar='IMAGE_NAME', default='mandelbrot')

    parser.add_argument('-p', '--palette', choices=[palette.value for palette in Palette],
                        dest='palette', help='bulb color for points inside the set',
                        default=Palette.LIGHT.value)

    parser.add_argument('--re-start', type=float,
                        dest='re_start', help='real coordinate of the left image edge',
                        metavar='RE_START', default=Viewport.re_start)

    parser.add_argument('--re-end', type=float,
                        dest='re_end', help='real coordinate of the right image edge',
                        metavar='RE_END', default=Viewport.re_end)

    parser.add_argument('--im-start', type=float,
                        dest='im_start', help='imaginary coordinate of the top image edge',
                        metavar='IM_START', default=Viewport.im_start)

    parser.add_argument('--im-end', type=float,
                        dest='im_end', help='imaginary coordinate of the bottom image edge',
                        metavar='IM_END', default=Viewport.im_end)

    parser.add_argument('-w', '--workers', type=positive_int,
                        dest='workers', help='number of row bands rendered in parallel (default: CPU count)',
                        metavar='WORKERS', default=None)

    parser.add_argument('--kernel', choices=sorted(KERNELS), default='tensor',
                        help='escape-time kernel: "tensor" runs TensorFlow on the CPU, "scalar" iterates in Python.')

    parser.add_argument('--legacy-bands', dest='legacy_bands', action='store_true',
                        help='leave the last HEIGHT %% WORKERS rows unrendered instead of adding them to the last band.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")

    return parser


def resolve_render_config(opt, parser: ArgumentParser) -> tuple[RenderConfig, Viewport]:
    viewport = Viewport(
        re_start=opt.re_start,
        re_end=opt.re_end,
        im_start=opt.im_start,
        im_end=opt.im_end,
    )
    if not (viewport.re_start < viewport.re_end and viewport.im_start < viewport.im_end):
        parser.error("viewport bounds must satisfy --re-start < --re-end and --im-start < --im-end.")

    width, height = opt.dimensions
    config = RenderConfig(
        width=width,
        height=height,
        max_iter=opt.max_iter,
        palette=Palette(opt.palette),
        name=opt.image_name,
    )
    return config, viewport


def main(argv=None) -> int:
    parser = build_parser()
    opt = parser.parse_args(argv)

    logging.basicConfig(format="%(levelname)s: %(message)s")
    logging.getLogger().setLevel(logging.DEBUG if opt.verbose else logging.INFO)

    config, viewport = resolve_render_config(opt, parser)
    workers = opt.workers if opt.workers is not None else default_workers()

    log.info("Rendering %dx%d image with %d workers", config.width, config.height, workers)
    outcome = render(
        config,
        viewport,
        workers=workers,
        kernel=KERNELS[opt.kernel],
        fill_remainder=not opt.legacy_bands,
    )

    if outcome.failures:
        failed = ", ".join(str(failure.band.index) for failure in outcome.failures)
        log.warning("%d of %d bands failed (%s); saving partial image", len(outcome.failures), len(outcome.bands), failed)
    if outcome.unassigned_rows:
        log.warning(
            "Rows %d-%d were not assigned to any worker",
            outcome.unassigned_rows.start,
            outcome.unassigned_rows.stop - 1,
        )

    try:
        save_png(outcome.raster, config.name)
    except ImageSaveError as exc:
        log.error("Could not save image: %s", exc)
        return 0

    print("Saved")
    return 0


if __name__ == '__main__':
    sys.exit(main())
