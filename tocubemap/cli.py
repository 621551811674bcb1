"""
cli.py — Command-line front end: one equirectangular image → six face files.

Usage:
    tocubemap [options] <equirectangular image> <output directory>

Writes front/back/left/right/top/bottom.<ext> into the output directory,
creating it if needed.  Exit status is 0 on success, 1 on any conversion
error and 2 on bad arguments.
"""

import argparse
import dataclasses
import os
import sys
import time

from . import __version__
from .codec import OutputFormat, decode_image, save_cubemap
from .engine import DEFAULT_EXPOSURE, DEFAULT_SIZE, ConvertOptions, check_aspect, convert
from .errors import CubemapError
from .reorient import rotate_for_z_up
from .sampler import Interpolation

DEFAULT_FORMAT = OutputFormat.PNG


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}")
    if not value > 0 or value == float('inf'):
        raise argparse.ArgumentTypeError(f"must be a positive number: {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tocubemap',
        description='Convert an equirectangular panorama into six cube-face images.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            'Output: front, back, left, right, top and bottom.<format> in OUTPUT.\n'
            'The input must be exactly twice as wide as it is high.'
        ),
    )
    parser.add_argument('input', help='equirectangular image (JPEG, PNG, WebP, TIFF, HDR, ...)')
    parser.add_argument('output', help='directory for the face images, created if absent')
    parser.add_argument('-f', '--format', type=OutputFormat, default=DEFAULT_FORMAT,
                        choices=list(OutputFormat), help='output image format (default: png)')
    parser.add_argument('-i', '--interpolation', type=Interpolation,
                        default=Interpolation.LINEAR, choices=list(Interpolation),
                        help='sampling used on the source image (default: linear)')
    parser.add_argument('-s', '--size', type=_positive_int, default=DEFAULT_SIZE,
                        help=f'edge length of each face in px (default: {DEFAULT_SIZE})')
    parser.add_argument('-r', '--rotate', action='store_true',
                        help='rotate faces for a Z-up skybox used in a Y-up renderer')
    parser.add_argument('-t', '--tone-mapping', action='store_true',
                        help='Reinhard tone mapping for floating-point (HDR) inputs')
    parser.add_argument('-e', '--exposure', type=_positive_float, default=DEFAULT_EXPOSURE,
                        help=f'exposure used by tone mapping (default: {DEFAULT_EXPOSURE})')
    parser.add_argument('-w', '--wrap', action='store_true',
                        help='wrap horizontally when sampling (removes the back-face seam)')
    parser.add_argument('-j', '--jobs', type=_positive_int, default=None,
                        help='worker threads for face projection (default: one per CPU, max 6)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def options_from_args(args: argparse.Namespace) -> ConvertOptions:
    return ConvertOptions(
        size=args.size,
        interpolation=args.interpolation,
        tone_mapping=args.tone_mapping,
        exposure=args.exposure,
        rotate_for_z_up=args.rotate,
        wrap=args.wrap,
        workers=args.jobs,
    )


def run(args: argparse.Namespace) -> None:
    options = options_from_args(args)
    out_dir = os.path.abspath(args.output)

    print(f"Processing: {os.path.abspath(args.input)}")
    print(f"Output:     {out_dir}")

    source = decode_image(args.input)
    H, W = source.shape[:2]
    print(f"Source:     {W} × {H} px ({source.dtype})")
    check_aspect(W, H)
    print(f"Face size:  {options.size} × {options.size} px")

    # Rotation is timed as its own stage, so convert() is asked not to do it
    start = time.perf_counter()
    result = convert(source, dataclasses.replace(options, rotate_for_z_up=False))
    print(f"Convert: {time.perf_counter() - start:.3f}s")
    del source

    if options.rotate_for_z_up:
        start = time.perf_counter()
        result = rotate_for_z_up(result)
        print(f"Rotate: {time.perf_counter() - start:.3f}s")

    start = time.perf_counter()
    save_cubemap(result, out_dir, args.format)
    print(f"Save: {time.perf_counter() - start:.3f}s")

    print(f'Generated images have been saved in "{out_dir}"')


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        run(args)
    except CubemapError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    sys.exit(0)


if __name__ == '__main__':
    main()
