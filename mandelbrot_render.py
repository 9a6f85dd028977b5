import sys
import time
from argparse import ArgumentParser, ArgumentTypeError
from pathlib import Path

from mandelbrot_bands import (
    ConfigurationError,
    Limit,
    RenderParameters,
    band_rows,
    render,
    write_image,
)

VERBOSE = False


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


def parse_complex(text: str) -> complex:
    """
    Parse strings like '-1.20,0.35', '-1.2+0.35i' or '0.3-0.5j' into a complex number.
    """
    s = text.strip().lower().replace(" ", "")
    if not s:
        raise ArgumentTypeError("empty complex number")
    try:
        if "," in s:
            re_part, im_part = s.split(",", 1)
            return complex(float(re_part), float(im_part))
        if s.endswith("i"):
            s = s[:-1] + "j"
        return complex(s)
    except ValueError:
        raise ArgumentTypeError(f"invalid complex number '{text}'") from None


def parse_limit(text: str) -> Limit:
    try:
        return Limit.parse(text)
    except ValueError as exc:
        raise ArgumentTypeError(str(exc)) from None


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set as a grayscale image.')

    parser.add_argument('-F', '--file', type=Path, required=True,
                        help='path of the image file to write')

    parser.add_argument('-W', '--width', type=int, required=True,
                        help='width of the image in pixels', metavar='WIDTH')

    parser.add_argument('-H', '--height', type=int, required=True,
                        help='height of the image in pixels', metavar='HEIGHT')

    parser.add_argument('-L', '--upper-left', type=parse_complex, dest='upper_left',
                        default=complex(-1.2, 0.35), metavar='COMPLEX',
                        help='complex point mapped to the upper left corner, e.g. --upper-left=-1.20,0.35')

    parser.add_argument('-R', '--lower-right', type=parse_complex, dest='lower_right',
                        default=complex(-1.0, 0.20), metavar='COMPLEX',
                        help='complex point mapped to the lower right corner, e.g. --lower-right=-1.0,0.20')

    parser.add_argument('-l', '--limit', type=parse_limit, default=Limit.MEDIUM,
                        metavar='LIMIT',
                        help='iteration limit tier: %s (default: medium)' % ', '.join(Limit.choices()))

    parser.add_argument('-t', '--threads', type=int, default=1, metavar='THREADS',
                        help='number of horizontal bands rendered concurrently')

    parser.add_argument('--format', type=str, dest='format', default=None, metavar='FORMAT',
                        help='file format, any Pillow supports. Default: inferred from the file extension, png otherwise.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging of parameters, bands and timings.')

    return parser


def resolve_parameters(opt, parser: ArgumentParser) -> RenderParameters:
    params = RenderParameters(
        width=opt.width,
        height=opt.height,
        upper_left=opt.upper_left,
        lower_right=opt.lower_right,
        limit=opt.limit,
        workers=opt.threads,
    )
    try:
        params.validate()
    except ConfigurationError as exc:
        parser.error(str(exc))
    return params


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    params = resolve_parameters(opt, parser)

    log("Rendering %dx%d, upper left %s, lower right %s, limit %s (%d iterations)" % (
        params.width, params.height, params.upper_left, params.lower_right,
        params.limit.name.lower(), params.iterations))
    if params.workers > 1:
        rows_per_band = band_rows(params.height, params.workers)
        band_count = -(-params.height // rows_per_band)
        log("Split into %d bands of up to %d rows" % (band_count, rows_per_band))

    start = time.perf_counter()
    pixels = render(params)
    log("Rendered in %.3f seconds" % (time.perf_counter() - start))

    try:
        write_image(opt.file, pixels, params.bounds, opt.format)
    except (OSError, ValueError, KeyError) as exc:
        print(f"error: could not write {opt.file}: {exc}", file=sys.stderr)
        return 1

    log("Wrote %s" % opt.file)
    return 0


if __name__ == '__main__':
    sys.exit(main())
