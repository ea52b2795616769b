"""Command-line interface for noise filtering and cropping."""

import argparse
import sys
from dataclasses import replace

from .exceptions import InvalidThresholdError, NoiseCropError
from .models import DEFAULT_THRESHOLD, Params

USAGE = "nnr <options> <input> <output>"
HELP_FLAGS = ("-h", "--help")
THRESHOLD_FLAGS = ("-t", "--threshold")
SWITCH_FLAGS = ("-c", "--crop", "-f", "--filter", "--coords", "-v", "--verbose")
DEBUG_DIR_FLAG = "--debug-dir"


def parse_threshold(value: str) -> float:
    """Parse threshold argument. Values outside 0.0-1.0 are kept as is.

    Digit separators and surrounding whitespace are rejected.
    """
    if "_" in value or value != value.strip():
        raise InvalidThresholdError(value)
    try:
        return float(value)
    except ValueError:
        raise InvalidThresholdError(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nnr",
        usage=USAGE,
        description="Median filter noise and crop noisy bands from an image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
        exit_on_error=False,
        epilog="""
The last two arguments are always the input and output files.

Examples:
  nnr -f in.png out.png              Filter noise with median filter
  nnr -c -t 0.3 in.png out.png       Crop noisy bands with a lower threshold
  nnr -f -c --coords in.png out.txt  Output crop rows instead of an image
""",
    )
    parser.add_argument("-c", "--crop", action="store_true", help="Crop noise")
    parser.add_argument(
        "-t",
        "--threshold",
        metavar="<val>",
        default=str(DEFAULT_THRESHOLD),
        help=f"Noise threshold; 0.0 to 1.0; Default: {DEFAULT_THRESHOLD}",
    )
    parser.add_argument(
        "-f", "--filter", action="store_true", help="Filter noise with median filter"
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show this help and exit")
    parser.add_argument(
        "--coords",
        action="store_true",
        help="Write crop rows (top, bottom, top fraction, bottom fraction) to the output "
        "file instead of the cropped image",
    )
    parser.add_argument("--debug-dir", help="Directory to save debug visualization images")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Print noise statistics to stderr"
    )
    return parser


def scan_options(parser: argparse.ArgumentParser, argv: list[str]) -> tuple[float, list[str]]:
    """Walk every token in order, acting on help and threshold as they appear.

    Only exact option strings count; abbreviations, grouped short flags and
    unknown tokens are dropped. The last threshold given wins.

    Returns:
        Tuple of (threshold, option tokens for argparse)
    """
    threshold = DEFAULT_THRESHOLD
    options = []
    option_end = len(argv) - 2

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in HELP_FLAGS:
            parser.print_help()
            sys.exit(0)
        if arg in THRESHOLD_FLAGS:
            value = argv[i + 1] if i + 1 < len(argv) else ""
            try:
                threshold = parse_threshold(value)
            except InvalidThresholdError as e:
                print(e.user_message, file=sys.stderr)
                parser.print_help()
                sys.exit(1)
        elif i < option_end and arg in SWITCH_FLAGS:
            options.append(arg)
        elif arg == DEBUG_DIR_FLAG and i + 1 < option_end:
            options.append(f"{arg}={argv[i + 1]}")
            i += 1
        i += 1

    return threshold, options


def parse_params(argv: list[str]) -> Params:
    """Parse raw arguments (without program name) into Params.

    Prints usage and exits when arguments are missing or invalid, or when
    help is requested.
    """
    parser = build_parser()

    if len(argv) < 2:
        parser.print_help()
        sys.exit(1)

    threshold, options = scan_options(parser, argv)
    args = parser.parse_args(options)

    # Input and output are taken by position, flags come before them
    return Params(
        input=argv[-2],
        output=argv[-1],
        crop=args.crop,
        threshold=threshold,
        filter=args.filter,
        coords=args.coords,
        verbose=args.verbose,
        debug_dir=args.debug_dir,
    )


def report_profile(profile) -> None:
    """Print noise statistics and crop rows to stderr."""
    print(
        f"noise: min={profile.noise_min} max={profile.noise_max} "
        f"threshold={profile.threshold_value}",
        file=sys.stderr,
    )
    print(f"crossings: {profile.crossings.tolist()}", file=sys.stderr)
    bounds = profile.bounds
    if bounds is None:
        print("crop: no crossings, image unchanged", file=sys.stderr)
    else:
        print(f"crop: rows {bounds.top}-{bounds.bottom} (height {bounds.height})", file=sys.stderr)


def run_coords(params: Params, img, visualizer=None) -> None:
    """Detect crop rows and write them as text instead of an image."""
    from .detection import analyze_noise
    from .models import CropBounds
    from .pipeline import process_image

    img, _ = process_image(img, replace(params, crop=False), visualizer=visualizer)
    profile = analyze_noise(img, params.threshold)
    if params.verbose:
        report_profile(profile)

    img_h = img.shape[0]
    bounds = profile.bounds or CropBounds(0, img_h)
    top_frac, bottom_frac = bounds.as_fractions(img_h)

    if visualizer:
        visualizer.save_noise_profile(profile)
        visualizer.save_coords_output(img, bounds, top_frac, bottom_frac)

    output = f"{bounds.top}\n{bounds.bottom}\n{top_frac}\n{bottom_frac}"
    try:
        with open(params.output, "w") as f:
            f.write(output + "\n")
    except OSError as e:
        sys.exit(str(e))


def run(params: Params) -> None:
    """Load, process and save one image."""
    from .image_io import load_image, save_image
    from .pipeline import process_image

    visualizer = None
    if params.debug_dir:
        from .visualizer import DebugVisualizer

        visualizer = DebugVisualizer(params.debug_dir)

    try:
        img = load_image(params.input)

        if params.coords:
            run_coords(params, img, visualizer=visualizer)
            return

        img, profile = process_image(img, params, visualizer=visualizer)
        if params.verbose and profile is not None:
            report_profile(profile)

        save_image(params.output, img)
    except NoiseCropError as e:
        sys.exit(e.user_message)


def main(argv: list[str] | None = None) -> None:
    params = parse_params(sys.argv[1:] if argv is None else argv)
    run(params)


if __name__ == "__main__":
    main()
