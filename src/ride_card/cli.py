import argparse
import logging
import mimetypes
import sys
from pathlib import Path

from ride_card import __version_date__, get_git_hash
from ride_card.card import render_card
from ride_card.compositor import MAP_PLACEHOLDER, format_values
from ride_card.config import (
    DISTANCE_UNITS,
    ELEVATION_UNITS,
    SPEED_UNITS,
    RideConfig,
    load_config,
)
from ride_card.errors import RideCardError
from ride_card.map import render_track_snapshot
from ride_card.models import MapImage
from ride_card.parser import parse_gpx
from ride_card.templates import DEFAULT_TEMPLATE, list_templates, load_template

logger = logging.getLogger(__name__)


def build_parser(config: RideConfig | None = None) -> argparse.ArgumentParser:
    """Build argument parser with defaults from config file."""
    if config is None:
        config = RideConfig()

    parser = argparse.ArgumentParser(
        prog="ride-card",
        description="Turn a GPX ride into an SVG summary card.",
    )
    parser.add_argument("datafile", nargs="?", help="Path to GPX file")
    parser.add_argument(
        "-t", "--template",
        default=DEFAULT_TEMPLATE,
        help=f"Packaged template name or path to an SVG file (default: {DEFAULT_TEMPLATE})",
    )
    parser.add_argument(
        "-o", "--outfile",
        default="",
        help="Output basename; .svg is appended (default: GPX file name)",
    )
    map_group = parser.add_mutually_exclusive_group()
    map_group.add_argument(
        "--map-image",
        default=None,
        help="Image file to inline as the map instead of the rendered track snapshot",
    )
    map_group.add_argument(
        "--no-map",
        action="store_true",
        help="Leave the map placeholder untouched",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        default=not config.strict,
        help="Skip missing template placeholders instead of failing",
    )
    parser.add_argument(
        "--distance-unit",
        choices=DISTANCE_UNITS,
        default=config.distance_unit,
        help=f"Distance unit (default: {config.distance_unit})",
    )
    parser.add_argument(
        "--speed-unit",
        choices=SPEED_UNITS,
        default=config.speed_unit,
        help=f"Speed unit (default: {config.speed_unit})",
    )
    parser.add_argument(
        "--elevation-unit",
        choices=ELEVATION_UNITS,
        default=config.elevation_unit,
        help=f"Elevation unit (default: {config.elevation_unit})",
    )
    parser.add_argument(
        "--decimals",
        type=int,
        default=config.decimal_places,
        help=f"Decimal places for distance and speed (default: {config.decimal_places})",
    )
    parser.add_argument(
        "--moving-threshold",
        type=float,
        default=config.moving_threshold_mps,
        help=f"Speed in m/s above which a segment counts as moving (default: {config.moving_threshold_mps})",
    )
    parser.add_argument(
        "--smoothing",
        type=float,
        default=config.elevation_smoothing,
        help=f"Elevation smoothing radius in meters, 0 to disable (default: {config.elevation_smoothing})",
    )
    parser.add_argument(
        "--min-elevation-span",
        type=float,
        default=config.min_elevation_span,
        help=f"Smallest elevation range drawn at full profile height, in meters (default: {config.min_elevation_span})",
    )
    parser.add_argument(
        "--close-profile",
        action="store_true",
        default=config.close_profile,
        help="Close the elevation profile along its baseline so it can be filled",
    )
    parser.add_argument(
        "--list-templates",
        action="store_true",
        help="List packaged templates and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version_date__} ({get_git_hash()})",
    )
    return parser


def _read_map_image(path: str) -> MapImage:
    mime_type, _ = mimetypes.guess_type(path)
    with open(path, "rb") as f:
        return MapImage(data=f.read(), mime_type=mime_type or "application/octet-stream")


def _output_path(datafile: str, outfile: str) -> Path:
    """Output SVG path: outfile (any extension replaced) or the GPX file stem."""
    base = Path(outfile) if outfile else Path(Path(datafile).stem or "output")
    return base.with_suffix(".svg")


def main(argv: list[str] | None = None) -> None:
    try:
        config = load_config()
    except RideCardError as e:
        print(f"Error in config file: {e}", file=sys.stderr)
        sys.exit(1)

    parser = build_parser(config)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_templates:
        for name in list_templates():
            print(name)
        return

    if not args.datafile:
        parser.error("the following arguments are required: datafile")

    try:
        config = config.with_overrides(
            distance_unit=args.distance_unit,
            speed_unit=args.speed_unit,
            elevation_unit=args.elevation_unit,
            decimal_places=args.decimals,
            moving_threshold_mps=args.moving_threshold,
            elevation_smoothing=args.smoothing,
            min_elevation_span=args.min_elevation_span,
            close_profile=args.close_profile,
            strict=not args.lenient,
        )
    except RideCardError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        track = parse_gpx(args.datafile)
    except FileNotFoundError:
        print(f"Error: File not found: {args.datafile}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error parsing GPX file: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        document = load_template(args.template)
    except (RideCardError, OSError) as e:
        print(f"Error loading template {args.template}: {e}", file=sys.stderr)
        sys.exit(1)

    outpath = _output_path(args.datafile, args.outfile)
    print(f"Using template '{args.template}' for {args.datafile} -> {outpath}")

    try:
        map_image = None
        if args.map_image:
            map_image = _read_map_image(args.map_image)
        elif not args.no_map and len(track) > 0:
            size = document.image_pixel_size(MAP_PLACEHOLDER)
            if size is not None:
                map_image = render_track_snapshot(track, *size, track_color=document.track_color())

        result = render_card(track, document, config=config, map_image=map_image)
        result.document.write(outpath)
    except (RideCardError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print("=== Ride Card ===")
    if track.name:
        print(f"Track:          {track.name}")
    values = format_values(result.stats, config)
    print(f"Distance:       {values['value_distance']}")
    print(f"Time:           {values['value_time']}")
    print(f"Moving Time:    {values['value_moving_time']}")
    print(f"Avg Speed:      {values['value_speed']}")
    print(f"Moving Speed:   {values['value_speed_moving']}")
    print(f"Max Speed:      {values['value_speed_max']}")
    print(f"Uphill:         {values['value_uphill']}")
    print(f"Downhill:       {values['value_downhill']}")
    print(f"Max Elevation:  {values['value_elevation_max']}")
    print(f"Min Elevation:  {values['value_elevation_min']}")
    print(f"Wrote {outpath}")
