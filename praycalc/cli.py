import argparse
import json
import logging
import os
import sys
from datetime import date

from .calc import PrayerTimesEngine
from .config import load_config, parameter_overrides
from .methods import HIGH_LAT_MODES, REGISTRY
from .models import TIME_FORMATS, Coordinates, TuningOffsets
from .render import api_payload, calendar_events, parse_query, render_table

logger = logging.getLogger(__name__)


def setup_logging(level):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def resolve_query(args, config):
    location = config.get("location", {})
    lat = args.lat if args.lat is not None else location.get("lat")
    lng = args.lng if args.lng is not None else location.get("lng")
    tz = args.tz if args.tz is not None else location.get("tz")
    if lat is None or lng is None or tz is None:
        raise ValueError("Latitude, longitude and timezone are required (flags or config location)")
    lat, lng, tz = parse_query(lat, lng, tz)
    return Coordinates(lat, lng), tz


def build_overrides(args, config):
    overrides = parameter_overrides(config)
    for key, value in (("asr", args.asr), ("high_lats", args.high_lats)):
        if value is not None:
            overrides[key] = value
    return overrides


def build_tuning(args, config):
    offsets = {k: v for k, v in config.get("adjustments", {}).items() if v}
    for prayer, minutes in args.tune or []:
        try:
            offsets[prayer.lower()] = float(minutes)
        except ValueError:
            raise ValueError(f"Invalid offset for {prayer}: {minutes}") from None
    return TuningOffsets(offsets)


def handle_cli(args):
    config = load_config(args.config)
    setup_logging(args.log_level or os.environ.get("PRAYCALC_LOG_LEVEL") or config.get("log_level", "WARNING"))

    if args.list_methods:
        for method in REGISTRY:
            rules = ", ".join(f"{k}={v}" for k, v in method.params.as_dict().items())
            print(f"{method.key}: {method.name}")
            print(f"    {rules}")
        return 0

    coords, tz = resolve_query(args, config)
    day = date.fromisoformat(args.date) if args.date else date.today()
    if args.days < 1:
        raise ValueError(f"Days must be positive: {args.days}")

    refine = config.get("refine", True) and not args.no_refine
    engine = PrayerTimesEngine(refine=refine)
    results = engine.compute_range(
        args.method or config.get("method"),
        build_overrides(args, config),
        build_tuning(args, config),
        coords,
        day,
        args.days,
        tz,
        time_format=args.format or config.get("time_format", "24h"),
    )

    if args.calendar:
        print(json.dumps(calendar_events(results), indent=2))
    elif args.json:
        payload = [api_payload(r) for r in results]
        print(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2))
    else:
        print(render_table(results))
    return 0


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Compute daily prayer times")
    parser.add_argument("--lat", help="Latitude in degrees")
    parser.add_argument("--lng", help="Longitude in degrees")
    parser.add_argument("--tz", help="Timezone offset in hours (e.g. 3 or -4.5)")
    parser.add_argument("--date", help="Date as YYYY-MM-DD (default: today)")
    parser.add_argument("--days", type=int, default=1, help="Number of consecutive days")
    parser.add_argument("--method", help="Calculation method (unknown names fall back to MWL)")
    parser.add_argument("--asr", help="Asr convention: Standard, Hanafi or a shadow factor")
    parser.add_argument("--high-lats", choices=HIGH_LAT_MODES, help="High latitude adjustment")
    parser.add_argument("--tune", nargs=2, action="append", metavar=("PRAYER", "MIN"), help="Shift a prayer by minutes")
    parser.add_argument("--format", choices=TIME_FORMATS, help="Time format")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="Output the API JSON payload")
    output.add_argument("--calendar", action="store_true", help="Output calendar event records")
    parser.add_argument("--list-methods", action="store_true", help="List calculation methods")
    parser.add_argument("--no-refine", action="store_true", help="Skip the second ephemeris pass")
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument("--log-level", help="Logging level (default WARNING)")
    return parser


def main(argv=None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        return handle_cli(args)
    except Exception as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
