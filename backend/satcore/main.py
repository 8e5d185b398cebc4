"""
Pass prediction from the command line.

Run as:
    python -m satcore.main --tle-file stations.tle --lat 40.0 --lon -75.0

Reads a TLE text file, predicts passes for every object (or the ones whose
name contains --name) and prints a table with a short summary.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from datetime import datetime

from satcore.elements import parse_catalog, split_tle_text
from satcore.passes import compute_passes
from satcore.solar import sub_solar_point
from satcore.timeutil import as_utc

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
    stream=sys.stderr,
)
log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Predict satellite passes over an observer.")
    ap.add_argument("--tle-file", required=True, help="TLE text file (name + two lines per object)")
    ap.add_argument("--lat", type=float, required=True, help="Observer latitude (deg, north positive)")
    ap.add_argument("--lon", type=float, required=True, help="Observer longitude (deg, east positive)")
    ap.add_argument("--alt-km", type=float, default=0.0, help="Observer altitude (km)")
    ap.add_argument("--hours", type=float, default=24.0, help="Prediction window (hours)")
    ap.add_argument("--min-el", type=float, default=0.0, help="Minimum elevation (deg)")
    ap.add_argument("--name", default=None, help="Only objects whose name contains this text")
    ap.add_argument("--start", type=datetime.fromisoformat, default=None,
                    help="Window start, ISO 8601 (default now; naive means UTC)")
    return ap


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    path = pathlib.Path(args.tle_file)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        log.error("Cannot read %s: %s", path, exc)
        sys.exit(1)

    records = parse_catalog(split_tle_text(text))
    if args.name:
        records = [r for r in records if args.name.upper() in r.name.upper()]
    if not records:
        log.error("No usable element sets in %s.", path)
        sys.exit(1)

    start = as_utc(args.start)
    total = 0
    print(f"{'NAME':<25} {'START (UTC)':<20} {'END':<8} {'PEAK':>6} {'MIN':>6}")
    for record in records:
        passes = compute_passes(
            record, args.lat, args.lon, args.alt_km,
            horizon_hours=args.hours, start=start, min_elevation=args.min_el,
        )
        total += len(passes)
        for p in passes:
            print(
                f"{record.name[:25]:<25} {p.start:%Y-%m-%d %H:%M}     {p.end:%H:%M}    "
                f"{p.peak_elevation:6.1f} {p.duration_minutes:6.0f}"
            )

    sun = sub_solar_point(start)
    print()
    print("=" * 60)
    print(f"  Objects scanned:   {len(records)}")
    print(f"  Passes found:      {total}")
    print(f"  Window:            {args.hours:g} h from {start:%Y-%m-%d %H:%M} UTC")
    print(f"  Sub-solar point:   {sun.latitude:+.2f}, {sun.longitude:+.2f}")
    print("=" * 60)


if __name__ == "__main__":
    main()
