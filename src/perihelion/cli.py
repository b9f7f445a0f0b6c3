# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface for solar-system ephemerides.

Usage:
    # Orbital elements of a comet, asteroid or planet
    perihelion elements comet:1P/Halley
    perihelion elements asteroid:Ceres --epoch 2024-01-01
    perihelion elements planet:jupiter --epoch 1500-06-01

    # Ephemeris of a comet seen from Earth (JPL mean elements, heliocentric)
    perihelion ephem --target "comet:C/2020 F3" --center earth \\
        --start 2020-07-01 --stop 2020-08-01 --step 1

    # Planets from a JPL DE kernel (requires skyfield)
    perihelion ephem --target mars --center earth --kernel de421.bsp \\
        --start 2024-01-01 --stop 2024-02-01 --step 5 --csv mars.csv

    # Closest approach between two bodies
    perihelion approach comet:1P/Halley earth --start 1986-03-01 --stop 1986-05-01

Bodies are 'comet:NAME', 'asteroid:NAME|NUMBER', 'planet:NAME' (JPL mean
elements) or a bare planet name, which reads from --kernel when given and
falls back to the mean elements otherwise. Dates are TDB, written as
YYYY-MM-DD[THH:MM[:SS]] (astronomical years, may be negative) or JD<number>.
"""
import argparse
import logging
import re
import sys

from perihelion.domain.bodies import OrbitalElementBody, TabulatedPlanet
from perihelion.domain.closest_approach import find_closest_approach
from perihelion.domain.ephemeris import (
    ObservationRequest,
    ObserverLocation,
    format_ephemeris_table,
    generate_ephemeris,
)
from perihelion.domain.errors import PerihelionError
from perihelion.domain.planetary_terms import Planet, planet_elements
from perihelion.domain.time_systems import AstroTime
from perihelion.adapters.csv_exporter import CsvEphemerisExporter
from perihelion.adapters.jpl_small_body import JplSmallBodyAdapter

_DATE_PATTERN = re.compile(
    r"^(-?\d+)-(\d{1,2})-(\d{1,2})"
    r"(?:[T ](\d{1,2}):(\d{2})(?::(\d{2}(?:\.\d*)?))?)?$"
)


def parse_date(text: str) -> AstroTime:
    """Parse a TDB date 'YYYY-MM-DD[THH:MM[:SS]]' or 'JD<number>'."""
    text = text.strip()
    if text.lower().startswith("jd"):
        return AstroTime(float(text[2:]))
    match = _DATE_PATTERN.match(text)
    if not match:
        raise ValueError(f"Unrecognised date: {text!r}")
    year, month, day, hour, minute, second = match.groups()
    frac = (int(hour or 0) / 24.0
            + int(minute or 0) / 1440.0
            + float(second or 0.0) / 86400.0)
    return AstroTime.from_calendar(int(year), int(month), int(day) + frac)


def resolve_body(spec: str, source: JplSmallBodyAdapter | None = None,
                 kernel_loaded: bool = False):
    """Turn a command-line body spec into a Body."""
    kind, sep, name = spec.partition(":")
    if not sep:
        kind, name = "", spec
    kind = kind.lower()

    if kind in ("comet", "asteroid"):
        source = source or JplSmallBodyAdapter()
        if kind == "comet":
            elements = source.find_comet(name)
        else:
            elements = source.find_asteroid(name)
        return OrbitalElementBody.from_elements(elements)
    if kind == "planet":
        return OrbitalElementBody.for_planet(Planet.from_name(name))
    if kind:
        raise ValueError(f"Unknown body kind {kind!r} in {spec!r}")
    if kernel_loaded:
        return TabulatedPlanet(name=name.lower())
    return OrbitalElementBody.for_planet(Planet.from_name(name))


def _load_kernel(path: str | None):
    if not path:
        return None
    try:
        from perihelion.adapters.skyfield_ephemeris import SkyfieldEphemeris
        return SkyfieldEphemeris(path)
    except ImportError:
        print(
            "Tabulated ephemerides require the skyfield package.\n"
            "Install with: pip install perihelion[live]",
            file=sys.stderr,
        )
        sys.exit(1)


def run_elements(body_spec: str, epoch: AstroTime | None = None,
                 source: JplSmallBodyAdapter | None = None) -> str:
    """Element summary of one body, optionally re-pointed to ``epoch``."""
    kind, _, name = body_spec.partition(":")
    if kind.lower() == "planet" or ":" not in body_spec:
        planet = Planet.from_name(name or body_spec)
        elements = planet_elements(planet, epoch or AstroTime.from_calendar(2000, 1, 1.5))
    else:
        elements = resolve_body(body_spec, source).elements
        if epoch is not None:
            elements.epoch = epoch
    return elements.summary()


def run_ephemeris(args, source: JplSmallBodyAdapter | None = None) -> str:
    ephemeris = _load_kernel(args.kernel)
    target = resolve_body(args.target, source, ephemeris is not None)
    center = resolve_body(args.center, source, ephemeris is not None)
    location = None
    if args.lat is not None and args.lon is not None:
        location = ObserverLocation(args.lat, args.lon, args.height)

    request = ObservationRequest.from_range(
        center, target, parse_date(args.start), parse_date(args.stop),
        args.step, location,
    )
    items = generate_ephemeris(request, ephemeris)
    if args.csv:
        n = CsvEphemerisExporter().export(items, args.csv)
        print(f"Exported {n} rows to {args.csv}")
    return format_ephemeris_table(items)


def run_approach(args, source: JplSmallBodyAdapter | None = None) -> str:
    ephemeris = _load_kernel(args.kernel)
    body_a = resolve_body(args.body_a, source, ephemeris is not None)
    body_b = resolve_body(args.body_b, source, ephemeris is not None)
    result = find_closest_approach(
        body_a, body_b, parse_date(args.start), parse_date(args.stop), ephemeris,
    )
    status = "" if result.converged else "  (not converged, approximate)"
    return (f"Closest approach of {body_a.name} and {body_b.name}: "
            f"{result.time.isoformat()}  {result.distance_au:.9f} AU{status}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perihelion",
        description="Ephemerides of planets, comets and asteroids",
    )
    parser.add_argument(
        '--verbose', '-v', action='count', default=0,
        help="Log progress (-v) or debug detail (-vv)"
    )
    parser.add_argument(
        '--cache-dir',
        help="Directory for JPL element files (default: $PERIHELION_CACHE_DIR "
             "or ~/.cache/perihelion)"
    )
    sub = parser.add_subparsers(dest='command', required=True)

    elements = sub.add_parser('elements', help="Print orbital elements")
    elements.add_argument('body', help="comet:NAME, asteroid:NAME or planet:NAME")
    elements.add_argument('--epoch', help="Epoch to evaluate at (TDB)")

    ephem = sub.add_parser('ephem', help="Generate an ephemeris table")
    ephem.add_argument('--target', required=True)
    ephem.add_argument('--center', default='earth')
    ephem.add_argument('--start', required=True)
    ephem.add_argument('--stop', required=True)
    ephem.add_argument('--step', type=float, default=1.0, help="Step in days")
    ephem.add_argument('--kernel', help="JPL DE kernel for tabulated planets")
    site = ephem.add_argument_group('observer site')
    site.add_argument('--lat', type=float, help="Latitude (deg, north +)")
    site.add_argument('--lon', type=float, help="Longitude (deg, east +)")
    site.add_argument('--height', type=float, default=0.0, help="Height (m)")
    ephem.add_argument('--csv', help="Also export rows to CSV")

    approach = sub.add_parser('approach', help="Find a closest approach")
    approach.add_argument('body_a')
    approach.add_argument('body_b')
    approach.add_argument('--start', required=True)
    approach.add_argument('--stop', required=True)
    approach.add_argument('--kernel', help="JPL DE kernel for tabulated planets")
    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    source = JplSmallBodyAdapter(cache_dir=args.cache_dir)
    try:
        if args.command == 'elements':
            epoch = parse_date(args.epoch) if args.epoch else None
            print(run_elements(args.body, epoch, source))
        elif args.command == 'ephem':
            print(run_ephemeris(args, source))
        else:
            print(run_approach(args, source))
    except KeyError as e:
        print(f"Error: {e.args[0] if e.args else e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, ConnectionError, PerihelionError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
