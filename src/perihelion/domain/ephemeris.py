# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Batch ephemeris generation for a target seen from a center body.

Each epoch is independent. Pairs of tabulated planets take light-time
from the ephemeris reader; any pair involving an element body goes
through the light-time solver.
"""
import logging
import math
from dataclasses import dataclass, field

from perihelion.domain.bodies import Body, both_tabulated, position_fn
from perihelion.domain.coordinate_frames import (
    Frame,
    cartesian_to_spherical,
    equatorial_to_horizontal,
    format_degrees,
    format_hours,
    precess_to_date,
)
from perihelion.domain.light_time import (
    DEFAULT_LIGHT_TIME_CONFIG,
    LightTimeConfig,
    solve_light_time,
)
from perihelion.domain.state_vector import StateVector
from perihelion.domain.time_systems import AstroTime, datetime_to_jd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObserverLocation:
    """Topocentric observing site (geodetic latitude/longitude, east positive)."""
    latitude_deg: float
    longitude_deg: float
    height_m: float = 0.0

    def __post_init__(self):
        if not -90.0 <= self.latitude_deg <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude_deg}")


@dataclass(frozen=True)
class ObservationRequest:
    """A target observed from a center body at a sorted set of epochs."""
    center: Body
    target: Body
    epochs: tuple[AstroTime, ...]
    location: ObserverLocation | None = None

    def __post_init__(self):
        if not self.epochs:
            raise ValueError("ObservationRequest needs at least one epoch")
        object.__setattr__(self, "epochs", tuple(sorted(self.epochs)))

    @staticmethod
    def from_range(
        center: Body,
        target: Body,
        start: AstroTime,
        stop: AstroTime,
        step_days: float,
        location: ObserverLocation | None = None,
    ) -> "ObservationRequest":
        """Epochs from ``start`` to ``stop`` inclusive every ``step_days``."""
        if step_days <= 0.0:
            raise ValueError(f"Step must be positive, got {step_days}")
        if stop < start:
            raise ValueError("Range stop precedes start")
        count = int(math.floor((stop - start) / step_days + 1e-9)) + 1
        epochs = tuple(start + k * step_days for k in range(count))
        return ObservationRequest(center=center, target=target,
                                  epochs=epochs, location=location)


@dataclass(frozen=True)
class EphemerisItem:
    """One row of an ephemeris: vectors and light-time at one epoch.

    Vectors are target minus center in the J2000 equatorial frame.
    """
    epoch: AstroTime
    target_name: str
    center_name: str
    true_vector: StateVector
    astrometric_vector: StateVector
    light_time_days: float
    location: ObserverLocation | None = field(default=None)

    @property
    def distance_true_au(self) -> float:
        return self.true_vector.distance

    @property
    def distance_au(self) -> float:
        """Astrometric (light-time corrected) distance."""
        return self.astrometric_vector.distance

    def radec_j2000(self) -> tuple[float, float]:
        """Astrometric right ascension and declination (radians), J2000."""
        ra, dec, _ = cartesian_to_spherical(self.astrometric_vector.position)
        return ra, dec

    def radec_of_date(self) -> tuple[float, float]:
        """Astrometric RA/Dec referred to the mean equator of date."""
        vec = precess_to_date(self.astrometric_vector.position,
                              self.epoch.to_julian_centuries_tt())
        ra, dec, _ = cartesian_to_spherical(vec)
        return ra, dec

    def horizontal(self) -> tuple[float, float] | None:
        """(altitude_deg, azimuth_deg) for the request's location, if any."""
        if self.location is None:
            return None
        try:
            jd_ut = datetime_to_jd(self.epoch.to_utc_datetime())
        except ValueError:
            # Before 1972 UTC is undefined; TT is close enough for a sky plot.
            jd_ut = self.epoch.to_julian_date_tt()
        ra, dec = self.radec_of_date()
        return equatorial_to_horizontal(
            ra, dec, self.location.latitude_deg, self.location.longitude_deg, jd_ut,
        )


def observe(
    target: Body,
    center: Body,
    epoch: AstroTime,
    ephemeris=None,
    location: ObserverLocation | None = None,
    config: LightTimeConfig = DEFAULT_LIGHT_TIME_CONFIG,
) -> EphemerisItem:
    """Ephemeris row for ``target`` seen from ``center`` at ``epoch``."""
    jd = epoch.jd_tdb
    if both_tabulated(target, center):
        if ephemeris is None:
            raise ValueError("Tabulated planets need a tabulated ephemeris")
        true_pos = ephemeris.position(target.name, center.name, jd)
        astro_pos, light_time = ephemeris.observe(target.name, center.name, jd)
        true_vec = StateVector.from_arrays(true_pos, None, Frame.EQUATORIAL_J2000, jd)
        astro_vec = StateVector.from_arrays(
            astro_pos, None, Frame.EQUATORIAL_J2000, jd - light_time,
        )
    else:
        result = solve_light_time(
            position_fn(target, ephemeris), position_fn(center, ephemeris), jd, config,
        )
        true_vec = result.true_vector
        astro_vec = result.astrometric_vector
        light_time = result.light_time_days

    return EphemerisItem(
        epoch=epoch,
        target_name=target.name,
        center_name=center.name,
        true_vector=true_vec,
        astrometric_vector=astro_vec,
        light_time_days=light_time,
        location=location,
    )


def generate_ephemeris(
    request: ObservationRequest,
    ephemeris=None,
    config: LightTimeConfig = DEFAULT_LIGHT_TIME_CONFIG,
) -> list[EphemerisItem]:
    """
    Compute one EphemerisItem per epoch of ``request``, in epoch order.

    Args:
        request: Center, target, epochs and optional observer location.
        ephemeris: Tabulated ephemeris reader, required when either body
            is a tabulated planet.
        config: Light-time iteration settings.
    """
    logger.debug("Generating %d epochs of %s from %s",
                 len(request.epochs), request.target.name, request.center.name)
    return [
        observe(request.target, request.center, epoch, ephemeris,
                request.location, config)
        for epoch in request.epochs
    ]


def format_ephemeris_table(items: list[EphemerisItem]) -> str:
    """Fixed-width text table: date, RA/Dec J2000, distances, light-time."""
    with_horizon = any(item.location is not None for item in items)
    header = (f"{'Date (TDB)':<27} {'RA (J2000)':>15} {'Dec (J2000)':>15} "
              f"{'Dist (AU)':>13} {'True (AU)':>13} {'LT (min)':>10}")
    if with_horizon:
        header += f" {'Alt':>8} {'Az':>8}"
    lines = [header, "-" * len(header)]
    for item in items:
        ra, dec = item.radec_j2000()
        line = (f"{item.epoch.isoformat():<27} {format_hours(ra):>15} "
                f"{format_degrees(dec):>15} {item.distance_au:>13.9f} "
                f"{item.distance_true_au:>13.9f} "
                f"{item.light_time_days * 1440.0:>10.4f}")
        horizon = item.horizontal()
        if horizon is not None:
            line += f" {horizon[0]:>8.3f} {horizon[1]:>8.3f}"
        lines.append(line)
    return "\n".join(lines)
