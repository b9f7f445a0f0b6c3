# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Two-body propagation of orbital elements to an arbitrary time.

The branch is chosen from the eccentricity on every call:
Kepler's equation below e = 0.98, Barker's equation at e == 1 exactly,
and the Landgraf method for the rest of the near-parabolic band and for
hyperbolas. Arithmetic failures inside a branch surface as
NumericalDivergenceError, never as NaN in the returned state.
"""
import logging
import math
from dataclasses import dataclass

from perihelion.domain.coordinate_frames import Frame, rotation_between
from perihelion.domain.errors import NumericalDivergenceError
from perihelion.domain.orbital_elements import (
    OrbitClass,
    OrbitalElements,
    classify_orbit,
)
from perihelion.domain.orbital_mechanics import (
    DEFAULT_LANDGRAF_LIMITS,
    LandgrafLimits,
    conic_state,
    eccentric_to_true_anomaly,
    solve_kepler,
    solve_landgraf,
    solve_parabolic,
)
from perihelion.domain.state_vector import StateVector
from perihelion.domain.time_systems import AstroTime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropagationResult:
    """Anomaly, radius and heliocentric state at the requested time."""
    true_anomaly_rad: float
    radius_au: float
    state: StateVector


def _as_jd(time: AstroTime | float) -> float:
    return time.jd_tdb if isinstance(time, AstroTime) else float(time)


def _solve_elliptic(elements: OrbitalElements, tau_days: float) -> tuple[float, float]:
    q = elements.perihelion_distance_au
    if tau_days == 0.0:
        return 0.0, q
    e = elements.e
    a = elements.semi_major_axis_au
    mean_anomaly = math.radians(elements.mean_motion_deg_per_day) * tau_days
    ecc_anomaly = solve_kepler(mean_anomaly, e)
    nu = eccentric_to_true_anomaly(ecc_anomaly, e)
    r = a * (1.0 - e * math.cos(ecc_anomaly))
    return nu, r


def solve_anomaly(
    elements: OrbitalElements,
    jd_tdb: float,
    limits: LandgrafLimits = DEFAULT_LANDGRAF_LIMITS,
) -> tuple[float, float]:
    """
    True anomaly and heliocentric distance at a TDB Julian date.

    Args:
        elements: Orbital elements of the body.
        jd_tdb: Target time (TDB Julian date).
        limits: Landgraf truncation bounds for e >= 0.98.

    Returns:
        (true anomaly in [0, 2π) rad, radius in AU)

    Raises:
        NumericalDivergenceError: The selected solver failed.
    """
    tau = jd_tdb - elements.perihelion_time.jd_tdb
    orbit_class = classify_orbit(elements.e)
    try:
        if orbit_class is OrbitClass.ELLIPTIC:
            nu, r = _solve_elliptic(elements, tau)
        elif orbit_class is OrbitClass.PARABOLIC:
            nu, r = solve_parabolic(elements.perihelion_distance_au, tau)
        else:
            nu, r = solve_landgraf(
                elements.perihelion_distance_au, elements.e, tau, limits,
            )
    except (ZeroDivisionError, OverflowError, ValueError) as exc:
        raise NumericalDivergenceError(
            f"{orbit_class.value} solver failed for {elements.name or 'body'} "
            f"at JD {jd_tdb}: {exc}"
        ) from exc

    if not (math.isfinite(nu) and math.isfinite(r)):
        raise NumericalDivergenceError(
            f"{orbit_class.value} solver returned non-finite values "
            f"(nu={nu}, r={r}) at JD {jd_tdb}"
        )
    return nu, r


def position_at(
    elements: OrbitalElements,
    time: AstroTime | float,
    frame: Frame = Frame.ECLIPTIC_J2000,
    limits: LandgrafLimits = DEFAULT_LANDGRAF_LIMITS,
) -> PropagationResult:
    """
    Propagate elements to ``time`` and return the heliocentric state.

    Args:
        elements: Orbital elements (J2000 ecliptic).
        time: Target instant, AstroTime or TDB Julian date.
        frame: Frame of the returned state vector.
        limits: Landgraf truncation bounds.

    Returns:
        PropagationResult with true anomaly, radius and a StateVector
        holding position (AU) and velocity (AU/day).
    """
    jd = _as_jd(time)
    nu, r = solve_anomaly(elements, jd, limits)
    p_vec, q_vec = elements.gauss_vectors()
    pos, vel = conic_state(elements.perihelion_distance_au, elements.e, nu, r,
                           p_vec, q_vec)
    if frame is not Frame.ECLIPTIC_J2000:
        rot = rotation_between(Frame.ECLIPTIC_J2000, frame)
        pos = rot @ pos
        vel = rot @ vel
    logger.debug("%s at JD %.6f: nu=%.9f r=%.9f",
                 elements.name or "body", jd, nu, r)
    return PropagationResult(
        true_anomaly_rad=nu,
        radius_au=r,
        state=StateVector.from_arrays(pos, vel, frame, jd),
    )
