# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Heliocentric orbital mechanics functions.

Kepler's equation for elliptic orbits, the Landgraf time-of-flight method
for near-parabolic and hyperbolic orbits, Barker's equation for parabolic
orbits, and the perifocal-to-ecliptic rotation shared by all of them.
Units: AU, days, radians unless a name says otherwise.
"""
import math
from dataclasses import dataclass

import numpy as np

from perihelion.domain.errors import NumericalDivergenceError


@dataclass(frozen=True)
class _GaussianConstants:
    """Heliocentric constants in the Gaussian (AU, day, solar mass) system."""
    K_GAUSS: float = 0.01720209895               # rad/day (Gaussian gravitational constant)
    GM_SUN: float = 0.01720209895 ** 2           # AU³/day²
    MEAN_MOTION_DEG: float = 0.9856076686        # deg/day for a = 1 AU
    LIGHT_TIME_PER_AU: float = 0.0057755183      # day/AU
    NEAR_PARABOLIC_E: float = 0.98               # Landgraf branch threshold
    OBLIQUITY_J2000_DEG: float = 23.43928        # mean obliquity at J2000
    J2000_JD: float = 2451545.0
    DAYS_PER_CENTURY: float = 36525.0


GaussianConstants: _GaussianConstants = _GaussianConstants()

_TWO_PI = 2.0 * math.pi

# Newton on Kepler's equation stops once the correction is at the ulp level.
_KEPLER_TOLERANCE = 1e-14
_KEPLER_MAX_ITERATIONS = 100

# 3k/sqrt(2), the Barker's equation constant.
_BARKER_W = 3.0 * GaussianConstants.K_GAUSS / math.sqrt(2.0)


@dataclass(frozen=True)
class LandgrafLimits:
    """Truncation and iteration bounds of the Landgraf solver.

    Attributes:
        term_tolerance: Series term (and s correction) magnitude that
            counts as converged.
        max_series_terms: Series index at which summation is abandoned.
        max_iterations: Outer refinement passes before giving up.
        divergence_magnitude: Series term magnitude treated as divergence.
    """
    term_tolerance: float = 1e-9
    max_series_terms: int = 50
    max_iterations: int = 50
    divergence_magnitude: float = 1e4


DEFAULT_LANDGRAF_LIMITS = LandgrafLimits()


def normalize_angle(angle_rad: float) -> float:
    """Reduce an angle to [0, 2π)."""
    reduced = math.fmod(angle_rad, _TWO_PI)
    if reduced < 0.0:
        reduced += _TWO_PI
    if reduced >= _TWO_PI:
        reduced = 0.0
    return reduced


def normalize_degrees(angle_deg: float) -> float:
    """Reduce an angle to [0, 360)."""
    reduced = math.fmod(angle_deg, 360.0)
    if reduced < 0.0:
        reduced += 360.0
    if reduced >= 360.0:
        reduced = 0.0
    return reduced


def mean_motion_deg_per_day(a_au: float) -> float:
    """Kepler's third law: n = 0.9856076686 / a^1.5 degrees per day."""
    return GaussianConstants.MEAN_MOTION_DEG / (a_au * math.sqrt(a_au))


def solve_kepler(mean_anomaly_rad: float, e: float) -> float:
    """
    Solve Kepler's equation M = E - e·sin(E) for the eccentric anomaly.

    Newton iteration seeded with E0 = M + e·sin(M) on M reduced to (-π, π],
    run until the correction is at machine precision. The returned E keeps
    the full turns of the input, so E - e·sin(E) reproduces M itself.

    Args:
        mean_anomaly_rad: Mean anomaly (radians, any magnitude).
        e: Eccentricity, 0 <= e < 1.

    Returns:
        Eccentric anomaly (radians).

    Raises:
        NumericalDivergenceError: Iteration produced non-finite values or
            failed to settle.
    """
    if not math.isfinite(mean_anomaly_rad):
        raise NumericalDivergenceError(
            f"Non-finite mean anomaly {mean_anomaly_rad!r}"
        )
    m = math.remainder(mean_anomaly_rad, _TWO_PI)
    turns = mean_anomaly_rad - m

    ecc_anomaly = m + e * math.sin(m)
    for _ in range(_KEPLER_MAX_ITERATIONS):
        delta = (m - (ecc_anomaly - e * math.sin(ecc_anomaly))) / (
            1.0 - e * math.cos(ecc_anomaly)
        )
        ecc_anomaly += delta
        if not math.isfinite(ecc_anomaly):
            raise NumericalDivergenceError(
                f"Kepler iteration diverged for M={mean_anomaly_rad}, e={e}"
            )
        if abs(delta) <= _KEPLER_TOLERANCE:
            return ecc_anomaly + turns
    raise NumericalDivergenceError(
        f"Kepler iteration did not converge in {_KEPLER_MAX_ITERATIONS} "
        f"steps for M={mean_anomaly_rad}, e={e}"
    )


def eccentric_to_true_anomaly(ecc_anomaly_rad: float, e: float) -> float:
    """
    True anomaly from eccentric anomaly, normalized to [0, 2π).

    tan(ν/2) = sqrt((1+e)/(1-e))·tan(E/2), evaluated with atan2 so the
    quadrant follows E.
    """
    half = ecc_anomaly_rad / 2.0
    nu = 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(half),
        math.sqrt(1.0 - e) * math.cos(half),
    )
    return normalize_angle(nu)


def solve_landgraf(
    q_au: float,
    e: float,
    tau_days: float,
    limits: LandgrafLimits = DEFAULT_LANDGRAF_LIMITS,
) -> tuple[float, float]:
    """
    Landgraf time-of-flight solution near e = 1 (Meeus, ch. 35).

    Starts from the exact parabolic solution and corrects it with a series
    in g = (1-e)/(1+e). Valid for near-parabolic ellipses and hyperbolas
    alike; fails when the series stops converging far from perihelion.

    Args:
        q_au: Perihelion distance (AU).
        e: Eccentricity.
        tau_days: Time since perihelion passage (days), negative before it.
        limits: Series truncation and iteration bounds.

    Returns:
        (true anomaly in [0, 2π), radius in AU)

    Raises:
        NumericalDivergenceError: Series or outer iteration exceeded its cap.
    """
    if tau_days == 0.0:
        return 0.0, q_au

    tol = limits.term_tolerance
    q1 = GaussianConstants.K_GAUSS * math.sqrt((1.0 + e) / q_au) / (2.0 * q_au)
    g = (1.0 - e) / (1.0 + e)
    q2 = q1 * tau_days

    s = 2.0 / (3.0 * abs(q2))
    s = 2.0 / math.tan(2.0 * math.atan(math.tan(math.atan(s) / 2.0) ** (1.0 / 3.0)))
    if tau_days < 0.0:
        s = -s

    if e != 1.0:
        passes = 0
        while True:
            s0 = s
            z = 1
            y = s * s
            g1 = -y * s
            q3 = q2 + 2.0 * g * s * y / 3.0
            while True:
                z += 1
                g1 = -g1 * g * y
                z1 = (z - (z + 1) * g) / (2 * z + 1)
                f = z1 * g1
                q3 += f
                if z > limits.max_series_terms or abs(f) > limits.divergence_magnitude:
                    raise NumericalDivergenceError(
                        f"Landgraf series diverged (q={q_au}, e={e}, tau={tau_days})"
                    )
                if abs(f) <= tol:
                    break

            passes += 1
            if passes > limits.max_iterations:
                raise NumericalDivergenceError(
                    f"Landgraf iteration exceeded {limits.max_iterations} passes "
                    f"(q={q_au}, e={e}, tau={tau_days})"
                )

            for _ in range(limits.max_iterations):
                s1 = s
                s = (2.0 * s * s * s / 3.0 + q3) / (s * s + 1.0)
                if abs(s - s1) <= tol:
                    break
            else:
                raise NumericalDivergenceError(
                    f"Landgraf s refinement did not settle (q={q_au}, e={e})"
                )

            if abs(s - s0) <= tol:
                break

    nu = 2.0 * math.atan(s)
    r = q_au * (1.0 + e) / (1.0 + e * math.cos(nu))
    if not (math.isfinite(r) and r > 0.0):
        raise NumericalDivergenceError(
            f"Landgraf radius non-physical: r={r} (q={q_au}, e={e}, tau={tau_days})"
        )
    return normalize_angle(nu), r


def solve_parabolic(q_au: float, tau_days: float) -> tuple[float, float]:
    """
    Barker's equation for an exactly parabolic orbit.

    W = 3k/sqrt(2)·τ/q^1.5, s = Y - 1/Y with Y = cbrt(W/2 + sqrt(W²/4 + 1)).

    Returns:
        (true anomaly in [0, 2π), radius in AU)
    """
    if tau_days == 0.0:
        return 0.0, q_au
    w = _BARKER_W * tau_days / (q_au * math.sqrt(q_au))
    y = (w / 2.0 + math.sqrt(w * w / 4.0 + 1.0)) ** (1.0 / 3.0)
    s = y - 1.0 / y
    nu = 2.0 * math.atan(s)
    r = q_au * (1.0 + s * s)
    if not math.isfinite(r):
        raise NumericalDivergenceError(
            f"Parabolic solution non-finite (q={q_au}, tau={tau_days})"
        )
    return normalize_angle(nu), r


def gauss_vectors(
    i_rad: float,
    arg_peri_rad: float,
    node_rad: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Perifocal basis vectors P (toward perihelion) and Q in the ecliptic frame.

    Args:
        i_rad: Inclination to the ecliptic (radians).
        arg_peri_rad: Argument of perihelion ω (radians).
        node_rad: Longitude of the ascending node Ω (radians).

    Returns:
        (P, Q) as unit 3-vectors.
    """
    cO, sO = math.cos(node_rad), math.sin(node_rad)
    co, so = math.cos(arg_peri_rad), math.sin(arg_peri_rad)
    ci, si = math.cos(i_rad), math.sin(i_rad)

    p_vec = np.array([
        co * cO - so * sO * ci,
        co * sO + so * cO * ci,
        so * si,
    ])
    q_vec = np.array([
        -so * cO - co * sO * ci,
        -so * sO + co * cO * ci,
        co * si,
    ])
    return p_vec, q_vec


def conic_state(
    q_au: float,
    e: float,
    nu_rad: float,
    r_au: float,
    p_vec: np.ndarray,
    q_vec: np.ndarray,
    mu: float = GaussianConstants.GM_SUN,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Position and velocity on a conic from true anomaly and radius.

    Perifocal position (r·cos ν, r·sin ν, 0) and velocity
    sqrt(μ/p)·(-sin ν, e + cos ν, 0) with p = q(1+e), mapped through the
    Gauss vectors.

    Returns:
        (position in AU, velocity in AU/day), both in the frame of P and Q.
    """
    cos_nu = math.cos(nu_rad)
    sin_nu = math.sin(nu_rad)
    semi_latus = q_au * (1.0 + e)
    v_factor = math.sqrt(mu / semi_latus)

    pos = r_au * cos_nu * p_vec + r_au * sin_nu * q_vec
    vel = -v_factor * sin_nu * p_vec + v_factor * (e + cos_nu) * q_vec
    return pos, vel


def state_vector_to_elements(
    position_au: list[float] | tuple[float, ...],
    velocity_au_day: list[float] | tuple[float, ...],
    mu: float = GaussianConstants.GM_SUN,
) -> dict[str, float | None]:
    """
    Classical elements from a heliocentric state vector.

    Works for every conic: the perihelion distance comes from the
    semi-latus rectum, so nothing diverges at e = 1.

    Args:
        position_au: Position [x, y, z] (AU).
        velocity_au_day: Velocity [vx, vy, vz] (AU/day).
        mu: Gravitational parameter (AU³/day²).

    Returns:
        Dict with q_au, a_au (None when parabolic), e, inclination_deg,
        node_deg, arg_perihelion_deg, true_anomaly_deg.
    """
    r_vec = np.array(position_au, dtype=float)
    v_vec = np.array(velocity_au_day, dtype=float)
    r = float(np.linalg.norm(r_vec))
    v2 = float(np.dot(v_vec, v_vec))
    rv = float(np.dot(r_vec, v_vec))

    h_vec = np.cross(r_vec, v_vec)
    h = float(np.linalg.norm(h_vec))
    n_vec = np.array([-h_vec[1], h_vec[0], 0.0])
    n = float(np.linalg.norm(n_vec))

    e_vec = ((v2 - mu / r) * r_vec - rv * v_vec) / mu
    e = float(np.linalg.norm(e_vec))

    semi_latus = h * h / mu
    q = semi_latus / (1.0 + e)
    energy = v2 / 2.0 - mu / r
    a = None if abs(energy) < 1e-15 else -mu / (2.0 * energy)

    inc = math.acos(max(-1.0, min(1.0, float(h_vec[2]) / h)))

    if n > 1e-12:
        node = math.atan2(float(n_vec[1]), float(n_vec[0]))
    else:
        node = 0.0

    if e > 1e-12:
        if n > 1e-12:
            cos_w = float(np.dot(n_vec, e_vec)) / (n * e)
            arg_peri = math.acos(max(-1.0, min(1.0, cos_w)))
            if e_vec[2] < 0.0:
                arg_peri = _TWO_PI - arg_peri
        else:
            arg_peri = math.atan2(float(e_vec[1]), float(e_vec[0]))
            if h_vec[2] < 0.0:
                arg_peri = _TWO_PI - arg_peri
        cos_nu = float(np.dot(e_vec, r_vec)) / (e * r)
        nu = math.acos(max(-1.0, min(1.0, cos_nu)))
        if rv < 0.0:
            nu = _TWO_PI - nu
    else:
        arg_peri = 0.0
        nu = math.atan2(float(r_vec[1]), float(r_vec[0])) - node

    return {
        "q_au": q,
        "a_au": a,
        "e": e,
        "inclination_deg": math.degrees(inc),
        "node_deg": math.degrees(normalize_angle(node)),
        "arg_perihelion_deg": math.degrees(normalize_angle(arg_peri)),
        "true_anomaly_deg": math.degrees(normalize_angle(nu)),
    }
