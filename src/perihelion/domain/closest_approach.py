# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Time and distance of closest approach between two bodies.

Derivative-free bracket refinement. Each pass samples the separation at
five equally spaced times across the bracket and fits the five-point
interpolating polynomial (Meeus, Astronomical Algorithms, ch. 3). When
its fourth difference K is negligible the polynomial's minimum is
accepted; otherwise the bracket shrinks to one sample spacing on either
side of the smallest sample.

An exhausted pass budget is not an error. The best candidate seen, a
sample or the extremum of a rejected fit, is returned with
``converged=False`` and a warning is logged; callers should treat such
a result as approximate.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable

from perihelion.domain.bodies import Body, separation
from perihelion.domain.time_systems import AstroTime

logger = logging.getLogger(__name__)

_SAMPLES = 5
_EXTREMUM_TOLERANCE = 1e-12
_EXTREMUM_MAX_ITERATIONS = 50


@dataclass(frozen=True)
class ApproachSearchConfig:
    """Settings of the closest-approach search.

    Attributes:
        curvature_tolerance: |K| below which the polynomial fit is trusted.
        max_iterations: Bracket refinement passes before giving up.
    """
    curvature_tolerance: float = 1e-9
    max_iterations: int = 18


DEFAULT_APPROACH_CONFIG = ApproachSearchConfig()


@dataclass(frozen=True)
class ClosestApproach:
    """Result of a closest-approach search.

    ``converged`` is False when the pass budget ran out; the time and
    distance are then those of the best sample or fitted extremum seen.
    """
    jd_tdb: float
    distance_au: float
    converged: bool
    iterations: int

    @property
    def time(self) -> AstroTime:
        return AstroTime(self.jd_tdb)


@dataclass
class _SearchBracket:
    """Current [lo, hi] interval and its five samples."""
    lo: float
    hi: float
    times: list[float]
    values: list[float]

    @staticmethod
    def sample(fn: Callable[[float], float], lo: float, hi: float) -> "_SearchBracket":
        step = (hi - lo) / (_SAMPLES - 1)
        times = [lo + k * step for k in range(_SAMPLES)]
        times[-1] = hi
        return _SearchBracket(lo=lo, hi=hi, times=times,
                              values=[fn(t) for t in times])

    @property
    def step(self) -> float:
        return (self.hi - self.lo) / (_SAMPLES - 1)

    def lowest_interior(self) -> int:
        """Index of the smallest sample, kept off the two ends."""
        idx = min(range(_SAMPLES), key=self.values.__getitem__)
        return min(max(idx, 1), _SAMPLES - 2)


@dataclass(frozen=True)
class _FivePointFit:
    """Differences of five equally spaced values (Meeus eq. 3.8-3.10).

    The polynomial is parameterised by n, the offset from the middle
    sample in units of the spacing.
    """
    y3: float
    b: float
    c: float
    f: float
    h: float
    j: float
    k: float

    @staticmethod
    def from_values(y: list[float]) -> "_FivePointFit":
        y1, y2, y3, y4, y5 = y
        a, b, c, d = y2 - y1, y3 - y2, y4 - y3, y5 - y4
        e, f, g = b - a, c - b, d - c
        h, j = f - e, g - f
        return _FivePointFit(y3=y3, b=b, c=c, f=f, h=h, j=j, k=j - h)

    def value(self, n: float) -> float:
        n2 = n * n
        return (self.y3
                + n / 2.0 * (self.b + self.c)
                + n2 / 2.0 * self.f
                + n * (n2 - 1.0) / 12.0 * (self.h + self.j)
                + n2 * (n2 - 1.0) / 24.0 * self.k)

    def curvature(self, n: float) -> float:
        """Second derivative with respect to n."""
        return (self.f
                + n * (self.h + self.j) / 2.0
                + (6.0 * n * n - 1.0) / 12.0 * self.k)

    def extremum(self) -> float | None:
        """n at which the derivative vanishes, None when the fit is degenerate.

        Fixed-point iteration n ← (6B + 6C - H - J + 3n²(H+J) + 2n³K) / (K - 12F)
        from n = 0. Only extrema inside the sampled span count.
        """
        denominator = self.k - 12.0 * self.f
        if denominator == 0.0:
            return None
        n = 0.0
        for _ in range(_EXTREMUM_MAX_ITERATIONS):
            n_next = (6.0 * self.b + 6.0 * self.c - self.h - self.j
                      + 3.0 * n * n * (self.h + self.j)
                      + 2.0 * n * n * n * self.k) / denominator
            if not math.isfinite(n_next) or abs(n_next) > 2.0:
                return None
            if abs(n_next - n) <= _EXTREMUM_TOLERANCE:
                return n_next
            n = n_next
        return None


def minimize_separation(
    separation_fn: Callable[[float], float],
    t_lo: float,
    t_hi: float,
    config: ApproachSearchConfig = DEFAULT_APPROACH_CONFIG,
) -> ClosestApproach:
    """
    Minimise a black-box separation function over [t_lo, t_hi].

    Args:
        separation_fn: Distance (AU) as a function of TDB Julian date.
        t_lo: Start of the search interval.
        t_hi: End of the search interval.
        config: Curvature tolerance and pass budget.

    Returns:
        ClosestApproach; the reported distance is separation_fn evaluated
        at the reported time, not the interpolated value.
    """
    if not t_hi > t_lo:
        raise ValueError(f"Empty search interval [{t_lo}, {t_hi}]")

    best_time, best_dist = t_lo, math.inf
    lo, hi = t_lo, t_hi

    for iteration in range(1, config.max_iterations + 1):
        bracket = _SearchBracket.sample(separation_fn, lo, hi)
        for t, d in zip(bracket.times, bracket.values):
            if d < best_dist:
                best_time, best_dist = t, d

        fit = _FivePointFit.from_values(bracket.values)
        n = fit.extremum()
        if n is not None and fit.curvature(n) > 0.0:
            t_star = bracket.times[2] + n * bracket.step
            dist = separation_fn(t_star)
            if abs(fit.k) < config.curvature_tolerance:
                logger.debug("Closest approach at JD %.8f (%.10f AU), pass %d",
                             t_star, dist, iteration)
                return ClosestApproach(jd_tdb=t_star, distance_au=dist,
                                       converged=True, iterations=iteration)
            # Rejected fits still yield a candidate for a degraded result.
            if dist < best_dist:
                best_time, best_dist = t_star, dist

        mid = bracket.times[bracket.lowest_interior()]
        lo, hi = mid - bracket.step, mid + bracket.step

    logger.warning(
        "Closest-approach search did not converge in %d passes; "
        "returning best candidate at JD %.6f (%.8f AU)",
        config.max_iterations, best_time, best_dist,
    )
    return ClosestApproach(jd_tdb=best_time, distance_au=best_dist,
                           converged=False, iterations=config.max_iterations)


def find_closest_approach(
    body_a: Body,
    body_b: Body,
    t_lo: AstroTime | float,
    t_hi: AstroTime | float,
    ephemeris=None,
    config: ApproachSearchConfig = DEFAULT_APPROACH_CONFIG,
) -> ClosestApproach:
    """
    Closest approach of two bodies between ``t_lo`` and ``t_hi``.

    Separation is the geometric distance (no light-time). Two tabulated
    planets are differenced by the ephemeris reader directly.
    """
    lo = t_lo.jd_tdb if isinstance(t_lo, AstroTime) else float(t_lo)
    hi = t_hi.jd_tdb if isinstance(t_hi, AstroTime) else float(t_hi)
    return minimize_separation(
        lambda jd: separation(body_a, body_b, jd, ephemeris), lo, hi, config,
    )
