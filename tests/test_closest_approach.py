# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the five-point closest-approach search."""
import logging
import math

import pytest

from perihelion.domain.bodies import TabulatedPlanet
from perihelion.domain.closest_approach import (
    ApproachSearchConfig,
    ClosestApproach,
    _FivePointFit,
    find_closest_approach,
    minimize_separation,
)

T0 = 2451545.0
MISS = 0.1
SPEED = 0.005


def _flyby(jd):
    """Straight-line pass: closest at T0, 0.1 AU, 0.005 AU/day."""
    return math.hypot(MISS, SPEED * (jd - T0))


class TestFivePointFit:

    def test_quadratic_extremum(self):
        values = [(n - 0.3) ** 2 + 1.0 for n in (-2, -1, 0, 1, 2)]
        fit = _FivePointFit.from_values(values)
        assert fit.k == pytest.approx(0.0, abs=1e-12)
        assert fit.extremum() == pytest.approx(0.3, abs=1e-12)
        assert fit.value(0.3) == pytest.approx(1.0, abs=1e-12)
        assert fit.curvature(0.3) == pytest.approx(2.0, abs=1e-12)

    def test_flat_data_is_degenerate(self):
        fit = _FivePointFit.from_values([1.0] * 5)
        assert fit.extremum() is None

    def test_extremum_outside_span_rejected(self):
        """A minimum beyond the sampled points does not count."""
        values = [(n - 5.0) ** 2 for n in (-2, -1, 0, 1, 2)]
        assert _FivePointFit.from_values(values).extremum() is None

    def test_interpolates_samples(self):
        values = [3.0, 1.0, 0.5, 0.8, 2.0]
        fit = _FivePointFit.from_values(values)
        for n, y in zip((-2, -1, 0, 1, 2), values):
            assert fit.value(n) == pytest.approx(y, abs=1e-12)


class TestMinimizeSeparation:

    def test_linear_flyby(self):
        """Asymmetric bracket still finds the closest point."""
        result = minimize_separation(_flyby, T0 - 20.0, T0 + 13.0)
        assert result.converged
        assert result.jd_tdb == pytest.approx(T0, abs=1e-6)
        assert result.distance_au == pytest.approx(MISS, abs=1e-9)
        assert result.iterations <= 18

    def test_reported_distance_is_evaluated(self):
        result = minimize_separation(_flyby, T0 - 20.0, T0 + 13.0)
        assert result.distance_au == _flyby(result.jd_tdb)

    def test_result_time(self):
        result = minimize_separation(_flyby, T0 - 20.0, T0 + 13.0)
        assert result.time.jd_tdb == result.jd_tdb

    def test_exhausted_budget_is_degraded(self, caplog):
        """One pass cannot satisfy |K| < 1e-9; the best candidate comes back."""
        config = ApproachSearchConfig(max_iterations=1)
        with caplog.at_level(logging.WARNING,
                             logger="perihelion.domain.closest_approach"):
            result = minimize_separation(_flyby, T0 - 20.0, T0 + 13.0, config)
        assert result.converged is False
        assert result.iterations == 1
        assert T0 - 20.0 <= result.jd_tdb <= T0 + 13.0
        assert result.distance_au <= _flyby(T0 - 3.5)
        assert result.distance_au == _flyby(result.jd_tdb)
        assert "did not converge" in caplog.text

    def test_degraded_result_keeps_rejected_extremum(self):
        """A near-collision keeps |K| large; the fitted minimum still wins."""
        miss, speed = 1e-5, 0.02

        def near_miss(jd):
            return math.hypot(miss, speed * (jd - T0))

        result = minimize_separation(near_miss, T0 - 20.0, T0 + 13.0)
        assert result.jd_tdb == pytest.approx(T0, abs=1e-6)
        assert result.distance_au == pytest.approx(miss, rel=1e-6)
        assert result.distance_au == near_miss(result.jd_tdb)

    def test_empty_interval(self):
        with pytest.raises(ValueError, match="Empty search interval"):
            minimize_separation(_flyby, T0, T0)

    def test_reversed_interval(self):
        with pytest.raises(ValueError):
            minimize_separation(_flyby, T0 + 1.0, T0)

    def test_minimum_at_boundary(self):
        """Monotonic separation converges toward the bracket end."""
        result = minimize_separation(_flyby, T0 + 5.0, T0 + 30.0)
        assert result.jd_tdb == pytest.approx(T0 + 5.0, abs=1.0)
        assert result.distance_au <= _flyby(T0 + 6.0)

    def test_defaults(self):
        config = ApproachSearchConfig()
        assert config.curvature_tolerance == 1e-9
        assert config.max_iterations == 18

    def test_result_frozen(self):
        result = ClosestApproach(T0, 0.1, True, 3)
        with pytest.raises(AttributeError):
            result.converged = False


class TestFindClosestApproach:

    def test_tabulated_pair(self, linear_ephemeris):
        ephemeris = linear_ephemeris({
            "a": ((0.0, MISS, 0.0), (0.0, 0.0, 0.0)),
            "b": ((0.0, 0.0, 0.0), (SPEED, 0.0, 0.0)),
        }, t0=T0)
        result = find_closest_approach(
            TabulatedPlanet("a"), TabulatedPlanet("b"),
            T0 - 20.0, T0 + 13.0, ephemeris,
        )
        assert result.converged
        assert result.jd_tdb == pytest.approx(T0, abs=1e-6)
        assert result.distance_au == pytest.approx(MISS, abs=1e-9)
        assert ephemeris.calls > 0

    def test_tabulated_pair_needs_ephemeris(self):
        with pytest.raises(ValueError, match="tabulated ephemeris"):
            find_closest_approach(TabulatedPlanet("a"), TabulatedPlanet("b"),
                                  T0, T0 + 1.0)

    def test_earth_and_comet_match_dense_scan(self):
        """Both bodies propagated from elements; checked against a 0.02 d scan."""
        from perihelion.domain.bodies import OrbitalElementBody, separation
        from perihelion.domain.orbital_elements import OrbitalElements
        from perihelion.domain.planetary_terms import Planet
        from perihelion.domain.time_systems import AstroTime

        earth = OrbitalElementBody.for_planet(Planet.EARTH)
        comet = OrbitalElementBody("Test comet", elements=OrbitalElements.comet(
            epoch=AstroTime(T0), q_au=0.9, e=0.7, inclination_deg=5.0,
            arg_perihelion_deg=160.0, node_deg=0.0,
            perihelion_time=AstroTime(T0 + 60.0),
        ))
        lo, hi = T0, T0 + 120.0

        result = find_closest_approach(earth, comet, lo, hi)

        scan = [lo + 0.02 * k for k in range(6001)]
        t_scan = min(scan, key=lambda jd: separation(earth, comet, jd))
        assert lo < t_scan < hi
        assert result.jd_tdb == pytest.approx(t_scan, abs=0.02)
        assert result.distance_au <= separation(earth, comet, t_scan) + 1e-9
        assert result.distance_au == separation(earth, comet, result.jd_tdb)
