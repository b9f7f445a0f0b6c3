# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the JPL approximate planetary elements."""
import math

import pytest

from perihelion.domain.coordinate_frames import Frame, cartesian_to_spherical
from perihelion.domain.errors import DateOutOfRangeError
from perihelion.domain.orbital_mechanics import normalize_degrees
from perihelion.domain.planetary_terms import Planet, evaluate, planet_elements
from perihelion.domain.propagation import position_at
from perihelion.domain.time_systems import AstroTime, calendar_to_jd

J2000 = AstroTime(jd_tdb=2451545.0)


class TestPlanetLookup:

    def test_case_insensitive(self):
        assert Planet.from_name(" Jupiter ") is Planet.JUPITER

    def test_earth_moon_barycenter_alias(self):
        assert Planet.from_name("EMB") is Planet.EARTH

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="Vulcan"):
            Planet.from_name("Vulcan")


class TestTableSelection:

    def test_j2000_uses_table_1(self):
        raw = evaluate(Planet.EARTH, J2000)
        assert raw.table == "1"
        assert raw.a_au == 1.00000261
        assert raw.e == 0.01671123
        assert raw.mean_longitude_deg == pytest.approx(100.46457166)
        assert raw.long_perihelion_deg == pytest.approx(102.93768193)

    def test_before_1800_uses_table_2a(self):
        raw = evaluate(Planet.MARS, AstroTime.from_calendar(1700, 1, 1.0))
        assert raw.table == "2a"

    def test_table_1_end_is_exclusive(self):
        end = calendar_to_jd(2051, 1, 1.0)
        assert evaluate(Planet.VENUS, end - 1e-6).table == "1"
        assert evaluate(Planet.VENUS, end).table == "2a"

    def test_rates_are_per_century(self):
        raw = evaluate(Planet.MERCURY, J2000 + 3652.5)
        assert raw.table == "1"
        assert raw.a_au == pytest.approx(0.38709927 + 0.1 * 0.00000037)
        assert raw.inclination_deg == pytest.approx(7.00497902 - 0.1 * 0.00594749)

    def test_mean_anomaly_is_l_minus_varpi_in_table_1(self):
        raw = evaluate(Planet.JUPITER, J2000)
        expected = normalize_degrees(raw.mean_longitude_deg - raw.long_perihelion_deg)
        assert raw.mean_anomaly_deg == pytest.approx(expected, abs=1e-12)

    def test_angles_normalized(self):
        raw = evaluate(Planet.MARS, J2000)
        for angle in (raw.mean_longitude_deg, raw.long_perihelion_deg,
                      raw.node_deg, raw.mean_anomaly_deg):
            assert 0.0 <= angle < 360.0


class TestExtraTerms:

    def test_outer_planet_terms_added_with_table_2a(self):
        """Jupiter in 1000 AD gets b·T² + c·cos(fT) + s·sin(fT)."""
        time = AstroTime.from_calendar(1000, 1, 1.0)
        t = (time.jd_tdb - 2451545.0) / 36525.0
        raw = evaluate(Planet.JUPITER, time)
        base = (34.33479152 + 3034.90371757 * t) - (14.27495244 + 0.18199196 * t)
        ft = math.radians(38.35125 * t)
        extra = -0.00012452 * t * t + 0.0606406 * math.cos(ft) - 0.35635438 * math.sin(ft)
        assert raw.table == "2a"
        assert raw.mean_anomaly_deg == pytest.approx(
            normalize_degrees(base + extra), abs=1e-8)

    def test_inner_planets_have_no_extra_terms(self):
        time = AstroTime.from_calendar(1000, 1, 1.0)
        raw = evaluate(Planet.VENUS, time)
        t = (time.jd_tdb - 2451545.0) / 36525.0
        base = (181.9797085 + 58517.8156026 * t) - (131.76755713 + 0.05679648 * t)
        assert raw.mean_anomaly_deg == pytest.approx(normalize_degrees(base), abs=1e-8)

    def test_elements_carry_corrected_anomaly(self):
        time = AstroTime.from_calendar(1000, 1, 1.0)
        raw = evaluate(Planet.SATURN, time)
        el = planet_elements(Planet.SATURN, time)
        assert el.mean_anomaly_deg == pytest.approx(raw.mean_anomaly_deg, abs=1e-8)


class TestDateRange:

    @pytest.mark.parametrize("year", [-3500, 3500])
    def test_outside_window_raises(self, year):
        with pytest.raises(DateOutOfRangeError, match="3000 BC - 3000 AD"):
            evaluate(Planet.EARTH, AstroTime.from_calendar(year, 1, 1.0))

    def test_window_end_exclusive(self):
        with pytest.raises(DateOutOfRangeError):
            evaluate(Planet.NEPTUNE, calendar_to_jd(3001, 1, 1.0))

    def test_window_start_inclusive(self):
        assert evaluate(Planet.NEPTUNE, calendar_to_jd(-2999, 1, 1.0)).table == "2a"

    def test_out_of_range_is_value_error(self):
        with pytest.raises(ValueError):
            planet_elements(Planet.PLUTO, calendar_to_jd(-4000, 1, 1.0))


class TestPlanetElements:

    def test_named_after_planet(self):
        assert planet_elements(Planet.MARS, J2000).name == "Mars"

    def test_epoch_is_evaluation_time(self):
        el = planet_elements(Planet.MARS, J2000 + 10.0)
        assert el.epoch == J2000 + 10.0

    def test_earth_longitude_at_j2000(self):
        """The Earth-Moon barycenter sits near ecliptic longitude 100.4°."""
        el = planet_elements(Planet.EARTH, J2000)
        state = position_at(el, J2000, Frame.ECLIPTIC_J2000).state
        lon, lat, dist = cartesian_to_spherical(state.position)
        assert math.degrees(lon) == pytest.approx(100.4, abs=0.2)
        assert abs(math.degrees(lat)) < 0.01
        assert dist == pytest.approx(0.983, abs=0.002)

    def test_jupiter_distance(self):
        el = planet_elements(Planet.JUPITER, J2000)
        r = position_at(el, J2000).radius_au
        assert 4.95 < r < 5.46
