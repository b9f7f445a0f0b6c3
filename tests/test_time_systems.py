# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for calendar conversion and the UTC → TT → TDB chain."""
from datetime import datetime, timezone

import pytest

from perihelion.domain.time_systems import (
    AstroTime,
    TimeScale,
    calendar_to_jd,
    jd_to_calendar,
    utc_to_tai_seconds,
)


class TestCalendarToJd:

    @pytest.mark.parametrize("date,expected", [
        ((2000, 1, 1.5), 2451545.0),
        ((1957, 10, 4.81), 2436116.31),
        ((333, 1, 27.5), 1842713.0),
        ((-1000, 7, 12.5), 1356001.0),
        ((1582, 10, 15.0), 2299160.5),
        ((1582, 10, 4.0), 2299159.5),
    ])
    def test_reference_dates(self, date, expected):
        assert calendar_to_jd(*date) == pytest.approx(expected, abs=1e-9)

    def test_year_zero_is_1bc(self):
        """Astronomical year 0 precedes year 1 by 366 days (Julian leap year)."""
        assert calendar_to_jd(1, 1, 1.0) - calendar_to_jd(0, 1, 1.0) == 366.0

    @pytest.mark.parametrize("jd", [2451545.0, 2436116.31, 1842713.0, 1356001.0])
    def test_inverse(self, jd):
        year, month, day = jd_to_calendar(jd)
        assert calendar_to_jd(year, month, day) == pytest.approx(jd, abs=1e-9)

    def test_jd_to_calendar_reference(self):
        year, month, day = jd_to_calendar(2436116.31)
        assert (year, month) == (1957, 10)
        assert day == pytest.approx(4.81, abs=1e-9)


class TestLeapSeconds:

    @pytest.mark.parametrize("dt,expected", [
        (datetime(1972, 1, 1), 10.0),
        (datetime(1999, 6, 1), 32.0),
        (datetime(2016, 12, 31, 23, 59), 36.0),
        (datetime(2017, 1, 1), 37.0),
        (datetime(2030, 1, 1), 37.0),
    ])
    def test_table_lookup(self, dt, expected):
        assert utc_to_tai_seconds(dt) == expected

    def test_before_1972_undefined(self):
        with pytest.raises(ValueError, match="1972"):
            utc_to_tai_seconds(datetime(1971, 12, 31))


class TestAstroTime:

    def test_from_utc_at_j2000(self):
        """UTC noon 2000-01-01 is TT + 64.184 s."""
        t = AstroTime.from_utc(datetime(2000, 1, 1, 12, tzinfo=timezone.utc))
        assert t.to_julian_date_tt() == pytest.approx(
            2451545.0 + 64.184 / 86400.0, abs=1e-9)
        assert abs(t.jd_tdb - t.to_julian_date_tt()) * 86400.0 < 0.002

    def test_naive_datetime_is_utc(self):
        aware = AstroTime.from_utc(datetime(2010, 5, 5, tzinfo=timezone.utc))
        assert AstroTime.from_utc(datetime(2010, 5, 5)) == aware

    def test_utc_round_trip(self):
        dt = datetime(2024, 3, 1, 6, 30, 15, 250000, tzinfo=timezone.utc)
        assert AstroTime.from_utc(dt).to_utc_datetime() == dt

    def test_tt_scale_round_trip(self):
        t = AstroTime.from_julian_date(2460000.25, TimeScale.TT)
        assert t.to_julian_date_tt() == pytest.approx(2460000.25, abs=1e-11)

    def test_utc_scale_julian_date(self):
        via_jd = AstroTime.from_julian_date(2451545.0, TimeScale.UTC)
        via_dt = AstroTime.from_utc(datetime(2000, 1, 1, 12, tzinfo=timezone.utc))
        assert via_jd.jd_tdb == pytest.approx(via_dt.jd_tdb, abs=1e-9)

    def test_mjd(self):
        assert AstroTime.from_mjd(51544.5) == AstroTime(2451545.0)
        assert AstroTime(2451545.0).to_mjd() == 51544.5

    def test_centuries(self):
        assert AstroTime(2451545.0 + 36525.0).to_julian_centuries_tdb() == 1.0

    def test_calendar(self):
        assert AstroTime.from_calendar(1986, 2, 9.5).calendar() == (1986, 2, 9.5)

    def test_isoformat(self):
        assert AstroTime(2451545.0).isoformat() == "2000-01-01 12:00:00.000 TDB"
        assert str(AstroTime(2451545.25)) == "2000-01-01 18:00:00.000 TDB"

    def test_isoformat_rounds_to_next_day(self):
        assert AstroTime(2451545.4999999999).isoformat() == "2000-01-02 00:00:00.000 TDB"

    def test_isoformat_ancient(self):
        assert AstroTime.from_calendar(-1000, 7, 12.5).isoformat() == \
            "-1000-07-12 12:00:00.000 TDB"

    def test_isoformat_negative_year_is_padded(self):
        assert AstroTime.from_calendar(-999, 3, 1.5).isoformat() == \
            "-0999-03-01 12:00:00.000 TDB"
        assert AstroTime.from_calendar(0, 3, 1.5).isoformat() == \
            "0000-03-01 12:00:00.000 TDB"

    def test_arithmetic(self):
        t = AstroTime(2451545.0)
        later = t + 1.5
        assert later.jd_tdb == 2451546.5
        assert later - t == 1.5
        assert (later - 0.5).jd_tdb == 2451546.0

    def test_ordering(self):
        assert AstroTime(1.0) < AstroTime(2.0)
        assert sorted([AstroTime(3.0), AstroTime(1.0)])[0] == AstroTime(1.0)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            AstroTime(2451545.0).jd_tdb = 0.0
