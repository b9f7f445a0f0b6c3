# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Astronomical time: AstroTime value object on the TDB Julian date scale.

Implements the chain UTC → TAI → TT → TDB and calendar ↔ Julian date
conversion on the proleptic Julian/Gregorian calendar used by
astronomers (Julian before 1582-10-15, astronomical year numbering,
so 1 BC is year 0).
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

import numpy as np

# --------------------------------------------------------------------------- #
# Constants
# --------------------------------------------------------------------------- #

_TT_TAI_OFFSET: float = 32.184
"""TT = TAI + 32.184 s (exact, IAU 1991)."""

_J2000_JD: float = 2451545.0
"""Julian Date of J2000.0 epoch."""

_MJD_OFFSET: float = 2400000.5

_SECONDS_PER_DAY: float = 86400.0

_DAYS_PER_JULIAN_CENTURY: float = 36525.0

# First day of the Gregorian calendar as (year, month, day).
_GREGORIAN_START = (1582, 10, 15)

# --------------------------------------------------------------------------- #
# Leap second table: (year, month, TAI-UTC) effective on day 1 of the month
# --------------------------------------------------------------------------- #

_LEAP_SECONDS: tuple[tuple[int, int, float], ...] = (
    (1972, 1, 10.0), (1972, 7, 11.0), (1973, 1, 12.0), (1974, 1, 13.0),
    (1975, 1, 14.0), (1976, 1, 15.0), (1977, 1, 16.0), (1978, 1, 17.0),
    (1979, 1, 18.0), (1980, 1, 19.0), (1981, 7, 20.0), (1982, 7, 21.0),
    (1983, 7, 22.0), (1985, 7, 23.0), (1988, 1, 24.0), (1990, 1, 25.0),
    (1991, 1, 26.0), (1992, 7, 27.0), (1993, 7, 28.0), (1994, 7, 29.0),
    (1996, 1, 30.0), (1997, 7, 31.0), (1999, 1, 32.0), (2006, 1, 33.0),
    (2009, 1, 34.0), (2012, 7, 35.0), (2015, 7, 36.0), (2017, 1, 37.0),
)


class TimeScale(Enum):
    """Time scales accepted when constructing an AstroTime."""
    UTC = "UTC"
    TT = "TT"
    TDB = "TDB"


def utc_to_tai_seconds(dt: datetime) -> float:
    """Return TAI-UTC offset (delta_AT) for a given UTC datetime.

    Uses binary search on the leap second table.
    Raises ValueError for dates before 1972-01-01.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    key = (dt.year, dt.month)

    if key < _LEAP_SECONDS[0][:2]:
        raise ValueError(
            f"UTC date {dt.isoformat()} is before 1972-01-01; "
            "leap second table undefined"
        )

    lo, hi = 0, len(_LEAP_SECONDS) - 1
    result = _LEAP_SECONDS[0][2]
    while lo <= hi:
        mid = (lo + hi) // 2
        if _LEAP_SECONDS[mid][:2] <= key:
            result = _LEAP_SECONDS[mid][2]
            lo = mid + 1
        else:
            hi = mid - 1
    return result


# --------------------------------------------------------------------------- #
# Calendar ↔ Julian Date (Meeus, Astronomical Algorithms, Ch. 7)
# --------------------------------------------------------------------------- #

def calendar_to_jd(year: int, month: int, day: float) -> float:
    """Convert a calendar date to a Julian Date.

    Dates before 1582-10-15 are taken on the Julian calendar. Years use
    astronomical numbering (0 = 1 BC, -1 = 2 BC). The fractional part of
    ``day`` is the time of day.
    """
    gregorian = (year, month, day) >= _GREGORIAN_START
    y, m = year, month
    if m <= 2:
        y -= 1
        m += 12

    if gregorian:
        a = math.floor(y / 100)
        b = 2 - a + math.floor(a / 4)
    else:
        b = 0

    return (math.floor(365.25 * (y + 4716))
            + math.floor(30.6001 * (m + 1))
            + day + b - 1524.5)


def jd_to_calendar(jd: float) -> tuple[int, int, float]:
    """Convert a Julian Date to (year, month, fractional day).

    Inverse of calendar_to_jd; valid for non-negative Julian Dates.
    """
    jd_plus = jd + 0.5
    z = math.floor(jd_plus)
    f = jd_plus - z

    if z < 2299161:
        a = z
    else:
        alpha = math.floor((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - math.floor(alpha / 4)

    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)

    day = b - d - math.floor(30.6001 * e) + f
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715
    return int(year), int(month), day


def datetime_to_jd(dt: datetime) -> float:
    """Convert a UTC datetime to Julian Date (same clock, no scale change)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    day = (dt.day
           + dt.hour / 24.0
           + dt.minute / 1440.0
           + dt.second / 86400.0
           + dt.microsecond / 86400_000_000.0)
    return calendar_to_jd(dt.year, dt.month, day)


def _jd_to_datetime(jd: float) -> datetime:
    """Convert a Julian Date to a UTC datetime, rounded to the millisecond."""
    day_number, ms_of_day = _split_jd(jd)
    year, month, day = jd_to_calendar(day_number - 0.5)
    return (datetime(year, month, int(day), tzinfo=timezone.utc)
            + timedelta(milliseconds=ms_of_day))


def _split_jd(jd: float) -> tuple[int, int]:
    """Split a Julian Date into (civil day number, milliseconds since midnight)."""
    total_ms = round((jd + 0.5) * _SECONDS_PER_DAY * 1000.0)
    return divmod(total_ms, 86_400_000)


# --------------------------------------------------------------------------- #
# TDB-TT conversion (Fairhead & Bretagnon 1990)
# --------------------------------------------------------------------------- #

def _tdb_minus_tt(t_tt_centuries: float) -> float:
    """Compute TDB - TT in seconds using Fairhead & Bretagnon 1990.

    Accurate to ~30 μs. The dominant term is the Earth's orbital eccentricity.

    Parameters
    ----------
    t_tt_centuries : float
        Julian centuries of TT from J2000.0.
    """
    m_earth = float(np.radians(357.5277233 + 35999.160503 * t_tt_centuries))
    l_jupiter = float(np.radians(246.11 + 3034.906 * t_tt_centuries))
    return float(0.001657 * np.sin(m_earth)
                 + 0.000022 * np.sin(l_jupiter - m_earth))


# --------------------------------------------------------------------------- #
# AstroTime value object
# --------------------------------------------------------------------------- #

@dataclass(frozen=True, order=True)
class AstroTime:
    """An instant on the TDB scale, stored as a Julian Date.

    TDB is the argument of every propagation in this package, so the
    element epoch, the observation time and light-time retardation all
    live on this one scale.
    """

    jd_tdb: float
    """TDB Julian Date."""

    # -- Construction ------------------------------------------------------- #

    @staticmethod
    def from_julian_date(jd: float, scale: TimeScale = TimeScale.TDB) -> "AstroTime":
        """Create AstroTime from a Julian Date on the given scale."""
        if scale is TimeScale.TDB:
            return AstroTime(jd_tdb=jd)
        if scale is TimeScale.TT:
            t_tt = (jd - _J2000_JD) / _DAYS_PER_JULIAN_CENTURY
            return AstroTime(jd_tdb=jd + _tdb_minus_tt(t_tt) / _SECONDS_PER_DAY)
        return AstroTime.from_utc(_jd_to_datetime(jd))

    @staticmethod
    def from_mjd(mjd: float, scale: TimeScale = TimeScale.TDB) -> "AstroTime":
        """Create AstroTime from a Modified Julian Date (JD - 2400000.5)."""
        return AstroTime.from_julian_date(mjd + _MJD_OFFSET, scale)

    @staticmethod
    def from_calendar(
        year: int,
        month: int,
        day: float,
        scale: TimeScale = TimeScale.TDB,
    ) -> "AstroTime":
        """Create AstroTime from a calendar date with fractional day."""
        return AstroTime.from_julian_date(calendar_to_jd(year, month, day), scale)

    @staticmethod
    def from_utc(dt: datetime) -> "AstroTime":
        """Create AstroTime from a UTC datetime.

        Conversion chain: UTC → TAI → TT → TDB.
        Naive datetimes are treated as UTC.
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)

        jd_utc = datetime_to_jd(dt)
        tt_offset_s = utc_to_tai_seconds(dt) + _TT_TAI_OFFSET
        jd_tt = jd_utc + tt_offset_s / _SECONDS_PER_DAY
        return AstroTime.from_julian_date(jd_tt, TimeScale.TT)

    # -- Conversions -------------------------------------------------------- #

    def to_julian_date_tt(self) -> float:
        """Return TT Julian Date (single-pass inversion of TDB - TT)."""
        t_approx = (self.jd_tdb - _J2000_JD) / _DAYS_PER_JULIAN_CENTURY
        return self.jd_tdb - _tdb_minus_tt(t_approx) / _SECONDS_PER_DAY

    def to_julian_centuries_tdb(self) -> float:
        """Julian centuries of TDB from J2000.0, the argument of planetary terms."""
        return (self.jd_tdb - _J2000_JD) / _DAYS_PER_JULIAN_CENTURY

    def to_julian_centuries_tt(self) -> float:
        """Julian centuries of TT from J2000.0, the argument of precession."""
        return (self.to_julian_date_tt() - _J2000_JD) / _DAYS_PER_JULIAN_CENTURY

    def to_mjd(self) -> float:
        """Return TDB Modified Julian Date."""
        return self.jd_tdb - _MJD_OFFSET

    def to_utc_datetime(self) -> datetime:
        """Convert to UTC datetime.

        Inverts the UTC → TT chain; delta_AT is looked up at the guessed
        UTC and refined once for dates near a leap second boundary.
        """
        jd_tt = self.to_julian_date_tt()
        delta_at = _LEAP_SECONDS[-1][2]
        for _ in range(2):
            jd_utc = jd_tt - (delta_at + _TT_TAI_OFFSET) / _SECONDS_PER_DAY
            dt_utc = _jd_to_datetime(jd_utc)
            refined = utc_to_tai_seconds(dt_utc)
            if refined == delta_at:
                break
            delta_at = refined
        jd_utc = jd_tt - (delta_at + _TT_TAI_OFFSET) / _SECONDS_PER_DAY
        return _jd_to_datetime(jd_utc)

    def calendar(self) -> tuple[int, int, float]:
        """TDB calendar date as (year, month, fractional day)."""
        return jd_to_calendar(self.jd_tdb)

    def isoformat(self) -> str:
        """TDB calendar date and time, e.g. '2024-03-01 12:00:00.000 TDB'.

        Works for ancient dates that a datetime cannot hold.
        """
        day_number, total_ms = _split_jd(self.jd_tdb)
        year, month, day = jd_to_calendar(day_number - 0.5)
        hours, rem = divmod(total_ms, 3_600_000)
        minutes, rem = divmod(rem, 60_000)
        seconds, millis = divmod(rem, 1000)
        sign = "-" if year < 0 else ""
        return (f"{sign}{abs(year):04d}-{month:02d}-{int(day):02d} "
                f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d} TDB")

    # -- Arithmetic --------------------------------------------------------- #

    def __add__(self, days: float) -> "AstroTime":
        """Shift by a number of TDB days."""
        return AstroTime(jd_tdb=self.jd_tdb + float(days))

    def __sub__(self, other):
        """AstroTime - AstroTime is elapsed days; AstroTime - float shifts back."""
        if isinstance(other, AstroTime):
            return self.jd_tdb - other.jd_tdb
        return AstroTime(jd_tdb=self.jd_tdb - float(other))

    def __str__(self) -> str:
        return self.isoformat()
