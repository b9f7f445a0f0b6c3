# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Reference frames and the transforms between them.

Heliocentric and barycentric vectors live in one of two J2000 frames:
the ecliptic (orbital elements are referred to it) and the equator
(ICRF-aligned, the frame of JPL DE ephemerides). RA/Dec of date uses the
IAU 2006 precession model; horizontal coordinates use GMST.
"""
import math
from enum import Enum

import numpy as np

from perihelion.domain.orbital_mechanics import GaussianConstants, normalize_angle

_ARCSEC_TO_RAD: float = math.pi / (180.0 * 3600.0)


class Frame(Enum):
    """Reference frame tag carried by every state vector."""
    ECLIPTIC_J2000 = "ecliptic-J2000"
    EQUATORIAL_J2000 = "equatorial-J2000"


def _rot_x(angle_rad: float) -> np.ndarray:
    """Frame rotation about the x axis."""
    c, s = math.cos(angle_rad), math.sin(angle_rad)
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, c, s],
        [0.0, -s, c],
    ])


def _rot_z(angle_rad: float) -> np.ndarray:
    """Frame rotation about the z axis."""
    c, s = math.cos(angle_rad), math.sin(angle_rad)
    return np.array([
        [c, s, 0.0],
        [-s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


_OBLIQUITY_J2000_RAD = math.radians(GaussianConstants.OBLIQUITY_J2000_DEG)
_ECLIPTIC_TO_EQUATORIAL = _rot_x(-_OBLIQUITY_J2000_RAD)
_EQUATORIAL_TO_ECLIPTIC = _rot_x(_OBLIQUITY_J2000_RAD)


def rotation_between(source: Frame, target: Frame) -> np.ndarray:
    """3x3 matrix taking vectors from ``source`` to ``target``."""
    if source is target:
        return np.eye(3)
    if source is Frame.ECLIPTIC_J2000:
        return _ECLIPTIC_TO_EQUATORIAL
    return _EQUATORIAL_TO_ECLIPTIC


def ecliptic_to_equatorial(vec) -> np.ndarray:
    """Rotate a J2000 ecliptic vector onto the J2000 equator."""
    return _ECLIPTIC_TO_EQUATORIAL @ np.asarray(vec, dtype=float)


def equatorial_to_ecliptic(vec) -> np.ndarray:
    """Rotate a J2000 equatorial vector onto the J2000 ecliptic."""
    return _EQUATORIAL_TO_ECLIPTIC @ np.asarray(vec, dtype=float)


def cartesian_to_spherical(vec) -> tuple[float, float, float]:
    """
    Longitude, latitude and distance of a cartesian vector.

    In the equatorial frame these are right ascension and declination.

    Returns:
        (longitude in [0, 2π) rad, latitude rad, distance)
    """
    x, y, z = (float(c) for c in vec)
    dist = math.sqrt(x * x + y * y + z * z)
    if dist == 0.0:
        return 0.0, 0.0, 0.0
    lon = normalize_angle(math.atan2(y, x))
    lat = math.asin(max(-1.0, min(1.0, z / dist)))
    return lon, lat, dist


def mean_obliquity(t_tt: float) -> float:
    """Mean obliquity of the ecliptic eps_A in radians (IAU 2006).

    IERS Conventions 2010, Eq. 5.40.
    """
    t = t_tt
    epsa = (84381.406
            + t * (-46.836769
                   + t * (-0.0001831
                          + t * (0.00200340
                                 + t * (-0.000000576
                                        + t * (-0.0000000434))))))
    return epsa * _ARCSEC_TO_RAD


def precession_matrix(t_tt: float) -> np.ndarray:
    """IAU 2006 precession matrix using Fukushima-Williams angles.

    Parameters
    ----------
    t_tt : float
        Julian centuries of TT from J2000.0.

    Returns
    -------
    np.ndarray
        3x3 rotation taking J2000 equatorial vectors to the mean equator
        and equinox of date.
    """
    t = t_tt
    gamb = (-0.052928
            + t * (10.556378
                   + t * (0.4932044
                          + t * (-0.00031238
                                 + t * (-0.000002788
                                        + t * 0.0000000260)))))
    phib = (84381.412819
            + t * (-46.811016
                   + t * (0.0511268
                          + t * (0.00053289
                                 + t * (-0.000000440
                                        + t * (-0.0000000176))))))
    psib = (-0.041775
            + t * (5038.481484
                   + t * (1.5584175
                          + t * (-0.00018522
                                 + t * (-0.000026452
                                        + t * (-0.0000000148))))))

    # P = R1(-eps_A) · R3(-psi_bar) · R1(phi_bar) · R3(gamma_bar)
    return (_rot_x(-mean_obliquity(t_tt))
            @ _rot_z(-psib * _ARCSEC_TO_RAD)
            @ _rot_x(phib * _ARCSEC_TO_RAD)
            @ _rot_z(gamb * _ARCSEC_TO_RAD))


def precess_to_date(vec, t_tt: float) -> np.ndarray:
    """J2000 equatorial vector referred to the mean equator of date."""
    return precession_matrix(t_tt) @ np.asarray(vec, dtype=float)


def gmst_rad(jd_ut: float) -> float:
    """
    Greenwich Mean Sidereal Time for a UT1 Julian Date.

    Uses the IAU formula based on Julian centuries from J2000.0:
        GMST(°) = 280.46061837 + 360.98564736629 * (JD - 2451545.0)
                  + 0.000387933 * T² - T³/38710000

    Returns:
        GMST in radians, normalized to [0, 2π).
    """
    days = jd_ut - GaussianConstants.J2000_JD
    t = days / GaussianConstants.DAYS_PER_CENTURY
    gmst_deg = (
        280.46061837
        + 360.98564736629 * days
        + 0.000387933 * t**2
        - t**3 / 38710000.0
    )
    return normalize_angle(math.radians(gmst_deg % 360.0))


def equatorial_to_horizontal(
    ra_rad: float,
    dec_rad: float,
    latitude_deg: float,
    longitude_deg: float,
    jd_ut: float,
) -> tuple[float, float]:
    """
    Altitude and azimuth of an equatorial direction for a ground observer.

    Args:
        ra_rad: Right ascension (radians), equator of date.
        dec_rad: Declination (radians).
        latitude_deg: Geodetic latitude, north positive.
        longitude_deg: Longitude, east positive.
        jd_ut: UT1 Julian Date of the observation.

    Returns:
        (altitude_deg, azimuth_deg) with azimuth measured from north
        through east in [0, 360).
    """
    lat = math.radians(latitude_deg)
    hour_angle = gmst_rad(jd_ut) + math.radians(longitude_deg) - ra_rad

    sin_alt = (math.sin(lat) * math.sin(dec_rad)
               + math.cos(lat) * math.cos(dec_rad) * math.cos(hour_angle))
    alt = math.asin(max(-1.0, min(1.0, sin_alt)))

    az = math.atan2(
        -math.cos(dec_rad) * math.sin(hour_angle),
        math.sin(dec_rad) * math.cos(lat)
        - math.cos(dec_rad) * math.sin(lat) * math.cos(hour_angle),
    )
    return math.degrees(alt), math.degrees(normalize_angle(az))


def format_hours(angle_rad: float) -> str:
    """Right ascension as 'HHh MMm SS.SSs'."""
    total = round(math.degrees(normalize_angle(angle_rad)) / 15.0 * 360000.0)
    total %= 24 * 360000
    hours, rem = divmod(total, 360000)
    minutes, centis = divmod(rem, 6000)
    return f"{hours:02d}h {minutes:02d}m {centis / 100.0:05.2f}s"


def format_degrees(angle_rad: float) -> str:
    """Declination as '+DD° MM' SS.S\"'."""
    sign = "-" if angle_rad < 0.0 else "+"
    total = round(abs(math.degrees(angle_rad)) * 36000.0)
    degrees, rem = divmod(total, 36000)
    minutes, tenths = divmod(rem, 600)
    return f"{sign}{degrees:02d}° {minutes:02d}' {tenths / 10.0:04.1f}\""
