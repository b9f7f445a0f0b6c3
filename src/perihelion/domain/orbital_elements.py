# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Classical heliocentric orbital elements.

Two parameterizations exist. Planets and asteroids state semi-major axis
and mean longitude (or mean anomaly) at the element epoch; comets state
perihelion distance and the time of perihelion passage. Both reduce to
one osculating conic (q, e, i, ω, Ω, T0) fixed at construction.
Derived quantities are computed on first access and memoised by name.
"""
import math
from enum import Enum

import numpy as np

from perihelion.domain.errors import InvalidElementsError
from perihelion.domain.orbital_mechanics import (
    GaussianConstants,
    gauss_vectors,
    mean_motion_deg_per_day,
    normalize_degrees,
)
from perihelion.domain.time_systems import AstroTime


class OrbitClass(Enum):
    """Conic type, which selects the propagation branch."""
    ELLIPTIC = "elliptic"
    NEAR_PARABOLIC = "near-parabolic"
    PARABOLIC = "parabolic"
    HYPERBOLIC = "hyperbolic"


class Parameterization(Enum):
    """Which element pair pins the body's place on its orbit."""
    MEAN_LONGITUDE = "mean-longitude"
    PERIHELION_TIME = "perihelion-time"


def classify_orbit(e: float) -> OrbitClass:
    """Orbit class from eccentricity alone.

    elliptic e < 0.98, near-parabolic 0.98 <= e < 1, parabolic e == 1,
    hyperbolic e > 1.
    """
    if e < GaussianConstants.NEAR_PARABOLIC_E:
        return OrbitClass.ELLIPTIC
    if e < 1.0:
        return OrbitClass.NEAR_PARABOLIC
    if e == 1.0:
        return OrbitClass.PARABOLIC
    return OrbitClass.HYPERBOLIC


def _require_finite(**values: float | None) -> None:
    for label, value in values.items():
        if value is not None and not math.isfinite(value):
            raise InvalidElementsError(f"{label} must be finite, got {value!r}")


class OrbitalElements:
    """
    Orbital elements of one body, referred to the J2000 ecliptic.

    Immutable after construction except for ``epoch``: reassigning it
    re-points the epoch-dependent quantities (anomalies, radius, mean
    longitude) and clears every memoised value. The orbit itself does
    not move.

    Use the ``comet``, ``planet`` and ``asteroid`` constructors rather
    than calling ``__init__`` directly.
    """

    def __init__(
        self,
        *,
        epoch: AstroTime,
        e: float,
        inclination_deg: float,
        arg_perihelion_deg: float,
        node_deg: float,
        q_au: float | None = None,
        perihelion_time: AstroTime | None = None,
        a_au: float | None = None,
        mean_longitude_deg: float | None = None,
        name: str = "",
        abs_magnitude: float | None = None,
        slope: float | None = None,
    ):
        _require_finite(
            e=e, inclination_deg=inclination_deg,
            arg_perihelion_deg=arg_perihelion_deg, node_deg=node_deg,
            q_au=q_au, a_au=a_au, mean_longitude_deg=mean_longitude_deg,
        )
        if e < 0.0:
            raise InvalidElementsError(f"Eccentricity must be >= 0, got {e}")

        by_time = q_au is not None and perihelion_time is not None
        by_longitude = a_au is not None and mean_longitude_deg is not None
        if by_time == by_longitude:
            raise InvalidElementsError(
                "Exactly one of (q, time of perihelion) or "
                "(a, mean longitude) must be given"
            )

        if by_longitude:
            if a_au <= 0.0:
                raise InvalidElementsError(f"Semi-major axis must be > 0, got {a_au}")
            if e >= 1.0:
                raise InvalidElementsError(
                    f"Mean-longitude elements need e < 1, got {e}"
                )
            self._parameterization = Parameterization.MEAN_LONGITUDE
        else:
            if q_au <= 0.0:
                raise InvalidElementsError(
                    f"Perihelion distance must be > 0, got {q_au}"
                )
            self._parameterization = Parameterization.PERIHELION_TIME

        self._name = name
        self._e = float(e)
        self._inclination_deg = float(inclination_deg)
        self._arg_perihelion_deg = float(arg_perihelion_deg)
        self._node_deg = float(node_deg)
        self._a_given = a_au
        self._q_given = q_au
        self._mean_longitude_given = mean_longitude_deg
        self._abs_magnitude = abs_magnitude
        self._slope = slope
        self._element_epoch = epoch
        self._epoch = epoch
        self._memo: dict[str, object] = {}

        if by_longitude:
            # T0 is fixed here from the element epoch so later epoch
            # reassignment cannot move the orbit.
            n = mean_motion_deg_per_day(a_au)
            mean_anomaly = normalize_degrees(mean_longitude_deg - self.longitude_of_perihelion_deg)
            self._perihelion_time = epoch - mean_anomaly / n
        else:
            self._perihelion_time = perihelion_time

    # -- Constructors --------------------------------------------------------- #

    @classmethod
    def comet(
        cls,
        epoch: AstroTime,
        q_au: float,
        e: float,
        inclination_deg: float,
        arg_perihelion_deg: float,
        node_deg: float,
        perihelion_time: AstroTime,
        name: str = "",
    ) -> "OrbitalElements":
        """Comet-style elements: perihelion distance and passage time."""
        return cls(
            epoch=epoch, e=e, inclination_deg=inclination_deg,
            arg_perihelion_deg=arg_perihelion_deg, node_deg=node_deg,
            q_au=q_au, perihelion_time=perihelion_time, name=name,
        )

    @classmethod
    def planet(
        cls,
        epoch: AstroTime,
        a_au: float,
        e: float,
        inclination_deg: float,
        long_perihelion_deg: float,
        node_deg: float,
        mean_longitude_deg: float,
        name: str = "",
    ) -> "OrbitalElements":
        """Planet-style elements: a, e, i, ϖ, Ω and mean longitude L.

        ω is recovered as ϖ - Ω.
        """
        return cls(
            epoch=epoch, e=e, inclination_deg=inclination_deg,
            arg_perihelion_deg=normalize_degrees(long_perihelion_deg - node_deg),
            node_deg=node_deg, a_au=a_au,
            mean_longitude_deg=mean_longitude_deg, name=name,
        )

    @classmethod
    def asteroid(
        cls,
        epoch: AstroTime,
        a_au: float,
        e: float,
        inclination_deg: float,
        arg_perihelion_deg: float,
        node_deg: float,
        mean_anomaly_deg: float,
        name: str = "",
        abs_magnitude: float | None = None,
        slope: float | None = None,
    ) -> "OrbitalElements":
        """Asteroid-style elements: a, e, i, ω, Ω and mean anomaly M."""
        return cls(
            epoch=epoch, e=e, inclination_deg=inclination_deg,
            arg_perihelion_deg=arg_perihelion_deg, node_deg=node_deg,
            a_au=a_au,
            mean_longitude_deg=mean_anomaly_deg + arg_perihelion_deg + node_deg,
            name=name, abs_magnitude=abs_magnitude, slope=slope,
        )

    # -- Stated elements ------------------------------------------------------ #

    @property
    def name(self) -> str:
        return self._name

    @property
    def e(self) -> float:
        return self._e

    @property
    def inclination_deg(self) -> float:
        return self._inclination_deg

    @property
    def arg_perihelion_deg(self) -> float:
        return self._arg_perihelion_deg

    @property
    def node_deg(self) -> float:
        return self._node_deg

    @property
    def abs_magnitude(self) -> float | None:
        return self._abs_magnitude

    @property
    def slope(self) -> float | None:
        return self._slope

    @property
    def parameterization(self) -> Parameterization:
        return self._parameterization

    @property
    def element_epoch(self) -> AstroTime:
        """Epoch at which the elements were stated."""
        return self._element_epoch

    @property
    def perihelion_time(self) -> AstroTime:
        """Time of perihelion passage T0."""
        return self._perihelion_time

    @property
    def orbit_class(self) -> OrbitClass:
        return classify_orbit(self._e)

    @property
    def epoch(self) -> AstroTime:
        """Instant the epoch-dependent quantities refer to."""
        return self._epoch

    @epoch.setter
    def epoch(self, value: AstroTime) -> None:
        self._epoch = value
        self._memo.clear()

    def _derive(self, key: str, compute):
        if key not in self._memo:
            self._memo[key] = compute()
        return self._memo[key]

    # -- Derived, epoch-independent ------------------------------------------ #

    @property
    def perihelion_distance_au(self) -> float:
        def compute():
            if self._q_given is not None:
                return self._q_given
            return self._a_given * (1.0 - self._e)
        return self._derive("perihelion_distance_au", compute)

    @property
    def semi_major_axis_au(self) -> float | None:
        """a in AU; negative for hyperbolas, None for a parabola."""
        def compute():
            if self._a_given is not None:
                return self._a_given
            if self._e == 1.0:
                return None
            return self._q_given / (1.0 - self._e)
        return self._derive("semi_major_axis_au", compute)

    @property
    def semi_minor_axis_au(self) -> float | None:
        def compute():
            a = self.semi_major_axis_au
            if a is None:
                return None
            return abs(a) * math.sqrt(abs(1.0 - self._e * self._e))
        return self._derive("semi_minor_axis_au", compute)

    @property
    def aphelion_distance_au(self) -> float | None:
        def compute():
            if self._e >= 1.0:
                return None
            return self.semi_major_axis_au * (1.0 + self._e)
        return self._derive("aphelion_distance_au", compute)

    @property
    def mean_motion_deg_per_day(self) -> float | None:
        def compute():
            a = self.semi_major_axis_au
            if a is None:
                return None
            return mean_motion_deg_per_day(abs(a))
        return self._derive("mean_motion_deg_per_day", compute)

    @property
    def period_days(self) -> float | None:
        def compute():
            if self._e >= 1.0:
                return None
            return 360.0 / self.mean_motion_deg_per_day
        return self._derive("period_days", compute)

    @property
    def longitude_of_perihelion_deg(self) -> float:
        def compute():
            return normalize_degrees(self._arg_perihelion_deg + self._node_deg)
        return self._derive("longitude_of_perihelion_deg", compute)

    def gauss_vectors(self) -> tuple[np.ndarray, np.ndarray]:
        """Memoised perifocal basis (P, Q) in the J2000 ecliptic."""
        return self._derive("gauss_vectors", lambda: gauss_vectors(
            math.radians(self._inclination_deg),
            math.radians(self._arg_perihelion_deg),
            math.radians(self._node_deg),
        ))

    # -- Derived at epoch ---------------------------------------------------- #

    @property
    def time_since_perihelion_days(self) -> float:
        return self._epoch - self._perihelion_time

    @property
    def mean_anomaly_deg(self) -> float | None:
        """Mean anomaly at epoch, [0, 360) for ellipses; None for a parabola."""
        def compute():
            n = self.mean_motion_deg_per_day
            if n is None:
                return None
            m = n * self.time_since_perihelion_days
            return normalize_degrees(m) if self._e < 1.0 else m
        return self._derive("mean_anomaly_deg", compute)

    @property
    def mean_longitude_deg(self) -> float | None:
        def compute():
            m = self.mean_anomaly_deg
            if m is None or self._e >= 1.0:
                return None
            return normalize_degrees(m + self.longitude_of_perihelion_deg)
        return self._derive("mean_longitude_deg", compute)

    def _anomaly(self) -> tuple[float, float]:
        from perihelion.domain.propagation import solve_anomaly
        return self._derive(
            "anomaly", lambda: solve_anomaly(self, self._epoch.jd_tdb),
        )

    @property
    def true_anomaly_rad(self) -> float:
        return self._anomaly()[0]

    @property
    def radius_au(self) -> float:
        return self._anomaly()[1]

    @property
    def eccentric_anomaly_rad(self) -> float | None:
        """E at epoch in [0, 2π) for e < 1, None otherwise."""
        def compute():
            if self._e >= 1.0:
                return None
            half_nu = self.true_anomaly_rad / 2.0
            ecc = 2.0 * math.atan2(
                math.sqrt(1.0 - self._e) * math.sin(half_nu),
                math.sqrt(1.0 + self._e) * math.cos(half_nu),
            )
            return ecc % (2.0 * math.pi)
        return self._derive("eccentric_anomaly_rad", compute)

    # -- Perihelion passages -------------------------------------------------- #

    def perihelion(self, num: int = 0) -> AstroTime:
        """Time of the ``num``-th perihelion passage after T0.

        Negative ``num`` counts back. Only periodic orbits have more than
        one passage.
        """
        if num == 0:
            return self._perihelion_time
        period = self.period_days
        if period is None:
            raise ValueError(
                f"{self.orbit_class.value} orbit has a single perihelion passage"
            )
        return self._perihelion_time + num * period

    def next_perihelion(self) -> AstroTime:
        """First perihelion passage at or after the current epoch."""
        period = self.period_days
        if period is None:
            return self._perihelion_time
        passes = math.ceil(self.time_since_perihelion_days / period)
        return self.perihelion(passes)

    # -- Formatting ----------------------------------------------------------- #

    def summary(self) -> str:
        """Element table in the style of a JPL element listing."""
        def fmt(value, unit="", digits=8):
            if value is None:
                return "n/a"
            return f"{value:.{digits}f}{unit}"

        rows = [
            ("Name", self._name or "(unnamed)"),
            ("Orbit", self.orbit_class.value),
            ("Epoch", self._epoch.isoformat()),
            ("T0 (perihelion)", self._perihelion_time.isoformat()),
            ("q", fmt(self.perihelion_distance_au, " AU")),
            ("a", fmt(self.semi_major_axis_au, " AU")),
            ("b", fmt(self.semi_minor_axis_au, " AU")),
            ("Q (aphelion)", fmt(self.aphelion_distance_au, " AU")),
            ("e", fmt(self._e)),
            ("i", fmt(self._inclination_deg, "°", 6)),
            ("ω", fmt(self._arg_perihelion_deg, "°", 6)),
            ("Ω", fmt(self._node_deg, "°", 6)),
            ("ϖ", fmt(self.longitude_of_perihelion_deg, "°", 6)),
            ("n", fmt(self.mean_motion_deg_per_day, "°/day", 8)),
            ("P", fmt(self.period_days, " days", 3)),
            ("M", fmt(self.mean_anomaly_deg, "°", 6)),
            ("ν", fmt(math.degrees(self.true_anomaly_rad), "°", 6)),
            ("r", fmt(self.radius_au, " AU")),
        ]
        width = max(len(label) for label, _ in rows)
        return "\n".join(f"{label:<{width}}  {value}" for label, value in rows)

    def __repr__(self) -> str:
        return (
            f"OrbitalElements(name={self._name!r}, "
            f"q={self.perihelion_distance_au:.8f}, e={self._e:.8f}, "
            f"i={self._inclination_deg:.6f}, ω={self._arg_perihelion_deg:.6f}, "
            f"Ω={self._node_deg:.6f}, T0={self._perihelion_time.jd_tdb:.6f}, "
            f"epoch={self._epoch.jd_tdb:.6f})"
        )
