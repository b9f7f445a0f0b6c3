# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Solar-system bodies as a closed set of kinds.

A body is either a planet read from a tabulated ephemeris or a body
propagated from orbital elements. ``position_at`` switches on the kind.
The tabulated ephemeris is always passed in by the caller; any object
with the ``perihelion.ports.TabulatedEphemeris`` methods will do.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

import numpy as np

from perihelion.domain.coordinate_frames import Frame
from perihelion.domain.orbital_elements import OrbitalElements
from perihelion.domain.planetary_terms import Planet, planet_elements
from perihelion.domain.propagation import position_at as propagate
from perihelion.domain.state_vector import StateVector
from perihelion.domain.time_systems import AstroTime

SOLAR_SYSTEM_BARYCENTER = "ssb"
SUN = "sun"


class BodyKind(Enum):
    TABULATED_PLANET = "tabulated-planet"
    ORBITAL_ELEMENTS = "orbital-elements"


@dataclass(frozen=True)
class TabulatedPlanet:
    """A body whose positions come from a tabulated ephemeris (e.g. JPL DE)."""
    name: str
    kind: BodyKind = field(default=BodyKind.TABULATED_PLANET, init=False)


@dataclass(frozen=True)
class OrbitalElementBody:
    """A body propagated from orbital elements.

    Either fixed ``elements`` (comets, asteroids) or a ``planet`` whose
    mean elements are re-evaluated from the JPL terms at each time.
    """
    name: str
    elements: OrbitalElements | None = None
    planet: Planet | None = None
    kind: BodyKind = field(default=BodyKind.ORBITAL_ELEMENTS, init=False)

    def __post_init__(self):
        if (self.elements is None) == (self.planet is None):
            raise ValueError(
                f"{self.name}: give exactly one of elements or planet"
            )

    @staticmethod
    def from_elements(elements: OrbitalElements) -> "OrbitalElementBody":
        return OrbitalElementBody(name=elements.name or "body", elements=elements)

    @staticmethod
    def for_planet(planet: Planet) -> "OrbitalElementBody":
        return OrbitalElementBody(name=planet.value.capitalize(), planet=planet)

    def elements_at(self, jd_tdb: float) -> OrbitalElements:
        if self.planet is not None:
            return planet_elements(self.planet, jd_tdb)
        return self.elements


Body = Union[TabulatedPlanet, OrbitalElementBody]


def _as_jd(time: AstroTime | float) -> float:
    return time.jd_tdb if isinstance(time, AstroTime) else float(time)


def position_at(body: Body, time: AstroTime | float, ephemeris=None) -> StateVector:
    """
    Position of ``body`` in the J2000 equatorial frame.

    Tabulated planets are barycentric and need ``ephemeris``. Element
    bodies are heliocentric, or barycentric when ``ephemeris`` is given
    (the Sun's barycentric position is added).

    Raises:
        ValueError: A tabulated planet was requested without an ephemeris.
    """
    jd = _as_jd(time)
    if body.kind is BodyKind.TABULATED_PLANET:
        if ephemeris is None:
            raise ValueError(f"{body.name} needs a tabulated ephemeris")
        pos = ephemeris.position(body.name, SOLAR_SYSTEM_BARYCENTER, jd)
        return StateVector.from_arrays(pos, None, Frame.EQUATORIAL_J2000, jd)

    state = propagate(body.elements_at(jd), jd, Frame.EQUATORIAL_J2000).state
    if ephemeris is None:
        return state
    sun = ephemeris.position(SUN, SOLAR_SYSTEM_BARYCENTER, jd)
    return state + StateVector.from_arrays(sun, None, Frame.EQUATORIAL_J2000, jd)


def position_fn(body: Body, ephemeris=None):
    """``position_at`` bound to one body, as a function of TDB Julian date."""
    def at(jd_tdb: float) -> StateVector:
        return position_at(body, jd_tdb, ephemeris)
    return at


def both_tabulated(body_a: Body, body_b: Body) -> bool:
    return (body_a.kind is BodyKind.TABULATED_PLANET
            and body_b.kind is BodyKind.TABULATED_PLANET)


def separation(
    body_a: Body,
    body_b: Body,
    time: AstroTime | float,
    ephemeris=None,
) -> float:
    """Geometric distance between two bodies (AU).

    Two tabulated planets are differenced by the ephemeris reader itself.
    """
    jd = _as_jd(time)
    if both_tabulated(body_a, body_b):
        if ephemeris is None:
            raise ValueError("Tabulated planets need a tabulated ephemeris")
        return float(np.linalg.norm(ephemeris.position(body_a.name, body_b.name, jd)))
    return (position_at(body_a, jd, ephemeris)
            - position_at(body_b, jd, ephemeris)).distance
