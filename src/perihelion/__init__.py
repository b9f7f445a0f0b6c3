"""
Perihelion

Positions, light-time corrected ephemerides and closest approaches of
solar-system bodies from tabulated planetary ephemerides or Keplerian
orbital elements. Elliptic orbits are propagated with Kepler's equation,
near-parabolic and hyperbolic orbits with the Landgraf method and
parabolic orbits with Barker's equation. Major-planet elements come from
the JPL secular terms; comet and asteroid elements from the JPL
small-body tables.
"""

from perihelion.domain.errors import (
    PerihelionError,
    InvalidElementsError,
    NumericalDivergenceError,
    DateOutOfRangeError,
)
from perihelion.domain.orbital_mechanics import (
    GaussianConstants,
    LandgrafLimits,
    normalize_angle,
    solve_kepler,
    solve_landgraf,
    solve_parabolic,
    state_vector_to_elements,
)
from perihelion.domain.time_systems import (
    AstroTime,
    TimeScale,
    calendar_to_jd,
    jd_to_calendar,
)
from perihelion.domain.coordinate_frames import Frame
from perihelion.domain.state_vector import StateVector
from perihelion.domain.orbital_elements import (
    OrbitClass,
    OrbitalElements,
    Parameterization,
    classify_orbit,
)
from perihelion.domain.propagation import (
    PropagationResult,
    position_at,
    solve_anomaly,
)
from perihelion.domain.planetary_terms import (
    Planet,
    PlanetaryElements,
    evaluate,
    planet_elements,
)
from perihelion.domain.bodies import (
    Body,
    BodyKind,
    OrbitalElementBody,
    TabulatedPlanet,
)
from perihelion.domain.light_time import (
    LightTimeConfig,
    LightTimeResult,
    solve_light_time,
)
from perihelion.domain.closest_approach import (
    ApproachSearchConfig,
    ClosestApproach,
    find_closest_approach,
    minimize_separation,
)
from perihelion.domain.ephemeris import (
    EphemerisItem,
    ObservationRequest,
    ObserverLocation,
    format_ephemeris_table,
    generate_ephemeris,
    observe,
)

__version__ = "1.0.0"

__all__ = [
    "PerihelionError",
    "InvalidElementsError",
    "NumericalDivergenceError",
    "DateOutOfRangeError",
    "GaussianConstants",
    "LandgrafLimits",
    "normalize_angle",
    "solve_kepler",
    "solve_landgraf",
    "solve_parabolic",
    "state_vector_to_elements",
    "AstroTime",
    "TimeScale",
    "calendar_to_jd",
    "jd_to_calendar",
    "Frame",
    "StateVector",
    "OrbitClass",
    "OrbitalElements",
    "Parameterization",
    "classify_orbit",
    "PropagationResult",
    "position_at",
    "solve_anomaly",
    "Planet",
    "PlanetaryElements",
    "evaluate",
    "planet_elements",
    "Body",
    "BodyKind",
    "OrbitalElementBody",
    "TabulatedPlanet",
    "LightTimeConfig",
    "LightTimeResult",
    "solve_light_time",
    "ApproachSearchConfig",
    "ClosestApproach",
    "find_closest_approach",
    "minimize_separation",
    "EphemerisItem",
    "ObservationRequest",
    "ObserverLocation",
    "format_ephemeris_table",
    "generate_ephemeris",
    "observe",
]
