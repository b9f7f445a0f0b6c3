# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for tabulated planetary ephemerides (JPL DE and similar).

Vectors are in AU in the ICRF (J2000 equatorial) frame; times are TDB
Julian dates. Body names are lower case; "ssb" is the solar-system
barycenter and "sun" the Sun.
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class TabulatedEphemeris(Protocol):
    """Port for reading planet positions from a tabulated ephemeris."""

    def position(
        self, target: str, center: str, jd_tdb: float,
    ) -> tuple[float, float, float]:
        """Geometric position of ``target`` relative to ``center``."""
        ...

    def observe(
        self, target: str, center: str, jd_tdb: float,
    ) -> tuple[tuple[float, float, float], float]:
        """Astrometric position of ``target`` seen from ``center``.

        Returns:
            (light-time corrected position, light-time in days)
        """
        ...
