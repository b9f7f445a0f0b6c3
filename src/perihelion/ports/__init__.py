# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for ephemeris output.

Adapters implement these to write ephemeris tables in different formats.
"""
from typing import Protocol, runtime_checkable

from perihelion.domain.ephemeris import EphemerisItem


@runtime_checkable
class EphemerisExporter(Protocol):
    """Port for writing ephemeris rows to a file."""

    def export(self, items: list[EphemerisItem], path: str) -> int:
        """
        Write ephemeris rows to ``path``.

        Returns:
            Number of rows written.
        """
        ...
