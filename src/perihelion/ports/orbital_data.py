# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for small-body orbital element sources.

Adapters handle downloading, caching and parsing of element tables.
"""
from typing import Protocol, runtime_checkable

from perihelion.domain.orbital_elements import OrbitalElements


@runtime_checkable
class SmallBodyElementSource(Protocol):
    """Port for looking up comet and asteroid elements by name."""

    def find_comet(self, name: str) -> OrbitalElements:
        """Elements of the comet whose designation or name matches ``name``.

        Raises KeyError when no comet matches.
        """
        ...

    def find_asteroid(self, name: str) -> OrbitalElements:
        """Elements of the numbered asteroid matching ``name`` or its number."""
        ...

    def comet_names(self) -> list[str]:
        """All comet names known to the source."""
        ...
