# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Tabulated planetary ephemeris backed by Skyfield and a JPL DE kernel.

External dependency (skyfield) is confined to this layer and imported
lazily, so the rest of the package works without it.
"""
import logging
from pathlib import Path

from perihelion.ports.tabulated_ephemeris import TabulatedEphemeris


_log = logging.getLogger(__name__)

DEFAULT_KERNEL = "de421.bsp"

# DE kernels only carry barycenters for the outer planets.
_ALIASES = {
    "ssb": "solar system barycenter",
    "mars": "mars barycenter",
    "jupiter": "jupiter barycenter",
    "saturn": "saturn barycenter",
    "uranus": "uranus barycenter",
    "neptune": "neptune barycenter",
    "pluto": "pluto barycenter",
    "emb": "earth barycenter",
}


def _require_skyfield():
    """Import skyfield lazily; raise clear error if not installed."""
    try:
        from skyfield.api import Loader, load
    except ImportError:
        raise ImportError(
            "skyfield is required for tabulated ephemerides. "
            "Install with: pip install perihelion[live]"
        ) from None
    return Loader, load


class SkyfieldEphemeris(TabulatedEphemeris):
    """
    Planet positions from a JPL DE kernel read by Skyfield.

    The kernel is loaded once per instance and only read afterwards, so
    one instance can be shared across threads.

    Args:
        kernel: Kernel file name (downloaded by Skyfield when missing) or
            an already loaded kernel object.
        directory: Where Skyfield keeps downloaded files.
        timescale: Skyfield Timescale; created from the loader if omitted.
    """

    def __init__(
        self,
        kernel: str | object = DEFAULT_KERNEL,
        directory: str | Path | None = None,
        timescale=None,
    ):
        if isinstance(kernel, str) or timescale is None:
            Loader, load = _require_skyfield()
            loader = Loader(str(directory)) if directory else load
            if isinstance(kernel, str):
                _log.info("Loading ephemeris kernel %s", kernel)
                kernel = loader(kernel)
            if timescale is None:
                timescale = loader.timescale()
        self._kernel = kernel
        self._ts = timescale

    def _body(self, name: str):
        key = name.strip().lower()
        try:
            return self._kernel[_ALIASES.get(key, key)]
        except KeyError:
            raise KeyError(f"Body {name!r} not in ephemeris kernel") from None

    def position(self, target: str, center: str, jd_tdb: float) -> tuple[float, float, float]:
        t = self._ts.tdb_jd(jd_tdb)
        target_pos = self._body(target).at(t).position.au
        if center.strip().lower() == "ssb":
            vec = target_pos
        else:
            vec = target_pos - self._body(center).at(t).position.au
        return (float(vec[0]), float(vec[1]), float(vec[2]))

    def observe(
        self, target: str, center: str, jd_tdb: float,
    ) -> tuple[tuple[float, float, float], float]:
        t = self._ts.tdb_jd(jd_tdb)
        astrometric = self._body(center).at(t).observe(self._body(target))
        vec = astrometric.position.au
        return (float(vec[0]), float(vec[1]), float(vec[2])), float(astrometric.light_time)
