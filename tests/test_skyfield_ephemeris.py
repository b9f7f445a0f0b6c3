# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the Skyfield-backed tabulated ephemeris, using in-memory fakes."""
import sys

import numpy as np
import pytest

from perihelion.adapters.skyfield_ephemeris import SkyfieldEphemeris
from perihelion.ports.tabulated_ephemeris import TabulatedEphemeris


class _Position:
    def __init__(self, au):
        self.au = np.array(au, dtype=float)


class _Astrometric:
    def __init__(self, au, light_time):
        self.position = _Position(au)
        self.light_time = light_time


class _FakeBody:
    """Kernel segment moving uniformly from the origin."""

    def __init__(self, name, velocity):
        self.name = name
        self.velocity = np.array(velocity, dtype=float)

    def at(self, t):
        body = self

        class _At:
            position = _Position(body.velocity * t)

            def observe(self, other):
                return _Astrometric(other.velocity * t - body.velocity * t, 0.25)

        return _At()


class _FakeTimescale:
    def tdb_jd(self, jd):
        return jd


def _kernel():
    return {
        "earth": _FakeBody("earth", (1e-7, 0.0, 0.0)),
        "mars barycenter": _FakeBody("mars", (0.0, 1e-7, 0.0)),
        "sun": _FakeBody("sun", (0.0, 0.0, 0.0)),
        "solar system barycenter": _FakeBody("ssb", (0.0, 0.0, 0.0)),
    }


class TestSkyfieldEphemeris:

    def test_port_compliance(self):
        assert issubclass(SkyfieldEphemeris, TabulatedEphemeris)

    def test_position_relative_to_center(self):
        eph = SkyfieldEphemeris(_kernel(), timescale=_FakeTimescale())
        vec = eph.position("mars", "earth", 2451545.0)
        assert vec == pytest.approx((-0.2451545, 0.2451545, 0.0))
        assert all(isinstance(c, float) for c in vec)

    def test_barycentric_position(self):
        eph = SkyfieldEphemeris(_kernel(), timescale=_FakeTimescale())
        assert eph.position("Earth", "ssb", 1e7) == pytest.approx((1.0, 0.0, 0.0))

    def test_observe_returns_light_time(self):
        eph = SkyfieldEphemeris(_kernel(), timescale=_FakeTimescale())
        vec, lt = eph.observe("mars", "earth", 1e7)
        assert vec == pytest.approx((-1.0, 1.0, 0.0))
        assert lt == 0.25

    def test_unknown_body(self):
        eph = SkyfieldEphemeris(_kernel(), timescale=_FakeTimescale())
        with pytest.raises(KeyError, match="vulcan"):
            eph.position("vulcan", "ssb", 2451545.0)

    def test_missing_skyfield_message(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "skyfield.api", None)
        with pytest.raises(ImportError, match="pip install perihelion\\[live\\]"):
            SkyfieldEphemeris("de421.bsp")
