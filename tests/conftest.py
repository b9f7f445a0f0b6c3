# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Shared fixtures: small JPL element tables and a fake tabulated ephemeris."""
import math

import pytest


_COMET_WIDTHS = (43, 7, 11, 10, 9, 9, 9, 14, 12)
_ASTEROID_WIDTHS = (6, 17, 5, 10, 10, 9, 9, 9, 11, 5, 5, 10)


def _comet_row(*values):
    name = values[0]
    rest = values[1:]
    return " ".join([f"{name:<43}"]
                    + [f"{v:>{w}}" for v, w in zip(rest[:-1], _COMET_WIDTHS[1:-1])]
                    + [rest[-1]])


def _ruler(widths):
    return " ".join("-" * w for w in widths)


COMET_TABLE = "\n".join([
    _comet_row("Num  Name", "Epoch", "q", "e", "i", "w", "Node", "Tp", "Ref"),
    _ruler(_COMET_WIDTHS),
    _comet_row("  1P/Halley", "49400", "0.57172762", "0.96711547", "162.19995",
               "111.86603", "59.39983", "19860209.43853", "JPL J863/77"),
    _comet_row("C/1995 O1 (Hale-Bopp)", "51040", "0.91421000", "0.99509000",
               "89.42960", "130.58830", "282.47100", "19970401.13729", "JPL 268"),
    _comet_row("C/2099 X1 (Broken)", "51040", "abc", "0.50000000",
               "10.00000", "20.00000", "30.00000", "20990101.00000", "JPL 1"),
]) + "\n"


def _asteroid_row(num, name, *rest):
    cells = [f"{num:>6}", f"{name:<17}"]
    cells += [f"{v:>{w}}" for v, w in zip(rest[:-1], _ASTEROID_WIDTHS[2:-1])]
    cells.append(rest[-1])
    return " ".join(cells)


ASTEROID_TABLE = "\n".join([
    _asteroid_row("Num", "Name", "Epoch", "a", "e", "i", "w", "Node", "M",
                  "H", "G", "Ref"),
    _ruler(_ASTEROID_WIDTHS),
    _asteroid_row("1", "Ceres", "60600", "2.7660431", "0.07850100", "10.58769",
                  "73.27410", "80.25214", "145.8303000", "3.34", "0.12", "JPL 48"),
    _asteroid_row("4", "Vesta", "60600", "2.3614000", "0.09020000", "7.14400",
                  "151.50000", "103.70000", "26.8000000", "3.25", "0.32", "JPL 36"),
]) + "\n"


@pytest.fixture
def comet_table_text():
    return COMET_TABLE


@pytest.fixture
def asteroid_table_text():
    return ASTEROID_TABLE


@pytest.fixture
def seeded_cache(tmp_path):
    """Cache directory holding fresh copies of both element files."""
    (tmp_path / "comet.dat").write_text(COMET_TABLE, encoding="utf-8")
    (tmp_path / "asteroid_numbered.dat").write_text(ASTEROID_TABLE, encoding="utf-8")
    return tmp_path


class LinearEphemeris:
    """Tabulated-ephemeris stand-in with bodies in uniform linear motion.

    ``bodies`` maps a name to (position at t0, velocity per day), both
    barycentric. Light-time in ``observe`` is solved by iteration.
    """

    LIGHT_TIME_PER_AU = 0.0057755183

    def __init__(self, bodies, t0=2451545.0):
        self._bodies = bodies
        self._t0 = t0
        self.calls = 0

    def _at(self, name, jd):
        if name == "ssb":
            return (0.0, 0.0, 0.0)
        pos, vel = self._bodies[name]
        dt = jd - self._t0
        return tuple(p + v * dt for p, v in zip(pos, vel))

    def position(self, target, center, jd_tdb):
        self.calls += 1
        t = self._at(target, jd_tdb)
        c = self._at(center, jd_tdb)
        return tuple(a - b for a, b in zip(t, c))

    def observe(self, target, center, jd_tdb):
        c = self._at(center, jd_tdb)
        tau = 0.0
        for _ in range(20):
            t = self._at(target, jd_tdb - tau)
            vec = tuple(a - b for a, b in zip(t, c))
            tau = self.LIGHT_TIME_PER_AU * math.sqrt(sum(x * x for x in vec))
        return vec, tau


@pytest.fixture
def linear_ephemeris():
    return LinearEphemeris
