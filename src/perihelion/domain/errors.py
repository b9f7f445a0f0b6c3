# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Error kinds raised by the orbital-mechanics core.

Each exception also derives from the builtin it refines, so callers that
already catch ValueError or ArithmeticError keep working.
"""


class PerihelionError(Exception):
    """Base class for all perihelion errors."""


class InvalidElementsError(PerihelionError, ValueError):
    """Orbital elements rejected before propagation (e.g. e < 0, q <= 0)."""


class NumericalDivergenceError(PerihelionError, ArithmeticError):
    """An iterative solver failed to converge within its bound.

    Fatal for the single call that raised it. Solvers never retry
    with different seeds.
    """


class DateOutOfRangeError(PerihelionError, ValueError):
    """Planetary terms requested outside their validated date window."""
