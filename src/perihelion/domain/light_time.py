# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Light-time correction between two moving bodies.

Fixed-point iteration on the emission time: τ ← c⁻¹·|r_target(t-τ) - r_center(t-τ)|
seeded with the geometric light-time of the true separation.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable

from perihelion.domain.errors import NumericalDivergenceError
from perihelion.domain.orbital_mechanics import GaussianConstants
from perihelion.domain.state_vector import StateVector
from perihelion.domain.time_systems import AstroTime

logger = logging.getLogger(__name__)

PositionFn = Callable[[float], StateVector]
"""Maps a TDB Julian date to a body's state vector."""


@dataclass(frozen=True)
class LightTimeConfig:
    """Convergence settings of the light-time iteration.

    Attributes:
        tolerance_days: Change in τ between passes that counts as converged.
        max_iterations: Passes allowed before the iteration is declared
            divergent.
    """
    tolerance_days: float = 1e-12
    max_iterations: int = 50


DEFAULT_LIGHT_TIME_CONFIG = LightTimeConfig()


@dataclass(frozen=True)
class LightTimeResult:
    """Outcome of a light-time solution.

    ``true_vector`` is the geometric target-minus-center vector at the
    observation time. ``astrometric_vector`` is the same difference at the
    emission time and is tagged with that time.
    """
    true_vector: StateVector
    astrometric_vector: StateVector
    light_time_days: float
    iterations: int


def solve_light_time(
    target_position_fn: PositionFn,
    center_position_fn: PositionFn,
    time: AstroTime | float,
    config: LightTimeConfig = DEFAULT_LIGHT_TIME_CONFIG,
) -> LightTimeResult:
    """
    Solve for the light-time between target and center at ``time``.

    Both bodies are evaluated at t - τ on each pass. Relative vectors are
    memoised by evaluation time within the call, so a pass that lands on
    an already evaluated time costs nothing.

    Args:
        target_position_fn: Target state as a function of TDB Julian date.
        center_position_fn: Observer (center) state, same frame.
        time: Observation time, AstroTime or TDB Julian date.
        config: Tolerance and iteration cap.

    Returns:
        LightTimeResult with true and astrometric vectors and τ in days.

    Raises:
        NumericalDivergenceError: τ did not settle within the cap or
            became non-finite.
    """
    jd = time.jd_tdb if isinstance(time, AstroTime) else float(time)
    per_day = GaussianConstants.LIGHT_TIME_PER_AU
    relative_at: dict[float, StateVector] = {}

    def relative(at: float) -> StateVector:
        if at not in relative_at:
            relative_at[at] = target_position_fn(at) - center_position_fn(at)
        return relative_at[at]

    true_vector = relative(jd)
    tau = per_day * true_vector.distance

    for iteration in range(1, config.max_iterations + 1):
        retarded = relative(jd - tau)
        new_tau = per_day * retarded.distance
        if not math.isfinite(new_tau):
            raise NumericalDivergenceError(
                f"Light-time became non-finite at JD {jd} (pass {iteration})"
            )
        if abs(new_tau - tau) <= config.tolerance_days:
            logger.debug("Light-time at JD %.6f: %.10f d after %d passes",
                         jd, new_tau, iteration)
            return LightTimeResult(
                true_vector=true_vector,
                astrometric_vector=retarded,
                light_time_days=new_tau,
                iterations=iteration,
            )
        tau = new_tau

    raise NumericalDivergenceError(
        f"Light-time did not converge in {config.max_iterations} passes "
        f"at JD {jd} (last tau={tau} d)"
    )
