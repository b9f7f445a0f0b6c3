# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Cartesian state vector tagged with frame and epoch.
"""
import math
from dataclasses import dataclass

import numpy as np

from perihelion.domain.coordinate_frames import (
    Frame,
    cartesian_to_spherical,
    rotation_between,
)


@dataclass(frozen=True)
class StateVector:
    """Position (AU) and optional velocity (AU/day) at a TDB Julian date.

    Vectors combine with ``+`` and ``-`` only within one frame. The result
    keeps the left operand's epoch; velocity survives only when both
    operands carry one.
    """
    position: tuple[float, float, float]
    velocity: tuple[float, float, float] | None
    frame: Frame
    jd_tdb: float

    @staticmethod
    def from_arrays(
        position,
        velocity,
        frame: Frame,
        jd_tdb: float,
    ) -> "StateVector":
        """Build from numpy arrays or sequences."""
        pos = tuple(float(c) for c in position)
        vel = None if velocity is None else tuple(float(c) for c in velocity)
        return StateVector(position=pos, velocity=vel, frame=frame, jd_tdb=jd_tdb)

    @property
    def distance(self) -> float:
        """Length of the position vector (AU)."""
        x, y, z = self.position
        return math.sqrt(x * x + y * y + z * z)

    @property
    def speed(self) -> float | None:
        """Length of the velocity vector (AU/day), None without velocity."""
        if self.velocity is None:
            return None
        vx, vy, vz = self.velocity
        return math.sqrt(vx * vx + vy * vy + vz * vz)

    def spherical(self) -> tuple[float, float, float]:
        """(longitude rad, latitude rad, distance AU) in this vector's frame."""
        return cartesian_to_spherical(self.position)

    def to_frame(self, frame: Frame) -> "StateVector":
        """Same vector expressed in another J2000 frame."""
        if frame is self.frame:
            return self
        rot = rotation_between(self.frame, frame)
        pos = rot @ np.array(self.position)
        vel = None if self.velocity is None else rot @ np.array(self.velocity)
        return StateVector.from_arrays(pos, vel, frame, self.jd_tdb)

    def _combine(self, other: "StateVector", sign: float) -> "StateVector":
        if other.frame is not self.frame:
            raise ValueError(
                f"Cannot combine vectors in {self.frame.value} and {other.frame.value}"
            )
        pos = tuple(a + sign * b for a, b in zip(self.position, other.position))
        if self.velocity is None or other.velocity is None:
            vel = None
        else:
            vel = tuple(a + sign * b for a, b in zip(self.velocity, other.velocity))
        return StateVector(position=pos, velocity=vel, frame=self.frame,
                           jd_tdb=self.jd_tdb)

    def __add__(self, other: "StateVector") -> "StateVector":
        return self._combine(other, 1.0)

    def __sub__(self, other: "StateVector") -> "StateVector":
        return self._combine(other, -1.0)
