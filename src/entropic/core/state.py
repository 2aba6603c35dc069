from __future__ import annotations

import math
from typing import NamedTuple


class State3(NamedTuple):
    """A point (x, y, z) in the phase space of a three-dimensional system."""

    x: float
    y: float
    z: float

    def advanced(self, derivative: "State3", dt: float) -> "State3":
        """Explicit Euler step: ``self + dt * derivative``."""
        return State3(
            self.x + dt * derivative.x,
            self.y + dt * derivative.y,
            self.z + dt * derivative.z,
        )

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    @classmethod
    def of(cls, values) -> "State3":
        x, y, z = values
        return cls(float(x), float(y), float(z))
