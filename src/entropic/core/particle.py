from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from entropic.core.constants import DEFAULT_TRAIL_CAPACITY
from entropic.core.state import State3
from entropic.core.trail import TrailBuffer

RGB = Tuple[float, float, float]


@dataclass(eq=False)
class Particle:
    """A point on its way around an attractor, plus where it has recently been."""

    state: State3
    trail: TrailBuffer = field(default_factory=lambda: TrailBuffer(DEFAULT_TRAIL_CAPACITY))
    color: RGB = (1.0, 1.0, 1.0)

    def step(self, derivative: State3, dt: float, record: bool = True) -> State3:
        """Explicit Euler update; the new state goes into the trail when ``record``."""
        self.state = self.state.advanced(derivative, dt)
        if record:
            self.trail.push(self.state)
        return self.state

    def reseed(self, state: State3) -> None:
        """Move to ``state`` and forget the trail."""
        self.state = state
        self.trail.clear()
