from __future__ import annotations

from typing import Sequence

from entropic.core.state import State3

from .base import ParameterSpec, SystemDefinition, SystemKind, register_system


def aizawa(state: State3, params: Sequence[float]) -> State3:
    """
    Aizawa (Langford) system.

    The only system with six coefficients, so slots 3-5 are meaningful here
    and nowhere else.
    """
    a, b, c, d, e, f = params
    x, y, z = state
    dx = (z - b) * x - d * y
    dy = d * x + (z - b) * y
    dz = c + a * z - z * z * z / 3.0 - (x * x + y * y) * (1.0 + e * z) + f * z * x * x * x
    return State3(dx, dy, dz)


AIZAWA = register_system(
    SystemDefinition(
        kind=SystemKind.AIZAWA,
        label="Aizawa",
        parameters=(
            ParameterSpec(0, "a", 0.95, 0.01),
            ParameterSpec(1, "b", 0.7, 0.01),
            ParameterSpec(2, "c", 0.6, 0.01),
            ParameterSpec(3, "d", 3.5, 0.01),
            ParameterSpec(4, "e", 0.25, 0.01),
            ParameterSpec(5, "f", 0.1, 0.01),
        ),
        derivative=aizawa,
        initial_region=((-0.1, 0.1), (-0.1, 0.1), (-0.1, 0.1)),
        display_scale=100.0,
    )
)
