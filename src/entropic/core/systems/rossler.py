from __future__ import annotations

from typing import Sequence

from entropic.core.state import State3

from .base import ParameterSpec, SystemDefinition, SystemKind, register_system


def rossler(state: State3, params: Sequence[float]) -> State3:
    a, b, c = params
    x, y, z = state
    dx = -y - z
    dy = x + a * y
    dz = b + z * (x - c)
    return State3(dx, dy, dz)


ROSSLER = register_system(
    SystemDefinition(
        kind=SystemKind.ROSSLER,
        label="Rossler",
        parameters=(
            ParameterSpec(0, "a", 0.2, 0.01),
            ParameterSpec(1, "b", 0.2, 0.01),
            ParameterSpec(2, "c", 5.7, 0.01),
        ),
        derivative=rossler,
        initial_region=((-1.0, 1.0), (-1.0, 1.0), (-1.0, 1.0)),
        display_scale=30.0,
    )
)
