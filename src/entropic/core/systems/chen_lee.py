from __future__ import annotations

from typing import Sequence

from entropic.core.state import State3

from .base import ParameterSpec, SystemDefinition, SystemKind, register_system


def chen_lee(state: State3, params: Sequence[float]) -> State3:
    alpha, beta, gamma = params
    x, y, z = state
    dx = alpha * x - y * z
    dy = beta * y + x * z
    dz = gamma * z + x * y / 3.0
    return State3(dx, dy, dz)


CHEN_LEE = register_system(
    SystemDefinition(
        kind=SystemKind.CHEN_LEE,
        label="Chen-Lee",
        parameters=(
            ParameterSpec(0, "alpha", 5.0, 0.1, "α"),
            ParameterSpec(1, "beta", -10.0, 0.1, "β"),
            ParameterSpec(2, "gamma", -0.38, 0.01, "γ"),
        ),
        derivative=chen_lee,
        initial_region=((-1.0, 1.0), (-1.0, 1.0), (-1.0, 1.0)),
        display_scale=30.0,
    )
)
