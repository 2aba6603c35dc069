from __future__ import annotations

from typing import Sequence

from entropic.core.state import State3

from .base import ParameterSpec, SystemDefinition, SystemKind, register_system


def lorenz(state: State3, params: Sequence[float]) -> State3:
    sigma, rho, beta = params
    x, y, z = state
    dx = sigma * (y - x)
    dy = x * (rho - z) - y
    dz = x * y - beta * z
    return State3(dx, dy, dz)


LORENZ = register_system(
    SystemDefinition(
        kind=SystemKind.LORENZ,
        label="Lorenz",
        parameters=(
            ParameterSpec(0, "sigma", 10.0, 0.1, "σ"),
            ParameterSpec(1, "rho", 28.0, 0.1, "ρ"),
            ParameterSpec(2, "beta", 8.0 / 3.0, 0.01, "β"),
        ),
        derivative=lorenz,
        initial_region=((-1.0, 1.0), (-1.0, 1.0), (15.0, 25.0)),
        display_scale=10.0,
    )
)
