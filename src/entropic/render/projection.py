from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from entropic.core.constants import SCREEN_HEIGHT, SCREEN_WIDTH
from entropic.core.systems.base import SystemKind, get_system


def scale_factor(system: "SystemKind | str") -> float:
    return get_system(system).display_scale


def project(
    state: Sequence[float],
    system: "SystemKind | str",
    width: float = SCREEN_WIDTH,
    height: float = SCREEN_HEIGHT,
) -> Tuple[float, float]:
    """Screen position of ``state``: the x/y plane, centred and scaled per system."""
    s = scale_factor(system)
    return width / 2.0 + state[0] * s, height / 2.0 + state[1] * s


def project_many(
    states: np.ndarray,
    system: "SystemKind | str",
    width: float = SCREEN_WIDTH,
    height: float = SCREEN_HEIGHT,
) -> np.ndarray:
    """Vectorised ``project`` over an ``(n, 3)`` array; returns ``(n, 2)``."""
    states = np.asarray(states, dtype=np.float64).reshape(-1, 3)
    s = scale_factor(system)
    out = np.empty((states.shape[0], 2), dtype=np.float64)
    out[:, 0] = width / 2.0 + states[:, 0] * s
    out[:, 1] = height / 2.0 + states[:, 1] * s
    return out
