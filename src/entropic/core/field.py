from __future__ import annotations

from typing import Sequence, Union

from entropic.core.parameters import ParameterSet
from entropic.core.state import State3
from entropic.core.systems.base import SystemKind, get_system
from entropic.core.systems import aizawa, chen_lee, lorenz, rossler  # noqa: F401 (registers systems)


def derivative(
    system: "SystemKind | str",
    state: Sequence[float],
    params: Union[ParameterSet, Sequence[float]],
) -> State3:
    """
    Instantaneous rate of change of ``state`` under ``system``.

    ``params`` is either a ParameterSet of that system or its coefficient values
    in slot order. Pure: the same inputs always give the same triple, and
    diverging inputs simply produce large or non-finite values.
    """
    definition = get_system(system)
    values = params.values if isinstance(params, ParameterSet) else tuple(params)
    if not isinstance(state, State3):
        state = State3.of(state)
    return definition.derivative(state, values)
