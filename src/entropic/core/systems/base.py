from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple

from entropic.core.state import State3

DerivativeFunc = Callable[[State3, Sequence[float]], State3]
Interval = Tuple[float, float]


class SystemKind(str, Enum):
    """The closed set of supported chaotic systems."""

    LORENZ = "lorenz"
    ROSSLER = "rossler"
    AIZAWA = "aizawa"
    CHEN_LEE = "chen_lee"

    @classmethod
    def parse(cls, value: "str | SystemKind") -> "SystemKind":
        if isinstance(value, SystemKind):
            return value
        key = str(value).strip().lower().replace("-", "_")
        for kind in cls:
            if kind.value == key or kind.name.lower() == key:
                return kind
        raise ValueError(f"Unknown system '{value}'. Available: {[k.value for k in cls]}")


@dataclass(frozen=True)
class ParameterSpec:
    """One positional coefficient slot of a system."""

    slot: int
    name: str
    default: float
    step: float
    symbol: str = ""

    @property
    def label(self) -> str:
        return self.symbol or self.name


@dataclass(frozen=True)
class SystemDefinition:
    """
    Everything the engine needs to know about one system.

    ``parameters`` is ordered by slot; ``derivative`` receives the coefficient
    values in that same order. ``initial_region`` is the (x, y, z) box fresh
    particles are drawn from and ``display_scale`` maps phase-space units to
    pixels.
    """

    kind: SystemKind
    label: str
    parameters: Tuple[ParameterSpec, ...]
    derivative: DerivativeFunc
    initial_region: Tuple[Interval, Interval, Interval]
    display_scale: float

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.parameters)

    @property
    def defaults(self) -> Tuple[float, ...]:
        return tuple(p.default for p in self.parameters)

    @property
    def slot_count(self) -> int:
        return len(self.parameters)


SYSTEM_REGISTRY: Dict[SystemKind, SystemDefinition] = {}


def register_system(definition: SystemDefinition) -> SystemDefinition:
    slots = [p.slot for p in definition.parameters]
    if slots != list(range(len(slots))):
        raise ValueError(f"{definition.label}: parameter slots must be 0..{len(slots) - 1} in order")
    SYSTEM_REGISTRY[definition.kind] = definition
    return definition


def get_system(kind: "SystemKind | str") -> SystemDefinition:
    kind = SystemKind.parse(kind)
    if kind not in SYSTEM_REGISTRY:
        raise ValueError(f"System '{kind.value}' is not registered. Available: {list_systems()}")
    return SYSTEM_REGISTRY[kind]


def list_systems() -> List[str]:
    # Declaration order, which is also the 1-4 key order
    return [kind.value for kind in SystemKind if kind in SYSTEM_REGISTRY]
