from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from entropic.core.systems.base import ParameterSpec, SystemDefinition, SystemKind, get_system
from entropic.core.systems import aizawa, chen_lee, lorenz, rossler  # noqa: F401 (registers systems)


class InvalidParameterName(ValueError):
    """Raised when a coefficient name is not defined for the active system."""


class ParameterSet:
    """
    Mutable coefficient bundle of one system.

    Values live in slot order so input handling can address them by position
    ("first parameter", "second parameter", ...) regardless of the system;
    names are available for everything else. Adjustments are unclamped.
    """

    def __init__(self, kind: "SystemKind | str"):
        self._definition: SystemDefinition = get_system(kind)
        self._values: List[float] = list(self._definition.defaults)

    @property
    def kind(self) -> SystemKind:
        return self._definition.kind

    @property
    def definition(self) -> SystemDefinition:
        return self._definition

    @property
    def names(self) -> Tuple[str, ...]:
        return self._definition.names

    @property
    def values(self) -> Tuple[float, ...]:
        return tuple(self._values)

    @property
    def specs(self) -> Tuple[ParameterSpec, ...]:
        return self._definition.parameters

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(tuple(self._values))

    def __getitem__(self, slot: int) -> float:
        return self._values[slot]

    def _slot_of(self, name: str) -> int:
        try:
            return self.names.index(name)
        except ValueError:
            raise InvalidParameterName(
                f"'{name}' is not a {self._definition.label} parameter. Available: {list(self.names)}"
            ) from None

    def get(self, name: str) -> float:
        return self._values[self._slot_of(name)]

    def adjust(self, name: str, delta: float) -> float:
        """Add ``delta`` to the named coefficient and return the new value."""
        slot = self._slot_of(name)
        self._values[slot] += float(delta)
        return self._values[slot]

    def name_for_slot(self, slot: int) -> Optional[str]:
        if 0 <= slot < len(self._values):
            return self.names[slot]
        return None

    def adjust_slot(self, slot: int, delta: float) -> Optional[float]:
        """Slot-addressed ``adjust``; returns None for slots the system lacks."""
        name = self.name_for_slot(slot)
        if name is None:
            return None
        return self.adjust(name, delta)

    def reset(self) -> "ParameterSet":
        self._values = list(self._definition.defaults)
        return self

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.names, self._values))

    def copy(self) -> "ParameterSet":
        clone = ParameterSet(self.kind)
        clone._values = list(self._values)
        return clone

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v:g}" for k, v in self.as_dict().items())
        return f"ParameterSet({self._definition.label}: {body})"
