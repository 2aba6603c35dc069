from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Tuple

from entropic.core import constants
from entropic.core.systems.base import SystemKind
from entropic.engine.simulation import SimulationEngine
from entropic.utils.logging import get_logger

logger = get_logger(__name__)

Command = Callable[[SimulationEngine], object]


class KeyResult(str, Enum):
    HANDLED = "handled"
    TOGGLE_UI = "toggle_ui"
    QUIT = "quit"
    IGNORED = "ignored"


# (raise, lower) key pair per parameter slot
SLOT_KEYS: Tuple[Tuple[str, str], ...] = (
    ("q", "a"),
    ("w", "s"),
    ("e", "d"),
    ("r", "f"),
    ("y", "g"),
    ("u", "j"),
)

SYSTEM_KEYS: Dict[str, SystemKind] = {
    "1": SystemKind.LORENZ,
    "2": SystemKind.ROSSLER,
    "3": SystemKind.AIZAWA,
    "4": SystemKind.CHEN_LEE,
}

DRIVER_KEYS: Dict[str, KeyResult] = {
    "h": KeyResult.TOGGLE_UI,
    "escape": KeyResult.QUIT,
}


def _nudge(slot: int, direction: int) -> Command:
    def command(engine: SimulationEngine):
        if slot >= engine.system.slot_count:
            return None
        return engine.adjust_parameter(slot, direction * engine.parameters.specs[slot].step)

    return command


def _build_keymap() -> Dict[str, Command]:
    keymap: Dict[str, Command] = {}
    for key, kind in SYSTEM_KEYS.items():
        keymap[key] = lambda engine, kind=kind: engine.select_system(kind)
    for slot, (up, down) in enumerate(SLOT_KEYS):
        keymap[up] = _nudge(slot, +1)
        keymap[down] = _nudge(slot, -1)
    keymap["z"] = lambda engine: engine.adjust_time_scale(constants.TIME_SCALE_STEP)
    keymap["x"] = lambda engine: engine.adjust_time_scale(-constants.TIME_SCALE_STEP)
    keymap["c"] = lambda engine: engine.adjust_particle_count(constants.PARTICLE_COUNT_STEP)
    keymap["v"] = lambda engine: engine.adjust_particle_count(-constants.PARTICLE_COUNT_STEP)
    keymap["t"] = lambda engine: engine.toggle_trails()
    keymap["backspace"] = lambda engine: engine.reset()
    return keymap


KEYMAP: Dict[str, Command] = _build_keymap()


def normalize_key(key: str) -> str:
    return key.strip().lower()


def handle_key(engine: SimulationEngine, key: str) -> KeyResult:
    """Apply one key press to ``engine``; driver-level keys are handed back."""
    key = normalize_key(key)
    if key in DRIVER_KEYS:
        return DRIVER_KEYS[key]
    command = KEYMAP.get(key)
    if command is None:
        logger.debug("Unbound key %r", key)
        return KeyResult.IGNORED
    command(engine)
    return KeyResult.HANDLED


def is_known_key(key: str) -> bool:
    key = normalize_key(key)
    return key in KEYMAP or key in DRIVER_KEYS


def slot_key_hint(slot: int) -> str:
    up, down = SLOT_KEYS[slot]
    return f"{up.upper()}/{down.upper()}"


def describe_bindings() -> List[Tuple[str, str]]:
    lines = [("1-4", "select Lorenz / Rossler / Aizawa / Chen-Lee")]
    for slot in range(len(SLOT_KEYS)):
        lines.append((slot_key_hint(slot), f"raise/lower parameter slot {slot}"))
    lines += [
        ("Z/X", "raise/lower time scale"),
        ("C/V", "add/remove particles"),
        ("T", "toggle trails"),
        ("Backspace", "reset particles"),
        ("H", "toggle overlay"),
        ("Escape", "quit"),
    ]
    return lines
