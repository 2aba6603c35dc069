from __future__ import annotations

from typing import List

from entropic.controls.keymap import slot_key_hint
from entropic.core.systems.base import get_system
from entropic.engine.simulation import EngineStatus

HELP_LINE = "Press H to hide UI, Backspace to reset particles, ESC to quit"


def parameter_line(status: EngineStatus) -> str:
    parts = [
        f"{slot_key_hint(spec.slot)}: {spec.label}={status.parameters[spec.name]:.2f}"
        for spec in get_system(status.system).parameters
    ]
    return "Parameters (" + ", ".join(parts) + ")"


def overlay_lines(status: EngineStatus) -> List[str]:
    """Text of the help overlay, top to bottom."""
    return [
        f"System: {status.label} (Press 1-4 to change)",
        parameter_line(status),
        f"Time Scale: {status.time_scale:.2f}x (Z/X to adjust)",
        f"Particles: {status.particle_count} (C/V to adjust)",
        f"Trails: {'Enabled' if status.trails_enabled else 'Disabled'} (T to toggle)",
        HELP_LINE,
    ]
