from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from entropic.engine.simulation import EngineStatus, SimulationEngine


def _finite_or_none(value: float) -> Optional[float]:
    # JSON has no NaN/Infinity
    return value if math.isfinite(value) else None


def status_to_dict(status: EngineStatus) -> Dict[str, Any]:
    return {
        "system": status.system.value,
        "label": status.label,
        "parameters": dict(status.parameters),
        "time_scale": status.time_scale,
        "particle_count": status.particle_count,
        "trails_enabled": status.trails_enabled,
        "frame": status.frame,
        "sim_time": status.sim_time,
        "diverged": status.diverged,
    }


def engine_snapshot(engine: SimulationEngine, include_trails: bool = False) -> Dict[str, Any]:
    """Report-friendly dump of the engine after a run."""
    particles: List[Dict[str, Any]] = []
    for particle in engine.particles:
        entry: Dict[str, Any] = {
            "state": [_finite_or_none(v) for v in particle.state],
            "trail_length": len(particle.trail),
        }
        if include_trails:
            entry["trail"] = [[_finite_or_none(float(v)) for v in row] for row in particle.trail.as_array()]
        particles.append(entry)
    return {"status": status_to_dict(engine.status()), "particles": particles}


def read_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
