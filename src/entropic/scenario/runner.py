from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import yaml

from entropic.controls.keymap import KeyResult, handle_key, is_known_key
from entropic.core import constants
from entropic.core.systems.base import SystemKind
from entropic.engine.simulation import EngineConfig, SimulationEngine
from entropic.io.formats import engine_snapshot, status_to_dict, write_json
from entropic.utils.logging import command_context, get_logger

logger = get_logger(__name__)


# -------------------------
# Config structures
# -------------------------


@dataclass(frozen=True)
class RunConfig:
    frames: int
    dt: float


@dataclass(frozen=True)
class Event:
    frame: int
    key: Optional[str] = None
    command: Optional[str] = None
    args: Tuple[Tuple[str, Any], ...] = ()

    def describe(self) -> str:
        if self.key is not None:
            return f"key={self.key}"
        args = " ".join(f"{k}={v}" for k, v in self.args)
        return f"command={self.command}" + (f" {args}" if args else "")


@dataclass(frozen=True)
class OutputConfig:
    include_trails: bool
    snapshot_every: int


@dataclass(frozen=True)
class ScenarioConfig:
    name: str
    engine: EngineConfig
    run: RunConfig
    events: Tuple[Event, ...]
    output: OutputConfig


@dataclass
class ScenarioResult:
    config: ScenarioConfig
    engine: SimulationEngine
    applied: List[Dict[str, Any]] = field(default_factory=list)
    snapshots: List[Dict[str, Any]] = field(default_factory=list)
    show_ui: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario": self.config.name,
            "frames": self.config.run.frames,
            "dt": self.config.run.dt,
            "events": self.applied,
            "snapshots": self.snapshots,
            "show_ui": self.show_ui,
            "final": engine_snapshot(self.engine, include_trails=self.config.output.include_trails),
        }


# -------------------------
# Config parsing/validation
# -------------------------


class ConfigError(Exception):
    """Raised when a scenario file is invalid."""


# command name -> required argument names and their converters
_COMMANDS: Dict[str, Tuple[Tuple[str, Callable[[Any], Any]], ...]] = {
    "select_system": (("system", SystemKind.parse),),
    "adjust_parameter": (("slot", int), ("delta", float)),
    "adjust_time_scale": (("delta", float),),
    "adjust_particle_count": (("delta", int),),
    "toggle_trails": (),
    "reset": (),
}


def _require(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...]):
    if key not in mapping:
        raise ConfigError(f"Missing required key '{key}'")
    val = mapping[key]
    if not isinstance(val, expected_type) or isinstance(val, bool) and bool not in expected_type:
        raise ConfigError(f"Key '{key}' must be of type {expected_type}, got {type(val)}")
    return val


def _optional_bool(mapping: Dict[str, Any], key: str, default: bool) -> bool:
    val = mapping.get(key, default)
    if not isinstance(val, bool):
        raise ConfigError(f"Key '{key}' must be true or false, got {val!r}")
    return val


def _parse_engine(engine: Dict[str, Any], seed_override: Optional[int]) -> EngineConfig:
    try:
        seed = engine.get("seed")
        return EngineConfig(
            system=SystemKind.parse(engine.get("system", constants.DEFAULT_SYSTEM)),
            particle_count=int(engine.get("particles", constants.DEFAULT_PARTICLE_COUNT)),
            trail_capacity=int(engine.get("trail_capacity", constants.DEFAULT_TRAIL_CAPACITY)),
            time_scale=float(engine.get("time_scale", constants.DEFAULT_TIME_SCALE)),
            dt=float(engine.get("dt", constants.DEFAULT_DT)),
            trails_enabled=_optional_bool(engine, "trails", True),
            seed=seed_override if seed_override is not None else (None if seed is None else int(seed)),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid engine section: {exc}") from exc


def _parse_event(raw: Any, frames: int, index: int) -> Event:
    if not isinstance(raw, dict):
        raise ConfigError(f"events[{index}] must be a mapping")
    frame = int(_require(raw, "frame", (int,)))
    if not 0 <= frame <= frames:
        raise ConfigError(f"events[{index}].frame must be within 0..{frames}")

    if "key" in raw:
        key = str(raw["key"])
        if not is_known_key(key):
            raise ConfigError(f"events[{index}]: unknown key '{key}'")
        return Event(frame=frame, key=key)

    command = _require(raw, "command", (str,))
    if command not in _COMMANDS:
        raise ConfigError(f"events[{index}]: unknown command '{command}'. Available: {sorted(_COMMANDS)}")
    args = []
    for name, convert in _COMMANDS[command]:
        if name not in raw:
            raise ConfigError(f"events[{index}]: command '{command}' needs '{name}'")
        try:
            args.append((name, convert(raw[name])))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"events[{index}].{name}: {exc}") from exc
    return Event(frame=frame, command=command, args=tuple(args))


def parse_scenario(path: Path, seed_override: Optional[int] = None) -> ScenarioConfig:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to read YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML must be a mapping.")

    engine = _require(data, "engine", (dict,))
    run = _require(data, "run", (dict,))
    events = data.get("events") or []
    output = data.get("output") or {}
    if not isinstance(events, list):
        raise ConfigError("'events' must be a list")
    if not isinstance(output, dict):
        raise ConfigError("'output' must be a mapping")

    engine_cfg = _parse_engine(engine, seed_override)

    frames = int(_require(run, "frames", (int,)))
    if frames < 0:
        raise ConfigError("run.frames must be >= 0")
    try:
        dt = float(run.get("dt", engine_cfg.dt))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"run.dt: {exc}") from exc
    if dt <= 0:
        raise ConfigError("run.dt must be positive")

    parsed_events = [_parse_event(raw, frames, i) for i, raw in enumerate(events)]
    # stable: same-frame events keep file order
    parsed_events.sort(key=lambda e: e.frame)

    try:
        snapshot_every = int(output.get("snapshot_every", 0))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"output.snapshot_every: {exc}") from exc
    output_cfg = OutputConfig(
        include_trails=_optional_bool(output, "include_trails", False),
        snapshot_every=snapshot_every,
    )
    if output_cfg.snapshot_every < 0:
        raise ConfigError("output.snapshot_every must be >= 0")

    return ScenarioConfig(
        name=str(data.get("name", path.stem)),
        engine=engine_cfg,
        run=RunConfig(frames=frames, dt=dt),
        events=tuple(parsed_events),
        output=output_cfg,
    )


# -------------------------
# Scenario execution
# -------------------------


def apply_event(engine: SimulationEngine, event: Event) -> Any:
    if event.key is not None:
        return handle_key(engine, event.key).value
    method = getattr(engine, event.command)
    result = method(**dict(event.args))
    return result.value if isinstance(result, SystemKind) else result


def run_scenario(cfg: ScenarioConfig, engine: Optional[SimulationEngine] = None) -> ScenarioResult:
    """
    Play the scenario: events scheduled for frame ``n`` fire right before the
    ``n``-th advance, events at ``frames`` fire after the last one.
    """
    engine = engine or SimulationEngine(cfg.engine)
    result = ScenarioResult(config=cfg, engine=engine)
    pending: Sequence[Event] = cfg.events
    cursor = 0
    every = cfg.output.snapshot_every

    with command_context(f"scenario:{cfg.name}"):
        logger.info("Running %d frames dt=%s system=%s", cfg.run.frames, cfg.run.dt, engine.active_system.value)
        for frame in range(cfg.run.frames + 1):
            while cursor < len(pending) and pending[cursor].frame == frame:
                event = pending[cursor]
                outcome = apply_event(engine, event)
                logger.debug("frame=%d %s -> %s", frame, event.describe(), outcome)
                result.applied.append({"frame": frame, "event": event.describe(), "result": outcome})
                if outcome == KeyResult.TOGGLE_UI.value:
                    result.show_ui = not result.show_ui
                if outcome == KeyResult.QUIT.value:
                    logger.info("Quit requested at frame %d", frame)
                    return result
                cursor += 1
            if frame == cfg.run.frames:
                break
            engine.advance(cfg.run.dt)
            if every and engine.frame % every == 0:
                result.snapshots.append(status_to_dict(engine.status()))
    return result


def write_result(path: Path, result: ScenarioResult) -> None:
    write_json(path, result.to_dict())
