from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from entropic.core import constants
from entropic.core.field import derivative
from entropic.core.parameters import ParameterSet
from entropic.core.particle import Particle
from entropic.core.state import State3
from entropic.core.systems.base import SystemDefinition, SystemKind, get_system
from entropic.core.trail import TrailBuffer
from entropic.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Construction-time defaults of a SimulationEngine."""

    system: SystemKind = SystemKind(constants.DEFAULT_SYSTEM)
    particle_count: int = constants.DEFAULT_PARTICLE_COUNT
    trail_capacity: int = constants.DEFAULT_TRAIL_CAPACITY
    time_scale: float = constants.DEFAULT_TIME_SCALE
    dt: float = constants.DEFAULT_DT
    trails_enabled: bool = True
    min_particles: int = constants.MIN_PARTICLE_COUNT
    max_particles: int = constants.MAX_PARTICLE_COUNT
    time_scale_floor: float = constants.TIME_SCALE_FLOOR
    time_scale_ceiling: float = constants.TIME_SCALE_CEILING
    seed: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "system", SystemKind.parse(self.system))
        if not 1 <= self.min_particles <= self.max_particles:
            raise ValueError("particle bounds must satisfy 1 <= min_particles <= max_particles")
        if not self.min_particles <= self.particle_count <= self.max_particles:
            raise ValueError(
                f"particle_count must be within [{self.min_particles}, {self.max_particles}], got {self.particle_count}"
            )
        if self.trail_capacity < 0:
            raise ValueError("trail_capacity must be >= 0")
        if not 0 < self.time_scale_floor <= self.time_scale_ceiling:
            raise ValueError("time scale bounds must satisfy 0 < floor <= ceiling")
        if self.time_scale <= 0:
            raise ValueError("time_scale must be positive")
        if self.dt <= 0:
            raise ValueError("dt must be positive")


@dataclass(frozen=True)
class EngineStatus:
    """Read-only view of the engine for overlays and reports."""

    system: SystemKind
    label: str
    parameters: Dict[str, float]
    time_scale: float
    particle_count: int
    trails_enabled: bool
    frame: int
    sim_time: float
    diverged: int = 0


class SimulationEngine:
    """
    Owns the active system, its coefficients, the time scale and the particles.

    Driven from a single render loop: ``advance`` once per frame, the other
    commands in response to input. Nothing here blocks or fails; out-of-range
    requests are clamped or ignored.

    Policies:

    * ``select_system`` restores the new system's default coefficients every
      time, and keeps particle states and trails.
    * ``toggle_trails`` clears every trail when switching trails off, so
      re-enabling starts from fresh history.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        initial_states: Optional[Sequence[Sequence[float]]] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config or EngineConfig()
        self._rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self._system: SystemDefinition = get_system(self.config.system)
        self._parameters = ParameterSet(self._system.kind)
        self._time_scale = self._clamp_time_scale(self.config.time_scale)
        self._trails_enabled = bool(self.config.trails_enabled)
        self._frame = 0
        self._sim_time = 0.0
        self._diverged = 0
        self._particles: List[Particle] = []

        if initial_states is not None:
            states = [State3.of(s) for s in initial_states]
            if not self.config.min_particles <= len(states) <= self.config.max_particles:
                raise ValueError(
                    f"initial_states must hold {self.config.min_particles}..{self.config.max_particles} states"
                )
            self._particles = [self._new_particle(s) for s in states]
        else:
            self._particles = [self._new_particle() for _ in range(self.config.particle_count)]
        logger.debug(
            "Engine ready system=%s particles=%d time_scale=%s trails=%s",
            self._system.kind.value,
            len(self._particles),
            self._time_scale,
            self._trails_enabled,
        )

    # -------------------------
    # Read access
    # -------------------------

    @property
    def active_system(self) -> SystemKind:
        return self._system.kind

    @property
    def system(self) -> SystemDefinition:
        return self._system

    @property
    def parameters(self) -> ParameterSet:
        return self._parameters

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @property
    def trails_enabled(self) -> bool:
        return self._trails_enabled

    @property
    def particles(self) -> Tuple[Particle, ...]:
        return tuple(self._particles)

    @property
    def particle_count(self) -> int:
        return len(self._particles)

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def sim_time(self) -> float:
        return self._sim_time

    def states(self) -> np.ndarray:
        """Current particle states as an ``(n, 3)`` array."""
        return np.array([p.state for p in self._particles], dtype=np.float64).reshape(-1, 3)

    def status(self) -> EngineStatus:
        return EngineStatus(
            system=self._system.kind,
            label=self._system.label,
            parameters=self._parameters.as_dict(),
            time_scale=self._time_scale,
            particle_count=len(self._particles),
            trails_enabled=self._trails_enabled,
            frame=self._frame,
            sim_time=self._sim_time,
            diverged=self._diverged,
        )

    # -------------------------
    # Particle creation
    # -------------------------

    def random_state(self) -> State3:
        """Draw a state from the active system's initial region."""
        (x0, x1), (y0, y1), (z0, z1) = self._system.initial_region
        return State3(
            float(self._rng.uniform(x0, x1)),
            float(self._rng.uniform(y0, y1)),
            float(self._rng.uniform(z0, z1)),
        )

    def _random_color(self) -> Tuple[float, float, float]:
        lo, hi = constants.COLOR_CHANNEL_RANGE
        r, g, b = self._rng.uniform(lo, hi, size=3)
        return float(r), float(g), float(b)

    def _new_particle(self, state: Optional[State3] = None) -> Particle:
        return Particle(
            state=state if state is not None else self.random_state(),
            trail=TrailBuffer(self.config.trail_capacity),
            color=self._random_color(),
        )

    # -------------------------
    # Commands
    # -------------------------

    def select_system(self, kind: "SystemKind | str") -> SystemKind:
        self._system = get_system(kind)
        self._parameters = ParameterSet(self._system.kind)
        logger.debug("Selected system=%s params=%s", self._system.kind.value, self._parameters.as_dict())
        return self._system.kind

    def adjust_parameter(self, slot: int, delta: float) -> Optional[float]:
        """Nudge the coefficient in ``slot``; slots the system lacks are ignored."""
        value = self._parameters.adjust_slot(int(slot), delta)
        if value is None:
            logger.debug("Ignoring slot=%d for system=%s", slot, self._system.kind.value)
        else:
            logger.debug("Adjusted %s -> %.6g", self._parameters.name_for_slot(int(slot)), value)
        return value

    def _clamp_time_scale(self, value: float) -> float:
        return min(max(float(value), self.config.time_scale_floor), self.config.time_scale_ceiling)

    def adjust_time_scale(self, delta: float) -> float:
        self._time_scale = self._clamp_time_scale(self._time_scale + float(delta))
        logger.debug("Time scale -> %.3f", self._time_scale)
        return self._time_scale

    def adjust_particle_count(self, delta: int) -> int:
        current = len(self._particles)
        target = min(max(current + int(delta), self.config.min_particles), self.config.max_particles)
        if target > current:
            self._particles.extend(self._new_particle() for _ in range(target - current))
        elif target < current:
            del self._particles[target:]
        if target != current:
            logger.debug("Particle count %d -> %d", current, target)
        return target

    def toggle_trails(self) -> bool:
        self._trails_enabled = not self._trails_enabled
        if not self._trails_enabled:
            for particle in self._particles:
                particle.trail.clear()
        logger.debug("Trails %s", "enabled" if self._trails_enabled else "disabled")
        return self._trails_enabled

    def reset(self) -> None:
        """Scatter every particle afresh and clear all trails."""
        for particle in self._particles:
            particle.reseed(self.random_state())
        self._diverged = 0
        logger.debug("Reset %d particles for system=%s", len(self._particles), self._system.kind.value)

    # -------------------------
    # Integration
    # -------------------------

    def advance(self, dt_wall: float) -> None:
        """
        Integrate every particle by ``dt_wall * time_scale``.

        Negative wall time counts as zero. Trails only record while enabled,
        but the states keep evolving either way.
        """
        dt = max(float(dt_wall), 0.0) * self._time_scale
        params = self._parameters.values
        kind = self._system.kind
        record = self._trails_enabled
        diverged = 0
        for particle in self._particles:
            new_state = particle.step(derivative(kind, particle.state, params), dt, record=record)
            if not new_state.is_finite():
                diverged += 1
        if diverged and diverged != self._diverged:
            logger.debug("%d particle(s) diverged under %s", diverged, self._parameters)
        self._diverged = diverged
        self._frame += 1
        self._sim_time += dt

    def step(self) -> None:
        """Advance by the configured base dt, ignoring wall time."""
        self.advance(self.config.dt)

    def run(self, frames: int, dt_wall: Optional[float] = None) -> None:
        for _ in range(int(frames)):
            self.advance(self.config.dt if dt_wall is None else dt_wall)
