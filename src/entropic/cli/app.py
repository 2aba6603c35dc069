from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import typer

from entropic.cli import ui
from entropic.controls.keymap import describe_bindings
from entropic.core import constants
from entropic.core.field import derivative
from entropic.core.parameters import ParameterSet
from entropic.core.systems.base import SystemKind, get_system, list_systems
from entropic.engine.simulation import EngineConfig, SimulationEngine
from entropic.io.formats import engine_snapshot, write_json
from entropic.scenario.runner import ConfigError, parse_scenario, run_scenario, write_result
from entropic.utils.logging import resolve_log_level, set_command_context, setup_logging

app = typer.Typer(help="Entropic: particle ensembles on chaotic attractors")

# Golden derivatives at (1, 1, 1) with default coefficients
GOLDEN_DERIVATIVES: Tuple[Tuple[SystemKind, Tuple[float, float, float]], ...] = (
    (SystemKind.LORENZ, (0.0, 26.0, 1.0 - 8.0 / 3.0)),
    (SystemKind.ROSSLER, (-2.0, 1.2, -4.5)),
    (SystemKind.AIZAWA, (-3.2, 3.8, 0.95 + 0.6 - 1.0 / 3.0 - 2.5 + 0.1)),
    (SystemKind.CHEN_LEE, (4.0, -9.0, -0.38 + 1.0 / 3.0)),
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress (INFO)"),
    debug: bool = typer.Option(False, "--debug", help="Log engine transitions (DEBUG)"),
):
    setup_logging(resolve_log_level(verbose, debug))


def _parse_system(value: str) -> SystemKind:
    try:
        return SystemKind.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _close(a: Sequence[float], b: Sequence[float], tol: float = 1e-9) -> bool:
    return all(math.isclose(x, y, rel_tol=tol, abs_tol=tol) for x, y in zip(a, b))


@app.command()
def systems():
    """List the supported systems with their parameter slots."""
    set_command_context("systems")
    for name in list_systems():
        ui.print_system(get_system(name))
    ui.print_bindings(describe_bindings())


@app.command()
def simulate(
    system: str = typer.Option(constants.DEFAULT_SYSTEM, "--system", "-s", help=f"One of {list_systems()}"),
    particles: int = typer.Option(constants.DEFAULT_PARTICLE_COUNT, "--particles", "-n", help="Particle count"),
    frames: int = typer.Option(500, "--frames", "-f", help="Number of advances"),
    dt: float = typer.Option(constants.DEFAULT_DT, help="Wall time per frame"),
    time_scale: float = typer.Option(constants.DEFAULT_TIME_SCALE, "--time-scale", help="Time scale multiplier"),
    trail_capacity: int = typer.Option(constants.DEFAULT_TRAIL_CAPACITY, "--trail-capacity", help="Trail length"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible particle placement"),
    no_trails: bool = typer.Option(False, "--no-trails", help="Start with trails disabled"),
    out_json: Optional[Path] = typer.Option(None, "--out-json", help="Write a final snapshot as JSON"),
    include_trails: bool = typer.Option(False, "--include-trails", help="Include trails in the JSON snapshot"),
    png: Optional[Path] = typer.Option(None, "--png", help="Render the final frame to PNG"),
):
    """Run the engine headless for a number of frames and report the result."""
    set_command_context("simulate")
    kind = _parse_system(system)
    if frames < 0:
        typer.secho("frames must be >= 0", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    try:
        config = EngineConfig(
            system=kind,
            particle_count=particles,
            trail_capacity=trail_capacity,
            time_scale=time_scale,
            dt=dt,
            trails_enabled=not no_trails,
            seed=seed,
        )
    except ValueError as exc:
        typer.secho(f"Invalid engine settings: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    ui.print_run_header("simulate", system=kind.value, particles=particles, frames=frames, dt=dt, seed=seed)
    engine = SimulationEngine(config)
    engine.run(frames)
    status = engine.status()
    ui.print_overlay(status)

    if out_json:
        ui.print_io_write(out_json)
        write_json(out_json, engine_snapshot(engine, include_trails=include_trails))
    if png:
        from entropic.render.frame import render_frame

        ui.print_io_write(png)
        render_frame(engine, png)
    ui.print_summary(status)


@app.command()
def scenario(
    config: Path = typer.Option(..., "--config", "-c", exists=True, readable=True, help="YAML scenario file"),
    out_json: Optional[Path] = typer.Option(None, "--out-json", help="Write the run record as JSON"),
    png: Optional[Path] = typer.Option(None, "--png", help="Render the final frame to PNG"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Override engine.seed"),
):
    """Play a scripted sequence of key presses and commands from YAML."""
    set_command_context("scenario")
    try:
        cfg = parse_scenario(config, seed_override=seed)
    except ConfigError as exc:
        typer.secho(f"Config error: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    ui.print_run_header(
        "scenario",
        system=cfg.engine.system.value,
        particles=cfg.engine.particle_count,
        frames=cfg.run.frames,
        dt=cfg.run.dt,
        seed=cfg.engine.seed,
    )
    result = run_scenario(cfg)
    ui.print_events(result.applied)
    status = result.engine.status()
    ui.print_overlay(status)

    if out_json:
        ui.print_io_write(out_json)
        write_result(out_json, result)
    if png:
        from entropic.render.frame import render_frame

        ui.print_io_write(png)
        render_frame(result.engine, png, show_ui=result.show_ui, title=cfg.name)
    ui.print_summary(status)


@app.command()
def selftest():
    """
    Check golden derivatives of every system and one Lorenz Euler step.
    """
    set_command_context("selftest")
    failures: List[str] = []

    for kind, expected in GOLDEN_DERIVATIVES:
        actual = derivative(kind, (1.0, 1.0, 1.0), ParameterSet(kind))
        ok = _close(actual, expected)
        ui.print_check(f"{kind.value} derivative", expected, actual, ok)
        if not ok:
            failures.append(kind.value)

    engine = SimulationEngine(
        EngineConfig(system=SystemKind.LORENZ, particle_count=1, time_scale=1.0, seed=0),
        initial_states=[(1.0, 1.0, 1.0)],
    )
    engine.advance(0.01)
    particle = engine.particles[0]
    expected_state = (1.0, 1.26, 1.0 + 0.01 * (1.0 - 8.0 / 3.0))
    ok = _close(particle.state, expected_state) and len(particle.trail) == 1
    ui.print_check("lorenz euler step", expected_state, particle.state, ok)
    if not ok:
        failures.append("lorenz euler step")

    if failures:
        typer.secho(f"Selftest FAILED: {', '.join(failures)}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho("Selftest passed (golden derivatives).", fg=typer.colors.GREEN)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
