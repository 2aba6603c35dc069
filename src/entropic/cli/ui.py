from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Sequence, Tuple

import typer

from entropic.core.systems.base import SystemDefinition
from entropic.engine.simulation import EngineStatus
from entropic.render.overlay import overlay_lines


def _timestamp_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _abs_path(path: Path | None) -> str:
    if path is None:
        return "n/a"
    try:
        return str(path.resolve())
    except OSError:
        return str(path)


def print_run_header(command: str, *, system: str, particles: int, frames: int, dt: float, seed: int | None) -> None:
    typer.echo(f"[run] command={command} ts_utc={_timestamp_utc()}")
    seed_text = "random" if seed is None else str(seed)
    typer.echo(f"[engine] system={system} particles={particles} frames={frames} dt={dt} seed={seed_text}")


def print_system(definition: SystemDefinition) -> None:
    typer.echo(f"{definition.kind.value} ({definition.label}, {definition.slot_count} slots)")
    for spec in definition.parameters:
        typer.echo(f"  slot {spec.slot}: {spec.name:<6} default={spec.default:<10.6g} step={spec.step:g}")
    region = " ".join(f"[{lo:g},{hi:g}]" for lo, hi in definition.initial_region)
    typer.echo(f"  initial region: {region}  display scale: {definition.display_scale:g}")


def print_bindings(bindings: Iterable[Tuple[str, str]]) -> None:
    typer.echo("key bindings")
    for keys, action in bindings:
        typer.echo(f"  {keys:<10} {action}")


def print_overlay(status: EngineStatus) -> None:
    for line in overlay_lines(status):
        typer.echo(f"[overlay] {line}")


def print_summary(status: EngineStatus) -> None:
    typer.echo(
        f"[done] frames={status.frame} sim_time={status.sim_time:.4f} "
        f"particles={status.particle_count} diverged={status.diverged}"
    )


def print_io_write(path: Path) -> None:
    typer.echo(f"[io] Writing output: {_abs_path(path)}")


def print_events(events: Iterable[dict]) -> None:
    for entry in events:
        typer.echo(f"[event] frame={entry['frame']} {entry['event']} -> {entry['result']}")


def print_check(label: str, expected: Sequence[float], actual: Sequence[float], ok: bool) -> None:
    exp = ", ".join(f"{v:.5f}" for v in expected)
    act = ", ".join(f"{v:.5f}" for v in actual)
    typer.echo(f"[check] {label}: expected=({exp}) actual=({act}) {'ok' if ok else 'FAIL'}")
