import pytest

from entropic.controls.keymap import KeyResult, describe_bindings, handle_key, is_known_key
from entropic.core.systems.base import SystemKind
from entropic.engine.simulation import EngineConfig, SimulationEngine


@pytest.fixture
def engine():
    return SimulationEngine(EngineConfig(seed=0, particle_count=10))


@pytest.mark.parametrize(
    "key,kind",
    [("1", SystemKind.LORENZ), ("2", SystemKind.ROSSLER), ("3", SystemKind.AIZAWA), ("4", SystemKind.CHEN_LEE)],
)
def test_number_keys_select_systems(engine, key, kind):
    assert handle_key(engine, key) is KeyResult.HANDLED
    assert engine.active_system is kind


def test_slot_keys_use_per_slot_steps(engine):
    handle_key(engine, "q")
    handle_key(engine, "W")
    handle_key(engine, "d")
    assert engine.parameters.get("sigma") == pytest.approx(10.1)
    assert engine.parameters.get("rho") == pytest.approx(28.1)
    assert engine.parameters.get("beta") == pytest.approx(8.0 / 3.0 - 0.01)


def test_high_slots_only_reach_aizawa(engine):
    before = engine.parameters.values
    for key in ("r", "f", "y", "g", "u", "j"):
        assert handle_key(engine, key) is KeyResult.HANDLED
    assert engine.parameters.values == before

    handle_key(engine, "3")
    handle_key(engine, "r")
    handle_key(engine, "g")
    handle_key(engine, "u")
    assert engine.parameters.get("d") == pytest.approx(3.51)
    assert engine.parameters.get("e") == pytest.approx(0.24)
    assert engine.parameters.get("f") == pytest.approx(0.11)


def test_time_scale_particle_and_trail_keys(engine):
    handle_key(engine, "z")
    assert engine.time_scale == pytest.approx(1.1)
    handle_key(engine, "x")
    handle_key(engine, "x")
    assert engine.time_scale == pytest.approx(0.9)

    handle_key(engine, "c")
    assert engine.particle_count == 15
    handle_key(engine, "v")
    handle_key(engine, "v")
    assert engine.particle_count == 5

    handle_key(engine, "t")
    assert engine.trails_enabled is False


def test_backspace_resets(engine):
    engine.run(3)
    assert handle_key(engine, "Backspace") is KeyResult.HANDLED
    assert all(len(p.trail) == 0 for p in engine.particles)


def test_driver_keys_are_handed_back(engine):
    assert handle_key(engine, "h") is KeyResult.TOGGLE_UI
    assert handle_key(engine, "Escape") is KeyResult.QUIT


def test_unknown_key_is_ignored(engine):
    status = engine.status()
    assert handle_key(engine, "p") is KeyResult.IGNORED
    assert engine.status() == status
    assert not is_known_key("p")
    assert is_known_key("escape")


def test_describe_bindings_mentions_every_group():
    keys = [k for k, _ in describe_bindings()]
    assert "1-4" in keys
    assert "Q/A" in keys
    assert "U/J" in keys
    assert "Escape" in keys
