import math

import numpy as np
import pytest

from entropic.core.state import State3
from entropic.core.systems.base import SystemKind, get_system
from entropic.engine.simulation import EngineConfig, SimulationEngine


def _within_region(state, kind):
    region = get_system(kind).initial_region
    return all(lo <= v <= hi for v, (lo, hi) in zip(state, region))


def test_defaults():
    engine = SimulationEngine(EngineConfig(seed=1))
    assert engine.active_system is SystemKind.LORENZ
    assert engine.particle_count == 50
    assert engine.time_scale == 1.0
    assert engine.trails_enabled is True
    assert all(p.trail.capacity == 100 for p in engine.particles)
    assert all(_within_region(p.state, SystemKind.LORENZ) for p in engine.particles)


def test_single_lorenz_step_end_to_end():
    engine = SimulationEngine(
        EngineConfig(system="lorenz", particle_count=1, time_scale=1.0),
        initial_states=[(1.0, 1.0, 1.0)],
    )
    engine.advance(0.01)
    particle = engine.particles[0]
    assert particle.state == pytest.approx((1.0, 1.26, 0.98333), abs=1e-5)
    assert len(particle.trail) == 1
    assert particle.trail.latest() == particle.state


def test_time_scale_multiplies_wall_dt():
    engine = SimulationEngine(EngineConfig(particle_count=1, time_scale=2.0), initial_states=[(1.0, 1.0, 1.0)])
    engine.advance(0.005)
    assert engine.particles[0].state == pytest.approx((1.0, 1.26, 1.0 + 0.01 * (1.0 - 8.0 / 3.0)))
    assert engine.sim_time == pytest.approx(0.01)
    assert engine.frame == 1


def test_negative_wall_dt_is_a_no_op_step():
    engine = SimulationEngine(EngineConfig(particle_count=1), initial_states=[(1.0, 2.0, 3.0)])
    engine.advance(-1.0)
    assert engine.particles[0].state == (1.0, 2.0, 3.0)


def test_select_system_resets_parameters_and_keeps_particles():
    engine = SimulationEngine(EngineConfig(seed=3, particle_count=5))
    engine.run(3)
    states = [p.state for p in engine.particles]
    trail_lengths = [len(p.trail) for p in engine.particles]

    engine.select_system(SystemKind.ROSSLER)
    engine.adjust_parameter(2, -0.1)
    assert engine.parameters.get("c") == pytest.approx(5.6)
    assert engine.parameters.get("a") == 0.2
    assert engine.parameters.get("b") == 0.2
    assert [p.state for p in engine.particles] == states
    assert [len(p.trail) for p in engine.particles] == trail_lengths

    engine.select_system("lorenz")
    engine.select_system("rossler")
    assert engine.parameters.get("c") == 5.7


def test_adjust_parameter_out_of_range_slot_is_ignored():
    engine = SimulationEngine(EngineConfig(seed=0, particle_count=1))
    before = engine.parameters.values
    assert engine.adjust_parameter(4, 1.0) is None
    assert engine.parameters.values == before

    engine.select_system("aizawa")
    assert engine.adjust_parameter(5, 0.05) == pytest.approx(0.15)


def test_time_scale_never_reaches_zero():
    engine = SimulationEngine(EngineConfig(seed=0, particle_count=2))
    engine.adjust_time_scale(-1000.0)
    assert engine.time_scale > 0
    assert engine.time_scale == pytest.approx(0.1)
    before = engine.states()
    engine.advance(0.01)
    after = engine.states()
    assert np.all(np.isfinite(after))
    assert not np.array_equal(before, after)


def test_time_scale_ceiling():
    engine = SimulationEngine(EngineConfig(seed=0, particle_count=1))
    engine.adjust_time_scale(100.0)
    assert engine.time_scale == pytest.approx(5.0)


@pytest.mark.parametrize(
    "deltas",
    [[5, 5, -3], [-100], [300], [10, -400, 7], [0], [-49, -1, 2]],
)
def test_particle_count_follows_clamped_steps(deltas):
    engine = SimulationEngine(EngineConfig(seed=5))
    expected = 50
    for delta in deltas:
        expected = min(max(expected + delta, 1), 200)
        assert engine.adjust_particle_count(delta) == expected
    assert engine.particle_count == expected


def test_growth_keeps_existing_particles():
    engine = SimulationEngine(EngineConfig(seed=2, particle_count=3))
    engine.run(4)
    before = list(engine.particles)
    snapshot = [(p.state, list(p.trail)) for p in before]

    engine.adjust_particle_count(5)
    after = engine.particles
    assert len(after) == 8
    for original, particle, (state, trail) in zip(before, after[:3], snapshot):
        assert particle is original
        assert particle.state == state
        assert list(particle.trail) == trail
    assert all(len(p.trail) == 0 for p in after[3:])


def test_shrink_removes_from_the_end():
    engine = SimulationEngine(EngineConfig(seed=2, particle_count=6))
    first = engine.particles[:2]
    engine.adjust_particle_count(-4)
    assert engine.particles == first


def test_trails_disabled_still_integrates():
    engine = SimulationEngine(EngineConfig(particle_count=1, trails_enabled=False), initial_states=[(1.0, 1.0, 1.0)])
    engine.advance(0.01)
    particle = engine.particles[0]
    assert particle.state == pytest.approx((1.0, 1.26, 0.98333), abs=1e-5)
    assert len(particle.trail) == 0


def test_toggle_trails_clears_history_when_disabling():
    engine = SimulationEngine(EngineConfig(seed=4, particle_count=3))
    engine.run(5)
    assert all(len(p.trail) == 5 for p in engine.particles)

    assert engine.toggle_trails() is False
    assert all(len(p.trail) == 0 for p in engine.particles)
    engine.run(2)
    assert all(len(p.trail) == 0 for p in engine.particles)

    assert engine.toggle_trails() is True
    engine.run(1)
    assert all(len(p.trail) == 1 for p in engine.particles)


def test_reset_rescatters_and_clears_trails():
    engine = SimulationEngine(EngineConfig(seed=9, particle_count=10))
    engine.select_system("aizawa")
    engine.adjust_parameter(0, 0.02)
    engine.adjust_time_scale(0.3)
    engine.run(20)
    params = engine.parameters.values
    time_scale = engine.time_scale

    engine.reset()
    assert engine.active_system is SystemKind.AIZAWA
    assert engine.parameters.values == params
    assert engine.time_scale == time_scale
    assert engine.particle_count == 10
    for particle in engine.particles:
        assert len(particle.trail) == 0
        assert _within_region(particle.state, SystemKind.AIZAWA)


def test_seed_makes_runs_reproducible():
    a = SimulationEngine(EngineConfig(seed=42, particle_count=8))
    b = SimulationEngine(EngineConfig(seed=42, particle_count=8))
    a.run(50)
    b.run(50)
    np.testing.assert_array_equal(a.states(), b.states())


def test_divergence_is_reported_not_raised():
    engine = SimulationEngine(EngineConfig(particle_count=1), initial_states=[(1e150, 1e150, 1e150)])
    engine.run(3)
    status = engine.status()
    assert status.diverged == 1
    assert not State3.of(engine.particles[0].state).is_finite()


def test_status_reflects_engine():
    engine = SimulationEngine(EngineConfig(seed=0, particle_count=7, system="chen_lee"))
    engine.step()
    status = engine.status()
    assert status.system is SystemKind.CHEN_LEE
    assert status.label == "Chen-Lee"
    assert status.parameters == {"alpha": 5.0, "beta": -10.0, "gamma": -0.38}
    assert status.particle_count == 7
    assert status.frame == 1
    assert status.sim_time == pytest.approx(0.01)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"particle_count": 0},
        {"particle_count": 201},
        {"time_scale": 0.0},
        {"trail_capacity": -1},
        {"dt": 0.0},
        {"system": "henon"},
    ],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_attractor_stays_bounded_with_defaults():
    engine = SimulationEngine(EngineConfig(seed=11, particle_count=5))
    engine.run(2000)
    states = engine.states()
    assert np.all(np.isfinite(states))
    assert np.all(np.abs(states) < 100.0)
    assert math.isclose(engine.sim_time, 20.0, rel_tol=1e-9)
