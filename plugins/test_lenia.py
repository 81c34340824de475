#!/usr/bin/env python3
"""
Tests for the Lenia step engine.

Verifies:
1. Cell values stay in [0, 1] for any tick count
2. A cleared field stays exactly zero
3. Toroidal wrap and translation equivariance
4. Determinism and FFT / direct backend agreement
5. NaN/Inf recovery, parameter commit timing, pause semantics
6. The R=13 scenario never saturates; survival depends on the seed
"""

import numpy as np
import pytest

from lenia_field.config import LeniaParams, RunParameters, Species
from lenia_field.errors import ConfigurationError, FieldAllocationError
from lenia_field.initializer import InitMode, PatternInitializer
from lenia_field.lenia import Lenia
from lenia_field.presets import CATALOG


def _engine(size=64, **kwargs):
    kwargs.setdefault("initializer", PatternInitializer(rng=0))
    return Lenia(size, **kwargs)


def test_values_stay_clamped():
    for name in ("Orbium", "Microbia", "Primordial Soup", "Oceania"):
        engine = _engine(64, species=CATALOG.get(name))
        engine.seed(InitMode.RANDOM_BLOB)
        for dt in (0.1, 1.0, 5.0):
            engine.step_n(5, dt)
            world = engine.world
            assert world.min() >= 0.0 and world.max() <= 1.0, name


def test_clear_field_stays_zero():
    engine = _engine(64, species=CATALOG.default)
    engine.seed(InitMode.CLEAR)
    engine.step_n(25)
    assert np.count_nonzero(engine.world) == 0
    assert engine.generation == 25


def test_toroidal_wrap():
    engine = _engine(64, params=LeniaParams(R=5))
    world = np.zeros((64, 64))
    world[0, 0] = 1.0
    engine.field.load(world)
    engine.step()
    U = engine.potential
    # The corner cell is a neighbour of the opposite corners through the wrap
    assert U[-1, -1] > 0.0
    assert U[-1, -1] == pytest.approx(U[1, 1])
    assert U[0, -3] == pytest.approx(U[0, 3])
    assert U[32, 32] == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("backend", ["fft", "direct"])
def test_translation_equivariance(backend):
    rng = np.random.default_rng(7)
    near_edge = np.zeros((64, 64))
    near_edge[:12, :12] = rng.random((12, 12))
    shifted = np.roll(near_edge, (30, 25), axis=(0, 1))

    a = _engine(64, species=CATALOG.default, backend=backend)
    b = _engine(64, species=CATALOG.default, backend=backend)
    a.field.load(near_edge)
    b.field.load(shifted)
    a.step_n(5)
    b.step_n(5)
    assert np.allclose(np.roll(a.world, (30, 25), axis=(0, 1)), b.world, atol=1e-9)


def test_deterministic_with_explicit_pattern():
    sp = CATALOG.get("Scutium")
    a = _engine(96, species=sp)
    b = _engine(96, species=sp)
    a.seed(InitMode.EXPLICIT_PATTERN)
    b.seed(InitMode.EXPLICIT_PATTERN)
    a.step_n(30)
    b.step_n(30)
    assert np.allclose(a.world, b.world, atol=1e-12)


def test_backends_agree():
    sp = CATALOG.get("Helix")
    fft = _engine(64, species=sp, backend="fft")
    direct = _engine(64, species=sp, backend="direct")
    fft.seed(InitMode.EXPLICIT_PATTERN)
    direct.seed(InitMode.EXPLICIT_PATTERN)
    fft.step_n(3)
    direct.step_n(3)
    assert np.allclose(fft.potential, direct.potential, atol=1e-8)
    assert np.allclose(fft.world, direct.world, atol=1e-8)


def test_kernel_wider_than_field():
    engine = _engine(16, params=LeniaParams(R=13))
    engine.field.load(np.full((16, 16), 0.3))
    engine.step()
    # A uniform field has a uniform potential equal to its value
    assert np.allclose(engine.potential, 0.3)


def test_numeric_anomalies_recovered():
    engine = _engine(32, species=CATALOG.default)
    engine.seed(InitMode.SEED)
    buf = engine.field.current_buffer()
    buf[5, 5] = np.nan
    buf[6, 6] = np.inf
    buf[7, 7] = 2.0
    engine.step()
    assert engine.anomaly_count == 3
    assert np.all(np.isfinite(engine.world))
    assert engine.world.min() >= 0.0 and engine.world.max() <= 1.0


def test_world_is_read_only():
    engine = _engine(32)
    with pytest.raises(ValueError):
        engine.world[0, 0] = 1.0
    with pytest.raises(ValueError):
        engine.potential[0, 0] = 1.0


def test_buffers_swap_each_tick():
    engine = _engine(32)
    first = engine.field.current_buffer()
    engine.step()
    assert engine.field.current_buffer() is not first
    engine.step()
    assert engine.field.current_buffer() is first


def test_params_commit_at_next_tick():
    engine = _engine(32, params=LeniaParams(R=9))
    engine.set_params(R=5, mu=0.2)
    assert engine.params.R == 5
    assert engine._params.R == 9
    assert engine.kernel.shape == (19, 19)
    engine.step()
    assert engine._params.R == 5 and engine._params.mu == 0.2
    assert engine.kernel.shape == (11, 11)


@pytest.mark.parametrize("values", [
    {"sigma": 0}, {"R": 0}, {"beta": []}, {"kernel_sigma": -1.0},
    {"beta": [1, 1, 1, 1, 1]}, {"dt": 0}, {"bogus": 1},
])
def test_invalid_params_keep_previous(values):
    engine = _engine(32)
    before = engine.get_params()
    with pytest.raises(ConfigurationError):
        engine.set_params(**values)
    assert engine.get_params() == before


def test_advance_respects_run_parameters():
    engine = _engine(32, species=CATALOG.default)
    engine.seed(InitMode.SPECIES_BLOB)
    frozen = engine.world.copy()
    engine.advance(RunParameters(running=False, speed=4))
    assert engine.generation == 0
    assert np.array_equal(engine.world, frozen)
    engine.advance(RunParameters(speed=3))
    assert engine.generation == 3


def test_load_species_reseeds():
    engine = _engine(128, species=CATALOG.default)
    engine.step_n(2)
    engine.load_species(CATALOG.get("Microbia"))
    assert engine.generation == 0
    assert engine.params.R == 7
    assert engine.species.name == "Microbia"
    assert engine.world.max() > 0.6


def test_bad_construction():
    with pytest.raises(ConfigurationError):
        Lenia(32, backend="gpu")
    with pytest.raises(FieldAllocationError):
        Lenia(0)
    with pytest.raises(ConfigurationError):
        _engine(32).seed("spiral")


def test_stats():
    engine = _engine(32)
    engine.field.load(np.full((32, 32), 0.5))
    s = engine.stats
    assert s["mass"] == pytest.approx(512.0)
    assert s["mean"] == pytest.approx(0.5)
    assert s["alive_pct"] == pytest.approx(100.0)


# Whether the single R=13 blob survives 100 ticks depends on the noise it is
# seeded with. Most seeds die out (seed 0 is extinct by tick 50); 2024 is a
# known survivor. None of them saturate the field.
SCENARIO_SEEDS = list(range(12)) + [2024]
SCENARIO_SURVIVORS = (2024,)


def _r13_scenario(seed, ticks=100):
    sp = Species(name="Scenario", R=13, mu=0.15, sigma=0.015,
                 kernel_sigma=0.15, beta=[1])
    engine = Lenia(512, species=sp, initializer=PatternInitializer(rng=seed))
    engine.seed(InitMode.SPECIES_BLOB)
    engine.step_n(ticks, dt=0.1)
    return engine


@pytest.mark.parametrize("seed", SCENARIO_SEEDS)
def test_r13_scenario_never_saturates(seed):
    engine = _r13_scenario(seed)
    mass = engine.stats["mass"]
    assert 0.0 <= mass < 0.5 * engine.field.size
    assert engine.anomaly_count == 0
    if seed in SCENARIO_SURVIVORS:
        assert mass > 1.0


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-q"]))
