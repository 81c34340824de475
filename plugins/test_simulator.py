#!/usr/bin/env python3
"""
Tests for the controller-facing simulator and the headless CLI.

Verifies:
1. Species switching, including the not-found outcome
2. Rejected updates leave the configuration untouched
3. Pause, speed and init commands
4. Outputs are read-only
"""

import logging

import numpy as np
import pytest

from lenia_field.__main__ import main
from lenia_field.errors import ConfigurationError
from lenia_field.logging_config import setup_logging
from lenia_field.simulator import LeniaSimulator


def _sim(species=None, size=64):
    return LeniaSimulator(species, size=size, seed=0)


def test_starts_with_default_species():
    sim = _sim()
    assert sim.species.name == "Orbium"
    assert sim.world.shape == (64, 64)
    assert sim.stats["mass"] > 0.0
    assert sim.run.running and sim.run.speed == 1


def test_unknown_species_is_not_found():
    sim = _sim()
    before = sim.params
    world = sim.world.copy()
    assert sim.apply_species("Nonexistium") is False
    assert sim.species.name == "Orbium"
    assert sim.params == before
    assert np.array_equal(sim.world, world)
    assert sim.set_runtime_params(species="Nonexistium") is False
    assert sim.params == before


def test_unknown_species_at_startup():
    with pytest.raises(ConfigurationError):
        LeniaSimulator("Nonexistium", size=32)


def test_apply_species():
    sim = _sim()
    sim.run_frames(3)
    assert sim.apply_species("Microbia") is True
    assert sim.species.name == "Microbia"
    assert sim.params.R == 7
    assert sim.stats["generation"] == 0


def test_rejected_update_keeps_previous():
    sim = _sim()
    before_params, before_run = sim.params, sim.run
    assert sim.set_runtime_params(sigma=0.0) is False
    assert sim.set_runtime_params(mu=0.3, R=-1) is False
    assert sim.set_runtime_params(speed=0) is False
    assert sim.set_runtime_params(dt=0.05, beta=[]) is False
    assert sim.set_runtime_params(init="spiral") is False
    assert sim.set_runtime_params(colour="plasma") is False
    assert sim.params == before_params
    assert sim.run == before_run


def test_parameter_overrides():
    sim = _sim()
    assert sim.set_runtime_params(mu=0.2, beta=[1, 0.5], dt=0.05, speed=2) is True
    assert sim.params.mu == 0.2
    assert sim.params.beta == (1.0, 0.5)
    assert sim.run.dt == 0.05 and sim.run.speed == 2
    # Hand-tuned values stay detached from the preset
    assert sim.species.mu == 0.15
    sim.step_frame()
    assert sim.stats["generation"] == 2


def test_species_switch_with_overrides():
    sim = _sim(size=128)
    assert sim.set_runtime_params(species="Helix", mu=0.2) is True
    assert sim.species.name == "Helix"
    assert sim.params.R == 15 and sim.params.mu == 0.2


def test_pause_freezes_field():
    sim = _sim()
    sim.pause()
    frozen = sim.world.copy()
    sim.run_frames(5)
    assert np.array_equal(sim.world, frozen)
    assert sim.stats["generation"] == 0
    sim.toggle_pause()
    assert sim.run.running
    sim.step_frame()
    assert sim.stats["generation"] == 1


def test_init_commands():
    sim = _sim()
    assert sim.initialize("clear") is True
    sim.run_frames(5)
    assert sim.stats["mass"] == 0.0
    assert sim.initialize("seed") is True
    assert sim.world[32, 32] == pytest.approx(1.0)
    assert sim.initialize("random") is True
    assert sim.stats["mass"] > 0.0
    assert sim.initialize("bogus") is False


def test_explicit_pattern_payload():
    sim = _sim()
    assert sim.set_runtime_params(pattern=[[1.0] * 4] * 4) is True
    assert sim.stats["mass"] == pytest.approx(16.0)
    assert sim.world[30:34, 30:34].sum() == pytest.approx(16.0)


def test_respawn_restarts_species():
    sim = _sim()
    sim.initialize("clear")
    sim.respawn()
    assert sim.stats["mass"] > 0.0
    assert sim.stats["generation"] == 0


def test_outputs_read_only():
    sim = _sim()
    sim.step_frame()
    with pytest.raises(ValueError):
        sim.world[0, 0] = 0.5
    with pytest.raises(ValueError):
        sim.potential[0, 0] = 0.5
    assert sim.potential.shape == (64, 64)


def test_returned_frames_are_stable():
    sim = _sim()
    first = sim.step_frame()
    kept = first.copy()
    sim.step_frame()
    sim.step_frame()
    assert np.array_equal(first, kept)
    assert not np.array_equal(first, sim.world)
    final = sim.run_frames(2)
    sim.step_frame()
    assert not np.array_equal(final, sim.world)
    assert np.array_equal(sim.snapshot(), sim.world)


def test_setup_logging_replaces_handler():
    logger = setup_logging(logging.DEBUG)
    setup_logging(logging.WARNING)
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_cli():
    assert main(["--list"]) == 0
    assert main(["Microbia", "--size", "64", "--steps", "3", "--every", "1", "--seed", "1"]) == 0
    assert main(["--mode", "spiral", "--size", "32", "--steps", "1"]) == 1
    assert main(["--bogus"]) == 2
    assert main(["--size", "abc"]) == 2


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-q"]))
