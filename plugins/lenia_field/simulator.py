"""
LeniaSimulator - controller-facing wrapper around the Lenia engine

Accepts everything an outside control panel can send (species selection,
dt/speed/running, parameter overrides, init commands, explicit patterns)
and exposes the read-only current buffer for rendering. Rendering itself
lives outside this package.

Usage:
    from lenia_field.simulator import LeniaSimulator
    sim = LeniaSimulator('Orbium', 512)
    world = sim.step_frame()  # (H, W) float64 in [0, 1], private copy
"""

import logging
import threading

from .config import DEFAULT_SIZE, LeniaParams, RunParameters, override
from .errors import ConfigurationError
from .initializer import InitMode, PatternInitializer
from .lenia import Lenia
from .presets import CATALOG

logger = logging.getLogger(__name__)

RUN_KEYS = ("dt", "speed", "running")
PARAM_KEYS = tuple(LeniaParams.model_fields)


class LeniaSimulator:
    """Headless simulation session.

    One frame runs ``speed`` ticks back to back. Frames, re-seeds and
    parameter changes share one lock, so a re-seed can never land between
    the convolution and the buffer swap of a tick.

    Args:
        species: Initial species name (catalog default if None)
        size: Square field size in cells
        width, height: Explicit field dimensions, overriding ``size``
        backend: Convolution backend, "fft" or "direct"
        seed: Seed for the pattern initializer's random generator
        catalog: SpeciesCatalog to draw presets from
    """

    def __init__(self, species=None, size=DEFAULT_SIZE, width=None, height=None,
                 backend="fft", seed=None, catalog=CATALOG):
        self.catalog = catalog
        preset = catalog.default if species is None else catalog.require(species)
        self.run = RunParameters()
        self._lock = threading.Lock()

        width = size if width is None else width
        height = width if height is None else height
        self.engine = Lenia(width, height, species=preset, dt=self.run.dt,
                            backend=backend, initializer=PatternInitializer(rng=seed))
        self.engine.seed(InitMode.SPECIES_BLOB)
        logger.info("Started %s on a %dx%d field", preset.name, width, height)

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    @property
    def species(self):
        return self.engine.species

    @property
    def params(self):
        return self.engine.params

    @property
    def world(self):
        """Read-only current buffer, valid until the next frame runs."""
        return self.engine.world

    @property
    def potential(self):
        """Read-only local potential from the last tick."""
        return self.engine.potential

    @property
    def stats(self):
        return self.engine.stats

    def apply_species(self, name):
        """Switch to a named preset and re-seed.

        Returns:
            False if the name is unknown (nothing changes), True otherwise
        """
        preset = self.catalog.get(name)
        if preset is None:
            logger.warning("Unknown species %r, keeping %s", name, self.species.name)
            return False
        with self._lock:
            self.engine.load_species(preset)
        logger.info("Loaded species %s", preset.name)
        return True

    def respawn(self):
        """Re-seed the current species."""
        with self._lock:
            self.engine.seed(InitMode.SPECIES_BLOB)

    def initialize(self, command, pattern=None):
        """Run an init command: clear, seed, random, species or pattern.

        Returns:
            False if the command is unknown, True otherwise
        """
        try:
            with self._lock:
                self.engine.seed(command, pattern=pattern)
        except ConfigurationError as exc:
            logger.warning("Rejected init command: %s", exc)
            return False
        return True

    def set_runtime_params(self, **kwargs):
        """Apply controller input.

        Supported keys:
            species: Switch to named preset (re-seeds)
            dt, speed, running: Run parameters
            R, mu, sigma, kernel_sigma, beta: Parameter overrides
            init: Init command string
            pattern: Explicit pattern payload (implies init='pattern')

        Everything is validated before anything is applied. A rejected
        update changes nothing.

        Returns:
            True if applied, False if rejected
        """
        unknown = set(kwargs) - set(RUN_KEYS) - set(PARAM_KEYS) - {"species", "init", "pattern"}
        if unknown:
            logger.warning("Rejected update, unknown keys: %s", sorted(unknown))
            return False

        species = None
        if "species" in kwargs:
            species = self.catalog.get(kwargs["species"])
            if species is None:
                logger.warning("Rejected update, unknown species %r", kwargs["species"])
                return False

        init = kwargs.get("init")
        if init is None and kwargs.get("pattern") is not None:
            init = InitMode.EXPLICIT_PATTERN
        if init is not None:
            try:
                init = InitMode(init)
            except ValueError:
                logger.warning("Rejected update, unknown init command %r", init)
                return False

        run_changes = {k: kwargs[k] for k in RUN_KEYS if k in kwargs}
        param_changes = {k: kwargs[k] for k in PARAM_KEYS if k in kwargs}
        try:
            run = override(self.run, **run_changes) if run_changes else self.run
            base = species.params if species is not None else self.params
            params = override(base, **param_changes) if param_changes else base
        except ConfigurationError as exc:
            logger.warning("Rejected update: %s", exc)
            return False

        with self._lock:
            if species is not None:
                self.engine.load_species(species, seed=False)
            self.engine.set_params(dt=run.dt, **params.model_dump())
            self.run = run
            if species is not None and init is None:
                init = InitMode.SPECIES_BLOB
            if init is not None:
                self.engine.seed(init, pattern=kwargs.get("pattern"))
        return True

    def pause(self):
        self.set_runtime_params(running=False)

    def resume(self):
        self.set_runtime_params(running=True)

    def toggle_pause(self):
        self.set_runtime_params(running=not self.run.running)

    def step_frame(self):
        """Advance one displayed frame.

        Returns:
            A private copy of the field, taken under the lock, so it stays
            valid after later frames reuse the engine's buffers
        """
        with self._lock:
            return self.engine.advance(self.run).copy()

    def run_frames(self, n):
        """Advance n frames. Returns a copy of the final state."""
        for _ in range(n):
            self.step_frame()
        return self.snapshot()

    def snapshot(self):
        """Copy of the current field, consistent with respect to frames."""
        with self._lock:
            return self.engine.world.copy()
