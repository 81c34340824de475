"""
Lenia - Continuous Cellular Automaton Engine

A continuous generalization of Conway's Game of Life where:
- States are continuous [0, 1] instead of binary
- Neighborhoods use smooth ring kernels instead of discrete counts
- Growth/decay is governed by a Gaussian growth function
- Time steps are fractional for smooth evolution

One tick: A(t + dt) = clamp(A(t) + dt * G(K * A), 0, 1) on a torus.

Reference: Bert Chan, "Lenia - Biology of Artificial Life" (2019)
"""

import logging

import numpy as np
from scipy import ndimage

from .config import (
    DEFAULT_DT, DEFAULT_SIZE, KERNEL_SUM_EPSILON, MAX_KERNEL_RADIUS,
    LeniaParams, RunParameters, override, validate,
)
from .engine_base import CAEngine
from .errors import ConfigurationError
from .initializer import InitMode, PatternInitializer
from .kernels import build_kernel_table, growth, kernel_fft

logger = logging.getLogger(__name__)

BACKENDS = ("fft", "direct")


class Lenia(CAEngine):
    def __init__(self, width=DEFAULT_SIZE, height=None, params=None,
                 species=None, dt=DEFAULT_DT, backend="fft",
                 max_radius=MAX_KERNEL_RADIUS, initializer=None):
        """
        Args:
            width: Field width in cells
            height: Field height in cells (defaults to width)
            params: LeniaParams to start from
            species: Species preset; its params win over ``params``
            dt: Default time step for step() calls without one
            backend: "fft" (circular FFT convolution) or "direct"
                (scipy.ndimage.correlate with periodic boundary)
            max_radius: Cap on the sampled offset window
            initializer: PatternInitializer used by seed()
        """
        super().__init__(width, height)
        if backend not in BACKENDS:
            raise ConfigurationError(f"backend must be one of {BACKENDS}, got {backend!r}")
        self.backend = backend
        self.max_radius = max_radius
        self.dt = validate(RunParameters, dt=dt).dt
        self.species = species
        self.initializer = initializer or PatternInitializer()
        self.anomaly_count = 0

        if species is not None:
            params = species.params
        self._params = params if params is not None else LeniaParams()
        self._pending = None
        self._potential = np.zeros(self.field.shape)
        self._build_kernel()

    # -----------------------------------------------------------------------
    # Kernel
    # -----------------------------------------------------------------------

    def _build_kernel(self):
        """Build the offset -> weight table and pre-compute its FFT"""
        p = self._params
        table = build_kernel_table(p.R, p.beta, p.kernel_sigma, self.max_radius)
        total = table.sum()
        self._kernel_total = total
        if total > KERNEL_SUM_EPSILON:
            self._kernel = table / total
        else:
            self._kernel = np.zeros_like(table)
        self._kernel_fft = kernel_fft(self._kernel, self.field.shape)
        logger.debug("Built kernel R=%d window=%d rings=%d sum=%.4g",
                     p.R, self._kernel.shape[0], p.ring_count, total)

    @property
    def kernel(self):
        """Normalized offset -> weight table currently in use."""
        view = self._kernel.view()
        view.flags.writeable = False
        return view

    def _convolve(self, world):
        """Kernel-weighted neighbourhood average with toroidal wrap"""
        if self._kernel_total <= KERNEL_SUM_EPSILON:
            return np.zeros_like(world)
        if self.backend == "direct":
            return ndimage.correlate(world, self._kernel, mode="wrap")
        U = np.fft.irfft2(np.fft.rfft2(world) * self._kernel_fft, s=world.shape)
        # FFT round-off can dip just outside the convex hull of [0, 1]
        return np.clip(U, 0.0, 1.0, out=U)

    # -----------------------------------------------------------------------
    # Stepping
    # -----------------------------------------------------------------------

    def _commit_pending(self):
        """Swap in queued parameter overrides. Only called between ticks."""
        if self._pending is None:
            return
        pending, self._pending = self._pending, None
        rebuild = (pending.R, pending.beta, pending.kernel_sigma) != (
            self._params.R, self._params.beta, self._params.kernel_sigma)
        self._params = pending
        if rebuild:
            self._build_kernel()

    def _read_current(self):
        """Current buffer with NaN/Inf and out-of-range cells read as 0."""
        world = self.field.current_buffer()
        bad = ~np.isfinite(world)
        bad |= world < 0.0
        bad |= world > 1.0
        n_bad = int(bad.sum())
        if n_bad:
            self.anomaly_count += n_bad
            logger.debug("Replaced %d anomalous cells with 0 at generation %d",
                         n_bad, self.generation)
            return np.where(bad, 0.0, world)
        return world

    def step(self, dt=None):
        """Advance one tick. Returns the read-only current buffer."""
        self._commit_pending()
        dt = self.dt if dt is None else dt
        params = self._params

        world = self._read_current()
        U = self._convolve(world)

        out = self.field.next_buffer()
        np.add(world, dt * growth(U, params.mu, params.sigma), out=out)
        np.clip(out, 0.0, 1.0, out=out)

        self._potential = U
        self.field.swap()
        self.generation += 1
        return self.world

    @property
    def potential(self):
        """Local potential u from the most recent tick (diagnostics only)."""
        view = self._potential.view()
        view.flags.writeable = False
        return view

    # -----------------------------------------------------------------------
    # Parameters
    # -----------------------------------------------------------------------

    @property
    def params(self):
        """Parameters that the next tick will run with."""
        return self._params if self._pending is None else self._pending

    def set_params(self, **params):
        """Queue parameter overrides for the next tick.

        Accepts any LeniaParams field (R, mu, sigma, kernel_sigma, beta) and
        dt. The whole update is validated up front; on ConfigurationError
        nothing changes.
        """
        dt = params.pop("dt", None)
        if dt is not None:
            dt = validate(RunParameters, dt=dt).dt
        candidate = override(self.params, **params) if params else None

        if dt is not None:
            self.dt = dt
        if candidate is not None:
            self._pending = candidate

    def load_species(self, species, seed=True):
        """Adopt a species' parameters and optionally re-seed from it."""
        self.species = species
        self._pending = species.params
        if seed:
            self.seed(InitMode.SPECIES_BLOB)

    def get_params(self):
        p = self.params
        return {
            "R": p.R,
            "mu": p.mu,
            "sigma": p.sigma,
            "kernel_sigma": p.kernel_sigma,
            "beta": list(p.beta),
            "dt": self.dt,
        }

    # -----------------------------------------------------------------------
    # Seeding
    # -----------------------------------------------------------------------

    def seed(self, mode=InitMode.SPECIES_BLOB, pattern=None):
        """(Re)initialize both buffers.

        The species-blob policy is keyed on the parameters the next tick will
        run with, so hand-tuned values seed correctly even after they drift
        away from the preset. The preset only contributes its pattern.

        Args:
            mode: InitMode or its command string
            pattern: Explicit 2D payload for InitMode.EXPLICIT_PATTERN
        """
        try:
            mode = InitMode(mode)
        except ValueError as exc:
            raise ConfigurationError(f"unknown initialization mode: {mode!r}") from exc
        pattern_default = self.species.pattern if self.species is not None else None
        source = _SeedSource(self.params, pattern_default)
        self.initializer.apply(self.field, mode, species=source, pattern=pattern)
        self._potential = np.zeros(self.field.shape)
        self.generation = 0
        logger.info("Seeded %dx%d field with mode '%s'",
                    self.width, self.height, mode.value)


class _SeedSource:
    """Just enough of a Species for the initializer."""

    def __init__(self, params, pattern=None):
        self.R = params.R
        self.mu = params.mu
        self.sigma = params.sigma
        self.pattern = pattern
