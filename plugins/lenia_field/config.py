"""
Configuration models and tunable constants.

LeniaParams, RunParameters and Species are frozen pydantic models. The engine
holds one LeniaParams snapshot per tick, so a value can only change by
swapping in a whole new (validated) model between ticks.
"""

import math
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError


DEFAULT_SIZE = 512          # Field is DEFAULT_SIZE x DEFAULT_SIZE unless told otherwise
DEFAULT_DT = 0.1
MAX_KERNEL_RADIUS = 25      # Offset loop cap, keeps a tick O(W*H*25^2) at worst
MAX_RINGS = 4

KERNEL_SIGMA_FLOOR = 0.01
GROWTH_SIGMA_FLOOR = 0.001
KERNEL_SUM_EPSILON = 1e-12

# Empirical, not derived. Recalibrate if the presets change.
SMALL_KERNEL_THRESHOLD = 7
LARGE_BLOB_RADIUS = 120
SEED_BLOB_RADIUS = 20

CATEGORIES = ("classic", "exotic", "chaotic", "inspired")


def _check_beta(beta):
    if not 1 <= len(beta) <= MAX_RINGS:
        raise ValueError(f"beta must have 1..{MAX_RINGS} entries, got {len(beta)}")
    for b in beta:
        if not math.isfinite(b) or b < 0:
            raise ValueError(f"beta entries must be finite and >= 0, got {b}")
    return beta


class LeniaParams(BaseModel):
    """Kernel and growth parameters, detached from any named preset."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    R: int = Field(default=13, gt=0)
    mu: float = 0.15
    sigma: float = Field(default=0.015, gt=0)
    kernel_sigma: float = Field(default=0.15, gt=0)
    beta: tuple[float, ...] = (1.0,)

    @field_validator("beta")
    @classmethod
    def _validate_beta(cls, v):
        return _check_beta(v)

    @property
    def ring_count(self):
        return len(self.beta)


class RunParameters(BaseModel):
    """Per-frame run settings: time step, ticks per frame, running flag."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    dt: float = Field(default=DEFAULT_DT, gt=0)
    speed: int = Field(default=1, ge=1)
    running: bool = True


class Species(BaseModel):
    """A named preset: Lenia parameters plus presentation metadata.

    The optional pattern is stored as a read-only float64 array so a catalog
    entry cannot be mutated through it.
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", allow_inf_nan=False,
        arbitrary_types_allowed=True,
    )

    name: str = Field(min_length=1)
    R: int = Field(gt=0)
    mu: float
    sigma: float = Field(gt=0)
    kernel_sigma: float = Field(default=0.15, gt=0)
    beta: tuple[float, ...] = (1.0,)
    pattern: Optional[np.ndarray] = None
    category: str = "classic"
    description: str = ""

    @field_validator("beta")
    @classmethod
    def _validate_beta(cls, v):
        return _check_beta(v)

    @field_validator("pattern", mode="before")
    @classmethod
    def _validate_pattern(cls, v):
        if v is None:
            return None
        arr = np.array(v, dtype=np.float64)
        if arr.ndim != 2 or arr.size == 0:
            raise ValueError(f"pattern must be a non-empty 2D grid, got shape {arr.shape}")
        if not np.all(np.isfinite(arr)) or arr.min() < 0 or arr.max() > 1:
            raise ValueError("pattern values must lie in [0, 1]")
        arr.flags.writeable = False
        return arr

    @property
    def params(self):
        """The kernel/growth subset as a standalone LeniaParams."""
        return LeniaParams(
            R=self.R, mu=self.mu, sigma=self.sigma,
            kernel_sigma=self.kernel_sigma, beta=self.beta,
        )


def validate(model, **values):
    """Build ``model(**values)``, turning pydantic errors into ConfigurationError."""
    try:
        return model(**values)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def override(current, **changes):
    """Return a validated copy of ``current`` with ``changes`` applied.

    ``model_copy(update=...)`` skips validation, so the merged values are
    fed back through the constructor instead.
    """
    values = current.model_dump()
    values.update(changes)
    return validate(type(current), **values)
