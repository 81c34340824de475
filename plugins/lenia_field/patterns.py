"""
Seed pattern generators for the species catalog.

Each returns a (size, size) float64 array in [0, 1]. Random texture comes
from the ``rng`` argument (a numpy Generator), so a catalog built with a
fixed seed is reproducible.
"""

import numpy as np


def _polar(size):
    """Distance and angle of every cell from the square's centre."""
    center = size / 2
    y, x = np.mgrid[:size, :size].astype(np.float64)
    dx = x - center
    dy = y - center
    return dx, dy, np.sqrt(dx * dx + dy * dy), np.arctan2(dy, dx)


def orbium(size=64, rng=None):
    """Dense core with a linearly fading ring around it."""
    rng = rng or np.random.default_rng()
    _, _, dist, _ = _polar(size)
    inner_r = size * 0.15
    outer_r = size * 0.35
    noise = rng.random((size, size))

    pattern = np.zeros((size, size))
    core = dist < inner_r
    pattern[core] = 0.8 + noise[core] * 0.2
    ring = (dist >= inner_r) & (dist < outer_r)
    t = (dist[ring] - inner_r) / (outer_r - inner_r)
    pattern[ring] = np.maximum(0.0, 0.9 - t * 0.9 + noise[ring] * 0.1)
    return np.clip(pattern, 0.0, 1.0)


def gyrorbium(size=64, rng=None):
    """Four-lobed disc with a Gaussian profile."""
    _, _, dist, angle = _polar(size)
    r = size * 0.3
    edge = r + np.sin(angle * 4) * 0.15 * r
    pattern = np.exp(-dist * dist / (r * r * 0.5)) * 0.9
    pattern[dist >= edge] = 0.0
    return pattern


def helix(size=64, rng=None):
    """Two spiral arms cut out of a Gaussian disc."""
    _, _, dist, angle = _polar(size)
    spiral = np.sin(angle * 2 - dist * 0.2)
    r = size * 0.35
    pattern = np.minimum(1.0, np.exp(-dist * dist / (r * r * 0.6)) * spiral * 1.2)
    pattern[(dist >= r) | (spiral <= 0.3)] = 0.0
    return pattern


def scutium(size=64, rng=None):
    """Shield shape, squashed along x."""
    dx, dy, _, _ = _polar(size)
    adjusted = np.sqrt((dx * 0.7) ** 2 + dy ** 2)
    r = size * 0.3
    pattern = np.exp(-adjusted * adjusted / (r * r * 0.4)) * 0.85
    pattern[adjusted >= r] = 0.0
    return pattern


def random_blob(size=64, rng=None):
    """Disc of uniform noise in [0.2, 0.8)."""
    rng = rng or np.random.default_rng()
    _, _, dist, _ = _polar(size)
    pattern = rng.random((size, size)) * 0.6 + 0.2
    pattern[dist >= size * 0.4] = 0.0
    return pattern


GENERATORS = {
    "orbium": orbium,
    "gyrorbium": gyrorbium,
    "helix": helix,
    "scutium": scutium,
    "random_blob": random_blob,
}
