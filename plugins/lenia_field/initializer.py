"""
Pattern initialization for the Lenia field.

Every mode produces a full (H, W) array that is written into both field
buffers, so the first tick after a (re)seed reads consistent state.
Species presets stay plain data; how a field gets seeded is picked by the
InitMode tag.
"""

import enum
import logging

import numpy as np

from .config import LARGE_BLOB_RADIUS, SEED_BLOB_RADIUS, SMALL_KERNEL_THRESHOLD

logger = logging.getLogger(__name__)


class InitMode(str, enum.Enum):
    CLEAR = "clear"
    SEED = "seed"
    RANDOM_BLOB = "random"
    SPECIES_BLOB = "species"
    EXPLICIT_PATTERN = "pattern"


def _distance_from(width, height, cx, cy):
    Y, X = np.ogrid[:height, :width]
    return np.sqrt((X - cx) ** 2 + (Y - cy) ** 2)


def sanitize_pattern(pattern):
    """Coerce a user-supplied pattern into a 2D float array in [0, 1].

    Ragged rows are right-padded with zeros, non-finite cells read as 0 and
    values are clipped. Returns None if nothing usable is left.
    """
    if pattern is None:
        return None
    try:
        arr = np.array(pattern, dtype=np.float64)
    except (TypeError, ValueError):
        # Ragged nested lists: pad each row to the widest one
        try:
            rows = [np.atleast_1d(np.asarray(row, dtype=np.float64)) for row in pattern]
        except (TypeError, ValueError):
            return None
        if any(row.ndim != 1 for row in rows):
            return None
        width = max((len(row) for row in rows), default=0)
        arr = np.zeros((len(rows), width))
        for i, row in enumerate(rows):
            arr[i, :len(row)] = row
    if arr.ndim == 1:
        arr = arr[np.newaxis, :]
    if arr.ndim != 2 or arr.size == 0:
        return None
    arr = np.where(np.isfinite(arr), arr, 0.0)
    return np.clip(arr, 0.0, 1.0)


class PatternInitializer:
    """Builds initial field contents for each InitMode.

    Args:
        small_kernel_threshold: Species with R at or below this get the
            3x3 grid of small blobs instead of one large blob
        large_blob_radius: Radius of the single species blob, clipped to
            half the shorter field side
        seed_radius: Radius of the SEED mode blob
        rng: numpy Generator or seed; None draws fresh entropy
    """

    def __init__(self, small_kernel_threshold=SMALL_KERNEL_THRESHOLD,
                 large_blob_radius=LARGE_BLOB_RADIUS,
                 seed_radius=SEED_BLOB_RADIUS, rng=None):
        self.small_kernel_threshold = small_kernel_threshold
        self.large_blob_radius = large_blob_radius
        self.seed_radius = seed_radius
        self.rng = np.random.default_rng(rng)

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def apply(self, field, mode, species=None, pattern=None):
        """Overwrite both buffers of ``field`` and mark it ready.

        Returns:
            The generated (H, W) array
        """
        values = self.generate(mode, field.width, field.height,
                               species=species, pattern=pattern)
        field.load(values)
        return values

    def generate(self, mode, width, height, species=None, pattern=None):
        """Generate field contents for ``mode`` without touching any field."""
        mode = InitMode(mode)
        if mode is InitMode.CLEAR:
            return np.zeros((height, width))
        if mode is InitMode.SEED:
            return self.seed_blob(width, height)
        if mode is InitMode.RANDOM_BLOB:
            return self.random_blob(width, height)
        if mode is InitMode.EXPLICIT_PATTERN:
            if pattern is None and species is not None:
                pattern = species.pattern
            if pattern is None:
                if species is None:
                    logger.warning("No pattern supplied, clearing field")
                    return np.zeros((height, width))
                return self.species_blob(species, width, height)
            return self.stamp(pattern, width, height)
        if species is None:
            raise ValueError("species-blob initialization needs a species")
        return self.species_blob(species, width, height)

    # -----------------------------------------------------------------------
    # Modes
    # -----------------------------------------------------------------------

    def seed_blob(self, width, height):
        """One Gaussian-falloff blob at the field centre."""
        radius = min(self.seed_radius, min(width, height) / 2)
        dist = _distance_from(width, height, width / 2, height / 2)
        world = np.exp(-0.5 * (dist / (radius * 0.5)) ** 2)
        world[dist >= radius] = 0.0
        return world

    def random_blob(self, width, height):
        """Broad centred disc of uniform noise in [0.2, 0.8)."""
        radius = 0.4 * min(width, height)
        dist = _distance_from(width, height, width / 2, height / 2)
        world = self.rng.random((height, width)) * 0.6 + 0.2
        world[dist >= radius] = 0.0
        return world

    def species_blob_layout(self, R, width, height):
        """Blob placement for the species-blob policy.

        Small kernels get a 3x3 grid of blobs (radius 5R, spacing 2.5 radii)
        so several organisms can form side by side; the radius shrinks if
        the grid would not fit. Larger kernels get one centred blob.

        Returns:
            List of (cx, cy, radius) tuples
        """
        cx, cy = width / 2, height / 2
        if R > self.small_kernel_threshold:
            radius = min(self.large_blob_radius, min(width, height) / 2)
            return [(cx, cy, radius)]

        radius = R * 5.0
        # Outermost blob edge sits 3.5 radii from the centre
        fit = min(width, height) / 2 / 3.5
        if radius > fit:
            radius = fit
        spacing = radius * 2.5
        return [
            (cx + (bx - 1) * spacing, cy + (by - 1) * spacing, radius)
            for by in range(3)
            for bx in range(3)
        ]

    def species_blob(self, species, width, height):
        """Seed close to the species' attractor basin."""
        layout = self.species_blob_layout(species.R, width, height)
        world = np.zeros((height, width))
        if len(layout) == 1:
            cx, cy, radius = layout[0]
            inside = _distance_from(width, height, cx, cy) < radius
            noise = (self.rng.random(int(inside.sum())) - 0.5) * species.sigma
            world[inside] = np.clip(species.mu + noise, 0.01, 1.0)
            return world

        # Small kernels form from dense clusters, not from mu-level fill
        for cx, cy, radius in layout:
            inside = _distance_from(width, height, cx, cy) < radius
            noise = (self.rng.random(int(inside.sum())) - 0.5) * 0.1
            world[inside] = np.clip(0.7 + noise, 0.3, 1.0)
        return world

    def stamp(self, pattern, width, height):
        """Centre ``pattern`` in an empty field, clipping what falls outside."""
        world = np.zeros((height, width))
        arr = sanitize_pattern(pattern)
        if arr is None:
            logger.warning("Ignoring malformed seed pattern")
            return world
        ph, pw = arr.shape
        top = (height - ph) // 2
        left = (width - pw) // 2

        y0, x0 = max(0, top), max(0, left)
        y1, x1 = min(height, top + ph), min(width, left + pw)
        if y1 <= y0 or x1 <= x0:
            return world
        if ph > height or pw > width:
            logger.debug("Clipping %dx%d pattern to %dx%d field", pw, ph, width, height)
        world[y0:y1, x0:x1] = arr[y0 - top:y1 - top, x0 - left:x1 - left]
        return world
