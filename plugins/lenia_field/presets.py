"""
Lenia Species Presets

Each record defines kernel/growth parameters known to produce a
characteristic self-organizing structure, plus the seed pattern generator
and presentation metadata. Records are plain data; SpeciesCatalog turns
them into frozen Species models once, at construction.

Based on Bert Chan's research: https://chakazul.github.io/lenia.html
"""

import logging

import numpy as np

from .config import Species, validate
from .errors import ConfigurationError
from .patterns import GENERATORS

logger = logging.getLogger(__name__)

# Patterns are generated with a fixed seed so the catalog is identical
# from one session to the next.
PATTERN_SEED = 20240611

SPECIES_RECORDS = [
    # =====================================================================
    # CLASSIC
    # =====================================================================
    {
        "name": "Orbium",
        "R": 13, "mu": 0.15, "sigma": 0.015, "kernel_sigma": 0.15,
        "beta": [1],
        "pattern": ("orbium", 64),
        "category": "classic",
        "description": "The best-known Lenia creature, a smooth glider "
                       "that keeps its shape while it travels",
    },
    {
        "name": "Orbium bicaudatus",
        "R": 13, "mu": 0.156, "sigma": 0.016, "kernel_sigma": 0.15,
        "beta": [1, 0.5],
        "pattern": ("orbium", 64),
        "category": "classic",
        "description": "Two-tailed Orbium variant driven by a double-ring kernel",
    },
    {
        "name": "Gyrorbium",
        "R": 13, "mu": 0.14, "sigma": 0.014, "kernel_sigma": 0.15,
        "beta": [1],
        "pattern": ("gyrorbium", 64),
        "category": "classic",
        "description": "Rotating Orbium relative that spins in place",
    },
    {
        "name": "Scutium",
        "R": 13, "mu": 0.21, "sigma": 0.022, "kernel_sigma": 0.15,
        "beta": [1],
        "pattern": ("scutium", 64),
        "category": "classic",
        "description": "Shield-shaped creature with a dense leading edge",
    },

    # =====================================================================
    # EXOTIC
    # =====================================================================
    {
        "name": "Helix",
        "R": 15, "mu": 0.18, "sigma": 0.02, "kernel_sigma": 0.12,
        "beta": [1, 0.6, 0.3],
        "pattern": ("helix", 64),
        "category": "exotic",
        "description": "Spiral arms sustained by a three-ring kernel",
    },
    {
        "name": "Hydrogeminium",
        "R": 10, "mu": 0.27, "sigma": 0.025, "kernel_sigma": 0.18,
        "beta": [1, 0.4],
        "pattern": ("random_blob", 64),
        "category": "exotic",
        "description": "Multi-lobed body that buds and splits",
    },
    {
        "name": "Pentafolium",
        "R": 12, "mu": 0.19, "sigma": 0.019, "kernel_sigma": 0.14,
        "beta": [1, 0.3, 0.1],
        "pattern": ("random_blob", 64),
        "category": "exotic",
        "description": "Five-lobed flower with slowly pulsing petals",
    },
    # Catalog order follows the preset menu, so this science-inspired
    # entry sits ahead of the chaotic group
    {
        "name": "Paramecia",
        "R": 18, "mu": 0.12, "sigma": 0.014, "kernel_sigma": 0.15,
        "beta": [1],
        "pattern": ("scutium", 64),
        "category": "inspired",
        "description": "Elongated swimmers reminiscent of ciliates",
    },

    # =====================================================================
    # EDGE OF CHAOS
    # =====================================================================
    {
        "name": "SmoothLife",
        "R": 21, "mu": 0.19, "sigma": 0.033, "kernel_sigma": 0.15,
        "beta": [1, 0],
        "pattern": ("random_blob", 64),
        "category": "chaotic",
        "description": "SmoothLife-like settings, gliders and worms in a "
                       "turbulent soup",
    },
    {
        "name": "Primordial Soup",
        "R": 10, "mu": 0.35, "sigma": 0.07, "kernel_sigma": 0.2,
        "beta": [1, 0.5, 0.25],
        "pattern": ("random_blob", 80),
        "category": "chaotic",
        "description": "High-activity regime that never settles",
    },

    # =====================================================================
    # SCIENCE-INSPIRED
    # =====================================================================
    {
        "name": "Microbia",
        "R": 7, "mu": 0.22, "sigma": 0.018, "kernel_sigma": 0.12,
        "beta": [1],
        "pattern": ("orbium", 40),
        "category": "inspired",
        "description": "Tight, small creatures that form from dense clusters",
    },
    {
        "name": "Oceania",
        "R": 25, "mu": 0.11, "sigma": 0.012, "kernel_sigma": 0.18,
        "beta": [1, 0.7, 0.4],
        "pattern": ("random_blob", 100),
        "category": "inspired",
        "description": "Large, slow waves rolling across the field",
    },
    {
        "name": "Luminara",
        "R": 14, "mu": 0.17, "sigma": 0.018, "kernel_sigma": 0.14,
        "beta": [1, 0.3],
        "pattern": ("orbium", 64),
        "category": "inspired",
        "description": "Tuned for visual appeal, a glowing double-ring glider",
    },
]


def _build_species(record, rng):
    values = dict(record)
    spec = values.get("pattern")
    if spec is not None:
        generator, size = spec
        values["pattern"] = GENERATORS[generator](size, rng=rng)
    return validate(Species, **values)


class SpeciesCatalog:
    """Fixed, ordered collection of species presets.

    Built once; there is no way to add, remove or replace an entry
    afterwards. The first entry is the default selection.
    """

    def __init__(self, records=None, pattern_seed=PATTERN_SEED):
        records = SPECIES_RECORDS if records is None else records
        rng = np.random.default_rng(pattern_seed)
        species = tuple(_build_species(r, rng) for r in records)
        if not species:
            raise ConfigurationError("species catalog must contain at least one entry")
        names = [s.name for s in species]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"duplicate species names in catalog: {names}")
        self._species = species
        self._by_name = {s.name: s for s in species}
        logger.debug("Built species catalog with %d entries", len(species))

    def __len__(self):
        return len(self._species)

    def __iter__(self):
        return iter(self._species)

    def __contains__(self, name):
        return name in self._by_name

    @property
    def default(self):
        return self._species[0]

    def get(self, name):
        """Get a species by name. Returns None if not found."""
        return self._by_name.get(name)

    def require(self, name):
        """Get a species by name, raising ConfigurationError if unknown."""
        species = self.get(name)
        if species is None:
            raise ConfigurationError(f"unknown species: {name!r}")
        return species

    def names(self):
        return [s.name for s in self._species]

    def list_species(self, category=None):
        """Return list of (name, category, description) tuples.
        If category is specified, filter to that category only."""
        return [(s.name, s.category, s.description) for s in self._species
                if category is None or s.category == category]


CATALOG = SpeciesCatalog()


def get_species(name):
    """Look up a species in the built-in catalog. Returns None if not found."""
    return CATALOG.get(name)
