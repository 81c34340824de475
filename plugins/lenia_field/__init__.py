"""Lenia continuous cellular automaton on a toroidal field."""

from .config import LeniaParams, RunParameters, Species
from .errors import ConfigurationError, FieldAllocationError, LeniaError
from .initializer import InitMode, PatternInitializer
from .kernels import growth, kernel
from .lenia import Lenia
from .presets import CATALOG, SpeciesCatalog
from .simulator import LeniaSimulator

__all__ = [
    "CATALOG",
    "ConfigurationError",
    "FieldAllocationError",
    "InitMode",
    "Lenia",
    "LeniaError",
    "LeniaParams",
    "LeniaSimulator",
    "PatternInitializer",
    "RunParameters",
    "Species",
    "SpeciesCatalog",
    "growth",
    "kernel",
]
