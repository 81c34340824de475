"""
Abstract Base Class for Field Engines

An engine owns a FieldState exclusively and advances it one atomic tick at
a time. The presentation layer only sees the read-only current buffer.
"""

from abc import ABC, abstractmethod

from .config import DEFAULT_SIZE
from .field import FieldState


class CAEngine(ABC):
    """Base class for continuous cellular automaton engines."""

    def __init__(self, width=DEFAULT_SIZE, height=None):
        self.field = FieldState(width, height)
        self.generation = 0

    @property
    def width(self):
        return self.field.width

    @property
    def height(self):
        return self.field.height

    @property
    def world(self):
        """Read-only view of the current buffer.

        The view aliases one of the two ping-pong buffers, so its contents
        change once two more ticks have run. Copy it to keep a frame.
        """
        return self.field.current

    @abstractmethod
    def step(self, dt=None):
        """Advance one tick. Returns the (read-only) current buffer."""

    def step_n(self, n, dt=None):
        """Advance n ticks. Returns final state."""
        for _ in range(n):
            self.step(dt)
        return self.world

    def advance(self, run):
        """Run one displayed frame: ``run.speed`` ticks, or none when paused.

        Args:
            run: RunParameters snapshot for this frame
        """
        if not run.running:
            return self.world
        return self.step_n(run.speed, run.dt)

    @abstractmethod
    def set_params(self, **params):
        """Update engine parameters."""

    @abstractmethod
    def get_params(self):
        """Return dict of current parameter values."""

    @abstractmethod
    def seed(self, mode="species", **kwargs):
        """Seed the world based on an initialization mode."""

    def clear(self):
        """Clear the world."""
        self.field.clear()
        self.generation = 0

    @property
    def stats(self):
        """Return current world statistics."""
        world = self.world
        return {
            "generation": self.generation,
            "mass": float(world.sum()),
            "mean": float(world.mean()),
            "max": float(world.max()),
            "alive_pct": float((world > 0.01).sum()) / world.size * 100,
        }
