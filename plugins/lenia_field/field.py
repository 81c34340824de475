"""
Double-buffered field storage.

Two float64 buffers of identical shape: the engine reads "current", writes
"next", then swaps. Outside readers only ever get a read-only view of the
current buffer, which is stable between ticks.
"""

import logging

import numpy as np

from .errors import FieldAllocationError

logger = logging.getLogger(__name__)


class FieldState:
    """Ping-pong pair of W x H buffers, indexed ``[y, x]``."""

    def __init__(self, width, height=None):
        height = width if height is None else height
        if int(width) <= 0 or int(height) <= 0:
            raise FieldAllocationError(
                f"field dimensions must be positive, got {width}x{height}"
            )
        self.width = int(width)
        self.height = int(height)
        try:
            self._buffers = (
                np.zeros((self.height, self.width), dtype=np.float64),
                np.zeros((self.height, self.width), dtype=np.float64),
            )
        except (MemoryError, ValueError) as exc:
            raise FieldAllocationError(
                f"could not allocate {self.width}x{self.height} field buffers"
            ) from exc
        self._current = 0
        self.ready = False
        logger.debug("Allocated %dx%d field", self.width, self.height)

    @property
    def shape(self):
        return (self.height, self.width)

    @property
    def size(self):
        return self.width * self.height

    @property
    def current(self):
        """Read-only view of the current buffer."""
        view = self._buffers[self._current].view()
        view.flags.writeable = False
        return view

    def current_buffer(self):
        """Writable current buffer. Engine use only."""
        return self._buffers[self._current]

    def next_buffer(self):
        """Writable "next" buffer. Engine use only."""
        return self._buffers[1 - self._current]

    def swap(self):
        """Commit the "next" buffer as current."""
        self._current = 1 - self._current

    def load(self, values):
        """Overwrite both buffers with ``values`` and mark the field ready.

        Args:
            values: Array of the field's shape; clipped to [0, 1]
        """
        values = np.asarray(values, dtype=np.float64)
        if values.shape != self.shape:
            raise ValueError(f"expected shape {self.shape}, got {values.shape}")
        for buf in self._buffers:
            np.clip(values, 0.0, 1.0, out=buf)
        self.ready = True

    def clear(self):
        for buf in self._buffers:
            buf[:] = 0.0
        self.ready = True
