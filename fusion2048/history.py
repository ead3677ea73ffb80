from collections import deque
from dataclasses import dataclass
from typing import Optional

import numpy as np

from fusion2048.config import MAX_HISTORY


@dataclass(frozen=True, eq=False)
class Snapshot:
    """A (grid, score) pair taken before a move. Holds values only, never tile ids."""
    grid_values: np.ndarray
    score: int

    @classmethod
    def capture(cls, engine) -> "Snapshot":
        values = engine.get_grid_values()
        values.setflags(write=False)
        return cls(grid_values=values, score=engine.get_score())

    def restore(self, engine):
        """Rebuild the engine's grid with fresh tiles and put the score back."""
        engine.restore_grid(self.grid_values)
        engine.set_score(self.score)


class HistoryBuffer:
    """
    Bounded undo stack. Once full, pushing evicts the oldest snapshot.
    """

    def __init__(self, capacity: int = MAX_HISTORY):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self.buffer = deque(maxlen=capacity)

    def __len__(self):
        return len(self.buffer)

    def __bool__(self):
        return len(self.buffer) > 0

    def push(self, snapshot: Snapshot):
        self.buffer.append(snapshot)

    def pop(self) -> Optional[Snapshot]:
        """Remove and return the most recent snapshot, or None if there is none."""
        if not self.buffer:
            return None
        return self.buffer.pop()

    def peek(self) -> Optional[Snapshot]:
        return self.buffer[-1] if self.buffer else None

    def clear(self):
        self.buffer.clear()
