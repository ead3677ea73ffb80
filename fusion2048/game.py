import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from fusion2048.config import FOUR_PROBABILITY, GRID_SIZE, VECTORS, WIN_VALUE

logger = logging.getLogger(__name__)

EMPTY = -1  # marker in the id matrix for a cell without a tile

Position = Tuple[int, int]


# ===== Tile and move structures =====

@dataclass
class Tile:
    id: int
    value: int
    row: int
    col: int
    previous_row: Optional[int] = None
    previous_col: Optional[int] = None
    merged_from: Optional[Tuple[int, int]] = None  # (moving id, stationary id)
    is_new: bool = False

    @property
    def position(self) -> Position:
        return self.row, self.col


@dataclass(frozen=True)
class MoveResult:
    moved: bool
    score_gain: int
    win_detected: bool
    merged_values: Tuple[int, ...] = ()


class GridEngine:
    """
    Sliding-tile merge engine for an N x N grid.

    Tiles keep their identity across moves so a renderer can animate them from
    (previous_row, previous_col) to (row, col). The engine never spawns a tile
    after a move and never decides that the game is won or lost; callers do
    that with add_random_tile() and moves_available().
    """

    def __init__(self, size: int = GRID_SIZE, win_value: int = WIN_VALUE,
                 rng: Optional[random.Random] = None):
        self.n = size
        self.win_value = win_value
        self.rng = rng if rng is not None else random.Random()
        self.reset()

    def reset(self):
        """Empty the grid, zero the score and restart tile ids from 0."""
        self.cells = np.full((self.n, self.n), EMPTY, dtype=int)
        self.tiles: Dict[int, Tile] = {}
        self.retired: Dict[int, Tile] = {}
        self.score = 0
        self._next_id = 0

    # ---------- Tile bookkeeping ----------

    def _fresh_id(self) -> int:
        tid = self._next_id
        self._next_id += 1
        return tid

    def _create_tile(self, row: int, col: int, value: int, is_new: bool) -> Tile:
        return Tile(id=self._fresh_id(), value=int(value), row=row, col=col, is_new=is_new)

    def _insert(self, tile: Tile):
        self.tiles[tile.id] = tile
        self.cells[tile.row, tile.col] = tile.id

    def _remove(self, tile: Tile):
        """Take a tile off the grid, keeping it resolvable until the next move starts."""
        del self.tiles[tile.id]
        self.retired[tile.id] = tile
        if self.cells[tile.row, tile.col] == tile.id:
            self.cells[tile.row, tile.col] = EMPTY

    def cell(self, row: int, col: int) -> Optional[Tile]:
        """Tile at (row, col) or None."""
        tid = int(self.cells[row, col])
        if tid == EMPTY:
            return None
        return self.tiles[tid]

    def get_tile(self, tile_id: int) -> Optional[Tile]:
        """Look up a live tile, or one consumed by a merge during the last move."""
        return self.tiles.get(tile_id) or self.retired.get(tile_id)

    def get_tiles(self) -> List[Tile]:
        """Live tiles in row-major order."""
        return [self.tiles[int(tid)] for tid in self.cells.flatten() if tid != EMPTY]

    # ---------- State accessors ----------

    @property
    def size(self) -> int:
        return self.n

    def get_grid_values(self) -> np.ndarray:
        """Return the grid as an N x N int matrix, 0 for empty cells."""
        values = np.zeros((self.n, self.n), dtype=int)
        for tile in self.tiles.values():
            values[tile.row, tile.col] = tile.value
        return values

    def restore_grid(self, values):
        """
        Replace the grid contents with fresh tiles built from a value matrix.

        Ids continue from the current counter; call reset() first to restart them.
        The score is left alone.
        """
        values = np.asarray(values, dtype=int)
        if values.shape != (self.n, self.n):
            raise ValueError(f"Expected a {self.n}x{self.n} grid, got shape {values.shape}")

        self.cells = np.full((self.n, self.n), EMPTY, dtype=int)
        self.tiles = {}
        self.retired = {}
        for r in range(self.n):
            for c in range(self.n):
                if values[r, c] != 0:
                    self._insert(self._create_tile(r, c, values[r, c], is_new=False))

    def get_score(self) -> int:
        return self.score

    def set_score(self, score: int):
        self.score = int(score)

    def max_tile(self) -> int:
        return max((tile.value for tile in self.tiles.values()), default=0)

    def count_tiles(self) -> int:
        return len(self.tiles)

    # ---------- Spawning ----------

    def add_random_tile(self) -> Optional[Tile]:
        """Spawn a 2 (or, rarely, a 4) on a uniformly chosen empty cell; None if the grid is full."""
        empty = [(r, c) for r in range(self.n) for c in range(self.n) if self.cells[r, c] == EMPTY]
        if not empty:
            return None
        r, c = self.rng.choice(empty)
        value = 4 if self.rng.random() < FOUR_PROBABILITY else 2
        tile = self._create_tile(r, c, value, is_new=True)
        self._insert(tile)
        logger.debug("Spawned %d at (%d, %d) as tile %d", value, r, c, tile.id)
        return tile

    # ---------- Moving ----------

    def prepare_tiles(self):
        """Freeze every tile's current position as its previous one and clear per-move flags."""
        self.retired = {}
        for tile in self.tiles.values():
            tile.merged_from = None
            tile.is_new = False
            tile.previous_row = tile.row
            tile.previous_col = tile.col

    def _build_traversals(self, vector: Position) -> Tuple[List[int], List[int]]:
        """Scan order that starts from the edge the tiles are moving towards."""
        rows = list(range(self.n))
        cols = list(range(self.n))
        if vector[0] == 1:
            rows.reverse()
        if vector[1] == 1:
            cols.reverse()
        return rows, cols

    def _within_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.n and 0 <= col < self.n

    def _find_furthest_position(self, row: int, col: int,
                                vector: Position) -> Tuple[Position, Optional[Position]]:
        """Walk along vector over empty cells; return (last empty cell, first blocking cell or None)."""
        prev_r, prev_c = row, col
        r, c = row + vector[0], col + vector[1]
        while self._within_bounds(r, c) and self.cells[r, c] == EMPTY:
            prev_r, prev_c = r, c
            r, c = r + vector[0], c + vector[1]
        nxt = (r, c) if self._within_bounds(r, c) else None
        return (prev_r, prev_c), nxt

    def move(self, direction: str) -> MoveResult:
        """
        Slide every tile towards one edge, merging equal neighbours once per move.
        The score only changes when something moved.
        """
        if direction not in VECTORS:
            raise ValueError(f"Invalid move direction: {direction!r}")
        vector = VECTORS[direction]
        rows, cols = self._build_traversals(vector)

        moved = False
        score_gain = 0
        win_detected = False
        merged_values: List[int] = []

        for row in rows:
            for col in cols:
                tile = self.cell(row, col)
                if tile is None:
                    continue

                furthest, nxt = self._find_furthest_position(row, col, vector)
                target = self.cell(*nxt) if nxt is not None else None

                if target is not None and target.value == tile.value and target.merged_from is None:
                    merged = self._create_tile(target.row, target.col, tile.value * 2, is_new=False)
                    merged.merged_from = (tile.id, target.id)
                    merged.previous_row = tile.row
                    merged.previous_col = tile.col

                    self._remove(tile)
                    self._remove(target)
                    self._insert(merged)
                    # The consumed tile ends up where it merged, for animation only
                    tile.row, tile.col = merged.row, merged.col

                    score_gain += merged.value
                    merged_values.append(merged.value)
                    moved = True
                    if merged.value == self.win_value:
                        win_detected = True
                elif furthest != (row, col):
                    self.cells[row, col] = EMPTY
                    tile.row, tile.col = furthest
                    self.cells[tile.row, tile.col] = tile.id
                    moved = True

        if moved:
            self.score += score_gain

        logger.debug("Move %s: moved=%s gain=%d merges=%s", direction, moved, score_gain, merged_values)
        return MoveResult(moved=moved, score_gain=score_gain,
                          win_detected=win_detected, merged_values=tuple(merged_values))

    def moves_available(self) -> bool:
        """True if any cell is empty or two orthogonal neighbours hold the same value."""
        values = self.get_grid_values()
        if np.any(values == 0):
            return True
        if np.any(values[:, :-1] == values[:, 1:]):
            return True
        return bool(np.any(values[:-1, :] == values[1:, :]))

    def __repr__(self):
        return f"GridEngine(size={self.n}, score={self.score}, tiles={len(self.tiles)})"
