"""
Game session: the caller side of the engine contract.

A turn runs in three phases, compute the move, spawn a tile, then check for a
terminal position. begin_move() and finish_move() split the turn so a renderer
can animate in between; `busy` refuses any other move or undo until the turn
is finished.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fusion2048.codec import StateDecodeError, decode_state, encode_state
from fusion2048.config import MAX_HISTORY, START_TILES, VECTORS
from fusion2048.game import GridEngine, MoveResult, Tile
from fusion2048.history import HistoryBuffer, Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnOutcome:
    result: MoveResult
    spawned: Optional[Tile] = None


class GameSession:
    """Owns an engine, its undo history and the win / game-over flags."""

    def __init__(self, engine: Optional[GridEngine] = None, history_capacity: int = MAX_HISTORY,
                 store=None, debug: bool = False, state: Optional[str] = None):
        self.engine = engine if engine is not None else GridEngine()
        self.history = HistoryBuffer(history_capacity)
        self.store = store
        self.debug = debug
        self.best_score = store.load() if store is not None else 0
        self.last_state: Optional[str] = None
        self._clear_flags()

        if state:
            self.load_state(state)
        else:
            self.new_game()

    def _clear_flags(self):
        self.game_over = False
        self.has_won = False
        self.keep_playing = False
        self.busy = False

    # ---------- Game lifecycle ----------

    def new_game(self):
        self.engine.reset()
        self.history.clear()
        self._clear_flags()
        for _ in range(START_TILES):
            self.engine.add_random_tile()

    def load_state(self, text: str) -> bool:
        """
        Start from an encoded state (or scenario name). Falls back to a new game
        if the string cannot be decoded.
        """
        try:
            grid, score = decode_state(text, size=self.engine.size)
        except StateDecodeError as e:
            logger.warning(f"Could not load state {text!r} ({e}), starting a new game")
            self.new_game()
            return False

        self.engine.reset()
        self.engine.restore_grid(grid)
        self.engine.set_score(score)
        self.history.clear()
        self._clear_flags()
        self._update_best_score()
        return True

    def encode_state(self) -> str:
        return encode_state(self.engine.get_grid_values(), self.engine.get_score())

    # ---------- Turns ----------

    def can_move(self) -> bool:
        return not (self.busy or self.game_over or (self.has_won and not self.keep_playing))

    def begin_move(self, direction: str) -> Optional[MoveResult]:
        """
        Run the move phase. Returns None if moves are not accepted right now,
        otherwise the engine's result. A move that changed nothing leaves no
        trace in the history.
        """
        if direction not in VECTORS:
            raise ValueError(f"Invalid move direction: {direction!r}")
        if not self.can_move():
            return None

        snapshot = Snapshot.capture(self.engine)
        self.engine.prepare_tiles()
        result = self.engine.move(direction)

        if not result.moved:
            return result

        self.history.push(snapshot)

        self.busy = True
        if result.win_detected and not self.has_won:
            self.has_won = True
            logger.info(f"Reached {self.engine.win_value} with score {self.engine.get_score()}")
        self._update_best_score()
        return result

    def finish_move(self) -> Optional[Tile]:
        """Spawn phase followed by the terminal check. Returns the spawned tile, if any."""
        if not self.busy:
            raise RuntimeError("No move is waiting to be finished")

        spawned = self.engine.add_random_tile()
        if self.debug:
            try:
                self.last_state = self.encode_state()
                logger.debug(f"State: {self.last_state}")
            except ValueError as e:
                self.last_state = None
                logger.warning(f"Cannot encode the current state: {e}")

        self.busy = False
        if not self.engine.moves_available():
            self.game_over = True
            logger.info(f"Game over with score {self.engine.get_score()}")
        return spawned

    def move(self, direction: str) -> Optional[TurnOutcome]:
        """Run a whole turn. None means the move was refused."""
        result = self.begin_move(direction)
        if result is None:
            return None
        if not result.moved:
            return TurnOutcome(result)
        return TurnOutcome(result, self.finish_move())

    def undo(self) -> bool:
        """Step back one successful move. Win flags are kept as they are."""
        if self.busy or not self.history:
            return False
        self.history.pop().restore(self.engine)
        self.game_over = False
        return True

    def continue_after_win(self):
        self.keep_playing = True

    # ---------- Derived state ----------

    @property
    def score(self) -> int:
        return self.engine.get_score()

    @property
    def status(self) -> str:
        if self.game_over:
            return 'over'
        if self.has_won and not self.keep_playing:
            return 'won'
        return 'playing'

    def _update_best_score(self):
        score = self.engine.get_score()
        if score > self.best_score:
            self.best_score = score
            if self.store is not None:
                self.store.save(score)
