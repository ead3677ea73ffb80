from fusion2048.codec import StateDecodeError, decode_state, encode_state
from fusion2048.game import GridEngine, MoveResult, Tile
from fusion2048.history import HistoryBuffer, Snapshot
from fusion2048.session import GameSession, TurnOutcome

__all__ = [
    'GridEngine', 'MoveResult', 'Tile',
    'HistoryBuffer', 'Snapshot',
    'GameSession', 'TurnOutcome',
    'StateDecodeError', 'decode_state', 'encode_state',
]
