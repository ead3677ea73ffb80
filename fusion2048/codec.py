"""
Compact state strings for sharing and debugging a position.

Format: "<score>-<grid>". The score is written in base 36 (or another radix),
the grid is one hex digit per cell in row-major order, holding log2 of the
tile value with 0 for an empty cell (1 = 2, 2 = 4, ... b = 2048, c = 4096).
"""

import string
from typing import Tuple

import numpy as np

from fusion2048.config import GRID_SIZE, SCORE_RADIX, STATE_DELIMITER

DIGITS = string.digits + string.ascii_lowercase

# Named positions that can stand in for a full state string
SCENARIOS = {
    '64': '2s-0000000000005500',
    '128': '5k-0000000000006600',
    '256': 'dw-0000000000007700',
    '512': 'rs-0000000000008800',
    '1024': '1jk-0000000000009900',
    '2048': '334-000000000000aa00',
    '4096': '668-000000000000bb00',
    '8192': 'cd0-000000000000cc00',
    'win': '7ps-1234567890aa1234',
    # Full except the last cell, and no move can merge anything
    'lose': 'dw-1234567812345670',
}


class StateDecodeError(ValueError):
    """Raised when a state string cannot be turned back into a grid and score."""


def int_to_radix(n: int, radix: int = SCORE_RADIX) -> str:
    if not 2 <= radix <= 36:
        raise ValueError(f"Radix must be between 2 and 36, got {radix}")
    if n < 0:
        raise ValueError("Only non-negative numbers can be encoded")
    if n == 0:
        return '0'
    out = []
    while n:
        n, rem = divmod(n, radix)
        out.append(DIGITS[rem])
    return ''.join(reversed(out))


def encode_grid(grid_values) -> str:
    """Encode a value matrix as one hex digit per cell."""
    out = []
    for value in np.asarray(grid_values, dtype=int).flatten():
        value = int(value)
        if value == 0:
            out.append('0')
            continue
        exponent = value.bit_length() - 1
        if value != 1 << exponent or not 1 <= exponent <= 15:
            raise ValueError(f"Tile value {value} cannot be written as a single hex digit")
        out.append(format(exponent, 'x'))
    return ''.join(out)


def encode_state(grid_values, score: int, radix: int = SCORE_RADIX) -> str:
    return int_to_radix(int(score), radix) + STATE_DELIMITER + encode_grid(grid_values)


def decode_grid(text: str, size: int = GRID_SIZE) -> np.ndarray:
    if len(text) != size * size:
        raise StateDecodeError(f"Grid part must have {size * size} digits, got {len(text)}")
    grid = np.zeros((size, size), dtype=int)
    for idx, ch in enumerate(text):
        try:
            exponent = int(ch, 16)
        except ValueError:
            raise StateDecodeError(f"Invalid grid digit {ch!r} at position {idx}") from None
        grid[divmod(idx, size)] = 0 if exponent == 0 else 2 ** exponent
    return grid


def decode_state(text: str, radix: int = SCORE_RADIX, size: int = GRID_SIZE) -> Tuple[np.ndarray, int]:
    """
    Turn a state string (or a scenario name) back into (grid_values, score).
    Raises StateDecodeError on anything malformed.
    """
    text = SCENARIOS.get(text, text).strip()
    score_part, sep, grid_part = text.partition(STATE_DELIMITER)
    if not sep or not score_part:
        raise StateDecodeError(f"Missing score or delimiter in {text!r}")
    try:
        score = int(score_part, radix)
    except ValueError:
        raise StateDecodeError(f"Invalid score {score_part!r} for radix {radix}") from None
    if score < 0:
        raise StateDecodeError("Score cannot be negative")
    return decode_grid(grid_part, size), score
