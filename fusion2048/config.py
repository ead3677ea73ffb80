"""
Default settings for the 2048 engine, session and terminal player.
Constructors take keyword overrides for anything that needs to differ.
"""

# ===== Board =====
GRID_SIZE = 4
WIN_VALUE = 2048

# ===== Spawning =====
FOUR_PROBABILITY = 0.1  # chance a spawned tile is a 4 rather than a 2
START_TILES = 2

# ===== Undo history =====
MAX_HISTORY = 50

# ===== State strings =====
SCORE_RADIX = 36
STATE_DELIMITER = '-'

# ===== Persistence =====
BEST_SCORE_FILE = '2048_best_score.json'

# ===== Directions =====
DIRECTIONS = ['up', 'down', 'left', 'right']

VECTORS = {
    'up': (-1, 0),
    'down': (1, 0),
    'left': (0, -1),
    'right': (0, 1),
}
