#!/usr/bin/env python3
"""
2048 Game - Command Line Interface
Play 2048 using arrow keys or WASD, undo with 'z'
"""

import argparse
import logging
import os
import random
import sys
import termios
import time
import tty

from fusion2048.config import BEST_SCORE_FILE, DIRECTIONS, MAX_HISTORY
from fusion2048.game import GridEngine
from fusion2048.session import GameSession
from fusion2048.storage import BestScoreStore

# High-contrast ANSI colors
COLORS = {
    2: '\033[97m',    # white
    4: '\033[90m',    # bright black
    8: '\033[36m',    # cyan
    16: '\033[31m',   # red
    32: '\033[32m',   # green
    64: '\033[33m',   # yellow
    128: '\033[35m',  # magenta
    256: '\033[34m',  # blue
    512: '\033[91m',  # bright red
    1024: '\033[92m', # bright green
    2048: '\033[95m', # bright magenta
    4096: '\033[93m', # bright yellow
}
RESET = '\033[0m'
BOLD = '\033[1m'
RED = '\033[91m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
BLUE = '\033[94m'

CELL_WIDTH = 5
INVALID_PAUSE = 0.3

ARROW_KEYS = {
    'A': 'up',
    'B': 'down',
    'C': 'right',
    'D': 'left',
}
KEY_ACTIONS = {
    'w': 'up',
    'a': 'left',
    's': 'down',
    'd': 'right',
    'z': 'undo',
    'u': 'undo',
    'n': 'new',
    'c': 'continue',
    'q': 'quit',
}


def clear_screen():
    os.system('clear' if os.name == 'posix' else 'cls')


def get_color_for_tile(value):
    return COLORS.get(value, '\033[93m')  # fallback: bright yellow


def format_tile(value):
    if value == 0:
        return " " * CELL_WIDTH
    color = get_color_for_tile(value)
    num_str = str(value)
    padding = " " * (CELL_WIDTH - len(num_str))
    return f"{padding}{color}{BOLD}{num_str}{RESET}"


def render_board(session):
    """Return the screen for the current session as a string."""
    engine = session.engine
    values = engine.get_grid_values()
    n = engine.size
    bar = "─" * CELL_WIDTH

    lines = [
        f"{BOLD}2048 Game{RESET}",
        f"Score: {GREEN}{engine.get_score()}{RESET} | Best: {BLUE}{session.best_score}{RESET}"
        f" | Undo: {len(session.history)}",
        "Arrows/WASD move, 'z' undo, 'n' new game, 'q' quit",
        "",
        "┌" + "┬".join([bar] * n) + "┐",
    ]
    for i in range(n):
        lines.append("│" + "│".join(format_tile(int(v)) for v in values[i]) + "│")
        if i < n - 1:
            lines.append("├" + "┼".join([bar] * n) + "┤")
    lines.append("└" + "┴".join([bar] * n) + "┘")

    if session.status == 'won':
        lines.append(f"\n{BOLD}{GREEN}YOU WIN!{RESET} Press 'c' to keep playing or 'n' for a new game")
    elif session.status == 'over':
        lines.append(f"\n{BOLD}{RED}GAME OVER!{RESET} Press 'z' to undo or 'n' for a new game")
    if session.debug and session.last_state:
        lines.append(f"State: {session.last_state}")
    return "\n".join(lines) + "\n"


def draw_board(session):
    clear_screen()
    sys.stdout.write(render_board(session))
    sys.stdout.flush()


def get_key():
    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        return sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def read_action(read_char=get_key):
    """Translate the next keypress into a direction or a command name."""
    ch = read_char()
    if ch == '\x1b':
        if read_char() == '[':
            return ARROW_KEYS.get(read_char())
        return None
    if ch == '\x03':
        return 'quit'
    return KEY_ACTIONS.get(ch.lower())


def print_move_result(direction, was_valid):
    if was_valid:
        return
    sys.stdout.write(f"{RED}{direction.upper()}\nINVALID MOVE{RESET}\n")
    sys.stdout.flush()
    time.sleep(INVALID_PAUSE)


def handle_action(session, action):
    """Apply one action to the session. Returns False when the player quits."""
    if action == 'quit':
        return False
    if action == 'undo':
        session.undo()
    elif action == 'new':
        session.new_game()
    elif action == 'continue':
        if session.status == 'won':
            session.continue_after_win()
    elif action in DIRECTIONS:
        outcome = session.move(action)
        if outcome is not None:
            print_move_result(action, outcome.result.moved)
    return True


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play 2048 in the terminal")
    parser.add_argument("--state", type=str, default=None,
                        help="Start from an encoded state such as '2s-0000000000005500' or a scenario name")
    parser.add_argument("--seed", type=int, default=None, help="Seed for tile spawning")
    parser.add_argument("--debug", action="store_true", help="Show the encoded state after every move")
    parser.add_argument("--history", type=int, default=MAX_HISTORY, help="Number of moves that can be undone")
    parser.add_argument("--best-score-file", type=str, default=BEST_SCORE_FILE)
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    rng = random.Random(args.seed) if args.seed is not None else None
    session = GameSession(
        engine=GridEngine(rng=rng),
        history_capacity=args.history,
        store=BestScoreStore(args.best_score_file),
        debug=args.debug,
        state=args.state,
    )

    sys.stdout.write(f"{BOLD}Welcome to 2048!{RESET}\n")
    sys.stdout.write("Use arrow keys or WASD to move tiles\n")
    sys.stdout.write("Press 'q' to quit\n")
    sys.stdout.write("Press any key to start...\n")
    sys.stdout.flush()
    get_key()

    while True:
        draw_board(session)
        if not handle_action(session, read_action()):
            break

    sys.stdout.write(f"\n{YELLOW}Game ended. Final score: {session.score}{RESET}\n")
    sys.stdout.write(f"Best Score: {GREEN}{session.best_score}{RESET}\n")
    sys.stdout.write(f"Highest Tile: {YELLOW}{session.engine.max_tile()}{RESET}\n")
    sys.stdout.flush()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.stdout.write(f"\n\n{YELLOW}Game interrupted. Thanks for playing!{RESET}\n")
        sys.stdout.flush()
