import random

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from fusion2048.config import DIRECTIONS, GRID_SIZE
from fusion2048.game import GridEngine
from fusion2048.session import GameSession

MAX_EXPONENT = 17  # largest tile a 4x4 board can reach is 2**17


def valid_action_mask(grid_values) -> np.ndarray:
    """Boolean mask [up, down, left, right] of directions that would change the grid."""
    values = np.asarray(grid_values, dtype=int)
    scratch = GridEngine(size=values.shape[0])
    mask = np.zeros(len(DIRECTIONS), dtype=bool)
    for i, direction in enumerate(DIRECTIONS):
        scratch.reset()
        scratch.restore_grid(values)
        mask[i] = scratch.move(direction).moved
    return mask


class Game2048Env(gym.Env):
    metadata = {"render_modes": ["human"]}

    def __init__(self, size: int = GRID_SIZE, stop_at_win: bool = False, render_mode=None):
        super().__init__()
        self.size = size
        self.stop_at_win = stop_at_win
        self.render_mode = render_mode
        self.action_space = spaces.Discrete(len(DIRECTIONS))
        self.observation_space = spaces.Box(low=0, high=1, shape=(size * size,), dtype=np.float32)
        self.session = GameSession(engine=GridEngine(size=size))

        # Episode-level counters
        self.episode_moves = 0
        self.episode_invalid_moves = 0
        self.episode_valid_moves = 0

        self.reward_weights = {
            'score_scale': 1.0,
            'invalid_penalty': -1.0,
            'win_bonus': 0.0,
        }

    def set_reward_weights(self, **kwargs):
        unknown = set(kwargs) - set(self.reward_weights)
        if unknown:
            raise ValueError(f"Unknown reward weights: {sorted(unknown)}")
        self.reward_weights.update(kwargs)

    def get_reward_structure_str(self):
        return ", ".join(f"{k}={v}" for k, v in self.reward_weights.items())

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        rng = random.Random(int(self.np_random.integers(2 ** 31)))
        state = (options or {}).get("state")
        self.session = GameSession(engine=GridEngine(size=self.size, rng=rng), state=state)
        self.episode_moves = 0
        self.episode_invalid_moves = 0
        self.episode_valid_moves = 0
        return self._get_obs(), self._info(invalid_move=False)

    def step(self, action):
        direction = DIRECTIONS[int(action)]
        already_won = self.session.has_won
        outcome = self.session.move(direction)
        self.episode_moves += 1

        if outcome is None or not outcome.result.moved:
            self.episode_invalid_moves += 1
            reward = self.reward_weights['invalid_penalty']
            return self._get_obs(), reward, self.session.game_over, False, self._info(invalid_move=True)

        self.episode_valid_moves += 1
        result = outcome.result
        reward = result.score_gain * self.reward_weights['score_scale']

        terminated = self.session.game_over
        if self.session.has_won and not already_won:
            reward += self.reward_weights['win_bonus']
            if self.stop_at_win:
                terminated = True
            else:
                self.session.continue_after_win()

        info = self._info(invalid_move=False)
        info["merged_values"] = list(result.merged_values)
        return self._get_obs(), reward, terminated, False, info

    def _info(self, invalid_move: bool) -> dict:
        engine = self.session.engine
        return {
            "score": engine.get_score(),
            "max_tile": engine.max_tile(),
            "invalid_move": invalid_move,
            "merged_values": [],
            "won": self.session.has_won,
            "episode_moves": self.episode_moves,
            "episode_invalid_moves": self.episode_invalid_moves,
            "episode_valid_moves": self.episode_valid_moves,
            "action_mask": self.get_action_mask(),
        }

    def _get_obs(self):
        board = self.session.engine.get_grid_values()
        with np.errstate(divide='ignore'):
            obs = np.clip(np.where(board > 0, np.log2(board) / MAX_EXPONENT, 0), 0, 1)
        return obs.flatten().astype(np.float32)

    def get_action_mask(self):
        # Float mask in {0.0, 1.0} for mask-aware algorithms
        return valid_action_mask(self.session.engine.get_grid_values()).astype(np.float32)

    def render(self):
        print(self.session.engine.get_grid_values())

    def close(self):
        pass
