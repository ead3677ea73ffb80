import json
import logging
import os
from pathlib import Path

from fusion2048.config import BEST_SCORE_FILE

logger = logging.getLogger(__name__)


class BestScoreStore:
    """Keeps the best score in a small JSON file. Failures are logged, never raised."""

    def __init__(self, path=BEST_SCORE_FILE):
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
            return max(0, int(data.get('best_score', 0)))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Error loading best score from {self.path}: {e}")
            return 0

    def save(self, score: int):
        temp_path = str(self.path) + ".tmp"
        try:
            with open(temp_path, "w") as f:
                json.dump({"best_score": int(score)}, f)
            os.replace(temp_path, self.path)
        except OSError as e:
            logger.error(f"Error saving best score to {self.path}: {e}")
