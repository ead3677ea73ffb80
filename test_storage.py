import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fusion2048.storage import BestScoreStore


class TestBestScoreStore(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / 'best.json'
        self.store = BestScoreStore(self.path)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_means_zero(self):
        self.assertEqual(self.store.load(), 0)

    def test_save_and_load(self):
        self.store.save(2048)
        self.assertEqual(json.loads(self.path.read_text()), {'best_score': 2048})
        self.assertEqual(BestScoreStore(self.path).load(), 2048)

    def test_corrupt_file_is_logged(self):
        self.path.write_text('{not json')
        with self.assertLogs('fusion2048.storage', level='ERROR'):
            self.assertEqual(self.store.load(), 0)

    def test_failed_write_keeps_previous_best(self):
        self.store.save(2048)

        def partial_dump(obj, f):
            f.write('{"best_')
            raise OSError("disk full")

        with patch("fusion2048.storage.json.dump", side_effect=partial_dump):
            with self.assertLogs("fusion2048.storage", level="ERROR"):
                self.store.save(4096)
        self.assertEqual(self.store.load(), 2048)

    def test_unwritable_path_is_logged(self):
        store = BestScoreStore(Path(self.tmp.name) / 'missing_dir' / 'best.json')
        with self.assertLogs('fusion2048.storage', level='ERROR'):
            store.save(10)


if __name__ == "__main__":
    unittest.main()
