import unittest
import numpy as np

from fusion2048.codec import (
    SCENARIOS, StateDecodeError, decode_state, encode_grid, encode_state, int_to_radix,
)
from fusion2048.game import GridEngine


class TestStateCodec(unittest.TestCase):

    def test_encode_state(self):
        grid = np.zeros((4, 4), dtype=int)
        grid[0, :2] = [2, 2]
        grid[3, 3] = 4096
        self.assertEqual(encode_state(grid, 4), '4-110000000000000c')
        self.assertEqual(encode_state(grid, 1000), 'rs-110000000000000c')

    def test_decimal_score_variant(self):
        grid = np.zeros((4, 4), dtype=int)
        text = encode_state(grid, 1234, radix=10)
        self.assertEqual(text, '1234-0000000000000000')
        _, score = decode_state(text, radix=10)
        self.assertEqual(score, 1234)

    def test_int_to_radix(self):
        self.assertEqual(int_to_radix(0), '0')
        self.assertEqual(int_to_radix(35), 'z')
        self.assertEqual(int_to_radix(36), '10')
        self.assertEqual(int_to_radix(255, 16), 'ff')
        with self.assertRaises(ValueError):
            int_to_radix(-1)
        with self.assertRaises(ValueError):
            int_to_radix(5, 40)

    def test_encode_rejects_unrepresentable_values(self):
        grid = np.zeros((4, 4), dtype=int)
        grid[0, 0] = 3
        with self.assertRaises(ValueError):
            encode_grid(grid)
        grid[0, 0] = 65536
        with self.assertRaises(ValueError):
            encode_grid(grid)

    def test_decode_scenario(self):
        grid, score = decode_state('64')
        self.assertEqual(score, 100)
        expected = np.zeros((4, 4), dtype=int)
        expected[3, :2] = [32, 32]
        np.testing.assert_array_equal(grid, expected)

    def test_lose_scenario(self):
        grid, score = decode_state('lose')
        self.assertEqual(score, int('dw', 36))
        np.testing.assert_array_equal(grid, [
            [2, 4, 8, 16],
            [32, 64, 128, 256],
            [2, 4, 8, 16],
            [32, 64, 128, 0]
        ])

    def test_all_scenarios_decode(self):
        for name in SCENARIOS:
            grid, score = decode_state(name)
            self.assertEqual(grid.shape, (4, 4))
            self.assertGreaterEqual(score, 0)

    def test_round_trip_through_engine(self):
        engine = GridEngine()
        engine.restore_grid(np.array([
            [0, 2, 4, 8],
            [16, 32, 64, 128],
            [256, 512, 1024, 2048],
            [4096, 0, 0, 2]
        ]))
        engine.set_score(123456)
        text = encode_state(engine.get_grid_values(), engine.get_score())

        other = GridEngine()
        grid, score = decode_state(text)
        other.restore_grid(grid)
        other.set_score(score)
        np.testing.assert_array_equal(other.get_grid_values(), engine.get_grid_values())
        self.assertEqual(other.get_score(), engine.get_score())

    def test_malformed_strings(self):
        bad = [
            'abc',
            '-0000000000000000',
            '4-123',
            '4-zz00000000000000',
            '!!-0000000000000000',
            '',
        ]
        for text in bad:
            with self.assertRaises(StateDecodeError, msg=text):
                decode_state(text)

    def test_decode_error_is_value_error(self):
        self.assertTrue(issubclass(StateDecodeError, ValueError))


if __name__ == "__main__":
    unittest.main()
