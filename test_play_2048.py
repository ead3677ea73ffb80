import unittest
from unittest.mock import patch

from fusion2048 import play_2048
from fusion2048.play_2048 import (
    COLORS, format_tile, handle_action, parse_args, read_action, render_board,
)
from fusion2048.session import GameSession


def keys(text):
    return iter(text).__next__


class TestKeyTranslation(unittest.TestCase):

    def test_arrow_keys(self):
        self.assertEqual(read_action(keys('\x1b[A')), 'up')
        self.assertEqual(read_action(keys('\x1b[B')), 'down')
        self.assertEqual(read_action(keys('\x1b[C')), 'right')
        self.assertEqual(read_action(keys('\x1b[D')), 'left')
        self.assertIsNone(read_action(keys('\x1b[Z')))
        self.assertIsNone(read_action(keys('\x1bO')))

    def test_letter_keys(self):
        self.assertEqual(read_action(keys('w')), 'up')
        self.assertEqual(read_action(keys('A')), 'left')
        self.assertEqual(read_action(keys('z')), 'undo')
        self.assertEqual(read_action(keys('Z')), 'undo')
        self.assertEqual(read_action(keys('q')), 'quit')
        self.assertEqual(read_action(keys('\x03')), 'quit')
        self.assertIsNone(read_action(keys('x')))


class TestRendering(unittest.TestCase):

    def test_format_tile(self):
        self.assertEqual(format_tile(0), "     ")
        tile = format_tile(2048)
        self.assertIn("2048", tile)
        self.assertIn(COLORS[2048], tile)

    def test_render_board(self):
        session = GameSession(state='4-1100000000000000')
        screen = render_board(session)
        self.assertIn("Score:", screen)
        self.assertEqual(screen.count("│"), 4 * 5)
        self.assertNotIn("GAME OVER!", screen)

    def test_render_game_over(self):
        session = GameSession(state='lose')
        session.move('down')
        self.assertIn("GAME OVER!", render_board(session))


class TestHandleAction(unittest.TestCase):

    def setUp(self):
        self.session = GameSession(state='0-1200000000000000')

    def test_quit(self):
        self.assertFalse(handle_action(self.session, 'quit'))

    def test_move_and_undo(self):
        self.assertTrue(handle_action(self.session, 'right'))
        self.assertEqual(len(self.session.history), 1)
        self.assertTrue(handle_action(self.session, 'undo'))
        self.assertEqual(self.session.encode_state(), '0-1200000000000000')

    @patch.object(play_2048.time, 'sleep')
    def test_invalid_move_pauses(self, mock_sleep):
        with patch.object(play_2048.sys, 'stdout'):
            handle_action(self.session, 'left')
        mock_sleep.assert_called_once()

    def test_continue_only_after_win(self):
        handle_action(self.session, 'continue')
        self.assertFalse(self.session.keep_playing)

        session = GameSession(state='2048')
        session.move('left')
        handle_action(session, 'continue')
        self.assertEqual(session.status, 'playing')

    def test_parse_args(self):
        args = parse_args(['--seed', '3', '--debug', '--state', 'win'])
        self.assertEqual(args.seed, 3)
        self.assertTrue(args.debug)
        self.assertEqual(args.state, 'win')
        self.assertEqual(args.history, 50)


if __name__ == "__main__":
    unittest.main()
