"""Tests for the command-line entrypoint."""

import pytest

from tetris_search.main import main


class TestMain:
    """Tests for the tetris-search CLI."""

    def test_search_prints_ranking(self, capsys):
        assert main(["search", "0" * 200, "O", "I", "--top", "2"]) == 0
        out = capsys.readouterr().out
        assert "2 outcome(s) at level 18 (gravity 3 frames/row)" in out
        assert "key: nes-v1|fast-eval-v1|" in out

    def test_show_boards(self, capsys):
        main(["search", "0" * 200, "o", "i", "--top", "1", "--show-boards", "--mode", "dig"])
        out = capsys.readouterr().out
        assert "[]" in out

    def test_invalid_board_exits(self):
        with pytest.raises(SystemExit):
            main(["search", "0" * 10, "T", "I"])

    def test_invalid_piece_exits(self):
        with pytest.raises(SystemExit):
            main(["search", "0" * 200, "Q", "I"])

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "tetris-search" in capsys.readouterr().out
