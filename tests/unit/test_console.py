"""
Unit tests for the text console.

Tests command parsing and command handling against fixed layouts.
"""
import pytest
from cleansweeper import Board, CellState, Console, GameState, parse_command


class TestParseCommand:
    """Test console command parsing."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("o 1 2", ("o", (1, 2))),
            ("F 0 3", ("f", (0, 3))),
            ("r", ("r", None)),
            ("u", ("u", None)),
            ("q", ("q", None)),
        ],
    )
    def test_valid(self, line: str, expected) -> None:
        assert parse_command(line) == expected

    @pytest.mark.parametrize("line", ["", "o 1", "x", "o a b", "r 1"])
    def test_invalid(self, line: str) -> None:
        with pytest.raises(ValueError):
            parse_command(line)


class TestConsole:
    """Test console sessions."""

    @pytest.fixture
    def console(self) -> Console:
        return Console(Board.from_layout(["*..", "...", "..*"], undo=True))

    def test_open_and_flag(self, console: Console) -> None:
        assert console.handle("f 0 0") == "Good luck!"
        assert console.board.cell_state(0, 0) == CellState.FLAGGED

    def test_loss_and_undo(self, console: Console) -> None:
        assert console.handle("o 2 2") == "Try again?"
        assert console.handle("o 1 1").startswith("Game over")
        assert console.handle("u") == "Good luck!"
        assert console.board.game_state == GameState.ONGOING

    def test_nothing_to_undo(self, console: Console) -> None:
        assert console.handle("u") == "Nothing to undo."

    def test_bad_command_shows_help(self, console: Console) -> None:
        assert "Commands:" in console.handle("zz")

    def test_quit(self, console: Console) -> None:
        console.handle("q")
        assert console.running is False

    def test_restart(self, console: Console) -> None:
        console.handle("o 0 0")
        console.handle("r")
        assert console.board.game_state == GameState.ONGOING
        assert console.board.opened_count >= 1

    def test_render(self, console: Console) -> None:
        console.handle("f 0 0")
        lines = console.render().split("\n")
        assert lines[0] == "    0 1 2"
        assert lines[1].startswith("  0 F")
        assert lines[-1] == "Flags: 1"
