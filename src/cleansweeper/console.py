"""
Text console front end for Cleansweeper.

Turns typed commands into board actions and renders the board as text.
"""
from typing import Optional, Tuple

from .board import Board, GameState
from .environment import render_observation


# ============================================================================
# Constants
# ============================================================================

HELP = (
    "Commands: o ROW COL (open), f ROW COL (flag), r (restart), "
    "u (undo), q (quit)"
)

STATUS_MESSAGES = {
    GameState.ONGOING: "Good luck!",
    GameState.WON: "You win!",
    GameState.LOST: "Try again?",
}


# ============================================================================
# Command Parsing
# ============================================================================

def parse_command(line: str) -> Tuple[str, Optional[Tuple[int, int]]]:
    """
    Parse a console command.

    Args:
        line: Raw input such as ``"o 3 4"`` or ``"r"``.

    Returns:
        Tuple of (command letter, position or None).

    Raises:
        ValueError: If the command is unknown or malformed.
    """
    parts = line.split()
    if not parts:
        raise ValueError("Empty command")

    command = parts[0].lower()
    if command in ("o", "f"):
        if len(parts) != 3:
            raise ValueError(f"'{command}' needs a row and a column")
        return command, (int(parts[1]), int(parts[2]))
    if command in ("r", "u", "q", "h") and len(parts) == 1:
        return command, None
    raise ValueError(f"Unknown command: {line.strip()}")


# ============================================================================
# Console
# ============================================================================

class Console:
    """Interactive text session around a single board."""

    def __init__(self, board: Board) -> None:
        self.board = board
        self.running = True

    def handle(self, line: str) -> str:
        """
        Apply one command and describe the result.

        Args:
            line: Raw command text.

        Returns:
            Message to show the player.
        """
        try:
            command, pos = parse_command(line)
        except ValueError as error:
            return f"{error}. {HELP}"

        if command == "q":
            self.running = False
            return "Bye!"
        if command == "h":
            return HELP
        if command == "r":
            self.board.restart()
        elif command == "u":
            if not self.board.clear_explosions():
                return "Nothing to undo."
        elif not self.board.is_playing:
            return f"Game over. {STATUS_MESSAGES[self.board.game_state]}"
        elif command == "o":
            self.board.open(*pos)
        else:
            self.board.flag(*pos)
        return STATUS_MESSAGES[self.board.game_state]

    def render(self) -> str:
        """Render the board with row and column indices."""
        width = self.board.config.width
        header = "    " + " ".join(str(col % 10) for col in range(width))
        rows = render_observation(self.board.get_observation()).split("\n")
        lines = [header]
        for index, row in enumerate(rows):
            lines.append(f"{index:>3} {row}")
        lines.append(f"Flags: {self.board.flagged_count}")
        return "\n".join(lines)
