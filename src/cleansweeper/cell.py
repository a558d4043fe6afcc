"""
Cell module for Cleansweeper.

A cell is a single value of the closed ``CellState`` enum. The state
carries both what the player sees (secret, flagged, opened, exploded)
and what the cell holds (mine or not), so no separate content flag
is stored.
"""
from enum import Enum, auto


# ============================================================================
# Constants
# ============================================================================

# Observation codes for states that are not an opened count (0-8).
OBS_SECRET = -1
OBS_FLAGGED = -2
OBS_EXPLODED_BOMB = 9
OBS_EXPLODED_SAFE = 10


# ============================================================================
# Cell State
# ============================================================================

class CellState(Enum):
    """Six mutually exclusive states of a board cell."""

    SECRET_SAFE = auto()
    SECRET_BOMB = auto()
    FLAGGED = auto()
    OPENED = auto()
    EXPLODED_SAFE = auto()
    EXPLODED_BOMB = auto()

    @property
    def is_secret(self) -> bool:
        """Check if cell is still unresolved by the player."""
        return self in (CellState.SECRET_SAFE, CellState.SECRET_BOMB)

    @property
    def is_mine(self) -> bool:
        """
        Check if cell counts as a mine for its neighbors.

        Flagged mines are removed from neighbor counts, so only secret
        and exploded bombs count.
        """
        return self in (CellState.SECRET_BOMB, CellState.EXPLODED_BOMB)

    @property
    def is_exploded(self) -> bool:
        """Check if cell records the action that lost the game."""
        return self in (CellState.EXPLODED_SAFE, CellState.EXPLODED_BOMB)

    @property
    def is_resolved(self) -> bool:
        """Check if cell counts towards a win (opened or flagged)."""
        return self in (CellState.OPENED, CellState.FLAGGED)

    def undo(self) -> "CellState":
        """
        Revert an exploded state to the secret state it came from.

        Returns:
            The secret counterpart for exploded states, otherwise self.
        """
        if self == CellState.EXPLODED_BOMB:
            return CellState.SECRET_BOMB
        if self == CellState.EXPLODED_SAFE:
            return CellState.SECRET_SAFE
        return self

    def to_observation(self, adjacent_mines: int = 0) -> int:
        """
        Convert cell to observation value for agents.

        Args:
            adjacent_mines: Neighbor mine count, used for opened cells.

        Returns:
            -1: Secret cell
            -2: Flagged cell
            0-8: Opened cell with adjacent mine count
            9: Exploded bomb
            10: Exploded safe cell (wrong flag)
        """
        if self.is_secret:
            return OBS_SECRET
        if self == CellState.FLAGGED:
            return OBS_FLAGGED
        if self == CellState.EXPLODED_BOMB:
            return OBS_EXPLODED_BOMB
        if self == CellState.EXPLODED_SAFE:
            return OBS_EXPLODED_SAFE
        return adjacent_mines
