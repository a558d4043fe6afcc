"""
Board module for Cleansweeper.

Implements the game board: random mine placement with a guaranteed
safe opening, flood-fill reveal, flagging, win detection, restart and
the optional undo of a losing move.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .cell import CellState
from .grid import Grid, Position, Topology


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    ONGOING = auto()
    WON = auto()
    LOST = auto()


class BoardInvariantError(RuntimeError):
    """Raised when the board reaches a state the rules make impossible."""


@dataclass
class BoardConfig:
    """
    Configuration for a Cleansweeper board.

    Attributes:
        height: Number of rows.
        width: Number of columns.
        mine_fraction: Probability that any given cell holds a mine.
        torus: Whether the board wraps around at both edges.
        undo: Whether a losing move may be taken back.
    """

    height: int = 16
    width: int = 16
    mine_fraction: float = 0.25
    torus: bool = False
    undo: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")
        if not 0.0 <= self.mine_fraction <= 1.0:
            raise ValueError(
                f"Mine fraction must be between 0 and 1, got {self.mine_fraction}"
            )

    @property
    def topology(self) -> Topology:
        """Edge behavior implied by the torus flag."""
        return Topology.TORUS if self.torus else Topology.BOUNDED


# Preset configurations
CLASSIC = BoardConfig(16, 16, 0.25)
SMALL = BoardConfig(9, 9, 0.15)
TORUS = BoardConfig(16, 16, 0.25, torus=True)


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Cleansweeper game board.

    The board is populated as soon as it is created: mines are drawn
    independently per cell and one zero cell is opened, so the player
    never has to guess on the first move.

    Player actions (``open``, ``flag``) return whether they exploded.
    Actions that cannot apply (resolved cell, outside the grid, game
    over) are no-ops returning False.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    rng: np.random.Generator = field(
        default_factory=np.random.default_rng, repr=False
    )
    _grid: Grid = field(init=False, repr=False)
    _game_state: GameState = field(default=GameState.ONGOING, init=False)
    _state_changes: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Create the grid and start the first game."""
        self._grid = Grid(
            self.config.height, self.config.width, self.config.topology
        )
        self.start()

    @classmethod
    def from_layout(
        cls, rows: Sequence[str], torus: bool = False, undo: bool = False
    ) -> "Board":
        """
        Build a board from a fixed mine layout.

        No cell is opened; every cell starts secret.

        Args:
            rows: One string per row, ``"*"`` for a mine, ``"."`` for safe.
            torus: Whether the board wraps around.
            undo: Whether losing moves may be taken back.

        Returns:
            Board in the ongoing state holding exactly the given mines.
        """
        mines = np.array([[char == "*" for char in row] for row in rows])
        height, width = mines.shape
        config = BoardConfig(
            height, width, float(mines.mean()), torus=torus, undo=undo
        )
        board = cls(config)
        board.load_mines(mines)
        return board

    # ========================================================================
    # Mine Counting (Low-level)
    # ========================================================================

    def _count_adjacent_mines(self, pos: Position) -> int:
        """Count secret or exploded bombs around a position."""
        return sum(
            1 for neighbor in self._grid.neighbors(pos)
            if self._grid[neighbor].is_mine
        )

    def _resolve(self, row: int, col: int) -> Optional[Position]:
        """Map player coordinates to a grid position, or None if outside."""
        if self.config.torus:
            return self._grid.wrap(row, col)
        if not self._grid.contains(row, col):
            return None
        return row, col

    # ========================================================================
    # Flood Reveal (Low-level)
    # ========================================================================

    def _flood(self, pos: Position) -> None:
        """
        Open every safe cell reachable through zero-count opened cells.

        Seeded from ``pos`` itself when it was just opened, or from its
        opened neighbors when it was just flagged (flagging a mine can
        drop a neighbor's count to zero).
        """
        state = self._grid[pos]
        if state == CellState.OPENED:
            to_flood = [pos]
        elif state == CellState.FLAGGED:
            to_flood = [
                neighbor for neighbor in self._grid.neighbors(pos)
                if self._grid[neighbor] == CellState.OPENED
            ]
        else:
            raise BoardInvariantError(f"Cannot flood from {state.name} at {pos}")

        while to_flood:
            center = to_flood.pop()
            if self._grid[center] != CellState.OPENED:
                raise BoardInvariantError(
                    f"Flood reached {self._grid[center].name} at {center}"
                )
            if self._count_adjacent_mines(center) != 0:
                continue
            for neighbor in self._grid.neighbors(center):
                neighbor_state = self._grid[neighbor]
                if neighbor_state == CellState.SECRET_SAFE:
                    self._grid[neighbor] = CellState.OPENED
                    to_flood.append(neighbor)
                elif neighbor_state not in (CellState.OPENED, CellState.FLAGGED):
                    raise BoardInvariantError(
                        f"Zero cell {center} borders {neighbor_state.name} "
                        f"at {neighbor}"
                    )

    def _open_cell(self, pos: Position) -> bool:
        """Apply the open rule to one cell; returns True if it exploded."""
        state = self._grid[pos]
        if state == CellState.SECRET_BOMB:
            self._grid[pos] = CellState.EXPLODED_BOMB
            return True
        if state == CellState.SECRET_SAFE:
            self._grid[pos] = CellState.OPENED
            self._flood(pos)
        return False

    def _flag_cell(self, pos: Position) -> bool:
        """Apply the flag rule to one cell; returns True if it exploded."""
        state = self._grid[pos]
        if state == CellState.SECRET_SAFE:
            self._grid[pos] = CellState.EXPLODED_SAFE
            return True
        if state == CellState.SECRET_BOMB:
            self._grid[pos] = CellState.FLAGGED
            self._flood(pos)
        return False

    # ========================================================================
    # Game Lifecycle (Mid-level)
    # ========================================================================

    def _set_game_state(self, state: GameState) -> None:
        if state != self._game_state:
            self._game_state = state
            self._state_changes += 1

    def _place_mines(self) -> None:
        """Draw an independent mine for every cell."""
        draws = self.rng.random(len(self._grid))
        for pos, draw in zip(self._grid.positions(), draws):
            if draw < self.config.mine_fraction:
                self._grid[pos] = CellState.SECRET_BOMB
            else:
                self._grid[pos] = CellState.SECRET_SAFE

    def _zero_cells(self) -> List[Position]:
        """Secret safe cells with no adjacent mines."""
        return [
            pos for pos in self._grid.positions()
            if self._grid[pos] == CellState.SECRET_SAFE
            and self._count_adjacent_mines(pos) == 0
        ]

    def _pick_start(self) -> Position:
        """
        Choose the cell to open at the start of a game.

        Picks a random zero cell. When there is none, a random cell and
        its neighbors are cleared of mines to make one, which lowers the
        mine density around the start.
        """
        zero_cells = self._zero_cells()
        if zero_cells:
            return zero_cells[self.rng.integers(len(zero_cells))]

        index = int(self.rng.integers(len(self._grid)))
        pos = (index // self.config.width, index % self.config.width)
        self._grid[pos] = CellState.SECRET_SAFE
        for neighbor in self._grid.neighbors(pos):
            self._grid[neighbor] = CellState.SECRET_SAFE
        return pos

    def start(self) -> None:
        """Place mines and open a guaranteed-safe starting region."""
        self._place_mines()
        pos = self._pick_start()
        if self._open_cell(pos):
            raise BoardInvariantError(f"Start cell {pos} exploded")
        self._set_game_state(GameState.ONGOING)

    def restart(self) -> None:
        """Discard the current game and start a new one in place."""
        self.start()

    def load_mines(self, mines: np.ndarray) -> None:
        """
        Replace the board with a fixed mine layout, all cells secret.

        Args:
            mines: Boolean array of shape (height, width), True for a mine.
        """
        mines = np.asarray(mines, dtype=bool)
        expected = (self.config.height, self.config.width)
        if mines.shape != expected:
            raise ValueError(
                f"Mine layout shape {mines.shape} does not match {expected}"
            )
        for row, col in self._grid.positions():
            if mines[row, col]:
                self._grid[row, col] = CellState.SECRET_BOMB
            else:
                self._grid[row, col] = CellState.SECRET_SAFE
        self._set_game_state(GameState.ONGOING)

    # ========================================================================
    # Game Actions (High-level)
    # ========================================================================

    def _after_action(self, exploded: bool) -> bool:
        if exploded:
            self._set_game_state(GameState.LOST)
        elif self.is_won():
            self._set_game_state(GameState.WON)
        return exploded

    def open(self, row: int, col: int) -> bool:
        """
        Open a cell.

        A mine explodes and loses the game. A safe cell is opened and,
        if it has no adjacent mines, the opening floods outwards.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            True if the cell held a mine, False otherwise.
        """
        pos = self._resolve(row, col)
        if pos is None or self._game_state != GameState.ONGOING:
            return False
        return self._after_action(self._open_cell(pos))

    def flag(self, row: int, col: int) -> bool:
        """
        Flag a cell as a mine.

        Flagging a mine removes it from its neighbors' counts, which can
        let the flood continue from them. Flagging a safe cell loses.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            True if the cell was safe (wrong flag), False otherwise.
        """
        pos = self._resolve(row, col)
        if pos is None or self._game_state != GameState.ONGOING:
            return False
        return self._after_action(self._flag_cell(pos))

    def is_won(self) -> bool:
        """Check if every cell is opened or flagged."""
        return all(state.is_resolved for state in self._grid.states())

    def clear_explosions(self) -> bool:
        """
        Take back the losing move when undo is enabled.

        Exploded cells return to their secret state; the mine layout is
        untouched.

        Returns:
            True if a loss was undone, False if undo is disabled or the
            game is not lost.
        """
        if not self.config.undo or self._game_state != GameState.LOST:
            return False
        for pos in self._grid.positions():
            if self._grid[pos].is_exploded:
                self._grid[pos] = self._grid[pos].undo()
        self._set_game_state(GameState.ONGOING)
        return True

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.ONGOING

    @property
    def topology(self) -> Topology:
        return self.config.topology

    @property
    def dimensions(self) -> Tuple[int, int]:
        """(height, width) of the board."""
        return self.config.height, self.config.width

    @property
    def version(self) -> int:
        """Change counter, increased by every action that changed the board."""
        return self._grid.version + self._state_changes

    def changed_since(self, version: int) -> bool:
        """Check if the board changed after ``version`` was read."""
        return self.version != version

    def cell_state(self, row: int, col: int) -> CellState:
        """Get the state of a cell; raises IndexError outside the grid."""
        return self._grid[row, col]

    def adjacent_mine_count(self, row: int, col: int) -> int:
        """
        Count unflagged mines around a cell.

        Only meaningful for opened cells, but defined everywhere.
        """
        return self._count_adjacent_mines((row, col))

    def neighbors(self, row: int, col: int) -> List[Position]:
        """Neighbor positions of a cell under the board topology."""
        return self._grid.neighbors((row, col))

    @property
    def mines_remaining(self) -> int:
        """Number of mines not yet flagged or exploded."""
        return self._grid.count(CellState.SECRET_BOMB)

    @property
    def opened_count(self) -> int:
        """Number of opened cells."""
        return self._grid.count(CellState.OPENED)

    @property
    def flagged_count(self) -> int:
        """Number of flagged cells."""
        return self._grid.count(CellState.FLAGGED)

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array for agents.

        Returns:
            2D int8 array where:
                -1 = secret
                -2 = flagged
                0-8 = opened with adjacent mine count
                9 = exploded bomb
                10 = exploded safe cell
        """
        obs = np.zeros((self.config.height, self.config.width), dtype=np.int8)
        for pos in self._grid.positions():
            state = self._grid[pos]
            count = self._count_adjacent_mines(pos) if state == CellState.OPENED else 0
            obs[pos] = state.to_observation(count)
        return obs

    def get_valid_actions(self) -> List[Position]:
        """
        Get list of cells that can still be opened or flagged.

        Returns:
            List of (row, col) positions of secret cells.
        """
        return [
            pos for pos in self._grid.positions() if self._grid[pos].is_secret
        ]

    def get_mines(self) -> np.ndarray:
        """Boolean array of mine positions, flagged and exploded included."""
        mines = np.zeros((self.config.height, self.config.width), dtype=bool)
        for pos in self._grid.positions():
            mines[pos] = self._grid[pos] in (
                CellState.SECRET_BOMB, CellState.EXPLODED_BOMB, CellState.FLAGGED
            )
        return mines
