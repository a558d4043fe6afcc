"""
Grid module for Cleansweeper.

Flat row-major cell storage with coordinate arithmetic for the two
board topologies: a bounded rectangle and a wraparound torus.
"""
from enum import Enum, auto
from typing import Iterator, List, Tuple

from .cell import CellState


Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class Topology(Enum):
    """How the board edges connect."""

    BOUNDED = auto()
    TORUS = auto()


# Neighbor offsets: above, below, left, right, then the four diagonals.
DIRECTIONS: Tuple[Position, ...] = (
    (-1, 0),
    (1, 0),
    (0, -1),
    (0, 1),
    (-1, -1),
    (-1, 1),
    (1, -1),
    (1, 1),
)


# ============================================================================
# Grid Class
# ============================================================================

class Grid:
    """
    Dense height x width storage of cell states.

    Cells live in a flat list addressed as ``row * width + col``. Every
    write that changes a cell bumps ``version`` so callers can tell
    whether the grid changed since they last looked.
    """

    def __init__(
        self,
        height: int,
        width: int,
        topology: Topology = Topology.BOUNDED,
        fill: CellState = CellState.SECRET_SAFE,
    ) -> None:
        """
        Create a grid with every cell in the same state.

        Args:
            height: Number of rows.
            width: Number of columns.
            topology: Edge behavior used by ``neighbors``.
            fill: Initial state of every cell.
        """
        self.height = height
        self.width = width
        self.topology = topology
        self.version = 0
        self._cells: List[CellState] = [fill] * (height * width)

    # ========================================================================
    # Storage (Low-level)
    # ========================================================================

    def _index(self, pos: Position) -> int:
        """Flat index of a position, raising IndexError when out of range."""
        row, col = pos
        if not self.contains(row, col):
            raise IndexError(
                f"Position {pos} outside {self.height}x{self.width} grid"
            )
        return row * self.width + col

    def get(self, pos: Position) -> CellState:
        """Get the state of the cell at ``pos``."""
        return self._cells[self._index(pos)]

    def set(self, pos: Position, state: CellState) -> None:
        """Set the state of the cell at ``pos``."""
        index = self._index(pos)
        if self._cells[index] != state:
            self._cells[index] = state
            self.version += 1

    __getitem__ = get
    __setitem__ = set

    def __len__(self) -> int:
        return len(self._cells)

    # ========================================================================
    # Coordinates
    # ========================================================================

    def contains(self, row: int, col: int) -> bool:
        """Check if position is within grid bounds."""
        return 0 <= row < self.height and 0 <= col < self.width

    def wrap(self, row: int, col: int) -> Position:
        """Reduce a position modulo the grid dimensions."""
        return row % self.height, col % self.width

    def neighbors(self, pos: Position) -> List[Position]:
        """
        Get the axis and diagonal neighbors of a position.

        On a bounded grid, neighbors off the edge are left out. On a torus
        every cell has exactly 8 neighbors; when a dimension is 2 or less
        the same cell (possibly ``pos`` itself) can appear more than once.

        Args:
            pos: (row, col) of the center cell.

        Returns:
            List of (row, col) tuples.
        """
        row, col = pos
        neighbors = []
        for delta_row, delta_col in DIRECTIONS:
            new_row = row + delta_row
            new_col = col + delta_col
            if self.topology == Topology.TORUS:
                neighbors.append(self.wrap(new_row, new_col))
            elif self.contains(new_row, new_col):
                neighbors.append((new_row, new_col))
        return neighbors

    def positions(self) -> Iterator[Position]:
        """Iterate every position in row-major order."""
        for row in range(self.height):
            for col in range(self.width):
                yield row, col

    # ========================================================================
    # Queries
    # ========================================================================

    def count(self, *states: CellState) -> int:
        """Count cells in any of the given states."""
        return sum(1 for cell in self._cells if cell in states)

    def states(self) -> List[CellState]:
        """Copy of the cell states in row-major order."""
        return list(self._cells)
