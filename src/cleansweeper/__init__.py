"""
Cleansweeper game module.

Provides the board engine: cell states, grid topology, mine placement,
flood reveal and game lifecycle.
"""
from .cell import CellState
from .grid import Grid, Topology
from .board import (
    Board,
    BoardConfig,
    BoardInvariantError,
    GameState,
    CLASSIC,
    SMALL,
    TORUS,
)
from .environment import CleansweeperEnv, OPEN, FLAG, render_observation
from .console import Console, parse_command

__all__ = [
    "CellState",
    "Grid",
    "Topology",
    "Board",
    "BoardConfig",
    "BoardInvariantError",
    "GameState",
    "CLASSIC",
    "SMALL",
    "TORUS",
    "CleansweeperEnv",
    "OPEN",
    "FLAG",
    "render_observation",
    "Console",
    "parse_command",
]
