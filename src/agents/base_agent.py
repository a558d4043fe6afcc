"""
Base agent interface for Cleansweeper AI.

Defines the abstract interface that all agents must implement.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

import numpy as np

from cleansweeper.cell import OBS_SECRET
from cleansweeper.environment import OPEN
from cleansweeper.grid import Grid, Topology


# ============================================================================
# Base Agent Interface
# ============================================================================

class BaseAgent(ABC):
    """
    Abstract base class for Cleansweeper agents.

    All agents must implement the select_action method to choose which
    cell to open or flag based on the current observation. Action indices
    follow the environment layout: the first ``total_cells`` indices open
    a cell, the next ``total_cells`` flag one.
    """

    def __init__(
        self, board_height: int, board_width: int, torus: bool = False
    ) -> None:
        """
        Initialize the agent.

        Args:
            board_height: Number of rows in the board.
            board_width: Number of columns in the board.
            torus: Whether the board wraps around at the edges.
        """
        self.board_height = board_height
        self.board_width = board_width
        self.total_cells = board_height * board_width
        topology = Topology.TORUS if torus else Topology.BOUNDED
        self._grid = Grid(board_height, board_width, topology)

    @abstractmethod
    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select an action based on the current observation.

        Args:
            observation: 2D array of cell states.
            valid_actions: Optional mask of valid actions.

        Returns:
            Action index (see class docstring).
        """
        pass

    def action_to_position(self, action: int) -> Tuple[int, int, int]:
        """Convert flat action index to (kind, row, col)."""
        kind, index = divmod(int(action), self.total_cells)
        row, col = divmod(index, self.board_width)
        return kind, row, col

    def position_to_action(self, row: int, col: int, kind: int = OPEN) -> int:
        """Convert (row, col) position and action kind to flat action index."""
        return kind * self.total_cells + row * self.board_width + col

    def neighbors(self, row: int, col: int) -> List[Tuple[int, int]]:
        """Neighbor positions under the board topology."""
        return self._grid.neighbors((row, col))

    def get_valid_actions_from_obs(self, observation: np.ndarray) -> np.ndarray:
        """
        Get valid actions mask from observation.

        Args:
            observation: 2D array of cell states.

        Returns:
            Boolean mask where True = valid action.
        """
        # Secret cells can be opened or flagged
        secret = observation.flatten() == OBS_SECRET
        return np.concatenate([secret, secret])

    def reset(self) -> None:
        """Reset agent state for new episode."""
        pass

    def update(
        self,
        observation: np.ndarray,
        action: int,
        reward: float,
        next_observation: np.ndarray,
        done: bool,
    ) -> None:
        """
        Update agent with experience (for learning agents).

        Args:
            observation: State before action.
            action: Action taken.
            reward: Reward received.
            next_observation: State after action.
            done: Whether episode ended.
        """
        pass
