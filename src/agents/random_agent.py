"""
Random agent for Cleansweeper.

Serves as a baseline by opening or flagging random secret cells.
"""
from typing import Optional

import numpy as np

from .base_agent import BaseAgent


# ============================================================================
# Random Agent
# ============================================================================

class RandomAgent(BaseAgent):
    """
    Agent that picks uniformly among valid open and flag actions.

    A win needs every mine flagged, so flag actions are drawn as often
    as open actions. This provides a baseline for comparing more
    sophisticated agents.
    """

    def __init__(
        self,
        board_height: int = 16,
        board_width: int = 16,
        torus: bool = False,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the random agent.

        Args:
            board_height: Number of rows in the board.
            board_width: Number of columns in the board.
            torus: Whether the board wraps around at the edges.
            seed: Random seed for reproducibility.
        """
        super().__init__(board_height, board_width, torus)
        self.rng = np.random.default_rng(seed)

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select a random valid action.

        Args:
            observation: 2D array of cell states.
            valid_actions: Optional mask of valid actions.

        Returns:
            Random action index from valid actions.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        valid_indices = np.where(valid_actions)[0]

        if len(valid_indices) == 0:
            # No valid actions, return any action (will be a no-op)
            return 0

        return int(self.rng.choice(valid_indices))
