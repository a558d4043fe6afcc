"""
Gymnasium environment wrapper for Cleansweeper.

Provides a standard RL interface: a flat discrete action is turned into
a board coordinate plus an action kind (open or flag).
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig, GameState
from .cell import OBS_EXPLODED_BOMB, OBS_EXPLODED_SAFE, OBS_FLAGGED, OBS_SECRET


# ============================================================================
# Constants
# ============================================================================

OPEN = 0
FLAG = 1

WIN_REWARD = 10.0
LOSS_REWARD = -10.0
STEP_REWARD = 1.0
NOOP_REWARD = -0.1

_SYMBOLS = {
    OBS_SECRET: ".",
    OBS_FLAGGED: "F",
    OBS_EXPLODED_BOMB: "*",
    OBS_EXPLODED_SAFE: "X",
    0: " ",
}


# ============================================================================
# Cleansweeper Environment
# ============================================================================

class CleansweeperEnv(gym.Env):
    """
    Gymnasium environment for Cleansweeper.

    Observation:
        2D array where:
        - -1 = secret cell
        - -2 = flagged cell
        - 0-8 = opened cell with adjacent mine count
        - 9 = exploded bomb, 10 = exploded safe cell

    Actions:
        Discrete action space of size 2 * width * height.
        Action i < cells opens cell (i // width, i % width); action
        i >= cells flags cell i - cells.

    Rewards:
        - +1 for an action that changed the board without exploding
        - +10 for winning the game
        - -10 for an explosion (opened mine or flagged safe cell)
        - -0.1 for an action that did nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Cleansweeper environment.

        Args:
            config: Board configuration (default: 16x16, 25% mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.board = Board(self.config)
        self.render_mode = render_mode
        self._cells = self.config.height * self.config.width

        self.observation_space = spaces.Box(
            low=OBS_FLAGGED,
            high=OBS_EXPLODED_SAFE,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )

        # One open and one flag action per cell
        self.action_space = spaces.Discrete(2 * self._cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self.board.rng = np.random.default_rng(seed)
        self.board.restart()
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Flat action index (see class docstring).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        kind, row, col = self.decode_action(action)
        self._steps += 1

        reward = self._apply(kind, row, col)

        observation = self.board.get_observation()
        terminated = not self.board.is_playing
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def decode_action(self, action: int) -> Tuple[int, int, int]:
        """Convert flat action index to (kind, row, col)."""
        kind, index = divmod(int(action), self._cells)
        row, col = divmod(index, self.config.width)
        return kind, row, col

    def encode_action(self, kind: int, row: int, col: int) -> int:
        """Convert (kind, row, col) to flat action index."""
        return kind * self._cells + row * self.config.width + col

    def _apply(self, kind: int, row: int, col: int) -> float:
        """
        Perform an action on the board and score it.

        Returns:
            Reward value.
        """
        version = self.board.version
        if kind == FLAG:
            exploded = self.board.flag(row, col)
        else:
            exploded = self.board.open(row, col)

        if exploded:
            return LOSS_REWARD
        if self.board.game_state == GameState.WON:
            return WIN_REWARD
        if not self.board.changed_since(version):
            return NOOP_REWARD
        return STEP_REWARD

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "opened": self.board.opened_count,
            "flagged": self.board.flagged_count,
            "mines_remaining": self.board.mines_remaining,
            "game_state": self.board.game_state.name,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        return render_observation(self.board.get_observation())

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        for row, col in self.board.get_valid_actions():
            mask[self.encode_action(OPEN, row, col)] = True
            mask[self.encode_action(FLAG, row, col)] = True
        return mask


# ============================================================================
# Text Rendering
# ============================================================================

def render_observation(obs: np.ndarray) -> str:
    """Render an observation array as rows of single-character cells."""
    lines = []
    for row in obs:
        lines.append(" ".join(_SYMBOLS.get(int(val), str(val)) for val in row))
    return "\n".join(lines)
