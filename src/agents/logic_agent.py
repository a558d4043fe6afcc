"""
Logic-based agent for Cleansweeper.

Uses constraint propagation over opened cells to flag certain mines and
open certain safe cells, guessing only when nothing is certain.
"""
from typing import Dict, FrozenSet, List, Optional, Set, Tuple
from dataclasses import dataclass

import numpy as np

from cleansweeper.cell import OBS_SECRET
from cleansweeper.environment import FLAG, OPEN

from .base_agent import BaseAgent


Position = Tuple[int, int]


# ============================================================================
# Constraint Types
# ============================================================================

@dataclass(frozen=True)
class Constraint:
    """
    A constraint representing: sum of cells in 'cells' == mine_count.

    An opened cell's count already leaves out flagged mines, so a "2"
    with three secret neighbors gives cells={A, B, C}, mine_count=2.
    """

    cells: FrozenSet[Position]
    mine_count: int


# ============================================================================
# Logic Agent
# ============================================================================

class LogicAgent(BaseAgent):
    """
    Agent that deduces mines and safe cells from opened counts.

    Strategy:
        1. Build one constraint per opened cell with secret neighbors
        2. Propagate: zero remaining mines means safe, mines equal to
           cells means all mines
        3. Apply subset reduction between constraint pairs
        4. Flag a certain mine if there is one, else open a certain safe cell
        5. Otherwise open the secret cell with the lowest estimated risk

    Flags matter more here than in classic minesweeper: flagging a mine
    lowers its neighbors' counts, and a count that drops to zero opens
    the area around it.
    """

    def __init__(
        self,
        board_height: int = 16,
        board_width: int = 16,
        torus: bool = False,
        mine_fraction: float = 0.25,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the logic agent.

        Args:
            board_height: Number of rows in the board.
            board_width: Number of columns in the board.
            torus: Whether the board wraps around at the edges.
            mine_fraction: Prior mine probability for unconstrained cells.
            seed: Random seed for tie-breaking between guesses.
        """
        super().__init__(board_height, board_width, torus)
        self.mine_fraction = mine_fraction
        self.rng = np.random.default_rng(seed)
        self.certain_moves = 0
        self.guesses_made = 0

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select the best action using constraint propagation.

        Args:
            observation: 2D array of cell states.
            valid_actions: Optional mask of valid actions.

        Returns:
            Best action index based on analysis.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        if not np.any(valid_actions):
            return 0

        safe_cells, mine_cells = self._solve_constraints(observation)

        for row, col in sorted(mine_cells):
            action = self.position_to_action(row, col, FLAG)
            if valid_actions[action]:
                self.certain_moves += 1
                return action

        for row, col in sorted(safe_cells):
            action = self.position_to_action(row, col, OPEN)
            if valid_actions[action]:
                self.certain_moves += 1
                return action

        self.guesses_made += 1
        return self._select_by_probability(observation, valid_actions)

    # ========================================================================
    # Constraint Solving
    # ========================================================================

    def _build_constraints(self, observation: np.ndarray) -> List[Constraint]:
        """Build constraints from opened cells with secret neighbors."""
        constraints = []

        for row in range(self.board_height):
            for col in range(self.board_width):
                value = observation[row, col]
                if value < 0 or value > 8:
                    continue

                neighbors = self.neighbors(row, col)
                # Tiny tori repeat neighbors, which breaks the count
                if len(set(neighbors)) != len(neighbors):
                    continue

                secret = frozenset(
                    pos for pos in neighbors if observation[pos] == OBS_SECRET
                )
                if not secret or value > len(secret):
                    continue

                constraints.append(Constraint(secret, int(value)))

        return constraints

    def _solve_constraints(
        self, observation: np.ndarray
    ) -> Tuple[Set[Position], Set[Position]]:
        """
        Propagate constraints until no new cell is determined.

        Returns:
            Tuple of (safe_cells, mine_cells) sets.
        """
        safe_cells: Set[Position] = set()
        mine_cells: Set[Position] = set()
        constraints = self._build_constraints(observation)

        changed = True
        while changed:
            changed = False
            remaining = []
            for constraint in constraints:
                cells = constraint.cells - safe_cells - mine_cells
                mines = constraint.mine_count - len(constraint.cells & mine_cells)
                if not cells:
                    continue
                if mines == 0:
                    safe_cells.update(cells)
                    changed = True
                elif mines == len(cells):
                    mine_cells.update(cells)
                    changed = True
                else:
                    remaining.append(Constraint(frozenset(cells), mines))
            constraints = list(dict.fromkeys(remaining))

            subset_safe, subset_mines = self._subset_reduction(constraints)
            if subset_safe - safe_cells or subset_mines - mine_cells:
                safe_cells.update(subset_safe)
                mine_cells.update(subset_mines)
                changed = True

        return safe_cells, mine_cells

    def _subset_reduction(
        self, constraints: List[Constraint]
    ) -> Tuple[Set[Position], Set[Position]]:
        """
        Compare constraint pairs where one cell set contains the other.

        Example:
            A: {X, Y} has 1 mine
            B: {X, Y, Z} has 1 mine
            -> Z must be safe (B - A = {Z} has 0 mines)
        """
        safe_cells: Set[Position] = set()
        mine_cells: Set[Position] = set()

        for small in constraints:
            for large in constraints:
                if not small.cells < large.cells:
                    continue
                diff_cells = large.cells - small.cells
                diff_mines = large.mine_count - small.mine_count
                if diff_mines == 0:
                    safe_cells.update(diff_cells)
                elif diff_mines == len(diff_cells):
                    mine_cells.update(diff_cells)

        return safe_cells, mine_cells

    # ========================================================================
    # Guessing
    # ========================================================================

    def _estimate_risk(self, observation: np.ndarray) -> Dict[Position, float]:
        """Estimate mine probability for every secret cell."""
        risk: Dict[Position, float] = {}
        for row, col in zip(*np.where(observation == OBS_SECRET)):
            risk[(int(row), int(col))] = self.mine_fraction

        constrained: Set[Position] = set()
        for constraint in self._build_constraints(observation):
            local = constraint.mine_count / len(constraint.cells)
            for pos in constraint.cells:
                if pos in constrained:
                    risk[pos] = max(risk[pos], local)
                else:
                    risk[pos] = local
                    constrained.add(pos)
        return risk

    def _select_by_probability(
        self, observation: np.ndarray, valid_actions: np.ndarray
    ) -> int:
        """Open the secret cell with the lowest estimated mine risk."""
        risk = self._estimate_risk(observation)
        candidates = [
            pos for pos in risk
            if valid_actions[self.position_to_action(*pos, OPEN)]
        ]
        if not candidates:
            return int(np.flatnonzero(valid_actions)[0])

        lowest = min(risk[pos] for pos in candidates)
        best = [pos for pos in candidates if risk[pos] == lowest]
        row, col = best[self.rng.integers(len(best))]
        return self.position_to_action(row, col, OPEN)

    def reset(self) -> None:
        """Reset is a no-op; the agent keeps no per-game state."""
        pass
