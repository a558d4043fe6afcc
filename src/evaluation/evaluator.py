"""
Evaluation module for Cleansweeper agents.

Plays batches of games and reports per-agent statistics.
"""
from dataclasses import dataclass
from typing import Dict, Optional

from cleansweeper.board import BoardConfig
from cleansweeper.environment import CleansweeperEnv
from agents.base_agent import BaseAgent


# ============================================================================
# Episode Statistics
# ============================================================================

@dataclass
class EpisodeStats:
    """Statistics for a single game."""

    total_reward: float = 0.0
    steps: int = 0
    won: bool = False
    opened_cells: int = 0


@dataclass
class EvaluationStats:
    """Accumulated statistics over many games."""

    episodes: int = 0
    wins: int = 0
    total_reward: float = 0.0
    total_steps: int = 0
    total_opened: int = 0

    def add(self, episode: EpisodeStats) -> None:
        """Fold one game into the totals."""
        self.episodes += 1
        self.wins += int(episode.won)
        self.total_reward += episode.total_reward
        self.total_steps += episode.steps
        self.total_opened += episode.opened_cells

    def to_dict(self) -> Dict[str, float]:
        """Convert to averaged metrics."""
        episodes = max(self.episodes, 1)
        return {
            "win_rate": self.wins / episodes,
            "avg_reward": self.total_reward / episodes,
            "avg_steps": self.total_steps / episodes,
            "avg_opened": self.total_opened / episodes,
        }


# ============================================================================
# Agent Evaluator
# ============================================================================

class Evaluator:
    """
    Evaluate and compare multiple agents.

    Every agent plays the same sequence of boards when a seed is given.
    """

    def __init__(
        self,
        board_config: Optional[BoardConfig] = None,
        num_episodes: int = 100,
        max_steps: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the evaluator.

        Args:
            board_config: Board configuration for evaluation.
            num_episodes: Number of evaluation games.
            max_steps: Maximum steps per game (default: two per cell).
            seed: Base seed; game i uses seed + i.
        """
        self.board_config = board_config or BoardConfig()
        self.num_episodes = num_episodes
        cells = self.board_config.height * self.board_config.width
        self.max_steps = max_steps or 2 * cells
        self.seed = seed

    def _episode_seed(self, episode: int) -> Optional[int]:
        if self.seed is None:
            return None
        return self.seed + episode

    def play(
        self, agent: BaseAgent, env: CleansweeperEnv, seed: Optional[int] = None
    ) -> EpisodeStats:
        """
        Play one game to the end or the step limit.

        Args:
            agent: Agent choosing actions.
            env: Environment to play in.
            seed: Seed for the board of this game.

        Returns:
            Statistics of the game.
        """
        stats = EpisodeStats()
        observation, info = env.reset(seed=seed)
        agent.reset()

        for _ in range(self.max_steps):
            if info.get("game_state") != "ONGOING":
                break
            action = agent.select_action(observation, env.get_action_mask())
            next_observation, reward, terminated, truncated, info = env.step(
                action
            )
            agent.update(observation, action, reward, next_observation, terminated)

            stats.total_reward += float(reward)
            stats.steps += 1
            observation = next_observation

            if terminated or truncated:
                break

        stats.won = info.get("game_state") == "WON"
        stats.opened_cells = info.get("opened", 0)
        return stats

    def evaluate(self, agent: BaseAgent) -> Dict[str, float]:
        """
        Evaluate a single agent.

        Args:
            agent: Agent to evaluate.

        Returns:
            Dictionary with evaluation metrics.
        """
        env = CleansweeperEnv(config=self.board_config)
        totals = EvaluationStats()

        for episode in range(self.num_episodes):
            totals.add(self.play(agent, env, self._episode_seed(episode)))

        return totals.to_dict()

    def compare(
        self, agents: Dict[str, BaseAgent]
    ) -> Dict[str, Dict[str, float]]:
        """
        Compare multiple agents.

        Args:
            agents: Dictionary of agent_name -> agent.

        Returns:
            Dictionary of agent_name -> evaluation metrics.
        """
        results = {}
        for name, agent in agents.items():
            print(f"Evaluating {name}...")
            results[name] = self.evaluate(agent)
        return results
