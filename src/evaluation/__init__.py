"""
Evaluation module for Cleansweeper agents.

Provides game playing loops and win-rate statistics.
"""
from .evaluator import EpisodeStats, EvaluationStats, Evaluator

__all__ = [
    "EpisodeStats",
    "EvaluationStats",
    "Evaluator",
]
