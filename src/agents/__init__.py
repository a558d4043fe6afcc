"""
Cleansweeper AI agents module.

Provides agents for playing Cleansweeper:
- RandomAgent: Baseline random opening
- LogicAgent: Constraint propagation with flagging
"""
from .base_agent import BaseAgent
from .random_agent import RandomAgent
from .logic_agent import LogicAgent, Constraint

__all__ = [
    "BaseAgent",
    "RandomAgent",
    "LogicAgent",
    "Constraint",
]
