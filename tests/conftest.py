"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path

import numpy as np

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cleansweeper import Board, BoardConfig, Grid, Topology


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for reproducible boards."""
    return np.random.default_rng(1234)


@pytest.fixture
def default_board(rng: np.random.Generator) -> Board:
    """Create a default 16x16 board with 25% mines."""
    return Board(rng=rng)


@pytest.fixture
def center_mine_board() -> Board:
    """3x3 bounded board with a single mine in the middle."""
    return Board.from_layout(["...", ".*.", "..."])


@pytest.fixture
def undo_board() -> Board:
    """Board with undo enabled and a known layout."""
    return Board.from_layout(["*..", "...", "..*"], undo=True)


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(BoardConfig(5, 5, 0.0))


# ============================================================================
# Grid Fixtures
# ============================================================================

@pytest.fixture
def bounded_grid() -> Grid:
    """4x5 bounded grid."""
    return Grid(4, 5, Topology.BOUNDED)


@pytest.fixture
def torus_grid() -> Grid:
    """4x5 torus grid."""
    return Grid(4, 5, Topology.TORUS)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def small_config() -> BoardConfig:
    """Small 9x9 configuration."""
    return BoardConfig(9, 9, 0.15)


@pytest.fixture
def torus_config() -> BoardConfig:
    """Small torus configuration."""
    return BoardConfig(8, 8, 0.2, torus=True)
