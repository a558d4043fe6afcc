"""
Unit tests for Board class.

Tests configuration, safe start, flood reveal, flagging, win/lose
conditions, undo, torus behavior and observation generation.
"""
import pytest
import numpy as np
from cleansweeper import (
    Board,
    BoardConfig,
    BoardInvariantError,
    CellState,
    GameState,
    Topology,
)


def states_of(board: Board) -> list:
    """All cell states in row-major order."""
    height, width = board.dimensions
    return [board.cell_state(r, c) for r in range(height) for c in range(width)]


def recount(board: Board, row: int, col: int) -> int:
    """Count unflagged mines around a cell from the mine layout."""
    mines = board.get_mines()
    return sum(
        1 for pos in board.neighbors(row, col)
        if mines[pos] and board.cell_state(*pos) != CellState.FLAGGED
    )


# ============================================================================
# Board Configuration Tests
# ============================================================================

class TestBoardConfig:
    """Test board configuration validation."""

    def test_defaults(self) -> None:
        config = BoardConfig()
        assert (config.height, config.width) == (16, 16)
        assert config.mine_fraction == 0.25
        assert config.torus is False
        assert config.undo is False

    def test_zero_width_raises_error(self) -> None:
        """Width of 0 should raise ValueError."""
        with pytest.raises(ValueError, match="dimensions must be positive"):
            BoardConfig(9, 0)

    def test_zero_height_raises_error(self) -> None:
        """Height of 0 should raise ValueError."""
        with pytest.raises(ValueError, match="dimensions must be positive"):
            BoardConfig(0, 9)

    @pytest.mark.parametrize("fraction", [-0.01, 1.01, 2.0])
    def test_fraction_out_of_range_raises_error(self, fraction: float) -> None:
        with pytest.raises(ValueError, match="Mine fraction"):
            BoardConfig(9, 9, fraction)

    @pytest.mark.parametrize("fraction", [0.0, 1.0])
    def test_fraction_bounds_are_valid(self, fraction: float) -> None:
        assert BoardConfig(9, 9, fraction).mine_fraction == fraction

    def test_topology_follows_torus_flag(self) -> None:
        assert BoardConfig().topology == Topology.BOUNDED
        assert BoardConfig(torus=True).topology == Topology.TORUS

    def test_game_state_not_a_constructor_argument(self) -> None:
        """A board always starts ongoing; its status cannot be injected."""
        with pytest.raises(TypeError):
            Board(BoardConfig(), np.random.default_rng(0), GameState.LOST)


# ============================================================================
# Safe Start Tests
# ============================================================================

class TestSafeStart:
    """Test population and the guaranteed safe opening."""

    @pytest.mark.parametrize("seed", range(20))
    def test_start_opens_a_zero_cell(self, seed: int) -> None:
        """A new board has an opened zero-count cell and no explosions."""
        board = Board(BoardConfig(9, 9, 0.2), np.random.default_rng(seed))
        opened = [
            (r, c) for r in range(9) for c in range(9)
            if board.cell_state(r, c) == CellState.OPENED
        ]
        assert opened
        assert any(board.adjacent_mine_count(*pos) == 0 for pos in opened)
        assert not any(state.is_exploded for state in states_of(board))
        assert board.game_state == GameState.ONGOING

    @pytest.mark.parametrize("seed", range(10))
    def test_opened_counts_match_layout(self, seed: int) -> None:
        """Displayed counts agree with a count from the mine layout."""
        board = Board(BoardConfig(10, 12, 0.3), np.random.default_rng(seed))
        for row in range(10):
            for col in range(12):
                if board.cell_state(row, col) == CellState.OPENED:
                    assert board.adjacent_mine_count(row, col) == recount(
                        board, row, col
                    )

    @pytest.mark.parametrize("torus", [False, True])
    @pytest.mark.parametrize("seed", range(10))
    def test_flood_never_touches_bombs(self, seed: int, torus: bool) -> None:
        """Zero-count opened cells only border opened or flagged cells."""
        board = Board(
            BoardConfig(8, 8, 0.25, torus=torus), np.random.default_rng(seed)
        )
        for row in range(8):
            for col in range(8):
                if board.cell_state(row, col) != CellState.OPENED:
                    continue
                if board.adjacent_mine_count(row, col) != 0:
                    continue
                for pos in board.neighbors(row, col):
                    assert board.cell_state(*pos) in (
                        CellState.OPENED, CellState.FLAGGED
                    )

    def test_single_cell_without_mines_is_won(self) -> None:
        """A 1x1 mine-free board is solved by its own start."""
        board = Board(BoardConfig(1, 1, 0.0))
        assert board.cell_state(0, 0) == CellState.OPENED
        assert board.is_won() is True

    @pytest.mark.parametrize("torus", [False, True])
    def test_all_mines_falls_back_to_forced_safe_region(self, torus: bool) -> None:
        """With no zero cell, a random cell and its neighbors are cleared."""
        board = Board(
            BoardConfig(4, 4, 1.0, torus=torus), np.random.default_rng(3)
        )
        opened = [
            (r, c) for r in range(4) for c in range(4)
            if board.cell_state(r, c) == CellState.OPENED
        ]
        assert opened
        assert any(board.adjacent_mine_count(*pos) == 0 for pos in opened)
        assert board.game_state == GameState.ONGOING

    def test_empty_board_opens_everything(self, empty_board: Board) -> None:
        assert all(state == CellState.OPENED for state in states_of(empty_board))

    def test_same_seed_same_board(self) -> None:
        config = BoardConfig(9, 9, 0.2)
        first = Board(config, np.random.default_rng(42))
        second = Board(config, np.random.default_rng(42))
        assert np.array_equal(first.get_observation(), second.get_observation())
        assert np.array_equal(first.get_mines(), second.get_mines())


# ============================================================================
# Layout Injection Tests
# ============================================================================

class TestLayout:
    """Test fixed mine layouts."""

    def test_from_layout_is_all_secret(self, center_mine_board: Board) -> None:
        assert center_mine_board.cell_state(1, 1) == CellState.SECRET_BOMB
        assert center_mine_board.cell_state(0, 0) == CellState.SECRET_SAFE
        assert all(state.is_secret for state in states_of(center_mine_board))
        assert center_mine_board.game_state == GameState.ONGOING

    def test_load_mines_shape_mismatch(self, center_mine_board: Board) -> None:
        with pytest.raises(ValueError, match="does not match"):
            center_mine_board.load_mines(np.zeros((2, 2), dtype=bool))

    def test_adjacent_counts(self, center_mine_board: Board) -> None:
        assert center_mine_board.adjacent_mine_count(0, 1) == 1
        assert center_mine_board.adjacent_mine_count(1, 1) == 0


# ============================================================================
# Open and Flood Tests
# ============================================================================

class TestOpen:
    """Test opening cells and the flood reveal."""

    def test_open_numbered_cell_does_not_flood(
        self, center_mine_board: Board
    ) -> None:
        """Every cell touches the center mine, so only (0, 0) opens."""
        assert center_mine_board.open(0, 0) is False
        assert center_mine_board.cell_state(0, 0) == CellState.OPENED
        assert center_mine_board.opened_count == 1
        assert center_mine_board.adjacent_mine_count(0, 1) == 1

    def test_flag_unblocks_flood(self, center_mine_board: Board) -> None:
        """Flagging the mine drops counts to zero and opens the rest."""
        center_mine_board.open(0, 0)
        assert center_mine_board.flag(1, 1) is False

        for row in range(3):
            for col in range(3):
                if (row, col) == (1, 1):
                    assert center_mine_board.cell_state(row, col) == CellState.FLAGGED
                else:
                    assert center_mine_board.cell_state(row, col) == CellState.OPENED
        assert center_mine_board.game_state == GameState.WON

    def test_flood_stops_at_numbered_cells(self) -> None:
        board = Board.from_layout([".....", ".....", ".....", ".....", "....*"])
        board.open(0, 0)
        assert board.cell_state(4, 4) == CellState.SECRET_BOMB
        assert board.opened_count == 24
        assert board.adjacent_mine_count(3, 3) == 1
        assert board.game_state == GameState.ONGOING

        board.flag(4, 4)
        assert board.is_won() is True
        assert board.game_state == GameState.WON

    def test_open_mine_explodes(self, undo_board: Board) -> None:
        assert undo_board.open(0, 0) is True
        assert undo_board.cell_state(0, 0) == CellState.EXPLODED_BOMB
        assert undo_board.game_state == GameState.LOST

    def test_open_outside_bounded_grid_is_noop(
        self, center_mine_board: Board
    ) -> None:
        version = center_mine_board.version
        assert center_mine_board.open(-1, 0) is False
        assert center_mine_board.open(0, 3) is False
        assert center_mine_board.version == version

    @pytest.mark.parametrize(
        "state",
        [CellState.OPENED, CellState.FLAGGED],
    )
    def test_actions_on_resolved_cells_are_noops(
        self, undo_board: Board, state: CellState
    ) -> None:
        """Opening or flagging a resolved cell changes nothing."""
        undo_board.open(1, 1)
        undo_board.flag(0, 0)
        assert undo_board.game_state == GameState.ONGOING
        pos = (1, 1) if state == CellState.OPENED else (0, 0)
        version = undo_board.version
        before = states_of(undo_board)

        assert undo_board.open(*pos) is False
        assert undo_board.flag(*pos) is False
        assert states_of(undo_board) == before
        assert undo_board.version == version


# ============================================================================
# Flag Tests
# ============================================================================

class TestFlag:
    """Test flagging behavior."""

    def test_flag_mine(self, undo_board: Board) -> None:
        assert undo_board.flag(0, 0) is False
        assert undo_board.cell_state(0, 0) == CellState.FLAGGED
        assert undo_board.game_state == GameState.ONGOING

    def test_flagged_mine_drops_out_of_counts(self, undo_board: Board) -> None:
        assert undo_board.adjacent_mine_count(0, 1) == 1
        undo_board.flag(0, 0)
        assert undo_board.adjacent_mine_count(0, 1) == 0

    def test_flag_safe_cell_loses(self, undo_board: Board) -> None:
        assert undo_board.flag(0, 1) is True
        assert undo_board.cell_state(0, 1) == CellState.EXPLODED_SAFE
        assert undo_board.game_state == GameState.LOST


# ============================================================================
# Game Over, Undo and Restart Tests
# ============================================================================

class TestGameOver:
    """Test status transitions."""

    def test_actions_after_loss_are_noops(self, undo_board: Board) -> None:
        undo_board.open(0, 0)
        version = undo_board.version
        assert undo_board.open(1, 1) is False
        assert undo_board.flag(2, 2) is False
        assert undo_board.cell_state(1, 1) == CellState.SECRET_SAFE
        assert undo_board.version == version

    def test_undo_wrong_flag(self, undo_board: Board) -> None:
        undo_board.flag(0, 1)
        assert undo_board.clear_explosions() is True
        assert undo_board.cell_state(0, 1) == CellState.SECRET_SAFE
        assert undo_board.game_state == GameState.ONGOING

    def test_undo_keeps_mine_layout(self, undo_board: Board) -> None:
        mines = undo_board.get_mines()
        undo_board.open(2, 2)
        undo_board.clear_explosions()
        assert undo_board.cell_state(2, 2) == CellState.SECRET_BOMB
        assert np.array_equal(undo_board.get_mines(), mines)

    def test_undo_leaves_other_cells(self, undo_board: Board) -> None:
        undo_board.flag(0, 0)
        undo_board.open(2, 2)
        undo_board.clear_explosions()
        assert undo_board.cell_state(0, 0) == CellState.FLAGGED

    def test_undo_disabled(self, center_mine_board: Board) -> None:
        center_mine_board.open(1, 1)
        assert center_mine_board.clear_explosions() is False
        assert center_mine_board.game_state == GameState.LOST
        assert center_mine_board.cell_state(1, 1) == CellState.EXPLODED_BOMB

    def test_undo_does_not_leave_won(self) -> None:
        board = Board.from_layout(["*."], undo=True)
        board.open(0, 1)
        board.flag(0, 0)
        assert board.game_state == GameState.WON
        assert board.clear_explosions() is False
        assert board.game_state == GameState.WON

    def test_restart_after_win(self) -> None:
        """A won game can be replaced by a fresh one."""
        board = Board.from_layout(["*."])
        board.open(0, 1)
        board.flag(0, 0)
        assert board.game_state == GameState.WON
        board.restart()
        assert board.game_state == GameState.ONGOING
        assert board.flagged_count == 0

    def test_restart_after_loss(self, undo_board: Board) -> None:
        undo_board.open(0, 0)
        undo_board.restart()
        assert undo_board.game_state == GameState.ONGOING
        assert not any(state.is_exploded for state in states_of(undo_board))
        assert undo_board.opened_count >= 1

    def test_is_won_iff_no_secret_cells(self, center_mine_board: Board) -> None:
        assert center_mine_board.is_won() is False
        center_mine_board.flag(1, 1)
        assert center_mine_board.is_won() is False
        center_mine_board.open(0, 0)
        assert center_mine_board.is_won() is True


# ============================================================================
# Torus Tests
# ============================================================================

class TestTorus:
    """Test wraparound boards."""

    def test_torus_counts_across_edges(self) -> None:
        board = Board.from_layout(["....*", ".....", "....."], torus=True)
        assert board.adjacent_mine_count(0, 0) == 1
        assert board.adjacent_mine_count(2, 0) == 1

    def test_torus_wraps_player_coordinates(self) -> None:
        board = Board.from_layout(["....*", ".....", "....."], torus=True)
        assert board.open(-3, -1) is True
        assert board.cell_state(0, 4) == CellState.EXPLODED_BOMB

    def test_torus_flood_wraps(self) -> None:
        """A flood on a torus crosses the edges."""
        board = Board.from_layout(
            ["......", "......", "......", "...*..", "......", "......"],
            torus=True,
        )
        board.open(0, 0)
        assert board.opened_count == 35
        assert board.cell_state(5, 5) == CellState.OPENED


# ============================================================================
# Invariant Tests
# ============================================================================

class TestInvariants:
    """Test that corrupted boards fail loudly."""

    def test_flood_into_exploded_cell_raises(self) -> None:
        board = Board.from_layout(["....."])
        board._grid[0, 4] = CellState.EXPLODED_SAFE
        with pytest.raises(BoardInvariantError):
            board.open(0, 0)

    def test_flood_from_secret_cell_raises(self, center_mine_board: Board) -> None:
        with pytest.raises(BoardInvariantError):
            center_mine_board._flood((0, 0))

    def test_cell_state_outside_grid_raises(
        self, center_mine_board: Board
    ) -> None:
        with pytest.raises(IndexError):
            center_mine_board.cell_state(3, 0)


# ============================================================================
# Observation and Change Tracking Tests
# ============================================================================

class TestObservation:
    """Test observation array and the change counter."""

    def test_observation_shape_and_dtype(self, default_board: Board) -> None:
        obs = default_board.get_observation()
        assert obs.shape == (16, 16)
        assert obs.dtype == np.int8

    def test_observation_values(self, center_mine_board: Board) -> None:
        obs = center_mine_board.get_observation()
        assert np.all(obs == -1)

        center_mine_board.open(0, 0)
        assert center_mine_board.get_observation()[0, 0] == 1

        center_mine_board.flag(1, 1)
        obs = center_mine_board.get_observation()
        assert obs[1, 1] == -2
        assert obs[2, 2] == 0

    def test_exploded_observation(self, undo_board: Board) -> None:
        undo_board.flag(0, 1)
        assert undo_board.get_observation()[0, 1] == 10

    def test_valid_actions_are_secret_cells(
        self, center_mine_board: Board
    ) -> None:
        assert len(center_mine_board.get_valid_actions()) == 9
        center_mine_board.open(0, 0)
        assert (0, 0) not in center_mine_board.get_valid_actions()

    def test_version_tracks_changes(self, center_mine_board: Board) -> None:
        version = center_mine_board.version
        center_mine_board.open(0, 0)
        assert center_mine_board.changed_since(version)

        version = center_mine_board.version
        center_mine_board.open(0, 0)
        assert not center_mine_board.changed_since(version)

    def test_counters(self, center_mine_board: Board) -> None:
        assert center_mine_board.mines_remaining == 1
        center_mine_board.flag(1, 1)
        assert center_mine_board.mines_remaining == 0
        assert center_mine_board.flagged_count == 1
