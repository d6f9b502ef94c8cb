"""Tests for the Connect Four rules engine."""

import random

import numpy as np
import pytest

from connect_four.errors import (ConnectFourError, GameAlreadyOver, InvalidColumn,
                                 InvalidCoordinate, InvalidDimension, InvalidPlayers)
from connect_four.game.engine import GameEngine, create_game, find_winning_run
from connect_four.utils import Cell, GameResult, Outcome, Player

# Row-by-row fill of a 6x7 board that ends full with no four in a row:
# rows alternate XXOOXXO / OOXXOOX from the bottom up.
TIE_ROW = [0, 2, 1, 3, 4, 6, 5]
TIE_SEQUENCE = TIE_ROW * 6


def play(engine, columns):
    result = None
    for col in columns:
        result = engine.attempt_placement(col)
    return result


@pytest.fixture
def engine():
    return create_game("red", "blue")


class TestConstruction:
    def test_empty_board(self, engine):
        assert engine.height == 6
        assert engine.width == 7
        assert np.all(engine.get_state() == 0)
        assert engine.status is GameResult.IN_PROGRESS
        assert engine.current_player == Player(Cell.ONE, "red")

    def test_custom_dimensions(self):
        engine = create_game("red", "blue", height=4, width=9)
        assert engine.get_state().shape == (4, 9)

    @pytest.mark.parametrize("height,width", [
        (0, 7), (6, 0), (-1, 7), (6, -3), (2.5, 7), (6, "7"), (True, 7), (None, 7),
    ])
    def test_invalid_dimension(self, height, width):
        with pytest.raises(InvalidDimension):
            create_game("red", "blue", height=height, width=width)

    def test_numpy_dimensions_accepted(self):
        engine = create_game("red", "blue", height=np.int64(5), width=np.int32(5))
        assert (engine.height, engine.width) == (5, 5)

    def test_players_need_distinct_ids(self):
        with pytest.raises(InvalidPlayers):
            GameEngine(Player(Cell.ONE, "red"), Player(Cell.ONE, "blue"))
        with pytest.raises(InvalidPlayers):
            GameEngine(Player(Cell.EMPTY, "red"), Player(Cell.TWO, "blue"))

    def test_second_id_may_move_first(self):
        engine = GameEngine(Player(Cell.TWO, "blue"), Player(Cell.ONE, "red"))
        result = engine.attempt_placement(0)
        assert engine.cell_at(5, 0) is Cell.TWO
        assert result.player.color == "blue"
        assert engine.current_player.id is Cell.ONE
        engine.attempt_placement(0)
        assert engine.cell_at(4, 0) is Cell.ONE
        assert engine.current_player.color == "blue"

    def test_errors_share_a_base_class(self):
        with pytest.raises(ConnectFourError):
            create_game("red", "blue", height=0)


class TestGravity:
    def test_first_piece_lands_on_bottom(self, engine):
        result = engine.attempt_placement(3)
        assert result.outcome is Outcome.CONTINUED
        assert result.placed_at == (5, 3)
        assert engine.cell_at(5, 3) is Cell.ONE

    def test_pieces_stack(self, engine):
        rows = [engine.attempt_placement(2).placed_at[0] for _ in range(4)]
        assert rows == [5, 4, 3, 2]
        assert [engine.cell_at(r, 2) for r in (5, 4, 3, 2)] == [Cell.ONE, Cell.TWO, Cell.ONE, Cell.TWO]

    def test_find_spot_for_col(self, engine):
        assert engine.find_spot_for_col(0) == 5
        engine.attempt_placement(0)
        assert engine.find_spot_for_col(0) == 4

    def test_column_full_is_a_no_op(self, engine):
        play(engine, [0] * 6)
        before = engine.get_state()
        current = engine.current_player

        result = engine.attempt_placement(0)

        assert result.outcome is Outcome.COLUMN_FULL
        assert result.placed_at is None
        assert not result.placed
        assert np.array_equal(engine.get_state(), before)
        assert engine.current_player == current
        assert engine.status is GameResult.IN_PROGRESS
        assert engine.find_spot_for_col(0) is None
        assert 0 not in engine.valid_columns()


class TestInvalidColumn:
    @pytest.mark.parametrize("height,width", [(1, 1), (6, 7), (3, 10), (8, 4)])
    def test_out_of_range(self, height, width):
        engine = create_game("red", "blue", height=height, width=width)
        for col in (-1, width, width + 5):
            with pytest.raises(InvalidColumn):
                engine.attempt_placement(col)
        assert np.all(engine.get_state() == 0)

    @pytest.mark.parametrize("col", ["3", 2.0, None, True])
    def test_not_an_integer(self, engine, col):
        with pytest.raises(InvalidColumn):
            engine.attempt_placement(col)

    def test_numpy_integer_column(self, engine):
        assert engine.attempt_placement(np.int64(4)).placed_at == (5, 4)

    def test_invalid_column_is_a_value_error(self, engine):
        with pytest.raises(ValueError):
            engine.attempt_placement(99)


class TestTurns:
    def test_alternates_after_continued(self, engine):
        ids = []
        for col in [0, 1, 2, 0, 1]:
            ids.append(engine.current_player.id)
            assert engine.attempt_placement(col).outcome is Outcome.CONTINUED
        assert ids == [Cell.ONE, Cell.TWO, Cell.ONE, Cell.TWO, Cell.ONE]

    def test_mover_reported(self, engine):
        assert engine.attempt_placement(0).player.id is Cell.ONE
        assert engine.attempt_placement(0).player.id is Cell.TWO

    def test_current_player_kept_after_win(self, engine):
        result = play(engine, [0, 0, 1, 1, 2, 2, 3])
        assert result.outcome is Outcome.WON
        assert engine.current_player.id is Cell.ONE


class TestWinDetection:
    def test_horizontal_win(self, engine):
        play(engine, [0, 0, 1, 1, 2, 2])
        assert [engine.cell_at(5, c) for c in range(3)] == [Cell.ONE] * 3

        result = engine.attempt_placement(3)

        assert result.outcome is Outcome.WON
        assert result.placed_at == (5, 3)
        assert result.winner is Cell.ONE
        assert engine.status is GameResult.PLAYER_ONE_WIN
        assert engine.winner.color == "red"
        assert engine.winning_line() == [(5, 0), (5, 1), (5, 2), (5, 3)]

    def test_vertical_win(self, engine):
        result = play(engine, [0, 1, 0, 1, 0, 1, 0])
        assert result.outcome is Outcome.WON
        assert result.placed_at == (2, 0)
        assert engine.winning_line() == [(2, 0), (3, 0), (4, 0), (5, 0)]

    def test_diagonal_win(self, engine):
        # X ends on (5,0), (4,1), (3,2), (2,3)
        result = play(engine, [0, 1, 1, 2, 3, 2, 2, 3, 6, 3, 3])
        assert result.outcome is Outcome.WON
        assert result.placed_at == (2, 3)
        assert sorted(engine.winning_line()) == [(2, 3), (3, 2), (4, 1), (5, 0)]

    def test_other_diagonal_win(self, engine):
        result = play(engine, [6, 5, 5, 4, 3, 4, 4, 3, 0, 3, 3])
        assert result.outcome is Outcome.WON
        assert sorted(engine.winning_line()) == [(2, 3), (3, 4), (4, 5), (5, 6)]

    def test_second_player_wins(self, engine):
        result = play(engine, [6, 0, 6, 1, 5, 2, 4, 3])
        assert result.outcome is Outcome.WON
        assert result.winner is Cell.TWO
        assert engine.status is GameResult.PLAYER_TWO_WIN
        assert engine.winner.color == "blue"

    def test_three_in_a_row_is_not_a_win(self, engine):
        result = play(engine, [0, 0, 1, 1, 2])
        assert result.outcome is Outcome.CONTINUED
        assert engine.check_for_win() is False

    def test_check_for_win_is_for_current_player(self, engine):
        play(engine, [0, 0, 1, 1, 2, 2])
        # Player ONE to move holds three, not four
        assert engine.check_for_win() is False

    def test_winning_line_empty_while_playing(self, engine):
        engine.attempt_placement(0)
        assert engine.winning_line() == []

    def test_find_winning_run_on_grid(self):
        grid = np.zeros((6, 7), dtype=np.int8)
        for i in range(4):
            grid[i, 6 - i] = Cell.TWO.value
        assert find_winning_run(grid, Cell.TWO) == [(0, 6), (1, 5), (2, 4), (3, 3)]
        assert find_winning_run(grid, Cell.ONE) == []

    def test_broken_sequence_is_not_a_win(self):
        grid = np.zeros((6, 7), dtype=np.int8)
        grid[5, [0, 1, 3, 4]] = Cell.ONE.value
        assert find_winning_run(grid, Cell.ONE) == []


class TestTie:
    def test_full_board_tie(self, engine):
        for col in TIE_SEQUENCE[:-1]:
            assert engine.attempt_placement(col).outcome is Outcome.CONTINUED

        result = engine.attempt_placement(TIE_SEQUENCE[-1])

        assert result.outcome is Outcome.TIED
        assert result.winner is None
        assert engine.status is GameResult.TIED
        assert engine.is_full()
        assert engine.winner is None
        assert engine.winning_line() == []
        assert engine.valid_columns() == []

    def test_no_placement_after_tie(self, engine):
        play(engine, TIE_SEQUENCE)
        before = engine.get_state()
        for col in range(7):
            with pytest.raises(GameAlreadyOver):
                engine.attempt_placement(col)
        assert np.array_equal(engine.get_state(), before)

    def test_small_board_tie(self):
        engine = create_game("red", "blue", height=3, width=3)
        result = play(engine, [0, 1, 2] * 3)
        assert result.outcome is Outcome.TIED

    def test_single_cell_board(self):
        engine = create_game("red", "blue", height=1, width=1)
        assert engine.attempt_placement(0).outcome is Outcome.TIED

    def test_tie_checked_before_win(self):
        # The last piece both fills the board and completes X's row
        engine = create_game("red", "blue", height=1, width=7)
        result = play(engine, [0, 4, 1, 5, 2, 6, 3])
        assert result.outcome is Outcome.TIED
        assert engine.status is GameResult.TIED
        assert engine.current_player.id is Cell.ONE


class TestGameOver:
    def test_no_placement_after_win(self, engine):
        play(engine, [0, 1, 0, 1, 0, 1, 0])
        before = engine.get_state()
        with pytest.raises(GameAlreadyOver):
            engine.attempt_placement(5)
        assert np.array_equal(engine.get_state(), before)
        assert engine.status is GameResult.PLAYER_ONE_WIN
        assert engine.is_game_over()


class TestInvariants:
    @pytest.mark.parametrize("seed", range(10))
    def test_random_games(self, seed):
        rng = random.Random(seed)
        height, width = rng.randint(1, 7), rng.randint(1, 8)
        engine = create_game("red", "blue", height=height, width=width)
        previous = engine.get_state()

        while not engine.is_game_over():
            mover = engine.current_player
            result = engine.attempt_placement(rng.randrange(width))
            state = engine.get_state()

            if result.outcome is Outcome.COLUMN_FULL:
                assert np.array_equal(state, previous)
                assert engine.current_player == mover
                continue

            # Exactly one new cell, nothing else touched
            changed = np.argwhere(state != previous)
            assert [tuple(c) for c in changed] == [result.placed_at]
            assert previous[result.placed_at] == 0
            assert state[result.placed_at] == mover.id.value

            # Gravity: the cell below is occupied or the floor
            row, col = result.placed_at
            assert row == height - 1 or state[row + 1, col] != 0

            if result.outcome is Outcome.CONTINUED:
                assert engine.current_player != mover
            else:
                assert engine.current_player == mover
            previous = state

        assert engine.status in (GameResult.PLAYER_ONE_WIN, GameResult.PLAYER_TWO_WIN, GameResult.TIED)


class TestAccessors:
    def test_cell_at_out_of_range(self, engine):
        for row, col in [(-1, 0), (6, 0), (0, 7), (0, -1)]:
            with pytest.raises(InvalidCoordinate):
                engine.cell_at(row, col)

    def test_cell_at_explicit_empty(self, engine):
        assert engine.cell_at(0, 0) is Cell.EMPTY
        assert engine.cell_at(0, 0).is_empty()

    def test_get_state_is_a_copy(self, engine):
        state = engine.get_state()
        state[5, 0] = 2
        assert engine.cell_at(5, 0) is Cell.EMPTY

    def test_render(self, engine):
        engine.attempt_placement(3)
        engine.attempt_placement(3)
        lines = str(engine).splitlines()
        assert len(lines) == 6 + 3
        assert lines[6].strip("| ").split() == [".", ".", ".", "X", ".", ".", "."]
        assert lines[5].strip("| ").split() == [".", ".", ".", "O", ".", ".", "."]
