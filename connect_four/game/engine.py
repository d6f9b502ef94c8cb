"""
engine.py - Game state and win detection for Connect Four

This module implements the GameEngine class, which owns the grid, the two
players, whose turn it is and the game status. The only way to change a game
is GameEngine.attempt_placement().

Row 0 is the top of the board; pieces fall toward the highest row index.
"""

from typing import List, Optional, Tuple

import numpy as np

from connect_four.debug import debug
from connect_four.errors import (GameAlreadyOver, InvalidColumn, InvalidCoordinate,
                                 InvalidDimension, InvalidPlayers, InvariantViolated)
from connect_four.utils import (DEFAULT_HEIGHT, DEFAULT_WIDTH, DIRECTION_VECTORS, Cell,
                                Coord, GameResult, Outcome, PlacementResult, Player,
                                is_integer, is_valid_position, render_board_ascii, run_from)


def find_winning_run(grid: np.ndarray, player_id: Cell) -> List[Coord]:
    """
    Find the first run of four cells owned by a player.

    Cells are scanned row by row; each one is tried as the start of a run
    going right, down, down-right and down-left.

    Returns:
        The four (row, col) positions, or an empty list if there is none
    """
    height, width = grid.shape
    for row in range(height):
        for col in range(width):
            for direction in DIRECTION_VECTORS:
                cells = run_from(row, col, direction)
                if all(is_valid_position(r, c, height, width) and grid[r, c] == player_id.value
                       for r, c in cells):
                    return cells
    return []


class GameEngine:
    """
    Rules engine for a single game of Connect Four.

    Placements are validated, applied with gravity, and followed by the tie
    check and then the win check. Once the game is won or tied, further
    placements raise GameAlreadyOver.
    """

    def __init__(self, player1: Player, player2: Player,
                 height: int = DEFAULT_HEIGHT, width: int = DEFAULT_WIDTH):
        """
        Create an empty board.

        Args:
            player1: Player who moves first (id Cell.ONE or Cell.TWO)
            player2: The other player
            height: Number of rows, a positive integer
            width: Number of columns, a positive integer

        Raises:
            InvalidDimension: height or width is not a positive integer
            InvalidPlayers: players do not hold the two distinct player ids
        """
        for name, value in (("height", height), ("width", width)):
            if not is_integer(value) or value <= 0:
                raise InvalidDimension(f"{name} must be a positive integer, got {value!r}")

        ids = {getattr(player1, "id", None), getattr(player2, "id", None)}
        if ids != {Cell.ONE, Cell.TWO}:
            raise InvalidPlayers(f"players must hold ids ONE and TWO, got {player1!r} and {player2!r}")

        self._height = int(height)
        self._width = int(width)
        self._players = (player1, player2)
        self._current = player1
        self._status = GameResult.IN_PROGRESS
        self._grid = np.zeros((self._height, self._width), dtype=np.int8)
        self._pieces = 0

        debug.debug(f"New {self._height}x{self._width} game: {player1} vs {player2}", "engine")

    # Read-only state

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    @property
    def players(self) -> Tuple[Player, Player]:
        return self._players

    @property
    def current_player(self) -> Player:
        return self._current

    @property
    def status(self) -> GameResult:
        return self._status

    @property
    def winner(self) -> Optional[Player]:
        """The winning Player, or None while in progress or after a tie."""
        winner_id = self._status.winner
        if winner_id is None:
            return None
        return self.player_for(winner_id)

    def player_for(self, player_id: Cell) -> Player:
        for player in self._players:
            if player.id is player_id:
                return player
        raise KeyError(player_id)

    def cell_at(self, row: int, col: int) -> Cell:
        """
        Get the occupant of a cell.

        Raises:
            InvalidCoordinate: (row, col) is outside the grid
        """
        if not (is_integer(row) and is_integer(col)) or \
                not is_valid_position(row, col, self._height, self._width):
            raise InvalidCoordinate(f"({row!r}, {col!r}) is outside a {self._height}x{self._width} board")
        return Cell(int(self._grid[row, col]))

    def get_state(self) -> np.ndarray:
        """Copy of the grid: 0 for empty, 1 and 2 for the player ids."""
        return self._grid.copy()

    def is_game_over(self) -> bool:
        return self._status.is_game_over()

    def is_full(self) -> bool:
        """True when every cell is occupied."""
        return self._pieces == self._height * self._width

    def find_spot_for_col(self, column: int) -> Optional[int]:
        """
        Find the row a piece dropped into this column would land in.

        Returns:
            Row index, or None if the column is full
        """
        self._check_column(column)
        for row in range(self._height - 1, -1, -1):
            if self._grid[row, column] == Cell.EMPTY.value:
                return row
        return None

    def valid_columns(self) -> List[int]:
        """Columns that can still take a piece; empty once the game is over."""
        if self.is_game_over():
            return []
        return [col for col in range(self._width) if self._grid[0, col] == Cell.EMPTY.value]

    # Moves

    def attempt_placement(self, column: int) -> PlacementResult:
        """
        Drop the current player's piece into a column.

        Args:
            column: Column index in [0, width)

        Returns:
            PlacementResult with outcome CONTINUED, WON, TIED or COLUMN_FULL.
            placed_at holds the (row, col) of the new piece unless the
            column was full, in which case nothing changed.

        Raises:
            InvalidColumn: column is not an integer in range
            GameAlreadyOver: the game has already been won or tied
        """
        if self.is_game_over():
            raise GameAlreadyOver(f"Game is over ({self._status.name}); placement in column {column!r} refused")

        row = self.find_spot_for_col(column)
        if row is None:
            debug.debug(f"Column {column} is full", "engine")
            return PlacementResult(Outcome.COLUMN_FULL)

        column = int(column)
        mover = self._current
        self._occupy(row, column, mover.id)
        debug.debug(f"Player {mover} placed at ({row}, {column})", "engine")

        if self.is_full():
            self._status = GameResult.TIED
            debug.info("Game ends in a tie", "engine")
            return PlacementResult(Outcome.TIED, (row, column), mover)

        debug.start_timer("win_check")
        won = self.check_for_win()
        debug.end_timer("win_check", "engine")

        if won:
            self._status = GameResult.won_by(mover.id)
            debug.info(f"Player {mover} wins after move at ({row}, {column})", "engine")
            return PlacementResult(Outcome.WON, (row, column), mover, mover.id)

        self._current = self.player_for(mover.id.other())
        debug.trace(f"Switching to player {self._current}", "engine")
        return PlacementResult(Outcome.CONTINUED, (row, column), mover)

    def _occupy(self, row: int, col: int, player_id: Cell):
        if self._grid[row, col] != Cell.EMPTY.value:
            raise InvariantViolated(f"cell ({row}, {col}) is already occupied")
        self._grid[row, col] = player_id.value
        self._pieces += 1

    def _check_column(self, column):
        if not is_integer(column) or not 0 <= column < self._width:
            raise InvalidColumn(f"column must be an integer in [0, {self._width}), got {column!r}")

    # Win detection

    def _find_run(self, player_id: Cell) -> List[Coord]:
        return find_winning_run(self._grid, player_id)

    def check_for_win(self) -> bool:
        """Check the whole board for four in a row owned by the current player."""
        debug.trace(f"Scanning board for a win by {self._current}", "engine")
        return bool(self._find_run(self._current.id))

    def winning_line(self) -> List[Coord]:
        """
        Get the cells of the winning run.

        Returns:
            Four (row, col) positions, or an empty list unless the game was won
        """
        winner_id = self._status.winner
        if winner_id is None:
            return []
        return self._find_run(winner_id)

    # Rendering

    def render(self) -> str:
        return render_board_ascii(self._grid)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (f"GameEngine(height={self._height}, width={self._width}, "
                f"current={self._current.id.name}, status={self._status.name})")


def create_game(player1_color: str, player2_color: str,
                height: int = DEFAULT_HEIGHT, width: int = DEFAULT_WIDTH) -> GameEngine:
    """
    Build a game for two players identified only by their colors.

    The first color moves first and gets id Cell.ONE.
    """
    return GameEngine(Player(Cell.ONE, player1_color), Player(Cell.TWO, player2_color),
                      height=height, width=width)
