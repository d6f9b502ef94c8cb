"""
utils.py - Constants, enumerations and board helpers for Connect Four

This module holds the default board configuration, the cell/result/outcome
enumerations shared by the engine and its front ends, and small helpers for
bounds checking, run construction and ASCII rendering.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple

import numpy as np

# Game constants
DEFAULT_HEIGHT = 6
DEFAULT_WIDTH = 7
CONNECT_N = 4  # Number of pieces in a row to win (fixed)
DEFAULT_COLORS = ("red", "blue")

Coord = Tuple[int, int]


class Cell(Enum):
    """Occupancy of a grid cell. ONE and TWO double as player ids."""
    EMPTY = 0
    ONE = 1    # First player
    TWO = 2    # Second player

    def other(self) -> 'Cell':
        """Get the opposing player id."""
        if self is Cell.ONE:
            return Cell.TWO
        elif self is Cell.TWO:
            return Cell.ONE
        return Cell.EMPTY

    def is_empty(self) -> bool:
        return self is Cell.EMPTY

    def __str__(self):
        if self is Cell.EMPTY:
            return "."
        elif self is Cell.ONE:
            return "X"
        else:
            return "O"


@dataclass(frozen=True)
class Player:
    """A participant: a stable id plus an opaque display color."""
    id: Cell
    color: str

    def __str__(self):
        return f"{self.color} ({self.id})"


class GameResult(Enum):
    """Status of a game."""
    IN_PROGRESS = auto()
    PLAYER_ONE_WIN = auto()
    PLAYER_TWO_WIN = auto()
    TIED = auto()

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self is not GameResult.IN_PROGRESS

    @property
    def winner(self) -> Optional[Cell]:
        """Id of the winning player, None unless the game was won."""
        if self is GameResult.PLAYER_ONE_WIN:
            return Cell.ONE
        elif self is GameResult.PLAYER_TWO_WIN:
            return Cell.TWO
        return None

    @classmethod
    def won_by(cls, player_id: Cell) -> 'GameResult':
        if player_id is Cell.ONE:
            return cls.PLAYER_ONE_WIN
        elif player_id is Cell.TWO:
            return cls.PLAYER_TWO_WIN
        raise ValueError(f"No win result for {player_id!r}")


class Outcome(Enum):
    """Classification of a single placement attempt."""
    CONTINUED = auto()
    WON = auto()
    TIED = auto()
    COLUMN_FULL = auto()


@dataclass(frozen=True)
class PlacementResult:
    """What happened when a piece was dropped into a column."""
    outcome: Outcome
    placed_at: Optional[Coord] = None
    player: Optional[Player] = None  # the mover, when a piece was placed
    winner: Optional[Cell] = None

    @property
    def placed(self) -> bool:
        return self.placed_at is not None

    @property
    def is_terminal(self) -> bool:
        return self.outcome in (Outcome.WON, Outcome.TIED)


class Direction(Enum):
    """Directions a winning run can extend from its first cell."""
    HORIZONTAL = auto()     # rightward
    VERTICAL = auto()       # downward
    DIAGONAL_DOWN_RIGHT = auto()
    DIAGONAL_DOWN_LEFT = auto()


# Direction vectors (row, col) for each direction, in scan order
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_DOWN_RIGHT: (1, 1),
    Direction.DIAGONAL_DOWN_LEFT: (1, -1)
}


def is_valid_position(row: int, col: int, height: int, width: int) -> bool:
    """
    Check if a position is within the board boundaries.

    Args:
        row: Row index
        col: Column index
        height: Number of rows on the board
        width: Number of columns on the board

    Returns:
        True if position is valid, False otherwise
    """
    return 0 <= row < height and 0 <= col < width


def run_from(row: int, col: int, direction: Direction) -> List[Coord]:
    """
    Build the CONNECT_N coordinates starting at (row, col) in a direction.

    The coordinates are not bounds checked.
    """
    dr, dc = DIRECTION_VECTORS[direction]
    return [(row + dr * i, col + dc * i) for i in range(CONNECT_N)]


def is_integer(value) -> bool:
    """True for Python and numpy integers, excluding bool."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render a board grid as ASCII art.

    Args:
        grid: 2D array of cell values (0 empty, 1 and 2 for the players)

    Returns:
        ASCII representation of the board with column numbers underneath
    """
    height, width = grid.shape
    border = "+" + "-" * (width * 2 + 1) + "+"
    result = [border]

    for row in range(height):
        cells = " ".join(str(Cell(int(value))) for value in grid[row])
        result.append(f"| {cells} |")

    result.append(border)
    # Columns above 9 only show their last digit
    numbers = " ".join(str(col % 10) for col in range(width))
    result.append(f"  {numbers}  ")

    return "\n".join(result)
