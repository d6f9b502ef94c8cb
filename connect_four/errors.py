"""
errors.py - Exceptions raised by the Connect Four engine

A full column is not an error; it is reported as Outcome.COLUMN_FULL.
"""


class ConnectFourError(Exception):
    """Base class for every error the engine raises."""


class InvalidDimension(ConnectFourError, ValueError):
    """Board height or width is not a positive integer."""


class InvalidPlayers(ConnectFourError, ValueError):
    """The two players do not carry the distinct ids ONE and TWO."""


class InvalidColumn(ConnectFourError, ValueError):
    """Column index is not an integer in [0, width)."""


class InvalidCoordinate(ConnectFourError, IndexError):
    """A (row, col) lookup fell outside the grid."""


class GameAlreadyOver(ConnectFourError):
    """A placement was attempted after the game was won or tied."""


class InvariantViolated(ConnectFourError, RuntimeError):
    """Internal state is inconsistent, e.g. an occupied cell was about to be overwritten."""
