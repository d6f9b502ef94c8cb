"""
session.py - Game session management for Connect Four

A ConnectFourGame keeps two players and a board size across games and owns
the GameEngine for the game currently being played. Starting a new game
discards the old engine.
"""

from typing import List, Optional

from connect_four.debug import debug
from connect_four.game.engine import GameEngine, create_game
from connect_four.utils import (DEFAULT_COLORS, DEFAULT_HEIGHT, DEFAULT_WIDTH, Outcome,
                                PlacementResult, Player)


class ConnectFourGame:
    """
    High-level Connect Four game manager.

    This class is the entry point for front ends: it creates games, forwards
    moves and turns placement results into the messages shown to players.
    """

    def __init__(self, player1_color: str = DEFAULT_COLORS[0],
                 player2_color: str = DEFAULT_COLORS[1],
                 height: int = DEFAULT_HEIGHT, width: int = DEFAULT_WIDTH):
        self.player1_color = player1_color
        self.player2_color = player2_color
        self.height = height
        self.width = width
        self.games_started = 0
        self.engine: Optional[GameEngine] = None
        self.new_game()

    def new_game(self) -> GameEngine:
        """Throw away the current game and start a fresh one."""
        self.engine = create_game(self.player1_color, self.player2_color,
                                  height=self.height, width=self.width)
        self.games_started += 1
        debug.debug(f"Started game #{self.games_started}", "session")
        return self.engine

    def make_move(self, column: int) -> PlacementResult:
        """
        Make a move in the current game.

        Raises:
            InvalidColumn: column out of range
            GameAlreadyOver: the current game has finished
        """
        result = self.engine.attempt_placement(column)
        debug.trace(f"Move in column {column}: {result.outcome.name}", "session")
        return result

    @staticmethod
    def message_for(result: PlacementResult) -> Optional[str]:
        """
        The announcement for a finished game.

        Returns:
            "Tie!" or "The <color> player won!", or None if the game goes on
        """
        if result.outcome is Outcome.TIED:
            return "Tie!"
        if result.outcome is Outcome.WON:
            return f"The {result.player.color} player won!"
        return None

    def is_game_over(self) -> bool:
        return self.engine.is_game_over()

    def get_winner(self) -> Optional[Player]:
        return self.engine.winner

    def get_current_player(self) -> Player:
        return self.engine.current_player

    def get_valid_moves(self) -> List[int]:
        return self.engine.valid_columns()

    def render(self) -> str:
        return self.engine.render()
