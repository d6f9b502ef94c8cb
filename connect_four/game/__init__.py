"""
connect_four.game - Core game mechanics for Connect Four

This package contains the rules engine, the game session manager and the
Gymnasium environment wrapper.
"""

from connect_four.game.engine import GameEngine, create_game
from connect_four.game.session import ConnectFourGame
from connect_four.game.env import ConnectFourEnv

__all__ = ['GameEngine', 'create_game', 'ConnectFourGame', 'ConnectFourEnv']
