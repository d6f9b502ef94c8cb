"""
connect_four - Connect Four rules engine

This package provides the game-state and win-detection engine for Connect
Four, a session manager for playing consecutive games, a Gymnasium wrapper
for external drivers and a terminal interface for two players.
"""

# Version number
__version__ = '0.2.0'
