"""
cli.py - Command-line interface for Connect Four

This module lets two people play Connect Four at one terminal, inspect a
board position and benchmark the engine.
"""

import argparse
import random
import sys
from typing import List, Optional

import numpy as np

from connect_four.debug import debug, DebugLevel
from connect_four.errors import ConnectFourError
from connect_four.game.engine import GameEngine, create_game, find_winning_run
from connect_four.game.session import ConnectFourGame
from connect_four.utils import (DEFAULT_COLORS, DEFAULT_HEIGHT, DEFAULT_WIDTH, Cell, Outcome,
                                render_board_ascii)

QUIT = "q"
RESTART = "r"


def parse_position(position: str, height: int, width: int) -> np.ndarray:
    """
    Parse a comma-separated board position.

    Args:
        position: height*width values of 0, 1 or 2, top row first
        height: Number of rows
        width: Number of columns

    Returns:
        The board grid

    Raises:
        ValueError: wrong number of values or a value other than 0, 1, 2
    """
    values = [int(v) for v in position.split(',')]
    if len(values) != height * width:
        raise ValueError(f"Position string must have {height * width} values, got {len(values)}")
    if any(v not in (0, 1, 2) for v in values):
        raise ValueError("Position values must be 0 (empty), 1 or 2")
    return np.array(values, dtype=np.int8).reshape(height, width)


class SimpleCLI:
    """Simple command-line interface for Connect Four."""

    def __init__(self, args: argparse.Namespace = None):
        self.args = args
        self.game: Optional[ConnectFourGame] = None

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='Connect Four CLI')
        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play a two-player game')
        play_parser.add_argument('--p1-color', default=DEFAULT_COLORS[0], help='Color of player 1')
        play_parser.add_argument('--p2-color', default=DEFAULT_COLORS[1], help='Color of player 2')

        test_parser = subparsers.add_parser('test', help='Analyze a board position')
        test_parser.add_argument('--position', type=str, help='Board position to analyze')

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark performance')
        benchmark_parser.add_argument('--iterations', type=int, default=1000,
                                      help='Number of iterations for benchmarking')

        for sub in (play_parser, test_parser, benchmark_parser):
            sub.add_argument('--height', type=int, default=DEFAULT_HEIGHT, help='Board rows')
            sub.add_argument('--width', type=int, default=DEFAULT_WIDTH, help='Board columns')
            sub.add_argument('--debug', action='store_true', help='Enable debug mode')

        return parser

    def parse_args(self, argv: List[str] = None) -> None:
        """Parse command-line arguments."""
        self.args = self.build_parser().parse_args(argv)

        if getattr(self.args, 'debug', False):
            debug.configure(level=DebugLevel.DEBUG)

    def run(self) -> int:
        """Run the command selected by the parsed arguments."""
        if not self.args:
            self.parse_args()

        try:
            if self.args.command == 'play':
                self.play_game()
            elif self.args.command == 'test':
                self.test_position()
            elif self.args.command == 'benchmark':
                self.benchmark()
            else:
                print("Please specify a command. Use --help for options.")
                return 1
        except ConnectFourError as e:
            # Bad board size and the like
            print(f"Error: {e}")
            return 1
        return 0

    def play_game(self) -> None:
        """Play a Connect Four game between two people at this terminal."""
        self.game = ConnectFourGame(self.args.p1_color, self.args.p2_color,
                                    height=self.args.height, width=self.args.width)
        width = self.game.engine.width

        print("Starting a new Connect Four game!")
        print(f"Enter a column number (0-{width - 1}) to drop a piece.")
        print(f"Other commands: '{QUIT}' to quit, '{RESTART}' to start a new game.")
        print(self.game.render())

        while not self.game.is_game_over():
            player = self.game.get_current_player()
            move = self.get_human_move(f"Player {player} move: ")

            if move is None:
                continue
            if move == QUIT:
                print("Quitting game.")
                return
            if move == RESTART:
                self.game.new_game()
                print("New game started.")
                print(self.game.render())
                continue

            try:
                result = self.game.make_move(move)
            except ConnectFourError as e:
                print(e)
                continue

            if result.outcome is Outcome.COLUMN_FULL:
                print(f"Column {move} is full. Pick another one.")
                continue

            print(self.game.render())
            message = self.game.message_for(result)
            if message:
                print(message)
                line = self.game.engine.winning_line()
                if line:
                    print("Winning line: " + ", ".join(f"({r}, {c})" for r, c in line))

    def get_human_move(self, prompt: str):
        """
        Read one move from the terminal.

        Returns:
            Column index, QUIT or RESTART, or None if the input was not understood
        """
        try:
            user_input = input(prompt).strip().lower()
        except EOFError:
            return QUIT

        if user_input in (QUIT, RESTART):
            return user_input

        try:
            return int(user_input)
        except ValueError:
            print("Invalid input. Please enter a column number or a command.")
            return None

    def test_position(self) -> None:
        """Report wins, fullness and valid moves for a board position."""
        if not self.args.position:
            print("Please provide a position string with --position")
            return

        height, width = self.args.height, self.args.width
        try:
            grid = parse_position(self.args.position, height, width)
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return

        print("Loaded position:")
        print(render_board_ascii(grid))

        print("\nTesting win conditions:")
        has_win = False
        for player_id in (Cell.ONE, Cell.TWO):
            line = find_winning_run(grid, player_id)
            if line:
                print(f"Win for player {player_id.value} ({player_id}) at {line}")
                has_win = True
        if not has_win:
            print("No win detected for any player")

        empty_count = int(np.sum(grid == Cell.EMPTY.value))
        if empty_count == 0:
            print("Board is full")
        else:
            print(f"Empty spaces: {empty_count}")

        valid_columns = [col for col in range(width) if grid[0, col] == Cell.EMPTY.value]
        print(f"Valid moves: {valid_columns}")

    def benchmark(self) -> None:
        """Benchmark the performance of the engine."""
        iterations = max(self.args.iterations, 1)
        height, width = self.args.height, self.args.width
        print(f"Running benchmark with {iterations} iterations...")

        debug.start_timer("engine_init")
        for _ in range(iterations):
            create_game(*DEFAULT_COLORS, height=height, width=width)
        init_time = debug.end_timer("engine_init")
        print(f"Engine creation: {init_time:.6f} seconds total, "
              f"{init_time / iterations * 1000:.6f} ms per engine")

        engine = create_game(*DEFAULT_COLORS, height=height, width=width)
        moves_made = 0
        debug.start_timer("moves")
        for _ in range(iterations):
            result = engine.attempt_placement(random.randrange(width))
            if result.placed:
                moves_made += 1
            if engine.is_game_over():
                engine = create_game(*DEFAULT_COLORS, height=height, width=width)
        moves_time = debug.end_timer("moves")
        print(f"Making {moves_made} placements: {moves_time:.6f} seconds total, "
              f"{moves_time / max(moves_made, 1) * 1000:.6f} ms per placement")

        debug.start_timer("win_scan")
        for _ in range(iterations):
            engine.check_for_win()
        scan_time = debug.end_timer("win_scan")
        print(f"Performing {iterations} win scans: {scan_time:.6f} seconds total, "
              f"{scan_time / iterations * 1000:.6f} ms per scan")

        games = max(iterations // 10, 1)
        total_moves = 0
        debug.start_timer("game_simulation")
        for _ in range(games):
            total_moves += self.play_random_game(create_game(*DEFAULT_COLORS, height=height, width=width))
        simulation_time = debug.end_timer("game_simulation")
        print(f"Played {games} games with {total_moves} total moves: "
              f"{simulation_time:.6f} seconds total, "
              f"{simulation_time / games * 1000:.6f} ms per game")

    @staticmethod
    def play_random_game(engine: GameEngine) -> int:
        """Play random columns until the game ends; returns the number of pieces placed."""
        moves = 0
        while not engine.is_game_over():
            engine.attempt_placement(random.choice(engine.valid_columns()))
            moves += 1
        return moves


def main(argv: List[str] = None) -> int:
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    cli.parse_args(argv)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
