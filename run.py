#!/usr/bin/env python3
"""
run.py - Main entry point for the Connect Four engine
"""

import argparse
import sys

from connect_four.debug import debug
from connect_four.interfaces.cli import SimpleCLI


def configure_debug(args):
    """Configure logging from args.debug_level and args.log_file."""
    debug.set_from_string(args.debug_level)
    if args.log_file:
        debug.configure(log_file=args.log_file)


def handle_game_command(args) -> int:
    """Hand the 'game' component arguments to the CLI."""
    cli = SimpleCLI()
    cli.parse_args(args.game_args)
    return cli.run()


def main(argv=None) -> int:
    """Main entry point for the Connect Four engine."""
    parser = argparse.ArgumentParser(
        description='Connect Four',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
    Examples:

    # Play Connect Four with two human players
    python run.py game play

    # Pick the player colors and a larger board
    python run.py game play --p1-color '#ff8800' --p2-color green --height 7 --width 9

    # Analyze a board position (6x7, top row first)
    python run.py game test --position 0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,1,1,1,1,2,2,2

    # Benchmark the engine with 5000 iterations
    python run.py game benchmark --iterations 5000

    # Log engine decisions to a file
    python run.py --debug_level debug --log_file game.log game play
    """
    )
    parser.add_argument('--debug_level',
        choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
        default='warning',
        help='Set debug level: none (silent), error, warning, info, debug, trace (most verbose)')
    parser.add_argument('--log_file',
        type=str,
        help='Also write log records to this file')

    subparsers = parser.add_subparsers(dest='component', help='Component to run')
    game_parser = subparsers.add_parser('game',
        help='Run the Connect Four game',
        description='Play Connect Four, analyze a position or benchmark the engine')
    game_parser.add_argument('game_args',
        nargs=argparse.REMAINDER,
        help='Game command and its options: play, test, benchmark')

    args = parser.parse_args(argv)
    configure_debug(args)

    if args.component == 'game':
        return handle_game_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
