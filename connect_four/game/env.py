"""
env.py - Gymnasium environment wrapper for Connect Four

ConnectFourEnv exposes a ConnectFourGame through the Gymnasium
reset/step/render interface so external drivers and front ends can play a
game column by column and get observations, terminal flags and rendered
frames back. Each piece is drawn in its player's color.
"""

from typing import Dict, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from connect_four.debug import debug
from connect_four.errors import InvalidColumn
from connect_four.game.session import ConnectFourGame
from connect_four.utils import (DEFAULT_COLORS, DEFAULT_HEIGHT, DEFAULT_WIDTH, Cell, Outcome,
                                PlacementResult)

RGB = Tuple[int, int, int]

NAMED_COLORS: Dict[str, RGB] = {
    "red": (255, 0, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "green": (0, 128, 0),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
    "pink": (255, 192, 203),
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
}

BOARD_COLOR: RGB = (0, 0, 128)
EMPTY_COLOR: RGB = (0, 0, 0)


def color_to_rgb(color: str) -> RGB:
    """
    Convert a color name or "#rgb"/"#rrggbb" hex string to an RGB triple.

    Raises:
        ValueError: the color is not recognised
    """
    value = color.strip().lower()
    if value in NAMED_COLORS:
        return NAMED_COLORS[value]

    if value.startswith("#"):
        digits = value[1:]
        if len(digits) == 3:
            digits = "".join(d * 2 for d in digits)
        if len(digits) == 6:
            try:
                return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))
            except ValueError:
                pass

    raise ValueError(f"Unknown color: {color!r}")


class ConnectFourEnv(gym.Env):
    """
    Connect Four environment following the Gymnasium interface.

    Actions are column indices. Observations are the board grid with 0 for
    empty cells and 1/2 for the player ids. Full or out-of-range columns do
    not change the game; they come back with info["invalid_move"] set.
    """

    metadata = {'render_modes': ['ascii', 'human', 'rgb_array'], 'render_fps': 4}

    cell_size = 50

    def __init__(self, render_mode: Optional[str] = None,
                 height: int = DEFAULT_HEIGHT, width: int = DEFAULT_WIDTH,
                 player1_color: str = DEFAULT_COLORS[0],
                 player2_color: str = DEFAULT_COLORS[1]):
        """
        Initialize the Connect Four environment.

        Args:
            render_mode: One of metadata['render_modes'], or None
            height: Number of rows
            width: Number of columns
            player1_color: Display color for the first player
            player2_color: Display color for the second player
        """
        if render_mode is not None and render_mode not in self.metadata['render_modes']:
            raise ValueError(f"Unsupported render mode: {render_mode!r}")
        if render_mode == "rgb_array":
            # Fail now rather than on the first frame
            color_to_rgb(player1_color)
            color_to_rgb(player2_color)

        debug.debug("Initializing ConnectFourEnv", "env")
        self.game = ConnectFourGame(player1_color, player2_color, height=height, width=width)
        self.render_mode = render_mode

        self.action_space = spaces.Discrete(width)
        self.observation_space = spaces.Box(
            low=0, high=2, shape=(height, width), dtype=np.int8
        )

        self.reward_win = 1.0
        self.reward_draw = 0.0
        self.reward_invalid_move = -0.5
        self.reward_step = 0.0

        self._last_result: Optional[PlacementResult] = None

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        """
        Start a new game.

        Returns:
            Initial observation and info dictionary
        """
        super().reset(seed=seed)
        self.game.new_game()
        self._last_result = None
        debug.debug("Environment reset", "env")

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Drop the current player's piece into a column.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)

        Raises:
            GameAlreadyOver: the game finished and reset() was not called
        """
        try:
            result = self.game.make_move(action)
        except InvalidColumn as e:
            debug.warning(f"Invalid action {action!r}: {e}", "env")
            result = None

        if result is None or result.outcome is Outcome.COLUMN_FULL:
            info = self._get_info()
            # Describe this rejected step, not the last legal one
            info['outcome'] = result.outcome.name if result else 'INVALID_COLUMN'
            info['placed_at'] = None
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, False, info

        self._last_result = result
        reward = self.reward_step
        terminated = result.is_terminal
        if result.outcome is Outcome.WON:
            reward = self.reward_win
        elif result.outcome is Outcome.TIED:
            reward = self.reward_draw

        if terminated:
            debug.info(f"Game over: {self.game.engine.status.name}", "env")

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[Union[str, np.ndarray]]:
        """
        Render the current board according to render_mode.

        Returns:
            A string for "ascii", an RGB array for "rgb_array", else None
        """
        if self.render_mode is None:
            return None

        if self.render_mode == "ascii":
            return self.game.render()

        if self.render_mode == "human":
            print(self.game.render())
            return None

        return self._render_rgb()

    def _render_rgb(self) -> np.ndarray:
        engine = self.game.engine
        size = self.cell_size
        frame = np.zeros((engine.height * size, engine.width * size, 3), dtype=np.uint8)
        frame[:, :] = BOARD_COLOR

        # Disc mask shared by every cell
        yy, xx = np.mgrid[0:size, 0:size]
        center = size / 2
        radius = size * 0.4
        disc = (yy + 0.5 - center) ** 2 + (xx + 0.5 - center) ** 2 <= radius ** 2

        fills = {Cell.EMPTY: EMPTY_COLOR}
        for player in engine.players:
            fills[player.id] = color_to_rgb(player.color)

        grid = engine.get_state()
        for row in range(engine.height):
            for col in range(engine.width):
                cell = frame[row * size:(row + 1) * size, col * size:(col + 1) * size]
                cell[disc] = fills[Cell(int(grid[row, col]))]

        return frame

    def _get_observation(self) -> np.ndarray:
        return self.game.engine.get_state()

    def _get_info(self) -> Dict:
        engine = self.game.engine
        result = self._last_result
        return {
            'outcome': result.outcome.name if result else None,
            'placed_at': result.placed_at if result else None,
            'current_player': engine.current_player.id.value,
            'status': engine.status.name,
            'valid_moves': engine.valid_columns(),
            'winning_line': engine.winning_line(),
        }

    def close(self):
        """Nothing to release."""
