"""
Game constants for the snake game.
"""

from enum import Enum
from typing import Dict, Tuple

Cell = Tuple[int, int]
Direction = Tuple[int, int]

# Movement directions as unit vectors; y grows downward on screen
UP: Direction = (0, -1)
DOWN: Direction = (0, 1)
LEFT: Direction = (-1, 0)
RIGHT: Direction = (1, 0)
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

DIRECTION_NAMES: Dict[Direction, str] = {
    UP: "UP",
    DOWN: "DOWN",
    LEFT: "LEFT",
    RIGHT: "RIGHT",
}

# Key names as delivered by the window host
DIRECTION_KEYS: Dict[str, Direction] = {
    "ArrowUp": UP,
    "ArrowDown": DOWN,
    "ArrowLeft": LEFT,
    "ArrowRight": RIGHT,
    "w": UP,
    "s": DOWN,
    "a": LEFT,
    "d": RIGHT,
}
PAUSE_KEY = " "

# Game settings
BOARD_SIZE = 20
INITIAL_SNAKE: Tuple[Cell, ...] = ((8, 8),)
INITIAL_DIRECTION: Direction = RIGHT
TICK_MS = 200
GOLD_FOOD_SPAWN_CHANCE = 0.05
GOLD_FOOD_DURATION_MS = 6000
GOLD_FOOD_MIN_SCORE = 20
GOLD_FOOD_SHRINK = 4


class BoardTopology(str, Enum):
    """How the board treats a head that leaves the grid."""

    WALLED = "walled"
    WRAPAROUND = "wraparound"


class InputMode(str, Enum):
    """How key presses between ticks become the next direction."""

    COMMITTED = "committed"
    BUFFERED = "buffered"


def opposite(direction: Direction) -> Direction:
    return (-direction[0], -direction[1])
