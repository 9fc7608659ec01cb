"""
Domain entities for the snake game engine.

This module contains the core game entities and rules that are independent
of the window host, timers, and rendering.
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES,
    BOARD_SIZE, INITIAL_SNAKE, INITIAL_DIRECTION,
    BoardTopology, InputMode, opposite,
)
from .snake import Snake
from .game_state import GameState
from .input_handler import InputHandler
from .transitions import TickRules, TickEvents, TickResult, get_transition

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES',
    'BOARD_SIZE', 'INITIAL_SNAKE', 'INITIAL_DIRECTION',
    'BoardTopology', 'InputMode', 'opposite',
    'Snake',
    'GameState',
    'InputHandler',
    'TickRules', 'TickEvents', 'TickResult', 'get_transition',
]
