"""
GameState entity - a snapshot of the game at a point in time.
"""

from typing import Any, Dict, Optional

from .constants import Cell, Direction, DIRECTION_NAMES
from .snake import Snake


class GameState:
    """
    A snapshot of the game at a specific point in time.

    Attributes:
        snake: the Snake, head first
        direction: the direction the snake moved in on the last tick
        food: position of the regular food, None only on a full board
        gold_food: position of the gold food, if one is active
        score: number of regular foods eaten
        game_over: terminal flag, cleared only by a reset
        board_size: width and height of the square board
        tick_number: how many ticks have advanced the snake
    """

    def __init__(
        self,
        snake: Snake,
        direction: Direction,
        food: Optional[Cell],
        board_size: int,
        gold_food: Optional[Cell] = None,
        score: int = 0,
        game_over: bool = False,
        tick_number: int = 0
    ):
        self.snake = snake
        self.direction = direction
        self.food = food
        self.gold_food = gold_food
        self.score = score
        self.game_over = game_over
        self.board_size = board_size
        self.tick_number = tick_number

    def copy(self) -> "GameState":
        """Return an independent copy; the snake body is not shared."""
        return GameState(
            snake=self.snake.copy(),
            direction=self.direction,
            food=self.food,
            board_size=self.board_size,
            gold_food=self.gold_food,
            score=self.score,
            game_over=self.game_over,
            tick_number=self.tick_number
        )

    def without_gold_food(self) -> "GameState":
        state = self.copy()
        state.gold_food = None
        return state

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.board_size and 0 <= y < self.board_size

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-friendly view of the state."""
        return {
            "tick_number": self.tick_number,
            "snake": [list(cell) for cell in self.snake],
            "direction": DIRECTION_NAMES[self.direction],
            "food": list(self.food) if self.food is not None else None,
            "gold_food": list(self.gold_food) if self.gold_food is not None else None,
            "score": self.score,
            "game_over": self.game_over,
            "death_reason": self.snake.death_reason,
            "board_size": self.board_size,
        }

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        G = gold food
        H = snake head
        S = snake body
        Row 0 is printed first, matching the screen orientation.
        """
        board = [['.' for _ in range(self.board_size)] for _ in range(self.board_size)]

        if self.food is not None:
            fx, fy = self.food
            board[fy][fx] = 'F'
        if self.gold_food is not None:
            gx, gy = self.gold_food
            board[gy][gx] = 'G'

        for idx, (x, y) in enumerate(self.snake):
            board[y][x] = 'H' if idx == 0 else 'S'

        result = [f"{y:2d} {' '.join(row)}" for y, row in enumerate(board)]
        result.append("   " + " ".join(str(i % 10) for i in range(self.board_size)))
        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState tick={self.tick_number}, score={self.score}, "
            f"length={len(self.snake)}, food={self.food}, "
            f"gold_food={self.gold_food}, game_over={self.game_over}>"
        )
