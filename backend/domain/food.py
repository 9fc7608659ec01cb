"""
Food placement on the board.

Placement samples uniformly over the whole board and retries on occupied
cells. After a bounded number of misses it samples from the explicit set of
free cells instead, so a nearly full board still terminates.
"""

import random
from typing import Collection, Iterable, List, Optional

from .constants import Cell

REJECTION_ATTEMPTS = 64


def free_cells(board_size: int, blocked: Collection[Cell]) -> List[Cell]:
    """Return every cell of the board not in `blocked`, row by row."""
    return [
        (x, y)
        for y in range(board_size)
        for x in range(board_size)
        if (x, y) not in blocked
    ]


def random_free_cell(
    board_size: int,
    blocked: Iterable[Cell],
    rng: random.Random,
    attempts: int = REJECTION_ATTEMPTS
) -> Optional[Cell]:
    """
    Return a random cell (x, y) not in `blocked`, or None if the board is full.
    """
    blocked = set(blocked)
    for _ in range(attempts):
        cell = (rng.randrange(board_size), rng.randrange(board_size))
        if cell not in blocked:
            return cell

    candidates = free_cells(board_size, blocked)
    if not candidates:
        return None
    return rng.choice(candidates)


def spawn_food(
    snake: Iterable[Cell],
    board_size: int,
    rng: random.Random,
    avoid: Optional[Cell] = None
) -> Optional[Cell]:
    """Regular food avoids the snake and, when given, an active gold food."""
    blocked = set(snake)
    if avoid is not None:
        blocked.add(avoid)
    return random_free_cell(board_size, blocked, rng)


def spawn_gold_food(
    snake: Iterable[Cell],
    food: Optional[Cell],
    board_size: int,
    rng: random.Random
) -> Optional[Cell]:
    """Gold food avoids both the snake and the regular food."""
    blocked = set(snake)
    if food is not None:
        blocked.add(food)
    return random_free_cell(board_size, blocked, rng)
