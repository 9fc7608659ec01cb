"""
Snake entity for the game engine.
"""

from collections import deque
from typing import Iterable, Iterator, Optional, Tuple

from .constants import Cell


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
        death_reason: 'wall' or 'self' once the snake has crashed
    """

    def __init__(self, positions: Iterable[Tuple[int, int]]):
        self.positions = deque(tuple(p) for p in positions)
        if not self.positions:
            raise ValueError("A snake needs at least one segment.")
        self.death_reason: Optional[str] = None

    @property
    def head(self) -> Cell:
        """Return the head position (first element)."""
        return self.positions[0]

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.positions)

    def __contains__(self, cell) -> bool:
        if cell is None:
            return False
        return tuple(cell) in self.positions

    def __repr__(self) -> str:
        return f"<Snake length={len(self)} head={self.head}>"

    def copy(self) -> "Snake":
        clone = Snake(self.positions)
        clone.death_reason = self.death_reason
        return clone

    def push_head(self, cell: Cell) -> None:
        self.positions.appendleft(cell)

    def drop_tail(self) -> Cell:
        return self.positions.pop()

    def shrink(self, amount: int) -> int:
        """
        Remove up to `amount` trailing segments, never leaving fewer than one.

        Returns:
            The number of segments actually removed.
        """
        removed = max(0, min(amount, len(self.positions) - 1))
        for _ in range(removed):
            self.positions.pop()
        return removed
