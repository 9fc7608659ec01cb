"""
Keyboard input for the snake.

Maps key names to directions and keeps the snake from reversing onto itself.
Two modes are supported:

  - COMMITTED: a key is rejected if it points opposite to the direction the
    snake last moved in. The last accepted key before a tick wins.
  - BUFFERED: accepted keys are queued and consumed one per tick, each checked
    against the previously queued direction, so quick presses between ticks
    are kept instead of overwritten.
"""

import logging
from collections import deque
from typing import Deque, Optional

from .constants import (
    DIRECTION_KEYS,
    DIRECTION_NAMES,
    Direction,
    InputMode,
    PAUSE_KEY,
    opposite,
)

logger = logging.getLogger(__name__)

BUFFER_SIZE = 3


class InputHandler:

    def __init__(
        self,
        initial_direction: Direction,
        mode: InputMode = InputMode.COMMITTED,
        pause_enabled: bool = True,
        buffer_size: int = BUFFER_SIZE
    ):
        self.mode = InputMode(mode)
        self.pause_enabled = pause_enabled
        self.paused = False
        self._committed = initial_direction
        self._pending: Optional[Direction] = None
        self._queue: Deque[Direction] = deque()
        self._buffer_size = buffer_size

    @property
    def committed_direction(self) -> Direction:
        return self._committed

    @property
    def pending_direction(self) -> Optional[Direction]:
        if self.mode == InputMode.BUFFERED:
            return self._queue[-1] if self._queue else None
        return self._pending

    def handle_key(self, key: str) -> bool:
        """
        Process a key press.

        Returns:
            True if the key changed the pending direction or the pause flag.
        """
        if key == PAUSE_KEY and self.pause_enabled:
            self.paused = not self.paused
            logger.info(f"Game {'paused' if self.paused else 'resumed'}")
            return True

        candidate = DIRECTION_KEYS.get(key)
        if candidate is None:
            logger.debug(f"Ignoring key {key!r}")
            return False

        if self.mode == InputMode.BUFFERED:
            return self._enqueue(candidate)

        if candidate == opposite(self._committed):
            logger.debug(f"Rejected reversal to {DIRECTION_NAMES[candidate]}")
            return False
        self._pending = candidate
        return True

    def _enqueue(self, candidate: Direction) -> bool:
        last = self._queue[-1] if self._queue else self._committed
        if candidate == last or candidate == opposite(last):
            return False
        if len(self._queue) >= self._buffer_size:
            logger.debug(f"Input buffer full, dropping {DIRECTION_NAMES[candidate]}")
            return False
        self._queue.append(candidate)
        return True

    def next_direction(self) -> Direction:
        """Consume input for one tick and return the direction to move in."""
        if self.mode == InputMode.BUFFERED:
            if self._queue:
                self._committed = self._queue.popleft()
        elif self._pending is not None:
            self._committed = self._pending
            self._pending = None
        return self._committed

    def reset(self, direction: Direction) -> None:
        self._committed = direction
        self._pending = None
        self._queue.clear()
        self.paused = False
