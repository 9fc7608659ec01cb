import argparse
import logging
import os
import random
import sys
from typing import Callable, Optional

import pygame
from dotenv import load_dotenv

from config import ConfigError, GameConfig
from domain.constants import BoardTopology, InputMode
from domain.food import spawn_food
from domain.game_state import GameState
from domain.input_handler import InputHandler
from domain.snake import Snake
from domain.transitions import get_transition
from services.board_renderer import BoardRenderer

logger = logging.getLogger(__name__)

TICK_EVENT = pygame.USEREVENT + 1
GOLD_FOOD_EXPIRE_EVENT = pygame.USEREVENT + 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SnakeGame:
    """
    Manages:
      - The current GameState
      - Keyboard input
      - The tick timer and the gold-food countdown
      - Reset

    Both timers are pygame event timers. TICK_EVENT and GOLD_FOOD_EXPIRE_EVENT
    come back through the window's event queue and are passed to handle_event.
    set_timer and clock default to pygame.time and can be swapped out in tests.
    """
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        set_timer: Callable = pygame.time.set_timer,
        clock: Callable[[], int] = pygame.time.get_ticks
    ):
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.rules = self.config.rules()
        self.transition = get_transition(self.config.topology)
        self.input = InputHandler(
            self.config.initial_direction,
            mode=self.config.input_mode,
            pause_enabled=self.config.pause_enabled
        )

        self._set_timer = set_timer
        self._clock = clock
        self._running = False
        # Each armed countdown gets a new generation; queued events from older ones are ignored
        self._gold_food_generation = 0
        self._gold_food_deadline: Optional[int] = None
        self._gold_food_remaining: Optional[int] = None
        self.state = self._initial_state()

    def _initial_state(self) -> GameState:
        snake = Snake(self.config.initial_snake)
        return GameState(
            snake=snake,
            direction=self.config.initial_direction,
            food=spawn_food(snake, self.config.board_size, self.rng),
            board_size=self.config.board_size
        )

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def paused(self) -> bool:
        return self.input.paused

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        """Arm the repeating tick timer."""
        if self._running or self.state.game_over:
            return
        self._set_timer(TICK_EVENT, self.config.tick_ms)
        self._running = True
        logger.info(
            f"Game started: {self.config.board_size}x{self.config.board_size} "
            f"{self.config.topology.value} board, tick every {self.config.tick_ms}ms"
        )

    def stop(self):
        if self._running:
            self._set_timer(TICK_EVENT, 0)
            self._running = False

    def handle_key(self, key: str) -> bool:
        if self.state.game_over:
            return False
        was_paused = self.input.paused
        handled = self.input.handle_key(key)
        if self.input.paused and not was_paused:
            self._suspend_gold_food_timer()
        elif was_paused and not self.input.paused:
            self._resume_gold_food_timer()
        return handled

    def handle_event(self, event) -> bool:
        """
        Dispatch a timer event.

        Returns:
            True if the event was one of the game's timer events.
        """
        if event.type == TICK_EVENT:
            if self._running:
                self.tick()
            return True
        if event.type == GOLD_FOOD_EXPIRE_EVENT:
            self.expire_gold_food(getattr(event, "generation", None))
            return True
        return False

    def tick(self):
        """
        Execute one tick:
          1) Do nothing while paused or after game over
          2) Consume the pending direction
          3) Run the topology's transition
          4) Arm or cancel the gold-food countdown
          5) Stop ticking on game over
        """
        if self.state.game_over or self.input.paused:
            return

        direction = self.input.next_direction()
        result = self.transition(self.state, direction, self.rules, self.rng)
        self.state = result.state
        events = result.events

        if events.gold_food_spawned:
            self._arm_gold_food_timer(self.config.gold_food_duration_ms)
            logger.info(f"Gold food spawned at {self.state.gold_food}")
        elif events.ate_gold_food:
            self._cancel_gold_food_timer()
            logger.info(f"Gold food eaten, snake length now {len(self.state.snake)}")

        if events.collided:
            self.stop()
            logger.info(
                f"Game over ({self.state.snake.death_reason}) after {self.state.tick_number} ticks, "
                f"score {self.state.score}"
            )

    def expire_gold_food(self, generation: Optional[int] = None):
        """
        Clear the active gold food when its countdown runs out.

        An event from a countdown that was cancelled or replaced carries an
        older generation and is ignored.
        """
        if generation is not None and generation != self._gold_food_generation:
            logger.debug(f"Ignoring stale gold food expiry (generation {generation})")
            return
        self._gold_food_deadline = None
        self._gold_food_remaining = None
        if self.state.gold_food is None:
            return
        cell = self.state.gold_food
        self.state = self.state.without_gold_food()
        logger.info(f"Gold food at {cell} expired")

    def _arm_gold_food_timer(self, duration_ms: int):
        self._cancel_gold_food_timer()
        self._gold_food_deadline = self._clock() + duration_ms
        event = pygame.event.Event(GOLD_FOOD_EXPIRE_EVENT, generation=self._gold_food_generation)
        self._set_timer(event, duration_ms, loops=1)

    def _cancel_gold_food_timer(self):
        if self._gold_food_deadline is not None:
            self._set_timer(GOLD_FOOD_EXPIRE_EVENT, 0)
        self._gold_food_generation += 1
        self._gold_food_deadline = None
        self._gold_food_remaining = None

    def _suspend_gold_food_timer(self):
        if self._gold_food_deadline is None:
            return
        remaining = max(0, self._gold_food_deadline - self._clock())
        self._cancel_gold_food_timer()
        self._gold_food_remaining = remaining
        logger.debug(f"Gold food countdown paused with {remaining}ms left")

    def _resume_gold_food_timer(self):
        remaining = self._gold_food_remaining
        if remaining is None or self.state.gold_food is None:
            self._gold_food_remaining = None
            return
        # set_timer treats 0 as cancel, so an exhausted countdown fires on the next millisecond
        self._arm_gold_food_timer(max(1, remaining))

    def reset(self):
        """
        Replace the whole game with a fresh one and start ticking again.
        Pending timers are cancelled before the new state is swapped in.
        """
        self.stop()
        self._cancel_gold_food_timer()
        self.input.reset(self.config.initial_direction)
        self.state = self._initial_state()
        logger.info("Game reset")
        self.start()

    def render(self, renderer: BoardRenderer, elapsed_ms: int = 0):
        return renderer.render_frame(self.state, elapsed_ms=elapsed_ms, paused=self.paused)

    def print_board(self):
        """
        Prints a visual representation of the current board state.
        """
        print("\n" + self.state.print_board() + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Play Snake in a desktop window."
    )
    parser.add_argument("--board-size", type=int, default=None,
                        help="Width and height of the square board (default 20)")
    parser.add_argument("--tick-ms", type=int, default=None,
                        help="Milliseconds between snake moves (default 200)")
    parser.add_argument("--topology", choices=[t.value for t in BoardTopology], default=None,
                        help="walled: leaving the board ends the game; wraparound: edges connect")
    parser.add_argument("--no-gold-food", dest="gold_food_enabled", action="store_false", default=None,
                        help="Disable the gold food power-down")
    parser.add_argument("--input-mode", choices=[m.value for m in InputMode], default=None,
                        help="committed: last key before a tick wins; buffered: queue key presses")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for food placement")
    parser.add_argument("--cell-size", type=int, default=None,
                        help="Cell size in pixels (default 20)")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None,
                        help="Logging level (default from LOG_LEVEL or INFO)")
    return parser


def load_config(args: argparse.Namespace) -> GameConfig:
    """Environment first, then command-line overrides."""
    return GameConfig.from_env().with_overrides(
        board_size=args.board_size,
        tick_ms=args.tick_ms,
        topology=args.topology,
        gold_food_enabled=args.gold_food_enabled,
        input_mode=args.input_mode,
        seed=args.seed,
        cell_size=args.cell_size
    )


def main(argv=None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    level = (args.log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    if level not in LOG_LEVELS:
        parser.error(f"invalid LOG_LEVEL {level!r} (choose from {', '.join(LOG_LEVELS)})")
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    # Imported here, cli.play imports this module
    from cli.play import run_window

    return run_window(config)


if __name__ == "__main__":
    sys.exit(main())
