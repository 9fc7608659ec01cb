"""
Per-tick state transitions.

Each board topology has its own transition function with the signature
``(state, direction, rules, rng) -> TickResult``. The input state is never
mutated; callers swap in ``result.state``. ``TRANSITIONS`` maps a
``BoardTopology`` to its function.
"""

import random
from dataclasses import dataclass, field
from typing import Callable, Dict

from .constants import (
    BoardTopology,
    Cell,
    Direction,
    GOLD_FOOD_MIN_SCORE,
    GOLD_FOOD_SHRINK,
    GOLD_FOOD_SPAWN_CHANCE,
)
from .food import spawn_food, spawn_gold_food
from .game_state import GameState


@dataclass(frozen=True)
class TickRules:
    """Gold-food tuning shared by both topologies."""

    gold_food_enabled: bool = True
    gold_food_chance: float = GOLD_FOOD_SPAWN_CHANCE
    gold_food_min_score: int = GOLD_FOOD_MIN_SCORE
    gold_food_shrink: int = GOLD_FOOD_SHRINK


@dataclass
class TickEvents:
    ate_food: bool = False
    ate_gold_food: bool = False
    gold_food_spawned: bool = False
    collided: bool = False


@dataclass
class TickResult:
    state: GameState
    events: TickEvents = field(default_factory=TickEvents)


Transition = Callable[[GameState, Direction, TickRules, random.Random], TickResult]


def _next_head(state: GameState, direction: Direction) -> Cell:
    hx, hy = state.snake.head
    return (hx + direction[0], hy + direction[1])


def _crash(state: GameState, reason: str) -> TickResult:
    crashed = state.copy()
    crashed.snake.death_reason = reason
    crashed.game_over = True
    return TickResult(crashed, TickEvents(collided=True))


def _advance(
    state: GameState,
    new_head: Cell,
    direction: Direction,
    rules: TickRules,
    rng: random.Random
) -> TickResult:
    """
    Move the snake onto an in-bounds `new_head`:
      1) Crash if the head lands on any current segment (tail included)
      2) Grow onto regular food, re-spawn it, maybe spawn gold food
      3) Shrink on gold food
      4) Otherwise drop the tail
    """
    if new_head in state.snake:
        return _crash(state, "self")

    nxt = state.copy()
    nxt.direction = direction
    nxt.tick_number += 1
    nxt.snake.push_head(new_head)
    events = TickEvents()

    if new_head == state.food:
        events.ate_food = True
        nxt.score += 1
        nxt.food = spawn_food(nxt.snake, nxt.board_size, rng, avoid=nxt.gold_food)

        if (rules.gold_food_enabled
                and nxt.score > rules.gold_food_min_score
                and nxt.gold_food is None
                and rng.random() < rules.gold_food_chance):
            nxt.gold_food = spawn_gold_food(nxt.snake, nxt.food, nxt.board_size, rng)
            events.gold_food_spawned = nxt.gold_food is not None

    elif state.gold_food is not None and new_head == state.gold_food:
        events.ate_gold_food = True
        nxt.snake.shrink(rules.gold_food_shrink)
        nxt.gold_food = None

    else:
        nxt.snake.drop_tail()

    return TickResult(nxt, events)


def step_walled(
    state: GameState,
    direction: Direction,
    rules: TickRules,
    rng: random.Random
) -> TickResult:
    """Leaving the board ends the game."""
    if state.game_over:
        return TickResult(state)

    new_head = _next_head(state, direction)
    if not state.in_bounds(new_head):
        return _crash(state, "wall")
    return _advance(state, new_head, direction, rules, rng)


def step_wraparound(
    state: GameState,
    direction: Direction,
    rules: TickRules,
    rng: random.Random
) -> TickResult:
    """Leaving one edge re-enters from the opposite edge."""
    if state.game_over:
        return TickResult(state)

    x, y = _next_head(state, direction)
    new_head = (x % state.board_size, y % state.board_size)
    return _advance(state, new_head, direction, rules, rng)


TRANSITIONS: Dict[BoardTopology, Transition] = {
    BoardTopology.WALLED: step_walled,
    BoardTopology.WRAPAROUND: step_wraparound,
}


def get_transition(topology: BoardTopology) -> Transition:
    """
    Get the transition function for a board topology.

    Raises:
        ValueError: If the topology is not recognized.
    """
    try:
        return TRANSITIONS[BoardTopology(topology)]
    except (KeyError, ValueError):
        available = ", ".join(t.value for t in BoardTopology)
        raise ValueError(
            f"Unknown board topology '{topology}'. Available topologies: {available}"
        ) from None
