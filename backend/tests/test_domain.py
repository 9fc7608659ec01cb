"""
Tests for the domain package - snake, game state, food placement and the
per-tick transitions for both board topologies.
"""

import random
import sys
import os

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import UP, DOWN, LEFT, RIGHT, BoardTopology, opposite
from domain.food import free_cells, random_free_cell, spawn_food, spawn_gold_food
from domain.game_state import GameState
from domain.snake import Snake
from domain.transitions import (
    TickRules,
    get_transition,
    step_walled,
    step_wraparound,
)


class ScriptedRandom:
    """
    Stand-in for random.Random that replays scripted values first.

    coords feed randrange (x then y for each sampled cell), rolls feed random().
    Once a script runs out the seeded fallback takes over.
    """

    def __init__(self, coords=(), rolls=()):
        self.coords = list(coords)
        self.rolls = list(rolls)
        self._fallback = random.Random(0)

    def randrange(self, *args):
        if self.coords:
            return self.coords.pop(0)
        return self._fallback.randrange(*args)

    def random(self):
        if self.rolls:
            return self.rolls.pop(0)
        return self._fallback.random()

    def choice(self, seq):
        return self._fallback.choice(seq)


def make_state(cells, direction=RIGHT, food=(0, 0), gold_food=None, score=0, board_size=20):
    return GameState(
        snake=Snake(cells),
        direction=direction,
        food=food,
        board_size=board_size,
        gold_food=gold_food,
        score=score
    )


class TestSnake:
    """Tests for the Snake class."""

    def test_snake_initialization(self):
        """Snake keeps positions head first and starts without a death reason."""
        snake = Snake([(5, 5), (4, 5), (3, 5)])
        assert list(snake.positions) == [(5, 5), (4, 5), (3, 5)]
        assert snake.head == (5, 5)
        assert snake.death_reason is None
        assert len(snake) == 3

    def test_empty_snake_rejected(self):
        """A snake needs at least one segment."""
        with pytest.raises(ValueError):
            Snake([])

    def test_contains_accepts_lists(self):
        """Membership works for tuples and lists alike."""
        snake = Snake([(1, 2)])
        assert (1, 2) in snake
        assert [1, 2] in snake
        assert (2, 1) not in snake

    def test_shrink_never_below_one(self):
        """Shrinking stops at a single segment."""
        snake = Snake([(3, 0), (2, 0), (1, 0)])
        assert snake.shrink(4) == 2
        assert list(snake) == [(3, 0)]
        assert snake.shrink(4) == 0
        assert len(snake) == 1

    def test_copy_is_independent(self):
        """Copies do not share the body deque."""
        snake = Snake([(1, 1)])
        clone = snake.copy()
        clone.push_head((2, 1))
        assert list(snake) == [(1, 1)]
        assert list(clone) == [(2, 1), (1, 1)]


class TestGameState:
    """Tests for the GameState class."""

    def test_copy_does_not_share_snake(self):
        """Mutating a copy leaves the original untouched."""
        state = make_state([(5, 5)], food=(1, 1))
        clone = state.copy()
        clone.snake.push_head((6, 5))
        clone.score = 3
        assert list(state.snake) == [(5, 5)]
        assert state.score == 0

    def test_without_gold_food(self):
        state = make_state([(5, 5)], gold_food=(2, 2))
        cleared = state.without_gold_food()
        assert cleared.gold_food is None
        assert state.gold_food == (2, 2)

    def test_print_board_marks_cells(self):
        """print_board shows head, body, food and gold food."""
        state = make_state([(1, 0), (0, 0)], food=(2, 0), gold_food=(0, 1), board_size=4)
        lines = state.print_board().split("\n")
        assert lines[0] == " 0 S H F ."
        assert lines[1] == " 1 G . . ."
        assert lines[-1] == "   0 1 2 3"

    def test_to_dict(self):
        state = make_state([(1, 0), (0, 0)], food=(2, 0), board_size=4)
        data = state.to_dict()
        assert data["snake"] == [[1, 0], [0, 0]]
        assert data["direction"] == "RIGHT"
        assert data["food"] == [2, 0]
        assert data["gold_food"] is None
        assert data["game_over"] is False

    def test_repr(self):
        state = make_state([(5, 5)], score=2)
        assert "score=2" in repr(state)
        assert "length=1" in repr(state)


class TestFoodPlacement:
    """Tests for food placement."""

    def test_never_returns_blocked_cell(self):
        """Sampled cells avoid every blocked cell."""
        rng = random.Random(42)
        blocked = {(x, y) for x in range(5) for y in range(5) if (x + y) % 2 == 0}
        for _ in range(200):
            cell = random_free_cell(5, blocked, rng)
            assert cell not in blocked
            assert 0 <= cell[0] < 5 and 0 <= cell[1] < 5

    def test_full_board_returns_none(self):
        """No free cell means no food."""
        blocked = free_cells(3, set())
        assert random_free_cell(3, blocked, random.Random(1)) is None

    def test_falls_back_to_free_cell_set(self):
        """When rejection sampling keeps missing, the free-cell set is used."""
        blocked = set(free_cells(4, set())) - {(3, 2)}
        rng = ScriptedRandom(coords=[0, 0] * 10)
        assert random_free_cell(4, blocked, rng, attempts=10) == (3, 2)

    def test_spawn_food_avoids_gold_food(self):
        snake = [(0, 0), (1, 0)]
        cell = spawn_food(snake, 2, random.Random(3), avoid=(0, 1))
        assert cell == (1, 1)

    def test_spawn_gold_food_avoids_snake_and_food(self):
        """Gold food lands on the only cell left by snake and food."""
        snake = [(0, 0), (1, 0)]
        assert spawn_gold_food(snake, (1, 1), 2, random.Random(5)) == (0, 1)


class TestTransitions:
    """Tests for the per-tick transition functions."""

    @pytest.mark.parametrize("step", [step_walled, step_wraparound])
    def test_eating_food_grows_and_scores(self, step):
        """[(8,8)] moving right onto food at (9,8) grows to two cells with score 1."""
        state = make_state([(8, 8)], direction=RIGHT, food=(9, 8))
        result = step(state, RIGHT, TickRules(), random.Random(1))

        assert list(result.state.snake) == [(9, 8), (8, 8)]
        assert result.state.score == 1
        assert result.state.food not in result.state.snake
        assert result.state.food is not None
        assert result.events.ate_food is True
        # Input state is untouched
        assert list(state.snake) == [(8, 8)]
        assert state.score == 0

    def test_wraparound_self_collision_across_edge(self):
        """Head wrapping onto the body ends the game and freezes the snake."""
        state = make_state([(0, 8), (19, 8)], direction=LEFT, food=(5, 5))
        result = step_wraparound(state, LEFT, TickRules(), random.Random(1))

        assert result.state.game_over is True
        assert result.events.collided is True
        assert result.state.snake.death_reason == "self"
        assert list(result.state.snake) == [(0, 8), (19, 8)]

    def test_walled_leaving_board_ends_game(self):
        state = make_state([(0, 8)], direction=LEFT, food=(5, 5))
        result = step_walled(state, LEFT, TickRules(), random.Random(1))

        assert result.state.game_over is True
        assert result.state.snake.death_reason == "wall"
        assert list(result.state.snake) == [(0, 8)]

    @pytest.mark.parametrize("start,direction,expected", [
        ((19, 5), RIGHT, (0, 5)),
        ((0, 5), LEFT, (19, 5)),
        ((5, 0), UP, (5, 19)),
        ((5, 19), DOWN, (5, 0)),
    ])
    def test_wraparound_re_enters_opposite_edge(self, start, direction, expected):
        state = make_state([start], direction=direction, food=(10, 10))
        result = step_wraparound(state, direction, TickRules(), random.Random(1))
        assert result.state.snake.head == expected
        assert result.state.game_over is False

    def test_plain_move_keeps_length(self):
        state = make_state([(5, 5), (4, 5), (3, 5)], food=(10, 10))
        result = step_walled(state, RIGHT, TickRules(), random.Random(1))
        assert list(result.state.snake) == [(6, 5), (5, 5), (4, 5)]
        assert result.state.direction == RIGHT
        assert result.state.tick_number == 1

    def test_moving_into_tail_cell_collides(self):
        """The current tail counts as occupied."""
        state = make_state([(5, 5), (5, 6), (4, 6), (4, 5)], direction=UP, food=(10, 10))
        result = step_walled(state, LEFT, TickRules(), random.Random(1))
        assert result.state.game_over is True
        assert result.state.snake.death_reason == "self"

    @pytest.mark.parametrize("step", [step_walled, step_wraparound])
    def test_game_over_state_is_frozen(self, step):
        state = make_state([(5, 5)], food=(10, 10))
        state.game_over = True
        result = step(state, RIGHT, TickRules(), random.Random(1))
        assert result.state is state
        assert list(result.state.snake) == [(5, 5)]

    def test_gold_food_spawns_above_score_threshold(self):
        """Eating food at score 20 -> 21 rolls for gold food."""
        state = make_state([(8, 8)], food=(9, 8), score=20)
        rng = ScriptedRandom(coords=[0, 0, 1, 1], rolls=[0.01])
        result = step_wraparound(state, RIGHT, TickRules(), rng)

        assert result.state.score == 21
        assert result.state.food == (0, 0)
        assert result.state.gold_food == (1, 1)
        assert result.events.gold_food_spawned is True

    def test_gold_food_never_on_snake_or_food(self):
        state = make_state([(8, 8)], food=(9, 8), score=20)
        rng = ScriptedRandom(coords=[0, 0, 9, 8, 8, 8, 0, 0, 4, 4], rolls=[0.0])
        result = step_wraparound(state, RIGHT, TickRules(), rng)
        assert result.state.food == (0, 0)
        assert result.state.gold_food == (4, 4)

    @pytest.mark.parametrize("score,roll,gold_food,enabled", [
        (19, 0.0, None, True),      # 20 is not above the threshold
        (20, 0.05, None, True),     # roll must be below the chance
        (20, 0.0, (3, 3), True),    # already active
        (20, 0.0, None, False),     # disabled
    ])
    def test_gold_food_not_spawned(self, score, roll, gold_food, enabled):
        state = make_state([(8, 8)], food=(9, 8), score=score, gold_food=gold_food)
        rng = ScriptedRandom(coords=[0, 0, 1, 1], rolls=[roll])
        result = step_wraparound(state, RIGHT, TickRules(gold_food_enabled=enabled), rng)
        assert result.events.gold_food_spawned is False
        assert result.state.gold_food == gold_food

    @pytest.mark.parametrize("length,expected", [(1, 1), (2, 1), (3, 1), (5, 2), (6, 3), (10, 7)])
    def test_gold_food_shrinks_snake(self, length, expected):
        """The grown snake loses up to four trailing segments, keeping at least one."""
        cells = [(10 - i, 5) for i in range(length)]
        state = make_state(cells, food=(0, 0), gold_food=(11, 5), score=25)
        result = step_walled(state, RIGHT, TickRules(), random.Random(1))

        assert len(result.state.snake) == expected
        assert result.state.snake.head == (11, 5)
        assert result.state.gold_food is None
        assert result.state.score == 25
        assert result.events.ate_gold_food is True

    @pytest.mark.parametrize("topology", list(BoardTopology))
    def test_random_play_invariants(self, topology):
        """Length, food and bounds invariants hold over a long random game."""
        step = get_transition(topology)
        rng = random.Random(1234)
        rules = TickRules(gold_food_min_score=0, gold_food_chance=0.5)
        state = make_state([(8, 8)], food=(2, 8), board_size=10)

        for _ in range(2000):
            if state.game_over:
                state = make_state([(4, 4)], food=(7, 7), board_size=10)
            choices = [d for d in (UP, DOWN, LEFT, RIGHT) if d != opposite(state.direction)]
            before = len(state.snake)
            result = step(state, rng.choice(choices), rules, rng)
            after = result.state

            if not after.game_over:
                assert before - 4 <= len(after.snake) <= before + 1
                assert len(after.snake) >= 1
                assert len(set(after.snake)) == len(after.snake)
                assert after.food not in after.snake
                if after.gold_food is not None:
                    assert after.gold_food not in after.snake
                    assert after.gold_food != after.food
                for cell in after.snake:
                    assert 0 <= cell[0] < 10 and 0 <= cell[1] < 10
            else:
                assert list(after.snake) == list(state.snake)
            state = after

    def test_get_transition_unknown_topology(self):
        with pytest.raises(ValueError, match="Unknown board topology"):
            get_transition("mobius")

    def test_get_transition_accepts_strings(self):
        assert get_transition("walled") is step_walled
        assert get_transition(BoardTopology.WRAPAROUND) is step_wraparound
