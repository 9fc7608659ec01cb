"""
Game configuration.

All tunables live on a GameConfig instance that is passed into the game,
renderer, and window. Values come from dataclass defaults, then SNAKE_*
environment variables (a .env file is honoured via python-dotenv), then
command-line overrides.
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Tuple

from dotenv import load_dotenv

from domain.constants import (
    BOARD_SIZE,
    BoardTopology,
    Cell,
    Direction,
    GOLD_FOOD_DURATION_MS,
    GOLD_FOOD_MIN_SCORE,
    GOLD_FOOD_SHRINK,
    GOLD_FOOD_SPAWN_CHANCE,
    INITIAL_DIRECTION,
    INITIAL_SNAKE,
    InputMode,
    TICK_MS,
    VALID_MOVES,
)
from domain.transitions import TickRules

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """Raised when a configuration value is missing or out of range."""


@dataclass(frozen=True)
class GameConfig:
    board_size: int = BOARD_SIZE
    tick_ms: int = TICK_MS
    topology: BoardTopology = BoardTopology.WRAPAROUND
    gold_food_enabled: bool = True
    gold_food_chance: float = GOLD_FOOD_SPAWN_CHANCE
    gold_food_duration_ms: int = GOLD_FOOD_DURATION_MS
    gold_food_min_score: int = GOLD_FOOD_MIN_SCORE
    gold_food_shrink: int = GOLD_FOOD_SHRINK
    input_mode: InputMode = InputMode.COMMITTED
    pause_enabled: bool = True
    initial_snake: Tuple[Cell, ...] = INITIAL_SNAKE
    initial_direction: Direction = INITIAL_DIRECTION
    seed: Optional[int] = None
    cell_size: int = 20

    def __post_init__(self):
        try:
            object.__setattr__(self, "topology", BoardTopology(self.topology))
        except ValueError:
            available = ", ".join(t.value for t in BoardTopology)
            raise ConfigError(f"Unknown topology '{self.topology}'. Available: {available}") from None
        try:
            object.__setattr__(self, "input_mode", InputMode(self.input_mode))
        except ValueError:
            available = ", ".join(m.value for m in InputMode)
            raise ConfigError(f"Unknown input mode '{self.input_mode}'. Available: {available}") from None

        object.__setattr__(self, "initial_snake", tuple(tuple(cell) for cell in self.initial_snake))
        object.__setattr__(self, "initial_direction", tuple(self.initial_direction))
        self.validate()

    def validate(self) -> None:
        if self.board_size < 2:
            raise ConfigError(f"board_size must be at least 2, got {self.board_size}")
        if self.tick_ms <= 0:
            raise ConfigError(f"tick_ms must be positive, got {self.tick_ms}")
        if self.gold_food_duration_ms <= 0:
            raise ConfigError(f"gold_food_duration_ms must be positive, got {self.gold_food_duration_ms}")
        if not 0.0 <= self.gold_food_chance <= 1.0:
            raise ConfigError(f"gold_food_chance must be within [0, 1], got {self.gold_food_chance}")
        if self.gold_food_min_score < 0:
            raise ConfigError(f"gold_food_min_score must be non-negative, got {self.gold_food_min_score}")
        if self.gold_food_shrink < 0:
            raise ConfigError(f"gold_food_shrink must be non-negative, got {self.gold_food_shrink}")
        if self.cell_size < 1:
            raise ConfigError(f"cell_size must be positive, got {self.cell_size}")
        if self.initial_direction not in VALID_MOVES:
            raise ConfigError(f"initial_direction must be a unit vector, got {self.initial_direction}")
        if not self.initial_snake:
            raise ConfigError("initial_snake needs at least one cell")
        if len(set(self.initial_snake)) != len(self.initial_snake):
            raise ConfigError(f"initial_snake has duplicate cells: {self.initial_snake}")
        for x, y in self.initial_snake:
            if not (0 <= x < self.board_size and 0 <= y < self.board_size):
                raise ConfigError(f"initial_snake cell {(x, y)} is outside a {self.board_size} board")

    def rules(self) -> TickRules:
        return TickRules(
            gold_food_enabled=self.gold_food_enabled,
            gold_food_chance=self.gold_food_chance,
            gold_food_min_score=self.gold_food_min_score,
            gold_food_shrink=self.gold_food_shrink
        )

    def with_overrides(self, **overrides: Any) -> "GameConfig":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GameConfig":
        """
        Build a config from SNAKE_* environment variables.

        Args:
            environ: mapping to read instead of os.environ (no .env loading then)

        Raises:
            ConfigError: If a variable cannot be parsed or is out of range.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        values = {
            "board_size": _env_int(environ, "SNAKE_BOARD_SIZE"),
            "tick_ms": _env_int(environ, "SNAKE_TICK_MS"),
            "topology": environ.get("SNAKE_TOPOLOGY") or None,
            "gold_food_enabled": _env_bool(environ, "SNAKE_GOLD_FOOD"),
            "gold_food_chance": _env_float(environ, "SNAKE_GOLD_FOOD_CHANCE"),
            "gold_food_duration_ms": _env_int(environ, "SNAKE_GOLD_FOOD_DURATION_MS"),
            "gold_food_min_score": _env_int(environ, "SNAKE_GOLD_FOOD_MIN_SCORE"),
            "gold_food_shrink": _env_int(environ, "SNAKE_GOLD_FOOD_SHRINK"),
            "input_mode": environ.get("SNAKE_INPUT_MODE") or None,
            "pause_enabled": _env_bool(environ, "SNAKE_PAUSE_ENABLED"),
            "seed": _env_int(environ, "SNAKE_SEED"),
            "cell_size": _env_int(environ, "SNAKE_CELL_SIZE"),
        }
        config = cls().with_overrides(**values)
        logger.debug(f"Loaded config from environment: {config}")
        return config


def _env_int(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(environ: Mapping[str, str], name: str) -> Optional[float]:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(environ: Mapping[str, str], name: str) -> Optional[bool]:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean (on/off), got {raw!r}")
