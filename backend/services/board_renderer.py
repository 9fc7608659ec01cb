"""
Board rendering for the snake game.

Rendering is split in two steps:
1. A pure mapping from GameState to a grid of cell kinds / colors (numpy)
2. Rasterising that grid into a frame using PIL (Pillow), which the window
   host blits to the screen

The frame layout:
- Title and score line above the board
- Board with a thick border and 1px gaps between cells
- Snake body and a darker head
- Blinking food and gold food
- Pause banner, and a game-over line with a Restart button below the board
"""

import logging
import math
from enum import Enum
from typing import Dict, List, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from domain.game_state import GameState

logger = logging.getLogger(__name__)

CELL_SIZE = 20  # Size of each grid cell in pixels
CELL_GAP = 1
BOARD_BORDER = 8
MARGIN = 20
HEADER_HEIGHT = 70
FOOTER_HEIGHT = 100
BUTTON_SIZE = (120, 36)
BLINK_PERIOD_MS = 1000
BLINK_MIN_OPACITY = 0.3


class ColorScheme:
    """Color configuration for the board and overlays"""

    SNAKE = "#008000"
    FOOD = "#FF0000"
    GOLD_FOOD = "#FFD700"
    EMPTY = "#EEEEEE"

    # Frame
    BACKGROUND = "#F0F0F0"
    GRID_GAP = "#333333"
    BORDER = "#000000"

    # UI
    TEXT = "#000000"
    GAME_OVER_TEXT = "#FF0000"
    PAUSED_TEXT = "#FFC800"
    BUTTON = "#FFFFFF"
    BUTTON_BORDER = "#767676"


class CellKind(str, Enum):
    EMPTY = "empty"
    SNAKE_HEAD = "snake_head"
    SNAKE_BODY = "snake_body"
    FOOD = "food"
    GOLD_FOOD = "gold_food"


FOOD_KINDS = (CellKind.FOOD, CellKind.GOLD_FOOD)


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple"""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def darken_color(hex_color: str, amount: float = 0.3) -> Tuple[int, int, int]:
    """Darken a hex color by a given amount"""
    r, g, b = hex_to_rgb(hex_color)
    r = max(0, int(r * (1 - amount)))
    g = max(0, int(g * (1 - amount)))
    b = max(0, int(b * (1 - amount)))
    return (r, g, b)


def cell_colors(scheme=ColorScheme) -> Dict[CellKind, Tuple[int, int, int]]:
    return {
        CellKind.EMPTY: hex_to_rgb(scheme.EMPTY),
        CellKind.SNAKE_HEAD: darken_color(scheme.SNAKE),
        CellKind.SNAKE_BODY: hex_to_rgb(scheme.SNAKE),
        CellKind.FOOD: hex_to_rgb(scheme.FOOD),
        CellKind.GOLD_FOOD: hex_to_rgb(scheme.GOLD_FOOD),
    }


def cell_grid(state: GameState) -> List[List[CellKind]]:
    """
    Map the state to a board_size x board_size grid indexed [y][x].

    Snake cells win over gold food, gold food wins over regular food.
    """
    size = state.board_size
    grid = [[CellKind.EMPTY for _ in range(size)] for _ in range(size)]

    if state.food is not None:
        fx, fy = state.food
        grid[fy][fx] = CellKind.FOOD
    if state.gold_food is not None:
        gx, gy = state.gold_food
        grid[gy][gx] = CellKind.GOLD_FOOD

    for idx, (x, y) in enumerate(state.snake):
        grid[y][x] = CellKind.SNAKE_HEAD if idx == 0 else CellKind.SNAKE_BODY

    return grid


def color_grid(state: GameState, scheme=ColorScheme, food_alpha: float = 1.0) -> np.ndarray:
    """
    Return a (board_size, board_size, 3) uint8 array of cell colors, indexed [y, x].

    Food and gold food cells are blended toward the empty color by food_alpha.
    """
    colors = cell_colors(scheme)
    grid = cell_grid(state)
    rgb = np.array([[colors[kind] for kind in row] for row in grid], dtype=np.float32)

    if food_alpha < 1.0:
        is_food = np.array([[kind in FOOD_KINDS for kind in row] for row in grid], dtype=bool)
        empty = np.array(colors[CellKind.EMPTY], dtype=np.float32)
        rgb[is_food] = rgb[is_food] * food_alpha + empty * (1 - food_alpha)

    return np.rint(rgb).astype(np.uint8)


def food_opacity(elapsed_ms: int) -> float:
    """Opacity of blinking food: 1.0 at the start of each cycle, 0.3 halfway."""
    phase = (elapsed_ms % BLINK_PERIOD_MS) / BLINK_PERIOD_MS
    wave = (1 + math.cos(2 * math.pi * phase)) / 2
    return BLINK_MIN_OPACITY + (1 - BLINK_MIN_OPACITY) * wave


def _load_font(size: int):
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        logger.debug("DejaVuSans.ttf not found, falling back to the default bitmap font")
        return ImageFont.load_default()


class BoardRenderer:
    """Rasterise game states into PIL frames"""

    def __init__(
        self,
        board_size: int,
        cell_size: int = CELL_SIZE,
        gap: int = CELL_GAP,
        scheme=ColorScheme
    ):
        self.board_size = board_size
        self.cell_size = cell_size
        self.gap = gap
        self.scheme = scheme

        self.board_pixels = board_size * cell_size + (board_size + 1) * gap
        self.width = self.board_pixels + 2 * (MARGIN + BOARD_BORDER)
        self.height = HEADER_HEIGHT + self.board_pixels + 2 * BOARD_BORDER + FOOTER_HEIGHT
        self.board_x = MARGIN + BOARD_BORDER
        self.board_y = HEADER_HEIGHT + BOARD_BORDER

        self.font_large = _load_font(28)
        self.font_medium = _load_font(18)
        self.font_small = _load_font(16)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def cell_box(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """Pixel bounds (x0, y0, x1, y1) of a board cell, inclusive."""
        x0 = self.board_x + self.gap + x * (self.cell_size + self.gap)
        y0 = self.board_y + self.gap + y * (self.cell_size + self.gap)
        return (x0, y0, x0 + self.cell_size - 1, y0 + self.cell_size - 1)

    def restart_button_box(self) -> Tuple[int, int, int, int]:
        """Pixel bounds of the Restart button shown after game over."""
        w, h = BUTTON_SIZE
        x0 = (self.width - w) // 2
        y0 = self.board_y + self.board_pixels + BOARD_BORDER + 50
        return (x0, y0, x0 + w, y0 + h)

    def hit_restart(self, pos: Tuple[int, int]) -> bool:
        x0, y0, x1, y1 = self.restart_button_box()
        return x0 <= pos[0] <= x1 and y0 <= pos[1] <= y1

    def render_frame(self, state: GameState, elapsed_ms: int = 0, paused: bool = False) -> Image.Image:
        """Render a single frame of the game"""
        if state.board_size != self.board_size:
            raise ValueError(
                f"Renderer built for a {self.board_size} board, got {state.board_size}"
            )

        img = Image.new('RGB', self.size, hex_to_rgb(self.scheme.BACKGROUND))
        draw = ImageDraw.Draw(img)

        self._draw_centered(draw, "Snake Game", 8, self.font_large, self.scheme.TEXT)
        self._draw_centered(draw, f"Score: {state.score}", 44, self.font_medium, self.scheme.TEXT)

        self._draw_board(img, draw, state, elapsed_ms)

        footer_y = self.board_y + self.board_pixels + BOARD_BORDER + 10
        if state.game_over:
            self._draw_centered(draw, "Game Over!", footer_y, self.font_large, self.scheme.GAME_OVER_TEXT)
            self._draw_button(draw, "Restart")
        elif paused:
            self._draw_centered(draw, "PAUSED", footer_y, self.font_large, self.scheme.PAUSED_TEXT)

        return img

    def _draw_board(self, img: Image.Image, draw: ImageDraw.ImageDraw, state: GameState, elapsed_ms: int):
        """Draw the bordered board with every cell"""
        left = self.board_x
        top = self.board_y
        draw.rectangle(
            [left - BOARD_BORDER, top - BOARD_BORDER,
             left + self.board_pixels + BOARD_BORDER - 1, top + self.board_pixels + BOARD_BORDER - 1],
            fill=hex_to_rgb(self.scheme.BORDER)
        )
        colors = color_grid(state, self.scheme, food_alpha=food_opacity(elapsed_ms))
        img.paste(self._board_image(colors), (left, top))

    def _board_image(self, colors: np.ndarray) -> Image.Image:
        """Scale a [y, x] color grid up to board pixels, with gap lines between cells."""
        board = np.empty((self.board_pixels, self.board_pixels, 3), dtype=np.uint8)
        board[:] = hex_to_rgb(self.scheme.GRID_GAP)

        cells = colors.repeat(self.cell_size, axis=0).repeat(self.cell_size, axis=1)
        pitch = self.cell_size + self.gap
        offsets = (
            self.gap
            + np.arange(self.board_size)[:, None] * pitch
            + np.arange(self.cell_size)[None, :]
        ).ravel()
        board[np.ix_(offsets, offsets)] = cells
        return Image.fromarray(board)

    def _draw_button(self, draw: ImageDraw.ImageDraw, label: str):
        box = self.restart_button_box()
        draw.rectangle(
            box,
            fill=hex_to_rgb(self.scheme.BUTTON),
            outline=hex_to_rgb(self.scheme.BUTTON_BORDER),
            width=2
        )
        bbox = draw.textbbox((0, 0), label, font=self.font_small)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        draw.text(
            ((box[0] + box[2]) // 2 - text_width // 2, (box[1] + box[3]) // 2 - text_height // 2 - bbox[1]),
            label,
            fill=hex_to_rgb(self.scheme.TEXT),
            font=self.font_small
        )

    def _draw_centered(self, draw: ImageDraw.ImageDraw, text: str, y: int, font, color: str):
        bbox = draw.textbbox((0, 0), text, font=font)
        text_width = bbox[2] - bbox[0]
        draw.text((self.width // 2 - text_width // 2, y), text, fill=hex_to_rgb(color), font=font)
