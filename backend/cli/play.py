#!/usr/bin/env python3
"""
Desktop window for the snake game.

Usage:
    python main.py
    python main.py --topology walled --tick-ms 150
    python cli/play.py --seed 7

Controls:
    Arrow keys / WASD   steer
    Space               pause / resume
    R, Enter or click   restart after game over
    Esc or close        quit
"""

import logging
import os
import sys

import pygame

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig  # noqa: E402
from main import SnakeGame  # noqa: E402
from services.board_renderer import BoardRenderer  # noqa: E402

logger = logging.getLogger(__name__)

FPS = 60

KEY_NAMES = {
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
    pygame.K_LEFT: "ArrowLeft",
    pygame.K_RIGHT: "ArrowRight",
    pygame.K_w: "w",
    pygame.K_s: "s",
    pygame.K_a: "a",
    pygame.K_d: "d",
    pygame.K_SPACE: " ",
}
RESTART_KEYS = {pygame.K_r, pygame.K_RETURN, pygame.K_KP_ENTER}


def frame_to_surface(image) -> pygame.Surface:
    """Convert a PIL frame into a pygame surface."""
    return pygame.image.fromstring(image.tobytes(), image.size, image.mode)


def handle_event(event, game: SnakeGame, renderer: BoardRenderer) -> bool:
    """
    Apply one pygame event to the game.

    Returns:
        False when the window should close.
    """
    if event.type == pygame.QUIT:
        return False

    if game.handle_event(event):
        return True

    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        if game.game_over and event.key in RESTART_KEYS:
            game.reset()
            return True
        key_name = KEY_NAMES.get(event.key)
        if key_name is not None:
            game.handle_key(key_name)

    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        if game.game_over and renderer.hit_restart(event.pos):
            game.reset()

    return True


def run_window(config: GameConfig) -> int:
    pygame.init()
    try:
        renderer = BoardRenderer(config.board_size, cell_size=config.cell_size)
        screen = pygame.display.set_mode(renderer.size)
        pygame.display.set_caption("Snake Game")
        clock = pygame.time.Clock()

        game = SnakeGame(config)
        game.start()

        running = True
        while running:
            for event in pygame.event.get():
                if not handle_event(event, game, renderer):
                    running = False
                    break

            screen.blit(frame_to_surface(game.render(renderer, elapsed_ms=pygame.time.get_ticks())), (0, 0))
            pygame.display.flip()
            clock.tick(FPS)

        game.stop()
        logger.info(f"Window closed with score {game.state.score}")
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    from main import main
    sys.exit(main())
