from __future__ import annotations

import pygame

from snake_core import Direction, Phase, SnakeEngine


DIRECTIONS = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_w: Direction.UP,
    pygame.K_s: Direction.DOWN,
    pygame.K_a: Direction.LEFT,
    pygame.K_d: Direction.RIGHT,
}
PAUSE_KEYS = (pygame.K_SPACE,)
QUIT_KEYS = (pygame.K_ESCAPE, pygame.K_q)


class InputAdapter:
    """Forwards key presses to the engine.

    Holds no game state; the engine owns the pending direction.
    """

    def __init__(self, engine: SnakeEngine):
        self.engine = engine

    def handle_key(self, key: int) -> bool:
        """Return True when the key was consumed by the game."""
        if key in DIRECTIONS:
            self.engine.request_direction(DIRECTIONS[key])
            return True
        if key in PAUSE_KEYS:
            if self.engine.phase is Phase.GAME_OVER:
                self.engine.restart()
            else:
                self.engine.toggle_pause()
            return True
        return False
