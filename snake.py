from __future__ import annotations

import argparse
import logging

import pygame

from controls import QUIT_KEYS, InputAdapter
from snake_core import GRID_SIZE, GameSnapshot, Phase, SnakeEngine


logger = logging.getLogger(__name__)

CELL_SIZE = 20
HUD_HEIGHT = 56
FOOTER_HEIGHT = 28
BOARD_SIZE = GRID_SIZE * CELL_SIZE
SCREEN_WIDTH = BOARD_SIZE
SCREEN_HEIGHT = HUD_HEIGHT + BOARD_SIZE + FOOTER_HEIGHT
TICK_INTERVALS_MS = (100, 120)
DEFAULT_TICK_MS = TICK_INTERVALS_MS[0]
FONT_NAME = "couriernew"

CYAN = pygame.Color(0, 255, 255)
MAGENTA = pygame.Color(255, 0, 255)
BACKGROUND = pygame.Color(5, 5, 5)
RESTART_BUTTON = pygame.Rect(0, 0, 160, 36)
RESTART_BUTTON.center = (SCREEN_WIDTH // 2, HUD_HEIGHT + BOARD_SIZE // 2 + 48)


class TickTimer:
    """Periodic tick event that is only armed while the game is running.

    Use as a context manager so the timer is cancelled on every way out.
    """

    def __init__(self, interval_ms: int = DEFAULT_TICK_MS, event_type: int = pygame.USEREVENT + 1):
        if interval_ms not in TICK_INTERVALS_MS:
            raise ValueError(f"tick interval must be one of {TICK_INTERVALS_MS}, got {interval_ms}")
        self.interval_ms = interval_ms
        self.event_type = event_type
        self.armed = False

    def sync(self, phase: Phase) -> None:
        if phase is Phase.RUNNING:
            self.arm()
        else:
            self.disarm()

    def arm(self) -> None:
        if not self.armed:
            pygame.time.set_timer(self.event_type, self.interval_ms)
            self.armed = True

    def disarm(self) -> None:
        if self.armed:
            pygame.time.set_timer(self.event_type, 0)
            self.armed = False

    def __enter__(self) -> "TickTimer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disarm()


def draw_block(surface: pygame.Surface, color: pygame.Color, position: tuple[int, int], border: int = 0) -> None:
    rect = pygame.Rect(position[0] * CELL_SIZE, HUD_HEIGHT + position[1] * CELL_SIZE, CELL_SIZE, CELL_SIZE)
    pygame.draw.rect(surface, color, rect)
    if border:
        pygame.draw.rect(surface, MAGENTA, rect, border)


def draw_grid(surface: pygame.Surface) -> None:
    line_color = pygame.Color(80, 0, 80)
    for i in range(GRID_SIZE + 1):
        offset = i * CELL_SIZE
        pygame.draw.line(surface, line_color, (offset, HUD_HEIGHT), (offset, HUD_HEIGHT + BOARD_SIZE))
        pygame.draw.line(surface, line_color, (0, HUD_HEIGHT + offset), (BOARD_SIZE, HUD_HEIGHT + offset))


def draw_snake(surface: pygame.Surface, snake: tuple[tuple[int, int], ...]) -> None:
    # Body first so the head stays on top.
    for part in snake[1:]:
        draw_block(surface, CYAN, part)
    draw_block(surface, pygame.Color("white"), snake[0], border=2)


def draw_hud(surface: pygame.Surface, font: pygame.font.Font, snap: GameSnapshot) -> None:
    score = font.render(f"SCORE {snap.score:04d}", True, CYAN)
    best = font.render(f"HIGH {snap.high_score:04d}", True, MAGENTA)
    surface.blit(score, (10, (HUD_HEIGHT - score.get_height()) // 2))
    surface.blit(best, (SCREEN_WIDTH - best.get_width() - 10, (HUD_HEIGHT - best.get_height()) // 2))


def draw_overlay(surface: pygame.Surface, font: pygame.font.Font, snap: GameSnapshot) -> None:
    if snap.phase is Phase.NOT_STARTED:
        lines = [("READY", pygame.Color("white")), ("press a direction key", CYAN)]
    elif snap.phase is Phase.PAUSED:
        lines = [("PAUSED", pygame.Color("white"))]
    elif snap.phase is Phase.GAME_OVER:
        lines = [
            ("GAME OVER", MAGENTA),
            (f"score: {snap.score}", pygame.Color("white")),
        ]
    else:
        return

    overlay = pygame.Surface((BOARD_SIZE, BOARD_SIZE), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, 190))
    surface.blit(overlay, (0, HUD_HEIGHT))
    center_y = HUD_HEIGHT + BOARD_SIZE // 2 - (len(lines) - 1) * 16
    if snap.phase is Phase.GAME_OVER:
        center_y -= 32
    for i, (text, color) in enumerate(lines):
        msg = font.render(text, True, color)
        rect = msg.get_rect(center=(SCREEN_WIDTH // 2, center_y + i * 32))
        surface.blit(msg, rect)

    if snap.phase is Phase.GAME_OVER:
        pygame.draw.rect(surface, CYAN, RESTART_BUTTON)
        label = font.render("RESTART", True, pygame.Color("black"))
        surface.blit(label, label.get_rect(center=RESTART_BUTTON.center))


def draw_frame(surface: pygame.Surface, font: pygame.font.Font, small_font: pygame.font.Font, snap: GameSnapshot) -> None:
    surface.fill(BACKGROUND)
    draw_hud(surface, font, snap)
    pygame.draw.rect(surface, pygame.Color("black"), pygame.Rect(0, HUD_HEIGHT, BOARD_SIZE, BOARD_SIZE))
    draw_grid(surface)
    draw_block(surface, MAGENTA, snap.food)
    draw_snake(surface, snap.snake)
    draw_overlay(surface, font, snap)
    hint = small_font.render("MOVE: WASD / ARROWS   PAUSE: SPACE   QUIT: ESC", True, CYAN)
    surface.blit(hint, hint.get_rect(center=(SCREEN_WIDTH // 2, HUD_HEIGHT + BOARD_SIZE + FOOTER_HEIGHT // 2)))


class SnakeApp:
    """Routes pygame events into the engine and keeps the tick timer in step with the phase."""

    def __init__(self, engine: SnakeEngine, timer: TickTimer):
        self.engine = engine
        self.timer = timer
        self.controls = InputAdapter(engine)
        self.latest = engine.snapshot()
        self._unsubscribe = engine.subscribe(self._on_snapshot)
        self.timer.sync(engine.phase)

    def _on_snapshot(self, snap: GameSnapshot) -> None:
        if snap.phase is not self.latest.phase:
            logger.debug("phase changed to %s", snap.phase.value)
        self.latest = snap
        self.timer.sync(snap.phase)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Return False once the player asked to quit."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key in QUIT_KEYS:
                return False
            self.controls.handle_key(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.engine.phase is Phase.GAME_OVER and RESTART_BUTTON.collidepoint(event.pos):
                self.engine.restart()
        elif event.type == self.timer.event_type:
            self.engine.tick()
        return True

    def close(self) -> None:
        self._unsubscribe()
        self.timer.disarm()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Snake.")
    parser.add_argument(
        "--tick-ms", type=int, choices=TICK_INTERVALS_MS, default=DEFAULT_TICK_MS, help="Milliseconds per snake step."
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for food placement.")
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging verbosity.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(name)s] %(message)s")

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    pygame.display.set_caption("SynthSnake")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(FONT_NAME, 28, bold=True)
    small_font = pygame.font.SysFont(FONT_NAME, 12)

    engine = SnakeEngine(seed=args.seed)
    logger.info("starting with tick=%dms seed=%s", args.tick_ms, args.seed)
    try:
        with TickTimer(args.tick_ms) as timer:
            app = SnakeApp(engine, timer)
            running = True
            while running:
                for event in pygame.event.get():
                    if not app.handle_event(event):
                        running = False
                        break
                draw_frame(screen, font, small_font, app.latest)
                pygame.display.flip()
                clock.tick(60)
            app.close()
    finally:
        logger.info("session high score: %d", engine.high_score)
        pygame.quit()


if __name__ == "__main__":
    main()
