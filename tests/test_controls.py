import pygame
import pytest

from controls import DIRECTIONS, InputAdapter
from snake_core import Direction, Phase, SnakeEngine


@pytest.mark.parametrize(
    "keys,direction",
    [
        ((pygame.K_UP, pygame.K_w), Direction.UP),
        ((pygame.K_DOWN, pygame.K_s), Direction.DOWN),
        ((pygame.K_LEFT, pygame.K_a), Direction.LEFT),
        ((pygame.K_RIGHT, pygame.K_d), Direction.RIGHT),
    ],
)
def test_both_key_sets_map_to_the_same_direction(keys, direction):
    for key in keys:
        assert DIRECTIONS[key] is direction


def test_direction_key_starts_game():
    engine = SnakeEngine(seed=0)
    controls = InputAdapter(engine)
    assert controls.handle_key(pygame.K_a) is True
    assert engine.phase is Phase.RUNNING
    assert engine.pending_direction is Direction.LEFT


def test_space_toggles_pause():
    engine = SnakeEngine(seed=0, phase=Phase.RUNNING)
    controls = InputAdapter(engine)
    assert controls.handle_key(pygame.K_SPACE) is True
    assert engine.phase is Phase.PAUSED
    controls.handle_key(pygame.K_SPACE)
    assert engine.phase is Phase.RUNNING


def test_space_before_start_is_ignored():
    engine = SnakeEngine(seed=0)
    controls = InputAdapter(engine)
    assert controls.handle_key(pygame.K_SPACE) is True
    assert engine.phase is Phase.NOT_STARTED


def test_space_restarts_after_game_over():
    engine = SnakeEngine(seed=0, snake=[(0, 0)], food=(5, 5), phase=Phase.RUNNING)
    engine.tick()
    assert engine.phase is Phase.GAME_OVER

    InputAdapter(engine).handle_key(pygame.K_SPACE)
    assert engine.phase is Phase.RUNNING
    assert engine.snapshot().snake == ((10, 10),)


def test_other_keys_pass_through():
    engine = SnakeEngine(seed=0)
    assert InputAdapter(engine).handle_key(pygame.K_x) is False
    assert engine.phase is Phase.NOT_STARTED
