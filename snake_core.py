from __future__ import annotations

import enum
import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, List, Optional, Tuple

import numpy as np


logger = logging.getLogger(__name__)

GRID_SIZE = 20
FOOD_REWARD = 10
INITIAL_SNAKE: Tuple[Tuple[int, int], ...] = ((GRID_SIZE // 2, GRID_SIZE // 2),)
INITIAL_FOOD = (15, 5)

Cell = Tuple[int, int]


class Direction(enum.Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Direction":
        return Direction((-self.dx, -self.dy))


INITIAL_DIRECTION = Direction.UP


class Phase(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the game handed to the presentation layer."""

    snake: Tuple[Cell, ...]
    food: Cell
    score: int
    high_score: int
    phase: Phase
    direction: Direction
    grid_size: int = GRID_SIZE

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def to_dict(self) -> dict:
        return {
            "snake": [{"x": x, "y": y} for x, y in self.snake],
            "food": {"x": self.food[0], "y": self.food[1]},
            "score": self.score,
            "high_score": self.high_score,
            "phase": self.phase.value,
            "direction": self.direction.name.lower(),
            "grid_size": self.grid_size,
        }

    def to_grid(self) -> np.ndarray:
        # One-hot channels: 0=head, 1=body (excluding head), 2=food, 3=empty
        grid = np.zeros((4, self.grid_size, self.grid_size), dtype=np.float32)
        grid[3, :, :] = 1.0

        food_x, food_y = self.food
        grid[2, food_y, food_x] = 1.0
        grid[3, food_y, food_x] = 0.0

        head_x, head_y = self.snake[0]
        grid[0, head_y, head_x] = 1.0
        grid[3, head_y, head_x] = 0.0
        for part in self.snake[1:]:
            grid[1, part[1], part[0]] = 1.0
            grid[3, part[1], part[0]] = 0.0
        return grid


SnapshotListener = Callable[[GameSnapshot], None]


class SnakeEngine:
    """Tick-driven snake simulation.

    Input never moves the snake directly: ``request_direction`` only fills the
    pending-direction slot, which ``tick`` commits at the start of each step.
    Every operation is total; calls that make no sense for the current phase
    are ignored.
    """

    def __init__(
        self,
        grid_size: int = GRID_SIZE,
        seed: int | None = None,
        snake: Iterable[Cell] | None = None,
        direction: Direction = INITIAL_DIRECTION,
        food: Cell | None = None,
        phase: Phase = Phase.NOT_STARTED,
    ):
        self.grid_size = grid_size
        self.rng = random.Random(seed)
        self.snake: Deque[Cell] = deque(self._validated_snake(snake if snake is not None else self._start_cells()))
        self.direction = direction
        self.pending_direction: Optional[Direction] = None
        self.score = 0
        self.high_score = 0
        self.phase = phase
        self._listeners: List[SnapshotListener] = []
        if food is None:
            food = INITIAL_FOOD
            if food in self.snake or not self._in_bounds(food):
                food = self._spawn_food()
        if not self._in_bounds(food) or food in self.snake:
            raise ValueError(f"food {food} must be an empty cell on the grid")
        self.food: Cell = food

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener`` for snapshots; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            snake=tuple(self.snake),
            food=self.food,
            score=self.score,
            high_score=self.high_score,
            phase=self.phase,
            direction=self.direction,
            grid_size=self.grid_size,
        )

    def request_direction(self, direction: Direction) -> None:
        if self.phase is Phase.GAME_OVER:
            return
        started = False
        if self.phase is Phase.NOT_STARTED:
            self._set_phase(Phase.RUNNING)
            started = True
        if direction is self.direction.opposite:
            logger.debug("dropped reversal %s while heading %s", direction.name, self.direction.name)
        else:
            self.pending_direction = direction
        if started:
            self._emit()

    def tick(self) -> GameSnapshot:
        if self.phase is not Phase.RUNNING:
            return self.snapshot()

        if self.pending_direction is not None:
            self.direction = self.pending_direction
            self.pending_direction = None

        head_x, head_y = self.snake[0]
        new_head = (head_x + self.direction.dx, head_y + self.direction.dy)

        if not self._in_bounds(new_head):
            self._game_over("wall", new_head)
            return self._emit()
        # The tail has not moved yet, so stepping onto it counts as a collision.
        if new_head in self.snake:
            self._game_over("self", new_head)
            return self._emit()

        self.snake.appendleft(new_head)
        if new_head == self.food:
            self.score += FOOD_REWARD
            if self.score > self.high_score:
                self.high_score = self.score
            self.food = self._spawn_food()
            logger.debug("ate food at %s, score=%d, next food at %s", new_head, self.score, self.food)
        else:
            self.snake.pop()

        return self._emit()

    def toggle_pause(self) -> None:
        if self.phase is Phase.RUNNING:
            self._set_phase(Phase.PAUSED)
        elif self.phase is Phase.PAUSED:
            self._set_phase(Phase.RUNNING)
        else:
            return
        self._emit()

    def restart(self) -> None:
        self.snake = deque(self._start_cells())
        self.direction = INITIAL_DIRECTION
        self.pending_direction = None
        self.score = 0
        self.food = self._spawn_food()
        self._set_phase(Phase.RUNNING)
        self._emit()

    # Internal helpers.
    def _start_cells(self) -> Tuple[Cell, ...]:
        # Same as INITIAL_SNAKE on the default grid.
        return ((self.grid_size // 2, self.grid_size // 2),)

    def _set_phase(self, phase: Phase) -> None:
        if phase is not self.phase:
            logger.debug("phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def _game_over(self, reason: str, cell: Cell) -> None:
        self._set_phase(Phase.GAME_OVER)
        logger.info(
            "game over (%s collision at %s): score=%d high_score=%d length=%d",
            reason,
            cell,
            self.score,
            self.high_score,
            len(self.snake),
        )

    def _emit(self) -> GameSnapshot:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
        return snap

    def _in_bounds(self, pos: Cell) -> bool:
        x, y = pos
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    def _spawn_food(self) -> Cell:
        occupied = set(self.snake)
        while True:
            cell = (self.rng.randrange(self.grid_size), self.rng.randrange(self.grid_size))
            if cell not in occupied:
                return cell

    def _validated_snake(self, cells: Iterable[Cell]) -> List[Cell]:
        body = [tuple(cell) for cell in cells]
        if not body:
            raise ValueError("snake must have at least one cell")
        if len(set(body)) != len(body):
            raise ValueError("snake cells must be unique")
        for cell in body:
            if not self._in_bounds(cell):
                raise ValueError(f"snake cell {cell} is outside the {self.grid_size}x{self.grid_size} grid")
        for a, b in zip(body, body[1:]):
            if abs(a[0] - b[0]) + abs(a[1] - b[1]) != 1:
                raise ValueError(f"snake cells {a} and {b} are not adjacent")
        return body
