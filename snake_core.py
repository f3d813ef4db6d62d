from __future__ import annotations

import os
import random
from collections import deque
from enum import Enum
from typing import Deque, List, NamedTuple, Optional, Tuple

import numpy as np


GRID_WIDTH = 30
GRID_HEIGHT = 20
CELL_SIZE = 32
TICKS_PER_SECOND = 8

Color = Tuple[int, int, int]

HEAD_COLOR: Color = (255, 128, 0)
BODY_COLOR: Color = (77, 77, 0)
FOOD_COLOR: Color = (0, 0, 255)
BACKGROUND_COLOR: Color = (0, 255, 0)
TEXT_COLOR: Color = (255, 255, 255)


class EntropyUnavailableError(RuntimeError):
    """Raised when the OS cannot provide a seed for the game's random source."""


def entropy_seed() -> int:
    try:
        raw = os.urandom(8)
    except NotImplementedError as exc:
        raise EntropyUnavailableError("Could not create RNG seed") from exc
    return int.from_bytes(raw, "little")


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    def inverse(self) -> Direction:
        return _INVERSE[self]

    @staticmethod
    def from_input_key(key: object) -> Optional[Direction]:
        """Map an abstract key name ("up", "down", ...) to a direction, or None."""
        if not isinstance(key, str):
            return None
        return _KEY_DIRECTIONS.get(key)


_INVERSE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_KEY_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


class GridPosition(NamedTuple):
    x: int
    y: int

    def move(self, direction: Direction, grid_width: int, grid_height: int) -> GridPosition:
        dx, dy = direction.value
        # Python's % is floored, so -1 wraps to the last column/row.
        return GridPosition((self.x + dx) % grid_width, (self.y + dy) % grid_height)

    @classmethod
    def random(cls, rng: random.Random, max_x: int, max_y: int) -> GridPosition:
        return cls(rng.randrange(max_x), rng.randrange(max_y))


class Cell(NamedTuple):
    pos: GridPosition
    color: Color


class Ate(Enum):
    """Outcome of the last Snake.advance() call."""

    NOTHING = "nothing"
    FOOD = "food"
    ITSELF = "itself"


class Food:
    def __init__(self, pos: GridPosition):
        self.pos = pos

    def relocate(self, rng: random.Random, grid_width: int, grid_height: int) -> None:
        # No check against the snake body.
        self.pos = GridPosition.random(rng, grid_width, grid_height)

    def render_hint(self) -> Cell:
        return Cell(self.pos, FOOD_COLOR)


class Snake:
    """Head, body segments and direction bookkeeping; moves one cell per advance()."""

    def __init__(self, pos: GridPosition, grid_width: int = GRID_WIDTH, grid_height: int = GRID_HEIGHT):
        # The first body segment sits one column left of the head, unwrapped.
        if not (1 <= pos.x < grid_width and 0 <= pos.y < grid_height):
            raise ValueError(f"start {tuple(pos)} leaves no room for the body on a {grid_width}x{grid_height} grid")
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.head = pos
        # Front of the deque is the segment right behind the head.
        self.body: Deque[GridPosition] = deque([GridPosition(pos.x - 1, pos.y)])
        self.direction = Direction.RIGHT
        self.last_update_direction = Direction.RIGHT
        self.next_direction: Optional[Direction] = None
        self.ate = Ate.NOTHING

    def __len__(self) -> int:
        return len(self.body)

    def set_pending_direction(self, requested: Direction) -> None:
        reverse = requested.inverse()
        if self.direction != self.last_update_direction and reverse != self.direction:
            # A turn already landed this tick; queue this one for the next tick.
            self.next_direction = requested
        elif reverse != self.last_update_direction:
            self.direction = requested

    def advance(self, food: Food) -> Ate:
        if self.next_direction is not None and self.direction == self.last_update_direction:
            # The committed turn can flip after queuing (Up, queue Up, Down), which
            # would leave a queued reversal of the move just made.
            if self.next_direction.inverse() != self.last_update_direction:
                self.direction = self.next_direction
            self.next_direction = None

        new_head = self.head.move(self.direction, self.grid_width, self.grid_height)
        self.body.appendleft(self.head)
        self.head = new_head

        if new_head in self.body:
            self.ate = Ate.ITSELF
        elif new_head == food.pos:
            self.ate = Ate.FOOD
        else:
            self.ate = Ate.NOTHING
            self.body.pop()

        self.last_update_direction = self.direction
        return self.ate

    def render_hints(self) -> List[Cell]:
        cells = [Cell(segment, BODY_COLOR) for segment in self.body]
        cells.append(Cell(self.head, HEAD_COLOR))
        return cells


class GameState:
    """Owns one game session: snake, food, random source, score and game-over flag."""

    def __init__(
        self,
        grid_width: int = GRID_WIDTH,
        grid_height: int = GRID_HEIGHT,
        seed: int | None = None,
        start: tuple[int, int] | None = None,
    ):
        if grid_width < 2 or grid_height < 1:
            raise ValueError(f"grid must be at least 2x1, got {grid_width}x{grid_height}")
        if start is None:
            start = (max(1, grid_width // 4), grid_height // 2)
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.start = GridPosition(*start)
        self.rng = random.Random(entropy_seed() if seed is None else seed)
        self.high_score = 0
        self.snake: Snake
        self.food: Food
        self.game_over = False
        self.score = 0
        self.reset()

    def reset(self) -> None:
        """Start a new game; the high score and the random stream carry over."""
        self.snake = Snake(self.start, self.grid_width, self.grid_height)
        self.food = Food(GridPosition.random(self.rng, self.grid_width, self.grid_height))
        self.game_over = False
        self.score = 0

    def tick(self) -> None:
        if self.game_over:
            return

        ate = self.snake.advance(self.food)
        if ate is Ate.FOOD:
            self.food.relocate(self.rng, self.grid_width, self.grid_height)
            self.score += 1
            self._update_high_score()
        elif ate is Ate.ITSELF:
            self.game_over = True
            self._update_high_score()

    def handle_input(self, key: object) -> None:
        direction = Direction.from_input_key(key)
        if direction is None:
            return
        self.snake.set_pending_direction(direction)

    def render_hints(self) -> List[Cell]:
        cells = self.snake.render_hints()
        cells.append(self.food.render_hint())
        return cells

    def encode_grid(self) -> np.ndarray:
        # One-hot channels: 0=head, 1=body, 2=food, 3=empty
        grid = np.zeros((4, self.grid_height, self.grid_width), dtype=np.float32)
        grid[3, :, :] = 1.0

        food_x, food_y = self.food.pos
        grid[2, food_y, food_x] = 1.0
        grid[3, food_y, food_x] = 0.0

        for x, y in self.snake.body:
            grid[1, y, x] = 1.0
            grid[3, y, x] = 0.0

        head_x, head_y = self.snake.head
        grid[0, head_y, head_x] = 1.0
        grid[3, head_y, head_x] = 0.0
        return grid

    def _update_high_score(self) -> None:
        if self.score > self.high_score:
            self.high_score = self.score
