from __future__ import annotations

import argparse
import sys

import pygame

from snake_core import (
    BACKGROUND_COLOR,
    CELL_SIZE,
    GRID_HEIGHT,
    GRID_WIDTH,
    TEXT_COLOR,
    TICKS_PER_SECOND,
    GameState,
    GridPosition,
)


FRAMES_PER_SECOND = 60
FONT_NAME = "arial"

KEY_NAMES = {
    pygame.K_UP: "up",
    pygame.K_DOWN: "down",
    pygame.K_LEFT: "left",
    pygame.K_RIGHT: "right",
}
QUIT_KEYS = (pygame.K_ESCAPE, pygame.K_q)
RESTART_KEYS = (pygame.K_SPACE, pygame.K_RETURN)


def translate_key(code: int) -> object:
    """Return the abstract key name for an arrow key, or the raw code otherwise."""
    return KEY_NAMES.get(code, code)


class TickScheduler:
    """Turns elapsed wall-clock time into a whole number of fixed logical ticks.

    There is no cap: after a stall every missed tick is still returned, so the
    caller runs them back to back in one frame. Ticks are never dropped.
    """

    def __init__(self, ticks_per_second: int = TICKS_PER_SECOND):
        if ticks_per_second <= 0:
            raise ValueError("ticks_per_second must be > 0")
        self.tick_ms = 1000.0 / ticks_per_second
        self.residual_ms = 0.0

    def due(self, elapsed_ms: float) -> int:
        self.residual_ms += elapsed_ms
        count = int(self.residual_ms // self.tick_ms)
        self.residual_ms -= count * self.tick_ms
        return count


def draw_block(surface: pygame.Surface, color: pygame.Color, position: GridPosition, cell_size: int) -> None:
    rect = pygame.Rect(position[0] * cell_size, position[1] * cell_size, cell_size, cell_size)
    pygame.draw.rect(surface, color, rect)


def draw_state(surface: pygame.Surface, font: pygame.font.Font, state: GameState, cell_size: int) -> None:
    width, height = surface.get_size()
    surface.fill(pygame.Color(*BACKGROUND_COLOR))
    for cell in state.render_hints():
        draw_block(surface, pygame.Color(*cell.color), cell.pos, cell_size)

    text_color = pygame.Color(*TEXT_COLOR)
    score_text = font.render(f"Score: {state.score}", True, text_color)
    high_text = font.render(f"High score: {state.high_score}", True, text_color)
    surface.blit(score_text, (10, 10))
    surface.blit(high_text, (10, 36))

    if state.game_over:
        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        surface.blit(overlay, (0, 0))
        msg = font.render("Game Over - press Space to restart or Esc to quit", True, text_color)
        rect = msg.get_rect(center=(width // 2, height // 2))
        surface.blit(msg, rect)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Snake on a wrap-around grid.")
    parser.add_argument("--grid-width", type=int, default=GRID_WIDTH, help="Grid width in cells.")
    parser.add_argument("--grid-height", type=int, default=GRID_HEIGHT, help="Grid height in cells.")
    parser.add_argument("--cell-size", type=int, default=CELL_SIZE, help="Cell size in pixels.")
    parser.add_argument("--tick-rate", type=int, default=TICKS_PER_SECOND, help="Logical ticks per second.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (defaults to OS entropy).")
    args = parser.parse_args(argv)
    for name in ("grid_width", "grid_height", "cell_size", "tick_rate"):
        if getattr(args, name) <= 0:
            parser.error(f"--{name.replace('_', '-')} must be > 0")
    return args


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    # Built before the window so a missing entropy source aborts startup.
    state = GameState(args.grid_width, args.grid_height, seed=args.seed)
    scheduler = TickScheduler(args.tick_rate)

    pygame.init()
    screen = pygame.display.set_mode((args.grid_width * args.cell_size, args.grid_height * args.cell_size))
    pygame.display.set_caption("Snake!")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(FONT_NAME, 24)

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit()
                sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key in QUIT_KEYS:
                    pygame.quit()
                    sys.exit()
                if state.game_over and event.key in RESTART_KEYS:
                    state.reset()
                    print(f"[snake] restart high_score={state.high_score}")
                    continue
                state.handle_input(translate_key(event.key))

        for _ in range(scheduler.due(clock.get_time())):
            was_over = state.game_over
            state.tick()
            if state.game_over and not was_over:
                print(f"[snake] game over score={state.score} high_score={state.high_score}")

        draw_state(screen, font, state, args.cell_size)
        pygame.display.flip()
        clock.tick(FRAMES_PER_SECOND)


if __name__ == "__main__":
    main()
