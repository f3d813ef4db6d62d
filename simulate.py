from __future__ import annotations

import argparse
import random
from dataclasses import dataclass, field
from typing import Callable, List

import numpy as np

from snake_core import GRID_HEIGHT, GRID_WIDTH, GameState


# The last entry is not a direction; the game is expected to ignore it.
POLICY_KEYS = ("up", "down", "left", "right", "space")


@dataclass
class SimulationSummary:
    scores: List[int] = field(default_factory=list)
    ticks: List[int] = field(default_factory=list)
    collisions: int = 0
    high_score: int = 0
    head_visits: np.ndarray | None = None

    @property
    def mean_score(self) -> float:
        return float(np.mean(self.scores)) if self.scores else 0.0

    @property
    def coverage(self) -> float:
        """Fraction of grid cells the head passed through at least once."""
        if self.head_visits is None or self.head_visits.size == 0:
            return 0.0
        return float(np.count_nonzero(self.head_visits)) / self.head_visits.size


def run_simulation(
    episodes: int,
    max_ticks: int,
    turn_prob: float = 0.2,
    seed: int = 0,
    grid_width: int = GRID_WIDTH,
    grid_height: int = GRID_HEIGHT,
    log_interval: int = 0,
    log: Callable[[str], None] = print,
) -> SimulationSummary:
    """Play `episodes` games with a random key-pressing policy, reusing one GameState."""
    if episodes <= 0 or max_ticks <= 0:
        raise ValueError("episodes and max_ticks must be > 0")
    if not 0.0 <= turn_prob <= 1.0:
        raise ValueError("turn_prob must be within [0, 1]")

    policy_rng = random.Random(seed)
    state = GameState(grid_width, grid_height, seed=seed)
    summary = SimulationSummary(head_visits=np.zeros((grid_height, grid_width), dtype=np.float32))

    for episode in range(episodes):
        if episode > 0:
            state.reset()
        summary.head_visits += state.encode_grid()[0]

        ticks = 0
        while ticks < max_ticks and not state.game_over:
            if policy_rng.random() < turn_prob:
                state.handle_input(policy_rng.choice(POLICY_KEYS))
            state.tick()
            ticks += 1
            summary.head_visits += state.encode_grid()[0]

        summary.scores.append(state.score)
        summary.ticks.append(ticks)
        if state.game_over:
            summary.collisions += 1

        if log_interval and (episode + 1) % log_interval == 0:
            recent = summary.scores[-log_interval:]
            log(
                f"[sim] episode={episode + 1} mean_score(last{len(recent)})={np.mean(recent):.2f} "
                f"high_score={state.high_score}"
            )

    summary.high_score = state.high_score
    return summary


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run headless Snake games with a random player.")
    parser.add_argument("--episodes", type=int, default=100, help="Number of games to play.")
    parser.add_argument("--max-ticks", type=int, default=2_000, help="Tick limit per game.")
    parser.add_argument("--turn-prob", type=float, default=0.2, help="Chance of a key press per tick.")
    parser.add_argument("--grid-width", type=int, default=GRID_WIDTH, help="Grid width in cells.")
    parser.add_argument("--grid-height", type=int, default=GRID_HEIGHT, help="Grid height in cells.")
    parser.add_argument("--log-interval", type=int, default=10, help="How often to log progress (episodes).")
    parser.add_argument("--seed", type=int, default=0, help="Random seed.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    summary = run_simulation(
        episodes=args.episodes,
        max_ticks=args.max_ticks,
        turn_prob=args.turn_prob,
        seed=args.seed,
        grid_width=args.grid_width,
        grid_height=args.grid_height,
        log_interval=args.log_interval,
    )
    print(
        f"[sim] done episodes={len(summary.scores)} mean_score={summary.mean_score:.2f} "
        f"high_score={summary.high_score} collisions={summary.collisions} coverage={summary.coverage:.1%}"
    )


if __name__ == "__main__":
    main()
