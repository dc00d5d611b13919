"""Headless games driven by random input, and throughput benchmarking."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from torus_snake.constants import MODE_MULTIPLAYER
from torus_snake.game import Game, TickResult
from torus_snake.snake import Direction

logger = logging.getLogger(__name__)

_STEERING = (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT)


def play_random_game(
    game: Game,
    rng: np.random.Generator,
    *,
    max_ticks: int = 1_000,
    turn_chance: float = 0.2,
) -> TickResult | None:
    """Tick *game* with random turns until it ends or *max_ticks* pass.

    Returns the last tick's result, or ``None`` if no tick ran.
    """
    last: TickResult | None = None
    for _ in range(max_ticks):
        for player in game.players:
            if player.alive and rng.random() < turn_chance:
                choice = _STEERING[int(rng.integers(len(_STEERING)))]
                game.handle_input(player.player_id, choice)
        last = game.tick()
        if last.finished:
            break
    return last


@dataclass
class BenchmarkResult:
    """Results from a throughput benchmark run."""

    total_games: int
    total_ticks: int
    wall_time_seconds: float
    games_per_second: float
    ticks_per_second: float

    def summary(self) -> str:
        return (
            f"Benchmark: {self.total_games} games, {self.total_ticks} ticks in "
            f"{self.wall_time_seconds:.2f}s | "
            f"{self.games_per_second:.1f} games/s, "
            f"{self.ticks_per_second:.1f} ticks/s"
        )


def benchmark_throughput(
    *,
    num_games: int = 20,
    player_count: int = 2,
    max_ticks: int = 500,
    seed: int = 42,
) -> BenchmarkResult:
    """Measure raw tick throughput with random inputs."""
    rng = np.random.default_rng(seed)
    total_ticks = 0
    start = time.perf_counter()

    for g in range(num_games):
        game = Game(
            MODE_MULTIPLAYER,
            list(range(1, player_count + 1)),
            seed=int(rng.integers(2**31)),
        )
        play_random_game(game, rng, max_ticks=max_ticks)
        total_ticks += game.tick_count
        logger.debug("Game %d finished after %d ticks.", g, game.tick_count)

    elapsed = time.perf_counter() - start
    result = BenchmarkResult(
        total_games=num_games,
        total_ticks=total_ticks,
        wall_time_seconds=elapsed,
        games_per_second=num_games / max(elapsed, 1e-9),
        ticks_per_second=total_ticks / max(elapsed, 1e-9),
    )
    logger.info(result.summary())
    return result
