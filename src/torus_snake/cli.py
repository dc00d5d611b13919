"""Command-line tools for running headless games."""

from __future__ import annotations

import argparse
import logging
import sys

import numpy as np

from torus_snake.constants import GAME_MODES, MAX_PLAYERS, MODE_MULTIPLAYER

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="torus-snake",
        description="Torus Snake headless simulation and benchmarking.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play one game with random inputs and print it.",
    )
    sim_p.add_argument("--players", type=int, default=2)
    sim_p.add_argument(
        "--mode", type=str, default=MODE_MULTIPLAYER, choices=GAME_MODES,
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--max-ticks", type=int, default=1_000)

    # --- benchmark ---
    bench_p = sub.add_parser(
        "benchmark", help="Measure simulation throughput.",
    )
    bench_p.add_argument("--games", type=int, default=20)
    bench_p.add_argument("--players", type=int, default=2)
    bench_p.add_argument("--max-ticks", type=int, default=500)

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    from torus_snake.game import Game
    from torus_snake.simulate import play_random_game
    from torus_snake.summary import format_rankings, format_result

    if not 1 <= args.players <= MAX_PLAYERS:
        logger.error("--players must be between 1 and %d.", MAX_PLAYERS)
        return 2

    rng = np.random.default_rng(args.seed)
    game = Game(args.mode, list(range(1, args.players + 1)), rng=rng)
    last = play_random_game(game, rng, max_ticks=args.max_ticks)

    print(game.render())  # noqa: T201
    print()  # noqa: T201
    if last is not None and last.outcome is not None:
        print(format_result(last.outcome, game.rankings()))  # noqa: T201
    else:
        print(f"No winner after {game.tick_count} ticks.")  # noqa: T201
        print(format_rankings(game.rankings()))  # noqa: T201
    return 0


def _run_benchmark(args: argparse.Namespace) -> int:
    from torus_snake.simulate import benchmark_throughput

    if not 1 <= args.players <= MAX_PLAYERS:
        logger.error("--players must be between 1 and %d.", MAX_PLAYERS)
        return 2
    result = benchmark_throughput(
        num_games=args.games,
        player_count=args.players,
        max_ticks=args.max_ticks,
    )
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``torus-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "benchmark": _run_benchmark,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
