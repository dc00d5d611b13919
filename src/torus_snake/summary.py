"""Plain-text rendering of end-of-round results."""

from __future__ import annotations

from collections.abc import Mapping

from torus_snake.constants import POINTS_PER_KILL
from torus_snake.game import Standing

GAME_OVER_BANNER = r"""   _____                         ____
  / ____|                       / __ \
 | |  __  __ _ _ __ ___   ___  | |  | |_   _____ _ __
 | | |_ |/ _` | '_ ` _ \ / _ \ | |  | \ \ / / _ \ '__|
 | |__| | (_| | | | | | |  __/ | |__| |\ V /  __/ |
  \_____|\__,_|_| |_| |_|\___|  \____/  \_/ \___|_|"""


def _name(player_id: int, names: Mapping[int, str] | None) -> str:
    if names and player_id in names:
        return names[player_id]
    return str(player_id)


def format_rankings(
    standings: list[Standing],
    names: Mapping[int, str] | None = None,
) -> str:
    """Render a ranking table, one line per player."""
    lines = [f"Ranking (fruit = 1 | kill = {POINTS_PER_KILL})"]
    for place, s in enumerate(standings, start=1):
        status = "alive" if s.alive else "dead"
        lines.append(
            f"  {place}. {_name(s.player_id, names)}: {s.score} points"
            f" | {s.fruit} fruit | {s.kills} kills, {status}"
        )
    return "\n".join(lines)


def format_result(
    outcome: list[int],
    standings: list[Standing],
    names: Mapping[int, str] | None = None,
) -> str:
    """Render the game-over banner, the longest survivors and the ranking."""
    survivors = ", ".join(_name(pid, names) for pid in outcome) or "nobody"
    return (
        f"{GAME_OVER_BANNER}\n\n"
        f"Lasted the longest: {survivors}\n\n"
        f"{format_rankings(standings, names)}"
    )
