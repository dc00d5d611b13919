"""Player representation: a snake's body, heading and score."""

from __future__ import annotations

import enum

from torus_snake.constants import POINTS_PER_KILL
from torus_snake.vector import Vector2


class Direction(enum.Enum):
    """Headings as ``(dx, dy)`` steps; ``CANCEL`` is the player's resign input."""

    UP = Vector2(0, -1)
    RIGHT = Vector2(1, 0)
    DOWN = Vector2(0, 1)
    LEFT = Vector2(-1, 0)
    CANCEL = Vector2(0, 0)

    @property
    def delta(self) -> Vector2:
        return self.value


_ACTION_ALIASES: dict[str, Direction] = {
    "up": Direction.UP,
    "right": Direction.RIGHT,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "cancel": Direction.CANCEL,
    "⬆": Direction.UP,
    "➡": Direction.RIGHT,
    "⬇": Direction.DOWN,
    "⬅": Direction.LEFT,
    "❌": Direction.CANCEL,
}


def parse_action(text: str) -> Direction | None:
    """Map an action name or arrow emoji to a :class:`Direction`.

    Returns ``None`` for anything unrecognised.
    """
    # Emoji reactions often carry a trailing variation selector.
    key = text.strip().replace("\ufe0f", "").lower()
    return _ACTION_ALIASES.get(key)


class Player:
    """A snake in the roster.

    ``coords`` is ordered tail first, head last.
    """

    __slots__ = ("player_id", "coords", "heading", "fruit", "kills", "alive")

    def __init__(
        self,
        player_id: int,
        coords: list[Vector2],
        heading: Direction = Direction.RIGHT,
    ) -> None:
        if not coords:
            raise ValueError("A player needs at least one body cell.")
        self.player_id = player_id
        self.coords = list(coords)
        self.heading = heading
        self.fruit = 0
        self.kills = 0
        self.alive = True

    @property
    def head(self) -> Vector2:
        return self.coords[-1]

    @property
    def tail(self) -> Vector2:
        return self.coords[0]

    def set_heading(self, heading: Direction) -> None:
        """Overwrite the pending heading; reversals are allowed."""
        self.heading = heading

    def mark_dead(self) -> None:
        self.alive = False

    def is_dead(self) -> bool:
        return not self.alive

    def effective_score(self) -> int:
        """Fruit eaten plus the bonus for every kill."""
        return self.fruit + self.kills * POINTS_PER_KILL

    def to_dict(self) -> dict:
        """Serialize player state to a dictionary."""
        return {
            "player_id": self.player_id,
            "body": [list(c) for c in self.coords],
            "heading": self.heading.name.lower(),
            "fruit": self.fruit,
            "kills": self.kills,
            "score": self.effective_score(),
            "alive": self.alive,
        }
