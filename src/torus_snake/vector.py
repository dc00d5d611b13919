"""Integer coordinates on a toroidal board."""

from __future__ import annotations

from typing import NamedTuple


class Vector2(NamedTuple):
    """A 2D integer point ``(x, y)``; ``x`` is the column, ``y`` the row."""

    x: int
    y: int

    def translate(self, delta: Vector2, bounds: Vector2) -> Vector2:
        """Step by *delta* and wrap each axis into ``[0, bounds)``.

        Only unit steps and the zero vector are supported, so a single
        add-then-modulo pass per axis is enough.
        """
        x = self.x + delta.x
        y = self.y + delta.y
        if x < 0:
            x += bounds.x
        if y < 0:
            y += bounds.y
        if x >= bounds.x:
            x %= bounds.x
        if y >= bounds.y:
            y %= bounds.y
        return Vector2(x, y)
