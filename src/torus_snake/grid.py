"""Board representation for the snake game."""

from __future__ import annotations

import enum
from collections.abc import Callable

import numpy as np

from torus_snake.constants import BOARD_HEIGHT, BOARD_WIDTH
from torus_snake.vector import Vector2


class CellType(enum.IntEnum):
    """Integer codes stored in the board array for non-player cells.

    Any non-negative value is the roster index of the occupying player.
    """

    EMPTY = -1
    FRUIT = -2


class Board:
    """NumPy-backed toroidal board.

    Cells are indexed ``cells[y, x]`` so rows render top to bottom. The
    board is a cached view of the players' bodies; the game keeps the two
    consistent after every tick.
    """

    def __init__(
        self,
        width: int = BOARD_WIDTH,
        height: int = BOARD_HEIGHT,
    ) -> None:
        if width < 4 or height < 4:
            raise ValueError("Board dimensions must be at least 4×4.")
        self.width = width
        self.height = height
        self.cells = np.full((height, width), CellType.EMPTY, dtype=np.int8)

    @classmethod
    def empty(cls, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> Board:
        """Return a board with every cell empty."""
        return cls(width=width, height=height)

    @property
    def bounds(self) -> Vector2:
        return Vector2(self.width, self.height)

    def get(self, point: Vector2) -> int:
        """Return the raw cell code at *point*."""
        return int(self.cells[point.y, point.x])

    def occupant(self, point: Vector2) -> int | None:
        """Return the roster index occupying *point*, if any."""
        value = self.get(point)
        return value if value >= 0 else None

    def is_fruit(self, point: Vector2) -> bool:
        return self.get(point) == CellType.FRUIT

    def mark(self, point: Vector2, player_index: int) -> None:
        """Mark *point* as occupied by the player at *player_index*."""
        self.cells[point.y, point.x] = player_index

    def clear(self, point: Vector2) -> None:
        self.cells[point.y, point.x] = CellType.EMPTY

    def place_fruit(self, point: Vector2) -> None:
        self.cells[point.y, point.x] = CellType.FRUIT

    def empty_cells(self) -> list[Vector2]:
        """Return all empty cells in row-major order."""
        rows, cols = np.where(self.cells == CellType.EMPTY)
        return [
            Vector2(x, y)
            for y, x in zip(rows.tolist(), cols.tolist(), strict=True)
        ]

    def render(self, glyph_for: Callable[[Vector2, int], str]) -> str:
        """Draw the board as newline-separated rows.

        *glyph_for* maps each cell and its raw code to a single glyph.
        """
        lines = []
        for y in range(self.height):
            row = self.cells[y].tolist()
            lines.append(
                "".join(glyph_for(Vector2(x, y), code) for x, code in enumerate(row))
            )
        return "\n".join(line.rstrip() for line in lines).strip()

    def to_dict(self) -> dict:
        """Serialize board state to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "cells": self.cells.tolist(),
        }
