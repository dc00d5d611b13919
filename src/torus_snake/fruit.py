"""Fruit spawning logic."""

from __future__ import annotations

import logging

import numpy as np

from torus_snake.constants import FRUIT_CHANCE
from torus_snake.grid import Board
from torus_snake.vector import Vector2

logger = logging.getLogger(__name__)


class FruitSpawner:
    """Drops fruit onto random empty cells.

    Each call to :meth:`maybe_spawn` places at most one fruit with
    probability *chance*. Pass a seeded NumPy generator for reproducible
    placement.
    """

    def __init__(
        self,
        board: Board,
        chance: float = FRUIT_CHANCE,
        rng: np.random.Generator | None = None,
    ) -> None:
        if not 0.0 <= chance <= 1.0:
            raise ValueError("chance must be within [0, 1].")
        self.board = board
        self.chance = chance
        self.rng = rng if rng is not None else np.random.default_rng()

    def maybe_spawn(self) -> Vector2 | None:
        """Roll for a fruit this tick and return where it landed, if anywhere."""
        if self.rng.random() >= self.chance:
            return None
        return self.spawn()

    def spawn(self) -> Vector2 | None:
        """Place one fruit on a uniformly chosen empty cell."""
        empty = self.board.empty_cells()
        if not empty:
            logger.warning("No empty cells available for fruit spawning.")
            return None
        pos = empty[int(self.rng.integers(len(empty)))]
        self.board.place_fruit(pos)
        return pos
