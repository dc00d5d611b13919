"""Torus Snake — multiplayer snake engine and session runtime."""

from torus_snake.game import Game, Standing, TickEvents, TickResult
from torus_snake.grid import Board, CellType
from torus_snake.session import (
    LocationBusy,
    Mention,
    SessionRegistry,
    SessionResult,
    StartRejected,
    StartRequest,
)
from torus_snake.snake import Direction, Player, parse_action
from torus_snake.vector import Vector2

__all__ = [
    "Board",
    "CellType",
    "Direction",
    "Game",
    "LocationBusy",
    "Mention",
    "Player",
    "SessionRegistry",
    "SessionResult",
    "Standing",
    "StartRejected",
    "StartRequest",
    "TickEvents",
    "TickResult",
    "Vector2",
    "parse_action",
]
