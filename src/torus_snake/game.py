"""Step-based multiplayer game on a toroidal board."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from torus_snake.constants import (
    EMPTY_GLYPH,
    FRUIT_GLYPH,
    GAME_MODES,
    HEAD_GLYPH,
    MAX_PLAYERS,
    MODE_SOLO,
    PLAYER_GLYPHS,
    SPAWN_COLUMNS,
    SPAWN_ROWS,
)
from torus_snake.fruit import FruitSpawner
from torus_snake.grid import Board, CellType
from torus_snake.snake import Direction, Player
from torus_snake.vector import Vector2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Standing:
    """Snapshot of one player's result, used for rankings."""

    player_id: int
    score: int
    fruit: int
    kills: int
    alive: bool

    @classmethod
    def of(cls, player: Player) -> Standing:
        return cls(
            player_id=player.player_id,
            score=player.effective_score(),
            fruit=player.fruit,
            kills=player.kills,
            alive=player.alive,
        )

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "score": self.score,
            "fruit": self.fruit,
            "kills": self.kills,
            "alive": self.alive,
        }


@dataclass(frozen=True)
class TickEvents:
    """Collisions found during one movement scan.

    ``kills`` holds ``(killer_index, victim_index)`` pairs and
    ``casualties`` the roster indices that died this tick, in the order
    they were recorded.
    """

    kills: tuple[tuple[int, int], ...] = ()
    casualties: tuple[int, ...] = ()


@dataclass(frozen=True)
class TickResult:
    """What a single :meth:`Game.tick` produced."""

    board: str
    outcome: list[int] | None
    events: TickEvents
    fruit: Vector2 | None = None

    @property
    def finished(self) -> bool:
        return self.outcome is not None


class Game:
    """One round of snake for up to five players.

    The game owns the board and the roster; roster order is fixed at
    creation and doubles as the board's player-index namespace. Only the
    session worker driving the game may call :meth:`tick` or
    :meth:`handle_input`.
    """

    def __init__(
        self,
        mode: str,
        player_ids: list[int],
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ) -> None:
        if mode not in GAME_MODES:
            raise ValueError(f"mode must be one of {GAME_MODES}, got {mode!r}.")
        ids = list(player_ids)
        if mode == MODE_SOLO:
            ids = ids[:1]
        if not ids:
            raise ValueError("At least one player is required.")
        if len(ids) > MAX_PLAYERS:
            raise ValueError(f"At most {MAX_PLAYERS} players can play.")
        if len(set(ids)) != len(ids):
            raise ValueError("Player ids must be distinct.")

        self.mode = mode
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.board = Board.empty()
        self.players: list[Player] = []
        # Opaque handle for the caller to tie a game to its display.
        self.stage: object | None = None
        self.tick_count = 0
        self.outcome: list[int] | None = None

        self._spawn_players(ids)
        self.fruit_spawner = FruitSpawner(self.board, rng=self.rng)

    def _spawn_players(self, ids: list[int]) -> None:
        """Lay players out on evenly spaced rows, heading right."""
        spacing = SPAWN_ROWS // (len(ids) + 1)
        for index, player_id in enumerate(ids):
            row = spacing * (index + 1)
            body = [Vector2(col, row) for col in SPAWN_COLUMNS]
            for cell in body:
                self.board.mark(cell, index)
            self.players.append(Player(player_id, body, Direction.RIGHT))

    @property
    def game_over(self) -> bool:
        return self.outcome is not None

    def player_by_id(self, player_id: int) -> Player | None:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def handle_input(self, player_id: int, action: Direction) -> bool:
        """Apply one input event. Returns False if the player is unknown.

        Cancel marks the player dead even if it already is; any other
        action only steers living players.
        """
        player = self.player_by_id(player_id)
        if player is None:
            return False
        if action is Direction.CANCEL:
            if player.alive:
                logger.info("Player %d resigned.", player_id)
            player.mark_dead()
        elif player.alive:
            player.set_heading(action)
        return True

    def tick(self) -> TickResult:
        """Advance the game by one step.

        Returns the rendered board and, once the round is over, the ids
        that won it.
        """
        if self.game_over:
            return TickResult(self.render(), self.outcome, TickEvents())

        fruit = self.fruit_spawner.maybe_spawn()
        events = self._move_players()
        self._apply_events(events)
        self.tick_count += 1

        self.outcome = self._resolve_outcome(events)
        if self.outcome is not None:
            logger.info(
                "Game over at tick %d; outcome %s.", self.tick_count, self.outcome,
            )
        return TickResult(self.render(), self.outcome, events, fruit)

    def _move_players(self) -> TickEvents:
        """Move every living snake once, in roster order.

        Bodies and board cells are updated in place, so earlier movers
        shape what later movers collide with. Deaths and kill credits are
        only recorded here and applied afterwards.
        """
        bounds = self.board.bounds
        kills: list[tuple[int, int]] = []
        casualties: list[int] = []
        claims: dict[Vector2, int] = {}

        def record(index: int) -> None:
            if index not in casualties:
                casualties.append(index)

        for index, player in enumerate(self.players):
            if player.is_dead():
                continue

            target = player.head.translate(player.heading.delta, bounds)
            grew = False
            code = self.board.get(target)
            if code == CellType.FRUIT:
                player.fruit += 1
                grew = True
            elif code >= 0:
                if code != index:
                    kills.append((code, index))
                record(index)

            if not grew:
                self.board.clear(player.coords.pop(0))
            # A dying snake still shows its head on this frame.
            self.board.mark(target, index)
            player.coords.append(target)

            first = claims.setdefault(target, index)
            if first != index:
                record(first)
                record(index)

        return TickEvents(kills=tuple(kills), casualties=tuple(casualties))

    def _apply_events(self, events: TickEvents) -> None:
        for index in events.casualties:
            player = self.players[index]
            player.mark_dead()
            logger.info(
                "Player %d died at tick %d with score %d.",
                player.player_id,
                self.tick_count + 1,
                player.effective_score(),
            )
        # A snake that died this tick still earns kills from the same tick.
        for killer, _victim in events.kills:
            self.players[killer].kills += 1

    def _resolve_outcome(self, events: TickEvents) -> list[int] | None:
        alive = [p for p in self.players if p.alive]
        if not alive:
            # Whoever fell in the final tick lasted the longest.
            return [self.players[i].player_id for i in events.casualties]
        if len(alive) == 1 and self.mode != MODE_SOLO:
            return [alive[0].player_id]
        return None

    def render(self) -> str:
        """Draw the board, marking each snake's current head."""
        return self.board.render(self._glyph)

    def _glyph(self, point: Vector2, code: int) -> str:
        if code == CellType.EMPTY:
            return EMPTY_GLYPH
        if code == CellType.FRUIT:
            return FRUIT_GLYPH
        if self.players[code].head == point:
            return HEAD_GLYPH
        return PLAYER_GLYPHS[code]

    def rankings(self) -> list[Standing]:
        """Standings sorted by score, living players first.

        Sorting is stable, so ties keep roster order.
        """
        by_score = sorted(
            self.players, key=lambda p: p.effective_score(), reverse=True,
        )
        alive = [Standing.of(p) for p in by_score if p.alive]
        dead = [Standing.of(p) for p in by_score if not p.alive]
        return alive + dead

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "mode": self.mode,
            "tick": self.tick_count,
            "game_over": self.game_over,
            "outcome": self.outcome,
            "board": self.render(),
            "players": [p.to_dict() for p in self.players],
            "rankings": [s.to_dict() for s in self.rankings()],
        }
