"""Session registry, start validation, and per-session tick loops."""

from __future__ import annotations

import asyncio
import enum
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Protocol

from torus_snake.config import RuntimeConfig
from torus_snake.constants import GAME_MODES, MAX_PLAYERS, MODE_SOLO
from torus_snake.game import Game, Standing
from torus_snake.snake import Direction

logger = logging.getLogger(__name__)


class SessionStatus(str, enum.Enum):
    """Lifecycle states for a session; idle locations have no session."""

    RUNNING = "running"
    ENDED = "ended"


class StartRejected(ValueError):
    """A start request that cannot become a session.

    The message is meant to be shown to the requester as is.
    """


class LocationBusy(StartRejected):
    """A round is already running at the requested location."""


@dataclass(frozen=True)
class Mention:
    """A participant named in a start request; roles cannot play."""

    id: int
    is_role: bool = False


@dataclass(frozen=True)
class StartRequest:
    location: str
    mode: str
    requester_id: int
    mentions: tuple[Mention, ...] = ()
    display_names: dict[int, str] = field(default_factory=dict)


@dataclass(frozen=True)
class InputEvent:
    player_id: int
    action: Direction


@dataclass(frozen=True)
class SessionResult:
    """Terminal payload published when a round ends."""

    location: str
    outcome: list[int]
    rankings: list[Standing]

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "outcome": list(self.outcome),
            "rankings": [s.to_dict() for s in self.rankings],
        }


@dataclass
class Session:
    """One running game bound to a location and an input queue."""

    location: str
    game: Game
    inbox: asyncio.Queue[InputEvent]
    status: SessionStatus = SessionStatus.RUNNING
    last_board: str = ""
    result: SessionResult | None = None
    names: dict[int, str] = field(default_factory=dict)
    created_at: float = field(default_factory=time.monotonic)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def mode(self) -> str:
        return self.game.mode

    @property
    def player_ids(self) -> list[int]:
        return [p.player_id for p in self.game.players]


class SessionSink(Protocol):
    """Where a session publishes what it renders."""

    async def publish_board(self, session: Session, board: str) -> None: ...

    async def publish_result(
        self, session: Session, result: SessionResult,
    ) -> None: ...


def resolve_players(request: StartRequest) -> list[int]:
    """Validate a start request and return the roster it describes.

    Raises :class:`StartRejected` with a user-facing message.
    """
    if request.mode not in GAME_MODES:
        raise StartRejected(f"Unknown game mode {request.mode!r}.")
    if any(m.is_role for m in request.mentions):
        raise StartRejected("A role can't play snake.")

    ids = [m.id for m in request.mentions]
    if len(set(ids)) != len(ids):
        raise StartRejected("Repeating users.")

    if request.mode == MODE_SOLO:
        return [request.requester_id]
    if len(ids) < 2:
        raise StartRejected("Please enter at least 2 users.")
    if len(ids) > MAX_PLAYERS:
        raise StartRejected(f"Play is currently limited to {MAX_PLAYERS} users.")
    return ids


class SessionRegistry:
    """Maps each location to at most one running session.

    The map is guarded by a lock; each session's worker task is the only
    code that mutates its game. Callers feed input with :meth:`submit`.
    """

    def __init__(
        self,
        sink: SessionSink,
        config: RuntimeConfig | None = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        self._sink = sink
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def get(self, location: str) -> Session | None:
        with self._lock:
            return self._sessions.get(location)

    def list_sessions(self) -> list[Session]:
        with self._lock:
            return list(self._sessions.values())

    def start(self, request: StartRequest, seed: int | None = None) -> Session:
        """Create a session and launch its tick loop.

        Must be called from a running event loop.
        """
        with self._lock:
            if request.location in self._sessions:
                raise LocationBusy(
                    f"Round already in progress at {request.location}."
                )
            ids = resolve_players(request)
            game = Game(request.mode, ids, seed=seed)
            session = Session(
                location=request.location,
                game=game,
                inbox=asyncio.Queue(maxsize=self.config.input_queue_size),
                last_board=game.render(),
                names=dict(request.display_names),
            )
            self._sessions[request.location] = session

        session._task = asyncio.create_task(self._run(session))
        logger.info(
            "Session started at %s (mode=%s, players=%d).",
            request.location, request.mode, len(ids),
        )
        return session

    def submit(
        self, location: str, player_id: int, action: Direction | None,
    ) -> bool:
        """Queue an input event without blocking.

        Returns False when the event was dropped: unmapped action, no
        session at *location*, or a full queue.
        """
        if action is None:
            return False
        session = self.get(location)
        if session is None or session.status != SessionStatus.RUNNING:
            return False
        try:
            session.inbox.put_nowait(InputEvent(player_id, action))
        except asyncio.QueueFull:
            logger.debug("Input queue full at %s; dropping event.", location)
            return False
        return True

    async def _run(self, session: Session) -> None:
        """Tick the game until it reports an outcome."""
        try:
            await self._sink.publish_board(session, session.last_board)
            while session.status == SessionStatus.RUNNING:
                await asyncio.sleep(self.config.tick_interval)
                self._drain(session)
                result = session.game.tick()
                session.last_board = result.board
                if result.outcome is None:
                    await self._sink.publish_board(session, result.board)
                    continue

                session.result = SessionResult(
                    location=session.location,
                    outcome=result.outcome,
                    rankings=session.game.rankings(),
                )
                self._release(session)
                logger.info(
                    "Session at %s ended after %d ticks.",
                    session.location, session.game.tick_count,
                )
                await self._sink.publish_result(session, session.result)
        except asyncio.CancelledError:
            logger.info("Session loop cancelled at %s.", session.location)
        except Exception:
            logger.exception("Session loop error at %s.", session.location)
        finally:
            self._release(session)

    def _drain(self, session: Session) -> None:
        """Apply every queued event; later headings overwrite earlier ones."""
        while True:
            try:
                event = session.inbox.get_nowait()
            except asyncio.QueueEmpty:
                return
            if not session.game.handle_input(event.player_id, event.action):
                logger.debug(
                    "Ignoring input from unknown player %d at %s.",
                    event.player_id, session.location,
                )

    def _release(self, session: Session) -> None:
        """End *session* and free its location exactly once."""
        session.status = SessionStatus.ENDED
        with self._lock:
            if self._sessions.get(session.location) is session:
                del self._sessions[session.location]

    async def cleanup(self) -> None:
        """Cancel all running session loops."""
        tasks = [
            s._task for s in self.list_sessions()
            if s._task and not s._task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        # A task cancelled before its first step never reaches its finally.
        for session in self.list_sessions():
            self._release(session)
        logger.info("SessionRegistry cleanup complete.")
