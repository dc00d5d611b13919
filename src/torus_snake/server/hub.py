"""Fan-out of session frames to connected WebSocket watchers."""

from __future__ import annotations

import json
import logging

from starlette.websockets import WebSocket, WebSocketState

from torus_snake.session import Session, SessionResult
from torus_snake.summary import format_result

logger = logging.getLogger(__name__)


def board_frame(session: Session, board: str) -> dict:
    """Board message with the live standings shown above it."""
    return {
        "type": "board",
        "location": session.location,
        "tick": session.game.tick_count,
        "board": board,
        "rankings": [s.to_dict() for s in session.game.rankings()],
    }


class WatcherHub:
    """Session sink that broadcasts boards and results to watchers.

    Watchers subscribe per location. Sockets that fail a send are
    dropped; all watchers of a location are closed once its result
    has been delivered.
    """

    def __init__(self) -> None:
        self._watchers: dict[str, list[WebSocket]] = {}

    def subscribe(self, location: str, ws: WebSocket) -> None:
        self._watchers.setdefault(location, []).append(ws)

    def unsubscribe(self, location: str, ws: WebSocket) -> None:
        watchers = self._watchers.get(location)
        if watchers and ws in watchers:
            watchers.remove(ws)
        if not watchers:
            self._watchers.pop(location, None)

    def watcher_count(self, location: str) -> int:
        return len(self._watchers.get(location, []))

    async def publish_board(self, session: Session, board: str) -> None:
        await self._broadcast(session.location, board_frame(session, board))

    async def publish_result(
        self, session: Session, result: SessionResult,
    ) -> None:
        await self._broadcast(session.location, {
            "type": "result",
            "board": session.last_board,
            **result.to_dict(),
            "summary": format_result(
                result.outcome, result.rankings, session.names,
            ),
        })
        await self._close_all(session.location)

    async def _broadcast(self, location: str, message: dict) -> None:
        payload = json.dumps(message, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can unsubscribe
        # concurrently.
        for ws in list(self._watchers.get(location, [])):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            self.unsubscribe(location, ws)

    async def _close_all(self, location: str) -> None:
        for ws in self._watchers.pop(location, []):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Round finished.")
            except Exception:
                logger.warning("Failed closing watcher socket at %s.", location)
