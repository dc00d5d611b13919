"""WebSocket handlers for live play and watching."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from torus_snake.server.hub import WatcherHub, board_frame
from torus_snake.session import SessionRegistry
from torus_snake.snake import parse_action

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_registry(ws: WebSocket) -> SessionRegistry:
    return ws.app.state.sessions


def _get_hub(ws: WebSocket) -> WatcherHub:
    return ws.app.state.hub


@ws_router.websocket("/sessions/{location}/play")
async def play(websocket: WebSocket, location: str, player_id: int) -> None:
    """Player WebSocket: send ``{"action": ...}`` frames."""
    registry = _get_registry(websocket)
    if registry.get(location) is None:
        await websocket.close(code=4004, reason="No round at this location.")
        return

    await websocket.accept()
    logger.info("Player %d connected at %s.", player_id, location)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            action = msg.get("action")
            if not isinstance(action, str):
                continue
            registry.submit(location, player_id, parse_action(action))
    except WebSocketDisconnect:
        logger.info("Player %d disconnected from %s.", player_id, location)


@ws_router.websocket("/sessions/{location}/watch")
async def watch(websocket: WebSocket, location: str) -> None:
    """Watcher WebSocket: receive-only board and result stream."""
    registry = _get_registry(websocket)
    session = registry.get(location)
    if session is None:
        await websocket.close(code=4004, reason="No round at this location.")
        return

    hub = _get_hub(websocket)
    await websocket.accept()
    # The round may have ended while the handshake was in flight.
    if registry.get(location) is not session:
        await websocket.close(code=4004, reason="Round already finished.")
        return
    hub.subscribe(location, websocket)
    logger.info("Watcher connected at %s.", location)

    # Send the current frame so the client gets immediate feedback.
    await websocket.send_text(json.dumps(
        board_frame(session, session.last_board), separators=(",", ":"),
    ))

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Watcher disconnected from %s.", location)
    finally:
        hub.unsubscribe(location, websocket)
