"""REST API route handlers for session lifecycle and input."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from torus_snake.server.models import (
    InputRequest,
    SessionDetail,
    SessionSummary,
    StandingModel,
    StartSessionRequest,
)
from torus_snake.session import (
    LocationBusy,
    Mention,
    Session,
    SessionRegistry,
    StartRejected,
    StartRequest,
)
from torus_snake.snake import parse_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def _summary(session: Session) -> SessionSummary:
    return SessionSummary(
        location=session.location,
        mode=session.mode,
        status=session.status,
        player_ids=session.player_ids,
        tick=session.game.tick_count,
    )


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List running sessions."""
    return [_summary(s) for s in _get_registry(request).list_sessions()]


@router.post("/{location}", status_code=201)
async def start_session(
    location: str, body: StartSessionRequest, request: Request,
) -> SessionSummary:
    """Start a round at *location*."""
    mentions = tuple(
        [Mention(pid) for pid in body.player_ids]
        + [Mention(rid, is_role=True) for rid in body.role_ids]
    )
    start = StartRequest(
        location=location,
        mode=body.mode,
        requester_id=body.requester_id,
        mentions=mentions,
        display_names=body.display_names,
    )
    try:
        session = _get_registry(request).start(start)
    except LocationBusy as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except StartRejected as exc:
        logger.info("Rejected start at %s: %s", location, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _summary(session)


@router.get("/{location}")
async def get_session(location: str, request: Request) -> SessionDetail:
    """Latest board and standings for the round at *location*."""
    session = _get_registry(request).get(location)
    if session is None:
        raise HTTPException(status_code=404, detail="No round at this location.")
    summary = _summary(session)
    return SessionDetail(
        **summary.model_dump(),
        board=session.last_board,
        rankings=[
            StandingModel(**s.to_dict()) for s in session.game.rankings()
        ],
        display_names=session.names,
    )


@router.post("/{location}/input", status_code=202)
async def send_input(
    location: str, body: InputRequest, request: Request,
) -> dict:
    """Queue a direction or cancel; unknown actions are dropped."""
    accepted = _get_registry(request).submit(
        location, body.player_id, parse_action(body.action),
    )
    return {"accepted": accepted}
