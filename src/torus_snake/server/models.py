"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from torus_snake.session import SessionStatus


class StartSessionRequest(BaseModel):
    """Request body for POST /sessions/{location}."""

    mode: Literal["snake", "solo"] = "snake"
    requester_id: int = Field(ge=0)
    player_ids: list[int] = Field(default_factory=list)
    role_ids: list[int] = Field(default_factory=list)
    display_names: dict[int, str] = Field(default_factory=dict)


class InputRequest(BaseModel):
    """Request body for POST /sessions/{location}/input."""

    player_id: int
    action: str = Field(min_length=1, max_length=16)


class StandingModel(BaseModel):
    player_id: int
    score: int
    fruit: int
    kills: int
    alive: bool


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    location: str
    mode: str
    status: SessionStatus
    player_ids: list[int]
    tick: int


class SessionDetail(SessionSummary):
    """Summary plus the latest frame and standings."""

    board: str
    rankings: list[StandingModel]
    display_names: dict[int, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
