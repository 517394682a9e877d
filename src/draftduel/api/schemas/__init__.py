"""Pydantic models for API I/O."""

from .catalog import TeamPlayersResponse, TeamResponse
from .game import (
    GameResponse,
    GameSummaryResponse,
    JoinRequest,
    OpenSlotsResponse,
    PickRequest,
    PickResponse,
    PlayerPayload,
    PlayerResponse,
    SkipRequest,
)

__all__ = [
    "GameResponse",
    "GameSummaryResponse",
    "JoinRequest",
    "OpenSlotsResponse",
    "PickRequest",
    "PickResponse",
    "PlayerPayload",
    "PlayerResponse",
    "SkipRequest",
    "TeamPlayersResponse",
    "TeamResponse",
]
