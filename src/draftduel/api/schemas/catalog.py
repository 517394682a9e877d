from __future__ import annotations

from typing import List

from pydantic import BaseModel

from .game import PlayerResponse


class TeamResponse(BaseModel):
    code: str
    name: str


class TeamPlayersResponse(BaseModel):
    team: TeamResponse
    players: List[PlayerResponse]
