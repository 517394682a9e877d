from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from draftduel.models import DraftedPlayer, Game, GameView, Pick


class PlayerPayload(BaseModel):
    name: str = Field(..., min_length=1)
    team: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)


class PickRequest(BaseModel):
    player: PlayerPayload
    expected_version: int | None = Field(default=None, ge=0)


class SkipRequest(BaseModel):
    expected_version: int | None = Field(default=None, ge=0)


class JoinRequest(BaseModel):
    invite_code: str = Field(..., min_length=1, max_length=16)


class PlayerResponse(BaseModel):
    name: str
    team: str
    position: str

    @classmethod
    def from_player(cls, player: DraftedPlayer) -> "PlayerResponse":
        return cls(name=player.name, team=player.team, position=player.position.value)


class PickResponse(BaseModel):
    pick_number: int
    participant_id: str
    slot: str
    player: PlayerResponse
    created_at: datetime

    @classmethod
    def from_pick(cls, pick: Pick) -> "PickResponse":
        return cls(
            pick_number=pick.pick_number,
            participant_id=pick.participant_id,
            slot=pick.slot,
            player=PlayerResponse.from_player(pick.player),
            created_at=pick.created_at,
        )


class GameResponse(BaseModel):
    game_id: str
    status: Literal["PENDING", "DRAFTING", "COMPLETE"]
    participant_a: str
    participant_b: str | None
    current_turn: str | None
    your_turn: bool
    invite_code: str | None
    version: int
    max_skips: int
    skips_used: Dict[str, int]
    picks: List[PickResponse]
    rosters: Dict[str, Dict[str, Optional[PickResponse]]]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(
        cls,
        view: GameView,
        *,
        viewer_id: str,
        roster_order: Sequence[str],
        max_skips: int,
    ) -> "GameResponse":
        game = view.game
        picks = {pick.pick_number: PickResponse.from_pick(pick) for pick in view.picks}
        rosters = {
            participant: {
                slot: picks[pick.pick_number] if pick is not None else None
                for slot, pick in view.roster_for(participant, roster_order).items()
            }
            for participant in game.participants
        }
        return cls(
            game_id=game.game_id,
            status=game.status.value,
            participant_a=game.participant_a,
            participant_b=game.participant_b,
            current_turn=game.current_turn,
            your_turn=game.current_turn == viewer_id,
            invite_code=game.invite_code,
            version=game.version,
            max_skips=max_skips,
            skips_used={participant: game.skips_used_by(participant) for participant in game.participants},
            picks=list(picks.values()),
            rosters=rosters,
            created_at=game.created_at,
            updated_at=game.updated_at,
        )


class GameSummaryResponse(BaseModel):
    game_id: str
    status: Literal["PENDING", "DRAFTING", "COMPLETE"]
    opponent: str | None
    your_turn: bool
    updated_at: datetime

    @classmethod
    def from_game(cls, game: Game, *, viewer_id: str) -> "GameSummaryResponse":
        return cls(
            game_id=game.game_id,
            status=game.status.value,
            opponent=game.opponent_of(viewer_id),
            your_turn=game.current_turn == viewer_id,
            updated_at=game.updated_at,
        )


class OpenSlotsResponse(BaseModel):
    position: str
    open_slots: List[str]
