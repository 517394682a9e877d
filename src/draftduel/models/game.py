"""Game and pick records for a two-participant draft."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from .player import DraftedPlayer


class GameStatus(str, Enum):
    PENDING = "PENDING"
    DRAFTING = "DRAFTING"
    COMPLETE = "COMPLETE"


class Game(BaseModel):
    game_id: str = Field(..., min_length=1)
    participant_a: str = Field(..., min_length=1)
    participant_b: Optional[str] = None
    status: GameStatus = GameStatus.PENDING
    current_turn: Optional[str] = None
    skips_used_a: int = Field(default=0, ge=0)
    skips_used_b: int = Field(default=0, ge=0)
    invite_code: Optional[str] = None
    version: int = Field(default=0, ge=0)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_turn(self) -> "Game":
        if self.current_turn is not None and self.current_turn not in self.participants:
            raise ValueError("current_turn must reference a participant")
        return self

    @property
    def participants(self) -> Tuple[str, ...]:
        if self.participant_b is None:
            return (self.participant_a,)
        return (self.participant_a, self.participant_b)

    def is_participant(self, participant_id: str) -> bool:
        return participant_id in self.participants

    def opponent_of(self, participant_id: str) -> Optional[str]:
        if participant_id == self.participant_a:
            return self.participant_b
        if participant_id == self.participant_b:
            return self.participant_a
        raise KeyError(f"{participant_id!r} is not in game {self.game_id}")

    def skips_used_by(self, participant_id: str) -> int:
        if participant_id == self.participant_a:
            return self.skips_used_a
        if participant_id == self.participant_b:
            return self.skips_used_b
        raise KeyError(f"{participant_id!r} is not in game {self.game_id}")


class Pick(BaseModel):
    """An append-only roster assignment."""

    game_id: str
    pick_number: int = Field(..., ge=1)
    participant_id: str
    slot: str
    player: DraftedPlayer
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class GameView(BaseModel):
    game: Game
    picks: Tuple[Pick, ...] = ()

    model_config = ConfigDict(frozen=True)

    def picks_for(self, participant_id: str) -> List[Pick]:
        return [pick for pick in self.picks if pick.participant_id == participant_id]

    def filled_slots(self, participant_id: str) -> FrozenSet[str]:
        return frozenset(pick.slot for pick in self.picks_for(participant_id))

    def pick_count(self, participant_id: Optional[str]) -> int:
        if participant_id is None:
            return 0
        return len(self.picks_for(participant_id))

    def drafted_keys(self) -> FrozenSet[str]:
        return frozenset(pick.player.key for pick in self.picks)

    def roster_for(self, participant_id: str, roster_order: Sequence[str]) -> Dict[str, Optional[Pick]]:
        by_slot = {pick.slot: pick for pick in self.picks_for(participant_id)}
        return {slot: by_slot.get(slot) for slot in roster_order}
