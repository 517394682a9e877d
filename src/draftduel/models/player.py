"""Drafted player identity shared by the engine, storage and catalog."""

from __future__ import annotations

import re
import unicodedata
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from .teams import canonical_team


class Position(str, Enum):
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    K = "K"
    DEF = "DEF"

    @classmethod
    def parse(cls, label: "str | Position") -> "Position":
        if isinstance(label, Position):
            return label
        token = str(label).strip().upper()
        token = _POSITION_ALIASES.get(token, token)
        try:
            return cls(token)
        except ValueError:
            raise ValueError(f"Unknown position {label!r}") from None


_POSITION_ALIASES = {
    "DST": "DEF",
    "D/ST": "DEF",
    "D": "DEF",
    "DEFENSE": "DEF",
    "PK": "K",
}

_NAME_SUFFIX_TOKENS = {"jr", "sr", "ii", "iii", "iv", "v"}


def normalize_name(name: str) -> str:
    """Identity form of a player name: accents folded, punctuation and suffixes dropped.

    A name made only of suffix tokens keeps them, and a name with no word
    characters at all falls back to its casefolded text, so the result is
    never empty for a non-empty name.
    """

    decomposed = unicodedata.normalize("NFKD", name)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    tokens = re.sub(r"[\W_]+", " ", folded).split()
    kept = [tok for tok in tokens if tok not in _NAME_SUFFIX_TOKENS] or tokens
    return "".join(kept) or name.strip().casefold()


class DraftedPlayer(BaseModel):
    """A sports player as submitted with a pick; opaque to the turn rules."""

    name: str = Field(..., min_length=1)
    team: str = Field(..., min_length=1)
    position: Position

    model_config = ConfigDict(frozen=True)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip() if isinstance(value, str) else value

    @field_validator("team", mode="before")
    @classmethod
    def _canonical_team(cls, value: str) -> str:
        return canonical_team(value) if isinstance(value, str) else value

    @field_validator("position", mode="before")
    @classmethod
    def _parse_position(cls, value: str) -> Position:
        return Position.parse(value)

    @property
    def key(self) -> str:
        # Team defenses are identified by the team alone.
        if self.position is Position.DEF:
            return f"def::{self.team}"
        return f"{normalize_name(self.name)}::{self.team}"
