"""Canonical game models shared across the engine, storage and API layers."""

from .game import Game, GameStatus, GameView, Pick
from .player import DraftedPlayer, Position, normalize_name
from .teams import canonical_team

__all__ = [
    "DraftedPlayer",
    "Game",
    "GameStatus",
    "GameView",
    "Pick",
    "Position",
    "canonical_team",
    "normalize_name",
]
