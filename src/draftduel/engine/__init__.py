"""Draft engine: pure turn rules plus the service that commits them."""

from .service import DraftService, generate_invite_code
from .state_machine import apply_pick, apply_skip, join, new_game, next_turn

__all__ = [
    "DraftService",
    "apply_pick",
    "apply_skip",
    "generate_invite_code",
    "join",
    "new_game",
    "next_turn",
]
