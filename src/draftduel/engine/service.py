"""Entry points every transport uses to drive a draft."""

from __future__ import annotations

import logging
import secrets
import string
from typing import Collection, List, Optional
from uuid import uuid4

from draftduel.config import DraftRules, get_rules
from draftduel.errors import ConflictError, ForbiddenError, NotFoundError
from draftduel.models import DraftedPlayer, Game, GameStatus, GameView, Position
from draftduel.persistence import GameStore, Mutation

from . import state_machine
from .state_machine import PlayerLookup


logger = logging.getLogger(__name__)

INVITE_CODE_LENGTH = 6
_INVITE_ALPHABET = string.ascii_uppercase + string.digits
_INVITE_ATTEMPTS = 5


def generate_invite_code() -> str:
    return "".join(secrets.choice(_INVITE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))


def _check_version(view: GameView, expected_version: Optional[int]) -> None:
    if expected_version is not None and view.game.version != expected_version:
        raise ConflictError(
            f"Game is at version {view.game.version}, not {expected_version}; refresh and retry"
        )


class DraftService:
    def __init__(
        self,
        store: GameStore,
        *,
        rules: Optional[DraftRules] = None,
        catalog: Optional[PlayerLookup] = None,
    ):
        self.store = store
        self.rules = rules or get_rules("NFL")
        self.catalog = catalog

    def create_game(self, initiator_id: str) -> GameView:
        for attempt in range(_INVITE_ATTEMPTS):
            game = state_machine.new_game(
                uuid4().hex,
                initiator_id,
                invite_code=generate_invite_code(),
            )
            try:
                view = self.store.create_game(game)
            except ConflictError:
                logger.warning("Invite code collision on attempt %d; regenerating", attempt + 1)
                continue
            logger.info("Game %s created by %s", game.game_id, initiator_id)
            return view
        raise ConflictError("Could not allocate a unique invite code")

    def join_game(self, game_id: str, joiner_id: str) -> GameView:
        started: List[bool] = []

        def transition(view: GameView) -> Mutation:
            game = state_machine.join(view.game, joiner_id)
            started.append(game.status is not view.game.status)
            return Mutation(game=game)

        view = self.store.apply(game_id, transition)
        if started and started[-1]:
            logger.info("Game %s drafting: %s vs %s", game_id, view.game.participant_a, joiner_id)
        return view

    def join_by_code(self, code: str, joiner_id: str) -> GameView:
        game = self.store.find_by_invite_code(code)
        if game is None:
            raise NotFoundError("Invalid invite code")
        return self.join_game(game.game_id, joiner_id)

    def get_game(self, game_id: str, caller_id: str) -> GameView:
        view = self.store.load(game_id)
        if view is None:
            raise NotFoundError(f"Game {game_id} not found")
        if not view.game.is_participant(caller_id):
            raise ForbiddenError("Not a participant in this game")
        return view

    def list_games(
        self,
        caller_id: str,
        *,
        statuses: Collection[GameStatus] | None = None,
        limit: int = 20,
    ) -> List[Game]:
        return self.store.list_for_participant(caller_id, statuses=statuses, limit=limit)

    def submit_pick(
        self,
        game_id: str,
        caller_id: str,
        player: DraftedPlayer,
        *,
        expected_version: Optional[int] = None,
    ) -> GameView:
        def transition(view: GameView) -> Mutation:
            _check_version(view, expected_version)
            game, pick = state_machine.apply_pick(
                view,
                caller_id,
                player,
                self.rules,
                catalog=self.catalog,
            )
            return Mutation(game=game, new_pick=pick)

        view = self.store.apply(game_id, transition)
        pick = view.picks[-1]
        logger.info(
            "Game %s pick %d: %s took %s (%s) at %s",
            game_id,
            pick.pick_number,
            caller_id,
            pick.player.name,
            pick.player.team,
            pick.slot,
        )
        if view.game.status is GameStatus.COMPLETE:
            logger.info("Game %s complete after %d picks", game_id, len(view.picks))
        return view

    def submit_skip(
        self,
        game_id: str,
        caller_id: str,
        *,
        expected_version: Optional[int] = None,
    ) -> GameView:
        def transition(view: GameView) -> Mutation:
            _check_version(view, expected_version)
            return Mutation(game=state_machine.apply_skip(view, caller_id, self.rules))

        view = self.store.apply(game_id, transition)
        logger.info("Game %s: %s skipped; turn -> %s", game_id, caller_id, view.game.current_turn)
        return view

    def open_slots(self, game_id: str, caller_id: str, position: Position) -> List[str]:
        """Slots a player at ``position`` could still fill for the caller."""

        view = self.get_game(game_id, caller_id)
        return self.rules.open_slots(position.value, view.filled_slots(caller_id))
