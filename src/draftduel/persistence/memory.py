"""In-process game store with one lock per game."""

from __future__ import annotations

import threading
from typing import Collection, Dict, List, Optional, Tuple

from draftduel.errors import ConflictError, NotFoundError
from draftduel.models import Game, GameStatus, GameView, Pick

from .base import Mutation, Transition, is_noop


class MemoryGameStore:
    """Dictionary-backed store honouring the same atomic-apply contract as SQLite.

    Games never share a lock, so drafts in different games proceed in
    parallel. Useful for tests and single-process development servers.
    """

    def __init__(self) -> None:
        self._games: Dict[str, Game] = {}
        self._picks: Dict[str, Tuple[Pick, ...]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, game_id: str) -> Optional[threading.Lock]:
        with self._registry_lock:
            return self._locks.get(game_id)

    def create_game(self, game: Game) -> GameView:
        with self._registry_lock:
            if game.game_id in self._games:
                raise ConflictError(f"Game {game.game_id} already exists")
            if game.invite_code and any(g.invite_code == game.invite_code for g in self._games.values()):
                raise ConflictError("Invite code already in use")
            self._games[game.game_id] = game
            self._picks[game.game_id] = ()
            self._locks[game.game_id] = threading.Lock()
        return GameView(game=game)

    def load(self, game_id: str) -> Optional[GameView]:
        lock = self._lock_for(game_id)
        if lock is None:
            return None
        with lock:
            return GameView(game=self._games[game_id], picks=self._picks[game_id])

    def find_by_invite_code(self, code: str) -> Optional[Game]:
        code = code.strip().upper()
        with self._registry_lock:
            for game in self._games.values():
                if game.invite_code == code:
                    return game
        return None

    def list_for_participant(
        self,
        participant_id: str,
        *,
        statuses: Collection[GameStatus] | None = None,
        limit: int = 20,
    ) -> List[Game]:
        with self._registry_lock:
            games = [g for g in self._games.values() if g.is_participant(participant_id)]
        if statuses:
            games = [g for g in games if g.status in statuses]
        games.sort(key=lambda g: g.updated_at, reverse=True)
        return games[:limit]

    def apply(self, game_id: str, transition: Transition) -> GameView:
        lock = self._lock_for(game_id)
        if lock is None:
            raise NotFoundError(f"Game {game_id} not found")
        with lock:
            view = GameView(game=self._games[game_id], picks=self._picks[game_id])
            mutation = transition(view)
            if is_noop(view, mutation):
                return view
            self._check(view, mutation)
            game = mutation.game.model_copy(update={"version": view.game.version + 1})
            picks = view.picks
            if mutation.new_pick is not None:
                picks = picks + (mutation.new_pick,)
            self._games[game_id] = game
            self._picks[game_id] = picks
            return GameView(game=game, picks=picks)

    def _check(self, view: GameView, mutation: Mutation) -> None:
        pick = mutation.new_pick
        if pick is None:
            return
        # Mirrors the UNIQUE constraints of the SQLite schema.
        if pick.slot in view.filled_slots(pick.participant_id):
            raise ConflictError(f"Slot {pick.slot} already filled")
        if pick.player.key in view.drafted_keys():
            raise ConflictError(f"{pick.player.name} already drafted")
