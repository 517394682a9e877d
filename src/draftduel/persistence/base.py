"""Storage contract shared by the SQLite store and the in-memory fake."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Collection, List, Optional, Protocol

from draftduel.models import Game, GameStatus, GameView, Pick


@dataclass(frozen=True)
class Mutation:
    """Outcome of a transition: the next game row plus at most one new pick."""

    game: Game
    new_pick: Optional[Pick] = None


Transition = Callable[[GameView], Mutation]


class GameStore(Protocol):
    def create_game(self, game: Game) -> GameView: ...

    def load(self, game_id: str) -> Optional[GameView]: ...

    def find_by_invite_code(self, code: str) -> Optional[Game]: ...

    def list_for_participant(
        self,
        participant_id: str,
        *,
        statuses: Collection[GameStatus] | None = None,
        limit: int = 20,
    ) -> List[Game]: ...

    def apply(self, game_id: str, transition: Transition) -> GameView:
        """Read, transition and commit ``game_id`` as one atomic unit.

        The committed game gets ``version + 1``. Errors raised by
        ``transition`` abort without writing. A commit that finds the stored
        version moved on raises :class:`~draftduel.errors.ConflictError`.
        """
        ...


def is_noop(view: GameView, mutation: Mutation) -> bool:
    return mutation.new_pick is None and mutation.game == view.game
