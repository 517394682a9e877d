"""Turn, slot and skip rules for a single head-to-head draft.

Every function here is pure: it receives the current :class:`GameView`
snapshot and either returns the next state or raises a
:class:`~draftduel.errors.DraftError` without touching anything. Committing
the result atomically is the storage layer's job (see
:meth:`draftduel.persistence.GameStore.apply`).

Lifecycle::

    PENDING --join--> DRAFTING --pick/skip--> DRAFTING --last pick--> COMPLETE
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Protocol, Tuple

from draftduel.config import DraftRules
from draftduel.errors import ConflictError, ForbiddenError, InvalidStateError
from draftduel.models import DraftedPlayer, Game, GameStatus, GameView, Pick


class PlayerLookup(Protocol):
    def contains(self, player: DraftedPlayer) -> bool: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_game(
    game_id: str,
    initiator_id: str,
    *,
    invite_code: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Game:
    now = now or _utcnow()
    return Game(
        game_id=game_id,
        participant_a=initiator_id,
        status=GameStatus.PENDING,
        invite_code=invite_code,
        created_at=now,
        updated_at=now,
    )


def join(game: Game, joiner_id: str, *, now: Optional[datetime] = None) -> Game:
    """Bind the second participant; participant A always drafts first.

    A participant re-joining their own game gets it back unchanged.
    """

    if game.is_participant(joiner_id):
        return game
    if game.participant_b is not None or game.status is not GameStatus.PENDING:
        raise ConflictError("Game already has two participants")
    return game.model_copy(
        update={
            "participant_b": joiner_id,
            "status": GameStatus.DRAFTING,
            "current_turn": game.participant_a,
            "updated_at": now or _utcnow(),
        }
    )


def next_turn(view: GameView, actor_id: str, rules: DraftRules) -> Optional[str]:
    """Who moves after ``actor_id`` acted, given the post-action picks.

    The turn passes to the opponent while the opponent still has an open
    slot. It never lands on a full roster: if only the actor has room left
    the actor keeps it, and once both rosters are full nobody has it.
    """

    opponent = view.game.opponent_of(actor_id)
    actor_full = view.pick_count(actor_id) >= rules.roster_size
    opponent_full = view.pick_count(opponent) >= rules.roster_size
    if actor_full and opponent_full:
        return None
    if not opponent_full:
        return opponent
    return actor_id


def _require_turn(game: Game, caller_id: str) -> None:
    if not game.is_participant(caller_id):
        raise ForbiddenError("Not a participant in this game")
    if game.status is not GameStatus.DRAFTING:
        raise InvalidStateError(f"Draft not active (status={game.status.value})")
    if game.current_turn != caller_id:
        raise ForbiddenError("Not your turn")


def apply_pick(
    view: GameView,
    caller_id: str,
    player: DraftedPlayer,
    rules: DraftRules,
    *,
    catalog: Optional[PlayerLookup] = None,
    now: Optional[datetime] = None,
) -> Tuple[Game, Pick]:
    game = view.game
    _require_turn(game, caller_id)

    if player.key in view.drafted_keys():
        raise ConflictError(f"{player.name} ({player.team}) already drafted")
    if view.pick_count(caller_id) >= rules.roster_size:
        raise ConflictError("Roster full")
    if catalog is not None and not catalog.contains(player):
        raise ConflictError(f"Unknown player {player.name} ({player.team} {player.position.value})")

    slot = rules.assign_slot(player.position.value, view.filled_slots(caller_id))
    if slot is None:
        raise ConflictError(f"No open slot for {player.position.value}")

    now = now or _utcnow()
    pick = Pick(
        game_id=game.game_id,
        pick_number=len(view.picks) + 1,
        participant_id=caller_id,
        slot=slot,
        player=player,
        created_at=now,
    )
    after = GameView(game=game, picks=view.picks + (pick,))
    turn = next_turn(after, caller_id, rules)
    status = GameStatus.COMPLETE if turn is None else GameStatus.DRAFTING
    updated = game.model_copy(update={"current_turn": turn, "status": status, "updated_at": now})
    return updated, pick


def apply_skip(
    view: GameView,
    caller_id: str,
    rules: DraftRules,
    *,
    now: Optional[datetime] = None,
) -> Game:
    game = view.game
    _require_turn(game, caller_id)

    if game.skips_used_by(caller_id) >= rules.max_skips:
        raise ConflictError("No skips left")
    turn = next_turn(view, caller_id, rules)
    if turn == caller_id:
        raise ConflictError("Opponent roster is full; skipping would not pass the turn")

    field = "skips_used_a" if caller_id == game.participant_a else "skips_used_b"
    return game.model_copy(
        update={
            field: game.skips_used_by(caller_id) + 1,
            "current_turn": turn,
            "updated_at": now or _utcnow(),
        }
    )
