"""Shared builders for draft tests."""

from __future__ import annotations

from draftduel.engine import DraftService
from draftduel.models import DraftedPlayer, GameView


def player(name: str, team: str, position: str) -> DraftedPlayer:
    return DraftedPlayer(name=name, team=team, position=position)


# Pick order fills QB, RB1, RB2, WR1, WR2, TE, FLEX, K, DEF.
ALICE_ROSTER = [
    player("Patrick Mahomes", "KC", "QB"),
    player("Isiah Pacheco", "KC", "RB"),
    player("Derrick Henry", "BAL", "RB"),
    player("Ja'Marr Chase", "CIN", "WR"),
    player("Tee Higgins", "CIN", "WR"),
    player("Travis Kelce", "KC", "TE"),
    player("Justin Jefferson", "MIN", "WR"),
    player("Harrison Butker", "KC", "K"),
    player("Chiefs D/ST", "KC", "DEF"),
]

BOB_ROSTER = [
    player("Josh Allen", "BUF", "QB"),
    player("James Cook", "BUF", "RB"),
    player("Saquon Barkley", "PHI", "RB"),
    player("A.J. Brown", "PHI", "WR"),
    player("DeVonta Smith", "PHI", "WR"),
    player("Dallas Goedert", "PHI", "TE"),
    player("Stefon Diggs", "HOU", "WR"),
    player("Jake Elliott", "PHI", "K"),
    player("Eagles D/ST", "PHI", "DEF"),
]


def drafting_game(service: DraftService, a: str = "alice", b: str = "bob") -> GameView:
    view = service.create_game(a)
    return service.join_game(view.game.game_id, b)


def draft_everything(service: DraftService, game_id: str, a: str = "alice", b: str = "bob") -> GameView:
    view = service.get_game(game_id, a)
    for alice_pick, bob_pick in zip(ALICE_ROSTER, BOB_ROSTER):
        view = service.submit_pick(game_id, a, alice_pick)
        view = service.submit_pick(game_id, b, bob_pick)
    return view
