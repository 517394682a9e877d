import threading
import time
from datetime import datetime, timezone

import pytest

from draftduel.engine import DraftService
from draftduel.errors import ConflictError, DraftError, ForbiddenError, NotFoundError, StorageError
from draftduel.models import GameStatus, GameView, Pick
from draftduel.persistence import MemoryGameStore, Mutation, SqliteGameStore

from tests.factories import ALICE_ROSTER, BOB_ROSTER, draft_everything, drafting_game, player


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryGameStore()
    return SqliteGameStore(tmp_path / "draft.sqlite")


def _raw_pick(view: GameView, participant_id: str, slot: str, drafted) -> Pick:
    return Pick(
        game_id=view.game.game_id,
        pick_number=len(view.picks) + 1,
        participant_id=participant_id,
        slot=slot,
        player=drafted,
        created_at=datetime.now(timezone.utc),
    )


def test_round_trip_through_store(store):
    service = DraftService(store)
    game_id = drafting_game(service).game.game_id
    service.submit_pick(game_id, "alice", ALICE_ROSTER[3])
    service.submit_skip(game_id, "bob")

    view = store.load(game_id)
    assert view.game.version == 3
    assert view.game.skips_used_b == 1
    assert view.game.current_turn == "alice"
    assert [(p.pick_number, p.slot, p.player.key) for p in view.picks] == [(1, "WR1", ALICE_ROSTER[3].key)]
    assert store.find_by_invite_code(view.game.invite_code.lower()) == view.game
    assert store.load("missing") is None
    assert store.find_by_invite_code("NOPE00") is None


def test_sqlite_state_survives_new_store_instance(tmp_path):
    path = tmp_path / "nested" / "draft.sqlite"
    service = DraftService(SqliteGameStore(path))
    game_id = drafting_game(service).game.game_id
    before = draft_everything(service, game_id)

    reopened = SqliteGameStore(path)
    assert reopened.load(game_id) == before
    assert reopened.load(game_id).game.status is GameStatus.COMPLETE


def test_failed_transition_writes_nothing(store):
    service = DraftService(store)
    view = drafting_game(service)

    def transition(current: GameView) -> Mutation:
        raise ConflictError("nope")

    with pytest.raises(ConflictError):
        store.apply(view.game.game_id, transition)
    assert store.load(view.game.game_id) == view


def test_apply_unknown_game(store):
    with pytest.raises(NotFoundError):
        store.apply("missing", lambda view: Mutation(game=view.game))


def test_noop_transition_keeps_version(store):
    view = DraftService(store).create_game("alice")
    same = store.apply(view.game.game_id, lambda current: Mutation(game=current.game))
    assert same.game.version == view.game.version


def test_store_rejects_second_pick_into_filled_slot(store):
    service = DraftService(store)
    game_id = drafting_game(service).game.game_id
    service.submit_pick(game_id, "alice", ALICE_ROSTER[0])

    def transition(view: GameView) -> Mutation:
        pick = _raw_pick(view, "alice", "QB", player("Lamar Jackson", "BAL", "QB"))
        return Mutation(game=view.game, new_pick=pick)

    with pytest.raises(ConflictError):
        store.apply(game_id, transition)
    assert len(store.load(game_id).picks) == 1


def test_store_rejects_same_player_twice(store):
    service = DraftService(store)
    game_id = drafting_game(service).game.game_id
    service.submit_pick(game_id, "alice", ALICE_ROSTER[0])

    def transition(view: GameView) -> Mutation:
        pick = _raw_pick(view, "bob", "QB", player("Patrick Mahomes", "Chiefs", "QB"))
        return Mutation(game=view.game, new_pick=pick)

    with pytest.raises(ConflictError):
        store.apply(game_id, transition)
    assert len(store.load(game_id).picks) == 1


def test_duplicate_invite_code_rejected(store):
    service = DraftService(store)
    first = service.create_game("alice").game
    clash = first.model_copy(update={"game_id": "other"})
    with pytest.raises(ConflictError):
        store.create_game(clash)


def test_list_most_recent_first(store):
    service = DraftService(store)
    older = service.create_game("alice").game
    newer = drafting_game(service, "bob", "alice").game
    service.submit_pick(newer.game_id, "bob", BOB_ROSTER[0])

    games = store.list_for_participant("alice")
    assert [g.game_id for g in games] == [newer.game_id, older.game_id]
    assert [g.game_id for g in store.list_for_participant("alice", limit=1)] == [newer.game_id]
    assert store.list_for_participant("alice", statuses=[GameStatus.COMPLETE]) == []


class SlowCatalog:
    """Accepts everyone, slowly, to hold a transition open."""

    def contains(self, drafted) -> bool:
        time.sleep(0.05)
        return True


def _race(calls):
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def run(index, call):
        barrier.wait()
        try:
            outcomes[index] = call()
        except DraftError as exc:
            outcomes[index] = exc

    threads = [threading.Thread(target=run, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    return outcomes


@pytest.mark.parametrize("catalog", [None, SlowCatalog()])
def test_concurrent_picks_by_same_participant_commit_once(store, catalog):
    service = DraftService(store, catalog=catalog)
    game_id = drafting_game(service).game.game_id

    outcomes = _race(
        [
            lambda: service.submit_pick(game_id, "alice", ALICE_ROSTER[0]),
            lambda: service.submit_pick(game_id, "alice", ALICE_ROSTER[1]),
        ]
    )

    successes = [o for o in outcomes if isinstance(o, GameView)]
    failures = [o for o in outcomes if isinstance(o, DraftError)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], (ForbiddenError, ConflictError))

    view = store.load(game_id)
    assert len(view.picks) == 1
    assert view.game.current_turn == "bob"
    assert view.game.version == 2


def test_concurrent_picks_from_both_participants_on_same_snapshot(store):
    service = DraftService(store, catalog=SlowCatalog())
    snapshot = drafting_game(service)
    game_id = snapshot.game.game_id
    version = snapshot.game.version

    outcomes = _race(
        [
            lambda: service.submit_pick(game_id, "alice", ALICE_ROSTER[0], expected_version=version),
            lambda: service.submit_pick(game_id, "bob", BOB_ROSTER[0], expected_version=version),
        ]
    )

    assert sum(isinstance(o, GameView) for o in outcomes) == 1
    assert isinstance(outcomes[1], (ForbiddenError, ConflictError))
    view = store.load(game_id)
    assert [p.participant_id for p in view.picks] == ["alice"]


def test_concurrent_pick_and_skip_commit_once(store):
    service = DraftService(store, catalog=SlowCatalog())
    game_id = drafting_game(service).game.game_id

    outcomes = _race(
        [
            lambda: service.submit_pick(game_id, "alice", ALICE_ROSTER[0]),
            lambda: service.submit_skip(game_id, "alice"),
        ]
    )

    assert sum(isinstance(o, GameView) for o in outcomes) == 1
    view = store.load(game_id)
    assert view.game.current_turn == "bob"
    assert len(view.picks) + view.game.skips_used_a == 1


def test_concurrent_joins_bind_one_opponent(store):
    service = DraftService(store)
    game_id = service.create_game("alice").game.game_id

    outcomes = _race(
        [
            lambda: service.join_game(game_id, "bob"),
            lambda: service.join_game(game_id, "carol"),
        ]
    )

    assert sum(isinstance(o, GameView) for o in outcomes) == 1
    assert sum(isinstance(o, ConflictError) for o in outcomes) == 1
    assert store.load(game_id).game.participant_b in {"bob", "carol"}


def test_memory_store_games_do_not_block_each_other():
    store = MemoryGameStore()
    service = DraftService(store)
    slow_game = drafting_game(service).game.game_id
    fast_game = drafting_game(service, "carol", "dave").game.game_id
    entered = threading.Event()
    release = threading.Event()

    def hold(view: GameView) -> Mutation:
        entered.set()
        release.wait(timeout=5)
        return Mutation(game=view.game)

    worker = threading.Thread(target=store.apply, args=(slow_game, hold))
    worker.start()
    try:
        assert entered.wait(timeout=5)
        view = service.submit_pick(fast_game, "carol", ALICE_ROSTER[0])
        assert view.game.current_turn == "dave"
        assert not release.is_set()
    finally:
        release.set()
        worker.join(timeout=5)


def _corrupt(path) -> None:
    path.write_bytes(b"this is not a sqlite database\n" * 256)


def test_sqlite_failures_surface_as_storage_errors(tmp_path, caplog):
    path = tmp_path / "draft.sqlite"
    store = SqliteGameStore(path)
    game_id = DraftService(store).create_game("alice").game.game_id
    _corrupt(path)

    with caplog.at_level("ERROR"):
        with pytest.raises(StorageError) as excinfo:
            store.load(game_id)

    assert excinfo.value.kind == "internal"
    assert excinfo.value.retryable is False
    assert "Storage failure during load" in caplog.text
    with pytest.raises(StorageError):
        store.apply(game_id, lambda view: Mutation(game=view.game))


def test_sqlite_rejects_corrupt_database_on_open(tmp_path):
    path = tmp_path / "draft.sqlite"
    _corrupt(path)

    with pytest.raises(StorageError):
        SqliteGameStore(path)
