"""SQLite-backed game store."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Collection, Iterator, List, Optional

from draftduel.errors import ConflictError, NotFoundError, StorageError
from draftduel.models import DraftedPlayer, Game, GameStatus, GameView, Pick

from .base import Transition, is_noop


logger = logging.getLogger(__name__)


class SqliteGameStore:
    """Games and their append-only picks in one SQLite file.

    Every mutation runs inside ``BEGIN IMMEDIATE`` so the read of the current
    state and the version-checked write form a single unit; a second writer
    waits on the database lock (up to ``busy_timeout`` seconds) and then sees
    the committed state.
    """

    def __init__(self, db_path: Path | str, *, busy_timeout: float = 5.0):
        self._use_uri = False
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: Path | str = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._busy_timeout = busy_timeout
        with self._storage_errors("ensure_schema"):
            self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(
            self.db_path,
            timeout=self._busy_timeout,
            isolation_level=None,
            uri=self._use_uri,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _transaction(self, *, immediate: bool = True) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            conn.commit()
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS games (
                    id TEXT PRIMARY KEY,
                    participant_a TEXT NOT NULL,
                    participant_b TEXT,
                    status TEXT NOT NULL,
                    current_turn TEXT,
                    skips_used_a INTEGER NOT NULL DEFAULT 0,
                    skips_used_b INTEGER NOT NULL DEFAULT 0,
                    invite_code TEXT UNIQUE,
                    version INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS picks (
                    game_id TEXT NOT NULL REFERENCES games(id),
                    pick_number INTEGER NOT NULL,
                    participant_id TEXT NOT NULL,
                    slot TEXT NOT NULL,
                    player_name TEXT NOT NULL,
                    player_team TEXT NOT NULL,
                    player_position TEXT NOT NULL,
                    player_key TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    PRIMARY KEY (game_id, pick_number),
                    UNIQUE (game_id, participant_id, slot),
                    UNIQUE (game_id, player_key)
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS games_participant_a ON games(participant_a)")
            conn.execute("CREATE INDEX IF NOT EXISTS games_participant_b ON games(participant_b)")

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.IntegrityError as exc:
            logger.warning("Integrity conflict during %s: %s", action, exc)
            raise ConflictError(f"Conflicting write during {action}; refresh and retry") from exc
        except sqlite3.Error as exc:
            logger.exception("Storage failure during %s", action)
            raise StorageError(f"Storage failure during {action}") from exc

    def create_game(self, game: Game) -> GameView:
        with self._storage_errors("create_game"):
            with self._transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO games (
                        id, participant_a, participant_b, status, current_turn,
                        skips_used_a, skips_used_b, invite_code, version,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        game.game_id,
                        game.participant_a,
                        game.participant_b,
                        game.status.value,
                        game.current_turn,
                        game.skips_used_a,
                        game.skips_used_b,
                        game.invite_code,
                        game.version,
                        game.created_at.isoformat(),
                        game.updated_at.isoformat(),
                    ),
                )
        return GameView(game=game)

    def load(self, game_id: str) -> Optional[GameView]:
        with self._storage_errors("load"):
            with self._transaction(immediate=False) as conn:
                return self._load(conn, game_id)

    def find_by_invite_code(self, code: str) -> Optional[Game]:
        with self._storage_errors("find_by_invite_code"):
            with self._transaction(immediate=False) as conn:
                row = conn.execute(
                    "SELECT * FROM games WHERE invite_code = ?",
                    (code.strip().upper(),),
                ).fetchone()
        return self._row_to_game(row) if row is not None else None

    def list_for_participant(
        self,
        participant_id: str,
        *,
        statuses: Collection[GameStatus] | None = None,
        limit: int = 20,
    ) -> List[Game]:
        query = "SELECT * FROM games WHERE (participant_a = ? OR participant_b = ?)"
        params: list[str | int] = [participant_id, participant_id]
        if statuses:
            query += f" AND status IN ({', '.join('?' for _ in statuses)})"
            params.extend(status.value for status in statuses)
        query += " ORDER BY updated_at DESC, rowid DESC LIMIT ?"
        params.append(limit)
        with self._storage_errors("list_for_participant"):
            with self._transaction(immediate=False) as conn:
                rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_game(row) for row in rows]

    def apply(self, game_id: str, transition: Transition) -> GameView:
        with self._storage_errors("apply"):
            with self._transaction() as conn:
                view = self._load(conn, game_id)
                if view is None:
                    raise NotFoundError(f"Game {game_id} not found")
                mutation = transition(view)
                if is_noop(view, mutation):
                    return view
                game = mutation.game.model_copy(update={"version": view.game.version + 1})
                cursor = conn.execute(
                    """
                    UPDATE games
                    SET participant_b = ?,
                        status = ?,
                        current_turn = ?,
                        skips_used_a = ?,
                        skips_used_b = ?,
                        version = ?,
                        updated_at = ?
                    WHERE id = ? AND version = ?
                    """,
                    (
                        game.participant_b,
                        game.status.value,
                        game.current_turn,
                        game.skips_used_a,
                        game.skips_used_b,
                        game.version,
                        game.updated_at.isoformat(),
                        game_id,
                        view.game.version,
                    ),
                )
                if cursor.rowcount != 1:
                    raise ConflictError("Game changed concurrently; refresh and retry")
                picks = view.picks
                if mutation.new_pick is not None:
                    self._insert_pick(conn, mutation.new_pick)
                    picks = picks + (mutation.new_pick,)
                return GameView(game=game, picks=picks)

    def _insert_pick(self, conn: sqlite3.Connection, pick: Pick) -> None:
        conn.execute(
            """
            INSERT INTO picks (
                game_id, pick_number, participant_id, slot, player_name,
                player_team, player_position, player_key, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                pick.game_id,
                pick.pick_number,
                pick.participant_id,
                pick.slot,
                pick.player.name,
                pick.player.team,
                pick.player.position.value,
                pick.player.key,
                pick.created_at.isoformat(),
            ),
        )

    def _load(self, conn: sqlite3.Connection, game_id: str) -> Optional[GameView]:
        row = conn.execute("SELECT * FROM games WHERE id = ?", (game_id,)).fetchone()
        if row is None:
            return None
        pick_rows = conn.execute(
            "SELECT * FROM picks WHERE game_id = ? ORDER BY pick_number",
            (game_id,),
        ).fetchall()
        return GameView(
            game=self._row_to_game(row),
            picks=tuple(self._row_to_pick(pick_row) for pick_row in pick_rows),
        )

    def _row_to_game(self, row: sqlite3.Row) -> Game:
        return Game(
            game_id=row["id"],
            participant_a=row["participant_a"],
            participant_b=row["participant_b"],
            status=GameStatus(row["status"]),
            current_turn=row["current_turn"],
            skips_used_a=row["skips_used_a"],
            skips_used_b=row["skips_used_b"],
            invite_code=row["invite_code"],
            version=row["version"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_pick(self, row: sqlite3.Row) -> Pick:
        return Pick(
            game_id=row["game_id"],
            pick_number=row["pick_number"],
            participant_id=row["participant_id"],
            slot=row["slot"],
            player=DraftedPlayer(
                name=row["player_name"],
                team=row["player_team"],
                position=row["player_position"],
            ),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
