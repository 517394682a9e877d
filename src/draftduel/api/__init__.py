"""REST API for head-to-head drafts."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from draftduel.api.schemas import (
    GameResponse,
    GameSummaryResponse,
    JoinRequest,
    OpenSlotsResponse,
    PickRequest,
    PlayerPayload,
    PlayerResponse,
    SkipRequest,
    TeamPlayersResponse,
    TeamResponse,
)
from draftduel.auth import current_participant
from draftduel.catalog import PlayerCatalog, load_catalog_csv
from draftduel.config import get_rules
from draftduel.engine import DraftService
from draftduel.errors import DraftError, NotFoundError
from draftduel.models import DraftedPlayer, GameStatus, GameView, Position
from draftduel.models.teams import canonical_team, team_display_name
from draftduel.persistence import GameStore, SqliteGameStore
from draftduel.settings import Settings


logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "unauthenticated": 401,
    "forbidden": 403,
    "not_found": 404,
    "invalid_state": 409,
    "conflict": 409,
    "internal": 500,
}


def error_body(exc: DraftError) -> dict:
    return {"detail": {"kind": exc.kind, "message": exc.message, "retryable": exc.retryable}}


def _to_player(payload: PlayerPayload) -> DraftedPlayer:
    try:
        return DraftedPlayer(name=payload.name, team=payload.team, position=payload.position)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid player: {exc.errors()[0]['msg']}") from exc


def _team_response(code: str) -> TeamResponse:
    return TeamResponse(code=code, name=team_display_name(code))


def create_app(
    settings: Settings | None = None,
    *,
    store: GameStore | None = None,
    catalog: PlayerCatalog | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    if store is None:
        store = SqliteGameStore(settings.db_path)
    if catalog is None and settings.catalog_path is not None:
        catalog = load_catalog_csv(settings.catalog_path)
    rules = get_rules("NFL").with_max_skips(settings.max_skips)
    service = DraftService(store, rules=rules, catalog=catalog)

    app = FastAPI(title="draftduel")
    app.state.settings = settings
    app.state.service = service
    app.state.catalog = catalog

    @app.exception_handler(DraftError)
    async def draft_error_handler(request: Request, exc: DraftError) -> JSONResponse:
        status_code = STATUS_BY_KIND.get(exc.kind, 500)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status_code, content=error_body(exc))

    def to_response(view: GameView, viewer_id: str) -> GameResponse:
        return GameResponse.from_view(
            view,
            viewer_id=viewer_id,
            roster_order=rules.roster_order,
            max_skips=rules.max_skips,
        )

    def require_catalog() -> PlayerCatalog:
        if catalog is None:
            raise NotFoundError("No player catalog configured")
        return catalog

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/games", response_model=GameResponse, status_code=201)
    def create_game(caller: str = Depends(current_participant)) -> GameResponse:
        return to_response(service.create_game(caller), caller)

    @app.post("/games/join", response_model=GameResponse)
    def join_by_code(req: JoinRequest, caller: str = Depends(current_participant)) -> GameResponse:
        return to_response(service.join_by_code(req.invite_code, caller), caller)

    @app.get("/games", response_model=List[GameSummaryResponse])
    def list_games(
        status: Optional[List[GameStatus]] = Query(None),
        limit: int = Query(20, ge=1, le=100),
        caller: str = Depends(current_participant),
    ) -> List[GameSummaryResponse]:
        games = service.list_games(caller, statuses=status, limit=limit)
        return [GameSummaryResponse.from_game(game, viewer_id=caller) for game in games]

    @app.get("/games/{game_id}", response_model=GameResponse)
    def get_game(game_id: str, caller: str = Depends(current_participant)) -> GameResponse:
        return to_response(service.get_game(game_id, caller), caller)

    @app.post("/games/{game_id}/join", response_model=GameResponse)
    def join_game(game_id: str, caller: str = Depends(current_participant)) -> GameResponse:
        return to_response(service.join_game(game_id, caller), caller)

    @app.post("/games/{game_id}/picks", response_model=GameResponse)
    def submit_pick(
        game_id: str,
        req: PickRequest,
        caller: str = Depends(current_participant),
    ) -> GameResponse:
        view = service.submit_pick(
            game_id,
            caller,
            _to_player(req.player),
            expected_version=req.expected_version,
        )
        return to_response(view, caller)

    @app.post("/games/{game_id}/skip", response_model=GameResponse)
    def submit_skip(
        game_id: str,
        req: SkipRequest | None = None,
        caller: str = Depends(current_participant),
    ) -> GameResponse:
        expected_version = req.expected_version if req is not None else None
        view = service.submit_skip(game_id, caller, expected_version=expected_version)
        return to_response(view, caller)

    @app.get("/games/{game_id}/open-slots", response_model=OpenSlotsResponse)
    def open_slots(
        game_id: str,
        position: str = Query(..., min_length=1),
        caller: str = Depends(current_participant),
    ) -> OpenSlotsResponse:
        try:
            parsed = Position.parse(position)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return OpenSlotsResponse(
            position=parsed.value,
            open_slots=service.open_slots(game_id, caller, parsed),
        )

    @app.get("/catalog/teams", response_model=List[TeamResponse])
    def catalog_teams() -> List[TeamResponse]:
        return [_team_response(code) for code in require_catalog().teams()]

    @app.get("/catalog/teams/{team}/players", response_model=TeamPlayersResponse)
    def catalog_team_players(team: str) -> TeamPlayersResponse:
        players = require_catalog().players_for(team)
        if not players:
            raise NotFoundError(f"Unknown team {team!r}")
        return TeamPlayersResponse(
            team=_team_response(canonical_team(team)),
            players=[PlayerResponse.from_player(player) for player in players],
        )

    @app.post("/catalog/spin", response_model=TeamResponse)
    def catalog_spin(caller: str = Depends(current_participant)) -> TeamResponse:
        try:
            return _team_response(require_catalog().random_team())
        except LookupError as exc:
            raise NotFoundError(str(exc)) from exc

    return app
