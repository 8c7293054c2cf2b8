from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
import redis

from wumpus_api.actions import (
    ActiveAction,
    mailbox_entries_for_join,
    mailbox_for,
    perform_action,
    query_map,
    query_status,
)
from wumpus_api.api.deps import get_redis, get_registry
from wumpus_api.api.models import (
    CreateGameResponse,
    ErrorResponse,
    JoinGameResponse,
    MailboxMessage,
    MailboxResponse,
    MapResponse,
    StatusResponse,
    TargetCaveRequest,
)
from wumpus_api.session_registry import SessionRegistry
from wumpus_api.streams import MailboxEntry, publish_many, read_mailbox


logger = logging.getLogger(__name__)

router = APIRouter()
game_router = APIRouter(prefix="/api/game")

_GATE_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@game_router.post("/create", response_model=CreateGameResponse)
def create_game_route(registry: SessionRegistry = Depends(get_registry)) -> CreateGameResponse:
    enrollment = registry.create_session()

    return CreateGameResponse(
        message="New game created. Share this ID for others to join.",
        game_id=enrollment.session_id,
        player_id=enrollment.player_id,
        start_location=enrollment.start_location,
        num_caves=enrollment.num_caves,
        # The creator always moves first.
        current_player=enrollment.player_id,
    )


@game_router.post("/{game_id}/join", response_model=JoinGameResponse, responses={404: {"model": ErrorResponse}})
def join_game_route(
    game_id: str,
    registry: SessionRegistry = Depends(get_registry),
    r: redis.Redis | None = Depends(get_redis),
) -> JoinGameResponse:
    enrollment = registry.join_session(game_id)

    _notify(r=r, entries=mailbox_entries_for_join(registry=registry, enrollment=enrollment))

    return JoinGameResponse(
        message=f"Joined game {game_id}.",
        player_id=enrollment.player_id,
        start_location=enrollment.start_location,
        num_players=enrollment.num_players,
    )


@game_router.get("/{player_id}/status", response_model=StatusResponse, responses=_GATE_ERRORS)
def status_route(player_id: str, registry: SessionRegistry = Depends(get_registry)) -> StatusResponse:
    """Current perceptions and position. Allowed out of turn and after death."""

    return StatusResponse.model_validate(query_status(registry=registry, player_id=player_id))


def _notify(*, r: redis.Redis | None, entries: list[MailboxEntry]) -> None:
    """Publish mailbox entries. A Redis failure is logged and never fails the request."""

    if r is None or not entries:
        return
    try:
        publish_many(r=r, entries=entries)
    except redis.RedisError:
        logger.warning("Dropped %d mailbox entries; Redis publish failed", len(entries), exc_info=True)


def _target_from_body(payload: Any) -> object:
    # Anything but a JSON object counts as a missing target.
    if not isinstance(payload, dict):
        return None
    return TargetCaveRequest.model_validate(payload).target_cave


def _active_route(
    *,
    action: ActiveAction,
    player_id: str,
    payload: Any,
    registry: SessionRegistry,
    r: redis.Redis | None,
) -> JSONResponse:
    result = perform_action(
        registry=registry, player_id=player_id, action=action, raw_target=_target_from_body(payload)
    )
    _notify(r=r, entries=result.mailbox_entries)

    return JSONResponse(status_code=result.status_code, content=result.reply)


@game_router.post("/{player_id}/move", responses=_GATE_ERRORS)
def move_route(
    player_id: str,
    payload: Any = Body(None),
    registry: SessionRegistry = Depends(get_registry),
    r: redis.Redis | None = Depends(get_redis),
) -> JSONResponse:
    """Move to an adjacent cave. Only the current player may move."""

    return _active_route(action="move", player_id=player_id, payload=payload, registry=registry, r=r)


@game_router.post("/{player_id}/shoot", responses=_GATE_ERRORS)
def shoot_route(
    player_id: str,
    payload: Any = Body(None),
    registry: SessionRegistry = Depends(get_registry),
    r: redis.Redis | None = Depends(get_redis),
) -> JSONResponse:
    """Fire an arrow into an adjacent cave. Only the current player may shoot."""

    return _active_route(action="shoot", player_id=player_id, payload=payload, registry=registry, r=r)


@game_router.get("/{player_id}/map", response_model=MapResponse, responses=_GATE_ERRORS)
def map_route(player_id: str, registry: SessionRegistry = Depends(get_registry)) -> MapResponse:
    return MapResponse(map=query_map(registry=registry, player_id=player_id))


@game_router.get("/{player_id}/mailbox", response_model=MailboxResponse, responses=_GATE_ERRORS)
def mailbox_route(
    player_id: str,
    count: int = Query(20, ge=1, le=200),
    registry: SessionRegistry = Depends(get_registry),
    r: redis.Redis | None = Depends(get_redis),
) -> MailboxResponse:
    """Debug endpoint: read a player's mailbox Redis Stream."""

    mailbox = mailbox_for(registry=registry, player_id=player_id)
    if r is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Notifications are disabled")

    try:
        entries = read_mailbox(r=r, mailbox=mailbox, count=count)
    except redis.RedisError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Mailbox store unavailable") from e

    messages = [MailboxMessage(id=mid, fields=fields) for mid, fields in entries]
    return MailboxResponse(player_id=player_id, stream=mailbox.key, messages=messages)


router.include_router(game_router)
