from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire format is camelCase; Python attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TargetCaveRequest(CamelModel):
    # Coerced by parse_target; unusable values are a 400, never a 422.
    target_cave: Any = None


class ErrorResponse(BaseModel):
    status: str
    message: str


class CreateGameResponse(CamelModel):
    status: str = "ok"
    message: str
    game_id: str
    player_id: str
    start_location: int
    num_caves: int
    current_player: str


class JoinGameResponse(CamelModel):
    status: str = "ok"
    message: str
    player_id: str
    start_location: int
    num_players: int


class StatusResponse(CamelModel):
    status: str
    location: int
    arrows: int
    perceptions: list[str] = Field(default_factory=list)
    map: dict[str, Any]
    message: str
    current_player: str


class MapResponse(BaseModel):
    status: str = "ok"
    map: dict[str, Any]


class MailboxMessage(BaseModel):
    id: str
    fields: dict[str, str]


class MailboxResponse(CamelModel):
    player_id: str
    stream: str
    messages: list[MailboxMessage] = Field(default_factory=list)
