from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

EventType = Literal[
    "player_joined",
    "turn_taken",
    "your_turn",
]


@dataclass(frozen=True, slots=True)
class GameEvent:
    type: EventType
    game_id: str
    payload: dict[str, str]
    ts: datetime

    @staticmethod
    def now(*, type: EventType, game_id: str, payload: dict[str, str]) -> "GameEvent":
        return GameEvent(type=type, game_id=game_id, payload=payload, ts=datetime.now(tz=UTC))

    def as_fields(self) -> dict[str, str]:
        """Flat string mapping suitable for a Redis Stream entry."""

        return {"type": self.type, "game_id": self.game_id, **self.payload, "ts": self.ts.isoformat()}
