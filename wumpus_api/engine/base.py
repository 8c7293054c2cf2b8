from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal, Protocol


ActionName = Literal["move", "shoot", "pass"]


class OutcomeKind(StrEnum):
    ok = "ok"
    win = "win"
    lost = "lost"
    error = "error"


@dataclass(slots=True)
class PlayerState:
    location: int
    arrows: int
    is_alive: bool = True


@dataclass(frozen=True, slots=True)
class TurnOutcome:
    """Result of one `handle_player_turn` call.

    `extra` holds engine-specific reply fields (location, arrows, ...) that are
    echoed to the client next to status/message/perceptions.
    """

    status: OutcomeKind
    message: str
    perceptions: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.status == OutcomeKind.error

    def as_reply(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "perceptions": list(self.perceptions),
            **self.extra,
        }


class GameEngine(Protocol):
    """What the session core needs from a game-mechanics engine."""

    num_caves: int

    def initialize_player(self, player_id: str) -> int:
        """Place a new player and return their starting cave."""

    def player_state(self, player_id: str) -> PlayerState | None:
        """Return the player's state, or None for a player the engine never saw."""

    def handle_player_turn(self, player_id: str, action: ActionName, target: int | None = None) -> TurnOutcome:
        """Resolve one action for `player_id`."""

    def get_map_data(self) -> dict[str, Any]:
        """Return the public map representation."""
