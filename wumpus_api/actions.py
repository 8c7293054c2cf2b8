from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from wumpus_api.core.events import GameEvent
from wumpus_api.engine.base import TurnOutcome
from wumpus_api.errors import NotFoundError
from wumpus_api.lock import game_lock
from wumpus_api.session_registry import Enrollment, SessionRegistry
from wumpus_api.streams import Mailbox, MailboxEntry
from wumpus_api.turn_processing.targets import parse_target
from wumpus_api.turn_processing.turns import advance_turn, current_player_id
from wumpus_api.turn_processing.validators import AccessMode, ValidationContext, pipeline_for_access


logger = logging.getLogger(__name__)

ActiveAction = Literal["move", "shoot"]


@dataclass(frozen=True, slots=True)
class ActionResult:
    """What an active route replies with, plus the mailbox entries to publish afterwards."""

    reply: dict[str, Any]
    status_code: int
    advanced: bool
    mailbox_entries: list[MailboxEntry] = field(default_factory=list)


def _event_entry(*, game_id: str, player_id: str, event: GameEvent) -> MailboxEntry:
    return (Mailbox(game_id=game_id, player_id=player_id).key, event.as_fields())


def _mailbox_entries_for_turn_taken(
    *,
    game_id: str,
    players: list[str],
    actor: str,
    action: ActiveAction,
    outcome: TurnOutcome,
    current: str,
) -> list[MailboxEntry]:
    taken = GameEvent.now(
        type="turn_taken",
        game_id=game_id,
        payload={
            "player_id": actor,
            "action": action,
            "outcome": outcome.status.value,
            "current_player": current,
        },
    )
    entries = [_event_entry(game_id=game_id, player_id=p, event=taken) for p in players]

    prompt = GameEvent.now(type="your_turn", game_id=game_id, payload={"player_id": current})
    entries.append(_event_entry(game_id=game_id, player_id=current, event=prompt))
    return entries


def mailbox_entries_for_join(*, registry: SessionRegistry, enrollment: Enrollment) -> list[MailboxEntry]:
    """Tell everyone already seated that a new player arrived."""

    session = registry.get_session(enrollment.session_id)
    if session is None:
        return []

    with game_lock(session=session, exclusive=False):
        others = [p for p in session.player_order if p != enrollment.player_id]

    joined = GameEvent.now(
        type="player_joined",
        game_id=enrollment.session_id,
        payload={"player_id": enrollment.player_id, "num_players": str(enrollment.num_players)},
    )
    return [_event_entry(game_id=enrollment.session_id, player_id=p, event=joined) for p in others]


def perform_action(
    *,
    registry: SessionRegistry,
    player_id: str,
    action: ActiveAction,
    raw_target: object,
) -> ActionResult:
    """Gate, resolve and rotate one move/shoot as a single critical section.

    The turn only advances when the engine's outcome is not `error`, so a
    rejected action leaves the roster and pointer exactly as they were.
    """

    session = registry.resolve(player_id)
    ctx = ValidationContext(player_id=player_id, access=AccessMode.active)

    with game_lock(session=session, exclusive=True):
        gate = pipeline_for_access(ctx.access).evaluate(ctx=ctx, registry=registry).unwrap()
        target = parse_target(raw_target)

        outcome = gate.engine.handle_player_turn(player_id, action, target)
        advanced = not outcome.is_error
        if advanced:
            advance_turn(session)

        current = current_player_id(session)
        players = list(session.player_order)

    logger.info(
        "Game %s: %s %s -> %s (%s); current player %s",
        gate.session_id,
        player_id,
        action,
        target,
        outcome.status.value,
        current,
    )

    entries: list[MailboxEntry] = []
    if advanced:
        entries = _mailbox_entries_for_turn_taken(
            game_id=gate.session_id,
            players=players,
            actor=player_id,
            action=action,
            outcome=outcome,
            current=current,
        )

    return ActionResult(
        reply={**outcome.as_reply(), "currentPlayer": current},
        status_code=400 if outcome.is_error else 200,
        advanced=advanced,
        mailbox_entries=entries,
    )


def query_status(*, registry: SessionRegistry, player_id: str) -> dict[str, Any]:
    session = registry.resolve(player_id)
    ctx = ValidationContext(player_id=player_id, access=AccessMode.passive)

    with game_lock(session=session, exclusive=False):
        gate = pipeline_for_access(ctx.access).evaluate(ctx=ctx, registry=registry).unwrap()
        engine = gate.engine

        state = engine.player_state(player_id)
        if state is None:
            raise NotFoundError("Player or game not found.")

        outcome = engine.handle_player_turn(player_id, "pass")
        return {
            "status": outcome.status.value,
            "location": state.location,
            "arrows": state.arrows,
            "perceptions": list(outcome.perceptions),
            "map": engine.get_map_data(),
            "message": outcome.message,
            "currentPlayer": gate.current_player_id,
        }


def query_map(*, registry: SessionRegistry, player_id: str) -> dict[str, Any]:
    session = registry.resolve(player_id)
    ctx = ValidationContext(player_id=player_id, access=AccessMode.passive)

    with game_lock(session=session, exclusive=False):
        gate = pipeline_for_access(ctx.access).evaluate(ctx=ctx, registry=registry).unwrap()
        return gate.engine.get_map_data()


def mailbox_for(*, registry: SessionRegistry, player_id: str) -> Mailbox:
    session = registry.resolve(player_id)
    ctx = ValidationContext(player_id=player_id, access=AccessMode.passive)

    with game_lock(session=session, exclusive=False):
        gate = pipeline_for_access(ctx.access).evaluate(ctx=ctx, registry=registry).unwrap()
    return Mailbox(game_id=gate.session_id, player_id=player_id)
