from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum

from wumpus_api.engine.base import GameEngine
from wumpus_api.errors import EliminatedError, GateError, NotFoundError, TurnViolationError
from wumpus_api.session_registry import Session, SessionRegistry
from wumpus_api.turn_processing.turns import current_player_id, is_player_alive


logger = logging.getLogger(__name__)


class AccessMode(StrEnum):
    # Read-only routes (status, map, mailbox).
    passive = "passive"
    # Routes that change match state (move, shoot).
    active = "active"


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    player_id: str
    access: AccessMode


@dataclass(frozen=True, slots=True)
class GateContext:
    """What a request is allowed to work with once the gate lets it through."""

    session: Session
    player_id: str
    current_player_id: str

    @property
    def session_id(self) -> str:
        return self.session.id

    @property
    def engine(self) -> GameEngine:
        return self.session.engine


@dataclass(frozen=True, slots=True)
class GateResult:
    context: GateContext | None = None
    error: GateError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> GateContext:
        if self.error is not None:
            raise self.error
        if self.context is None:
            raise RuntimeError("GateResult has neither context nor error")
        return self.context


class TurnValidator(ABC):
    """A small, composable check. Returns the failure, or None to pass."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, session: Session | None) -> GateError | None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class SessionMembershipValidator(TurnValidator):
    """The player id must belong to a live session."""

    def validate(self, *, ctx: ValidationContext, session: Session | None) -> GateError | None:
        if session is None:
            return NotFoundError("Player or game not found.")
        return None


@dataclass(frozen=True, slots=True)
class LivenessValidator(TurnValidator):
    """Eliminated players may still look, but not act."""

    gated_modes: frozenset[AccessMode] = frozenset({AccessMode.active})

    def validate(self, *, ctx: ValidationContext, session: Session | None) -> GateError | None:
        if session is None or ctx.access not in self.gated_modes:
            return None
        if not is_player_alive(session, ctx.player_id):
            return EliminatedError("You are dead and cannot act.")
        return None


@dataclass(frozen=True, slots=True)
class TurnOwnershipValidator(TurnValidator):
    """For active routes, only the current player may act."""

    def validate(self, *, ctx: ValidationContext, session: Session | None) -> GateError | None:
        if session is None or ctx.access != AccessMode.active:
            return None
        expected = current_player_id(session)
        if ctx.player_id != expected:
            return TurnViolationError(expected)
        return None


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[TurnValidator, ...]

    def evaluate(self, *, ctx: ValidationContext, registry: SessionRegistry) -> GateResult:
        """Resolve the player's session and run every check, stopping at the first failure.

        Callers that act on the result must already hold the session lock.
        """

        session = registry.lookup(ctx.player_id)
        for v in self.validators:
            error = v.validate(ctx=ctx, session=session)
            if error is not None:
                logger.info(
                    "Gate rejected %s request from %s: %s (%s)", ctx.access.value, ctx.player_id, error.kind, error
                )
                return GateResult(error=error)

        if session is None:
            return GateResult(error=NotFoundError("Player or game not found."))

        return GateResult(
            context=GateContext(
                session=session,
                player_id=ctx.player_id,
                current_player_id=current_player_id(session),
            )
        )


DEFAULT_ACCESS_PIPELINES: dict[AccessMode, ValidatorPipeline] = {
    AccessMode.passive: ValidatorPipeline(
        validators=(SessionMembershipValidator(),),
    ),
    AccessMode.active: ValidatorPipeline(
        validators=(
            SessionMembershipValidator(),
            LivenessValidator(),
            TurnOwnershipValidator(),
        )
    ),
}


def pipeline_for_access(access: AccessMode) -> ValidatorPipeline:
    pipe = DEFAULT_ACCESS_PIPELINES.get(access)
    if pipe is None:
        raise ValueError(f"Unknown access mode: {access}")
    return pipe
