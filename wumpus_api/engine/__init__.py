"""Game-mechanics collaborators.

The session core only talks to engines through the `GameEngine` protocol;
`WumpusEngine` is the implementation the service runs with.
"""

from wumpus_api.engine.base import ActionName, GameEngine, OutcomeKind, PlayerState, TurnOutcome
from wumpus_api.engine.wumpus import WumpusEngine

__all__ = [
    "ActionName",
    "GameEngine",
    "OutcomeKind",
    "PlayerState",
    "TurnOutcome",
    "WumpusEngine",
]
