from __future__ import annotations

from functools import partial

from wumpus_api.config import Settings
from wumpus_api.engine.wumpus import WumpusEngine
from wumpus_api.session_registry import SessionRegistry
from wumpus_api.singleton import init_registry


def init_registry_for_app(settings: Settings) -> SessionRegistry:
    # Build one engine up front so a bad map size fails at startup, not on the first create.
    WumpusEngine(settings.num_caves, settings.num_tunnels)
    return init_registry(engine_factory=partial(WumpusEngine, settings.num_caves, settings.num_tunnels))
