from __future__ import annotations

from collections.abc import Generator

import redis

from wumpus_api.config import get_settings
from wumpus_api.infra.redis_client import create_redis
from wumpus_api.session_registry import SessionRegistry
from wumpus_api.singleton import get_registry as _get_registry


def get_redis() -> Generator[redis.Redis | None, None, None]:
    """Yield a client for mailbox publishing, or None when notifications are off."""

    if not get_settings().notifications_enabled:
        yield None
        return

    client = create_redis()
    try:
        yield client
    finally:
        client.close()


def get_registry() -> SessionRegistry:
    return _get_registry()
