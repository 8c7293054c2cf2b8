from __future__ import annotations

from collections.abc import Generator

import fakeredis
import pytest
from fastapi.testclient import TestClient

from tests._support.scripted_engine import ScriptedEngine
from wumpus_api.api.deps import get_redis, get_registry
from wumpus_api.session_registry import SessionRegistry


@pytest.fixture(autouse=True)
def _fresh_registry_singleton() -> Generator[None, None, None]:
    """Each test gets an empty process-wide registry, and leaves none behind."""

    from wumpus_api.singleton import reset_registry_for_tests

    reset_registry_for_tests()
    yield
    reset_registry_for_tests()


@pytest.fixture()
def registry() -> SessionRegistry:
    return SessionRegistry(engine_factory=ScriptedEngine)


@pytest.fixture()
def fake_redis() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def client(registry: SessionRegistry, fake_redis: fakeredis.FakeRedis) -> Generator[TestClient, None, None]:
    """TestClient wired to the test's own registry and fakeredis."""

    from wumpus_api.main import app

    def _override_redis() -> Generator[fakeredis.FakeRedis, None, None]:
        yield fake_redis

    app.dependency_overrides[get_redis] = _override_redis
    app.dependency_overrides[get_registry] = lambda: registry
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
