from __future__ import annotations

from wumpus_api.session_registry import EngineFactory, SessionRegistry


_REGISTRY: SessionRegistry | None = None


def init_registry(*, engine_factory: EngineFactory) -> SessionRegistry:
    """Create the process-wide registry once.

    Safe to call multiple times; subsequent calls return the existing instance.
    """

    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = SessionRegistry(engine_factory=engine_factory)
    return _REGISTRY


def reset_registry_for_tests() -> None:
    """Drop the cached registry so tests start from an empty one."""

    global _REGISTRY
    _REGISTRY = None


def get_registry() -> SessionRegistry:
    if _REGISTRY is None:
        raise RuntimeError("Session registry not initialized. Call init_registry() at startup.")
    return _REGISTRY
