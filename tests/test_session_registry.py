from __future__ import annotations

import itertools

import pytest

from tests._support.scripted_engine import ScriptedEngine, engine_of
from wumpus_api.errors import NotFoundError
from wumpus_api.session_registry import SessionRegistry
from wumpus_api.turn_processing.turns import current_player_id


def _assert_turn_index_in_range(registry: SessionRegistry, game_id: str) -> None:
    session = registry.get_session(game_id)
    assert session is not None
    assert 0 <= session.turn_index < len(session.player_order)


def test_create_session_seats_single_player_with_first_turn(registry: SessionRegistry) -> None:
    enrollment = registry.create_session()

    session = registry.get_session(enrollment.session_id)
    assert session is not None
    assert session.player_order == [enrollment.player_id]
    assert session.turn_index == 0
    assert current_player_id(session) == enrollment.player_id
    assert enrollment.num_players == 1
    # ScriptedEngine seats the first player in cave 1.
    assert enrollment.start_location == 1
    assert enrollment.num_caves == ScriptedEngine.num_caves
    assert engine_of(registry, enrollment.session_id).player_state(enrollment.player_id) is not None


def test_sessions_get_their_own_engines(registry: SessionRegistry) -> None:
    a = registry.create_session()
    b = registry.create_session()

    assert a.session_id != b.session_id
    assert engine_of(registry, a.session_id) is not engine_of(registry, b.session_id)
    assert len(registry) == 2


def test_join_appends_to_tail_without_moving_turn(registry: SessionRegistry) -> None:
    created = registry.create_session()
    session = registry.get_session(created.session_id)
    assert session is not None
    session.turn_index = 0

    joined_b = registry.join_session(created.session_id)
    joined_c = registry.join_session(created.session_id)

    assert session.player_order == [created.player_id, joined_b.player_id, joined_c.player_id]
    assert session.turn_index == 0
    assert joined_b.num_players == 2
    assert joined_c.num_players == 3
    assert joined_c.start_location == 3
    assert joined_c.num_caves == ScriptedEngine.num_caves
    _assert_turn_index_in_range(registry, created.session_id)


def test_join_mid_rotation_keeps_current_player(registry: SessionRegistry) -> None:
    created = registry.create_session()
    second = registry.join_session(created.session_id)
    session = registry.get_session(created.session_id)
    assert session is not None
    session.turn_index = 1

    registry.join_session(created.session_id)

    assert current_player_id(session) == second.player_id


def test_join_unknown_session_is_not_found(registry: SessionRegistry) -> None:
    with pytest.raises(NotFoundError) as e:
        registry.join_session("no-such-game")

    assert e.value.http_status == 404
    assert len(registry) == 0


def test_resolve_maps_every_player_to_their_session(registry: SessionRegistry) -> None:
    first = registry.create_session()
    other = registry.create_session()
    joined = registry.join_session(first.session_id)

    assert registry.resolve(first.player_id).id == first.session_id
    assert registry.resolve(joined.player_id).id == first.session_id
    assert registry.resolve(other.player_id).id == other.session_id


def test_resolve_unknown_player_is_not_found(registry: SessionRegistry) -> None:
    registry.create_session()

    assert registry.lookup("stranger") is None
    with pytest.raises(NotFoundError):
        registry.resolve("stranger")


def test_id_source_is_used_for_sessions_and_players() -> None:
    counter = itertools.count(1)
    registry = SessionRegistry(engine_factory=ScriptedEngine, id_source=lambda: f"id-{next(counter)}")

    created = registry.create_session()
    joined = registry.join_session(created.session_id)

    assert created.session_id == "id-1"
    assert created.player_id == "id-2"
    assert joined.player_id == "id-3"


def test_discard_session_forgets_session_and_players(registry: SessionRegistry) -> None:
    created = registry.create_session()
    joined = registry.join_session(created.session_id)
    survivor = registry.create_session()

    assert registry.discard_session(created.session_id) is True

    assert registry.get_session(created.session_id) is None
    assert registry.lookup(created.player_id) is None
    assert registry.lookup(joined.player_id) is None
    assert registry.resolve(survivor.player_id).id == survivor.session_id
    assert len(registry) == 1

    with pytest.raises(NotFoundError):
        registry.join_session(created.session_id)


def test_discard_unknown_session_returns_false(registry: SessionRegistry) -> None:
    assert registry.discard_session("no-such-game") is False
