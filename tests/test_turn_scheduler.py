from __future__ import annotations

import random

import pytest

from tests._support.scripted_engine import ScriptedEngine, engine_of
from wumpus_api.session_registry import Session, SessionRegistry
from wumpus_api.turn_processing.turns import advance_turn, current_player_id, is_player_alive


def _session_with(registry: SessionRegistry, n_players: int) -> Session:
    created = registry.create_session()
    for _ in range(n_players - 1):
        registry.join_session(created.session_id)
    session = registry.get_session(created.session_id)
    assert session is not None
    return session


def test_advance_rotates_in_join_order_and_wraps(registry: SessionRegistry) -> None:
    session = _session_with(registry, 3)
    a, b, c = session.player_order

    assert current_player_id(session) == a
    assert advance_turn(session) == b
    assert advance_turn(session) == c
    assert advance_turn(session) == a
    assert session.turn_index == 0


def test_advance_skips_eliminated_player(registry: SessionRegistry) -> None:
    session = _session_with(registry, 3)
    a, b, c = session.player_order
    engine_of(registry, session.id).kill(b)

    assert current_player_id(session) == a
    assert advance_turn(session) == c
    assert session.turn_index == 2


def test_advance_skips_run_of_eliminated_players_across_wrap(registry: SessionRegistry) -> None:
    session = _session_with(registry, 4)
    a, b, c, d = session.player_order
    engine = engine_of(registry, session.id)
    engine.kill(d)
    engine.kill(a)
    session.turn_index = 2

    assert advance_turn(session) == b


def test_advance_returns_to_sole_survivor(registry: SessionRegistry) -> None:
    session = _session_with(registry, 3)
    a, b, c = session.player_order
    engine = engine_of(registry, session.id)
    engine.kill(b)
    engine.kill(c)

    assert advance_turn(session) == a
    assert session.turn_index == 0


def test_single_player_session_keeps_the_turn(registry: SessionRegistry) -> None:
    session = _session_with(registry, 1)

    assert advance_turn(session) == session.player_order[0]
    assert session.turn_index == 0


def test_advance_terminates_when_everyone_is_eliminated(registry: SessionRegistry) -> None:
    session = _session_with(registry, 3)
    engine = engine_of(registry, session.id)
    for p in session.player_order:
        engine.kill(p)

    advance_turn(session)

    assert 0 <= session.turn_index < 3
    # One step plus a full rotation of skips lands one past the start.
    assert session.turn_index == 1


def test_advance_never_touches_player_order(registry: SessionRegistry) -> None:
    session = _session_with(registry, 3)
    before = list(session.player_order)
    engine_of(registry, session.id).kill(before[1])

    advance_turn(session)
    advance_turn(session)

    assert session.player_order == before


def test_player_unknown_to_engine_counts_as_eliminated(registry: SessionRegistry) -> None:
    session = _session_with(registry, 2)
    a, b = session.player_order
    del engine_of(registry, session.id).game_state[b]

    assert is_player_alive(session, b) is False
    assert advance_turn(session) == a


@pytest.mark.parametrize("seed", range(25))
def test_advance_lands_on_living_player_within_one_rotation(seed: int) -> None:
    rng = random.Random(seed)
    registry = SessionRegistry(engine_factory=ScriptedEngine)
    session = _session_with(registry, rng.randint(1, 7))
    engine = engine_of(registry, session.id)
    n = len(session.player_order)

    alive = [p for p in session.player_order if rng.random() < 0.5] or [rng.choice(session.player_order)]
    for p in session.player_order:
        if p not in alive:
            engine.kill(p)
    session.turn_index = rng.randrange(n)
    start = session.turn_index

    current = advance_turn(session)

    assert 0 <= session.turn_index < n
    assert current in alive
    expected = next(
        session.player_order[(start + step) % n]
        for step in range(1, n + 1)
        if session.player_order[(start + step) % n] in alive
    )
    assert current == expected
