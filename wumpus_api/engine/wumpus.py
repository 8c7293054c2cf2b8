from __future__ import annotations

import logging
import random
from typing import Any

from wumpus_api.engine.base import ActionName, OutcomeKind, PlayerState, TurnOutcome
from wumpus_api.engine.cave_map import CaveMap, generate_cave_map


logger = logging.getLogger(__name__)

STARTING_ARROWS = 5
NUM_PITS = 2
NUM_BATS = 2
# Chance that a missed arrow wakes the wumpus and it moves one tunnel.
WUMPUS_MOVE_CHANCE = 0.75

STENCH = "You smell a terrible stench."
DRAFT = "You feel a cold draft."
WINGS = "You hear flapping wings."


class WumpusEngine:
    """Multiplayer Hunt the Wumpus.

    All players share one cave map, one wumpus, and the same pits and bats.
    The engine knows nothing about turn order; the session core decides who
    may call `handle_player_turn` and when.
    """

    def __init__(self, num_caves: int = 10, num_tunnels: int = 15, *, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self.cave_map: CaveMap = generate_cave_map(num_caves=num_caves, num_tunnels=num_tunnels, rng=self._rng)
        self.num_caves = num_caves

        hazard_count = 1 + NUM_PITS + NUM_BATS
        if num_caves <= hazard_count:
            raise ValueError(f"At least {hazard_count + 1} caves required to leave room for players")

        hazards = self._rng.sample(self.cave_map.caves, hazard_count)
        self.wumpus_cave: int = hazards[0]
        self.pits: frozenset[int] = frozenset(hazards[1 : 1 + NUM_PITS])
        self.bats: frozenset[int] = frozenset(hazards[1 + NUM_PITS :])
        self.wumpus_alive = True

        self.game_state: dict[str, PlayerState] = {}

    def _safe_caves(self) -> list[int]:
        return [c for c in self.cave_map.caves if c != self.wumpus_cave and c not in self.pits and c not in self.bats]

    def initialize_player(self, player_id: str) -> int:
        existing = self.game_state.get(player_id)
        if existing is not None:
            return existing.location

        location = self._rng.choice(self._safe_caves())
        self.game_state[player_id] = PlayerState(location=location, arrows=STARTING_ARROWS)
        logger.debug("Player %s starts in cave %s", player_id, location)
        return location

    def player_state(self, player_id: str) -> PlayerState | None:
        return self.game_state.get(player_id)

    def get_map_data(self) -> dict[str, Any]:
        return self.cave_map.as_dict()

    def perceptions_for(self, cave: int) -> list[str]:
        nearby = self.cave_map.neighbours(cave)
        out: list[str] = []
        if self.wumpus_alive and self.wumpus_cave in nearby:
            out.append(STENCH)
        if nearby & self.pits:
            out.append(DRAFT)
        if nearby & self.bats:
            out.append(WINGS)
        return out

    def _outcome(self, state: PlayerState, status: OutcomeKind, message: str) -> TurnOutcome:
        perceptions = self.perceptions_for(state.location) if state.is_alive else []
        return TurnOutcome(
            status=status,
            message=message,
            perceptions=perceptions,
            extra={"location": state.location, "arrows": state.arrows},
        )

    def handle_player_turn(self, player_id: str, action: ActionName, target: int | None = None) -> TurnOutcome:
        state = self.game_state.get(player_id)
        if state is None:
            return TurnOutcome(status=OutcomeKind.error, message="Unknown player.")

        if not state.is_alive:
            return self._outcome(state, OutcomeKind.lost, "You are dead.")

        if action == "pass":
            if not self.wumpus_alive:
                return self._outcome(state, OutcomeKind.win, "The Wumpus has been slain.")
            return self._outcome(state, OutcomeKind.ok, f"You are in cave {state.location}.")

        if not self.wumpus_alive:
            return self._outcome(state, OutcomeKind.error, "The hunt is over; the Wumpus is already dead.")

        if action == "move":
            return self._move(state, target)
        if action == "shoot":
            return self._shoot(state, target)
        return self._outcome(state, OutcomeKind.error, f"Unknown action: {action}")

    def _move(self, state: PlayerState, target: int | None) -> TurnOutcome:
        if target is None or not self.cave_map.is_adjacent(state.location, target):
            return self._outcome(state, OutcomeKind.error, f"Cave {target} is not connected to cave {state.location}.")

        state.location = target
        notes: list[str] = []

        while True:
            if state.location == self.wumpus_cave:
                state.is_alive = False
                notes.append("You walked into the Wumpus's lair and were eaten.")
                return self._outcome(state, OutcomeKind.lost, " ".join(notes))
            if state.location in self.pits:
                state.is_alive = False
                notes.append("You fell into a bottomless pit.")
                return self._outcome(state, OutcomeKind.lost, " ".join(notes))
            if state.location in self.bats:
                landing = self._rng.choice([c for c in self.cave_map.caves if c not in self.bats])
                notes.append(f"Giant bats carried you to cave {landing}.")
                state.location = landing
                continue
            break

        notes.append(f"You are in cave {state.location}.")
        return self._outcome(state, OutcomeKind.ok, " ".join(notes))

    def _shoot(self, state: PlayerState, target: int | None) -> TurnOutcome:
        if state.arrows <= 0:
            return self._outcome(state, OutcomeKind.error, "You have no arrows left.")
        if target is None or not self.cave_map.is_adjacent(state.location, target):
            return self._outcome(state, OutcomeKind.error, f"Cave {target} is not connected to cave {state.location}.")

        state.arrows -= 1
        if target == self.wumpus_cave:
            self.wumpus_alive = False
            logger.info("Wumpus slain in cave %s", target)
            return self._outcome(state, OutcomeKind.win, "Your arrow struck the Wumpus. You win!")

        message = "Your arrow missed."
        if self._rng.random() < WUMPUS_MOVE_CHANCE:
            self.wumpus_cave = self._rng.choice(sorted(self.cave_map.neighbours(self.wumpus_cave)))
            message += " You hear the Wumpus stir."
            for other in self.game_state.values():
                if other.is_alive and other.location == self.wumpus_cave:
                    other.is_alive = False

        if not state.is_alive:
            return self._outcome(state, OutcomeKind.lost, message + " The Wumpus found you.")
        return self._outcome(state, OutcomeKind.ok, message)
