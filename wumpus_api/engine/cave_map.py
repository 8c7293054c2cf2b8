from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class CaveMap:
    """Undirected tunnel graph over caves numbered 1..num_caves."""

    num_caves: int
    tunnels: dict[int, frozenset[int]]

    @property
    def caves(self) -> list[int]:
        return list(range(1, self.num_caves + 1))

    def neighbours(self, cave: int) -> frozenset[int]:
        return self.tunnels.get(cave, frozenset())

    def is_adjacent(self, a: int, b: int) -> bool:
        return b in self.neighbours(a)

    @property
    def num_tunnels(self) -> int:
        return sum(len(n) for n in self.tunnels.values()) // 2

    def as_dict(self) -> dict[str, Any]:
        return {
            "numCaves": self.num_caves,
            "tunnels": {str(c): sorted(self.tunnels[c]) for c in self.caves},
        }


def generate_cave_map(*, num_caves: int, num_tunnels: int, rng: random.Random) -> CaveMap:
    """Build a connected map with exactly `num_tunnels` tunnels.

    A shuffled ring guarantees connectivity; the remaining tunnels are random chords.
    """

    if num_caves < 3:
        raise ValueError("At least 3 caves required")
    max_tunnels = num_caves * (num_caves - 1) // 2
    if num_tunnels < num_caves or num_tunnels > max_tunnels:
        raise ValueError(f"num_tunnels must be between {num_caves} and {max_tunnels} for {num_caves} caves")

    caves = list(range(1, num_caves + 1))
    ring = caves[:]
    rng.shuffle(ring)

    edges: set[frozenset[int]] = set()
    for i, cave in enumerate(ring):
        edges.add(frozenset((cave, ring[(i + 1) % num_caves])))

    chords = [frozenset((a, b)) for a in caves for b in caves if a < b and frozenset((a, b)) not in edges]
    rng.shuffle(chords)
    edges.update(chords[: num_tunnels - num_caves])

    adjacency: dict[int, set[int]] = {c: set() for c in caves}
    for edge in edges:
        a, b = tuple(edge)
        adjacency[a].add(b)
        adjacency[b].add(a)

    return CaveMap(num_caves=num_caves, tunnels={c: frozenset(n) for c, n in adjacency.items()})
