from __future__ import annotations

import math
import re

from wumpus_api.errors import InvalidInputError


# Leading integer after optional whitespace; trailing junk is ignored ("5abc" -> 5).
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_target(raw: object) -> int:
    """Coerce a client-supplied `targetCave` to an int, leniently.

    Accepts ints, finite floats (truncated) and strings that start with an
    integer. Range checks are left to the engine.
    """

    if isinstance(raw, bool):
        raise InvalidInputError("Invalid targetCave provided.")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and math.isfinite(raw):
        return int(raw)
    if isinstance(raw, str):
        m = _LEADING_INT.match(raw)
        if m is not None:
            return int(m.group(1))
    raise InvalidInputError("Invalid targetCave provided.")
