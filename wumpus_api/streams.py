from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence, cast

import redis


logger = logging.getLogger(__name__)

MailboxEntry = tuple[str, Mapping[str, str]]


@dataclass(frozen=True, slots=True)
class Mailbox:
    game_id: str
    player_id: str

    @property
    def key(self) -> str:
        return f"mailbox:{self.game_id}:{self.player_id}"


def publish_many(*, r: redis.Redis, entries: Sequence[MailboxEntry]) -> list[str]:
    """Append each entry to its mailbox stream, in order."""

    ids: list[str] = []
    for key, fields in entries:
        stream_id = r.xadd(key, {str(k): str(v) for k, v in fields.items()})
        ids.append(cast(str, stream_id))
    if ids:
        logger.debug("Published %d mailbox entries", len(ids))
    return ids


def read_mailbox(*, r: redis.Redis, mailbox: Mailbox, count: int) -> list[tuple[str, dict[str, str]]]:
    entries = r.xrange(mailbox.key, min="-", max="+", count=count)
    return [(cast(str, mid), cast(dict[str, str], fields)) for mid, fields in entries]
