from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wumpus_api.session_registry import Session


class ReadWriteLock:
    """Per-session readers/writer lock.

    Any number of readers may hold it together; a writer holds it alone.
    Once a writer is waiting, new readers queue behind it so status polling
    cannot starve an action. Not reentrant.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@contextmanager
def game_lock(*, session: "Session", exclusive: bool) -> Iterator[None]:
    """Hold `session`'s lock: exclusive for actions and joins, shared for queries."""

    guard = session.lock.write() if exclusive else session.lock.read()
    with guard:
        yield
