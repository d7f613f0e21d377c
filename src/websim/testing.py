from __future__ import annotations

"""
Test support. Nothing here is part of the production surface of a session; it only exposes state that
tests need to assert on.
"""

from typing import Tuple

from .generators.base import CloudletGenerator, W
from .session import WebSession


def current_cloudlets(session: WebSession[W]) -> Tuple[W | None, W | None]:
    """Return the (app, db) cloudlets the session currently has in flight."""
    return session._current_app, session._current_db


class CountingGenerator(CloudletGenerator[W]):
    """Wraps a generator and counts calls to each operation."""

    def __init__(self, inner: CloudletGenerator[W]) -> None:
        self._inner = inner
        self.polls = 0
        self.peeks = 0
        self.notified: list[float] = []

    def is_empty(self) -> bool:
        return self._inner.is_empty()

    def peek(self) -> W:
        self.peeks += 1
        return self._inner.peek()

    def poll(self) -> W:
        self.polls += 1
        return self._inner.poll()

    def notify_of_time(self, time: float) -> None:
        self.notified.append(time)
        self._inner.notify_of_time(time)
