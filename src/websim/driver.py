from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List

from .exceptions import WebsimError
from .hosts import Substrate
from .session import CloudletPair, WebSession

logger = logging.getLogger(__name__)


class DriverError(WebsimError):
    pass


@dataclass(slots=True)
class DriverStats:
    ticks: int = 0
    pairs: int = 0
    pairs_per_session: Dict[int, int] = field(default_factory=dict)


class SessionDriver:
    """
    Tick-based clock for a set of web sessions.

    Every tick at time ``t``:
      - the substrate completes whatever finished by ``t``;
      - each session, in registration order, is notified of ``t`` and polled;
      - released cloudlets are submitted to the substrate.

    Exceptions are not caught; a misconfigured session stops the run.
    """

    def __init__(self, substrate: Substrate, *, step: float = 1.0, start_time: float = 0.0) -> None:
        if step <= 0:
            raise DriverError(f"step must be positive, got {step}")

        self._substrate = substrate
        self._step = step
        self._ticks = 0
        self._start_time = start_time
        self._sessions: List[WebSession] = []
        self._stats = DriverStats()

    @property
    def time(self) -> float:
        """The time of the next tick."""
        # multiplied rather than accumulated to avoid float drift over long runs
        return self._start_time + self._ticks * self._step

    @property
    def sessions(self) -> List[WebSession]:
        return list(self._sessions)

    @property
    def stats(self) -> DriverStats:
        return self._stats

    def add_session(self, session: WebSession) -> None:
        if any(s is session for s in self._sessions):
            raise DriverError(f"Session {session.session_id} is already registered.")
        # stats are keyed by session id
        if session.session_id in self._stats.pairs_per_session:
            raise DriverError(
                f"Another session with id {session.session_id} is registered; sessions driven together "
                f"must draw their ids from the same IdAllocator."
            )
        self._sessions.append(session)
        self._stats.pairs_per_session[session.session_id] = 0

    def step(self) -> List[CloudletPair]:
        now = self.time
        self._substrate.advance(now)

        released: List[CloudletPair] = []
        for session in self._sessions:
            session.notify_of_time(now)
            pair = session.poll_cloudlets(now)
            if pair is None:
                continue
            self._substrate.submit(pair.app, now)
            self._substrate.submit(pair.db, now)
            self._stats.pairs_per_session[session.session_id] += 1
            released.append(pair)

        self._stats.pairs += len(released)
        self._stats.ticks += 1
        self._ticks += 1
        return released

    def _last_tick(self, until: float) -> int:
        # the tolerance keeps e.g. 0.3 / 0.1 = 2.9999999999999996 from dropping the tick at `until`
        return math.floor((until - self._start_time) / self._step + 1e-9)

    def run(self, until: float) -> DriverStats:
        """
        Step until the clock passes ``until`` (the tick at ``until`` itself is included). Can be
        called again to continue the run.
        """
        logger.info(
            "Running %d session(s) from t=%s until t=%s (step=%s)",
            len(self._sessions), self.time, until, self._step,
        )
        last_tick = self._last_tick(until)
        while self._ticks <= last_tick:
            self.step()

        logger.info("Run finished at t=%s: %d ticks, %d pairs", self.time, self._stats.ticks, self._stats.pairs)
        return self._stats
