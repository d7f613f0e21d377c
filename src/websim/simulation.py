# src/websim/simulation.py
from __future__ import annotations

import logging

from numpy.random import SeedSequence, default_rng

from .config import AppSettings
from .driver import DriverStats, SessionDriver
from .generators import StochasticGenerator
from .hosts import HostPool
from .ids import IdAllocator
from .session import WebSession

logger = logging.getLogger(__name__)

APP_HOST = "app-server"
DB_HOST = "db-server"


class Simulation:
    """
    Wires a complete run from settings: one app host and one db host, ``workload.sessions``
    sessions with stochastic generators bound to them, and a driver.

    Seed generation: the master seed spawns one SeedSequence per session, which in turn spawns one
    per side. A session's stream does not depend on how many other sessions exist.
    """

    def __init__(
            self,
            settings: AppSettings,
            *,
            ids: IdAllocator | None = None,
            master_seed: int | SeedSequence | None = None,
    ) -> None:
        self._settings = settings
        wl = settings.workload

        if master_seed is None:
            master_seed = wl.seed
        ss = SeedSequence(master_seed) if isinstance(master_seed, int) else master_seed

        self.hosts = HostPool()
        self.hosts.add_host(APP_HOST, speed=settings.hosts.app_speed)
        self.hosts.add_host(DB_HOST, speed=settings.hosts.db_speed)

        self.driver = SessionDriver(
            self.hosts,
            step=settings.driver.step,
            start_time=settings.driver.start_time,
        )

        self.sessions: list[WebSession] = []
        for session_ss in ss.spawn(wl.sessions):
            app_ss, db_ss = session_ss.spawn(2)
            session = WebSession(
                self._generator(wl.app_mean_interval, wl.app_length, app_ss),
                self._generator(wl.db_mean_interval, wl.db_length, db_ss),
                ids=ids,
                require_hosts=settings.session.require_hosts,
            )
            session.app_host_id = APP_HOST
            session.db_host_id = DB_HOST
            self.driver.add_session(session)
            self.sessions.append(session)

        logger.info(
            "Simulation created with %d session(s): %s",
            len(self.sessions), ", ".join(str(s.session_id) for s in self.sessions),
        )

    def _generator(self, mean_interval: float, length: float, ss: SeedSequence) -> StochasticGenerator:
        wl = self._settings.workload
        return StochasticGenerator(
            mean_interval,
            length,
            seed=default_rng(ss),
            start=self._settings.driver.start_time,
            lookahead=wl.lookahead,
            limit=wl.limit,
        )

    def run(self, until: float | None = None) -> DriverStats:
        if until is None:
            until = self._settings.driver.until
        return self.driver.run(until)
