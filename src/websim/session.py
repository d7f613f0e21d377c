"""
A web session is established between a user, an application server and a database server, each
deployed on its own host. Throughout its lifetime the session keeps generating workload for the two
servers in the form of cloudlets.

The session draws on two generators, one per server, and keeps them in lock-step: a new pair of
cloudlets is released only when both cloudlets of the previous pair have finished and the next
cloudlet of *both* generators is due. A host that processes its cloudlets faster than the other
therefore does not drain its generator any faster.

Sessions are unaware of simulation time. An external clock calls ``notify_of_time`` so the
generators can refresh, and then ``poll_cloudlets`` with the current time.
"""
from __future__ import annotations

import logging
from typing import Generic, Hashable, NamedTuple, TypeVar

from .cloudlet import WebCloudlet
from .exceptions import HostBindingError, HostNotAssignedError
from .generators.base import CloudletGenerator
from .ids import IdAllocator, default_allocator

logger = logging.getLogger(__name__)

W = TypeVar("W", bound=WebCloudlet)


class CloudletPair(NamedTuple, Generic[W]):
    app: W
    db: W


class WebSession(Generic[W]):
    def __init__(
            self,
            app_generator: CloudletGenerator[W],
            db_generator: CloudletGenerator[W],
            *,
            ids: IdAllocator | None = None,
            require_hosts: bool = True,
    ) -> None:
        """
        :param app_generator: generator of cloudlets for the application server. Must not be None.
        :param db_generator: generator of cloudlets for the database server. Must not be None.
        :param ids: allocator for the session id. The process-wide default allocator is used if None.
        :param require_hosts: if True, releasing a pair before both host ids are set raises
            HostNotAssignedError. If False the cloudlets are released with a None target.
        """
        if app_generator is None:
            raise ValueError("WebSession requires an application server generator.")
        if db_generator is None:
            raise ValueError("WebSession requires a database server generator.")

        self._app_generator = app_generator
        self._db_generator = db_generator

        self._current_app: W | None = None
        self._current_db: W | None = None

        self._app_host_id: Hashable | None = None
        self._db_host_id: Hashable | None = None

        self._require_hosts = require_hosts
        self._released = 0

        allocator = ids if ids is not None else default_allocator()
        self._session_id = allocator.poll_id(WebSession)

    def __str__(self):
        return (
            f"WebSession({self._session_id}, app_host={self._app_host_id}, db_host={self._db_host_id}, "
            f"released={self._released})"
        )

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def released(self) -> int:
        """Number of cloudlet pairs released so far."""
        return self._released

    @property
    def app_host_id(self) -> Hashable | None:
        return self._app_host_id

    @app_host_id.setter
    def app_host_id(self, host_id: Hashable) -> None:
        self._app_host_id = self._bind("app", self._app_host_id, host_id)

    @property
    def db_host_id(self) -> Hashable | None:
        return self._db_host_id

    @db_host_id.setter
    def db_host_id(self, host_id: Hashable) -> None:
        self._db_host_id = self._bind("db", self._db_host_id, host_id)

    def _bind(self, side: str, current: Hashable | None, host_id: Hashable) -> Hashable:
        # Once cloudlets went out, moving a side to another host would split its stream.
        if self._released and current != host_id:
            raise HostBindingError(
                f"Session {self._session_id}: cannot move {side} host from {current!r} to {host_id!r} "
                f"after {self._released} pair(s) were released."
            )
        return host_id

    def poll_cloudlets(self, current_time: float) -> CloudletPair[W] | None:
        """
        Release the next pair of cloudlets if both servers are free and both next cloudlets are due.

        :param current_time: the current simulation time.
        :return: the (app, db) pair, or None if no pair should be sent at this time.
        """
        app_free = self._current_app is None or self._current_app.is_finished()
        db_free = self._current_db is None or self._current_db.is_finished()
        app_ready = (
            not self._app_generator.is_empty()
            and self._app_generator.peek().ideal_start_time <= current_time
        )
        db_ready = (
            not self._db_generator.is_empty()
            and self._db_generator.peek().ideal_start_time <= current_time
        )

        if not (app_free and db_free and app_ready and db_ready):
            return None

        if self._app_host_id is None or self._db_host_id is None:
            if self._require_hosts:
                raise HostNotAssignedError(
                    f"Session {self._session_id}: host ids must be set before polling cloudlets "
                    f"(app={self._app_host_id!r}, db={self._db_host_id!r})."
                )
            logger.warning(
                "Session %d releases cloudlets without a host (app=%r, db=%r)",
                self._session_id, self._app_host_id, self._db_host_id,
            )

        pair = CloudletPair(self._app_generator.poll(), self._db_generator.poll())
        self._current_app, self._current_db = pair

        pair.app.target_host_id = self._app_host_id
        pair.db.target_host_id = self._db_host_id
        pair.app.session_id = self._session_id
        pair.db.session_id = self._session_id
        self._released += 1

        logger.debug(
            "Session %d released pair %d at %s (app=%s, db=%s)",
            self._session_id, self._released, current_time,
            pair.app.ideal_start_time, pair.db.ideal_start_time,
        )
        return pair

    def notify_of_time(self, time: float) -> None:
        self._app_generator.notify_of_time(time)
        self._db_generator.notify_of_time(time)
