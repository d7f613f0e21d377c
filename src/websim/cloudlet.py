from __future__ import annotations

"""Cloudlets: the work units a web session sends to its application and database hosts."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Hashable


class CloudletStatus(IntEnum):
    CREATED = 0
    DISPATCHED = 1
    FINISHED = 2
    FAILED = 9


@dataclass(slots=True, eq=False)
class WebCloudlet:
    """
    A single unit of work destined for one host.

    Generators create cloudlets with an ideal start time. The session assigns ``target_host_id`` and
    ``session_id`` when it releases the cloudlet, and the execution substrate moves it through
    DISPATCHED to FINISHED (or FAILED). Both terminal states count as finished.

    Cloudlets compare by identity; two cloudlets with the same attributes are still different work.
    """

    ideal_start_time: float
    length: float = 0.0
    data: Any = None
    status: CloudletStatus = CloudletStatus.CREATED
    target_host_id: Hashable | None = None
    session_id: int | None = None
    dispatch_time: float | None = None
    finish_time: float | None = None

    def is_finished(self) -> bool:
        return self.status in (CloudletStatus.FINISHED, CloudletStatus.FAILED)

    def mark_dispatched(self, time: float) -> None:
        self.status = CloudletStatus.DISPATCHED
        self.dispatch_time = time

    def mark_finished(self, time: float) -> None:
        self.status = CloudletStatus.FINISHED
        self.finish_time = time

    def mark_failed(self, time: float) -> None:
        self.status = CloudletStatus.FAILED
        self.finish_time = time

    @property
    def delay(self) -> float | None:
        """Time between the ideal start and the actual dispatch, or None if not dispatched."""
        if self.dispatch_time is None:
            return None
        return self.dispatch_time - self.ideal_start_time

    def __str__(self):
        return (
            f"WebCloudlet(ideal_start_time={self.ideal_start_time}, status={self.status.name}, "
            f"target_host_id={self.target_host_id}, session_id={self.session_id})"
        )
