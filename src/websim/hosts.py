from __future__ import annotations

"""
A minimal execution substrate for driving sessions.

Each host is a FIFO single server with a fixed speed: a cloudlet starts when the host is free and
takes ``length / speed`` to complete. This is only detailed enough to make hosts finish cloudlets at
different paces; it is not a capacity model.
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Protocol, Tuple

from .cloudlet import WebCloudlet
from .exceptions import UnknownHostError

logger = logging.getLogger(__name__)


class Substrate(Protocol):
    """Protocol for anything that can run dispatched cloudlets."""

    def submit(self, cloudlet: WebCloudlet, time: float) -> None:
        """Accept ``cloudlet`` for execution at ``time`` and mark it dispatched."""

    def advance(self, time: float) -> int:
        """Mark every cloudlet completed by ``time`` as finished; return how many were."""


@dataclass(slots=True)
class Host:
    host_id: Hashable
    speed: float
    busy_until: float = 0.0
    completed: int = 0


@dataclass(slots=True)
class HostPool(Substrate):
    hosts: Dict[Hashable, Host] = field(default_factory=dict)
    _pending: List[Tuple[float, int, WebCloudlet]] = field(default_factory=list)
    _seq: int = 0

    def add_host(self, host_id: Hashable, speed: float = 1.0) -> Host:
        if speed <= 0:
            raise ValueError(f"Host speed must be positive, got {speed}")
        host = Host(host_id=host_id, speed=speed)
        self.hosts[host_id] = host
        return host

    def submit(self, cloudlet: WebCloudlet, time: float) -> None:
        try:
            host = self.hosts[cloudlet.target_host_id]
        except KeyError as exc:
            raise UnknownHostError(f"HostPool: unknown host {cloudlet.target_host_id!r}") from exc

        cloudlet.mark_dispatched(time)
        start = max(time, host.busy_until)
        host.busy_until = start + cloudlet.length / host.speed

        # seq keeps the heap stable for equal finish times
        heapq.heappush(self._pending, (host.busy_until, self._seq, cloudlet))
        self._seq += 1

    def advance(self, time: float) -> int:
        done = 0
        while self._pending and self._pending[0][0] <= time:
            finish, _, cloudlet = heapq.heappop(self._pending)
            cloudlet.mark_finished(finish)
            self.hosts[cloudlet.target_host_id].completed += 1
            done += 1
        return done

    @property
    def in_flight(self) -> int:
        return len(self._pending)
