from __future__ import annotations

"""Generator contract for cloudlet streams."""

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Generic, Iterable, TypeVar

from ..cloudlet import WebCloudlet
from ..exceptions import GeneratorEmptyError, GeneratorOrderError

logger = logging.getLogger(__name__)

W = TypeVar("W", bound=WebCloudlet)


class CloudletGenerator(ABC, Generic[W]):
    """
    A lazy source of cloudlets ordered by non-decreasing ideal start time.

    Generators are unaware of simulation time except through ``notify_of_time``. The stream may be
    finite or infinite, and ``is_empty()`` only reports whether a next item exists *now*: a generator
    that is empty at one time may produce items after a later time notification.

    ``peek()`` and ``poll()`` raise :class:`~websim.exceptions.GeneratorEmptyError` when the
    generator is empty.
    """

    @abstractmethod
    def is_empty(self) -> bool: ...

    @abstractmethod
    def peek(self) -> W: ...

    @abstractmethod
    def poll(self) -> W: ...

    @abstractmethod
    def notify_of_time(self, time: float) -> None: ...


class BufferedGenerator(CloudletGenerator[W]):
    """
    Base for generators that stage upcoming cloudlets in a lookahead buffer.

    Subclasses implement ``_fill(time)`` to append cloudlets with ``_push``. ``_fill`` is called on
    every accepted time notification and whenever the buffer runs empty. Notifications for a time
    earlier than the last one seen are ignored.
    """

    def __init__(self) -> None:
        self._buffer: Deque[W] = deque()
        self._time: float | None = None
        self._last_start: float = -float("inf")
        self._produced = 0

    @property
    def time(self) -> float | None:
        """The last simulation time this generator was notified of."""
        return self._time

    @property
    def produced(self) -> int:
        """Number of cloudlets polled so far."""
        return self._produced

    def _fill(self, time: float | None) -> None:
        pass

    def _push(self, cloudlet: W) -> None:
        if cloudlet.ideal_start_time < self._last_start:
            raise GeneratorOrderError(
                f"{type(self).__name__}: ideal start time {cloudlet.ideal_start_time} is before "
                f"the previous one ({self._last_start})."
            )
        self._last_start = cloudlet.ideal_start_time
        self._buffer.append(cloudlet)

    def _extend(self, cloudlets: Iterable[W]) -> None:
        for c in cloudlets:
            self._push(c)

    def is_empty(self) -> bool:
        if not self._buffer:
            self._fill(self._time)
        return not self._buffer

    def peek(self) -> W:
        if self.is_empty():
            raise GeneratorEmptyError(f"peek() on empty {type(self).__name__}")
        return self._buffer[0]

    def poll(self) -> W:
        if self.is_empty():
            raise GeneratorEmptyError(f"poll() on empty {type(self).__name__}")
        self._produced += 1
        return self._buffer.popleft()

    def notify_of_time(self, time: float) -> None:
        if self._time is not None and time < self._time:
            logger.debug("%s: ignoring time %s before %s", type(self).__name__, time, self._time)
            return
        self._time = time
        self._fill(time)
