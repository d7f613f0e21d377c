from __future__ import annotations

"""Generators over fixed sequences and replayed traces."""

from typing import Iterable, Iterator

from .base import BufferedGenerator, W


class SequenceGenerator(BufferedGenerator[W]):
    """
    A finite, pre-built stream of cloudlets. Items are available regardless of the notified time;
    the session decides when they are due.
    """

    def __init__(self, cloudlets: Iterable[W]) -> None:
        super().__init__()
        self._extend(cloudlets)

    def __len__(self) -> int:
        return len(self._buffer)


class IterableGenerator(BufferedGenerator[W]):
    """
    Replays cloudlets from an iterable (e.g. a parsed trace), pulling one item ahead of the
    consumer. Infinite iterables are fine.
    """

    def __init__(self, cloudlets: Iterable[W]) -> None:
        super().__init__()
        self._source: Iterator[W] | None = iter(cloudlets)

    @property
    def exhausted(self) -> bool:
        return self._source is None and not self._buffer

    def _fill(self, time: float | None) -> None:
        if self._buffer or self._source is None:
            return
        try:
            self._push(next(self._source))
        except StopIteration:
            self._source = None
