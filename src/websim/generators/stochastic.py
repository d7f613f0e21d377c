from __future__ import annotations

"""Statistical workload generation."""

import logging
from typing import Callable

from numpy.random import Generator, SeedSequence, default_rng

from ..cloudlet import WebCloudlet
from .base import BufferedGenerator, W

logger = logging.getLogger(__name__)

LengthSampler = Callable[[Generator], float]
CloudletFactory = Callable[[float, float], W]


class StochasticGenerator(BufferedGenerator[W]):
    """
    Generates cloudlets with exponentially distributed inter-arrival times.

    Cloudlets are materialised lazily: on every time notification the generator samples arrivals
    up to ``time + lookahead``. Before the first notification ``start`` is used as the current
    time.

    Parameters
    ----------
    mean_interval:
        Mean time between consecutive ideal start times. Must be positive.
    length:
        Constant work length, or a callable drawing a length from the generator's rng.
    seed:
        Seed, SeedSequence or ready-made numpy Generator. Equal seeds give equal streams.
    start:
        Time after which the first arrival is sampled.
    lookahead:
        How far ahead of the notified time cloudlets are staged.
    limit:
        Maximum number of cloudlets to produce (None for an infinite stream).
    until:
        No cloudlet has an ideal start time after this (None for no bound).
    factory:
        Builds a cloudlet from (ideal_start_time, length). Defaults to ``WebCloudlet``.
    """

    def __init__(
            self,
            mean_interval: float,
            length: float | LengthSampler = 0.0,
            *,
            seed: int | SeedSequence | Generator | None = None,
            start: float = 0.0,
            lookahead: float = 0.0,
            limit: int | None = None,
            until: float | None = None,
            factory: CloudletFactory | None = None,
    ) -> None:
        super().__init__()
        if mean_interval <= 0:
            raise ValueError(f"mean_interval must be positive, got {mean_interval}")
        if lookahead < 0:
            raise ValueError(f"lookahead must be non-negative, got {lookahead}")
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        self._mean_interval = mean_interval
        self._length = length
        self._rng = seed if isinstance(seed, Generator) else default_rng(seed)
        self._start = start
        self._lookahead = lookahead
        self._limit = limit
        self._until = until
        self._factory = factory if factory is not None else WebCloudlet

        self._generated = 0
        self._next_start = start + self._rng.exponential(mean_interval)

    @property
    def generated(self) -> int:
        return self._generated

    @property
    def finished(self) -> bool:
        """True when no further cloudlets will ever be generated."""
        if self._limit is not None and self._generated >= self._limit:
            return True
        return self._until is not None and self._next_start > self._until

    def _sample_length(self) -> float:
        if callable(self._length):
            return float(self._length(self._rng))
        return float(self._length)

    def _fill(self, time: float | None) -> None:
        horizon = (self._start if time is None else time) + self._lookahead
        staged = 0
        while not self.finished and self._next_start <= horizon:
            self._push(self._factory(float(self._next_start), self._sample_length()))
            self._generated += 1
            staged += 1
            self._next_start += self._rng.exponential(self._mean_interval)

        if staged:
            logger.debug("Staged %d cloudlets up to %s (generated=%d)", staged, horizon, self._generated)
