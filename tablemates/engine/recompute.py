"""
Last-triggered-wins coordination for recomputations.

Each trigger bumps a generation counter, cancels whatever is still running
for an older generation and only publishes its own result if no newer
trigger arrived in the meantime.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecomputeCancelled(Exception):
    """Raised from inside work whose generation has been superseded."""


class CancellationToken:
    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RecomputeCancelled()


@dataclass(frozen=True)
class RecomputeOutcome(Generic[T]):
    generation: int
    value: T | None = None
    superseded: bool = False


class RecomputeCoordinator(Generic[T]):
    def __init__(self, name: str = "recompute") -> None:
        self.name = name
        self._generation = 0
        self._token: CancellationToken | None = None
        self._task: asyncio.Future[T] | None = None
        self._latest: RecomputeOutcome[T] | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def latest(self) -> RecomputeOutcome[T] | None:
        """Most recent published outcome; survives failed or superseded runs."""
        return self._latest

    async def trigger(
        self, work: Callable[[CancellationToken], Awaitable[T]]
    ) -> RecomputeOutcome[T]:
        self._generation += 1
        generation = self._generation

        if self._token is not None:
            self._token.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()

        token = CancellationToken()
        task = asyncio.ensure_future(work(token))
        self._token, self._task = token, task

        try:
            value = await task
        except (asyncio.CancelledError, RecomputeCancelled):
            if generation == self._generation:
                raise
            return self._superseded(generation)

        if generation != self._generation or token.cancelled:
            return self._superseded(generation)

        self._latest = RecomputeOutcome(generation=generation, value=value)
        return self._latest

    def _superseded(self, generation: int) -> RecomputeOutcome[T]:
        logger.info(
            "%s: discarding generation %d, superseded by %d",
            self.name,
            generation,
            self._generation,
        )
        return RecomputeOutcome(generation=generation, superseded=True)
