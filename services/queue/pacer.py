"""Cooperative pacing between provider requests, batches and jobs."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

Sleeper = Callable[[float], Awaitable[None]]


class Pacer:
    """Await fixed intervals between requests to respect provider rate limits.

    Args:
        request_interval: Seconds between consecutive images within a batch.
        batch_interval: Seconds between consecutive batches.
        job_interval: Seconds the queue worker yields between jobs.
        sleep: Awaitable sleep; tests pass a recording fake instead of ``asyncio.sleep``.
    """

    def __init__(
        self,
        request_interval: float = 0.5,
        batch_interval: float = 2.0,
        job_interval: float = 1.0,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        if min(request_interval, batch_interval, job_interval) < 0:
            raise ValueError("Pacing intervals must be non-negative.")
        self.request_interval = request_interval
        self.batch_interval = batch_interval
        self.job_interval = job_interval
        self._sleep = sleep

    async def between_requests(self) -> None:
        await self._sleep(self.request_interval)

    async def between_batches(self) -> None:
        await self._sleep(self.batch_interval)

    async def between_jobs(self) -> None:
        await self._sleep(self.job_interval)
