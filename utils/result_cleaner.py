"""Helpers to remove expired analysis records from the result store."""

import asyncio
import logging
from typing import Optional

from services.result_store import ResultStore

LOGGER = logging.getLogger(__name__)


class ResultCleaner:
    """Delete analysis records older than the store's retention window."""

    def __init__(self, store: ResultStore, interval_seconds: int = 3_600) -> None:
        """
        Args:
            store: Result store whose expired records are purged.
            interval_seconds: Seconds to sleep between cleanup runs.
        """
        self._store = store
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    async def prune_expired(self) -> int:
        """Purge expired records and return the count removed."""
        try:
            removed = await self._store.purge_expired()
        except OSError as exc:
            LOGGER.error("Error cleaning up old analyses: %s", exc)
            return 0
        if removed:
            LOGGER.info("Removed %d expired analyses", removed)
        return removed

    async def run_periodic_cleanup(self) -> None:
        """Repeatedly prune expired records at the configured interval until cancelled."""
        while True:
            try:
                await asyncio.sleep(self.interval_seconds)
                await self.prune_expired()
            except asyncio.CancelledError:
                break

    async def start(self, periodic: bool) -> None:
        """Purge once now, then keep purging in the background when ``periodic`` is set.

        Serverless deployments pass ``periodic=False`` so each cold start purges once.
        """
        await self.prune_expired()
        if periodic and self._task is None:
            self._task = asyncio.create_task(self.run_periodic_cleanup())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
