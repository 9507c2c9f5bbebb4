# src/kaspa_brawl/services/housekeeping.py
"""Removal of expired and used nonces.

Sweeping is best-effort: it runs opportunistically on nonce issuance, from a
periodic background task, or from the ``kaspa-brawl-sweep`` command.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable

from kaspa_brawl.core.errors import StorageError
from kaspa_brawl.db.time import Clock, utcnow
from kaspa_brawl.repositories.nonces import NonceStore
from kaspa_brawl.services.stores import nonce_store_scope

logger = logging.getLogger(__name__)


class NonceSweeper:
    """Deletes nonce records that can never verify again."""

    def __init__(self, store: NonceStore, *, clock: Clock = utcnow) -> None:
        self.store = store
        self._clock = clock

    def sweep(self) -> int:
        """Remove every expired or used nonce and return how many were removed."""
        removed = self.store.delete_expired(self._clock())
        if removed:
            logger.info("Swept %d expired or used nonces", removed)
        return removed

    def maybe_sweep(
        self,
        probability: float,
        rng: Callable[[], float] = random.random,
    ) -> int | None:
        """Sweep with the given probability; storage failures are only logged.

        Returns:
            Number of removed records, or None when no sweep ran or it failed.
        """
        if probability <= 0 or rng() >= probability:
            return None
        try:
            return self.sweep()
        except StorageError:
            logger.exception("Opportunistic nonce sweep failed")
            return None


def sweep_once(backend: str | None = None) -> int:
    """Sweep the configured nonce store using a fresh database session."""
    with nonce_store_scope(backend) as store:
        return NonceSweeper(store).sweep()


class PeriodicSweepWorker:
    """Runs a nonce sweep every ``interval`` seconds in the background."""

    def __init__(self, sweep: Callable[[], int] = sweep_once, *, interval: float) -> None:
        """Initialize the worker.

        Args:
            sweep: Blocking callable performing one sweep pass.
            interval: Seconds between passes.
        """
        self._sweep = sweep
        self.interval = max(1.0, float(interval))
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    async def start(self) -> None:
        """Start the background sweep loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background sweep loop."""
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await asyncio.to_thread(self._sweep)
            except StorageError as e:
                logger.warning("PeriodicSweepWorker could not sweep nonces: %s", e)
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except TimeoutError:
                continue
