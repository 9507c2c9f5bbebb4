# tests/test_housekeeping.py
"""Tests for the nonce housekeeping sweep."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from kaspa_brawl.core.errors import StorageError
from kaspa_brawl.repositories.nonces import SqlNonceStore
from kaspa_brawl.services.challenge import ChallengeIssuer
from kaspa_brawl.services.housekeeping import NonceSweeper, PeriodicSweepWorker


@pytest.fixture(params=["memory", "sql"])
def store(request, db_session, memory_store):
    if request.param == "memory":
        return memory_store
    return SqlNonceStore(db_session)


def test_sweep_removes_expired_and_used_nonces(store, clock) -> None:
    short = ChallengeIssuer(store, ttl=timedelta(minutes=1), clock=clock)
    long = ChallengeIssuer(store, ttl=timedelta(minutes=30), clock=clock)
    expiring = [short.issue_challenge().value, short.issue_challenge().value]
    consumed = long.issue_challenge().value
    fresh = long.issue_challenge().value
    assert store.consume(consumed, clock())

    clock.advance(minutes=5)
    removed = NonceSweeper(store, clock=clock).sweep()

    assert removed == 3
    assert all(store.get(value) is None for value in [*expiring, consumed])
    assert store.get(fresh) is not None


def test_sweep_with_nothing_to_remove(memory_store, clock) -> None:
    ChallengeIssuer(memory_store, ttl=timedelta(minutes=10), clock=clock).issue_challenge()

    assert NonceSweeper(memory_store, clock=clock).sweep() == 0
    assert len(memory_store) == 1


def test_maybe_sweep_respects_probability(memory_store, clock) -> None:
    sweeper = NonceSweeper(memory_store, clock=clock)

    assert sweeper.maybe_sweep(0.1, rng=lambda: 0.5) is None
    assert sweeper.maybe_sweep(0.0, rng=lambda: 0.0) is None
    assert sweeper.maybe_sweep(0.1, rng=lambda: 0.05) == 0
    assert sweeper.maybe_sweep(1.0, rng=lambda: 0.99) == 0


def test_maybe_sweep_logs_storage_failures(clock, caplog) -> None:
    store = MagicMock()
    store.delete_expired.side_effect = StorageError("down")
    sweeper = NonceSweeper(store, clock=clock)

    assert sweeper.maybe_sweep(1.0, rng=lambda: 0.0) is None
    assert "Opportunistic nonce sweep failed" in caplog.text


def test_sweep_propagates_storage_failures(clock) -> None:
    store = MagicMock()
    store.delete_expired.side_effect = StorageError("down")

    with pytest.raises(StorageError):
        NonceSweeper(store, clock=clock).sweep()


@pytest.mark.asyncio
async def test_periodic_worker_runs_and_stops() -> None:
    calls: list[int] = []

    def sweep() -> int:
        calls.append(1)
        if len(calls) == 1:
            raise StorageError("transient")
        return 0

    worker = PeriodicSweepWorker(sweep, interval=1)
    await worker.start()
    await asyncio.sleep(1.3)
    await worker.stop()

    assert len(calls) >= 2
    count = len(calls)
    await asyncio.sleep(0.1)
    assert len(calls) == count


@pytest.mark.asyncio
async def test_periodic_worker_stop_without_start() -> None:
    worker = PeriodicSweepWorker(lambda: 0, interval=60)
    await worker.stop()
