# tests/test_challenge.py
"""Tests for nonce issuance."""

from __future__ import annotations

import re
from datetime import timedelta

from kaspa_brawl.services.challenge import ChallengeIssuer, generate_nonce_value


def test_generate_nonce_value_is_64_hex_chars() -> None:
    value = generate_nonce_value()
    assert re.fullmatch(r"[0-9a-f]{64}", value)


def test_issue_challenge_persists_unused_nonce(memory_store, clock) -> None:
    issuer = ChallengeIssuer(memory_store, ttl=timedelta(minutes=10), clock=clock)

    record = issuer.issue_challenge()

    stored = memory_store.get(record.value)
    assert stored == record
    assert stored.used is False
    assert stored.address is None
    assert stored.expires_at == clock() + timedelta(minutes=10)


def test_issue_challenge_binds_address(memory_store, clock, wallet) -> None:
    issuer = ChallengeIssuer(memory_store, ttl=timedelta(minutes=10), clock=clock)

    record = issuer.issue_challenge(wallet.address)

    assert memory_store.get(record.value).address == wallet.address


def test_issued_nonces_are_unique(memory_store, clock) -> None:
    issuer = ChallengeIssuer(memory_store, ttl=timedelta(minutes=10), clock=clock)

    values = {issuer.issue_challenge().value for _ in range(200)}

    assert len(values) == 200
    assert len(memory_store) == 200


def test_issued_nonce_expires_after_ttl(memory_store, clock) -> None:
    issuer = ChallengeIssuer(memory_store, ttl=timedelta(minutes=10), clock=clock)
    record = issuer.issue_challenge()

    clock.advance(minutes=9, seconds=59)
    assert memory_store.get(record.value).is_usable(clock())
    clock.advance(seconds=1)
    assert not memory_store.get(record.value).is_usable(clock())
