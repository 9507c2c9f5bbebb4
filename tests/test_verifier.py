# tests/test_verifier.py
"""Tests for wallet signature verification and single-use nonces."""

from __future__ import annotations

import threading
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from kaspa_brawl.core.errors import (
    INVALID_NONCE_MESSAGE,
    SIGNATURE_FAILED_MESSAGE,
    AuthenticationError,
    ValidationError,
)
from kaspa_brawl.core.settings import VerificationPolicy
from kaspa_brawl.db.session import Base
from kaspa_brawl.repositories.nonces import SqlNonceStore
from kaspa_brawl.services.challenge import ChallengeIssuer
from kaspa_brawl.services.kaspa import AddressVersion, encode_address
from kaspa_brawl.services.verifier import SignatureVerifier, VerifiedIdentity
from tests.conftest import FakeClock, make_wallet

TTL = timedelta(minutes=10)


@pytest.fixture()
def issuer(memory_store, clock) -> ChallengeIssuer:
    return ChallengeIssuer(memory_store, ttl=TTL, clock=clock)


@pytest.fixture()
def verifier(memory_store, clock) -> SignatureVerifier:
    return SignatureVerifier(memory_store, clock=clock)


def _signed(wallet, nonce: str) -> dict[str, str]:
    return {
        "nonce": nonce,
        "signature": wallet.sign(nonce),
        "public_key": wallet.public_key_hex,
        "address": wallet.address,
    }


def test_verify_accepts_valid_signature_and_consumes_nonce(
    issuer, verifier, memory_store, wallet
) -> None:
    nonce = issuer.issue_challenge().value

    identity = verifier.verify(**_signed(wallet, nonce))

    assert identity == VerifiedIdentity(address=wallet.address, nonce=nonce)
    assert memory_store.get(nonce).used is True


def test_replayed_nonce_is_rejected(issuer, verifier, wallet) -> None:
    nonce = issuer.issue_challenge().value
    payload = _signed(wallet, nonce)
    verifier.verify(**payload)

    with pytest.raises(AuthenticationError) as excinfo:
        verifier.verify(**payload)
    assert excinfo.value.message == INVALID_NONCE_MESSAGE


def test_unknown_nonce_is_rejected(verifier, wallet) -> None:
    with pytest.raises(AuthenticationError) as excinfo:
        verifier.verify(**_signed(wallet, "f" * 64))
    assert excinfo.value.message == INVALID_NONCE_MESSAGE


def test_expired_nonce_is_rejected(issuer, verifier, memory_store, clock, wallet) -> None:
    nonce = issuer.issue_challenge().value
    clock.advance(minutes=10)

    with pytest.raises(AuthenticationError) as excinfo:
        verifier.verify(**_signed(wallet, nonce))
    assert excinfo.value.message == INVALID_NONCE_MESSAGE
    assert memory_store.get(nonce).used is False


@pytest.mark.parametrize(
    ("missing", "message"),
    [
        ("nonce", "Missing nonce"),
        ("signature", "Missing signature"),
        ("public_key", "Missing publicKey"),
        ("address", "Missing address"),
    ],
)
def test_missing_fields_are_rejected_before_store_access(wallet, missing, message) -> None:
    store = MagicMock()
    verifier = SignatureVerifier(store)
    payload = _signed(wallet, "a" * 64)
    payload[missing] = ""

    with pytest.raises(ValidationError) as excinfo:
        verifier.verify(**payload)

    assert excinfo.value.message == message
    assert excinfo.value.code == "missing_field"
    store.get.assert_not_called()
    store.consume.assert_not_called()


@pytest.mark.parametrize(
    ("field", "value", "code"),
    [
        ("nonce", "n" * 129, "malformed_nonce"),
        ("signature", "deadbeef", "malformed_signature"),
        ("public_key", "ab" * 20, "malformed_public_key"),
        ("address", "kaspa:notanaddress", "malformed_address"),
    ],
)
def test_malformed_fields_are_rejected_before_store_access(wallet, field, value, code) -> None:
    store = MagicMock()
    verifier = SignatureVerifier(store)
    payload = _signed(wallet, "a" * 64)
    payload[field] = value

    with pytest.raises(ValidationError) as excinfo:
        verifier.verify(**payload)

    assert excinfo.value.code == code
    store.get.assert_not_called()


def test_signature_from_another_key_is_rejected(
    issuer, verifier, memory_store, wallet, other_wallet
) -> None:
    nonce = issuer.issue_challenge().value
    payload = _signed(wallet, nonce)
    payload["signature"] = other_wallet.sign(nonce)

    with pytest.raises(AuthenticationError) as excinfo:
        verifier.verify(**payload)

    assert excinfo.value.message == SIGNATURE_FAILED_MESSAGE
    assert memory_store.get(nonce).used is False


def test_signature_over_another_message_is_rejected(issuer, verifier, wallet) -> None:
    nonce = issuer.issue_challenge().value
    payload = _signed(wallet, nonce)
    payload["signature"] = wallet.sign("some other message")

    with pytest.raises(AuthenticationError) as excinfo:
        verifier.verify(**payload)
    assert excinfo.value.message == SIGNATURE_FAILED_MESSAGE


def test_public_key_must_belong_to_address(issuer, verifier, wallet, other_wallet) -> None:
    nonce = issuer.issue_challenge().value
    payload = _signed(other_wallet, nonce)
    payload["address"] = wallet.address

    with pytest.raises(AuthenticationError) as excinfo:
        verifier.verify(**payload)
    assert excinfo.value.message == SIGNATURE_FAILED_MESSAGE


def test_script_hash_address_cannot_log_in(issuer, verifier, wallet) -> None:
    nonce = issuer.issue_challenge().value
    payload = _signed(wallet, nonce)
    payload["address"] = encode_address(
        "kaspa", AddressVersion.SCRIPT_HASH, bytes.fromhex(wallet.public_key_hex)
    )

    with pytest.raises(AuthenticationError):
        verifier.verify(**payload)


def test_nonce_bound_to_another_address_is_rejected(
    issuer, verifier, memory_store, wallet, other_wallet
) -> None:
    nonce = issuer.issue_challenge(other_wallet.address).value

    with pytest.raises(AuthenticationError) as excinfo:
        verifier.verify(**_signed(wallet, nonce))

    assert excinfo.value.code == "nonce_address_mismatch"
    assert memory_store.get(nonce).used is False


def test_permissive_policy_skips_signature_but_keeps_nonce_rules(
    issuer, memory_store, clock, wallet
) -> None:
    verifier = SignatureVerifier(
        memory_store, policy=VerificationPolicy.PERMISSIVE_FOR_TESTING, clock=clock
    )
    nonce = issuer.issue_challenge().value
    payload = _signed(wallet, nonce)
    payload["signature"] = "00" * 64

    assert verifier.verify(**payload).address == wallet.address
    with pytest.raises(AuthenticationError):
        verifier.verify(**payload)


def _race(verifier: SignatureVerifier, payload: dict[str, str], attempts: int) -> list[object]:
    barrier = threading.Barrier(attempts)
    results: list[object] = []
    lock = threading.Lock()

    def attempt() -> None:
        barrier.wait()
        try:
            outcome: object = verifier.verify(**payload)
        except AuthenticationError as err:
            outcome = err
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=attempt) for _ in range(attempts)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results


def test_concurrent_verifications_succeed_once_in_memory(issuer, verifier, wallet) -> None:
    nonce = issuer.issue_challenge().value

    results = _race(verifier, _signed(wallet, nonce), attempts=8)

    successes = [r for r in results if isinstance(r, VerifiedIdentity)]
    failures = [r for r in results if isinstance(r, AuthenticationError)]
    assert len(successes) == 1
    assert len(failures) == 7
    assert all(f.message == INVALID_NONCE_MESSAGE for f in failures)


def test_concurrent_verifications_succeed_once_in_database(tmp_path) -> None:
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    clock = FakeClock()
    wallet = make_wallet()

    with factory() as session:
        nonce = ChallengeIssuer(SqlNonceStore(session), ttl=TTL, clock=clock).issue_challenge().value

    payload = _signed(wallet, nonce)
    barrier = threading.Barrier(6)
    outcomes: list[bool] = []
    lock = threading.Lock()

    def attempt() -> None:
        with factory() as session:
            verifier = SignatureVerifier(SqlNonceStore(session), clock=clock)
            barrier.wait()
            try:
                verifier.verify(**payload)
                ok = True
            except AuthenticationError:
                ok = False
        with lock:
            outcomes.append(ok)

    threads = [threading.Thread(target=attempt) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    engine.dispose()

    assert sorted(outcomes) == [False] * 5 + [True]
