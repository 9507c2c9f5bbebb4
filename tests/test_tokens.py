# tests/test_tokens.py
"""Tests for access token issuance and validation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from kaspa_brawl.core.errors import AuthenticationError
from kaspa_brawl.services.tokens import TokenIssuer
from tests.conftest import FakeClock

SECRET = "token-test-secret"
ADDRESS = "kaspa:qqexampleaddress"


def _utc_clock(**offset: float) -> FakeClock:
    return FakeClock(datetime.now(UTC) + timedelta(**offset))


def test_issue_and_verify_round_trip() -> None:
    issuer = TokenIssuer(SECRET, clock=_utc_clock())

    issued = issuer.issue(ADDRESS)

    assert issued.address == ADDRESS
    assert issuer.verify(issued.token) == ADDRESS


def test_issued_token_lifetime_follows_ttl() -> None:
    clock = _utc_clock()
    issuer = TokenIssuer(SECRET, ttl=timedelta(days=7), clock=clock)

    issued = issuer.issue(ADDRESS)

    assert issued.expires_at == clock() + timedelta(days=7)
    claims = jwt.get_unverified_claims(issued.token)
    assert claims["sub"] == ADDRESS
    assert claims["address"] == ADDRESS
    assert claims["exp"] - claims["iat"] == 7 * 24 * 3600


def test_expired_token_is_rejected() -> None:
    stale = TokenIssuer(SECRET, ttl=timedelta(days=7), clock=_utc_clock(days=-8))
    token = stale.issue(ADDRESS).token

    with pytest.raises(AuthenticationError) as excinfo:
        TokenIssuer(SECRET).verify(token)
    assert excinfo.value.code == "token_expired"


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = TokenIssuer("another-secret").issue(ADDRESS).token

    with pytest.raises(AuthenticationError) as excinfo:
        TokenIssuer(SECRET).verify(token)
    assert excinfo.value.code == "token_invalid"


def test_token_with_other_algorithm_is_rejected() -> None:
    token = TokenIssuer(SECRET, algorithm="HS512").issue(ADDRESS).token

    with pytest.raises(AuthenticationError):
        TokenIssuer(SECRET).verify(token)


def test_tampered_payload_is_rejected() -> None:
    issuer = TokenIssuer(SECRET)
    header, _, signature = issuer.issue(ADDRESS).token.split(".")
    _, forged_payload, _ = TokenIssuer("attacker").issue("kaspa:qqattacker").token.split(".")

    with pytest.raises(AuthenticationError):
        issuer.verify(f"{header}.{forged_payload}.{signature}")


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_garbage_tokens_are_rejected(token: str) -> None:
    with pytest.raises(AuthenticationError) as excinfo:
        TokenIssuer(SECRET).verify(token)
    assert excinfo.value.code == "token_invalid"


@pytest.mark.parametrize(
    "claims",
    [
        {"sub": ADDRESS},
        {"address": ADDRESS},
        {"sub": ADDRESS, "address": "kaspa:qqsomeoneelse"},
    ],
)
def test_tokens_missing_identity_claims_are_rejected(claims: dict[str, str]) -> None:
    exp = datetime.now(UTC) + timedelta(hours=1)
    token = jwt.encode({**claims, "exp": exp}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError) as excinfo:
        TokenIssuer(SECRET).verify(token)
    assert excinfo.value.code == "token_invalid"


def test_token_without_expiry_is_rejected() -> None:
    token = jwt.encode({"sub": ADDRESS, "address": ADDRESS}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError):
        TokenIssuer(SECRET).verify(token)
