# src/kaspa_brawl/services/auth.py
"""Nonce-based wallet login: challenge, verification, token."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import timedelta

from sqlalchemy.orm import Session

from kaspa_brawl.core.errors import ValidationError
from kaspa_brawl.core.settings import Settings, VerificationPolicy
from kaspa_brawl.db.time import Clock, utcnow
from kaspa_brawl.repositories.nonces import NonceRecord, NonceStore
from kaspa_brawl.repositories.users import get_or_create_user
from kaspa_brawl.services.challenge import ChallengeIssuer
from kaspa_brawl.services.housekeeping import NonceSweeper
from kaspa_brawl.services.kaspa import decode_address
from kaspa_brawl.services.tokens import IssuedToken, TokenIssuer
from kaspa_brawl.services.verifier import SignatureVerifier

logger = logging.getLogger(__name__)


class AuthService:
    """Wires the challenge issuer, signature verifier, user store and tokens."""

    def __init__(
        self,
        store: NonceStore,
        tokens: TokenIssuer,
        db: Session,
        *,
        nonce_ttl: timedelta,
        policy: VerificationPolicy = VerificationPolicy.STRICT,
        sweep_probability: float = 0.0,
        clock: Clock = utcnow,
        rng: Callable[[], float] = random.random,
    ) -> None:
        self.db = db
        self.tokens = tokens
        self.issuer = ChallengeIssuer(store, ttl=nonce_ttl, clock=clock)
        self.verifier = SignatureVerifier(store, policy=policy, clock=clock)
        self.sweeper = NonceSweeper(store, clock=clock)
        self.sweep_probability = sweep_probability
        self._rng = rng

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: NonceStore,
        tokens: TokenIssuer,
        db: Session,
    ) -> AuthService:
        return cls(
            store,
            tokens,
            db,
            nonce_ttl=timedelta(minutes=settings.nonce_ttl_minutes),
            policy=settings.verification_policy,
            sweep_probability=settings.nonce_sweep_probability,
        )

    def issue_challenge(self, address: str | None = None) -> NonceRecord:
        """Issue a nonce, optionally reserved for ``address``.

        Raises:
            ValidationError: If ``address`` is not a valid Kaspa address.
            StorageError: If the nonce store is unavailable.
        """
        address = address.strip() if address else None
        if address:
            try:
                decode_address(address)
            except ValueError as err:
                raise ValidationError(
                    f"Invalid address: {err}", code="malformed_address"
                ) from err
        self.sweeper.maybe_sweep(self.sweep_probability, self._rng)
        return self.issuer.issue_challenge(address or None)

    def authenticate(
        self,
        nonce: str | None,
        signature: str | None,
        public_key: str | None,
        address: str | None,
    ) -> IssuedToken:
        """Verify a signed nonce and return an access token for its address.

        Raises:
            ValidationError: If a field is missing or malformed.
            AuthenticationError: If the nonce or signature is rejected.
            StorageError: If the nonce or user store is unavailable.
        """
        identity = self.verifier.verify(nonce, signature, public_key, address)
        _, created = get_or_create_user(self.db, identity.address)
        if created:
            logger.info("First login for %s", identity.address)
        return self.tokens.issue(identity.address)
