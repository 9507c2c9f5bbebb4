# src/kaspa_brawl/services/challenge.py
"""Issuance of login nonces."""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta

from kaspa_brawl.db.time import Clock, utcnow
from kaspa_brawl.repositories.nonces import NonceRecord, NonceStore

NONCE_BYTES = 32

logger = logging.getLogger(__name__)


def generate_nonce_value() -> str:
    """Return 256 bits of CSPRNG output, hex encoded."""
    return secrets.token_hex(NONCE_BYTES)


class ChallengeIssuer:
    """Creates fresh nonces that a wallet must sign to log in."""

    def __init__(self, store: NonceStore, *, ttl: timedelta, clock: Clock = utcnow) -> None:
        self.store = store
        self.ttl = ttl
        self._clock = clock

    def issue_challenge(self, address: str | None = None) -> NonceRecord:
        """Persist and return a new unused nonce.

        Args:
            address: Optional address the nonce is reserved for.

        Raises:
            StorageError: If the nonce store is unavailable.
        """
        record = NonceRecord(
            value=generate_nonce_value(),
            address=address,
            expires_at=self._clock() + self.ttl,
        )
        self.store.create(record)
        logger.info(
            "Issued nonce %s... for %s",
            record.value[:10],
            address or "unknown address",
        )
        return record
