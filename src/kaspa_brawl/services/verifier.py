# src/kaspa_brawl/services/verifier.py
"""Wallet signature verification for nonce-based login."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kaspa_brawl.core.errors import (
    AuthenticationError,
    ValidationError,
    invalid_nonce,
    signature_failed,
)
from kaspa_brawl.core.settings import VerificationPolicy
from kaspa_brawl.db.time import Clock, utcnow
from kaspa_brawl.repositories.nonces import NonceStore
from kaspa_brawl.services import kaspa
from kaspa_brawl.services.kaspa import AddressVersion, KaspaAddress

MAX_NONCE_LENGTH = 128

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedChallenge:
    """Structurally valid login material, decoded."""

    nonce: str
    signature: bytes
    public_key: bytes
    address: KaspaAddress
    address_text: str


@dataclass(frozen=True)
class VerifiedIdentity:
    address: str
    nonce: str


def parse_signed_challenge(
    nonce: str | None,
    signature: str | None,
    public_key: str | None,
    address: str | None,
) -> SignedChallenge:
    """Check presence and encoding of every login field.

    Raises:
        ValidationError: On the first missing or malformed field.
    """
    for field, value in (
        ("nonce", nonce),
        ("signature", signature),
        ("publicKey", public_key),
        ("address", address),
    ):
        if not value or not value.strip():
            raise ValidationError(f"Missing {field}", code="missing_field")

    if len(nonce) > MAX_NONCE_LENGTH:
        raise ValidationError("Malformed nonce", code="malformed_nonce")
    try:
        signature_bytes = kaspa.decode_signature(signature)
    except ValueError as err:
        raise ValidationError(str(err), code="malformed_signature") from err
    try:
        pubkey_bytes = kaspa.decode_public_key(public_key)
    except ValueError as err:
        raise ValidationError(str(err), code="malformed_public_key") from err
    try:
        parsed_address = kaspa.decode_address(address.strip())
    except ValueError as err:
        raise ValidationError(f"Invalid address: {err}", code="malformed_address") from err

    return SignedChallenge(
        nonce=nonce,
        signature=signature_bytes,
        public_key=pubkey_bytes,
        address=parsed_address,
        address_text=address.strip(),
    )


class SignatureVerifier:
    """Accepts each nonce at most once, and only with a valid wallet signature."""

    def __init__(
        self,
        store: NonceStore,
        *,
        policy: VerificationPolicy = VerificationPolicy.STRICT,
        clock: Clock = utcnow,
    ) -> None:
        self.store = store
        self.policy = policy
        self._clock = clock

    def verify(
        self,
        nonce: str | None,
        signature: str | None,
        public_key: str | None,
        address: str | None,
    ) -> VerifiedIdentity:
        """Verify signed login material and consume its nonce.

        Raises:
            ValidationError: If any field is missing or malformed.
            AuthenticationError: If the nonce is unknown, expired, used or bound
                to another address, or the signature does not check out.
            StorageError: If the nonce store is unavailable.
        """
        challenge = parse_signed_challenge(nonce, signature, public_key, address)

        record = self.store.get(challenge.nonce)
        if record is None or not record.is_usable(self._clock()):
            logger.warning("Rejected unknown, expired or used nonce %s...", challenge.nonce[:10])
            raise invalid_nonce()
        if record.address and record.address != challenge.address_text:
            logger.warning(
                "Nonce %s... was issued for %s, not %s",
                challenge.nonce[:10],
                record.address,
                challenge.address_text,
            )
            raise AuthenticationError(
                "Nonce was issued for a different address",
                code="nonce_address_mismatch",
            )

        if self.policy is VerificationPolicy.STRICT:
            self._check_signature(challenge)
        else:
            logger.warning(
                "Signature check skipped for %s (verification policy %s)",
                challenge.address_text,
                self.policy.value,
            )

        if not self.store.consume(challenge.nonce, self._clock()):
            logger.warning("Lost consume race for nonce %s...", challenge.nonce[:10])
            raise invalid_nonce()

        logger.info("Signature verified for %s", challenge.address_text)
        return VerifiedIdentity(address=challenge.address_text, nonce=challenge.nonce)

    @staticmethod
    def _check_signature(challenge: SignedChallenge) -> None:
        if challenge.address.version is not AddressVersion.PUBKEY:
            logger.warning(
                "Unsupported address version %s for %s",
                challenge.address.version.name,
                challenge.address_text,
            )
            raise signature_failed()
        if challenge.address.payload != challenge.public_key:
            logger.warning("Public key does not match address %s", challenge.address_text)
            raise signature_failed()
        if not kaspa.verify_message_signature(
            challenge.public_key, challenge.nonce, challenge.signature
        ):
            logger.warning("Invalid signature for %s", challenge.address_text)
            raise signature_failed()
