# src/kaspa_brawl/services/diagnostics.py
"""Read-only analysis of login payloads for wallet integration debugging."""

from __future__ import annotations

from typing import Any

from kaspa_brawl.db.time import Clock, utcnow
from kaspa_brawl.repositories.nonces import NonceStore
from kaspa_brawl.services import kaspa


def _preview(value: str | None) -> str | None:
    return f"{value[:10]}..." if value else None


def analyze_signed_challenge(
    store: NonceStore,
    *,
    nonce: str | None,
    signature: str | None,
    public_key: str | None,
    address: str | None,
    clock: Clock = utcnow,
) -> dict[str, Any]:
    """Describe what a login attempt with this payload would run into.

    Never consumes the nonce.
    """
    recommendations: list[str] = []
    now = clock()

    signature_error: str | None = None
    if not signature:
        signature_error = "Missing signature"
        recommendations.append("Signature is missing. Check that the wallet signed the nonce.")
    else:
        try:
            kaspa.decode_signature(signature)
        except ValueError as err:
            signature_error = str(err)
            recommendations.append("Signature must be 64 bytes, hex or base64 encoded.")

    pubkey_bytes: bytes | None = None
    public_key_error: str | None = None
    if not public_key:
        public_key_error = "Missing publicKey"
        recommendations.append("Public key is missing. Check that the wallet exposes it.")
    else:
        try:
            pubkey_bytes = kaspa.decode_public_key(public_key)
        except ValueError as err:
            public_key_error = str(err)
            recommendations.append("Public key must be 32-byte x-only or 33-byte compressed.")

    parsed_address: kaspa.KaspaAddress | None = None
    address_error: str | None = None
    if not address:
        address_error = "Missing address"
        recommendations.append("Address is missing. Use the address from the wallet connection.")
    else:
        try:
            parsed_address = kaspa.decode_address(address)
        except ValueError as err:
            address_error = str(err)
            recommendations.append(f"Address is not a valid Kaspa address ({err}).")

    matches_public_key = bool(
        parsed_address
        and pubkey_bytes
        and parsed_address.version is kaspa.AddressVersion.PUBKEY
        and parsed_address.payload == pubkey_bytes
    )
    if parsed_address and pubkey_bytes and not matches_public_key:
        recommendations.append("The public key does not belong to the claimed address.")

    record = store.get(nonce) if nonce else None
    if not nonce:
        recommendations.append("Nonce is missing. Request one from /api/auth/nonce first.")
    elif record is None:
        recommendations.append("Nonce not found. It may never have been issued or was swept.")
    elif record.used:
        recommendations.append("Nonce has already been used. Request a new one per login.")
    elif record.expires_at <= now:
        recommendations.append("Nonce has expired. Request a new one and sign it promptly.")

    return {
        "time": now.isoformat(),
        "signatureInfo": {
            "provided": bool(signature),
            "length": len(signature or ""),
            "preview": _preview(signature),
            "error": signature_error,
        },
        "publicKeyInfo": {
            "provided": bool(public_key),
            "length": len(public_key or ""),
            "preview": _preview(public_key),
            "error": public_key_error,
            "matchesAddress": matches_public_key,
        },
        "addressInfo": {
            "provided": bool(address),
            "prefix": parsed_address.prefix if parsed_address else None,
            "version": parsed_address.version.name if parsed_address else None,
            "error": address_error,
        },
        "nonceInfo": {
            "provided": bool(nonce),
            "preview": _preview(nonce),
            "found": record is not None,
            "expired": bool(record and record.expires_at <= now),
            "used": bool(record and record.used),
        },
        "recommendations": recommendations,
    }
