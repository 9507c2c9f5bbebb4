# src/kaspa_brawl/services/kaspa.py
"""Kaspa address codec and wallet message signature checks.

Kaspa addresses are cashaddr-style strings: a network prefix, a colon and a
base32 payload holding a version byte plus the key or script hash, followed
by a 40-bit BCH checksum. Wallets sign personal messages with BIP-340
Schnorr over secp256k1, hashing the message with keyed BLAKE2b first.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass
from enum import IntEnum

from coincurve import PublicKeyXOnly

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
NETWORK_PREFIXES = frozenset({"kaspa", "kaspatest", "kaspasim", "kaspadev"})
CHECKSUM_GROUPS = 8
SIGNATURE_LENGTH_BYTES = 64
XONLY_PUBKEY_LENGTH_BYTES = 32
COMPRESSED_PUBKEY_LENGTH_BYTES = 33
PERSONAL_MESSAGE_KEY = b"PersonalMessageSigningHash"

_GENERATORS = (
    0x98F2BC8E61,
    0x79B76D99E2,
    0xF33E5FB3C4,
    0xAE2EABE2A8,
    0x1E4F43E470,
)


class AddressVersion(IntEnum):
    """Kaspa address payload kinds."""

    PUBKEY = 0
    PUBKEY_ECDSA = 1
    SCRIPT_HASH = 8


_PAYLOAD_LENGTHS = {
    AddressVersion.PUBKEY: 32,
    AddressVersion.PUBKEY_ECDSA: 33,
    AddressVersion.SCRIPT_HASH: 32,
}


@dataclass(frozen=True)
class KaspaAddress:
    """Decoded Kaspa address."""

    prefix: str
    version: AddressVersion
    payload: bytes

    def encode(self) -> str:
        return encode_address(self.prefix, self.version, self.payload)


def _polymod(values: list[int]) -> int:
    c = 1
    for value in values:
        c0 = c >> 35
        c = ((c & 0x07FFFFFFFF) << 5) ^ value
        for bit, generator in enumerate(_GENERATORS):
            if (c0 >> bit) & 1:
                c ^= generator
    return c ^ 1


def _prefix_values(prefix: str) -> list[int]:
    return [ord(char) & 0x1F for char in prefix] + [0]


def _convert_bits(data: bytes | list[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    result: list[int] = []
    max_value = (1 << to_bits) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise ValueError("Invalid data for base conversion")
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            result.append((acc >> bits) & max_value)
    if pad:
        if bits:
            result.append((acc << (to_bits - bits)) & max_value)
    elif bits >= from_bits or ((acc << (to_bits - bits)) & max_value):
        raise ValueError("Invalid padding in address payload")
    return result


def encode_address(prefix: str, version: int, payload: bytes) -> str:
    """Encode a Kaspa address string.

    Args:
        prefix: Network prefix such as ``kaspa`` or ``kaspatest``.
        version: Address version byte.
        payload: Public key or script hash bytes.

    Returns:
        The address, e.g. ``kaspa:qr...``.
    """
    if prefix not in NETWORK_PREFIXES:
        raise ValueError(f"Unknown network prefix: {prefix}")
    data = _convert_bits(bytes([version]) + payload, 8, 5, pad=True)
    checksum = _polymod(_prefix_values(prefix) + data + [0] * CHECKSUM_GROUPS)
    data += _convert_bits(checksum.to_bytes(8, "big")[3:], 8, 5, pad=True)
    return prefix + ":" + "".join(CHARSET[value] for value in data)


def decode_address(address: str) -> KaspaAddress:
    """Parse and checksum-verify a Kaspa address.

    Raises:
        ValueError: If the prefix, characters, checksum or payload are invalid.
    """
    if address != address.lower():
        raise ValueError("Address must be lowercase")
    prefix, sep, body = address.partition(":")
    if not sep:
        raise ValueError("Address is missing its network prefix")
    if prefix not in NETWORK_PREFIXES:
        raise ValueError(f"Unknown network prefix: {prefix}")
    if len(body) <= CHECKSUM_GROUPS:
        raise ValueError("Address payload is too short")
    try:
        values = [CHARSET.index(char) for char in body]
    except ValueError as err:
        raise ValueError("Address contains characters outside the base32 alphabet") from err
    if _polymod(_prefix_values(prefix) + values) != 0:
        raise ValueError("Address checksum mismatch")

    raw = bytes(_convert_bits(values[:-CHECKSUM_GROUPS], 5, 8, pad=False))
    if not raw:
        raise ValueError("Address payload is empty")
    try:
        version = AddressVersion(raw[0])
    except ValueError as err:
        raise ValueError(f"Unsupported address version: {raw[0]}") from err
    payload = raw[1:]
    if len(payload) != _PAYLOAD_LENGTHS[version]:
        raise ValueError("Address payload has the wrong length")
    return KaspaAddress(prefix=prefix, version=version, payload=payload)


def address_from_public_key(public_key: bytes, prefix: str = "kaspa") -> str:
    """Return the Schnorr pay-to-pubkey address for a public key."""
    return encode_address(prefix, AddressVersion.PUBKEY, to_xonly(public_key))


def to_xonly(public_key: bytes) -> bytes:
    """Reduce a 32-byte x-only or 33-byte compressed key to its x coordinate."""
    if len(public_key) == XONLY_PUBKEY_LENGTH_BYTES:
        return public_key
    if len(public_key) == COMPRESSED_PUBKEY_LENGTH_BYTES and public_key[0] in (2, 3):
        return public_key[1:]
    raise ValueError("Public key must be 32 bytes (x-only) or 33 bytes (compressed)")


def _decode_hex(data: str) -> bytes:
    if data.startswith("0x"):
        data = data[2:]
    try:
        return bytes.fromhex(data)
    except ValueError as err:
        raise ValueError(f"Invalid hex encoding: {err}") from err


def _decode_base64(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    normalized = data.replace("-", "+").replace("_", "/") + padding
    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as err:
        raise ValueError(f"Invalid base64 encoding: {err}") from err


def decode_binary_field(encoded: str, *, lengths: tuple[int, ...], label: str) -> bytes:
    """Decode a hex or base64 field and check its decoded length.

    Raises:
        ValueError: If no decoding yields one of ``lengths`` bytes.
    """
    cleaned = encoded.strip()
    errors: list[str] = []
    for decoder in (_decode_hex, _decode_base64):
        try:
            result = decoder(cleaned)
        except ValueError as err:
            errors.append(str(err))
            continue
        if len(result) not in lengths:
            errors.append(f"{label} must decode to {' or '.join(map(str, lengths))} bytes")
            continue
        return result
    raise ValueError(f"Invalid {label} format: {'; '.join(errors)}")


def decode_signature(signature: str) -> bytes:
    return decode_binary_field(signature, lengths=(SIGNATURE_LENGTH_BYTES,), label="signature")


def decode_public_key(public_key: str) -> bytes:
    raw = decode_binary_field(
        public_key,
        lengths=(XONLY_PUBKEY_LENGTH_BYTES, COMPRESSED_PUBKEY_LENGTH_BYTES),
        label="publicKey",
    )
    return to_xonly(raw)


def personal_message_hash(message: str | bytes) -> bytes:
    """Return the digest Kaspa wallets sign for a personal message."""
    data = message.encode("utf-8") if isinstance(message, str) else message
    return hashlib.blake2b(data, digest_size=32, key=PERSONAL_MESSAGE_KEY).digest()


def verify_message_signature(xonly_pubkey: bytes, message: str | bytes, signature: bytes) -> bool:
    """Verify a BIP-340 Schnorr signature over a personal message.

    Returns:
        True if ``signature`` signs ``message`` under ``xonly_pubkey``; False otherwise.
    """
    try:
        pubkey = PublicKeyXOnly(xonly_pubkey)
        return bool(pubkey.verify(signature, personal_message_hash(message)))
    except (ValueError, TypeError):
        return False
