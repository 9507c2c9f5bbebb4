# src/kaspa_brawl/services/balance.py
"""Wallet balance lookups."""

from __future__ import annotations

import hashlib
import logging

import httpx

from kaspa_brawl.core.errors import UpstreamError, ValidationError
from kaspa_brawl.core.settings import Settings
from kaspa_brawl.services.kaspa import decode_address

SOMPI_PER_KAS = 100_000_000
MOCK_BALANCE_CENTS = 10_000

logger = logging.getLogger(__name__)


def mock_balance(address: str) -> float:
    """Return a stable pseudo-balance in [0, 100) KAS for ``address``."""
    digest = hashlib.sha256(address.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big") % MOCK_BALANCE_CENTS / 100


class BalanceService:
    """Reads KAS balances from a Kaspa REST API, or simulates them."""

    def __init__(
        self,
        *,
        api_url: str,
        timeout_seconds: float = 10.0,
        mock: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.mock = mock
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> BalanceService:
        return cls(
            api_url=settings.kaspa_api_url,
            timeout_seconds=settings.kaspa_api_timeout_seconds,
            mock=settings.mock_balances,
        )

    async def get_balance(self, address: str | None) -> float:
        """Return the balance of ``address`` in KAS.

        Raises:
            ValidationError: If the address is missing or malformed.
            UpstreamError: If the Kaspa API fails or answers unexpectedly.
        """
        if not address:
            raise ValidationError("Missing or invalid address", code="missing_field")
        try:
            decode_address(address)
        except ValueError as err:
            raise ValidationError("Missing or invalid address", code="malformed_address") from err

        if self.mock:
            return mock_balance(address)

        async with httpx.AsyncClient(
            base_url=self.api_url,
            timeout=httpx.Timeout(self.timeout_seconds),
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(f"/addresses/{address}/balance")
                response.raise_for_status()
                sompi = int(response.json()["balance"])
            except httpx.HTTPError as exc:
                logger.warning("Balance lookup failed for %s: %s", address, exc)
                raise UpstreamError("Failed to get wallet balance") from exc
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Unexpected balance payload for %s: %s", address, exc)
                raise UpstreamError("Failed to get wallet balance") from exc
        return sompi / SOMPI_PER_KAS
