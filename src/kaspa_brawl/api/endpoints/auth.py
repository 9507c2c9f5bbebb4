# src/kaspa_brawl/api/endpoints/auth.py
"""Wallet authentication endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from kaspa_brawl.api.dependencies import AuthServiceDep, CurrentAddressDep
from kaspa_brawl.schemas.auth import (
    NonceResponse,
    SessionResponse,
    VerifyRequest,
    VerifyResponse,
)

router = APIRouter(prefix="/auth", tags=["authentication"])

logger = logging.getLogger(__name__)


@router.get(
    "/nonce",
    summary="Issue a single-use nonce for wallet signing",
    response_model=NonceResponse,
)
def issue_nonce(
    auth: AuthServiceDep,
    address: Annotated[str | None, Query(description="Optional address to bind")] = None,
) -> NonceResponse:
    """Generate a random nonce the wallet must sign to log in."""
    record = auth.issue_challenge(address)
    return NonceResponse(
        nonce=record.value,
        expires_in=int(auth.issuer.ttl.total_seconds()),
    )


@router.post(
    "/verify",
    summary="Verify a signed nonce and issue an access token",
    response_model=VerifyResponse,
)
def verify_signature(payload: VerifyRequest, auth: AuthServiceDep) -> VerifyResponse:
    """Exchange a wallet signature over an issued nonce for a JWT."""
    issued = auth.authenticate(
        payload.nonce,
        payload.signature,
        payload.public_key,
        payload.address,
    )
    logger.info("Issued access token for %s", issued.address)
    return VerifyResponse(token=issued.token, address=issued.address)


@router.get(
    "/session",
    summary="Return the address bound to the presented token",
    response_model=SessionResponse,
)
def read_session(address: CurrentAddressDep) -> SessionResponse:
    return SessionResponse(address=address)
