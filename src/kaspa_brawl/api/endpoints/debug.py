# src/kaspa_brawl/api/endpoints/debug.py
"""Diagnostics for wallet integrations. Only mounted when DEBUG is enabled."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from kaspa_brawl.api.dependencies import NonceStoreDep
from kaspa_brawl.schemas.auth import VerifyRequest
from kaspa_brawl.services.diagnostics import analyze_signed_challenge

router = APIRouter(prefix="/debug", tags=["debug"])


@router.post("/signature", summary="Analyse a login payload without consuming it")
def analyze_signature(payload: VerifyRequest, store: NonceStoreDep) -> dict[str, Any]:
    analysis = analyze_signed_challenge(
        store,
        nonce=payload.nonce,
        signature=payload.signature,
        public_key=payload.public_key,
        address=payload.address,
    )
    return {"message": "Wallet signature analysis", "analysis": analysis}
