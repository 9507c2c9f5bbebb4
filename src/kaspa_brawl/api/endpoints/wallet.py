# src/kaspa_brawl/api/endpoints/wallet.py
"""Wallet information endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from kaspa_brawl.api.dependencies import BalanceServiceDep
from kaspa_brawl.schemas.wallet import BalanceResponse

router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get(
    "/balance",
    summary="Get the KAS balance of an address",
    response_model=BalanceResponse,
)
async def get_balance(
    balances: BalanceServiceDep,
    address: Annotated[str | None, Query()] = None,
) -> BalanceResponse:
    balance = await balances.get_balance(address)
    return BalanceResponse(address=address or "", balance=balance)
