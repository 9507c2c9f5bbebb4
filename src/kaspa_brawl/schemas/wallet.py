"""Wallet Pydantic schemas."""

from pydantic import BaseModel, Field


class BalanceResponse(BaseModel):
    address: str = Field(..., description="Kaspa address queried")
    balance: float = Field(..., description="Balance in KAS")
