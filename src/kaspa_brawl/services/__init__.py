# src/kaspa_brawl/services/__init__.py
"""Business logic services for the Kaspa Brawl application."""

from .auth import AuthService
from .balance import BalanceService
from .challenge import ChallengeIssuer
from .housekeeping import NonceSweeper, PeriodicSweepWorker
from .tokens import IssuedToken, TokenIssuer
from .verifier import SignatureVerifier, VerifiedIdentity

__all__ = [
    "AuthService",
    "BalanceService",
    "ChallengeIssuer",
    "IssuedToken",
    "NonceSweeper",
    "PeriodicSweepWorker",
    "SignatureVerifier",
    "TokenIssuer",
    "VerifiedIdentity",
]
