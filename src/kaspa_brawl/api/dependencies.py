"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from kaspa_brawl.core.errors import AuthenticationError
from kaspa_brawl.core.settings import settings
from kaspa_brawl.db.session import get_db
from kaspa_brawl.repositories.nonces import NonceStore
from kaspa_brawl.services.auth import AuthService
from kaspa_brawl.services.balance import BalanceService
from kaspa_brawl.services.stores import build_nonce_store
from kaspa_brawl.services.tokens import TokenIssuer

# Missing credentials are reported through AuthenticationError, not a bare 403.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_nonce_store(db: SessionDep) -> NonceStore:
    """Return the nonce store selected by ``NONCE_BACKEND``."""
    return build_nonce_store(db)


NonceStoreDep = Annotated[NonceStore, Depends(get_nonce_store)]


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


TokenIssuerDep = Annotated[TokenIssuer, Depends(get_token_issuer)]


def get_auth_service(
    db: SessionDep,
    store: NonceStoreDep,
    tokens: TokenIssuerDep,
) -> AuthService:
    return AuthService.from_settings(settings, store, tokens, db)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def get_balance_service() -> BalanceService:
    return BalanceService.from_settings(settings)


BalanceServiceDep = Annotated[BalanceService, Depends(get_balance_service)]


def get_current_address(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    tokens: TokenIssuerDep,
) -> str:
    """Return the wallet address of the bearer token holder.

    Raises:
        AuthenticationError: If no token is presented or it does not verify.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token", code="token_missing")
    return tokens.verify(credentials.credentials)


# Type alias for current address dependency
CurrentAddressDep = Annotated[str, Depends(get_current_address)]
