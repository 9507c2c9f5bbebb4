# src/kaspa_brawl/services/tokens.py
"""Bearer token issuance and validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt

from kaspa_brawl.core.errors import AuthenticationError
from kaspa_brawl.core.settings import Settings
from kaspa_brawl.db.time import Clock, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedToken:
    """A signed access token and the identity it is bound to."""

    token: str
    address: str
    expires_at: datetime


class TokenIssuer:
    """Mints and checks HMAC-signed JWTs bound to a wallet address.

    Tokens are stateless: anything well-formed, unexpired and signed with
    ``secret_key`` is accepted.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        clock: Clock = utcnow,
    ) -> None:
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenIssuer:
        return cls(
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(minutes=settings.token_ttl_minutes),
        )

    def issue(self, address: str) -> IssuedToken:
        """Create an access token for ``address``."""
        issued_at = self._clock()
        expires_at = issued_at + self.ttl
        claims: dict[str, object] = {
            "sub": address,
            "address": address,
            "iat": issued_at,
            "exp": expires_at,
        }
        token: str = jwt.encode(claims, self._secret_key, algorithm=self.algorithm)
        return IssuedToken(token=token, address=address, expires_at=expires_at)

    def verify(self, token: str) -> str:
        """Return the address a token was issued for.

        Raises:
            AuthenticationError: If the token is expired, forged or malformed.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError as err:
            raise AuthenticationError("Token has expired", code="token_expired") from err
        except JWTError as err:
            logger.warning("Token verification failed: %s", err)
            raise AuthenticationError(
                "Could not validate credentials", code="token_invalid"
            ) from err

        address = payload.get("address")
        if not isinstance(address, str) or not address or payload.get("sub") != address:
            raise AuthenticationError("Could not validate credentials", code="token_invalid")
        return address
