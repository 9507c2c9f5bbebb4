"""Error taxonomy shared by the services and the HTTP layer."""

from __future__ import annotations

from fastapi import status


class KaspaBrawlError(Exception):
    """Base class for failures with a stable, machine-checkable reason.

    Attributes:
        code: Short reason identifier clients can branch on.
        message: Human readable message returned as ``error``.
        status_code: HTTP status the API layer responds with.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "unknown_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class ValidationError(KaspaBrawlError):
    """Missing or malformed request fields."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "validation_failed"


class AuthenticationError(KaspaBrawlError):
    """Nonce, signature or token rejected."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "authentication_failed"


class NotFoundError(KaspaBrawlError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


class StorageError(KaspaBrawlError):
    """The backing store is unavailable; callers may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = "storage_unavailable"


class UpstreamError(KaspaBrawlError):
    """A remote Kaspa API call failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_code = "upstream_unavailable"


# Stable rejection messages shared by the verifier and the API.
INVALID_NONCE_MESSAGE = "Invalid or expired nonce"
SIGNATURE_FAILED_MESSAGE = "Failed to verify signature"


def invalid_nonce() -> AuthenticationError:
    return AuthenticationError(INVALID_NONCE_MESSAGE, code="nonce_invalid")


def signature_failed() -> AuthenticationError:
    return AuthenticationError(SIGNATURE_FAILED_MESSAGE, code="signature_invalid")
