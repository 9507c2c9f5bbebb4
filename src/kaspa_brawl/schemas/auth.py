"""Authentication Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class NonceResponse(BaseModel):
    """Challenge returned to a wallet before login."""

    nonce: str = Field(..., description="Hex-encoded single-use nonce to sign")
    expires_in: int = Field(..., alias="expiresIn", description="Seconds until the nonce expires")

    model_config = ConfigDict(populate_by_name=True)


class VerifyRequest(BaseModel):
    """Signed challenge submitted by the wallet.

    Every field is optional at the schema level so that missing values are
    reported with the service's own stable messages.
    """

    nonce: str | None = Field(None, description="Nonce previously issued by /auth/nonce")
    signature: str | None = Field(None, description="Schnorr signature, hex or base64")
    public_key: str | None = Field(
        None,
        alias="publicKey",
        description="x-only or compressed secp256k1 public key, hex or base64",
    )
    address: str | None = Field(None, description="Kaspa address claimed by the wallet")

    model_config = ConfigDict(populate_by_name=True)


class VerifyResponse(BaseModel):
    """Access token issued after a successful login."""

    token: str = Field(..., description="JWT access token")
    address: str = Field(..., description="Verified Kaspa address")


class SessionResponse(BaseModel):
    address: str = Field(..., description="Address the presented token was issued for")
