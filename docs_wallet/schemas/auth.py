"""
Docs Wallet Backend — Token Schemas
====================================

What:  The decoded bearer-token claim and the token issuance response.
"""

from pydantic import BaseModel, ConfigDict, Field


class TokenClaim(BaseModel):
    """
    Decoded and verified bearer-token claims.

    `email` is the caller's identity; extra payload fields supplied at
    issuance are preserved and reachable through `model_extra`.
    """

    model_config = ConfigDict(extra="allow")

    email: str = Field(min_length=1, description="Caller identity")
    iat: int = Field(description="Issued-at (UNIX seconds)")
    exp: int = Field(description="Expiry (UNIX seconds)")


class TokenResponse(BaseModel):
    """Returned by POST /jwt."""

    token: str = Field(description="Signed bearer token, valid for one hour")
