"""
Docs Wallet Backend — Token Service
====================================

What:  Signs and verifies the bearer tokens that carry a caller's identity.
How:   PyJWT, HS256, shared secret from ACCESS_TOKEN_SECRET. Tokens expire
       one hour after issuance; there is no refresh flow.
Who:   POST /jwt issues tokens; the access guard verifies them on every
       protected request.

Failure model:
    verify() collapses every PyJWT error (malformed, bad signature, expired,
    missing claims) into one UnauthorizedError with the same message.
    The specific reason is attached to the exception context for logging.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt as pyjwt
from pydantic import ValidationError as PydanticValidationError

from docs_wallet.exceptions import UnauthorizedError
from docs_wallet.schemas.auth import TokenClaim

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=1)


class TokenService:
    """
    Issues and verifies identity tokens.

    Args:
        secret:   HS256 signing key.
        lifetime: Validity window; fixed at one hour in production.
    """

    def __init__(self, secret: str, lifetime: timedelta = TOKEN_LIFETIME):
        self._secret = secret
        self.lifetime = lifetime

    def issue(self, payload: Dict[str, Any]) -> str:
        """
        Embed `payload` in a signed, time-limited token.

        Client-supplied `iat` / `exp` values are replaced.
        """
        now = datetime.now(timezone.utc)
        claims = dict(payload)
        claims["iat"] = int(now.timestamp())
        claims["exp"] = int((now + self.lifetime).timestamp())
        token = pyjwt.encode(claims, self._secret, algorithm=ALGORITHM)
        logger.info("Issued token for %s (expires in %ds)", claims.get("email"), self.lifetime.total_seconds())
        return token

    def verify(self, token: str) -> TokenClaim:
        """
        Validate signature and expiry and return the decoded claim.

        Raises:
            UnauthorizedError: for any invalid, expired or incomplete token.
        """
        try:
            payload = pyjwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                # Client payloads may carry an `aud`; no audience is configured here
                options={"require": ["exp", "iat"], "verify_aud": False},
            )
            return TokenClaim.model_validate(payload)
        except pyjwt.PyJWTError as e:
            raise UnauthorizedError(context={"reason": type(e).__name__})
        except PydanticValidationError:
            raise UnauthorizedError(context={"reason": "missing identity claim"})
