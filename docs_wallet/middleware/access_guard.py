"""
Docs Wallet Backend — Access Guard
===================================

What:  Gate in front of every protected route: no valid bearer token, no
       handler.
How:   A FastAPI dependency. HTTPBearer (auto_error=False) extracts the
       `Authorization: Bearer <token>` header; the TokenService verifies it.
       Route handlers declare `claim: TokenClaim = Depends(require_claim)`
       and read the caller's identity from `claim.email`.
Who:   Every route except GET /, GET /health, POST /jwt and POST /users.

Failure behaviour:
    Missing header, non-Bearer scheme, empty token and failed verification
    all raise UnauthorizedError (401) before the handler body runs, so no
    database write, object upload or delete can happen for such requests.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from docs_wallet.context import AppContext, get_context
from docs_wallet.exceptions import UnauthorizedError
from docs_wallet.middleware.request_id import request_id_var
from docs_wallet.schemas.auth import TokenClaim

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def require_claim(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    context: AppContext = Depends(get_context),
) -> TokenClaim:
    """
    Resolve the caller's verified claim or raise UnauthorizedError.

    The claim is also attached to `request.state.claim` for middleware and
    exception handlers that want the caller identity.
    """
    if credentials is None or not credentials.credentials:
        logger.info("[%s] Rejected %s %s: missing bearer token",
                    request_id_var.get(""), request.method, request.url.path)
        raise UnauthorizedError(context={"reason": "missing bearer token"})

    claim = context.token_service.verify(credentials.credentials)
    request.state.claim = claim
    return claim
