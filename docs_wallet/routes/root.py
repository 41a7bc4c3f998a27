"""
Docs Wallet Backend — Root & Token Routes
==========================================

What:  GET / answers with a plaintext liveness string; POST /jwt turns an
       identity payload into a signed bearer token.
Who:   The web client calls /jwt right after its own sign-in step and sends
       the returned token on every protected request.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from docs_wallet.context import AppContext, get_context
from docs_wallet.exceptions import BadRequestError
from docs_wallet.schemas.auth import TokenResponse
from docs_wallet.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

LIVENESS_MESSAGE = "Docs Wallet is running."


@router.get("/", response_class=PlainTextResponse, summary="Liveness string")
async def root() -> str:
    return LIVENESS_MESSAGE


@router.post(
    "/jwt",
    response_model=TokenResponse,
    responses={400: {"description": "No email in payload", "model": ErrorResponse}},
    summary="Issue a bearer token",
    description=(
        "Signs the posted payload into a bearer token valid for one hour. "
        "The payload must contain the caller's `email`, which becomes the identity "
        "used to scope every protected route."
    ),
)
async def issue_token(
    payload: Dict[str, Any] = Body(...),
    context: AppContext = Depends(get_context),
) -> TokenResponse:
    email = payload.get("email")
    if not isinstance(email, str) or not email:
        raise BadRequestError(message="Field 'email' is required.", field="email")

    return TokenResponse(token=context.token_service.issue(payload))
