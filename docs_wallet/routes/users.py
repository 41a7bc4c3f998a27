"""
Docs Wallet Backend — User Routes
==================================

POST /users registers an identity (public, idempotent).
GET  /user  returns the record of the authenticated caller.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docs_wallet.database import get_db_session
from docs_wallet.middleware.access_guard import require_claim
from docs_wallet.schemas.auth import TokenClaim
from docs_wallet.schemas.common import ErrorResponse
from docs_wallet.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


@router.post(
    "/users",
    responses={400: {"description": "No email in payload", "model": ErrorResponse}},
    summary="Register a user",
    description=(
        "Stores the posted user object. Registering an email that already exists "
        "returns `{\"message\": \"User already exists\"}` and writes nothing."
    ),
)
async def register_user(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db_session),
):
    return await user_service.register(db, payload)


@router.get(
    "/user",
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "User not registered", "model": ErrorResponse},
    },
    summary="Get the current user",
)
async def get_current_user(
    claim: TokenClaim = Depends(require_claim),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    return await user_service.get_by_email(db, claim.email)
