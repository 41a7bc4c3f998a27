"""
Docs Wallet Backend — Works Routes
===================================

All three routes require a bearer token and only ever touch records whose
`email` equals the caller's identity.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docs_wallet.database import get_db_session
from docs_wallet.middleware.access_guard import require_claim
from docs_wallet.schemas.auth import TokenClaim
from docs_wallet.schemas.common import ErrorResponse
from docs_wallet.schemas.work import WorkDeleteResponse, WorkInsertResponse
from docs_wallet.services.work_service import work_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/works",
    tags=["Works"],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.post(
    "",
    response_model=WorkInsertResponse,
    responses={400: {"description": "Missing or foreign email", "model": ErrorResponse}},
    summary="Create a work",
)
async def create_work(
    payload: Dict[str, Any] = Body(...),
    claim: TokenClaim = Depends(require_claim),
    db: AsyncSession = Depends(get_db_session),
) -> WorkInsertResponse:
    return await work_service.create_work(db, claim.email, payload)


@router.get("", summary="List the caller's works")
async def list_works(
    claim: TokenClaim = Depends(require_claim),
    db: AsyncSession = Depends(get_db_session),
) -> List[Dict[str, Any]]:
    return await work_service.list_works(db, claim.email)


@router.delete(
    "/{work_id}",
    response_model=WorkDeleteResponse,
    responses={404: {"description": "No such work for this user", "model": ErrorResponse}},
    summary="Delete one of the caller's works",
)
async def delete_work(
    work_id: str,
    claim: TokenClaim = Depends(require_claim),
    db: AsyncSession = Depends(get_db_session),
) -> WorkDeleteResponse:
    return await work_service.delete_work(db, claim.email, work_id)
