"""
Docs Wallet Backend — Image Routes
===================================

What:  Multipart batch upload, owner listing and delete for images.
How:   Reads the multipart parts, then hands everything to ImageService
       together with the context's object store and staging service.
Who:   The web client's document wallet view.

Request Flow (POST /images):
    1. FastAPI parses the multipart body (`files`, repeated) before any
       dependency runs, so an unauthenticated upload is still spooled
    2. Access guard verifies the bearer token; 401 before the handler body,
       so nothing is staged, uploaded or written
    3. ImageService stages, uploads concurrently, writes one record per file
    4. 201 Created with the new record ids
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from docs_wallet.context import AppContext, get_context
from docs_wallet.database import get_db_session
from docs_wallet.middleware.access_guard import require_claim
from docs_wallet.schemas.auth import TokenClaim
from docs_wallet.schemas.common import ErrorResponse, MessageResponse
from docs_wallet.schemas.image import ImageResponse, UploadResponse
from docs_wallet.services.image_service import image_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/images",
    tags=["Images"],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.post(
    "",
    status_code=201,
    response_model=UploadResponse,
    responses={
        400: {"description": "No files uploaded", "model": ErrorResponse},
        500: {"description": "Upload or metadata write failed", "model": ErrorResponse},
    },
    summary="Upload one or more images",
    description=(
        "Uploads every part of the multipart field `files` to object storage and "
        "records one metadata entry per file, owned by the caller. If any file "
        "fails to upload, the files that did upload are removed again and no "
        "metadata is written."
    ),
)
async def upload_images(
    claim: TokenClaim = Depends(require_claim),
    files: Optional[List[UploadFile]] = File(
        default=None,
        description="Image files; repeat the `files` field once per file",
    ),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> UploadResponse:
    files = files or []
    try:
        uploads = [(f.filename or "upload", await f.read()) for f in files]
    finally:
        for f in files:
            await f.close()

    logger.info(
        "Received %d file(s) from %s: %s",
        len(uploads),
        claim.email,
        ", ".join(f"{name} ({len(content)} bytes)" for name, content in uploads),
    )

    return await image_service.upload_images(
        db=db,
        object_store=context.object_store,
        file_service=context.file_service,
        owner=claim.email,
        uploads=uploads,
    )


@router.get("", response_model=List[ImageResponse], summary="List the caller's images")
async def list_images(
    claim: TokenClaim = Depends(require_claim),
    db: AsyncSession = Depends(get_db_session),
) -> List[ImageResponse]:
    return await image_service.list_images(db, claim.email)


@router.delete(
    "/{image_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "No such image for this user", "model": ErrorResponse},
        500: {"description": "Object storage did not confirm the delete", "model": ErrorResponse},
    },
    summary="Delete one of the caller's images",
    description=(
        "Removes the file from object storage first and the metadata record "
        "afterwards. When storage does not confirm the removal the record is kept."
    ),
)
async def delete_image(
    image_id: str,
    claim: TokenClaim = Depends(require_claim),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> MessageResponse:
    return await image_service.delete_image(db, context.object_store, claim.email, image_id)
