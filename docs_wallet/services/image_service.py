"""
Docs Wallet Backend — Image Service (Upload Workflow)
======================================================

What:  Orchestrates the image routes: batch upload, owner listing, two-step
       delete.
How:   Composes FileService (staging), the ObjectStore adapter and the
       database session. Stateless: every dependency is passed per call.
Who:   Called by the /images route handlers after the access guard resolved
       the caller's identity.

Upload Flow (POST /images):
    ┌──────────┐   ┌──────────┐   ┌─────────────────────┐   ┌────────────┐
    │  Guard   │──▶│  Stage   │──▶│ Upload ×N (gather)  │──▶│ Batch      │
    │ (claim)  │   │ (disk)   │   │ to object store     │   │ insert (DB)│
    └──────────┘   └──────────┘   └─────────────────────┘   └────────────┘

    Any upload fails   → compensating delete of the uploads that succeeded,
                         ObjectStoreError (500), zero records written.
    Batch insert fails → rollback, compensating delete of every upload,
                         DatabaseError (500).
    Always             → staged files removed.

Delete Flow (DELETE /images/{id}):
    Lookup by id AND owner → object-store delete → row delete.
    The row is only removed after the object store confirmed the removal, so
    a failed remote delete never leaves an object without its metadata.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docs_wallet.exceptions import (
    BadRequestError,
    DatabaseError,
    NotFoundError,
    ObjectStoreError,
)
from docs_wallet.models.image import Image
from docs_wallet.schemas.common import MessageResponse
from docs_wallet.schemas.image import ImageResponse, UploadResponse
from docs_wallet.services.file_service import FileService, StagedFile
from docs_wallet.services.object_store import ObjectStore, StoredObject

logger = logging.getLogger(__name__)


def parse_record_id(raw_id: str, resource: str) -> uuid.UUID:
    """Path ids that are not UUIDs cannot name a record: report them as not found."""
    try:
        return uuid.UUID(raw_id)
    except (ValueError, AttributeError, TypeError):
        raise NotFoundError(resource=resource, resource_id=str(raw_id))


class ImageService:
    """
    Business logic for image metadata and the files behind it.

    Responsibilities:
        - upload_images(): stage → concurrent upload → batch insert
        - list_images(): every record owned by the caller
        - delete_image(): owner-scoped two-step delete
    """

    async def upload_images(
        self,
        db: AsyncSession,
        object_store: ObjectStore,
        file_service: FileService,
        owner: str,
        uploads: Sequence[Tuple[str, bytes]],
    ) -> UploadResponse:
        """
        Persist every uploaded file and one metadata record per file.

        Args:
            db:           Request-scoped session
            object_store: Destination for the files
            file_service: Staging area for the raw payloads
            owner:        Caller identity from the verified token claim
            uploads:      (filename, content) pairs from the multipart body

        Returns:
            UploadResponse with the new record ids in upload order.

        Raises:
            BadRequestError:  no files supplied (nothing is touched)
            ObjectStoreError: staging or any upload failed
            DatabaseError:    the batch insert failed
        """
        if not uploads:
            raise BadRequestError(message="No files uploaded.", field="files")

        logger.info("Upload request from %s: %d file(s)", owner, len(uploads))
        staged: List[StagedFile] = []

        try:
            for filename, content in uploads:
                staged.append(await file_service.stage(filename, content))

            # ── Fan out: all uploads run concurrently, join-all ───────────
            results = await asyncio.gather(
                *(object_store.upload(item.path, item.filename) for item in staged),
                return_exceptions=True,
            )
            stored = [r for r in results if isinstance(r, StoredObject)]
            failures = [r for r in results if isinstance(r, BaseException)]

            if failures:
                logger.error(
                    "%d of %d uploads failed for %s: %s",
                    len(failures),
                    len(results),
                    owner,
                    "; ".join(type(f).__name__ for f in failures),
                )
                await self._compensate(object_store, stored)
                raise ObjectStoreError(
                    message="Failed to upload files.",
                    context={"failed": len(failures), "succeeded": len(stored)},
                )

            # ── Batch metadata write ──────────────────────────────────────
            uploaded_at = datetime.now(timezone.utc)
            images = [
                Image(
                    id=uuid.uuid4(),
                    url=obj.url,
                    public_id=obj.public_id,
                    user=owner,
                    uploaded_at=uploaded_at,
                )
                for obj in stored
            ]
            try:
                db.add_all(images)
                await db.flush()
                await db.commit()
            except SQLAlchemyError as e:
                logger.error("Batch insert of %d image records failed: %s", len(images), e)
                await db.rollback()
                await self._compensate(object_store, stored)
                raise DatabaseError(
                    message="Failed to upload files.",
                    context={"error_type": type(e).__name__},
                )

            logger.info("Stored %d image record(s) for %s", len(images), owner)
            return UploadResponse(metadataIds=[str(image.id) for image in images])

        finally:
            await file_service.cleanup(staged)

    async def _compensate(self, object_store: ObjectStore, stored: Sequence[StoredObject]) -> None:
        """
        Best-effort removal of objects uploaded by a request that failed.

        Objects that cannot be removed are logged with their key so they can
        be purged by hand; the request's own error is what the caller sees.
        """
        if not stored:
            return
        results = await asyncio.gather(
            *(object_store.delete(obj.public_id) for obj in stored),
            return_exceptions=True,
        )
        for obj, result in zip(stored, results):
            if result is not True:
                logger.error("Orphaned object after failed upload: %s (%r)", obj.public_id, result)
        logger.info("Compensating delete for %d uploaded object(s) finished", len(stored))

    async def list_images(self, db: AsyncSession, owner: str) -> List[ImageResponse]:
        """Every image record whose owner is `owner`, oldest first."""
        try:
            result = await db.execute(
                select(Image).where(Image.user == owner).order_by(Image.uploaded_at)
            )
            images = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing images for %s: %s", owner, e)
            raise DatabaseError(message="Failed to fetch images.")

        return [ImageResponse(**image.to_dict()) for image in images]

    async def delete_image(
        self,
        db: AsyncSession,
        object_store: ObjectStore,
        owner: str,
        image_id: str,
    ) -> MessageResponse:
        """
        Delete one of the caller's images from the object store, then its record.

        Raises:
            NotFoundError:    no record with this id belongs to `owner`
            ObjectStoreError: the object store did not confirm the deletion;
                              the record is left in place
            DatabaseError:    the record lookup or delete failed
        """
        record_id = parse_record_id(image_id, "image")

        try:
            result = await db.execute(
                select(Image).where(Image.id == record_id, Image.user == owner)
            )
            image = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching image %s: %s", image_id, e)
            raise DatabaseError(message="Failed to delete image.")

        if image is None:
            raise NotFoundError(resource="image", resource_id=image_id, message="Image not found.")

        logger.info("Deleting image %s (%s) for %s", image.id, image.public_id, owner)

        if not await object_store.delete(image.public_id):
            raise ObjectStoreError(
                message="Failed to delete image from storage.",
                context={"image_id": image_id, "public_id": image.public_id},
            )

        try:
            result = await db.execute(
                delete(Image).where(Image.id == record_id, Image.user == owner)
            )
            if result.rowcount == 0:
                raise NotFoundError(
                    resource="image",
                    resource_id=image_id,
                    message="Image metadata not found in database.",
                )
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting image %s: %s", image_id, e)
            raise DatabaseError(message="Failed to delete image.")

        return MessageResponse(message="Image deleted successfully.")


image_service = ImageService()
