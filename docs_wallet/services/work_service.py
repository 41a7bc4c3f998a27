"""
Docs Wallet Backend — Work Service
===================================

What:  Owner-scoped create, list and delete for free-form "works" records.
Who:   /works route handlers (all guarded).

Ownership:
    The submitted object must carry an `email` equal to the caller's
    identity; it is stored as-is, never stamped or rewritten. Deletes match
    on the path id AND the caller's identity, so a request can only ever
    remove the one record it addressed.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docs_wallet.exceptions import BadRequestError, DatabaseError, NotFoundError
from docs_wallet.models.work import Work
from docs_wallet.schemas.work import WorkDeleteResponse, WorkInsertResponse
from docs_wallet.services.image_service import parse_record_id

logger = logging.getLogger(__name__)


class WorkService:

    async def create_work(
        self, db: AsyncSession, owner: str, payload: Dict[str, Any]
    ) -> WorkInsertResponse:
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise BadRequestError(message="Field 'email' is required.", field="email")
        if email != owner:
            raise BadRequestError(
                message="Field 'email' must match the authenticated user.",
                field="email",
            )

        data = {k: v for k, v in payload.items() if k not in ("id", "email")}
        work = Work(email=email, data=data)
        try:
            db.add(work)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error creating work for %s: %s", owner, e)
            raise DatabaseError(message="Failed to create work.")

        logger.info("Created work %s for %s", work.id, owner)
        return WorkInsertResponse(insertedId=str(work.id))

    async def list_works(self, db: AsyncSession, owner: str) -> List[Dict[str, Any]]:
        try:
            result = await db.execute(
                select(Work).where(Work.email == owner).order_by(Work.created_at)
            )
            works = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing works for %s: %s", owner, e)
            raise DatabaseError(message="Failed to fetch works.")
        return [work.to_dict() for work in works]

    async def delete_work(self, db: AsyncSession, owner: str, work_id: str) -> WorkDeleteResponse:
        """
        Delete the caller's work `work_id`.

        Raises:
            NotFoundError: no work with this id belongs to `owner`.
        """
        record_id = parse_record_id(work_id, "work")
        try:
            result = await db.execute(
                delete(Work).where(Work.id == record_id, Work.email == owner)
            )
            deleted = result.rowcount
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting work %s: %s", work_id, e)
            raise DatabaseError(message="Failed to delete work.")

        if deleted == 0:
            raise NotFoundError(resource="work", resource_id=work_id, message="Work not found.")

        logger.info("Deleted work %s for %s", work_id, owner)
        return WorkDeleteResponse(deletedCount=deleted)


work_service = WorkService()
