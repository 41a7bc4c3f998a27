"""
Docs Wallet Backend — User Service
===================================

What:  Registration (idempotent per identity) and current-user lookup.
Who:   POST /users (public) and GET /user (guarded).

Registering an identity that already exists is not an error: the caller
gets `{"message": "User already exists"}` and nothing is written. A race
between two first registrations is settled by the unique index on
users.email and reported the same way.
"""

import logging
from typing import Any, Dict, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docs_wallet.exceptions import BadRequestError, DatabaseError, NotFoundError
from docs_wallet.models.user import User
from docs_wallet.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

USER_EXISTS = "User already exists"


class UserService:

    async def register(
        self, db: AsyncSession, payload: Dict[str, Any]
    ) -> Union[Dict[str, Any], MessageResponse]:
        """
        Insert a user record unless one already exists for `payload["email"]`.

        Returns:
            The stored record, or the existing-user notice.
        """
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise BadRequestError(message="Field 'email' is required.", field="email")

        profile = {k: v for k, v in payload.items() if k not in ("id", "email")}

        try:
            if await self._find(db, email) is not None:
                logger.info("Registration skipped, %s already exists", email)
                return MessageResponse(message=USER_EXISTS)

            user = User(email=email, profile=profile)
            db.add(user)
            await db.flush()
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("Concurrent registration for %s resolved by unique index", email)
            return MessageResponse(message=USER_EXISTS)
        except SQLAlchemyError as e:
            logger.error("Database error registering %s: %s", email, e)
            raise DatabaseError(message="Failed to register user.")

        logger.info("Registered user %s", email)
        return user.to_dict()

    async def get_by_email(self, db: AsyncSession, email: str) -> Dict[str, Any]:
        """Raises NotFoundError when no user has this identity."""
        try:
            user = await self._find(db, email)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", email, e)
            raise DatabaseError(message="Failed to fetch user.")

        if user is None:
            raise NotFoundError(resource="user", message="User not found")
        return user.to_dict()

    async def _find(self, db: AsyncSession, email: str):
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


user_service = UserService()
