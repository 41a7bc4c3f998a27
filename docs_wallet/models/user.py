"""
Docs Wallet Backend — User SQLAlchemy Model
============================================

What:  ORM model for the `users` table.
How:   `email` is the identity key (unique); every other registration field
       is kept verbatim in the `profile` JSON column.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from docs_wallet.database import Base


class User(Base):
    """A registered identity. Inserted once, never updated or deleted."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        comment="Identity key; matches the email claim of bearer tokens",
    )

    profile: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Arbitrary profile fields supplied at registration",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {**self.profile, "id": str(self.id), "email": self.email}

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
