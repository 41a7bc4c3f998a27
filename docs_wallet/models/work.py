"""
Docs Wallet Backend — Work SQLAlchemy Model
============================================

What:  ORM model for the `works` table: free-form records owned by an identity.
How:   `email` is the owner column used for every read and delete filter;
       the rest of the submitted object is stored in `data`.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from docs_wallet.database import Base


class Work(Base):
    __tablename__ = "works"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(String(320), nullable=False, comment="Owner identity")

    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_works_email_created_at", "email", "created_at"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {**self.data, "id": str(self.id), "email": self.email}

    def __repr__(self) -> str:
        return f"<Work(id={self.id}, email='{self.email}')>"
