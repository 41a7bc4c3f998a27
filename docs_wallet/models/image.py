"""
Docs Wallet Backend — Image SQLAlchemy Model
=============================================

What:  ORM model for the `images` table: metadata for one uploaded file.
Who:   Written in batches by ImageService.upload_images(); read and deleted
       by the owner-scoped list/delete operations.

Columns:
    - url:        Public URL returned by the object store
    - public_id:  Storage handle (object key) needed to delete the file later
    - user:       Owner identity (email from the bearer token claim)
    - uploaded_at: UTC timestamp stamped when the batch is written

Index on (user, uploaded_at) serves the only read pattern:
"all images of this owner in upload order".
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from docs_wallet.database import Base


class Image(Base):
    """
    An uploaded image owned by exactly one identity.

    Lifecycle:
        1. Created after every file of the request reached the object store
        2. Never updated
        3. Deleted by its owner only after the object store confirms removal
    """

    __tablename__ = "images"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    url: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Public URL of the stored object",
    )

    public_id: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        comment="Object-store key used to delete the file",
    )

    user: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        comment="Owner identity (email claim of the uploading request)",
    )

    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_images_user_uploaded_at", "user", "uploaded_at"),
    )

    def to_dict(self) -> dict:
        """Wire representation; `uploadedAt` keeps the key existing clients read."""
        return {
            "id": str(self.id),
            "url": self.url,
            "public_id": self.public_id,
            "user": self.user,
            "uploadedAt": self.uploaded_at,
        }

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, user='{self.user}', public_id='{self.public_id}')>"
