"""
Docs Wallet Backend — Image Schemas
====================================

What:  API contract for the image routes.
How:   Field names follow the JSON the web client already consumes
       (`public_id`, `user`, `uploadedAt`, `metadataIds`).
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class ImageResponse(BaseModel):
    """One image metadata record as returned by GET /images."""
    id: str = Field(description="Image record identifier")
    url: str = Field(description="Public URL of the stored file")
    public_id: str = Field(description="Storage handle of the file")
    user: str = Field(description="Owner identity")
    uploadedAt: datetime = Field(description="Upload time (UTC)")


class UploadResponse(BaseModel):
    """Returned by POST /images with HTTP 201."""
    message: str = Field(default="Images uploaded successfully.")
    metadataIds: List[str] = Field(description="Identifiers of the new image records, in upload order")
