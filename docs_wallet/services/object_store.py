"""
Docs Wallet Backend — Object Store Adapter
===========================================

What:  Uploads image files to an S3-compatible bucket and deletes them again.
How:   boto3 S3 client (works with AWS S3, Cloudflare R2, MinIO). boto3 is
       synchronous, so each call runs in a worker thread via asyncio.to_thread;
       this lets the upload workflow fan several uploads out concurrently.
Who:   ImageService (upload + delete), the health route (ping).

Object layout:
    <bucket>/<folder>/<uuid4 hex><original extension>
    e.g. docs-wallet/3f2b9c0e4d8a4c5e9a1b2c3d4e5f6071.jpg

    The object key doubles as the storage handle (`public_id`) persisted
    with the image metadata; it is all that delete() needs.

Delete semantics:
    delete() returns False when the object does not exist, True when the
    bucket confirmed the removal, and raises ObjectStoreError when the
    storage call itself failed. Callers treat anything but True as "not
    deleted" and keep their metadata.
"""

import asyncio
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from docs_wallet.config import Settings
from docs_wallet.exceptions import ObjectStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredObject:
    """Result of a successful upload."""

    url: str
    public_id: str


class ObjectStore(Protocol):
    """Operations the upload workflow needs from object storage."""

    async def upload(self, path: str, filename: str) -> StoredObject:
        ...

    async def delete(self, public_id: str) -> bool:
        ...

    async def ping(self) -> bool:
        ...


def build_s3_client(settings: Settings):
    """
    Create the boto3 S3 client from settings.

    Empty credentials are passed as None so boto3 falls back to its default
    credential chain (environment, instance profile, ...).
    """
    config = Config(
        signature_version="s3v4",
        s3={"addressing_style": "path" if settings.storage_endpoint_url else "auto"},
    )
    return boto3.client(
        "s3",
        endpoint_url=settings.storage_endpoint_url or None,
        region_name=settings.storage_region,
        aws_access_key_id=settings.storage_access_key or None,
        aws_secret_access_key=settings.storage_secret_key or None,
        config=config,
    )


class S3ObjectStore:
    """
    S3-compatible implementation of ObjectStore.

    Args:
        client:          boto3 S3 client (injected so tests can pass a MagicMock)
        bucket:          Target bucket
        folder:          Fixed key prefix for every upload
        public_base_url: Base of public object URLs; derived from the
                         endpoint / region when not set
        endpoint_url:    Custom endpoint, used for URL derivation only
        region:          AWS region, used for URL derivation only
    """

    def __init__(
        self,
        client,
        bucket: str,
        folder: str = "docs-wallet",
        public_base_url: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        region: str = "us-east-1",
    ):
        self._client = client
        self.bucket = bucket
        self.folder = folder.strip("/")
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self.region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        return cls(
            client=build_s3_client(settings),
            bucket=settings.storage_bucket,
            folder=settings.storage_folder,
            public_base_url=settings.storage_public_base_url,
            endpoint_url=settings.storage_endpoint_url,
            region=settings.storage_region,
        )

    # ── Key & URL helpers ─────────────────────────────────────────────────

    def _object_key(self, filename: str) -> str:
        ext = Path(filename).suffix.lower()
        name = f"{uuid.uuid4().hex}{ext}"
        return f"{self.folder}/{name}" if self.folder else name

    def public_url(self, key: str) -> str:
        """Stable public URL for `key`."""
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    # ── Operations ────────────────────────────────────────────────────────

    async def upload(self, path: str, filename: str) -> StoredObject:
        """
        Upload the file at `path`, naming it after `filename`'s extension.

        Raises:
            ObjectStoreError: the bucket rejected the upload or was unreachable.
        """
        key = self._object_key(filename)
        content_type, _ = mimetypes.guess_type(filename)
        extra_args = {"ContentType": content_type or "application/octet-stream"}

        try:
            await asyncio.to_thread(
                self._client.upload_file, path, self.bucket, key, ExtraArgs=extra_args
            )
        except (S3UploadFailedError, ClientError, BotoCoreError) as e:
            logger.error("Upload of %s to bucket %s failed: %s", filename, self.bucket, e)
            raise ObjectStoreError(
                message="Failed to upload files.",
                context={"key": key, "error": type(e).__name__},
            )

        logger.info("Uploaded %s as %s", filename, key)
        return StoredObject(url=self.public_url(key), public_id=key)

    async def delete(self, public_id: str) -> bool:
        """
        Delete the object stored under `public_id`.

        Returns:
            True if the bucket confirmed the deletion, False if the object
            does not exist.

        Raises:
            ObjectStoreError: any other storage failure.
        """
        try:
            await asyncio.to_thread(self._client.head_object, Bucket=self.bucket, Key=public_id)
        except ClientError as e:
            if _error_code(e) in {"404", "NoSuchKey", "NotFound"}:
                logger.warning("Delete requested for missing object %s", public_id)
                return False
            raise ObjectStoreError(
                message="Failed to delete image from storage.",
                context={"key": public_id, "error": _error_code(e)},
            )
        except BotoCoreError as e:
            raise ObjectStoreError(
                message="Failed to delete image from storage.",
                context={"key": public_id, "error": type(e).__name__},
            )

        try:
            response = await asyncio.to_thread(
                self._client.delete_object, Bucket=self.bucket, Key=public_id
            )
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(
                message="Failed to delete image from storage.",
                context={"key": public_id, "error": type(e).__name__},
            )

        status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        deleted = status in (200, 204)
        if deleted:
            logger.info("Deleted object %s", public_id)
        else:
            logger.error("Unexpected status %s deleting object %s", status, public_id)
        return deleted

    async def ping(self) -> bool:
        """True when the bucket is reachable with the configured credentials."""
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=self.bucket)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.warning("Object store ping failed: %s", e)
            return False


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))
