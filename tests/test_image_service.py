"""
Docs Wallet Backend — Image Service Unit Tests
===============================================

What:  Upload fan-out, compensation on partial failure, owner-scoped
       listing and the two-step delete.
How:   Real SQLite session + InMemoryObjectStore from conftest.
"""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from docs_wallet.exceptions import BadRequestError, DatabaseError, NotFoundError, ObjectStoreError
from docs_wallet.models.image import Image
from docs_wallet.services.image_service import image_service, parse_record_id


async def _count_images(db) -> int:
    result = await db.execute(select(func.count()).select_from(Image))
    return result.scalar_one()


async def _upload(db, object_store, file_service, owner="a@x.com", names=("a.jpg",)):
    return await image_service.upload_images(
        db=db,
        object_store=object_store,
        file_service=file_service,
        owner=owner,
        uploads=[(name, f"content of {name}".encode()) for name in names],
    )


class TestUpload:

    @pytest.mark.asyncio
    async def test_one_record_per_file(self, db_session, object_store, file_service):
        response = await _upload(
            db_session, object_store, file_service, names=("a.jpg", "b.png", "c.jpg")
        )

        assert response.message == "Images uploaded successfully."
        assert len(response.metadataIds) == 3
        assert len(object_store.objects) == 3
        assert await _count_images(db_session) == 3

    @pytest.mark.asyncio
    async def test_records_share_owner_and_timestamp(self, db_session, object_store, file_service):
        await _upload(db_session, object_store, file_service, names=("a.jpg", "b.jpg"))

        images = (await db_session.execute(select(Image))).scalars().all()
        assert {image.user for image in images} == {"a@x.com"}
        assert len({image.uploaded_at for image in images}) == 1
        assert {image.public_id for image in images} == set(object_store.objects)

    @pytest.mark.asyncio
    async def test_no_files_is_bad_request(self, db_session, object_store, file_service):
        with pytest.raises(BadRequestError, match="No files uploaded"):
            await _upload(db_session, object_store, file_service, names=())

        assert object_store.upload_calls == []
        assert await _count_images(db_session) == 0

    @pytest.mark.asyncio
    async def test_partial_failure_compensates(self, db_session, object_store, file_service):
        object_store.fail_filenames = {"bad.jpg"}

        with pytest.raises(ObjectStoreError, match="Failed to upload files"):
            await _upload(
                db_session, object_store, file_service, names=("a.jpg", "bad.jpg", "c.jpg")
            )

        assert len(object_store.upload_calls) == 3
        assert len(object_store.delete_calls) == 2
        assert object_store.objects == {}
        assert await _count_images(db_session) == 0

    @pytest.mark.asyncio
    async def test_staged_files_removed_on_success(
        self, db_session, object_store, file_service, staging_dir
    ):
        await _upload(db_session, object_store, file_service, names=("a.jpg", "b.jpg"))
        assert list(staging_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_staged_files_removed_on_failure(
        self, db_session, object_store, file_service, staging_dir
    ):
        object_store.fail_filenames = {"a.jpg"}
        with pytest.raises(ObjectStoreError):
            await _upload(db_session, object_store, file_service, names=("a.jpg",))
        assert list(staging_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_insert_failure_rolls_back_and_compensates(
        self, mock_db_session, object_store, file_service
    ):
        mock_db_session.flush = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("db down")))

        with pytest.raises(DatabaseError):
            await _upload(mock_db_session, object_store, file_service, names=("a.jpg", "b.jpg"))

        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()
        assert len(object_store.delete_calls) == 2
        assert object_store.objects == {}


class TestList:

    @pytest.mark.asyncio
    async def test_only_owner_records(self, db_session, object_store, file_service):
        await _upload(db_session, object_store, file_service, owner="a@x.com", names=("1.jpg", "2.jpg"))
        await _upload(db_session, object_store, file_service, owner="b@x.com", names=("3.jpg",))

        mine = await image_service.list_images(db_session, "a@x.com")
        theirs = await image_service.list_images(db_session, "b@x.com")
        nobody = await image_service.list_images(db_session, "c@x.com")

        assert len(mine) == 2
        assert all(image.user == "a@x.com" for image in mine)
        assert len(theirs) == 1
        assert nobody == []


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_object_then_record(self, db_session, object_store, file_service):
        response = await _upload(db_session, object_store, file_service)
        image_id = response.metadataIds[0]

        result = await image_service.delete_image(db_session, object_store, "a@x.com", image_id)

        assert result.message == "Image deleted successfully."
        assert object_store.objects == {}
        assert await _count_images(db_session) == 0

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_found(self, db_session, object_store):
        with pytest.raises(NotFoundError, match="Image not found"):
            await image_service.delete_image(db_session, object_store, "a@x.com", str(uuid.uuid4()))
        assert object_store.delete_calls == []

    @pytest.mark.asyncio
    async def test_other_owner_cannot_delete(self, db_session, object_store, file_service):
        response = await _upload(db_session, object_store, file_service, owner="a@x.com")

        with pytest.raises(NotFoundError):
            await image_service.delete_image(
                db_session, object_store, "b@x.com", response.metadataIds[0]
            )
        assert await _count_images(db_session) == 1
        assert len(object_store.objects) == 1

    @pytest.mark.asyncio
    async def test_storage_failure_keeps_record(self, db_session, object_store, file_service):
        response = await _upload(db_session, object_store, file_service)
        object_store.delete_result = False

        with pytest.raises(ObjectStoreError, match="Failed to delete image from storage"):
            await image_service.delete_image(
                db_session, object_store, "a@x.com", response.metadataIds[0]
            )
        assert await _count_images(db_session) == 1


class TestParseRecordId:

    def test_valid_uuid(self):
        value = uuid.uuid4()
        assert parse_record_id(str(value), "image") == value

    def test_garbage_is_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            parse_record_id("not-an-id", "work")
        assert exc_info.value.message == "Work not found."
