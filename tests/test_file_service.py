"""
Docs Wallet Backend — Upload Staging Unit Tests
================================================

What:  FileService writes payloads under UUID names and always removes them.
How:   Real temporary directories from pytest's tmp_path.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docs_wallet.exceptions import ObjectStoreError
from docs_wallet.services.file_service import FileService


class TestStage:

    @pytest.mark.asyncio
    async def test_stage_writes_content(self, file_service, staging_dir, sample_image_bytes):
        staged = await file_service.stage("scan.JPG", sample_image_bytes)

        path = Path(staged.path)
        assert path.parent == staging_dir.resolve()
        assert path.read_bytes() == sample_image_bytes
        assert staged.filename == "scan.JPG"
        assert staged.size == len(sample_image_bytes)

    @pytest.mark.asyncio
    async def test_stage_uses_uuid_name_with_lowercase_extension(self, file_service):
        staged = await file_service.stage("../../etc/passwd.PNG", b"x")

        name = Path(staged.path).name
        assert name.endswith(".png")
        assert "passwd" not in name

    @pytest.mark.asyncio
    async def test_same_filename_twice_gets_distinct_paths(self, file_service):
        first = await file_service.stage("a.jpg", b"1")
        second = await file_service.stage("a.jpg", b"2")
        assert first.path != second.path

    @pytest.mark.asyncio
    async def test_write_failure_raises_object_store_error(self, file_service):
        with patch("aiofiles.open", new_callable=MagicMock) as mock_open:
            mock_open.return_value.__aenter__ = AsyncMock(side_effect=OSError("disk full"))
            mock_open.return_value.__aexit__ = AsyncMock(return_value=False)

            with pytest.raises(ObjectStoreError, match="Failed to upload files"):
                await file_service.stage("a.jpg", b"x")

    def test_constructor_creates_missing_directory(self, tmp_path):
        root = tmp_path / "nested" / "staging"
        FileService(str(root))
        assert root.is_dir()


class TestCleanup:

    @pytest.mark.asyncio
    async def test_cleanup_file_removes_file(self, tmp_path):
        service = FileService(str(tmp_path))
        test_file = tmp_path / "test.jpg"
        test_file.write_bytes(b"test content")

        await service.cleanup_file(str(test_file))
        assert not test_file.exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self, tmp_path):
        service = FileService(str(tmp_path))
        # Should not raise
        await service.cleanup_file(str(tmp_path / "nonexistent.jpg"))

    @pytest.mark.asyncio
    async def test_cleanup_removes_every_staged_file(self, file_service, staging_dir):
        staged = [await file_service.stage(f"f{i}.jpg", b"x") for i in range(3)]
        assert len(list(staging_dir.iterdir())) == 3

        await file_service.cleanup(staged)
        assert list(staging_dir.iterdir()) == []
