"""
Docs Wallet Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets a fresh in-memory SQLite database, an in-memory object
       store and a temporary staging directory, bundled in an AppContext
       and injected into create_app(). No network, no real bucket.

Fixture Hierarchy (all function-scoped):
    ├── object_store:  InMemoryObjectStore test double
    ├── file_service:  FileService over tmp_path/staging
    ├── context:       AppContext (SQLite engine + the two above + TokenService)
    ├── db_session:    AsyncSession bound to the context's engine
    ├── test_client:   HTTPX AsyncClient talking to create_app(context)
    ├── auth_headers:  factory → {"Authorization": "Bearer <token>"} for an email
    └── mock_db_session: AsyncMock session for pure unit tests
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Set
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ACCESS_TOKEN_SECRET"] = "test-secret-that-is-long-enough-for-hs256"
os.environ["STAGING_ROOT"] = tempfile.mkdtemp(prefix="docs_wallet_test_")
os.environ["STORAGE_BUCKET"] = "test-bucket"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from docs_wallet.context import AppContext
from docs_wallet.database import Base, build_engine, build_session_factory
from docs_wallet.exceptions import ObjectStoreError
from docs_wallet.services.file_service import FileService
from docs_wallet.services.object_store import StoredObject
from docs_wallet.services.token_service import TokenService
import docs_wallet.models  # noqa: F401

TEST_SECRET = os.environ["ACCESS_TOKEN_SECRET"]


class InMemoryObjectStore:
    """
    Test double for ObjectStore.

    Attributes:
        objects:        key → uploaded bytes
        fail_filenames: uploads of these filenames raise ObjectStoreError
        delete_result:  forced return value for delete(); None means
                        "True if the key exists, else False"
        upload_calls / delete_calls: call log for assertions
    """

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.fail_filenames: Set[str] = set()
        self.delete_result: Optional[bool] = None
        self.upload_calls: List[str] = []
        self.delete_calls: List[str] = []
        self.available = True
        self._counter = 0

    async def upload(self, path: str, filename: str) -> StoredObject:
        self.upload_calls.append(filename)
        if filename in self.fail_filenames:
            raise ObjectStoreError(message="Failed to upload files.", context={"filename": filename})
        self._counter += 1
        key = f"docs-wallet/{self._counter}{Path(filename).suffix.lower()}"
        self.objects[key] = Path(path).read_bytes()
        return StoredObject(url=f"https://cdn.test/{key}", public_id=key)

    async def delete(self, public_id: str) -> bool:
        self.delete_calls.append(public_id)
        if self.delete_result is not None:
            return self.delete_result
        return self.objects.pop(public_id, None) is not None

    async def ping(self) -> bool:
        return self.available


@pytest.fixture
def object_store():
    return InMemoryObjectStore()


@pytest.fixture
def staging_dir(tmp_path):
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def file_service(staging_dir):
    return FileService(str(staging_dir))


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET)


@pytest_asyncio.fixture
async def context(object_store, file_service, token_service):
    """
    Fresh AppContext over an in-memory SQLite database.

    All tables are created up front; the engine is disposed after the test.
    """
    engine = build_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    ctx = AppContext(
        engine=engine,
        session_factory=build_session_factory(engine),
        object_store=object_store,
        file_service=file_service,
        token_service=token_service,
    )
    yield ctx
    await ctx.aclose()


@pytest_asyncio.fixture
async def db_session(context):
    async with context.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(context):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    from docs_wallet.main import create_app

    app = create_app(context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(token_service):
    """Factory: bearer headers for `email`, signed with the test secret."""

    def _headers(email: str = "a@x.com", **extra) -> Dict[str, str]:
        token = token_service.issue({"email": email, **extra})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def mock_db_session():
    """AsyncMock standing in for AsyncSession where no SQL needs to run."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


@pytest.fixture
def sample_image_bytes():
    """Smallest valid JPEG: SOI + JFIF APP0 + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )
