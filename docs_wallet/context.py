"""
Docs Wallet Backend — Application Context
==========================================

What:  One object holding every long-lived handle the handlers need:
       database engine + session factory, object store, staging service,
       token service.
How:   build_context() runs once in the FastAPI lifespan; the result is
       stored on `app.state.context` and handed to handlers through the
       get_context() dependency. Tests build their own context (in-memory
       SQLite, fake object store) and pass it to create_app().
When:  Built at startup, disposed at shutdown.
"""

import logging
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from docs_wallet.config import Settings
from docs_wallet.database import build_engine, build_session_factory
from docs_wallet.services.file_service import FileService
from docs_wallet.services.object_store import ObjectStore, S3ObjectStore
from docs_wallet.services.token_service import TokenService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    object_store: ObjectStore
    file_service: FileService
    token_service: TokenService

    async def aclose(self) -> None:
        """Close every pooled database connection."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


def build_context(settings: Settings) -> AppContext:
    """Create the production context from settings."""
    engine = build_engine(settings.sqlalchemy_url, echo=settings.log_level == "DEBUG")
    context = AppContext(
        engine=engine,
        session_factory=build_session_factory(engine),
        object_store=S3ObjectStore.from_settings(settings),
        file_service=FileService(settings.staging_root),
        token_service=TokenService(settings.access_token_secret),
    )
    logger.info(
        "Context ready: database=%s bucket=%s folder=%s",
        engine.url.render_as_string(hide_password=True),
        settings.storage_bucket or "<unset>",
        settings.storage_folder,
    )
    return context


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context of the running app."""
    return request.app.state.context
