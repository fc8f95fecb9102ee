"""Dependency injection for API routes.

Provides the process-wide document store and the AccountDirectory built
on it. Dependencies are configured from settings and can be overridden
for testing via ``app.dependency_overrides``.
"""

import asyncio
from typing import Annotated

from fastapi import Depends

from accountdir.accounts.directory import AccountDirectory
from accountdir.accounts.store import DocumentStore
from accountdir.accounts.stores.inmemory import InMemoryDocumentStore
from accountdir.accounts.stores.postgres import PostgresDocumentStore
from accountdir.config import get_settings as load_settings
from accountdir.config.settings import Settings
from accountdir.db.pool import PostgresPool
from accountdir.observability.logging import get_logger

logger = get_logger(__name__)

# Shared store handle, created on first use and reused across requests
_document_store: DocumentStore | None = None
_document_store_lock = asyncio.Lock()


def get_settings() -> Settings:
    """Get application settings."""
    return load_settings()


async def create_document_store(settings: Settings) -> DocumentStore:
    """Build the document store selected by settings.storage.backend.

    The postgres backend connects its pool and creates the table if
    needed before returning.
    """
    if settings.storage.backend == "postgres":
        pg = settings.storage.postgres
        pool = PostgresPool(
            dsn=pg.connection_url,
            min_size=pg.min_pool_size,
            max_size=pg.max_pool_size,
            command_timeout=pg.command_timeout,
        )
        await pool.connect()
        store = PostgresDocumentStore(pool, table_name=pg.table_name)
        await store.ensure_schema()
    else:
        store = InMemoryDocumentStore()

    logger.info("document_store_initialized", store_type=settings.storage.backend)
    return store


async def get_document_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> DocumentStore:
    """Get the shared DocumentStore instance.

    Concurrent first requests wait on a lock so only one store is built.
    """
    global _document_store
    if _document_store is None:
        async with _document_store_lock:
            if _document_store is None:
                _document_store = await create_document_store(settings)
    return _document_store


async def get_account_directory(
    store: Annotated[DocumentStore, Depends(get_document_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AccountDirectory:
    """Get an AccountDirectory bound to the shared store."""
    return AccountDirectory(store, strict_updates=settings.accounts.strict_updates)


async def reset_dependencies() -> None:
    """Close and forget the shared store."""
    global _document_store
    async with _document_store_lock:
        if _document_store is not None:
            await _document_store.close()
            _document_store = None


SettingsDep = Annotated[Settings, Depends(get_settings)]
DocumentStoreDep = Annotated[DocumentStore, Depends(get_document_store)]
AccountDirectoryDep = Annotated[AccountDirectory, Depends(get_account_directory)]
