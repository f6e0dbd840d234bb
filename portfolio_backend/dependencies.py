"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from portfolio_backend.config import get_settings
from portfolio_backend.db import DbClient, InMemoryDbClient, SqlDbClient
from portfolio_backend.storage import (
    InMemoryStorageClient,
    S3StorageClient,
    StorageClient,
)

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_storage_client: StorageClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        logger.info("Using in-memory database backend")
        _db_client = InMemoryDbClient()
    else:
        _db_client = SqlDbClient(settings.database_url)
    return _db_client


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.storage_endpoint:
        logger.info("Using in-memory storage backend")
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = S3StorageClient(
            endpoint=settings.storage_endpoint,
            region=settings.storage_region or "",
            access_key_id=settings.storage_access_key_id or "",
            secret_access_key=settings.storage_secret_access_key or "",
            public_base_url=settings.storage_public_url or settings.storage_endpoint,
        )
    return _storage_client
