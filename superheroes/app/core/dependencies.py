"""
FastAPI dependency injection functions.
Provides get_db and get_object_store.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import get_db
from app.services.object_storage import ObjectStore, S3ObjectStore

# Re-export get_db so routes can import from one place
__all__ = ["get_db", "get_object_store", "DBSession", "Storage"]


@lru_cache
def get_object_store() -> ObjectStore:
    """Shared S3 client for the process, built lazily from settings."""
    return S3ObjectStore.from_settings(settings)


# Convenience type aliases for route signatures
DBSession = Annotated[AsyncSession, Depends(get_db)]
Storage = Annotated[ObjectStore, Depends(get_object_store)]
