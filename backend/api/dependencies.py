"""Shared dependencies for API routes.

Collaborators are built once per process and can be swapped in tests through
``app.dependency_overrides``.
"""

import logging
from functools import lru_cache

from config import settings
from database import get_db
from services.blob_store import BlobStore, InMemoryBlobStore, PinataBlobStore
from services.scoring_oracle import GeminiScoringOracle, ScoringOracle

logger = logging.getLogger(__name__)

__all__ = ["get_db", "get_oracle", "get_blob_store"]


@lru_cache
def get_oracle() -> ScoringOracle:
    return GeminiScoringOracle()


@lru_cache
def get_blob_store() -> BlobStore:
    if settings.pinata_api_key and settings.pinata_secret_key:
        return PinataBlobStore(settings.pinata_api_key, settings.pinata_secret_key)
    logger.warning("No Pinata keys set - using local content-addressed blob store")
    return InMemoryBlobStore()

