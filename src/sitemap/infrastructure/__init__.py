"""Infrastructure adapters for the sitemap engine."""

from src.sitemap.infrastructure.artifact_sinks import CacheArtifactSink, FileArtifactSink
from src.sitemap.infrastructure.cache_sqlite import SQLiteCacheStore
from src.sitemap.infrastructure.content_sqlite import SQLiteContentRepository
from src.sitemap.infrastructure.locale_provider import ConfiguredLocaleProvider
from src.sitemap.infrastructure.lock_service import LocalLockService, LockHandle, SQLiteLockService

__all__ = [
    "CacheArtifactSink",
    "ConfiguredLocaleProvider",
    "FileArtifactSink",
    "LocalLockService",
    "LockHandle",
    "SQLiteCacheStore",
    "SQLiteContentRepository",
    "SQLiteLockService",
]
