"""Domain models, rules and rendering for sitemap builds."""

from src.sitemap.domain.errors import (
    CacheServiceError,
    ConfigurationError,
    LockServiceError,
    NotFoundError,
    RepositoryReadError,
    SitemapError,
)
from src.sitemap.domain.models import Artifact, BuildConfig, BuildSummary, CacheRecord, Entry, LocaleMap, SourceDocument
from src.sitemap.domain.registry import ContentTypeRegistry

__all__ = [
    "Artifact",
    "BuildConfig",
    "BuildSummary",
    "CacheRecord",
    "CacheServiceError",
    "ConfigurationError",
    "ContentTypeRegistry",
    "Entry",
    "LocaleMap",
    "LockServiceError",
    "NotFoundError",
    "RepositoryReadError",
    "SitemapError",
    "SourceDocument",
]
