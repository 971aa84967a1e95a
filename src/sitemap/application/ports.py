from typing import Any, Protocol, Sequence, runtime_checkable

from src.sitemap.domain.models import Artifact, CacheRecord, SourceDocument


@runtime_checkable
class ContentRepositoryPort(Protocol):
    async def list_pages(self, locale: str, offset: int, limit: int) -> Sequence[SourceDocument]: ...
    """Pages of one locale ordered by depth then sibling rank."""

    async def list_items(self, type_name: str, locale: str, offset: int, limit: int) -> Sequence[SourceDocument]: ...
    """One batch of typed content items for a locale."""


@runtime_checkable
class CustomEntrySourcePort(Protocol):
    async def documents(self, locale: str) -> Sequence[SourceDocument]: ...
    """Extra documents to publish alongside pages and items."""


@runtime_checkable
class LocaleProviderPort(Protocol):
    def active_locales(self) -> list[str]: ...
    """Published, public locales in output order."""


@runtime_checkable
class LockServicePort(Protocol):
    async def acquire(self, name: str) -> Any: ...
    """Block until the named lock is held and return a release handle."""

    async def release(self, handle: Any) -> None: ...


@runtime_checkable
class CacheServicePort(Protocol):
    async def get(self, namespace: str, key: str) -> CacheRecord | None: ...

    async def set(self, namespace: str, key: str, value: bytes, ttl_seconds: int) -> None: ...

    async def clear(self, namespace: str) -> None: ...


@runtime_checkable
class ArtifactSinkPort(Protocol):
    async def write_artifacts(self, artifacts: Sequence[Artifact]) -> None: ...
    """Persist one build's artifacts."""
