import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from src.config.logger_config import logger
from src.sitemap.application.ports import CacheServicePort
from src.sitemap.domain.errors import NotFoundError
from src.sitemap.domain.rules import sentinel_artifact_name

SITEMAP_CACHE_NAMESPACE = "sitemap"
XML_CONTENT_TYPE = "text/xml"
PLAIN_CONTENT_TYPE = "text/plain"

RebuildCallable = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class GatewayResponse:
    status: int
    content_type: str
    body: bytes


class CacheReadGateway:
    """Serve cached sitemap artifacts, rebuilding once when the cache is cold.

    A miss is a 404 when the sentinel artifact (the index in per-locale mode,
    ``sitemap.xml`` otherwise) is cached; only a cache without the sentinel
    triggers a rebuild. Concurrent cold misses await the same rebuild task.
    """

    def __init__(
        self,
        cache: CacheServicePort,
        rebuild: RebuildCallable,
        per_locale: bool = False,
        namespace: str = SITEMAP_CACHE_NAMESPACE,
    ) -> None:
        self.cache = cache
        self.rebuild = rebuild
        self.per_locale = per_locale
        self.namespace = namespace
        self._inflight: asyncio.Task | None = None

    async def serve(self, requested_path: str) -> GatewayResponse:
        try:
            return await self._serve(requested_path)
        except NotFoundError:
            return GatewayResponse(status=404, content_type=PLAIN_CONTENT_TYPE, body=b"not found")
        except Exception as exc:
            logger.exception("Failed serving sitemap path {}: {}", requested_path, exc)
            return GatewayResponse(status=500, content_type=PLAIN_CONTENT_TYPE, body=b"error")

    async def _serve(self, requested_path: str) -> GatewayResponse:
        record = await self.cache.get(self.namespace, requested_path)
        if record is not None:
            return GatewayResponse(status=200, content_type=XML_CONTENT_TYPE, body=record.payload)

        sentinel = sentinel_artifact_name(self.per_locale)
        if await self.cache.get(self.namespace, sentinel) is not None:
            logger.debug("Sitemap path {} not cached while {} exists", requested_path, sentinel)
            raise NotFoundError(requested_path)

        logger.info("Sitemap cache is cold (missing {}); rebuilding for {}", sentinel, requested_path)
        await self._rebuild_once()
        return await self._serve(requested_path)

    async def _rebuild_once(self) -> None:
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self.rebuild())
        await asyncio.shield(self._inflight)
