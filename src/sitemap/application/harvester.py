from collections.abc import Awaitable, Callable, Sequence
from datetime import date

from src.config.logger_config import logger
from src.sitemap.application.ports import ContentRepositoryPort, CustomEntrySourcePort
from src.sitemap.domain.errors import RepositoryReadError, SitemapError
from src.sitemap.domain.models import FORMAT_TEXT, BuildConfig, Entry, SourceDocument
from src.sitemap.domain.registry import ContentTypeRegistry
from src.sitemap.domain.rules import item_depth, resolve_priority, text_line

BatchFetcher = Callable[[int, int], Awaitable[Sequence[SourceDocument]]]


class SitemapHarvester:
    """Collect the sitemap entries of one locale.

    Pages are read in repository order (depth, then sibling rank) so parents
    precede children. Every registered content type is paged through in
    ``batch_size`` steps; a short batch ends the collection.
    """

    def __init__(
        self,
        repository: ContentRepositoryPort,
        registry: ContentTypeRegistry,
        custom_sources: Sequence[CustomEntrySourcePort] = (),
        today: date | None = None,
    ) -> None:
        self.repository = repository
        self.registry = registry
        self.custom_sources = tuple(custom_sources)
        self.today = today

    async def harvest(self, locale: str, config: BuildConfig) -> list[Entry | str]:
        today = self.today or date.today()
        output: list[Entry | str] = []

        async def fetch_pages(offset: int, limit: int) -> Sequence[SourceDocument]:
            return await self.repository.list_pages(locale, offset, limit)

        for page in await self._paginate(fetch_pages, config.batch_size, f"pages:{locale}"):
            if page.type_name in config.exclude_types:
                continue
            self._output(output, page, page.depth, locale, config)

        for type_name in self.registry.eligible(config.exclude_types):

            async def fetch_items(offset: int, limit: int, type_name: str = type_name) -> Sequence[SourceDocument]:
                return await self.repository.list_items(type_name, locale, offset, limit)

            items = await self._paginate(fetch_items, config.batch_size, f"{type_name}:{locale}")
            for item in items:
                self._output(output, item, item_depth(item.start_date, today), locale, config)

        for source in self.custom_sources:
            try:
                documents = await source.documents(locale)
            except SitemapError:
                raise
            except Exception as exc:
                raise RepositoryReadError(f"Custom entry source failed for locale {locale}: {exc}") from exc
            for doc in documents:
                if doc.type_name in config.exclude_types:
                    continue
                self._output(output, doc, doc.depth, locale, config)

        logger.info("Harvested {} sitemap entries for locale {}", len(output), locale)
        return output

    @staticmethod
    async def _paginate(fetch: BatchFetcher, batch_size: int, label: str) -> list[SourceDocument]:
        collected: list[SourceDocument] = []
        offset = 0
        while True:
            try:
                batch = list(await fetch(offset, batch_size))
            except SitemapError:
                raise
            except Exception as exc:
                raise RepositoryReadError(f"Failed reading {label} at offset {offset}: {exc}") from exc
            collected.extend(batch)
            if len(batch) < batch_size:
                break
            offset += len(batch)
        logger.debug("Collected {} documents from {}", len(collected), label)
        return collected

    @staticmethod
    def _output(output: list[Entry | str], doc: SourceDocument, depth: int, locale: str, config: BuildConfig) -> None:
        if not doc.url:
            logger.debug("Skip document without URL: doc_id={}, type={}", doc.doc_id, doc.type_name)
            return
        if config.format == FORMAT_TEXT:
            output.append(text_line(doc.url, depth, config.indent))
            return
        output.append(
            Entry(
                locale=locale,
                url=doc.url,
                priority=resolve_priority(depth, doc.priority_override),
                depth=depth,
                group_key=doc.group_key or None,
                source_type=doc.type_name,
            )
        )
