import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from time import perf_counter

from tqdm import tqdm

from src.config.logger_config import logger
from src.sitemap.application.cross_linker import cross_link
from src.sitemap.application.harvester import SitemapHarvester
from src.sitemap.application.ports import LocaleProviderPort, LockServicePort
from src.sitemap.application.publisher import SitemapPublisher
from src.sitemap.domain.models import BuildConfig, BuildSummary, Entry, LocaleMap

BUILD_LOCK_NAME = "sitemap build"


class BuildState(str, Enum):
    IDLE = "idle"
    LOCK_ACQUIRED = "lock_acquired"
    HARVESTED = "harvested"
    CROSS_LINKED = "cross_linked"
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass
class BuildContext:
    config: BuildConfig
    locales: tuple[str, ...]
    locale_map: LocaleMap


class BuildSitemapWorkflow:
    def __init__(
        self,
        harvester: SitemapHarvester,
        publisher: SitemapPublisher,
        lock_service: LockServicePort,
        locale_provider: LocaleProviderPort,
        default_locale: str = "en",
    ) -> None:
        self.harvester = harvester
        self.publisher = publisher
        self.lock_service = lock_service
        self.locale_provider = locale_provider
        self.default_locale = default_locale
        self.state = BuildState.IDLE

    async def run(self, config: BuildConfig) -> BuildSummary:
        config.validate()
        started = perf_counter()

        handle = await self.lock_service.acquire(BUILD_LOCK_NAME)
        self.state = BuildState.LOCK_ACQUIRED
        try:
            context = BuildContext(config=config, locales=self._resolve_locales(), locale_map={})
            logger.info(
                "Sitemap build started: locales={}, format={}, per_locale={}, use_cache={}",
                list(context.locales),
                config.format,
                config.per_locale,
                config.use_cache,
            )
            await self._harvest_all(context)
            self.state = BuildState.HARVESTED

            cross_link(context.locale_map)
            self.state = BuildState.CROSS_LINKED

            artifacts = await self.publisher.publish(context.locale_map, config)
            self.state = BuildState.PUBLISHED
        except Exception as exc:
            self.state = BuildState.FAILED
            logger.error("Sitemap build failed with error type {}: {}", type(exc).__name__, exc)
            raise
        finally:
            await self.lock_service.release(handle)
            if self.state is not BuildState.FAILED:
                self.state = BuildState.IDLE

        summary = BuildSummary(
            locales=context.locales,
            entry_total=sum(len(entries) for entries in context.locale_map.values()),
            artifact_names=tuple(artifact.name for artifact in artifacts),
            duration_ms=int((perf_counter() - started) * 1000),
            generated_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.info(
            "Sitemap build completed: duration_ms={}, entry_total={}, artifacts={}",
            summary.duration_ms,
            summary.entry_total,
            list(summary.artifact_names),
        )
        return summary

    def _resolve_locales(self) -> tuple[str, ...]:
        locales = [locale for locale in self.locale_provider.active_locales() if locale]
        if not locales:
            locales = [self.default_locale]
        return tuple(dict.fromkeys(locales))

    async def _harvest_all(self, context: BuildContext) -> None:
        config = context.config
        # 每個 locale 只寫入自己的 bucket，因此可以平行收集
        for locale in context.locales:
            context.locale_map[locale] = []

        with tqdm(
            total=len(context.locales),
            desc="Harvest locales",
            unit="locale",
            leave=True,
            disable=not config.show_progress,
        ) as progress:
            if config.parallel_harvest:
                results: Sequence[list[Entry | str]] = await asyncio.gather(
                    *(self.harvester.harvest(locale, config) for locale in context.locales)
                )
                for locale, entries in zip(context.locales, results):
                    context.locale_map[locale] = entries
                progress.update(len(context.locales))
                return

            for locale in context.locales:
                context.locale_map[locale] = await self.harvester.harvest(locale, config)
                progress.update(1)
