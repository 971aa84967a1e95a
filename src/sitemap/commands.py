from __future__ import annotations

import argparse
import asyncio
from contextlib import ExitStack
from dataclasses import dataclass

from aiohttp import web

from src.config.logger_config import logger
from src.config.settings import SitemapSettings, load_settings
from src.sitemap.application.gateway import SITEMAP_CACHE_NAMESPACE, CacheReadGateway
from src.sitemap.application.harvester import SitemapHarvester
from src.sitemap.application.ports import ArtifactSinkPort, CacheServicePort
from src.sitemap.application.publisher import SitemapPublisher
from src.sitemap.application.workflows.build_sitemap import BuildSitemapWorkflow
from src.sitemap.domain.models import FORMAT_XML, BuildConfig, BuildSummary
from src.sitemap.domain.registry import ContentTypeRegistry
from src.sitemap.infrastructure.artifact_sinks import CacheArtifactSink, FileArtifactSink
from src.sitemap.infrastructure.cache_sqlite import SQLiteCacheStore
from src.sitemap.infrastructure.content_sqlite import SQLiteContentRepository
from src.sitemap.infrastructure.http_app import create_app
from src.sitemap.infrastructure.locale_provider import ConfiguredLocaleProvider
from src.sitemap.infrastructure.lock_service import SQLiteLockService


@dataclass
class SitemapServices:
    repository: SQLiteContentRepository
    cache: SQLiteCacheStore
    lock_service: SQLiteLockService

    def close(self) -> None:
        try:
            self.repository.close()
        finally:
            try:
                self.cache.close()
            finally:
                self.lock_service.close()


def open_services(settings: SitemapSettings) -> SitemapServices:
    with ExitStack() as stack:
        repository = SQLiteContentRepository(settings.content_db_path)
        stack.callback(repository.close)
        cache = SQLiteCacheStore(settings.cache_db_path)
        stack.callback(cache.close)
        lock_service = SQLiteLockService(settings.lock_db_path)
        stack.pop_all()
    return SitemapServices(repository=repository, cache=cache, lock_service=lock_service)


def build_workflow(settings: SitemapSettings, services: SitemapServices, sink: ArtifactSinkPort) -> BuildSitemapWorkflow:
    return BuildSitemapWorkflow(
        harvester=SitemapHarvester(
            repository=services.repository,
            registry=ContentTypeRegistry(settings.content_types),
        ),
        publisher=SitemapPublisher(sink),
        lock_service=services.lock_service,
        locale_provider=ConfiguredLocaleProvider(
            settings.locales,
            private_locales=settings.private_locales,
            default_locale=settings.default_locale,
        ),
        default_locale=settings.default_locale,
    )


def build_gateway(settings: SitemapSettings, services: SitemapServices) -> CacheReadGateway:
    # 讀取路徑只提供 XML；重建時固定輸出 XML 以確保 sentinel 存在
    config = BuildConfig.resolve(settings, format=FORMAT_XML, use_cache=True)
    workflow = build_workflow(
        settings,
        services,
        CacheArtifactSink(services.cache, SITEMAP_CACHE_NAMESPACE, config.cache_ttl),
    )

    async def rebuild() -> BuildSummary:
        return await workflow.run(config)

    return CacheReadGateway(cache=services.cache, rebuild=rebuild, per_locale=config.per_locale)


async def run_generate_async(
    *,
    settings: SitemapSettings | None = None,
    format: str | None = None,
    indent: bool | None = None,
    exclude_types: tuple[str, ...] = (),
    per_locale: bool | None = None,
    output_file: str | None = None,
    update_cache: bool = False,
    show_progress: bool = True,
) -> BuildSummary:
    settings = settings or load_settings()
    config = BuildConfig.resolve(
        settings,
        format=format,
        indent=indent,
        exclude_types=exclude_types,
        per_locale=per_locale,
        output_file=output_file,
        use_cache=update_cache,
        show_progress=show_progress,
    )
    config.validate()
    services = open_services(settings)
    try:
        sink: ArtifactSinkPort
        if config.use_cache:
            sink = CacheArtifactSink(services.cache, SITEMAP_CACHE_NAMESPACE, config.cache_ttl)
        else:
            sink = FileArtifactSink(config.output_dir)
        return await build_workflow(settings, services, sink).run(config)
    finally:
        services.close()


def run_generate(**kwargs) -> BuildSummary:
    return asyncio.run(run_generate_async(**kwargs))


async def clear_cache(cache: CacheServicePort) -> None:
    await cache.clear(SITEMAP_CACHE_NAMESPACE)
    logger.info("Cleared sitemap cache namespace {}", SITEMAP_CACHE_NAMESPACE)


async def run_clear_async(*, settings: SitemapSettings | None = None) -> None:
    settings = settings or load_settings()
    cache = SQLiteCacheStore(settings.cache_db_path)
    try:
        await clear_cache(cache)
    finally:
        cache.close()


def run_clear(*, settings: SitemapSettings | None = None) -> None:
    asyncio.run(run_clear_async(settings=settings))


def run_serve(*, settings: SitemapSettings | None = None) -> None:
    settings = settings or load_settings()
    services = open_services(settings)
    try:
        app = create_app(build_gateway(settings, services))
        logger.info("Serving sitemaps on http://{}:{}", settings.host, settings.port)
        web.run_app(app, host=settings.host, port=settings.port)
    finally:
        services.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m src.sitemap", description="Build and serve sitemaps.")
    subcommands = parser.add_subparsers(dest="command", required=True)

    generate = subcommands.add_parser("generate", help="Generate a sitemap")
    generate.add_argument("--format", choices=("xml", "text"), default=None)
    generate.add_argument("--indent", action=argparse.BooleanOptionalAction, default=None)
    generate.add_argument("--exclude-types", default="", help="Comma separated content types to skip")
    generate.add_argument("--per-locale", action="store_true", default=None)
    generate.add_argument("--file", dest="output_file", default=None, help="Target file for a single sitemap")
    generate.add_argument("--update-cache", action="store_true", help="Write to the cache instead of files")
    generate.add_argument("--no-progress", action="store_true")

    subcommands.add_parser("clear", help="Clear the existing sitemap cache")
    subcommands.add_parser("serve", help="Serve cached sitemaps over HTTP")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        if args.command == "generate":
            summary = run_generate(
                format=args.format,
                indent=args.indent,
                exclude_types=tuple(t.strip() for t in args.exclude_types.split(",") if t.strip()),
                per_locale=args.per_locale,
                output_file=args.output_file,
                update_cache=args.update_cache,
                show_progress=not args.no_progress,
            )
            logger.info("Generated sitemap artifacts: {}", list(summary.artifact_names))
        elif args.command == "clear":
            run_clear()
        elif args.command == "serve":
            run_serve()
    except Exception as exc:
        logger.exception("Sitemap command {} failed: {}", args.command, exc)
        print(f"sitemap {args.command} failed: {exc}")
        return 1
    return 0
