from datetime import datetime, timezone

from src.config.logger_config import logger
from src.sitemap.application.ports import ArtifactSinkPort
from src.sitemap.domain.models import STDOUT_PATH, Artifact, BuildConfig, LocaleMap
from src.sitemap.domain.rules import (
    INDEX_ARTIFACT_NAME,
    build_locale_sitemap_url,
    locale_artifact_name,
    single_artifact_name,
)
from src.sitemap.domain.serializer import build_index, serialize, wrap_document


class SitemapPublisher:
    def __init__(self, sink: ArtifactSinkPort) -> None:
        self.sink = sink

    async def publish(self, locale_map: LocaleMap, config: BuildConfig, now: datetime | None = None) -> list[Artifact]:
        artifacts = self.render(locale_map, config, now=now)
        await self.sink.write_artifacts(artifacts)
        logger.info(
            "Published {} sitemap artifacts: {}",
            len(artifacts),
            ", ".join(artifact.name for artifact in artifacts),
        )
        return artifacts

    @staticmethod
    def render(locale_map: LocaleMap, config: BuildConfig, now: datetime | None = None) -> list[Artifact]:
        config.validate()
        created_at = now or datetime.now(timezone.utc)

        if not config.per_locale:
            body = "".join(serialize(entries, config.format) for entries in locale_map.values())
            return [
                Artifact(
                    name=_single_target(config),
                    data=wrap_document(body, config.format).encode("utf-8"),
                    created_at=created_at,
                )
            ]

        artifacts = [
            Artifact(
                name=locale_artifact_name(locale, config.extension),
                data=wrap_document(serialize(entries, config.format), config.format).encode("utf-8"),
                created_at=created_at,
            )
            for locale, entries in locale_map.items()
        ]
        locations = [build_locale_sitemap_url(config.base_url, config.prefix, locale) for locale in locale_map]
        artifacts.append(
            Artifact(
                name=INDEX_ARTIFACT_NAME,
                data=build_index(locations, created_at.isoformat()).encode("utf-8"),
                created_at=created_at,
            )
        )
        return artifacts


def _single_target(config: BuildConfig) -> str:
    if config.use_cache:
        return single_artifact_name(config.extension)
    return config.output_file or STDOUT_PATH
