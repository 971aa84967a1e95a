from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any

from src.config.settings import SitemapSettings
from src.sitemap.domain.errors import ConfigurationError

FORMAT_XML = "xml"
FORMAT_TEXT = "text"
SUPPORTED_FORMATS = (FORMAT_XML, FORMAT_TEXT)
DEFAULT_CHANGE_FREQUENCY = "daily"
STDOUT_PATH = "/dev/stdout"


@dataclass(frozen=True)
class SourceDocument:
    doc_id: str
    type_name: str
    locale: str
    url: str | None
    depth: int = 0
    rank: int = 0
    group_key: str | None = None
    priority_override: float | None = None
    start_date: date | None = None


@dataclass
class Entry:
    locale: str
    url: str
    priority: float
    depth: int
    change_frequency: str = DEFAULT_CHANGE_FREQUENCY
    group_key: str | None = None
    source_type: str = ""
    alternates: list[tuple[str, str]] = field(default_factory=list)


# 純文字模式下，每個 locale 只存放已縮排好的字串
LocaleMap = dict[str, list[Entry | str]]


@dataclass(frozen=True)
class Artifact:
    name: str
    data: bytes
    created_at: datetime


@dataclass(frozen=True)
class CacheRecord:
    key: str
    payload: bytes
    created_at: datetime


@dataclass(frozen=True)
class BuildConfig:
    format: str = FORMAT_XML
    indent: bool = False
    exclude_types: tuple[str, ...] = field(default_factory=tuple)
    per_locale: bool = False
    base_url: str = ""
    prefix: str = ""
    batch_size: int = 100
    cache_ttl: int = 60 * 60
    use_cache: bool = True
    output_dir: str = "public"
    output_file: str | None = None
    show_progress: bool = False
    parallel_harvest: bool = False

    def __post_init__(self) -> None:
        if self.format not in SUPPORTED_FORMATS:
            raise ConfigurationError(f"Unsupported sitemap format: {self.format}")
        if self.batch_size <= 0:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")
        # 純文字 sitemap 與 sitemap index 無法搭配，視為單一內容報告
        if self.format == FORMAT_TEXT and self.per_locale:
            object.__setattr__(self, "per_locale", False)

    @property
    def extension(self) -> str:
        return "xml" if self.format == FORMAT_XML else "txt"

    @classmethod
    def resolve(cls, settings: SitemapSettings, **overrides: Any) -> BuildConfig:
        """Merge environment settings with per-invocation overrides.

        ``None`` overrides are ignored. Extra excluded types are appended to the
        configured ones rather than replacing them.
        """
        extra_excludes = tuple(overrides.pop("exclude_types", None) or ())
        base = cls(
            format=settings.format,
            indent=settings.indent,
            exclude_types=tuple(dict.fromkeys(settings.exclude_types + extra_excludes)),
            per_locale=settings.per_locale,
            base_url=settings.base_url,
            prefix=settings.prefix,
            batch_size=settings.batch_size,
            cache_ttl=settings.cache_lifetime,
            output_dir=settings.output_dir,
        )
        return replace(base, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> None:
        if self.per_locale and not self.base_url:
            raise ConfigurationError(
                "A base URL is required for per-locale sitemaps and the sitemap index. "
                'Set SITEMAP_BASE_URL, e.g. "https://mycompany.com" (no trailing slash).'
            )


@dataclass(frozen=True)
class BuildSummary:
    locales: tuple[str, ...]
    entry_total: int
    artifact_names: tuple[str, ...]
    duration_ms: int
    generated_at: str
