# 網站地圖的環境設定

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str = "") -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class SitemapSettings:
    base_url: str = ""
    prefix: str = ""
    format: str = "xml"
    indent: bool = False
    exclude_types: tuple[str, ...] = field(default_factory=tuple)
    per_locale: bool = False
    batch_size: int = 100
    # Google 讀取 sitemap 的頻率介於每日到每月之間，一小時的快取已足夠
    cache_lifetime: int = 60 * 60
    output_dir: str = "public"
    default_locale: str = "en"
    locales: tuple[str, ...] = field(default_factory=tuple)
    private_locales: tuple[str, ...] = field(default_factory=tuple)
    content_types: tuple[str, ...] = field(default_factory=tuple)
    content_db_path: str = "artifacts/content/content.db"
    cache_db_path: str = "artifacts/cache/sitemap_cache.db"
    lock_db_path: str = "artifacts/cache/sitemap_lock.db"
    host: str = "127.0.0.1"
    port: int = 8080


def load_settings() -> SitemapSettings:
    return SitemapSettings(
        base_url=os.getenv("SITEMAP_BASE_URL", "").rstrip("/"),
        prefix=os.getenv("SITEMAP_PREFIX", "").rstrip("/"),
        format=os.getenv("SITEMAP_FORMAT", "xml"),
        indent=_env_bool("SITEMAP_INDENT", False),
        exclude_types=_env_list("SITEMAP_EXCLUDE_TYPES"),
        per_locale=_env_bool("SITEMAP_PER_LOCALE", False),
        batch_size=int(os.getenv("SITEMAP_BATCH_SIZE", "100")),
        cache_lifetime=int(os.getenv("SITEMAP_CACHE_LIFETIME", str(60 * 60))),
        output_dir=os.getenv("SITEMAP_OUTPUT_DIR", "public"),
        default_locale=os.getenv("SITEMAP_DEFAULT_LOCALE", "en"),
        locales=_env_list("SITEMAP_LOCALES"),
        private_locales=_env_list("SITEMAP_PRIVATE_LOCALES"),
        content_types=_env_list("SITEMAP_CONTENT_TYPES"),
        content_db_path=os.getenv("SITEMAP_CONTENT_DB", "artifacts/content/content.db"),
        cache_db_path=os.getenv("SITEMAP_CACHE_DB", "artifacts/cache/sitemap_cache.db"),
        lock_db_path=os.getenv("SITEMAP_LOCK_DB", "artifacts/cache/sitemap_lock.db"),
        host=os.getenv("SITEMAP_HOST", "127.0.0.1"),
        port=int(os.getenv("SITEMAP_PORT", "8080")),
    )
