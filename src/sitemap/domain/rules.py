from datetime import date

from pathvalidate import sanitize_filename as lib_sanitize

MIN_PRIORITY = 0.1
MAX_DEPTH = 10
ITEM_DEPTH = 3
SINGLE_ARTIFACT_STEM = "sitemap"
LOCALE_ARTIFACT_DIR = "sitemaps"
INDEX_ARTIFACT_NAME = f"{LOCALE_ARTIFACT_DIR}/index.xml"


def priority_for_depth(depth: int) -> float:
    if depth >= MAX_DEPTH:
        return MIN_PRIORITY
    return max(MIN_PRIORITY, round(1.0 - depth / 10, 1))


def resolve_priority(depth: int, priority_override: float | None) -> float:
    if priority_override is not None:
        return float(priority_override)
    return priority_for_depth(depth)


def item_depth(start_date: date | None, today: date) -> int:
    # 未來的活動較有價值，過去的活動較無趣
    if start_date is None:
        return ITEM_DEPTH
    if start_date > today:
        return ITEM_DEPTH - 1
    return ITEM_DEPTH + 1


def text_line(url: str, depth: int, indent: bool) -> str:
    prefix = "  " * max(depth, 0) if indent else ""
    return f"{prefix}{url}\n"


def locale_filename(locale: str) -> str:
    safe_name = lib_sanitize(locale, replacement_text="_")
    if not safe_name:
        return "default"
    return safe_name


def single_artifact_name(extension: str) -> str:
    return f"{SINGLE_ARTIFACT_STEM}.{extension}"


def locale_artifact_name(locale: str, extension: str) -> str:
    return f"{LOCALE_ARTIFACT_DIR}/{locale_filename(locale)}.{extension}"


def sentinel_artifact_name(per_locale: bool) -> str:
    return INDEX_ARTIFACT_NAME if per_locale else single_artifact_name("xml")


def build_locale_sitemap_url(base_url: str, prefix: str, locale: str) -> str:
    return f"{base_url.rstrip('/')}{prefix.rstrip('/')}/{locale_artifact_name(locale, 'xml')}"
