from collections import defaultdict

from src.config.logger_config import logger
from src.sitemap.domain.models import Entry, LocaleMap


def cross_link(locale_map: LocaleMap) -> LocaleMap:
    """Attach hreflang alternates between locale variants of the same content.

    Every entry that shares a group key with entries of other locales gets one
    ``(locale, url)`` pair per member of another locale, in discovery order. Group keys are
    cleared afterwards on every entry.
    """
    groups: dict[str, list[Entry]] = defaultdict(list)
    for entries in locale_map.values():
        for entry in entries:
            if isinstance(entry, Entry) and entry.group_key:
                groups[entry.group_key].append(entry)

    linked = 0
    for members in groups.values():
        for entry in members:
            entry.alternates = [
                (other.locale, other.url)
                for other in members
                if other is not entry and other.locale != entry.locale
            ]
            if entry.alternates:
                linked += 1

    for entries in locale_map.values():
        for entry in entries:
            if isinstance(entry, Entry):
                entry.group_key = None

    logger.info("Cross-linked {} entries across {} content groups", linked, len(groups))
    return locale_map
