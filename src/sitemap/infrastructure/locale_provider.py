from src.sitemap.application.ports import LocaleProviderPort

DRAFT_SUFFIX = "-draft"


class ConfiguredLocaleProvider(LocaleProviderPort):
    def __init__(
        self,
        locales: tuple[str, ...] | list[str],
        private_locales: tuple[str, ...] | list[str] = (),
        default_locale: str = "en",
    ) -> None:
        self.locales = tuple(locales)
        self.private_locales = frozenset(private_locales)
        self.default_locale = default_locale

    def active_locales(self) -> list[str]:
        if not self.locales:
            return [self.default_locale]
        return [
            locale
            for locale in self.locales
            if not locale.endswith(DRAFT_SUFFIX) and locale not in self.private_locales
        ]
