"""Locales du site: locale principale et activation de la localisation."""

from __future__ import annotations

from cmscontent.core.settings import Settings


class LocaleProvider:
    """Fournit la locale principale et la liste des locales du site.

    La locale principale fait toujours partie des locales du site, en première position.
    """

    def __init__(
        self,
        primary_locale: str = "en",
        site_locales: list[str] | None = None,
        localization_enabled: bool = True,
    ) -> None:
        self._primary = primary_locale
        locales = [primary_locale]
        for locale in site_locales or []:
            if locale not in locales:
                locales.append(locale)
        self._locales = locales
        self._enabled = localization_enabled

    @classmethod
    def from_settings(cls, settings: Settings) -> LocaleProvider:
        return cls(
            primary_locale=settings.PRIMARY_LOCALE,
            site_locales=[loc.strip().lower() for loc in settings.SITE_LOCALES if loc.strip()],
            localization_enabled=settings.LOCALIZATION_ENABLED,
        )

    def get_primary_site_locale_id(self) -> str:
        return self._primary

    def get_site_locale_ids(self) -> list[str]:
        return list(self._locales)

    def is_localized(self) -> bool:
        """Indique si les contenus multi-locales sont actifs."""
        return self._enabled
