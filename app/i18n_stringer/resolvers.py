"""Locale resolution against the set of discovered locales.

Unsupported or missing locales fall back to the default locale; resolution
never fails once the resolver is built.
"""

from typing import Any, Dict, Iterable, Optional, Protocol

import structlog
from i18n_stringer.exceptions import ConfigurationError, InvalidDefaultLocaleError
from i18n_stringer.models import CatalogSet

logger = structlog.get_logger().bind(component="i18n_stringer.resolver")

DEFAULT_CARRIER_KEY = "i18nLocale"


class LocaleCarrier(Protocol):
    """Read-only key/value lookup holding the ambient locale.

    Any Mapping satisfies it.
    """

    def get(self, key: str) -> Any: ...


class LocaleResolver:
    """Resolves requested or ambient locales to a supported one.

    Attributes:
        supported: Locale id to ordinal, in natural order.
        default_locale: Fallback locale.
        carrier_key: Key read from a LocaleCarrier.
    """

    def __init__(
        self,
        locales: Iterable[str],
        default_locale: Optional[str] = None,
        carrier_key: str = DEFAULT_CARRIER_KEY,
    ):
        """Initialize locale resolver.

        Args:
            locales: Discovered locale ids.
            default_locale: Explicit default; the first locale in natural
                order when omitted.
            carrier_key: Key used by resolve_from_carrier.

        Raises:
            ConfigurationError: If no locale is given.
            InvalidDefaultLocaleError: If ``default_locale`` is not among
                ``locales``.
        """
        ordered = sorted(set(locales))
        if not ordered:
            raise ConfigurationError("No locales discovered")
        self.supported: Dict[str, int] = {
            locale: index for index, locale in enumerate(ordered)
        }

        if default_locale:
            if default_locale not in self.supported:
                logger.error(
                    "invalid_default_locale",
                    default_locale=default_locale,
                    locales=ordered,
                )
                raise InvalidDefaultLocaleError(
                    f"default locale `{default_locale}` is not among discovered "
                    f"locales: {', '.join(ordered)}",
                    key=default_locale,
                )
            self.default_locale = default_locale
        else:
            self.default_locale = ordered[0]

        self.carrier_key = carrier_key or DEFAULT_CARRIER_KEY

    @classmethod
    def from_catalogs(
        cls,
        catalog_set: CatalogSet,
        default_locale: Optional[str] = None,
        carrier_key: str = DEFAULT_CARRIER_KEY,
    ) -> "LocaleResolver":
        """Build a resolver from the locales of a CatalogSet."""
        return cls(catalog_set.locales, default_locale, carrier_key)

    @property
    def locales(self) -> list:
        """Supported locale ids in natural order."""
        return list(self.supported)

    def is_supported(self, locale: Any) -> bool:
        """Check if ``locale`` is a supported locale id."""
        return isinstance(locale, str) and locale in self.supported

    def ordinal(self, locale: str) -> Optional[int]:
        """Ordinal of a supported locale, or None."""
        return self.supported.get(locale)

    def resolve(self, requested: Optional[str]) -> str:
        """Return ``requested`` if supported, else the default locale."""
        if self.is_supported(requested):
            return requested
        return self.default_locale

    def resolve_from_carrier(self, carrier: Optional[LocaleCarrier]) -> str:
        """Resolve the locale held by an ambient carrier.

        The carrier is queried once. A missing carrier, an unset key, a
        non-string value or an unsupported locale all give the default.
        """
        if carrier is None:
            return self.default_locale
        value = carrier.get(self.carrier_key)
        if self.is_supported(value):
            return value
        return self.default_locale
