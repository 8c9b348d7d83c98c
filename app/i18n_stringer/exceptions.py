"""Custom exceptions for the i18n-stringer system.

Build-time problems are fatal and raised as ConfigurationError subclasses.
Runtime lookups never raise; they resolve to well-defined fallbacks instead.
"""

from typing import Optional


class StringerError(Exception):
    """Base exception for all i18n-stringer errors.

    Example:
        try:
            generator.build(["Code"])
        except StringerError as e:
            logger.error("generation_failed", error=str(e))
    """

    pass


class ConfigurationError(StringerError):
    """Raised when the generation inputs are unusable.

    Aborts the run before any table is produced. The message names the
    offending file path and key when they are known.

    Attributes:
        path: Offending file or directory, if any.
        key: Offending catalog key or type name, if any.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        key: Optional[str] = None,
    ):
        super().__init__(message)
        self.path = path
        self.key = key


class CatalogError(ConfigurationError):
    """Raised when a catalog file is unreadable, not UTF-8, or malformed.

    Example:
        >>> loader.load_all()
        Traceback (most recent call last):
        ...
        CatalogError: value of key `Ok` in catalog file `i18n/en.toml` is malformed
    """

    pass


class NoValuesError(ConfigurationError):
    """Raised when a requested type declares no symbols."""

    pass


class InvalidDefaultLocaleError(ConfigurationError):
    """Raised when the default locale override is not a discovered locale.

    Example:
        >>> LocaleResolver(["en", "fr"], default_locale="de")
        Traceback (most recent call last):
        ...
        InvalidDefaultLocaleError: default locale `de` is not among discovered locales: en, fr
    """

    pass


class SymbolValueError(ConfigurationError):
    """Raised when a symbol value does not fit the 64-bit range of its signedness."""

    pass
