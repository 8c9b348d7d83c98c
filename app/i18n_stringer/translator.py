"""Translation of symbols into localized text.

Core runtime component: resolves the locale, looks the symbol up in the
compiled table for that locale and substitutes arguments.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from i18n_stringer.core.logging import get_module_logger
from i18n_stringer.formatting import sprintf
from i18n_stringer.models import Symbol
from i18n_stringer.resolvers import LocaleCarrier, LocaleResolver
from i18n_stringer.tables import CompiledType

logger = get_module_logger()


@dataclass(frozen=True)
class SymbolRef:
    """Argument referring to a symbol of the translated type."""

    type_name: str
    value: int


@dataclass(frozen=True)
class Literal:
    """Argument substituted as-is."""

    value: Any


Argument = Union[SymbolRef, Literal]


class Translator:
    """Service for translating symbols with argument substitution.

    Attributes:
        compiled: CompiledType per type name.
        resolver: LocaleResolver shared by every type.
    """

    def __init__(
        self,
        compiled: Union[Mapping[str, CompiledType], Iterable[CompiledType]],
        resolver: LocaleResolver,
    ):
        """Initialize Translator.

        Args:
            compiled: Compiled types, as a mapping or an iterable.
            resolver: Resolver for requested and ambient locales.
        """
        if isinstance(compiled, Mapping):
            compiled = compiled.values()
        self.compiled: Dict[str, CompiledType] = {
            item.type_name: item for item in compiled
        }
        self.resolver = resolver
        logger.info(
            "initialized_translator",
            types=list(self.compiled),
            default_locale=resolver.default_locale,
        )

    @property
    def default_locale(self) -> str:
        return self.resolver.default_locale

    def compiled_type(self, type_name: str) -> CompiledType:
        """Get the CompiledType of ``type_name``.

        Raises:
            KeyError: If the type was not part of the build.
        """
        try:
            return self.compiled[type_name]
        except KeyError:
            raise KeyError(f"Type `{type_name}` was not compiled") from None

    def is_locale_supported(self, locale: str) -> bool:
        """Check if ``locale`` is a supported locale."""
        return self.resolver.is_supported(locale)

    def to_arguments(self, symbol: Symbol, args: Iterable[Any]) -> Tuple[Argument, ...]:
        """Tag raw arguments for substitution into ``symbol``'s text.

        A Symbol of the same type becomes a SymbolRef; anything else,
        including a Symbol of another type, is a Literal.
        """
        tagged = []
        for arg in args:
            if isinstance(arg, (SymbolRef, Literal)):
                tagged.append(arg)
            elif isinstance(arg, Symbol) and arg.type_name == symbol.type_name:
                tagged.append(SymbolRef(arg.type_name, arg.value))
            else:
                tagged.append(Literal(arg))
        return tuple(tagged)

    def _expand(self, argument: Argument, locale: str) -> Any:
        if isinstance(argument, Literal):
            return argument.value
        compiled = self.compiled.get(argument.type_name)
        if compiled is None:
            return argument.value
        return compiled.table(locale).lookup(argument.value)

    def _trans(self, symbol: Symbol, locale: str, args: Tuple[Any, ...]) -> str:
        # locale is already resolved to a supported one here
        message = self.compiled_type(symbol.type_name).table(locale).lookup(symbol.value)
        if not args:
            return message
        arguments = self.to_arguments(symbol, args)
        return sprintf(message, [self._expand(arg, locale) for arg in arguments])

    def translate(self, symbol: Symbol, locale: Optional[str], *args: Any) -> str:
        """Translate ``symbol`` into ``locale``.

        Args:
            symbol: Symbol to translate.
            locale: Requested locale; unsupported ones fall back to the
                default locale.
            *args: Optional placeholder values. Symbols of the same type are
                replaced by their own text first.

        Returns:
            Translated text, with arguments substituted printf-style.
        """
        return self._trans(symbol, self.resolver.resolve(locale), args)

    def translate_from_carrier(
        self, symbol: Symbol, carrier: Optional[LocaleCarrier], *args: Any
    ) -> str:
        """Translate ``symbol`` into the locale held by an ambient carrier."""
        return self._trans(symbol, self.resolver.resolve_from_carrier(carrier), args)

    def lookup(self, type_name: str, value: int, locale: Optional[str] = None) -> str:
        """Translate a raw value of ``type_name``.

        Values no run covers yield ``"<Type>[<locale>](<value>)"``.
        """
        resolved = self.resolver.resolve(locale)
        return self.compiled_type(type_name).table(resolved).lookup(value)

    def text(self, symbol: Symbol) -> str:
        """Text of ``symbol`` in the default locale."""
        return self._trans(symbol, self.default_locale, ())

    def wrap(
        self,
        symbol: Symbol,
        error: Optional[BaseException],
        locale: Optional[str],
        *args: Any,
    ) -> "TranslatedError":
        """Attach the translation of ``symbol`` to another error."""
        return TranslatedError(
            self, symbol, self.resolver.resolve(locale), error, *args
        )

    def wrap_from_carrier(
        self,
        symbol: Symbol,
        carrier: Optional[LocaleCarrier],
        error: Optional[BaseException],
        *args: Any,
    ) -> "TranslatedError":
        """Attach the translation of ``symbol`` in the carrier's locale to another error."""
        return TranslatedError(
            self, symbol, self.resolver.resolve_from_carrier(carrier), error, *args
        )


class TranslatedError(Exception):
    """Error carrying the translation of a symbol.

    The translated text is both the string form and the error message. The
    wrapped error stays reachable through unwrap() and ``__cause__``.

    Attributes:
        symbol: Translated symbol.
        locale: Resolved locale.
        arguments: Tagged placeholder arguments.
        error: Wrapped error, if any.
    """

    def __init__(
        self,
        translator: Translator,
        symbol: Symbol,
        locale: str,
        error: Optional[BaseException] = None,
        *args: Any,
    ):
        self._translator = translator
        self.symbol = symbol
        self.locale = locale
        self.arguments = translator.to_arguments(symbol, args)
        self.error = error
        super().__init__(self.translate())
        if error is not None:
            self.__cause__ = error

    def translate(self) -> str:
        """Translate again on demand.

        An unpickled error has no translator and keeps the text it was
        raised with.
        """
        if self._translator is None:
            return self.args[0]
        return self._translator.translate(self.symbol, self.locale, *self.arguments)

    @property
    def message(self) -> str:
        return self.translate()

    @property
    def value(self) -> Symbol:
        """The wrapped symbol."""
        return self.symbol

    def unwrap(self) -> Optional[BaseException]:
        """Get the wrapped error."""
        return self.error

    def format(self) -> str:
        """Translated text followed by the wrapped error message.

        Only for development and debugging.
        """
        if self.error is None:
            return self.translate()
        return f"{self.translate()} ({self.error})"

    def __str__(self) -> str:
        return self.translate()

    def __reduce__(self):
        return (
            _restore_translated_error,
            (type(self), str(self), self.symbol, self.locale, self.arguments, self.error),
        )


def _restore_translated_error(cls, text, symbol, locale, arguments, error):
    err = cls.__new__(cls)
    Exception.__init__(err, text)
    err._translator = None
    err.symbol = symbol
    err.locale = locale
    err.arguments = arguments
    err.error = error
    if error is not None:
        err.__cause__ = error
    return err
