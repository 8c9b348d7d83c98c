"""Core models for the i18n-stringer system.

Defines symbols and the sets they belong to, contiguous value runs, and the
per-locale translation catalogs they are compiled against.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Union

from i18n_stringer.exceptions import NoValuesError, SymbolValueError

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1


class SymbolDeclaration(NamedTuple):
    """Raw declaration as supplied by a symbol source.

    Aliases appear verbatim; duplicate values are resolved later by the
    run splitter.
    """

    type_name: str
    name: str
    value: int
    signed: bool = True


@dataclass(frozen=True)
class Symbol:
    """A named integer constant belonging to one enumeration-like type.

    Attributes:
        type_name: Name of the type (SymbolSet) the symbol belongs to.
        name: Name used as the fallback text.
        value: Integer value, already interpreted per ``signed``.
        signed: Whether the value is a signed 64-bit integer.
        original_name: Declared name, used as the catalog key.
        text: Textual representation of the value.
    """

    type_name: str
    name: str
    value: int
    signed: bool = True
    original_name: Optional[str] = None
    text: Optional[str] = None

    def __post_init__(self):
        low, high = (INT64_MIN, INT64_MAX) if self.signed else (0, UINT64_MAX)
        if not low <= self.value <= high:
            kind = "signed" if self.signed else "unsigned"
            raise SymbolValueError(
                f"value {self.value} of `{self.type_name}.{self.name}` "
                f"does not fit a {kind} 64-bit integer",
                key=self.name,
            )
        if self.original_name is None:
            object.__setattr__(self, "original_name", self.name)
        if self.text is None:
            object.__setattr__(self, "text", str(self.value))

    @classmethod
    def from_declaration(cls, declaration: SymbolDeclaration) -> "Symbol":
        """Create a Symbol from a raw source declaration."""
        return cls(
            type_name=declaration.type_name,
            name=declaration.name,
            value=int(declaration.value),
            signed=bool(declaration.signed),
        )

    def __str__(self) -> str:
        return self.name


class SymbolSet:
    """Ordered, immutable collection of Symbols for one type.

    Attributes:
        type_name: Name of the enumeration type.
        symbols: Symbols in declaration order, aliases included.
    """

    def __init__(self, type_name: str, symbols: Iterable[Symbol]):
        self.type_name = type_name
        self.symbols = tuple(symbols)
        if not self.symbols:
            raise NoValuesError(
                f"No values defined for type {type_name}", key=type_name
            )
        for symbol in self.symbols:
            if symbol.type_name != type_name:
                raise ValueError(
                    f"Symbol `{symbol.name}` belongs to `{symbol.type_name}`, not `{type_name}`"
                )
        self._by_name: Dict[str, Symbol] = {}
        for symbol in self.symbols:
            # First declaration wins for repeated names
            self._by_name.setdefault(symbol.original_name, symbol)

    @classmethod
    def from_declarations(
        cls, type_name: str, declarations: Iterable[SymbolDeclaration]
    ) -> "SymbolSet":
        """Build a SymbolSet from raw source declarations.

        Args:
            type_name: Name of the type being built.
            declarations: Ordered declarations for that type.

        Returns:
            SymbolSet instance.

        Raises:
            NoValuesError: If no declaration is supplied.
            SymbolValueError: If a value does not fit its 64-bit range.
        """
        return cls(
            type_name, (Symbol.from_declaration(decl) for decl in declarations)
        )

    @property
    def signed(self) -> bool:
        """True if any member is signed; comparisons then use signed order."""
        return any(symbol.signed for symbol in self.symbols)

    @property
    def names(self) -> frozenset:
        """All declared (original) names, aliases included."""
        return frozenset(self._by_name)

    def get(self, name: str) -> Optional[Symbol]:
        """Return the first symbol declared under ``name``, if any."""
        return self._by_name.get(name)

    def __contains__(self, item: Union[Symbol, str]) -> bool:
        if isinstance(item, Symbol):
            return item.type_name == self.type_name and item in self.symbols
        return item in self._by_name

    def __getitem__(self, name: str) -> Symbol:
        return self._by_name[name]

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def __repr__(self) -> str:
        return f"SymbolSet({self.type_name!r}, {len(self.symbols)} symbols)"


@dataclass(frozen=True)
class Run:
    """Maximal contiguous subsequence of a SymbolSet's distinct values.

    Attributes:
        symbols: Canonical symbols of the run, ordered by value.
    """

    symbols: tuple

    @property
    def low(self) -> int:
        return self.symbols[0].value

    @property
    def high(self) -> int:
        return self.symbols[-1].value

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols)


@dataclass
class LocaleCatalog:
    """Container for the translations of a single locale.

    Attributes:
        locale: Locale identifier (directory or file name).
        messages: Mapping of symbol name to translated text.
        sources: Catalog files that contributed to this locale.
    """

    locale: str
    messages: Dict[str, str] = field(default_factory=dict)
    sources: List[str] = field(default_factory=list)

    def get_message(self, key: str) -> Optional[str]:
        """Retrieve a translation by key.

        Args:
            key: Symbol name.

        Returns:
            Translated text, or None if not found.
        """
        return self.messages.get(key)

    def has_message(self, key: str) -> bool:
        """Check if a translation exists for the given key."""
        return key in self.messages

    def set_message(self, key: str, message: str) -> bool:
        """Set a translation, later writes replacing earlier ones.

        Args:
            key: Symbol name.
            message: Translated text.

        Returns:
            True if an earlier value was replaced.
        """
        replaced = key in self.messages
        self.messages[key] = message
        return replaced

    def merge(self, other: "LocaleCatalog") -> None:
        """Merge another catalog into this one. Later entries override earlier ones."""
        self.messages.update(other.messages)
        self.sources.extend(other.sources)


class CatalogSet:
    """Unique-by-id, naturally sorted collection of LocaleCatalogs."""

    def __init__(self, catalogs: Iterable[LocaleCatalog] = ()):
        merged: Dict[str, LocaleCatalog] = {}
        for catalog in catalogs:
            if catalog.locale in merged:
                merged[catalog.locale].merge(catalog)
            else:
                merged[catalog.locale] = catalog
        self._catalogs = {locale: merged[locale] for locale in sorted(merged)}
        self.ordinals: Dict[str, int] = {
            locale: index for index, locale in enumerate(self._catalogs)
        }

    @property
    def locales(self) -> List[str]:
        """Locale ids in natural (lexicographic) order."""
        return list(self._catalogs)

    def get(self, locale: str) -> Optional[LocaleCatalog]:
        return self._catalogs.get(locale)

    def __getitem__(self, locale: str) -> LocaleCatalog:
        return self._catalogs[locale]

    def __contains__(self, locale: str) -> bool:
        return locale in self._catalogs

    def __iter__(self) -> Iterator[LocaleCatalog]:
        return iter(self._catalogs.values())

    def __len__(self) -> int:
        return len(self._catalogs)

    def __repr__(self) -> str:
        return f"CatalogSet({self.locales!r})"
