"""Per-locale lookup tables compiled from a SymbolSet.

The encoding depends on the number of runs in the values. If there's only
one, a rebased index into a packed text blob is enough. For more than one,
there's a tradeoff between a linear scan of run bounds and the memory and
indirection of a dict. The crossover at 10 runs is arbitrary, but for many
runs the cost of the scan starts to matter, so a dict is used instead.
"""

from abc import ABC, abstractmethod
from array import array
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple

from i18n_stringer.core.logging import get_module_logger
from i18n_stringer.models import CatalogSet, LocaleCatalog, Run, Symbol, SymbolSet
from i18n_stringer.runs import KeyDomain, comparable_value, split_into_runs

logger = get_module_logger()

MAX_SWITCH_RUNS = 10

# array typecodes for 8, 16 and at least 32 bit unsigned offsets
_TYPECODES = {8: "B", 16: "H", 32: "L"}


class TableStrategy(str, Enum):
    """Table encodings, chosen once per SymbolSet from its run count."""

    DIRECT = "direct"
    SWITCH = "switch"
    MAP = "map"


def select_strategy(run_count: int) -> TableStrategy:
    """Choose the table encoding for a SymbolSet with ``run_count`` runs.

    Raises:
        ValueError: If ``run_count`` is not positive.
    """
    if run_count < 1:
        raise ValueError(f"run count must be positive, got {run_count}")
    if run_count == 1:
        return TableStrategy.DIRECT
    if run_count <= MAX_SWITCH_RUNS:
        return TableStrategy.SWITCH
    return TableStrategy.MAP


def offset_width(n: int) -> int:
    """Bits of the smallest unsigned integer type that will hold ``n``."""
    if n < 1 << 8:
        return 8
    if n < 1 << 16:
        return 16
    # 2^32 is enough text for anyone.
    return 32


def symbol_text(symbol: Symbol, catalog: Optional[LocaleCatalog]) -> str:
    """Catalog text for ``symbol``, or its own name when absent or empty."""
    message = catalog.get_message(symbol.original_name) if catalog else None
    return message if message else symbol.name


def fallback_text(type_name: str, locale: str, value) -> str:
    """Synthetic text for a value no run covers."""
    return f"{type_name}[{locale}]({value})"


class PackedText:
    """Concatenated texts with an offset array of minimal width.

    Attributes:
        blob: All texts joined in order.
        offsets: ``len(texts) + 1`` boundaries into ``blob``.
    """

    __slots__ = ("blob", "offsets")

    def __init__(self, blob: str, offsets: array):
        self.blob = blob
        self.offsets = offsets

    @classmethod
    def pack(cls, texts: Sequence[str]) -> "PackedText":
        bounds = [0]
        for text in texts:
            bounds.append(bounds[-1] + len(text))
        typecode = _TYPECODES[offset_width(bounds[-1])]
        return cls("".join(texts), array(typecode, bounds))

    @property
    def width(self) -> int:
        """Offset width in bits (8, 16 or 32)."""
        return offset_width(self.offsets[-1])

    def slice(self, index: int) -> str:
        return self.blob[self.offsets[index] : self.offsets[index + 1]]

    def __len__(self) -> int:
        return len(self.offsets) - 1


class Table(ABC):
    """Immutable (value -> text) lookup for one SymbolSet and locale.

    Attributes:
        type_name: Name of the SymbolSet.
        locale: Locale the texts belong to.
        signed: Comparison mode of the SymbolSet.
        domain: Raw values the table accepts and their comparison keys.
    """

    strategy: ClassVar[TableStrategy]

    def __init__(
        self,
        type_name: str,
        locale: str,
        signed: bool,
        domain: Optional[KeyDomain] = None,
    ):
        self.type_name = type_name
        self.locale = locale
        self.signed = signed
        self.domain = domain or KeyDomain(signed=signed)

    @abstractmethod
    def _find(self, key: int) -> Optional[str]:
        """Return the text stored for a normalized value, or None."""
        pass

    def lookup(self, value: int) -> str:
        """Return the text for ``value``.

        Never raises: a value outside every run yields
        ``"<Type>[<locale>](<value>)"``.
        """
        key = self.domain.key(value)
        text = self._find(key) if key is not None else None
        if text is None:
            return fallback_text(self.type_name, self.locale, value)
        return text

    def __contains__(self, value: int) -> bool:
        key = self.domain.key(value)
        return key is not None and self._find(key) is not None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.type_name!r}, {self.locale!r})"
        )


class DirectTable(Table):
    """Single run: the rebased value indexes the packed texts."""

    strategy = TableStrategy.DIRECT

    def __init__(
        self,
        type_name: str,
        locale: str,
        signed: bool,
        run: Run,
        texts: List[str],
        domain: Optional[KeyDomain] = None,
    ):
        super().__init__(type_name, locale, signed, domain)
        self.low = comparable_value(run.low, signed)
        self.packed = PackedText.pack(texts)

    def _find(self, key: int) -> Optional[str]:
        i = key - self.low
        if i < 0 or i >= len(self.packed):
            return None
        return self.packed.slice(i)


@dataclass(frozen=True)
class _Segment:
    low: int
    high: int
    packed: Optional[PackedText] = None
    single: Optional[str] = None


class SwitchTable(Table):
    """Few runs: a linear scan over run bounds.

    A run of length one is an equality check returning its one string.
    """

    strategy = TableStrategy.SWITCH

    def __init__(
        self,
        type_name: str,
        locale: str,
        signed: bool,
        runs: Sequence[Run],
        texts: Sequence[List[str]],
        domain: Optional[KeyDomain] = None,
    ):
        super().__init__(type_name, locale, signed, domain)
        segments = []
        for run, run_texts in zip(runs, texts):
            low = comparable_value(run.low, signed)
            high = comparable_value(run.high, signed)
            if len(run) == 1:
                segments.append(_Segment(low, high, single=run_texts[0]))
            else:
                segments.append(_Segment(low, high, packed=PackedText.pack(run_texts)))
        self.segments: Tuple[_Segment, ...] = tuple(segments)

    def _find(self, key: int) -> Optional[str]:
        for segment in self.segments:
            if segment.single is not None:
                if key == segment.low:
                    return segment.single
                continue
            if segment.low <= key <= segment.high:
                return segment.packed.slice(key - segment.low)
        return None


class MapTable(Table):
    """Many runs: every value is a key of a dict built once."""

    strategy = TableStrategy.MAP

    def __init__(
        self,
        type_name: str,
        locale: str,
        signed: bool,
        symbols: Sequence[Symbol],
        texts: List[str],
        domain: Optional[KeyDomain] = None,
    ):
        super().__init__(type_name, locale, signed, domain)
        self.packed = PackedText.pack(texts)
        self.mapping: Dict[int, str] = {
            comparable_value(symbol.value, signed): self.packed.slice(i)
            for i, symbol in enumerate(symbols)
        }

    def _find(self, key: int) -> Optional[str]:
        return self.mapping.get(key)


def build_table(
    symbol_set: SymbolSet,
    runs: Sequence[Run],
    locale: str,
    catalog: Optional[LocaleCatalog],
    strategy: Optional[TableStrategy] = None,
) -> Table:
    """Build the table of one locale.

    Args:
        symbol_set: Symbols being compiled.
        runs: Runs of ``symbol_set`` as returned by split_into_runs.
        locale: Locale id.
        catalog: Catalog of that locale; None means every text is the name.
        strategy: Encoding; chosen from the run count when omitted.

    Returns:
        The built Table.
    """
    strategy = strategy or select_strategy(len(runs))
    signed = symbol_set.signed
    domain = KeyDomain.from_symbols(symbol_set.symbols, signed)
    texts = [[symbol_text(symbol, catalog) for symbol in run] for run in runs]

    if strategy is TableStrategy.DIRECT:
        if len(runs) != 1:
            raise ValueError(f"direct table needs exactly one run, got {len(runs)}")
        return DirectTable(
            symbol_set.type_name, locale, signed, runs[0], texts[0], domain
        )
    if strategy is TableStrategy.SWITCH:
        return SwitchTable(symbol_set.type_name, locale, signed, runs, texts, domain)
    return MapTable(
        symbol_set.type_name,
        locale,
        signed,
        [symbol for run in runs for symbol in run],
        [text for run_texts in texts for text in run_texts],
        domain,
    )


def build_tables(
    symbol_set: SymbolSet,
    catalog_set: CatalogSet,
    runs: Optional[Sequence[Run]] = None,
) -> Dict[str, Table]:
    """Build one table per locale, sharing one strategy across locales."""
    runs = runs if runs is not None else split_into_runs(symbol_set.symbols)
    strategy = select_strategy(len(runs))
    tables = {
        catalog.locale: build_table(symbol_set, runs, catalog.locale, catalog, strategy)
        for catalog in catalog_set
    }
    logger.info(
        "tables_built",
        type_name=symbol_set.type_name,
        strategy=strategy.value,
        run_count=len(runs),
        locale_count=len(tables),
    )
    return tables


@dataclass(frozen=True)
class CompiledType:
    """Everything built for one SymbolSet.

    Attributes:
        symbol_set: Source symbols.
        runs: Contiguous runs of distinct values.
        strategy: Encoding shared by every table.
        locales: Locale ids in natural order.
        ordinals: Locale id to ordinal.
        default_locale: Resolved default locale.
        tables: Locale id to Table.
    """

    symbol_set: SymbolSet
    runs: Tuple[Run, ...]
    strategy: TableStrategy
    locales: Tuple[str, ...]
    ordinals: Mapping[str, int]
    default_locale: str
    tables: Mapping[str, Table] = field(default_factory=dict)

    @property
    def type_name(self) -> str:
        return self.symbol_set.type_name

    def table(self, locale: str) -> Table:
        """Table of ``locale``; unknown locales get the default locale's table."""
        return self.tables.get(locale) or self.tables[self.default_locale]


def compile_type(
    symbol_set: SymbolSet,
    catalog_set: CatalogSet,
    default_locale: str,
) -> CompiledType:
    """Split runs and build every locale's table for one SymbolSet."""
    runs = split_into_runs(symbol_set.symbols)
    tables = build_tables(symbol_set, catalog_set, runs)
    return CompiledType(
        symbol_set=symbol_set,
        runs=tuple(runs),
        strategy=select_strategy(len(runs)),
        locales=tuple(catalog_set.locales),
        ordinals=dict(catalog_set.ordinals),
        default_locale=default_locale,
        tables=tables,
    )
