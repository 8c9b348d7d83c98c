"""Splitting symbol values into runs of contiguous sequences."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from i18n_stringer.exceptions import NoValuesError
from i18n_stringer.models import INT64_MAX, INT64_MIN, Run, Symbol, UINT64_MAX


def comparable_value(value: int, signed: bool) -> Optional[int]:
    """Map a value into the comparison domain of a SymbolSet.

    Values are 64-bit patterns: a signed set reads them as int64, an unsigned
    set as uint64.

    Returns:
        The reinterpreted value, or None if ``value`` is not a 64-bit pattern.
    """
    if value < INT64_MIN or value > UINT64_MAX:
        return None
    if signed:
        return value - (1 << 64) if value > INT64_MAX else value
    return value & UINT64_MAX


@dataclass(frozen=True)
class KeyDomain:
    """Raw values a SymbolSet can be looked up with, mapped to comparison keys.

    Declared values are already interpreted per their own signedness, so a raw
    value outside that interpretation matches nothing: an unsigned set has no
    negative values, and a signed set only has values above INT64_MAX where an
    unsigned member declares them.

    Attributes:
        signed: Comparison mode of the SymbolSet.
        wrapped: Unsigned values above INT64_MAX of a signed set, keyed by
            their raw value.
        shadowed: Keys reached only through ``wrapped``.
    """

    signed: bool
    wrapped: Mapping[int, int] = field(default_factory=dict)
    shadowed: FrozenSet[int] = frozenset()

    @classmethod
    def from_symbols(cls, symbols: Iterable[Symbol], signed: bool) -> "KeyDomain":
        if not signed:
            return cls(signed=False)
        wrapped: Dict[int, int] = {}
        native = set()
        for symbol in symbols:
            if symbol.value > INT64_MAX:
                wrapped[symbol.value] = comparable_value(symbol.value, True)
            else:
                native.add(symbol.value)
        return cls(
            signed=True,
            wrapped=wrapped,
            shadowed=frozenset(set(wrapped.values()) - native),
        )

    def key(self, value: int) -> Optional[int]:
        """Comparison key of a raw ``value``, or None if no symbol can have it."""
        if not self.signed:
            return value if 0 <= value <= UINT64_MAX else None
        if value > INT64_MAX:
            return self.wrapped.get(value)
        if value < INT64_MIN or value in self.shadowed:
            return None
        return value


def _resolve_signed(symbols: List[Symbol], signed: Optional[bool]) -> bool:
    if signed is None:
        return any(symbol.signed for symbol in symbols)
    return signed


def distinct_symbols(
    symbols: Iterable[Symbol], signed: Optional[bool] = None
) -> List[Symbol]:
    """Sort symbols by value and drop duplicate values.

    The sort is stable, so for equal values the first declared name comes
    first and is the one kept.

    Args:
        symbols: Symbols of one type, in declaration order.
        signed: Comparison mode; defaults to signed if any symbol is signed.

    Returns:
        Canonical symbols ordered by value, one per distinct value.

    Raises:
        NoValuesError: If ``symbols`` is empty.
    """
    symbols = list(symbols)
    if not symbols:
        raise NoValuesError("No values defined")
    signed = _resolve_signed(symbols, signed)

    ordered = sorted(symbols, key=lambda s: comparable_value(s.value, signed))
    kept = [ordered[0]]
    for symbol in ordered[1:]:
        if comparable_value(symbol.value, signed) != comparable_value(
            kept[-1].value, signed
        ):
            kept.append(symbol)
    return kept


def split_into_runs(
    symbols: Iterable[Symbol], signed: Optional[bool] = None
) -> List[Run]:
    """Break symbol values into runs of contiguous sequences.

    For example, given 1,2,3,5,6,7 it returns {1,2,3},{5,6,7}.

    Args:
        symbols: Non-empty symbols of one type, in declaration order.
        signed: Comparison mode; defaults to signed if any symbol is signed.

    Returns:
        Ordered, non-overlapping runs covering every distinct value.

    Raises:
        NoValuesError: If ``symbols`` is empty.
    """
    symbols = list(symbols)
    values = distinct_symbols(symbols, signed)
    signed = _resolve_signed(symbols, signed)

    runs: List[Run] = []
    start = 0
    previous = comparable_value(values[0].value, signed)
    for i in range(1, len(values)):
        current = comparable_value(values[i].value, signed)
        if current != previous + 1:
            runs.append(Run(tuple(values[start:i])))
            start = i
        previous = current
    runs.append(Run(tuple(values[start:])))
    return runs
