"""Test data factories for deterministic test data generation."""

from tests.factories.symbols import (
    make_catalog_set,
    make_symbol,
    make_symbol_set,
    write_catalog,
)

__all__ = [
    "make_catalog_set",
    "make_symbol",
    "make_symbol_set",
    "write_catalog",
]
