"""i18n-stringer - localized text for integer enumerations.

Compiles named integer symbols and per-locale catalogs into compact lookup
tables, translates symbols with argument substitution, and cross-checks
symbols against catalogs.

Main components:
- models: Symbol, SymbolSet, Run, LocaleCatalog, CatalogSet
- catalog: catalog file parser and TomlCatalogLoader
- runs: split_into_runs
- tables: DirectTable, SwitchTable, MapTable and compile_type
- resolvers: LocaleResolver
- translator: Translator and TranslatedError
- checker: consistency check and CheckReport
- factory: StringerGenerator for build and check-only runs
"""

from i18n_stringer.catalog import TomlCatalogLoader, load_catalogs, parse_catalog
from i18n_stringer.checker import CheckReport, check
from i18n_stringer.exceptions import (
    CatalogError,
    ConfigurationError,
    InvalidDefaultLocaleError,
    NoValuesError,
    StringerError,
    SymbolValueError,
)
from i18n_stringer.factory import Generation, StringerGenerator, create_translator
from i18n_stringer.models import (
    CatalogSet,
    LocaleCatalog,
    Run,
    Symbol,
    SymbolDeclaration,
    SymbolSet,
)
from i18n_stringer.resolvers import LocaleResolver
from i18n_stringer.runs import split_into_runs
from i18n_stringer.sources import (
    EnumSymbolSource,
    StaticSymbolSource,
    SymbolSource,
    YAMLSymbolSource,
)
from i18n_stringer.tables import CompiledType, Table, TableStrategy, compile_type
from i18n_stringer.translator import Literal, SymbolRef, TranslatedError, Translator

__all__ = [
    "Symbol",
    "SymbolDeclaration",
    "SymbolSet",
    "Run",
    "LocaleCatalog",
    "CatalogSet",
    "TomlCatalogLoader",
    "load_catalogs",
    "parse_catalog",
    "split_into_runs",
    "Table",
    "TableStrategy",
    "CompiledType",
    "compile_type",
    "LocaleResolver",
    "Translator",
    "TranslatedError",
    "SymbolRef",
    "Literal",
    "CheckReport",
    "check",
    "SymbolSource",
    "StaticSymbolSource",
    "EnumSymbolSource",
    "YAMLSymbolSource",
    "StringerGenerator",
    "Generation",
    "create_translator",
    "StringerError",
    "ConfigurationError",
    "CatalogError",
    "NoValuesError",
    "InvalidDefaultLocaleError",
    "SymbolValueError",
]
