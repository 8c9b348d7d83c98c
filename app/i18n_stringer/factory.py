"""Factory functions for running a generation.

Wires a symbol source and a catalog directory into compiled lookup tables,
or into a consistency report in check-only mode.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from i18n_stringer.catalog import TomlCatalogLoader
from i18n_stringer.checker import CheckReport, check
from i18n_stringer.core.config import StringerSettings, settings as default_settings
from i18n_stringer.core.logging import get_module_logger
from i18n_stringer.exceptions import NoValuesError
from i18n_stringer.models import CatalogSet, SymbolSet
from i18n_stringer.resolvers import LocaleResolver
from i18n_stringer.sources import SymbolSource
from i18n_stringer.tables import CompiledType, compile_type
from i18n_stringer.translator import Translator

logger = get_module_logger()


@dataclass(frozen=True)
class Generation:
    """Result of one generation run.

    Attributes:
        compiled: CompiledType per requested type, in request order.
        catalogs: Parsed catalogs.
        resolver: Locale resolver built from the catalogs.
        translator: Translator over ``compiled``.
    """

    compiled: Dict[str, CompiledType]
    catalogs: CatalogSet
    resolver: LocaleResolver
    translator: Translator

    @property
    def default_locale(self) -> str:
        return self.resolver.default_locale

    def __getitem__(self, type_name: str) -> CompiledType:
        return self.compiled[type_name]


class StringerGenerator:
    """Builds lookup tables (or a check report) for a set of types.

    Attributes:
        source: Provider of symbol declarations.
        catalog_root: Catalog root directory.
        default_locale: Default locale override, or None.
        carrier_key: Key read from ambient locale carriers.
    """

    def __init__(
        self,
        source: SymbolSource,
        catalog_root: Optional[Path] = None,
        default_locale: Optional[str] = None,
        carrier_key: Optional[str] = None,
        settings: Optional[StringerSettings] = None,
    ):
        """Initialize the generator.

        Args:
            source: Provider of symbol declarations.
            catalog_root: Catalog directory (default: settings CATALOG_PATH).
            default_locale: Default locale (default: settings DEFAULT_LOCALE,
                then the first locale in natural order).
            carrier_key: Carrier key (default: settings CARRIER_KEY).
            settings: Settings instance (default: module settings).
        """
        self.settings = settings or default_settings
        self.source = source
        self.catalog_root = Path(catalog_root or self.settings.CATALOG_PATH)
        self.default_locale = default_locale or self.settings.default_locale_override
        self.carrier_key = carrier_key or self.settings.CARRIER_KEY

    def load_catalogs(self) -> CatalogSet:
        """Discover and parse every catalog under the catalog root."""
        loader = TomlCatalogLoader(
            self.catalog_root,
            extension=self.settings.CATALOG_EXTENSION,
            max_workers=self.settings.PARSE_WORKERS,
        )
        return loader.load_all()

    def load_symbol_sets(self, type_names: Iterable[str]) -> List[SymbolSet]:
        """Build one SymbolSet per requested type.

        Raises:
            NoValuesError: If a requested type has no declarations.
        """
        symbol_sets = []
        for type_name in type_names:
            declarations = self.source.load(type_name)
            if not declarations:
                logger.error("no_values_defined", type_name=type_name)
                raise NoValuesError(
                    f"No values defined for type {type_name}", key=type_name
                )
            symbol_sets.append(SymbolSet.from_declarations(type_name, declarations))
        return symbol_sets

    def build(self, type_names: Iterable[str]) -> Generation:
        """Compile lookup tables for every requested type.

        Args:
            type_names: Types to compile.

        Returns:
            Generation with tables, resolver and translator.

        Raises:
            ConfigurationError: On invalid catalogs, an empty type, or an
                unknown default locale.
        """
        catalogs = self.load_catalogs()
        resolver = LocaleResolver.from_catalogs(
            catalogs, self.default_locale, self.carrier_key
        )
        compiled = {
            symbol_set.type_name: compile_type(
                symbol_set, catalogs, resolver.default_locale
            )
            for symbol_set in self.load_symbol_sets(type_names)
        }
        translator = Translator(compiled, resolver)
        logger.info(
            "generation_built",
            types=list(compiled),
            locales=catalogs.locales,
            default_locale=resolver.default_locale,
            strategies={name: c.strategy.value for name, c in compiled.items()},
        )
        return Generation(
            compiled=compiled,
            catalogs=catalogs,
            resolver=resolver,
            translator=translator,
        )

    def check(self, type_names: Iterable[str]) -> CheckReport:
        """Check-only mode: cross-check symbols and catalogs, build no table."""
        catalogs = self.load_catalogs()
        # The default override is still validated in check-only mode
        LocaleResolver.from_catalogs(catalogs, self.default_locale, self.carrier_key)
        report = check(self.load_symbol_sets(type_names), catalogs)
        for line in report.lines():
            if report.is_success:
                logger.info("check_report", line=line)
            else:
                logger.warning("check_report", line=line)
        return report


def create_translator(
    source: SymbolSource,
    type_names: Iterable[str],
    catalog_root: Optional[Path] = None,
    default_locale: Optional[str] = None,
    carrier_key: Optional[str] = None,
) -> Translator:
    """Create a Translator for ``type_names`` in one call.

    Usage:
        translator = create_translator(
            YAMLSymbolSource("symbols.yml"), ["Code"], catalog_root=Path("i18n")
        )
        translator.translate(symbol, "fr")
    """
    generator = StringerGenerator(
        source,
        catalog_root=catalog_root,
        default_locale=default_locale,
        carrier_key=carrier_key,
    )
    return generator.build(type_names).translator
