"""Cross-checking declared symbols against translation catalogs.

Two read-only passes:

- missing: symbols whose name is absent from a locale's catalog;
- orphaned: catalog keys that no declared symbol uses.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from i18n_stringer.core.logging import get_module_logger
from i18n_stringer.models import CatalogSet, SymbolSet

logger = get_module_logger()


@dataclass
class CheckReport:
    """Outcome of a consistency check.

    Attributes:
        missing: type name -> locale -> symbol names lacking a translation.
        orphaned: locale -> catalog keys no symbol uses.
    """

    missing: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)
    orphaned: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def missing_count(self) -> int:
        return sum(
            len(names) for locales in self.missing.values() for names in locales.values()
        )

    @property
    def orphaned_count(self) -> int:
        return sum(len(keys) for keys in self.orphaned.values())

    @property
    def is_success(self) -> bool:
        """True when both passes found nothing."""
        return not self.missing and not self.orphaned

    def lines(self) -> List[str]:
        """Render the report as text lines.

        Missing entries are rendered as ``Name=""`` so a block can be pasted
        straight into the catalog file and filled in.
        """
        lines: List[str] = []
        if self.missing:
            lines.append("Check Fail")
            lines.append("The missing key-value pair information as follows")
            lines.append("You can copy and fill it to the corresponding catalog file")
            for type_name, locales in self.missing.items():
                for locale, names in locales.items():
                    lines.append(
                        f"************TYPE `{type_name}` locale `{locale}` "
                        "missing key-value pair************"
                    )
                    lines.extend(f'{name}=""' for name in names)

        if self.orphaned:
            lines.append("Check Warning")
            lines.append(
                "key-value pairs that will not be used because there is no "
                "corresponding defined constant"
            )
            lines.append("You can delete the key-value pairs in the corresponding catalog file")
            for locale, keys in self.orphaned.items():
                lines.append(
                    f"************Can be deleted catalog keys of locale `{locale}`************"
                )
                lines.extend(keys)

        if self.is_success:
            lines.append("Check success, All constants have key-value pairs set")
        return lines


def find_missing(
    symbol_sets: Iterable[SymbolSet], catalog_set: CatalogSet
) -> Dict[str, Dict[str, List[str]]]:
    """Symbols without a translation, grouped by type then locale.

    Each name is reported once, in declaration order.
    """
    missing: Dict[str, Dict[str, List[str]]] = {}
    for symbol_set in symbol_sets:
        declared = list(dict.fromkeys(symbol.original_name for symbol in symbol_set))
        for catalog in catalog_set:
            names = [name for name in declared if not catalog.has_message(name)]
            if names:
                missing.setdefault(symbol_set.type_name, {})[catalog.locale] = names
    return missing


def find_orphaned(
    symbol_sets: Iterable[SymbolSet], catalog_set: CatalogSet
) -> Dict[str, List[str]]:
    """Catalog keys no SymbolSet declares, grouped by locale."""
    declared = set()
    for symbol_set in symbol_sets:
        declared |= symbol_set.names

    orphaned: Dict[str, List[str]] = {}
    for catalog in catalog_set:
        keys = sorted(key for key in catalog.messages if key not in declared)
        if keys:
            orphaned[catalog.locale] = keys
    return orphaned


def check(symbol_sets: Iterable[SymbolSet], catalog_set: CatalogSet) -> CheckReport:
    """Run both passes without touching the inputs.

    Args:
        symbol_sets: Every declared SymbolSet.
        catalog_set: Parsed catalogs.

    Returns:
        CheckReport; ``is_success`` only when nothing was recorded.
    """
    symbol_sets = list(symbol_sets)
    report = CheckReport(
        missing=find_missing(symbol_sets, catalog_set),
        orphaned=find_orphaned(symbol_sets, catalog_set),
    )
    logger.info(
        "consistency_checked",
        success=report.is_success,
        missing_count=report.missing_count,
        orphaned_count=report.orphaned_count,
    )
    return report
