"""Catalog loading interface and implementations.

Catalog files hold one ``key = "value"`` pair per line. Only a small, strict
subset of TOML is accepted:

    # comment
    [section]          (ignored)
    CodeOk = "OK"
    CodeErr = "Error: \\"%s\\"\\n"

Values must be double-quoted; the escapes ``\\0 \\t \\n \\r \\" \\\\`` are
recognised and any other escape is a fatal error.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from i18n_stringer.core.logging import get_module_logger
from i18n_stringer.exceptions import CatalogError
from i18n_stringer.models import CatalogSet, LocaleCatalog

logger = get_module_logger()

_BOMS = (b"\xef\xbb\xbf", b"\xff\xfe", b"\xfe\xff")
_ESCAPES = {
    "0": "\x00",
    "t": "\t",
    "n": "\n",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}
_TRIM = " \t\n\r"

CatalogEntry = Tuple[str, str]


def scan_quoted(value: str) -> Tuple[str, bool]:
    """Decode a double-quoted catalog value.

    Consumes characters up to the first unescaped closing quote; anything
    after it is ignored. A value without a closing quote keeps everything
    after the opening quote.

    Args:
        value: Raw value, starting with ``"``.

    Returns:
        Tuple of (decoded text, ok). ``ok`` is False when the value does not
        start with a quote or uses an unknown escape.
    """
    if not value:
        return "", True
    if value[0] != '"':
        return "", False

    result = []
    escape = False
    for c in value[1:]:
        if escape:
            decoded = _ESCAPES.get(c)
            if decoded is None:
                return "", False
            result.append(decoded)
            escape = False
            continue
        if c == "\\":
            escape = True
            continue
        if c == '"':
            break
        result.append(c)
    return "".join(result), True


def decode_catalog(data: bytes, path: str) -> str:
    """Strip a byte-order mark and decode catalog bytes as UTF-8.

    Raises:
        CatalogError: If a NUL byte appears in the first six bytes or the
            content is not valid UTF-8.
    """
    for bom in _BOMS:
        if data.startswith(bom):
            data = data[len(bom) :]
            break

    if b"\x00" in data[:6]:
        raise CatalogError(
            f"catalog file `{path}` must be using UTF-8 coding", path=path
        )
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CatalogError(
            f"catalog file `{path}` must be using UTF-8 coding: {e}", path=path
        ) from e


def parse_catalog(data: bytes, path: str = "<memory>") -> List[CatalogEntry]:
    """Parse the raw bytes of one catalog file.

    Args:
        data: File content.
        path: File path, used in error messages.

    Returns:
        Ordered (key, value) entries; repeated keys are kept in file order.

    Raises:
        CatalogError: If the content is not UTF-8 or a value is malformed.
    """
    entries: List[CatalogEntry] = []
    for raw_line in decode_catalog(data, path).split("\n"):
        line = raw_line.strip(_TRIM)
        if not line:
            continue
        # comment or section header
        if line[0] == "#" or (line[0] == "[" and line[-1] == "]"):
            continue

        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip(_TRIM)
        value = value.strip(_TRIM)

        if value:
            if value[0] != '"':
                raise CatalogError(
                    f"value of key `{key}` in catalog file `{path}` must be using double quotes",
                    path=path,
                    key=key,
                )
            value, ok = scan_quoted(value)
            if not ok:
                raise CatalogError(
                    f"value of key `{key}` in catalog file `{path}` parse failed, "
                    "backslash(\\) may be used incorrectly",
                    path=path,
                    key=key,
                )
        entries.append((key, value))
    return entries


class CatalogLoader(ABC):
    """Abstract base for catalog loaders.

    Implementations define how catalogs are discovered and parsed.
    """

    @abstractmethod
    def load(self, locale: str) -> LocaleCatalog:
        """Load the catalog for a single locale.

        Raises:
            CatalogError: If no file exists for the locale or parsing fails.
        """
        pass

    @abstractmethod
    def load_all(self) -> CatalogSet:
        """Load catalogs for every discovered locale.

        Raises:
            CatalogError: If nothing is found or any file is invalid.
        """
        pass


class TomlCatalogLoader(CatalogLoader):
    """Loader for a directory tree of ``key = "value"`` catalog files.

    Discovery rule for the root directory:

    - a direct child file ``<locale>.<ext>`` is one catalog;
    - a direct child directory is one catalog named after the directory,
      aggregating every ``*.<ext>`` file beneath it;
    - any other file is skipped with a warning.

    Attributes:
        root: Catalog root directory.
        extension: Catalog file extension, without the dot.
        max_workers: Thread pool size used to parse files in parallel.
    """

    def __init__(
        self,
        root: Path,
        extension: str = "toml",
        max_workers: int = 4,
    ):
        """Initialize the catalog loader.

        Args:
            root: Catalog root directory.
            extension: Catalog file extension (leading dot optional).
            max_workers: Parallel parse workers.

        Raises:
            CatalogError: If ``root`` is not an existing directory.
        """
        self.root = Path(root)
        self.extension = extension.lstrip(".")
        self.max_workers = max_workers

        if not self.root.is_dir():
            raise CatalogError(
                f"catalog path option applies only to directory: {self.root}",
                path=str(self.root),
            )

        logger.info(
            "initialized_catalog_loader",
            root=str(self.root),
            extension=self.extension,
        )

    def _matches(self, path: Path) -> bool:
        suffix = f".{self.extension}"
        return path.name.endswith(suffix) and len(path.name) > len(suffix)

    def _ignore(self, path: Path) -> None:
        logger.warning(
            "catalog_file_ignored",
            path=str(path),
            extension=self.extension,
        )

    def discover(self) -> Dict[str, List[Path]]:
        """Map each discovered locale to its catalog files.

        Returns:
            Dict of locale id to file paths, in sorted path order.
        """
        files: Dict[str, List[Path]] = {}
        for entry in sorted(self.root.iterdir()):
            if entry.is_dir():
                found = []
                for path in sorted(entry.rglob("*")):
                    if not path.is_file():
                        continue
                    if self._matches(path):
                        found.append(path)
                    else:
                        self._ignore(path)
                if found:
                    files.setdefault(entry.name, []).extend(found)
            elif self._matches(entry):
                locale = entry.name[: -len(self.extension) - 1]
                files.setdefault(locale, []).append(entry)
            else:
                self._ignore(entry)
        return files

    def _read(self, path: Path) -> List[CatalogEntry]:
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            logger.error("catalog_read_error", path=str(path), error=str(e))
            raise CatalogError(
                f"read catalog file `{path}` occur err {e}", path=str(path)
            ) from e
        return parse_catalog(data, str(path))

    def _build(
        self,
        locale: str,
        paths: List[Path],
        parsed: List[List[CatalogEntry]],
    ) -> LocaleCatalog:
        catalog = LocaleCatalog(locale=locale)
        for path, entries in zip(paths, parsed):
            catalog.sources.append(str(path))
            for key, value in entries:
                if catalog.set_message(key, value):
                    logger.warning(
                        "duplicate_catalog_key",
                        key=key,
                        path=str(path),
                        locale=locale,
                    )
        return catalog

    def _parse_all(self, paths: List[Path]) -> List[List[CatalogEntry]]:
        if len(paths) <= 1 or self.max_workers <= 1:
            return [self._read(path) for path in paths]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(self._read, paths))

    def load(self, locale: str) -> LocaleCatalog:
        """Load the catalog for one locale from its discovered files."""
        paths = self.discover().get(locale)
        if not paths:
            raise CatalogError(
                f"No catalog files found for locale {locale} in {self.root}",
                path=str(self.root),
                key=locale,
            )
        catalog = self._build(locale, paths, self._parse_all(paths))
        logger.info(
            "loaded_catalog",
            locale=locale,
            file_count=len(paths),
            key_count=len(catalog.messages),
        )
        return catalog

    def load_all(self) -> CatalogSet:
        """Load every discovered locale.

        Files are parsed in parallel; results are merged per locale by a single
        writer in sorted path order so the last write wins deterministically.
        """
        discovered = self.discover()
        if not discovered:
            logger.error("no_catalog_files", root=str(self.root))
            raise CatalogError(
                f"No valid catalog file found in {self.root}, "
                f"please write locale .{self.extension} files first",
                path=str(self.root),
            )

        ordered: List[Tuple[str, Path]] = [
            (locale, path)
            for locale in sorted(discovered)
            for path in discovered[locale]
        ]
        parsed = self._parse_all([path for _, path in ordered])

        per_locale: Dict[str, List[List[CatalogEntry]]] = {}
        for (locale, _), entries in zip(ordered, parsed):
            per_locale.setdefault(locale, []).append(entries)

        catalogs = CatalogSet(
            self._build(locale, discovered[locale], per_locale[locale])
            for locale in sorted(discovered)
        )
        logger.info(
            "loaded_catalogs",
            root=str(self.root),
            locales=catalogs.locales,
            file_count=len(ordered),
        )
        return catalogs


def load_catalogs(
    root: Path,
    extension: str = "toml",
    max_workers: int = 4,
) -> CatalogSet:
    """Discover and parse every catalog beneath ``root``."""
    return TomlCatalogLoader(root, extension, max_workers).load_all()


def catalog_from_mapping(
    locale: str,
    messages: Dict[str, str],
    source: Optional[str] = None,
) -> LocaleCatalog:
    """Create a LocaleCatalog from an in-memory mapping."""
    return LocaleCatalog(
        locale=locale,
        messages=dict(messages),
        sources=[source] if source else [],
    )
