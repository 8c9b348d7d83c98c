"""Feature-level fixtures for i18n-stringer tests.

Provides catalog trees on disk and built translators.
"""

import pytest

from i18n_stringer import (
    LocaleResolver,
    StaticSymbolSource,
    Translator,
    compile_type,
)
from tests.factories.symbols import make_catalog_set, make_symbol_set, write_catalog


@pytest.fixture
def catalog_dir(tmp_path):
    """Create a temporary catalog root.

    Returns a directory structure like:
    - en.toml
    - fr.toml
    - zh-hk/common.toml
    - zh-hk/errors/more.toml
    - README.md (ignored)
    """
    root = tmp_path / "i18n"
    write_catalog(
        root / "en.toml",
        {"CodeOK": "OK", "CodeErr": "Error", "CodeFail": "missing %s"},
        header="# English",
    )
    write_catalog(
        root / "fr.toml",
        {"CodeOK": "Bien", "CodeErr": "Erreur", "CodeFail": "manquant %s"},
    )
    write_catalog(root / "zh-hk" / "common.toml", {"CodeOK": "好"})
    write_catalog(root / "zh-hk" / "errors" / "more.toml", {"CodeErr": "錯誤"})
    (root / "README.md").write_text("not a catalog\n", encoding="utf-8")
    return root


@pytest.fixture
def code_source():
    """Symbol source declaring Code (one run), Pair (two runs) and Sparse (many runs)."""
    return StaticSymbolSource(
        [
            ("Code", "CodeOK", 1, True),
            ("Code", "CodeErr", 2, True),
            ("Code", "CodeFail", 3, True),
            ("Code", "CodeFailure", 3, True),
            ("Pair", "PairLow", 1, False),
            ("Pair", "PairMid", 2, False),
            ("Pair", "PairHigh", 5, False),
        ]
        + [("Sparse", f"Sparse{i}", i * 10, True) for i in range(12)]
    )


@pytest.fixture
def ok_err_translator():
    """Translator for {Ok=0, Err=1} with en and fr catalogs, default en."""
    symbol_set = make_symbol_set([("Ok", 0), ("Err", 1)], type_name="Result")
    catalogs = make_catalog_set(
        {
            "en": {"Ok": "OK", "Err": "Error"},
            "fr": {"Ok": "Bien", "Err": "Erreur"},
        }
    )
    resolver = LocaleResolver.from_catalogs(catalogs, default_locale="en")
    compiled = compile_type(symbol_set, catalogs, resolver.default_locale)
    return Translator({"Result": compiled}, resolver), symbol_set
