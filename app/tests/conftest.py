import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing
# `i18n_stringer` and `tests.factories` works during collection regardless
# of how pytest is invoked.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest  # noqa: E402
from tests.factories.symbols import make_catalog_set, make_symbol_set  # noqa: E402


@pytest.fixture
def code_set():
    """Three contiguous Code symbols: CodeOK=1, CodeErr=2, CodeFail=3."""
    return make_symbol_set()


@pytest.fixture
def en_fr_catalogs():
    """English and French catalogs covering every Code symbol."""
    return make_catalog_set()
