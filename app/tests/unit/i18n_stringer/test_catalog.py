"""Tests for i18n_stringer.catalog module."""

from unittest.mock import patch

import pytest

from i18n_stringer import CatalogError, TomlCatalogLoader, load_catalogs, parse_catalog
from i18n_stringer.catalog import catalog_from_mapping, scan_quoted
from tests.factories.symbols import write_catalog


class TestScanQuoted:
    """Tests for the quoted value scanner."""

    def test_plain_value(self):
        """scan_quoted() returns the text between the quotes."""
        assert scan_quoted('"hello world"') == ("hello world", True)

    def test_recognized_escapes(self):
        """scan_quoted() decodes every supported escape."""
        text, ok = scan_quoted(r'"a\tb\nc\rd\0e\"f\\g"')
        assert ok is True
        assert text == 'a\tb\nc\rd\x00e"f\\g'

    def test_unknown_escape_fails(self):
        """scan_quoted() rejects escapes outside the supported set."""
        assert scan_quoted(r'"bad \x escape"') == ("", False)

    def test_text_after_closing_quote_ignored(self):
        """scan_quoted() stops at the first unescaped quote."""
        assert scan_quoted('"value" # trailing') == ("value", True)

    def test_missing_closing_quote_keeps_rest(self):
        """scan_quoted() keeps everything after an unterminated opening quote."""
        assert scan_quoted('"open ended') == ("open ended", True)

    def test_empty_value_allowed(self):
        """scan_quoted() accepts an empty value."""
        assert scan_quoted("") == ("", True)

    def test_unquoted_value_fails(self):
        """scan_quoted() requires a leading quote."""
        assert scan_quoted("bare")[1] is False


class TestParseCatalog:
    """Tests for parse_catalog()."""

    def test_parses_key_value_lines(self):
        """parse_catalog() returns entries in file order."""
        data = b'CodeOK = "OK"\nCodeErr="Error"\n'
        assert parse_catalog(data) == [("CodeOK", "OK"), ("CodeErr", "Error")]

    def test_skips_comments_sections_and_blank_lines(self):
        """parse_catalog() ignores comments, section headers and blank lines."""
        data = b'# comment\n\n[errors]\n  CodeOK = "OK"  \nno equals sign\n'
        assert parse_catalog(data) == [("CodeOK", "OK")]

    def test_splits_on_first_equals(self):
        """parse_catalog() splits key and value on the first '='."""
        data = b'Formula = "a = b"\n'
        assert parse_catalog(data) == [("Formula", "a = b")]

    def test_empty_value(self):
        """parse_catalog() keeps keys with an empty value."""
        assert parse_catalog(b"CodeOK =\n") == [("CodeOK", "")]

    def test_crlf_line_endings(self):
        """parse_catalog() trims carriage returns."""
        data = b'CodeOK = "OK"\r\nCodeErr = "Error"\r\n'
        assert parse_catalog(data) == [("CodeOK", "OK"), ("CodeErr", "Error")]

    def test_strips_utf8_bom(self):
        """parse_catalog() strips a leading UTF-8 byte-order mark."""
        data = b'\xef\xbb\xbfCodeOK = "OK"\n'
        assert parse_catalog(data) == [("CodeOK", "OK")]

    def test_utf8_text(self):
        """parse_catalog() decodes UTF-8 values."""
        data = 'CodeErr = "錯誤"\n'.encode("utf-8")
        assert parse_catalog(data) == [("CodeErr", "錯誤")]

    def test_nul_in_first_bytes_is_fatal(self):
        """parse_catalog() rejects UTF-16 content through the NUL guard."""
        data = 'CodeOK = "OK"'.encode("utf-16-le")
        with pytest.raises(CatalogError, match="UTF-8"):
            parse_catalog(b"\xff\xfe" + data, "en.toml")

    def test_invalid_utf8_is_fatal(self):
        """parse_catalog() rejects content that is not valid UTF-8."""
        with pytest.raises(CatalogError) as exc_info:
            parse_catalog(b'CodeOK = "\xff\xfe\xfd"\n', "i18n/en.toml")
        assert exc_info.value.path == "i18n/en.toml"

    def test_unquoted_value_is_fatal(self):
        """parse_catalog() requires double-quoted values."""
        with pytest.raises(CatalogError) as exc_info:
            parse_catalog(b"CodeOK = OK\n", "i18n/en.toml")
        assert exc_info.value.key == "CodeOK"
        assert "i18n/en.toml" in str(exc_info.value)

    def test_bad_escape_is_fatal(self):
        """parse_catalog() names the key holding a malformed value."""
        with pytest.raises(CatalogError) as exc_info:
            parse_catalog(b'CodeOK = "OK"\nCodeErr = "bad \\q"\n', "i18n/en.toml")
        assert exc_info.value.key == "CodeErr"
        assert exc_info.value.path == "i18n/en.toml"


class TestTomlCatalogLoader:
    """Tests for TomlCatalogLoader."""

    def test_loader_initialization(self, catalog_dir):
        """TomlCatalogLoader initializes with a valid directory."""
        loader = TomlCatalogLoader(catalog_dir, extension=".toml")
        assert loader.root == catalog_dir
        assert loader.extension == "toml"

    def test_loader_rejects_missing_directory(self, tmp_path):
        """TomlCatalogLoader raises CatalogError for a missing directory."""
        with pytest.raises(CatalogError):
            TomlCatalogLoader(tmp_path / "nonexistent")

    def test_loader_rejects_file_root(self, tmp_path):
        """TomlCatalogLoader requires a directory root."""
        path = write_catalog(tmp_path / "en.toml", {"A": "a"})
        with pytest.raises(CatalogError):
            TomlCatalogLoader(path)

    def test_discover_files_and_directories(self, catalog_dir):
        """discover() maps files and directories to locales."""
        discovered = TomlCatalogLoader(catalog_dir).discover()
        assert sorted(discovered) == ["en", "fr", "zh-hk"]
        assert [p.name for p in discovered["zh-hk"]] == ["common.toml", "more.toml"]

    def test_discover_warns_on_ignored_files(self, catalog_dir):
        """discover() logs a warning for non-catalog files."""
        loader = TomlCatalogLoader(catalog_dir)
        with patch("i18n_stringer.catalog.logger") as mock_logger:
            loader.discover()
        events = [call.args[0] for call in mock_logger.warning.call_args_list]
        assert events == ["catalog_file_ignored"]

    def test_load_all_sorted_locales(self, catalog_dir):
        """load_all() returns a naturally sorted CatalogSet."""
        catalogs = TomlCatalogLoader(catalog_dir).load_all()
        assert catalogs.locales == ["en", "fr", "zh-hk"]
        assert catalogs.ordinals == {"en": 0, "fr": 1, "zh-hk": 2}

    def test_load_all_aggregates_directory(self, catalog_dir):
        """load_all() merges every file beneath a locale directory."""
        catalogs = TomlCatalogLoader(catalog_dir).load_all()
        assert catalogs["zh-hk"].messages == {"CodeOK": "好", "CodeErr": "錯誤"}
        assert len(catalogs["zh-hk"].sources) == 2

    def test_load_all_same_result_without_threads(self, catalog_dir):
        """load_all() gives the same catalogs with a single worker."""
        parallel = TomlCatalogLoader(catalog_dir, max_workers=4).load_all()
        serial = TomlCatalogLoader(catalog_dir, max_workers=1).load_all()
        for catalog in parallel:
            assert serial[catalog.locale].messages == catalog.messages

    def test_load_all_empty_directory(self, tmp_path):
        """load_all() raises CatalogError when no catalog exists."""
        (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
        with pytest.raises(CatalogError, match="No valid catalog file"):
            TomlCatalogLoader(tmp_path).load_all()

    def test_duplicate_key_last_write_wins(self, tmp_path):
        """Duplicate keys across files keep the last value and warn."""
        write_catalog(tmp_path / "en" / "a.toml", {"CodeOK": "first"})
        write_catalog(tmp_path / "en" / "b.toml", {"CodeOK": "second"})
        loader = TomlCatalogLoader(tmp_path)

        with patch("i18n_stringer.catalog.logger") as mock_logger:
            catalogs = loader.load_all()

        assert catalogs["en"].get_message("CodeOK") == "second"
        warning = mock_logger.warning.call_args
        assert warning.args[0] == "duplicate_catalog_key"
        assert warning.kwargs["key"] == "CodeOK"
        assert warning.kwargs["locale"] == "en"

    def test_duplicate_key_within_file(self, tmp_path):
        """A repeated key inside one file also keeps the last value."""
        (tmp_path / "en.toml").write_text(
            'CodeOK = "one"\nCodeOK = "two"\n', encoding="utf-8"
        )
        catalogs = load_catalogs(tmp_path)
        assert catalogs["en"].get_message("CodeOK") == "two"

    def test_file_and_directory_for_same_locale(self, tmp_path):
        """A locale file and a locale directory are aggregated."""
        write_catalog(tmp_path / "en.toml", {"CodeOK": "OK"})
        write_catalog(tmp_path / "en" / "extra.toml", {"CodeErr": "Error"})
        catalogs = load_catalogs(tmp_path)
        assert catalogs.locales == ["en"]
        assert catalogs["en"].messages == {"CodeOK": "OK", "CodeErr": "Error"}

    def test_custom_extension(self, tmp_path):
        """The catalog extension is configurable."""
        write_catalog(tmp_path / "en.lang", {"CodeOK": "OK"})
        write_catalog(tmp_path / "fr.toml", {"CodeOK": "Bien"})
        catalogs = load_catalogs(tmp_path, extension="lang")
        assert catalogs.locales == ["en"]

    def test_malformed_file_aborts(self, tmp_path):
        """load_all() propagates CatalogError naming the file and key."""
        write_catalog(tmp_path / "en.toml", {"CodeOK": "OK"})
        (tmp_path / "fr.toml").write_text('CodeOK = "bad \\z"\n', encoding="utf-8")
        with pytest.raises(CatalogError) as exc_info:
            load_catalogs(tmp_path)
        assert exc_info.value.key == "CodeOK"
        assert exc_info.value.path.endswith("fr.toml")

    def test_unreadable_file_aborts(self, tmp_path):
        """An unreadable file is a fatal CatalogError."""
        write_catalog(tmp_path / "en.toml", {"CodeOK": "OK"})
        loader = TomlCatalogLoader(tmp_path, max_workers=1)
        with patch(
            "i18n_stringer.catalog.open",
            side_effect=PermissionError("denied"),
            create=True,
        ):
            with pytest.raises(CatalogError) as exc_info:
                loader.load_all()
        assert exc_info.value.path.endswith("en.toml")
        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_load_single_locale(self, catalog_dir):
        """load() reads the catalog of one locale."""
        catalog = TomlCatalogLoader(catalog_dir).load("fr")
        assert catalog.locale == "fr"
        assert catalog.get_message("CodeErr") == "Erreur"

    def test_load_unknown_locale(self, catalog_dir):
        """load() raises CatalogError for a locale without files."""
        with pytest.raises(CatalogError):
            TomlCatalogLoader(catalog_dir).load("de")


def test_catalog_from_mapping():
    """catalog_from_mapping() copies the messages."""
    messages = {"CodeOK": "OK"}
    catalog = catalog_from_mapping("en", messages, source="memory")
    messages["CodeOK"] = "changed"
    assert catalog.get_message("CodeOK") == "OK"
    assert catalog.sources == ["memory"]
