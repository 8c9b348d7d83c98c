"""Tests for i18n_stringer.checker module."""

import copy

from i18n_stringer import CheckReport, check
from tests.factories.symbols import make_catalog_set, make_symbol_set


class TestCheck:
    """Tests for check()."""

    def test_single_missing_entry(self):
        """{A=1, B=2} against en={A} reports exactly (Type, B, en)."""
        symbols = make_symbol_set([("A", 1), ("B", 2)], type_name="Type")
        catalogs = make_catalog_set({"en": {"A": "x"}})

        report = check([symbols], catalogs)

        assert report.missing == {"Type": {"en": ["B"]}}
        assert report.orphaned == {}
        assert report.missing_count == 1
        assert report.is_success is False

    def test_single_orphan(self):
        """A key no type declares is reported as an orphan of its locale."""
        symbols = make_symbol_set([("A", 1)], type_name="Type")
        catalogs = make_catalog_set({"en": {"A": "x", "C": "y"}})

        report = check([symbols], catalogs)

        assert report.missing == {}
        assert report.orphaned == {"en": ["C"]}
        assert report.orphaned_count == 1

    def test_success(self, code_set, en_fr_catalogs):
        """A complete catalog set passes."""
        report = check([code_set], en_fr_catalogs)
        assert report.is_success is True
        assert report.lines() == ["Check success, All constants have key-value pairs set"]

    def test_grouped_by_type_then_locale(self):
        """Missing entries are grouped per type and per locale."""
        codes = make_symbol_set([("CodeOK", 1), ("CodeErr", 2)], type_name="Code")
        tests = make_symbol_set([("TestCase01", 10)], type_name="Test")
        catalogs = make_catalog_set(
            {"en": {"CodeOK": "OK"}, "zh-hk": {"CodeErr": "錯誤", "TestCase01": "一"}}
        )

        report = check([codes, tests], catalogs)

        assert report.missing == {
            "Code": {"en": ["CodeErr"], "zh-hk": ["CodeOK"]},
            "Test": {"en": ["TestCase01"]},
        }
        assert report.missing_count == 3

    def test_key_used_by_any_type_is_not_orphaned(self):
        """A key declared by any checked type is not an orphan."""
        codes = make_symbol_set([("CodeOK", 1)], type_name="Code")
        tests = make_symbol_set([("TestCase01", 10)], type_name="Test")
        catalogs = make_catalog_set({"en": {"CodeOK": "OK", "TestCase01": "t"}})
        assert check([codes, tests], catalogs).orphaned == {}

    def test_aliases_are_checked(self):
        """Alias names are expected in catalogs like any other name."""
        symbols = make_symbol_set([("CodeXe2", 20491), ("CodeXe3", 20491)])
        catalogs = make_catalog_set({"en": {"CodeXe2": "x"}})
        assert check([symbols], catalogs).missing == {"Code": {"en": ["CodeXe3"]}}

    def test_repeated_name_reported_once(self):
        """A name declared twice in one type is one missing entry."""
        symbols = make_symbol_set([("A", 1), ("A", 2), ("B", 3)], type_name="T")
        catalogs = make_catalog_set({"en": {}})

        report = check([symbols], catalogs)

        assert report.missing == {"T": {"en": ["A", "B"]}}
        assert report.missing_count == 2
        assert report.lines().count('A=""') == 1

    def test_does_not_mutate_inputs(self, code_set):
        """check() leaves catalogs untouched."""
        catalogs = make_catalog_set({"en": {"CodeOK": "OK", "Stale": "s"}})
        before = copy.deepcopy(catalogs["en"].messages)
        check([code_set], catalogs)
        assert catalogs["en"].messages == before


class TestCheckReportLines:
    """Tests for CheckReport.lines()."""

    def test_missing_lines_are_pasteable(self):
        """Missing entries render as key=\"\" under a type/locale header."""
        report = CheckReport(missing={"Type": {"en": ["B", "C"]}})
        lines = report.lines()
        assert lines[0] == "Check Fail"
        header = lines.index(
            "************TYPE `Type` locale `en` missing key-value pair************"
        )
        assert lines[header + 1 : header + 3] == ['B=""', 'C=""']

    def test_orphan_lines(self):
        """Orphans render as bare keys under a locale header."""
        report = CheckReport(orphaned={"en": ["C"]})
        lines = report.lines()
        assert lines[0] == "Check Warning"
        assert lines[-2:] == [
            "************Can be deleted catalog keys of locale `en`************",
            "C",
        ]

    def test_both_sections(self):
        """Missing entries come before orphans."""
        report = CheckReport(missing={"T": {"en": ["B"]}}, orphaned={"en": ["C"]})
        lines = report.lines()
        assert lines.index("Check Fail") < lines.index("Check Warning")
        assert "Check success, All constants have key-value pairs set" not in lines
