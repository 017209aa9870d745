"""
Unit tests for dotted version comparison.
"""

import pytest

from readiness.detect.version import (
    Comparison,
    compare,
    extract_version,
    is_at_least,
    parse_version,
)


class TestCompare:
    """Tests for compare()."""

    def test_greater(self):
        assert compare("1.81.0", "1.80.9") == Comparison.GREATER

    def test_equal(self):
        assert compare("1.81.0", "1.81.0") == Comparison.EQUAL

    def test_numeric_not_lexicographic(self):
        """1.9 is older than 1.10."""
        assert compare("1.9", "1.10") == Comparison.LESS
        assert compare("1.10", "1.9") == Comparison.GREATER

    def test_missing_components_are_zero(self):
        assert compare("1.81", "1.81.0") == Comparison.EQUAL
        assert compare("2", "1.99.99") == Comparison.GREATER

    def test_leading_v_ignored(self):
        assert compare("v18.18.0", "18.18.0") == Comparison.EQUAL

    def test_suffix_stripped(self):
        assert compare("1.82.0-nightly", "1.82.0") == Comparison.EQUAL
        assert compare("3.12rc1", "3.12") == Comparison.EQUAL


class TestIsAtLeast:
    """Tests for is_at_least()."""

    def test_older_is_rejected(self):
        assert is_at_least("18.18.0", "18.17.9") is False

    def test_same_is_accepted(self):
        assert is_at_least("18.18.0", "18.18.0") is True

    def test_newer_is_accepted(self):
        assert is_at_least("1.81.0", "1.82.0") is True


class TestParseVersion:
    """Tests for parse_version()."""

    def test_components(self):
        assert parse_version("9.4.0") == [9, 4, 0]

    def test_suffix_ends_parsing(self):
        assert parse_version("1.2.3-beta.4") == [1, 2, 3]

    @pytest.mark.parametrize("value", ["", "installed", "beta.1"])
    def test_rejects_non_numeric(self, value):
        with pytest.raises(ValueError):
            parse_version(value)


class TestExtractVersion:
    """Tests for extract_version()."""

    def test_rustc_output(self):
        assert extract_version("rustc 1.81.0 (eeb90cda1 2024-09-04)") == "1.81.0"

    def test_node_output(self):
        assert extract_version("v18.18.0\n") == "18.18.0"

    def test_first_match_wins(self):
        assert extract_version("cargo 1.82.0 (8f40fc59f 2024-08-21)\nlibgit2 1.7.2") == "1.82.0"

    def test_no_version(self):
        assert extract_version("command not recognised") is None
        assert extract_version("") is None

    def test_custom_pattern_group(self):
        assert extract_version("Python 3.11.4", pattern=r"Python (\d+\.\d+)") == "3.11"
