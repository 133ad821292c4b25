"""Tests for Auditor helper functions."""

import pytest

from auditor.exceptions import BadRequestError
from auditor.utils import format_bytes, parse_site_id, url_basename


class TestFormatBytes:

    def test_zero(self):
        assert format_bytes(0) == "0 B"

    def test_exact_kilobyte_drops_trailing_zeros(self):
        assert format_bytes(1024) == "1 KB"

    def test_precision(self):
        assert format_bytes(1536, 1) == "1.5 KB"
        assert format_bytes(1536) == "1.5 KB"

    def test_bytes_below_one_kilobyte(self):
        assert format_bytes(500) == "500 B"
        assert format_bytes(1023) == "1023 B"

    def test_megabytes(self):
        assert format_bytes(2_000_000) == "1.91 MB"
        assert format_bytes(1024 * 1024) == "1 MB"

    def test_gigabytes_is_largest_unit(self):
        assert format_bytes(3 * 1024 ** 3) == "3 GB"
        assert format_bytes(5 * 1024 ** 4) == "5120 GB"

    def test_negative_counts_as_zero(self):
        assert format_bytes(-10) == "0 B"


class TestParseSiteId:

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value):
        with pytest.raises(BadRequestError, match="Site ID not provided"):
            parse_site_id(value)

    @pytest.mark.parametrize("value", ["abc", "0", "-3", 0, -1, "2.5", 2.5, True, [1], {"a": 1}, float("nan"), float("inf")])
    def test_invalid(self, value):
        with pytest.raises(BadRequestError, match="Invalid site ID"):
            parse_site_id(value)

    @pytest.mark.parametrize("value,expected", [(2, 2), ("7", 7), (" 12 ", 12), (4.0, 4)])
    def test_valid(self, value, expected):
        assert parse_site_id(value) == expected


class TestUrlBasename:

    def test_plain_url(self):
        assert url_basename("https://example.com/wp-content/uploads/2024/01/a.pdf") == "a.pdf"

    def test_query_and_fragment_ignored(self):
        assert url_basename("https://example.com/files/report.pdf?ver=2#page=3") == "report.pdf"

    def test_empty(self):
        assert url_basename("") == ""
