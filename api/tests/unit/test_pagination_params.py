"""Tests for pagination parameter parsing and sort-key sanitizing."""

import math

import pytest
from starlette.datastructures import QueryParams

from hotelops.pagination.cursor import CursorToken, encode_cursor
from hotelops.pagination.params import parse_limit, parse_pagination, parse_sort_dir, sanitize_sort_by


class TestParseLimit:
    """Test limit defaulting and clamping."""

    @pytest.mark.parametrize("raw,expected", [
        ("10", 10),
        (10, 10),
        ("0", 1),
        ("-5", 1),
        ("1000", 100),
        ("100", 100),
        ("7.9", 7),
        (" 15 ", 15),
        (2.5, 2),
    ])
    def test_clamped(self, raw, expected):
        assert parse_limit(raw, 20, 100) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "ten", "nan", "inf", "-inf", True, math.nan, [], {}])
    def test_defaulted(self, raw):
        assert parse_limit(raw, 20, 100) == 20


class TestParseSortDir:
    """Test sort direction defaulting."""

    @pytest.mark.parametrize("raw", ["asc", "ASC", "Asc"])
    def test_ascending(self, raw):
        assert parse_sort_dir(raw) == "asc"

    @pytest.mark.parametrize("raw", [None, "", "desc", "DESC", "ascending", "up", 1])
    def test_everything_else_is_descending(self, raw):
        assert parse_sort_dir(raw) == "desc"


class TestParsePagination:
    """Test the combined request parser."""

    def test_defaults(self):
        pagination = parse_pagination({})

        assert pagination.limit == 20
        assert pagination.cursor is None
        assert pagination.token is None
        assert pagination.sort_dir == "desc"

    def test_from_query_params(self):
        cursor = encode_cursor(CursorToken(value=5, id="b"))
        query = QueryParams(f"limit=2&sort_dir=asc&cursor={cursor}")

        pagination = parse_pagination(query, 20, 100)

        assert pagination.limit == 2
        assert pagination.sort_dir == "asc"
        assert pagination.cursor == cursor
        assert pagination.token == CursorToken(value=5, id="b")

    def test_invalid_cursor_restarts(self):
        pagination = parse_pagination({"cursor": "not-a-cursor"})

        assert pagination.cursor == "not-a-cursor"
        assert pagination.token is None

    def test_non_string_cursor_ignored(self):
        pagination = parse_pagination({"cursor": ["a", "b"]})

        assert pagination.cursor is None
        assert pagination.token is None

    def test_custom_bounds(self):
        assert parse_pagination({"limit": "500"}, default_limit=50, max_limit=200).limit == 200
        assert parse_pagination({}, default_limit=50, max_limit=200).limit == 50

    def test_is_immutable(self):
        pagination = parse_pagination({})

        with pytest.raises(Exception):
            pagination.limit = 5


class TestSanitizeSortBy:
    """Test the sort-key allow-list."""

    ALLOWED = ["reviewed_at", "rating", "status"]

    def test_allowed_key(self):
        assert sanitize_sort_by("rating", self.ALLOWED, "reviewed_at") == "rating"

    @pytest.mark.parametrize("candidate", [
        None,
        "",
        "RATING",
        "rating; DROP TABLE x",
        "rating DESC",
        "r.rating",
        "unknown",
        42,
    ])
    def test_falls_back(self, candidate):
        assert sanitize_sort_by(candidate, self.ALLOWED, "reviewed_at") == "reviewed_at"
