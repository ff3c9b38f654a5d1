"""Tests for RFC 8288 Link headers."""

from urllib.parse import parse_qs, urlparse

from hotelops.pagination.links import create_link_header


class TestCreateLinkHeader:
    """Test next-page Link header generation."""

    def test_no_next_cursor(self):
        assert create_link_header("https://api.example.com/v1.0/reviews", {"limit": "5"}) is None
        assert create_link_header("https://api.example.com/v1.0/reviews", {"limit": "5"}, "") is None

    def test_next_link(self):
        header = create_link_header(
            "https://api.example.com/v1.0/reviews",
            {"limit": "5", "sort_dir": "asc"},
            next_cursor="eyJ2YWx1ZSI6NSwiaWQiOiJiIn0",
        )

        assert header == (
            '<https://api.example.com/v1.0/reviews?limit=5&sort_dir=asc'
            '&cursor=eyJ2YWx1ZSI6NSwiaWQiOiJiIn0>; rel="next"'
        )

    def test_replaces_old_cursor_and_keeps_repeated_params(self):
        header = create_link_header(
            "https://api.example.com/v1.0/campaigns",
            {"cursor": ["old"], "status": ["active", "paused"], "q": None},
            next_cursor="new",
        )

        url = header[1:header.index(">")]
        query = parse_qs(urlparse(url).query)
        assert query == {"status": ["active", "paused"], "cursor": ["new"]}
        assert header.endswith('; rel="next"')
