"""Pagination module for cursor-based keyset pagination."""

from .cursor import (
    CursorToken,
    encode_cursor,
    decode_cursor,
    cursor_value,
    make_cursor
)
from .params import (
    PaginationRequest,
    SortDirection,
    parse_pagination,
    sanitize_sort_by
)
from .keyset import (
    SortField,
    SortSpec,
    CursorMeta,
    KeysetQuery,
    build_keyset_condition,
    build_order_clause,
    paginate_query_results
)
from .links import create_link_header

__all__ = [
    "CursorToken",
    "encode_cursor",
    "decode_cursor",
    "cursor_value",
    "make_cursor",
    "PaginationRequest",
    "SortDirection",
    "parse_pagination",
    "sanitize_sort_by",
    "SortField",
    "SortSpec",
    "CursorMeta",
    "KeysetQuery",
    "build_keyset_condition",
    "build_order_clause",
    "paginate_query_results",
    "create_link_header"
]
