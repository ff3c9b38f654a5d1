"""Keyset (seek) pagination over a dynamic, allow-listed sort column.

Every list query orders by ``(sort expression, row id)``, a total order even
when many rows share a sort value. The next page starts strictly after the
last row of the previous one::

    (expr OP v) OR (expr = v AND id OP last_id)

with ``OP`` being ``>`` for ascending and ``<`` for descending order. One
extra row is fetched to learn whether another page exists without a COUNT.

Pages are not snapshot isolated: a row inserted or re-sorted ahead of the
cursor position after a page was served is not returned by later pages.
"""

import logging
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .cursor import CursorToken, make_cursor
from .params import PaginationRequest, SortDirection, parse_pagination, sanitize_sort_by


logger = logging.getLogger(__name__)

SORT_VALUE_COLUMN = "sort_value"
ID_COLUMN = "id"

INT4_MIN = -(2 ** 31)
INT4_MAX = 2 ** 31 - 1
ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")

_DATETIME_ADAPTER = TypeAdapter(datetime)
_DATE_ADAPTER = TypeAdapter(date)


@dataclass(frozen=True)
class SortField:
    """SQL expression behind a sort key and the type its cursor value is cast to."""

    expression: str
    cast: str


SortSpec = Mapping[str, SortField]


class CursorMeta(BaseModel):
    """Pagination metadata attached to every list response."""

    next_cursor: Optional[str] = Field(default=None, description="Cursor for the next page")
    has_more: bool = Field(description="Whether more items are available")
    sort_by: str = Field(description="Effective sort key")
    sort_dir: SortDirection = Field(description="Effective sort direction")


def next_placeholder(params: List[Any], value: Any) -> str:
    """Append a parameter and return its ``$n`` placeholder."""
    params.append(value)
    return f"${len(params)}"


def cursor_value_fits(value: Any, cast: str) -> bool:
    """Whether a cursor value can be cast to the type of the sort expression.

    A cursor kept across a change of ``sort_by``, or edited by hand, may carry
    a value the database would refuse to cast. Unknown casts are accepted.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return False

    if cast == "integer":
        return isinstance(value, int) and INT4_MIN <= value <= INT4_MAX
    if cast == "numeric":
        if isinstance(value, (int, float)):
            return math.isfinite(value)
        if isinstance(value, str):
            try:
                return Decimal(value).is_finite()
            except InvalidOperation:
                return False
        return False
    if cast in ("timestamptz", "date"):
        if not isinstance(value, str) or not ISO_DATE_PREFIX.match(value):
            return False
        adapter = _DATETIME_ADAPTER if cast == "timestamptz" else _DATE_ADAPTER
        try:
            adapter.validate_python(value)
        except ValidationError:
            return False
        return True
    if cast == "text":
        return isinstance(value, str)
    return True


def build_order_clause(field: SortField, sort_dir: SortDirection, id_column: str) -> str:
    """Build the ORDER BY clause for the total order ``(expression, id)``."""
    direction = "ASC" if sort_dir == "asc" else "DESC"
    return f"ORDER BY {field.expression} {direction}, {id_column} {direction}"


def build_keyset_condition(
    field: SortField,
    sort_dir: SortDirection,
    token: Optional[CursorToken],
    params: List[Any],
    id_column: str,
) -> Optional[str]:
    """Build the predicate selecting rows after the cursor.

    Args:
        field: Sort field of the sanitized sort key
        sort_dir: Sort direction
        token: Decoded cursor, or None for the first page
        params: Statement parameters; cursor values are appended
        id_column: Unique tie-break column

    Returns:
        WHERE fragment, or None when there is no cursor
    """
    if token is None:
        return None

    op = ">" if sort_dir == "asc" else "<"
    value_param = next_placeholder(params, None if token.value is None else str(token.value))
    id_param = next_placeholder(params, token.id)

    # Bound as text so any driver accepts it; the outer cast restores the
    # type the ORDER BY expression compares on.
    value_sql = f"CAST(CAST({value_param} AS text) AS {field.cast})"

    return (
        f"(({field.expression} {op} {value_sql}) "
        f"OR ({field.expression} = {value_sql} AND {id_column} {op} {id_param}))"
    )


def paginate_query_results(
    rows: Sequence[Dict[str, Any]],
    limit: int,
) -> Tuple[List[Dict[str, Any]], Optional[str], bool]:
    """Trim a ``limit + 1`` result to one page.

    Args:
        rows: Rows ordered by ``(sort_value, id)``, at most ``limit + 1``
        limit: Requested page size

    Returns:
        Tuple of (page_rows, next_cursor, has_more)
    """
    has_more = len(rows) > limit
    page_rows = list(rows[:limit])

    next_cursor = None
    if has_more and page_rows:
        last_row = page_rows[-1]
        next_cursor = make_cursor(last_row[SORT_VALUE_COLUMN], last_row[ID_COLUMN])

    return page_rows, next_cursor, has_more


class KeysetQuery:
    """Keyset pagination state of one list request.

    Usage inside a list query::

        keyset = KeysetQuery.from_query(request.query_params, SORTS, "created_at", "t.id")
        where.append(keyset.condition(params))          # if not None
        sql = f"... {keyset.select_sort_value()} ... {keyset.order_clause()} LIMIT {keyset.limit_param(params)}"
        page, next_cursor, has_more = keyset.paginate(rows)
    """

    def __init__(self, sort_spec: SortSpec, sort_by: str, pagination: PaginationRequest, id_column: str):
        if sort_by not in sort_spec:
            raise KeyError(f"Unknown sort key: {sort_by}")
        self.sort_spec = sort_spec
        self.sort_by = sort_by
        self.pagination = pagination
        self.id_column = id_column

    @classmethod
    def from_query(
        cls,
        query: Mapping[str, Any],
        sort_spec: SortSpec,
        default_sort: str,
        id_column: str,
        default_limit: int = 20,
        max_limit: int = 100,
    ) -> "KeysetQuery":
        """Parse pagination input and sanitize ``sort_by`` against the allowed sort keys."""
        pagination = parse_pagination(query, default_limit, max_limit)
        sort_by = sanitize_sort_by(query.get("sort_by"), list(sort_spec), default_sort)

        token = pagination.token
        if token is not None and not cursor_value_fits(token.value, sort_spec[sort_by].cast):
            logger.info(f"Ignoring cursor whose value does not fit sort key {sort_by}")
            pagination = pagination.model_copy(update={"token": None})

        return cls(sort_spec, sort_by, pagination, id_column)

    @property
    def field(self) -> SortField:
        return self.sort_spec[self.sort_by]

    @property
    def limit(self) -> int:
        return self.pagination.limit

    @property
    def sort_dir(self) -> SortDirection:
        return self.pagination.sort_dir

    def select_sort_value(self) -> str:
        """Select-list item exposing the sort value under a fixed alias."""
        return f"{self.field.expression} AS {SORT_VALUE_COLUMN}"

    def condition(self, params: List[Any]) -> Optional[str]:
        return build_keyset_condition(self.field, self.sort_dir, self.pagination.token, params, self.id_column)

    def order_clause(self) -> str:
        return build_order_clause(self.field, self.sort_dir, self.id_column)

    def limit_param(self, params: List[Any]) -> str:
        """Bind ``limit + 1`` and return its placeholder."""
        return next_placeholder(params, self.limit + 1)

    def paginate(self, rows: Sequence[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], Optional[str], bool]:
        return paginate_query_results(rows, self.limit)

    def meta(self, next_cursor: Optional[str], has_more: bool) -> CursorMeta:
        return CursorMeta(
            next_cursor=next_cursor,
            has_more=has_more,
            sort_by=self.sort_by,
            sort_dir=self.sort_dir,
        )
