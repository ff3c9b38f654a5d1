"""Shared plumbing of the cursor-paginated list queries."""

import logging
from typing import Any, List, Optional, Tuple

from ..pagination import CursorMeta, KeysetQuery
from ..pagination.keyset import SORT_VALUE_COLUMN, next_placeholder
from .executor import QueryExecutor, RowSet


logger = logging.getLogger(__name__)


def add_filter(where: List[str], params: List[Any], template: str, value: Any) -> None:
    """Bind ``value`` and add ``template`` with ``{}`` replaced by its placeholder.

    Absent values (None, empty string, empty list) add nothing.
    """
    if value is None or value == "" or (isinstance(value, (list, tuple)) and not value):
        return
    if isinstance(value, tuple):
        value = list(value)
    where.append(template.format(next_placeholder(params, value)))


def search_pattern(q: Optional[str]) -> Optional[str]:
    """ILIKE pattern for a free-text search term, None when blank."""
    if q is None or not q.strip():
        return None
    return f"%{q.strip()}%"


def build_list_statement(
    keyset: KeysetQuery,
    select: str,
    from_clause: str,
    where: List[str],
    params: List[Any],
) -> str:
    """Assemble the page query, appending cursor and limit parameters."""
    conditions = list(where)
    condition = keyset.condition(params)
    if condition is not None:
        conditions.append(condition)

    return f"""
        SELECT
            {select},
            {keyset.select_sort_value()}
        {from_clause}
        WHERE {" AND ".join(conditions)}
        {keyset.order_clause()}
        LIMIT {keyset.limit_param(params)}
    """


async def fetch_page(
    executor: QueryExecutor,
    keyset: KeysetQuery,
    select: str,
    from_clause: str,
    where: List[str],
    params: List[Any],
) -> Tuple[RowSet, CursorMeta]:
    """Run a keyset page query.

    Args:
        executor: Query executor
        keyset: Pagination state of the request
        select: Select list without the sort value
        from_clause: FROM clause including joins
        where: Filter predicates, joined with AND
        params: Parameters bound by the filter predicates

    Returns:
        Tuple of (page_rows, meta); rows no longer carry the sort value
    """
    statement = build_list_statement(keyset, select, from_clause, where, params)
    rows = await executor.execute(statement, params)

    page_rows, next_cursor, has_more = keyset.paginate(rows)
    for row in page_rows:
        row.pop(SORT_VALUE_COLUMN, None)

    logger.debug(f"Fetched {len(page_rows)} rows sorted by {keyset.sort_by} {keyset.sort_dir}, has_more={has_more}")
    return page_rows, keyset.meta(next_cursor, has_more)
