"""Helpers shared by the list endpoints."""

from typing import Dict, List, Optional

from fastapi import Request, Response

from ..config import get_settings
from ..pagination import CursorMeta, KeysetQuery, SortSpec, create_link_header


PAGINATION_DESCRIPTION = (
    "Pagination is controlled by the `limit`, `cursor`, `sort_by` and `sort_dir` "
    "query parameters. Out-of-range limits are clamped, unknown sort keys fall "
    "back to the default and invalid cursors restart from the first page."
)


def keyset_from_request(
    request: Request,
    sort_spec: SortSpec,
    default_sort: str,
    id_column: str,
    default_limit: Optional[int] = None,
) -> KeysetQuery:
    """Parse the raw pagination parameters of a list request.

    They are read from the query string directly rather than declared as
    typed parameters, since bad values must be corrected and never rejected.
    """
    settings = get_settings()
    return KeysetQuery.from_query(
        request.query_params,
        sort_spec,
        default_sort,
        id_column,
        default_limit=default_limit or settings.default_page_size,
        max_limit=settings.max_page_size,
    )


def add_next_link(request: Request, response: Response, meta: CursorMeta) -> None:
    """Set an RFC 8288 ``Link: rel="next"`` header when another page exists."""
    params: Dict[str, List[str]] = {
        key: request.query_params.getlist(key) for key in request.query_params.keys()
    }
    base_url = str(request.url).split("?")[0]

    link_header = create_link_header(base_url=base_url, params=params, next_cursor=meta.next_cursor)
    if link_header:
        response.headers["Link"] = link_header
