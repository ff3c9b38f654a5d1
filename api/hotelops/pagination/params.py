"""Parsing of pagination query parameters and sort-key sanitizing."""

import math
from typing import Any, Literal, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .cursor import CursorToken, decode_cursor


SortDirection = Literal["asc", "desc"]

K = TypeVar("K", bound=str)


class PaginationRequest(BaseModel):
    """Bounded pagination input of a single list request."""

    model_config = ConfigDict(frozen=True)

    limit: int = Field(ge=1, description="Number of items per page")
    cursor: Optional[str] = Field(default=None, description="Raw cursor string from the request")
    token: Optional[CursorToken] = Field(default=None, description="Decoded cursor, None if absent or invalid")
    sort_dir: SortDirection = Field(default="desc", description="Sort direction")


def parse_limit(raw: Any, default_limit: int, max_limit: int) -> int:
    """Floor and clamp a raw limit to ``[1, max_limit]``; fall back to the default."""
    if raw is None or isinstance(raw, bool):
        return default_limit
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return default_limit
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default_limit
    if not math.isfinite(value):
        return default_limit
    return max(1, min(max_limit, math.floor(value)))


def parse_sort_dir(raw: Any) -> SortDirection:
    """Only a case-insensitive ``asc`` selects ascending order."""
    if isinstance(raw, str) and raw.lower() == "asc":
        return "asc"
    return "desc"


def parse_pagination(
    query: Mapping[str, Any],
    default_limit: int = 20,
    max_limit: int = 100,
) -> PaginationRequest:
    """Build a PaginationRequest from raw query parameters.

    Invalid input never raises: limits fall back to the default or are
    clamped, unknown directions become ``desc``, and undecodable cursors are
    dropped so the listing starts over.

    Args:
        query: Raw query parameters (e.g. ``request.query_params``)
        default_limit: Limit used when none, or a non-numeric one, is given
        max_limit: Upper bound for the limit

    Returns:
        Immutable pagination request
    """
    raw_cursor = query.get("cursor")
    cursor = raw_cursor if isinstance(raw_cursor, str) else None

    return PaginationRequest(
        limit=parse_limit(query.get("limit"), default_limit, max_limit),
        cursor=cursor,
        token=decode_cursor(cursor),
        sort_dir=parse_sort_dir(query.get("sort_dir")),
    )


def sanitize_sort_by(candidate: Any, allowed: Sequence[K], fallback: K) -> K:
    """Return the candidate if it is an allowed sort key, else the fallback.

    Sort expressions are interpolated into ORDER BY, where values cannot be
    bound, so this allow-list is what keeps client input out of the SQL.
    """
    if isinstance(candidate, str) and candidate in allowed:
        return candidate
    return fallback
