"""Database operations for guest reviews."""

import logging
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..models.reviews import Review, ReviewSummary
from ..pagination import CursorMeta, KeysetQuery, SortField
from .executor import QueryExecutor, Row
from .listing import add_filter, fetch_page, search_pattern


logger = logging.getLogger(__name__)

REVIEW_SORTS = {
    "reviewed_at": SortField("r.reviewed_at", "timestamptz"),
    "rating": SortField("r.rating", "integer"),
    "status": SortField("r.status::text", "text"),
}
REVIEW_DEFAULT_SORT = "reviewed_at"
REVIEW_ID_COLUMN = "r.id"

REVIEW_COLUMNS = """
            r.id,
            r.platform::text AS platform,
            r.author_name,
            r.rating,
            r.title,
            r.body,
            r.reviewed_at,
            r.status::text AS status,
            r.sentiment::text AS sentiment,
            d.content AS draft_content"""

REVIEW_FROM = """
        FROM reviews r
        LEFT JOIN LATERAL (
            SELECT content
            FROM review_response_drafts rrd
            WHERE rrd.review_id = r.id
              AND rrd.is_current = TRUE
            ORDER BY rrd.version_no DESC
            LIMIT 1
        ) d ON TRUE"""

SUMMARY_QUERY = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE status = 'pending') AS pending,
        COUNT(*) FILTER (WHERE status = 'urgent') AS urgent,
        COALESCE(AVG(rating), 0)::float8 AS avg_rating
    FROM reviews
    WHERE property_id = $1
"""


def _to_review(row: Row) -> Review:
    return Review(
        id=str(row["id"]),
        platform=row["platform"],
        author=row["author_name"],
        rating=row["rating"],
        title=row.get("title"),
        content=row["body"],
        reviewed_at=row["reviewed_at"],
        status=row["status"],
        sentiment=row.get("sentiment"),
        ai_response=row.get("draft_content"),
    )


async def list_reviews(
    executor: QueryExecutor,
    property_id: str,
    keyset: KeysetQuery,
    status: Optional[str] = None,
    platforms: Sequence[str] = (),
    sentiment: Optional[str] = None,
    rating_min: Optional[int] = None,
    rating_max: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    q: Optional[str] = None,
) -> Tuple[List[Review], CursorMeta]:
    """List reviews of a property, one keyset page at a time.

    Returns:
        Tuple of (reviews, meta)
    """
    params: list = [property_id]
    where = ["r.property_id = $1"]

    add_filter(where, params, "r.status::text = {}", status)
    add_filter(where, params, "r.platform::text = ANY({}::text[])", platforms)
    add_filter(where, params, "r.sentiment::text = {}", sentiment)
    add_filter(where, params, "r.rating >= {}", rating_min)
    add_filter(where, params, "r.rating <= {}", rating_max)
    add_filter(where, params, "r.reviewed_at::date >= {}::date", date_from)
    add_filter(where, params, "r.reviewed_at::date <= {}::date", date_to)
    add_filter(
        where, params,
        "(r.author_name ILIKE {0} OR COALESCE(r.title, '') ILIKE {0} OR r.body ILIKE {0})",
        search_pattern(q),
    )

    rows, meta = await fetch_page(executor, keyset, REVIEW_COLUMNS, REVIEW_FROM, where, params)
    return [_to_review(row) for row in rows], meta


async def get_review_summary(executor: QueryExecutor, property_id: str) -> ReviewSummary:
    """Counters over all reviews of a property."""
    row = await executor.execute_one(SUMMARY_QUERY, [property_id])
    if row is None:
        return ReviewSummary()
    return ReviewSummary(
        total=row.get("total") or 0,
        pending=row.get("pending") or 0,
        urgent=row.get("urgent") or 0,
        avg_rating=row.get("avg_rating") or 0,
    )
