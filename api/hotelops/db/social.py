"""Database operations for social media posts."""

import logging
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..models.social import SocialPost
from ..pagination import CursorMeta, KeysetQuery, SortField
from .executor import QueryExecutor, Row
from .listing import add_filter, fetch_page, search_pattern


logger = logging.getLogger(__name__)

POST_SORTS = {
    "scheduled_at": SortField("COALESCE(sp.scheduled_at, sp.created_at)", "timestamptz"),
    "estimated_reach": SortField("COALESCE(sp.estimated_reach, 0)", "integer"),
    "created_at": SortField("sp.created_at", "timestamptz"),
}
POST_DEFAULT_SORT = "scheduled_at"
POST_ID_COLUMN = "sp.id"

POST_COLUMNS = """
            sp.id,
            sp.title,
            sp.content,
            sp.status::text AS status,
            sp.scheduled_at,
            sp.published_at,
            sp.estimated_reach,
            sp.ai_generated,
            sp.created_at,
            COALESCE(pl.platforms, '{}') AS platforms,
            asset.asset_url AS first_asset"""

POST_FROM = """
        FROM social_posts sp
        LEFT JOIN LATERAL (
            SELECT ARRAY_AGG(spp.platform::text ORDER BY spp.platform::text) AS platforms
            FROM social_post_platforms spp
            WHERE spp.post_id = sp.id
        ) pl ON TRUE
        LEFT JOIN LATERAL (
            SELECT spa.asset_url
            FROM social_post_assets spa
            WHERE spa.post_id = sp.id
            ORDER BY spa.sort_order ASC, spa.created_at ASC
            LIMIT 1
        ) asset ON TRUE"""


def _to_post(row: Row) -> SocialPost:
    return SocialPost(
        id=str(row["id"]),
        title=row["title"],
        content=row["content"],
        status=row["status"],
        scheduled_at=row.get("scheduled_at"),
        published_at=row.get("published_at"),
        estimated_reach=row.get("estimated_reach"),
        ai_generated=bool(row.get("ai_generated")),
        platforms=row.get("platforms") or [],
        image_url=row.get("first_asset"),
        created_at=row["created_at"],
    )


async def list_social_posts(
    executor: QueryExecutor,
    property_id: str,
    keyset: KeysetQuery,
    on_date: Optional[date] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    platforms: Sequence[str] = (),
    statuses: Sequence[str] = (),
    q: Optional[str] = None,
) -> Tuple[List[SocialPost], CursorMeta]:
    """List social posts of a property, one keyset page at a time."""
    params: list = [property_id]
    where = ["sp.property_id = $1"]

    add_filter(where, params, "sp.scheduled_at::date = {}::date", on_date)
    add_filter(where, params, "sp.scheduled_at::date >= {}::date", date_from)
    add_filter(where, params, "sp.scheduled_at::date <= {}::date", date_to)
    add_filter(
        where, params,
        "EXISTS (SELECT 1 FROM social_post_platforms spp "
        "WHERE spp.post_id = sp.id AND spp.platform::text = ANY({}::text[]))",
        platforms,
    )
    add_filter(where, params, "sp.status::text = ANY({}::text[])", statuses)
    add_filter(where, params, "(sp.title ILIKE {0} OR sp.content ILIKE {0})", search_pattern(q))

    rows, meta = await fetch_page(executor, keyset, POST_COLUMNS, POST_FROM, where, params)
    return [_to_post(row) for row in rows], meta
