"""Database operations for campaigns and campaign templates."""

import logging
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..models.campaigns import Campaign, CampaignTemplate
from ..pagination import CursorMeta, KeysetQuery, SortField
from .executor import QueryExecutor
from .listing import add_filter, fetch_page, search_pattern


logger = logging.getLogger(__name__)

CAMPAIGN_SORTS = {
    "start_date": SortField("c.start_date", "date"),
    "revenue_total": SortField("c.revenue_total", "numeric"),
    "conversions_total": SortField("c.conversions_total", "integer"),
    "progress_percent": SortField("c.progress_percent", "numeric"),
}
CAMPAIGN_DEFAULT_SORT = "start_date"
CAMPAIGN_ID_COLUMN = "c.id"

CAMPAIGN_COLUMNS = """
            c.id,
            c.name,
            c.description,
            c.status::text AS status,
            c.start_date,
            c.end_date,
            c.progress_percent,
            c.reach_total,
            c.conversions_total,
            c.revenue_total,
            COALESCE(ch.channels, '{}') AS channels"""

CAMPAIGN_FROM = """
        FROM campaigns c
        LEFT JOIN LATERAL (
            SELECT ARRAY_AGG(cc.channel::text ORDER BY cc.channel::text) AS channels
            FROM campaign_channels cc
            WHERE cc.campaign_id = c.id
        ) ch ON TRUE"""

TEMPLATE_SORTS = {
    "name": SortField("ct.name", "text"),
    "category": SortField("ct.category", "text"),
    "updated_at": SortField("ct.updated_at", "timestamptz"),
}
TEMPLATE_DEFAULT_SORT = "updated_at"
TEMPLATE_ID_COLUMN = "ct.id"

TEMPLATE_COLUMNS = """
            ct.id,
            ct.name,
            ct.category,
            ct.preview_image_url,
            ct.template_payload,
            ct.updated_at"""

TEMPLATE_FROM = """
        FROM campaign_templates ct"""


async def list_campaigns(
    executor: QueryExecutor,
    property_id: str,
    keyset: KeysetQuery,
    statuses: Sequence[str] = (),
    channels: Sequence[str] = (),
    q: Optional[str] = None,
    start_date_from: Optional[date] = None,
    start_date_to: Optional[date] = None,
) -> Tuple[List[Campaign], CursorMeta]:
    """List campaigns of a property, one keyset page at a time."""
    params: list = [property_id]
    where = ["c.property_id = $1"]

    add_filter(where, params, "c.status::text = ANY({}::text[])", statuses)
    add_filter(
        where, params,
        "EXISTS (SELECT 1 FROM campaign_channels cc "
        "WHERE cc.campaign_id = c.id AND cc.channel::text = ANY({}::text[]))",
        channels,
    )
    add_filter(where, params, "(c.name ILIKE {0} OR COALESCE(c.description, '') ILIKE {0})", search_pattern(q))
    add_filter(where, params, "c.start_date >= {}::date", start_date_from)
    add_filter(where, params, "c.start_date <= {}::date", start_date_to)

    rows, meta = await fetch_page(executor, keyset, CAMPAIGN_COLUMNS, CAMPAIGN_FROM, where, params)
    return [Campaign.model_validate({**row, "id": str(row["id"])}) for row in rows], meta


async def list_campaign_templates(
    executor: QueryExecutor,
    account_id: str,
    keyset: KeysetQuery,
    category: Optional[str] = None,
    q: Optional[str] = None,
) -> Tuple[List[CampaignTemplate], CursorMeta]:
    """List active templates visible to an account: global ones and its own."""
    params: list = [account_id]
    where = ["ct.is_active = TRUE", "(ct.account_id IS NULL OR ct.account_id = $1)"]

    add_filter(where, params, "ct.category ILIKE {}", category)
    add_filter(where, params, "ct.name ILIKE {}", search_pattern(q))

    rows, meta = await fetch_page(executor, keyset, TEMPLATE_COLUMNS, TEMPLATE_FROM, where, params)
    return [CampaignTemplate.model_validate({**row, "id": str(row["id"])}) for row in rows], meta
