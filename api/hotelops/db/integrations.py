"""Database operations for property integrations."""

import logging
from typing import List, Optional, Tuple

from ..models.integrations import Integration
from ..pagination import CursorMeta, KeysetQuery, SortField
from .executor import QueryExecutor
from .listing import add_filter, fetch_page, search_pattern


logger = logging.getLogger(__name__)

INTEGRATION_SORTS = {
    "provider": SortField("pi.provider::text", "text"),
    "status": SortField("pi.status::text", "text"),
    "updated_at": SortField("pi.updated_at", "timestamptz"),
}
INTEGRATION_DEFAULT_SORT = "updated_at"
INTEGRATION_ID_COLUMN = "pi.id"

INTEGRATION_COLUMNS = """
            pi.id,
            pi.provider::text AS provider,
            pi.status::text AS status,
            pi.external_account_id,
            pi.connected_at,
            pi.last_synced_at,
            pi.metadata,
            pi.updated_at"""

INTEGRATION_FROM = """
        FROM property_integrations pi"""


async def list_integrations(
    executor: QueryExecutor,
    property_id: str,
    keyset: KeysetQuery,
    status: Optional[str] = None,
    provider: Optional[str] = None,
    q: Optional[str] = None,
) -> Tuple[List[Integration], CursorMeta]:
    """List integrations of a property, one keyset page at a time."""
    params: list = [property_id]
    where = ["pi.property_id = $1"]

    add_filter(where, params, "pi.status::text = {}", status)
    add_filter(where, params, "pi.provider::text = {}", provider)
    add_filter(where, params, "pi.provider::text ILIKE {}", search_pattern(q))

    rows, meta = await fetch_page(executor, keyset, INTEGRATION_COLUMNS, INTEGRATION_FROM, where, params)
    return [Integration.model_validate({**row, "id": str(row["id"])}) for row in rows], meta
