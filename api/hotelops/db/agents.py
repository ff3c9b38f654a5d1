"""Database operations for AI agent task runs."""

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from ..models.agents import AgentActivity
from ..pagination import CursorMeta, KeysetQuery, SortField
from .executor import QueryExecutor
from .listing import add_filter, fetch_page, search_pattern


logger = logging.getLogger(__name__)

ACTIVITY_SORTS = {
    "started_at": SortField("atr.started_at", "timestamptz"),
    "status": SortField("atr.status::text", "text"),
    "response_time_ms": SortField("COALESCE(atr.response_time_ms, 0)", "integer"),
}
ACTIVITY_DEFAULT_SORT = "started_at"
ACTIVITY_ID_COLUMN = "atr.id"

# Per-agent history only pages by start time
HISTORY_SORTS = {"started_at": ACTIVITY_SORTS["started_at"]}

ACTIVITY_COLUMNS = """
            atr.id,
            aa.key::text AS agent_key,
            aa.name AS agent_name,
            atr.task_type,
            atr.action,
            atr.details,
            atr.status::text AS status,
            atr.started_at,
            atr.finished_at,
            atr.response_time_ms,
            atr.time_saved_seconds"""

ACTIVITY_FROM = """
        FROM ai_agent_task_runs atr
        LEFT JOIN ai_agents aa ON aa.id = atr.agent_id"""

SEARCH_FILTER = "(atr.action ILIKE {0} OR COALESCE(atr.details, '') ILIKE {0})"


def _to_activity(row) -> AgentActivity:
    return AgentActivity.model_validate({**row, "id": str(row["id"])})


async def list_agent_activity(
    executor: QueryExecutor,
    property_id: str,
    keyset: KeysetQuery,
    statuses: Sequence[str] = (),
    agent_keys: Sequence[str] = (),
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    q: Optional[str] = None,
) -> Tuple[List[AgentActivity], CursorMeta]:
    """List task runs of all agents of a property, one keyset page at a time."""
    params: list = [property_id]
    where = ["atr.property_id = $1"]

    add_filter(where, params, "atr.status::text = ANY({}::text[])", statuses)
    add_filter(where, params, "aa.key::text = ANY({}::text[])", agent_keys)
    add_filter(where, params, "atr.started_at >= {}::timestamptz", date_from)
    add_filter(where, params, "atr.started_at <= {}::timestamptz", date_to)
    add_filter(where, params, SEARCH_FILTER, search_pattern(q))

    rows, meta = await fetch_page(executor, keyset, ACTIVITY_COLUMNS, ACTIVITY_FROM, where, params)
    return [_to_activity(row) for row in rows], meta


async def list_agent_history(
    executor: QueryExecutor,
    property_id: str,
    agent_key: str,
    keyset: KeysetQuery,
    status: Optional[str] = None,
    q: Optional[str] = None,
) -> Tuple[List[AgentActivity], CursorMeta]:
    """List task runs of one agent, newest first unless ascending is asked for."""
    params: list = [property_id, agent_key]
    where = ["atr.property_id = $1", "aa.key::text = $2"]

    add_filter(where, params, "atr.status::text = {}", status)
    add_filter(where, params, SEARCH_FILTER, search_pattern(q))

    rows, meta = await fetch_page(executor, keyset, ACTIVITY_COLUMNS, ACTIVITY_FROM, where, params)
    return [_to_activity(row) for row in rows], meta
