"""Database operations for guest conversations."""

import logging
from typing import List, Optional, Sequence, Tuple

from ..models.messages import Conversation, ThreadMessage
from ..pagination import CursorMeta, KeysetQuery, SortField
from .executor import QueryExecutor, Row
from .listing import add_filter, fetch_page, search_pattern


logger = logging.getLogger(__name__)

CONVERSATION_SORTS = {
    "last_message_at": SortField("COALESCE(c.last_message_at, c.created_at)", "timestamptz"),
    "unread_count": SortField("c.unread_count", "integer"),
}
CONVERSATION_DEFAULT_SORT = "last_message_at"
CONVERSATION_ID_COLUMN = "c.id"

CONVERSATION_COLUMNS = """
            c.id,
            c.channel::text AS channel,
            c.status::text AS status,
            c.unread_count,
            c.last_message_at,
            c.last_message_preview,
            g.full_name AS guest_name,
            b.check_in::text AS booking_check_in,
            b.check_out::text AS booking_check_out"""

CONVERSATION_FROM = """
        FROM conversations c
        LEFT JOIN guests g ON g.id = c.guest_id
        LEFT JOIN bookings b ON b.id = c.booking_id"""

THREAD_SORTS = {
    "created_at": SortField("cm.created_at", "timestamptz"),
}
THREAD_DEFAULT_SORT = "created_at"
THREAD_ID_COLUMN = "cm.id"
THREAD_PAGE_SIZE = 30

THREAD_COLUMNS = """
            cm.id,
            cm.sender::text AS sender,
            cm.content,
            cm.is_ai_generated,
            cm.delivery_status::text AS delivery_status,
            cm.created_at"""

THREAD_FROM = """
        FROM conversation_messages cm"""

# The conversation must belong to the property
THREAD_SCOPE = """EXISTS (
            SELECT 1
            FROM conversations c
            WHERE c.id = cm.conversation_id
              AND c.id = $1
              AND c.property_id = $2
        )"""


def _to_conversation(row: Row) -> Conversation:
    check_in = row.get("booking_check_in")
    check_out = row.get("booking_check_out")
    return Conversation(
        id=str(row["id"]),
        channel=row["channel"],
        status=row["status"],
        unread_count=row.get("unread_count") or 0,
        last_message_at=row.get("last_message_at"),
        last_message_preview=row.get("last_message_preview"),
        guest_name=row.get("guest_name"),
        booking=f"{check_in} - {check_out}" if check_in and check_out else None,
    )


async def list_conversations(
    executor: QueryExecutor,
    property_id: str,
    keyset: KeysetQuery,
    channels: Sequence[str] = (),
    unread_only: bool = False,
    status: Optional[str] = None,
    q: Optional[str] = None,
) -> Tuple[List[Conversation], CursorMeta]:
    """List conversations of a property, one keyset page at a time."""
    params: list = [property_id]
    where = ["c.property_id = $1"]

    add_filter(where, params, "c.channel::text = ANY({}::text[])", channels)
    if unread_only:
        where.append("c.unread_count > 0")
    add_filter(where, params, "c.status::text = {}", status)
    add_filter(
        where, params,
        "(COALESCE(g.full_name, '') ILIKE {0} OR COALESCE(c.last_message_preview, '') ILIKE {0})",
        search_pattern(q),
    )

    rows, meta = await fetch_page(executor, keyset, CONVERSATION_COLUMNS, CONVERSATION_FROM, where, params)
    return [_to_conversation(row) for row in rows], meta


async def list_thread_messages(
    executor: QueryExecutor,
    property_id: str,
    conversation_id: str,
    keyset: KeysetQuery,
) -> Tuple[List[ThreadMessage], CursorMeta]:
    """List the messages of one conversation, newest first by default.

    A conversation of another property yields an empty page.
    """
    params: list = [conversation_id, property_id]
    where = [THREAD_SCOPE, "cm.conversation_id = $1"]

    rows, meta = await fetch_page(executor, keyset, THREAD_COLUMNS, THREAD_FROM, where, params)
    return [
        ThreadMessage.model_validate({**row, "id": str(row["id"]), "is_ai_generated": bool(row.get("is_ai_generated"))})
        for row in rows
    ], meta
