"""Messaging API endpoints."""

import logging
from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Path, Query, Request, Response

from ..auth.dependencies import CurrentAuth
from ..db.connection import Executor
from ..db.messages import (
    CONVERSATION_DEFAULT_SORT, CONVERSATION_ID_COLUMN, CONVERSATION_SORTS,
    THREAD_DEFAULT_SORT, THREAD_ID_COLUMN, THREAD_PAGE_SIZE, THREAD_SORTS,
    list_conversations, list_thread_messages
)
from ..models.listing import ListResponse
from ..models.messages import Conversation, ThreadMessage
from .paging import PAGINATION_DESCRIPTION, add_next_link, keyset_from_request


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1.0/messages", tags=["Messages"])


@router.get(
    "/conversations",
    response_model=ListResponse[Conversation],
    summary="List conversations",
    description="List guest conversations of the current property. " + PAGINATION_DESCRIPTION,
)
async def get_conversations(
    request: Request,
    response: Response,
    auth: CurrentAuth,
    executor: Executor,
    channel: Annotated[Optional[List[str]], Query(description="Channels, repeatable")] = None,
    unread_only: Annotated[bool, Query(description="Only conversations with unread messages")] = False,
    status: Annotated[Optional[str], Query()] = None,
    q: Annotated[Optional[str], Query(description="Search in guest name and last message")] = None,
) -> ListResponse[Conversation]:
    keyset = keyset_from_request(request, CONVERSATION_SORTS, CONVERSATION_DEFAULT_SORT, CONVERSATION_ID_COLUMN)

    items, meta = await list_conversations(
        executor, auth.property_id, keyset,
        channels=channel or [],
        unread_only=unread_only,
        status=status,
        q=q,
    )

    add_next_link(request, response, meta)
    return ListResponse[Conversation](items=items, meta=meta)


@router.get(
    "/conversations/{conversation_id}/thread",
    response_model=ListResponse[ThreadMessage],
    summary="List thread messages",
    description=(
        "List the messages of one conversation, ordered by creation time, 30 per page by default. "
        + PAGINATION_DESCRIPTION
    ),
)
async def get_conversation_thread(
    request: Request,
    response: Response,
    auth: CurrentAuth,
    executor: Executor,
    conversation_id: Annotated[UUID, Path(description="Conversation id")],
) -> ListResponse[ThreadMessage]:
    keyset = keyset_from_request(
        request, THREAD_SORTS, THREAD_DEFAULT_SORT, THREAD_ID_COLUMN, default_limit=THREAD_PAGE_SIZE
    )

    items, meta = await list_thread_messages(executor, auth.property_id, str(conversation_id), keyset)

    add_next_link(request, response, meta)
    return ListResponse[ThreadMessage](items=items, meta=meta)
