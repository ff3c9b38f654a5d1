"""AI agent activity API endpoints."""

import logging
from datetime import datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Path, Query, Request, Response

from ..auth.dependencies import CurrentAuth
from ..db.agents import (
    ACTIVITY_DEFAULT_SORT, ACTIVITY_ID_COLUMN, ACTIVITY_SORTS, HISTORY_SORTS,
    list_agent_activity, list_agent_history
)
from ..db.connection import Executor
from ..models.agents import AgentActivity
from ..models.listing import ListResponse
from .paging import PAGINATION_DESCRIPTION, add_next_link, keyset_from_request


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1.0/agents", tags=["Agents"])


@router.get(
    "/activity",
    response_model=ListResponse[AgentActivity],
    summary="List agent activity",
    description="List task runs of all AI agents of the current property. " + PAGINATION_DESCRIPTION,
)
async def get_agent_activity(
    request: Request,
    response: Response,
    auth: CurrentAuth,
    executor: Executor,
    status: Annotated[Optional[List[str]], Query(description="Statuses, repeatable")] = None,
    agent_key: Annotated[Optional[List[str]], Query(description="Agent keys, repeatable")] = None,
    date_from: Annotated[Optional[datetime], Query()] = None,
    date_to: Annotated[Optional[datetime], Query()] = None,
    q: Annotated[Optional[str], Query(description="Search in action and details")] = None,
) -> ListResponse[AgentActivity]:
    keyset = keyset_from_request(request, ACTIVITY_SORTS, ACTIVITY_DEFAULT_SORT, ACTIVITY_ID_COLUMN)

    items, meta = await list_agent_activity(
        executor, auth.property_id, keyset,
        statuses=status or [],
        agent_keys=agent_key or [],
        date_from=date_from,
        date_to=date_to,
        q=q,
    )

    add_next_link(request, response, meta)
    return ListResponse[AgentActivity](items=items, meta=meta)


@router.get(
    "/{key}/history",
    response_model=ListResponse[AgentActivity],
    summary="List agent history",
    description="List task runs of one AI agent, ordered by start time. " + PAGINATION_DESCRIPTION,
)
async def get_agent_history(
    request: Request,
    response: Response,
    auth: CurrentAuth,
    executor: Executor,
    key: Annotated[str, Path(description="Agent key")],
    status: Annotated[Optional[str], Query()] = None,
    q: Annotated[Optional[str], Query(description="Search in action and details")] = None,
) -> ListResponse[AgentActivity]:
    keyset = keyset_from_request(request, HISTORY_SORTS, ACTIVITY_DEFAULT_SORT, ACTIVITY_ID_COLUMN)

    items, meta = await list_agent_history(executor, auth.property_id, key, keyset, status=status, q=q)

    add_next_link(request, response, meta)
    return ListResponse[AgentActivity](items=items, meta=meta)
