"""Property settings API endpoints."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Query, Request, Response

from ..auth.dependencies import CurrentAuth
from ..db.connection import Executor
from ..db.integrations import (
    INTEGRATION_DEFAULT_SORT, INTEGRATION_ID_COLUMN, INTEGRATION_SORTS, list_integrations
)
from ..models.integrations import Integration
from ..models.listing import ListResponse
from .paging import PAGINATION_DESCRIPTION, add_next_link, keyset_from_request


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1.0/settings", tags=["Settings"])


@router.get(
    "/integrations",
    response_model=ListResponse[Integration],
    summary="List integrations",
    description="List third-party integrations of the current property. " + PAGINATION_DESCRIPTION,
)
async def get_integrations(
    request: Request,
    response: Response,
    auth: CurrentAuth,
    executor: Executor,
    status: Annotated[Optional[str], Query()] = None,
    provider: Annotated[Optional[str], Query()] = None,
    q: Annotated[Optional[str], Query(description="Search in provider name")] = None,
) -> ListResponse[Integration]:
    keyset = keyset_from_request(request, INTEGRATION_SORTS, INTEGRATION_DEFAULT_SORT, INTEGRATION_ID_COLUMN)

    items, meta = await list_integrations(executor, auth.property_id, keyset, status=status, provider=provider, q=q)

    add_next_link(request, response, meta)
    return ListResponse[Integration](items=items, meta=meta)
