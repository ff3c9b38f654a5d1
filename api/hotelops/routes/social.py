"""Social media API endpoints."""

import logging
from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Query, Request, Response

from ..auth.dependencies import CurrentAuth
from ..db.connection import Executor
from ..db.social import POST_DEFAULT_SORT, POST_ID_COLUMN, POST_SORTS, list_social_posts
from ..models.listing import ListResponse
from ..models.social import SocialPost
from .paging import PAGINATION_DESCRIPTION, add_next_link, keyset_from_request


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1.0/social", tags=["Social"])


@router.get(
    "/posts",
    response_model=ListResponse[SocialPost],
    summary="List social posts",
    description="List social posts of the current property. " + PAGINATION_DESCRIPTION,
)
async def get_social_posts(
    request: Request,
    response: Response,
    auth: CurrentAuth,
    executor: Executor,
    on_date: Annotated[Optional[date], Query(alias="date", description="Scheduled on this day")] = None,
    date_from: Annotated[Optional[date], Query()] = None,
    date_to: Annotated[Optional[date], Query()] = None,
    platform: Annotated[Optional[List[str]], Query(description="Platforms, repeatable")] = None,
    status: Annotated[Optional[List[str]], Query(description="Statuses, repeatable")] = None,
    q: Annotated[Optional[str], Query(description="Search in title and content")] = None,
) -> ListResponse[SocialPost]:
    keyset = keyset_from_request(request, POST_SORTS, POST_DEFAULT_SORT, POST_ID_COLUMN)

    items, meta = await list_social_posts(
        executor, auth.property_id, keyset,
        on_date=on_date,
        date_from=date_from,
        date_to=date_to,
        platforms=platform or [],
        statuses=status or [],
        q=q,
    )

    add_next_link(request, response, meta)
    return ListResponse[SocialPost](items=items, meta=meta)
