"""Campaign and campaign template API endpoints."""

import logging
from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Query, Request, Response

from ..auth.dependencies import CurrentAuth
from ..db.campaigns import (
    CAMPAIGN_DEFAULT_SORT, CAMPAIGN_ID_COLUMN, CAMPAIGN_SORTS,
    TEMPLATE_DEFAULT_SORT, TEMPLATE_ID_COLUMN, TEMPLATE_SORTS,
    list_campaign_templates, list_campaigns
)
from ..db.connection import Executor
from ..models.campaigns import Campaign, CampaignTemplate
from ..models.listing import ListResponse
from .paging import PAGINATION_DESCRIPTION, add_next_link, keyset_from_request


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1.0", tags=["Campaigns"])


@router.get(
    "/campaigns",
    response_model=ListResponse[Campaign],
    summary="List campaigns",
    description="List marketing campaigns of the current property. " + PAGINATION_DESCRIPTION,
)
async def get_campaigns(
    request: Request,
    response: Response,
    auth: CurrentAuth,
    executor: Executor,
    status: Annotated[Optional[List[str]], Query(description="Statuses, repeatable")] = None,
    channel: Annotated[Optional[List[str]], Query(description="Channels, repeatable")] = None,
    q: Annotated[Optional[str], Query(description="Search in name and description")] = None,
    start_date_from: Annotated[Optional[date], Query()] = None,
    start_date_to: Annotated[Optional[date], Query()] = None,
) -> ListResponse[Campaign]:
    keyset = keyset_from_request(request, CAMPAIGN_SORTS, CAMPAIGN_DEFAULT_SORT, CAMPAIGN_ID_COLUMN)

    items, meta = await list_campaigns(
        executor, auth.property_id, keyset,
        statuses=status or [],
        channels=channel or [],
        q=q,
        start_date_from=start_date_from,
        start_date_to=start_date_to,
    )

    add_next_link(request, response, meta)
    logger.info(f"Listed {len(items)} campaigns for property {auth.property_id}")
    return ListResponse[Campaign](items=items, meta=meta)


@router.get(
    "/campaign-templates",
    response_model=ListResponse[CampaignTemplate],
    summary="List campaign templates",
    description="List active templates shared globally or owned by the current account. " + PAGINATION_DESCRIPTION,
)
async def get_campaign_templates(
    request: Request,
    response: Response,
    auth: CurrentAuth,
    executor: Executor,
    category: Annotated[Optional[str], Query(description="Category, case-insensitive")] = None,
    q: Annotated[Optional[str], Query(description="Search in template name")] = None,
) -> ListResponse[CampaignTemplate]:
    keyset = keyset_from_request(request, TEMPLATE_SORTS, TEMPLATE_DEFAULT_SORT, TEMPLATE_ID_COLUMN)

    items, meta = await list_campaign_templates(executor, auth.account_id, keyset, category=category, q=q)

    add_next_link(request, response, meta)
    return ListResponse[CampaignTemplate](items=items, meta=meta)
