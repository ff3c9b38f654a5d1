"""Reviews API endpoints."""

import logging
from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Query, Request, Response

from ..auth.dependencies import CurrentAuth
from ..db.connection import Executor
from ..db.reviews import REVIEW_DEFAULT_SORT, REVIEW_ID_COLUMN, REVIEW_SORTS, get_review_summary, list_reviews
from ..models.reviews import ReviewListResponse
from .paging import PAGINATION_DESCRIPTION, add_next_link, keyset_from_request


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/v1.0/reviews",
    tags=["Reviews"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"}
    }
)


@router.get(
    "",
    response_model=ReviewListResponse,
    summary="List reviews",
    description="List guest reviews of the current property. " + PAGINATION_DESCRIPTION,
)
async def get_reviews(
    request: Request,
    response: Response,
    auth: CurrentAuth,
    executor: Executor,
    status: Annotated[Optional[str], Query(description="Handling status")] = None,
    platform: Annotated[Optional[List[str]], Query(description="Platforms, repeatable")] = None,
    sentiment: Annotated[Optional[str], Query()] = None,
    rating_min: Annotated[Optional[int], Query()] = None,
    rating_max: Annotated[Optional[int], Query()] = None,
    date_from: Annotated[Optional[date], Query()] = None,
    date_to: Annotated[Optional[date], Query()] = None,
    q: Annotated[Optional[str], Query(description="Search in author, title and body")] = None,
) -> ReviewListResponse:
    """List reviews with the property-wide summary counters."""
    keyset = keyset_from_request(request, REVIEW_SORTS, REVIEW_DEFAULT_SORT, REVIEW_ID_COLUMN)

    items, meta = await list_reviews(
        executor, auth.property_id, keyset,
        status=status,
        platforms=platform or [],
        sentiment=sentiment,
        rating_min=rating_min,
        rating_max=rating_max,
        date_from=date_from,
        date_to=date_to,
        q=q,
    )
    summary = await get_review_summary(executor, auth.property_id)

    add_next_link(request, response, meta)
    logger.info(f"Listed {len(items)} reviews for property {auth.property_id}")
    return ReviewListResponse(items=items, meta=meta, summary=summary)
