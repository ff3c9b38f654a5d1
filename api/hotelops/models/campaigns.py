"""Pydantic models for marketing campaigns and templates."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class Campaign(BaseModel):
    """Marketing campaign with its channels and running totals."""

    id: str
    name: str
    description: Optional[str] = None
    status: str
    start_date: date
    end_date: date
    progress_percent: Decimal = Decimal(0)
    reach_total: int = 0
    conversions_total: int = 0
    revenue_total: Decimal = Decimal(0)
    channels: List[str] = Field(default_factory=list)


class CampaignTemplate(BaseModel):
    """Reusable campaign template, global or owned by an account."""

    id: str
    name: str
    category: str
    preview_image_url: Optional[str] = None
    template_payload: Optional[Any] = None
    updated_at: datetime
