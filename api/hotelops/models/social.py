"""Pydantic models for social media posts."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SocialPost(BaseModel):
    """Scheduled or published social post."""

    id: str
    title: str
    content: str
    status: str
    scheduled_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    estimated_reach: Optional[int] = None
    ai_generated: bool = False
    platforms: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(default=None, description="First attached asset")
    created_at: datetime
