"""Pydantic models for guest reviews."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .listing import ListResponse


class Review(BaseModel):
    """A guest review with its current AI response draft."""

    id: str = Field(description="Review id")
    platform: str = Field(description="Platform the review was posted on")
    author: str = Field(description="Reviewer display name")
    rating: int = Field(description="Star rating")
    title: Optional[str] = Field(default=None, description="Review title")
    content: str = Field(description="Review body")
    reviewed_at: datetime = Field(description="When the review was posted")
    status: str = Field(description="Handling status")
    sentiment: Optional[str] = Field(default=None, description="Detected sentiment")
    ai_response: Optional[str] = Field(default=None, description="Current response draft")


class ReviewSummary(BaseModel):
    """Property-wide review counters, independent of filters."""

    total: int = 0
    pending: int = 0
    urgent: int = 0
    avg_rating: float = 0.0


class ReviewListResponse(ListResponse[Review]):
    """Page of reviews with the property summary."""

    summary: ReviewSummary = Field(default_factory=ReviewSummary)
