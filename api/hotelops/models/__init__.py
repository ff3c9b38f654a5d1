"""Pydantic models for the Hotel Ops API."""

from .listing import ListResponse
from .reviews import Review, ReviewSummary, ReviewListResponse
from .messages import Conversation, ThreadMessage
from .campaigns import Campaign, CampaignTemplate
from .social import SocialPost
from .agents import AgentActivity
from .integrations import Integration

__all__ = [
    "ListResponse",
    "Review",
    "ReviewSummary",
    "ReviewListResponse",
    "Conversation",
    "ThreadMessage",
    "Campaign",
    "CampaignTemplate",
    "SocialPost",
    "AgentActivity",
    "Integration"
]
