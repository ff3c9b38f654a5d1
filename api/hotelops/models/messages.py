"""Pydantic models for guest conversations."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Conversation(BaseModel):
    """Conversation thread with a guest."""

    id: str
    channel: str
    status: str
    unread_count: int = 0
    last_message_at: Optional[datetime] = None
    last_message_preview: Optional[str] = None
    guest_name: Optional[str] = None
    booking: Optional[str] = Field(default=None, description="Stay dates as 'check_in - check_out'")


class ThreadMessage(BaseModel):
    """One message of a conversation thread."""

    id: str
    sender: str
    content: str
    is_ai_generated: bool = False
    delivery_status: Optional[str] = None
    created_at: datetime
