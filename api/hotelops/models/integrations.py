"""Pydantic models for third-party integrations of a property."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class Integration(BaseModel):
    """Connection state of one provider integration."""

    id: str
    provider: str
    status: str
    external_account_id: Optional[str] = None
    connected_at: Optional[datetime] = None
    last_synced_at: Optional[datetime] = None
    metadata: Optional[Any] = None
    updated_at: datetime
