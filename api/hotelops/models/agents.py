"""Pydantic models for AI agent task runs."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AgentActivity(BaseModel):
    """One task run of an AI agent."""

    id: str
    agent_key: Optional[str] = None
    agent_name: Optional[str] = None
    task_type: Optional[str] = None
    action: str
    details: Optional[str] = None
    status: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    response_time_ms: Optional[int] = None
    time_saved_seconds: Optional[int] = None
