"""AssistLog: one record per assistant session on a Case."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class AssistLog(BaseModel):
    id: str = ""
    case_id: int = 0
    summary: str = ""  # One-line summary of the session
    actions: str = ""  # What was done (may be empty)
    reasoning: str = ""
    next_steps: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
