"""Action: a unit of work tracked under a Case."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

from casebook.models.types import DEFAULT_ACTION_STATUS, ActionStatus


class Action(BaseModel):
    """An action owned by exactly one Case (``case_id``)."""

    id: int = 0
    case_id: int = 0
    title: str = ""
    description: str = ""
    assignee_ids: list[str] = Field(default_factory=list)
    slack_message_ts: str = ""
    status: ActionStatus = DEFAULT_ACTION_STATUS
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return value or DEFAULT_ACTION_STATUS
