"""Risk, Response and the many-to-many link between them."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

from casebook.models.types import DEFAULT_RESPONSE_STATUS, ResponseStatus


class Risk(BaseModel):
    id: int = 0
    name: str = ""
    description: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Response(BaseModel):
    """A mitigation or countermeasure that may address several risks."""

    id: int = 0
    title: str = ""
    description: str = ""
    responder_ids: list[str] = Field(default_factory=list)
    url: str = ""
    status: ResponseStatus = DEFAULT_RESPONSE_STATUS
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return value or DEFAULT_RESPONSE_STATUS


class RiskResponse(BaseModel):
    """Join row, unique per (risk_id, response_id)."""

    risk_id: int
    response_id: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> str:
        return f"{self.risk_id}:{self.response_id}"
