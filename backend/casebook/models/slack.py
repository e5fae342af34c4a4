"""Slack-mirrored entities: users, user-sync metadata and messages."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class SlackUser(BaseModel):
    id: str
    name: str = ""  # Slack username, e.g. "john.doe"
    real_name: str = ""
    email: str = ""
    image_url: str = ""  # Empty = no avatar
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SlackUserMetadata(BaseModel):
    """Singleton record describing the last user-directory refresh."""

    last_refresh_success: datetime | None = None
    last_refresh_attempt: datetime | None = None
    user_count: int = 0


class SlackMessage(BaseModel):
    """A Slack message; ``id`` is the message ts, unique within a channel."""

    id: str
    channel_id: str = ""
    thread_ts: str = ""
    team_id: str = ""
    user_id: str = ""
    user_name: str = ""
    text: str = ""
    event_ts: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
