"""Source: an external system knowledge is harvested from.

The ``source_type`` discriminator selects which of the three config payloads
is meaningful; the others stay ``None``.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from casebook.errors import ValidationError
from casebook.models.types import SourceType

_HEX32 = re.compile(r"^[0-9a-f]{32}$")
_NOTION_HOSTS = {"notion.so", "www.notion.so"}


class NotionDBConfig(BaseModel):
    database_id: str
    database_title: str = ""
    database_url: str = ""


class NotionPageConfig(BaseModel):
    page_id: str
    page_title: str = ""
    page_url: str = ""
    recursive: bool = False
    max_depth: int = 0


class SlackChannel(BaseModel):
    id: str  # e.g. C01234567
    name: str = ""  # Fallback display name


class SlackConfig(BaseModel):
    channels: list[SlackChannel] = Field(default_factory=list)


class Source(BaseModel):
    id: str = ""
    name: str = ""
    source_type: SourceType = "notion_db"
    description: str = ""
    enabled: bool = True
    notion_db_config: NotionDBConfig | None = None
    notion_page_config: NotionPageConfig | None = None
    slack_config: SlackConfig | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def parse_notion_id(raw: str) -> str:
    """Extract a Notion ID and return it in 8-4-4-4-12 UUID form.

    Accepts a raw 32-hex ID, a dashed UUID, or a notion.so URL whose last
    path segment ends with the ID (``Title-<32 hex>``).

    Raises:
        ValidationError: if no Notion ID can be extracted.
    """
    value = (raw or "").strip()
    if not value:
        raise ValidationError("invalid Notion ID", value=raw)

    if value.startswith(("http://", "https://")):
        hex_id = _hex_from_url(value)
    else:
        hex_id = value.replace("-", "").lower()
        if not _HEX32.match(hex_id):
            hex_id = ""

    if not hex_id:
        raise ValidationError("invalid Notion ID", value=raw)
    return f"{hex_id[0:8]}-{hex_id[8:12]}-{hex_id[12:16]}-{hex_id[16:20]}-{hex_id[20:32]}"


def _hex_from_url(url: str) -> str:
    parsed = urlparse(url)
    if parsed.hostname not in _NOTION_HOSTS:
        return ""
    segments = parsed.path.rstrip("/").split("/")
    clean = segments[-1].replace("-", "")
    if len(clean) < 32:
        return ""
    candidate = clean[-32:]
    return candidate if _HEX32.match(candidate) else ""
