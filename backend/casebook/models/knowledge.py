"""Embedding-bearing entities: Knowledge and Memory.

Both carry an optional embedding vector of ``settings.embedding_dimension``
floats. An empty embedding means "not indexed" and the entity is skipped by
similarity search. Vectors of another length are stored as-is; repositories
built by ``create_repository`` leave them out of similarity results, and
repositories built without a dimension score them 0.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class Knowledge(BaseModel):
    """An insight extracted from a Source and attached to a Case.

    When one source relates to several cases, a separate Knowledge is
    created for each case.
    """

    id: str = ""
    case_id: int = 0
    source_id: str = ""
    source_urls: list[str] = Field(default_factory=list)
    title: str = ""
    summary: str = ""
    embedding: list[float] = Field(default_factory=list)
    sourced_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Memory(BaseModel):
    """A fact or note remembered for a Case."""

    id: str = ""
    case_id: int = 0
    claim: str = ""
    embedding: list[float] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
