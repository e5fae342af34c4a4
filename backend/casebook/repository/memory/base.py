"""Workspace-bucketed storage shared by the in-memory stores.

Each store owns one RWLock and a ``{workspace_id: {key: model}}`` mapping.
Buckets are created lazily on first write; reading an unknown workspace
behaves exactly like reading an empty one. Dicts keep insertion order, which
serves as the insertion sequence for recency tie-breaks.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import Generic, TypeVar

from pydantic import BaseModel

from casebook.errors import NotFoundError
from casebook.repository.memory.lock import RWLock

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = logging.getLogger(__name__)


class WorkspaceStore(Generic[ModelT]):
    """Base class; subclasses call the ``_``-helpers while holding the lock."""

    kind: str = "entity"

    def __init__(self) -> None:
        self._lock = RWLock()
        self._buckets: dict[str, dict[Hashable, ModelT]] = {}
        self._counters: dict[str, int] = {}

    def _bucket(self, workspace_id: str) -> dict[Hashable, ModelT]:
        """Read access; unknown workspaces yield an empty, detached dict."""
        return self._buckets.get(workspace_id, {})

    def _writable_bucket(self, workspace_id: str) -> dict[Hashable, ModelT]:
        return self._buckets.setdefault(workspace_id, {})

    def _next_id(self, workspace_id: str) -> int:
        value = self._counters.get(workspace_id, 0) + 1
        self._counters[workspace_id] = value
        return value

    def _require(self, workspace_id: str, key: Hashable) -> ModelT:
        stored = self._bucket(workspace_id).get(key)
        if stored is None:
            raise NotFoundError(self.kind, key, workspace_id)
        return stored

    def _pop(self, workspace_id: str, key: Hashable) -> ModelT:
        bucket = self._bucket(workspace_id)
        if key not in bucket:
            raise NotFoundError(self.kind, key, workspace_id)
        logger.debug("Deleted %s %s in workspace %s", self.kind, key, workspace_id)
        return bucket.pop(key)
