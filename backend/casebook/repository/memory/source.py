"""In-memory Source store."""

from __future__ import annotations

from casebook.models import Source
from casebook.repository.identity import clone, clone_all, resolve_id, stamp_new, stamp_update
from casebook.repository.interfaces import SourceRepository
from casebook.repository.memory.base import WorkspaceStore


class MemorySourceRepository(WorkspaceStore[Source], SourceRepository):
    kind = "source"

    def create(self, workspace_id: str, source: Source) -> Source:
        with self._lock.write():
            stored = stamp_new(source)
            stored.id = resolve_id(source.id)
            self._writable_bucket(workspace_id)[stored.id] = stored
            return clone(stored)

    def get(self, workspace_id: str, source_id: str) -> Source:
        with self._lock.read():
            return clone(self._require(workspace_id, source_id))

    def list(self, workspace_id: str) -> list[Source]:
        with self._lock.read():
            return clone_all(self._bucket(workspace_id).values())

    def update(self, workspace_id: str, source: Source) -> Source:
        with self._lock.write():
            existing = self._require(workspace_id, source.id)
            stored = stamp_update(source, existing)
            self._writable_bucket(workspace_id)[source.id] = stored
            return clone(stored)

    def delete(self, workspace_id: str, source_id: str) -> None:
        with self._lock.write():
            self._pop(workspace_id, source_id)
