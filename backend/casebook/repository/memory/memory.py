"""In-memory store for case-scoped Memory entries."""

from __future__ import annotations

from casebook.errors import NotFoundError
from casebook.models import Memory
from casebook.repository.identity import clone, clone_all, resolve_id, stamp_new, stamp_update
from casebook.repository.interfaces import MemoryRepository
from casebook.repository.memory.base import WorkspaceStore
from casebook.repository.pagination import newest_first
from casebook.repository.vector import rank_by_similarity


class MemoryMemoryRepository(WorkspaceStore[Memory], MemoryRepository):
    """Keys are ``(case_id, memory_id)`` inside each workspace bucket."""

    kind = "memory"

    def __init__(self, embedding_dimension: int | None = None) -> None:
        super().__init__()
        self.embedding_dimension = embedding_dimension

    def _for_case(self, workspace_id: str, case_id: int) -> list[Memory]:
        return [m for (cid, _), m in self._bucket(workspace_id).items() if cid == case_id]

    def _require_memory(self, workspace_id: str, case_id: int, memory_id: str) -> Memory:
        stored = self._bucket(workspace_id).get((case_id, memory_id))
        if stored is None:
            raise NotFoundError(self.kind, memory_id, workspace_id, case_id=case_id)
        return stored

    def create(self, workspace_id: str, case_id: int, memory: Memory) -> Memory:
        with self._lock.write():
            stored = stamp_new(memory)
            stored.id = resolve_id(memory.id)
            stored.case_id = case_id
            self._writable_bucket(workspace_id)[(case_id, stored.id)] = stored
            return clone(stored)

    def get(self, workspace_id: str, case_id: int, memory_id: str) -> Memory:
        with self._lock.read():
            return clone(self._require_memory(workspace_id, case_id, memory_id))

    def update(self, workspace_id: str, case_id: int, memory: Memory) -> Memory:
        with self._lock.write():
            existing = self._require_memory(workspace_id, case_id, memory.id)
            stored = stamp_update(memory, existing)
            stored.case_id = case_id
            self._writable_bucket(workspace_id)[(case_id, memory.id)] = stored
            return clone(stored)

    def delete(self, workspace_id: str, case_id: int, memory_id: str) -> None:
        with self._lock.write():
            self._require_memory(workspace_id, case_id, memory_id)
            del self._bucket(workspace_id)[(case_id, memory_id)]

    def list(self, workspace_id: str, case_id: int) -> list[Memory]:
        with self._lock.read():
            return clone_all(newest_first(self._for_case(workspace_id, case_id)))

    def find_by_embedding(
        self, workspace_id: str, case_id: int, embedding: list[float], limit: int
    ) -> list[Memory]:
        with self._lock.read():
            ranked = rank_by_similarity(
                self._for_case(workspace_id, case_id), embedding, limit, dimension=self.embedding_dimension
            )
            return clone_all(ranked)

    def delete_by_case(self, workspace_id: str, case_id: int) -> int:
        with self._lock.write():
            bucket = self._bucket(workspace_id)
            doomed = [key for key in bucket if key[0] == case_id]
            for key in doomed:
                del bucket[key]
            return len(doomed)
