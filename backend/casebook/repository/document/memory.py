"""Document-backed Memory store: one collection per (workspace, case)."""

from __future__ import annotations

from casebook.errors import NotFoundError
from casebook.models import Memory
from casebook.repository.document.base import DocumentCollection
from casebook.repository.document.store import DocumentStore
from casebook.repository.identity import resolve_id
from casebook.repository.interfaces import MemoryRepository
from casebook.repository.pagination import newest_first
from casebook.repository.vector import rank_by_similarity


class DocumentMemoryRepository(DocumentCollection[Memory], MemoryRepository):
    kind = "memory"
    model = Memory

    def __init__(self, store: DocumentStore, embedding_dimension: int | None = None) -> None:
        super().__init__(store)
        self.embedding_dimension = embedding_dimension

    def create(self, workspace_id: str, case_id: int, memory: Memory) -> Memory:
        return self._insert(workspace_id, memory, case_id, id=resolve_id(memory.id), case_id=case_id)

    def get(self, workspace_id: str, case_id: int, memory_id: str) -> Memory:
        data = self._store.get(self._coll(workspace_id, case_id), memory_id)
        if data is None:
            raise NotFoundError(self.kind, memory_id, workspace_id, case_id=case_id)
        return self._load(data)

    def update(self, workspace_id: str, case_id: int, memory: Memory) -> Memory:
        try:
            return self._replace(workspace_id, memory, case_id, case_id=case_id)
        except NotFoundError as exc:
            raise NotFoundError(self.kind, memory.id, workspace_id, case_id=case_id) from exc

    def delete(self, workspace_id: str, case_id: int, memory_id: str) -> None:
        if not self._store.delete(self._coll(workspace_id, case_id), memory_id):
            raise NotFoundError(self.kind, memory_id, workspace_id, case_id=case_id)

    def list(self, workspace_id: str, case_id: int) -> list[Memory]:
        return newest_first(self._all(workspace_id, case_id))

    def find_by_embedding(
        self, workspace_id: str, case_id: int, embedding: list[float], limit: int
    ) -> list[Memory]:
        return rank_by_similarity(
            self._all(workspace_id, case_id), embedding, limit, dimension=self.embedding_dimension
        )

    def delete_by_case(self, workspace_id: str, case_id: int) -> int:
        return self._store.delete_collection(self._coll(workspace_id, case_id))
