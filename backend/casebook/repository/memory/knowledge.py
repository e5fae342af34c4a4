"""In-memory Knowledge store."""

from __future__ import annotations

from collections.abc import Iterable

from casebook.models import Knowledge
from casebook.repository.identity import clone, clone_all, resolve_id, stamp_new, stamp_update
from casebook.repository.interfaces import KnowledgeRepository
from casebook.repository.memory.base import WorkspaceStore
from casebook.repository.pagination import newest_first, page_by_offset, paginate
from casebook.repository.vector import rank_by_similarity


class MemoryKnowledgeRepository(WorkspaceStore[Knowledge], KnowledgeRepository):
    kind = "knowledge"

    def __init__(self, embedding_dimension: int | None = None) -> None:
        super().__init__()
        self.embedding_dimension = embedding_dimension

    def create(self, workspace_id: str, knowledge: Knowledge) -> Knowledge:
        with self._lock.write():
            stored = stamp_new(knowledge)
            stored.id = resolve_id(knowledge.id)
            self._writable_bucket(workspace_id)[stored.id] = stored
            return clone(stored)

    def get(self, workspace_id: str, knowledge_id: str) -> Knowledge:
        with self._lock.read():
            return clone(self._require(workspace_id, knowledge_id))

    def update(self, workspace_id: str, knowledge: Knowledge) -> Knowledge:
        with self._lock.write():
            existing = self._require(workspace_id, knowledge.id)
            stored = stamp_update(knowledge, existing)
            self._writable_bucket(workspace_id)[knowledge.id] = stored
            return clone(stored)

    def delete(self, workspace_id: str, knowledge_id: str) -> None:
        with self._lock.write():
            self._pop(workspace_id, knowledge_id)

    def list_by_case_id(self, workspace_id: str, case_id: int) -> list[Knowledge]:
        with self._lock.read():
            return clone_all(k for k in self._bucket(workspace_id).values() if k.case_id == case_id)

    def list_by_case_ids(self, workspace_id: str, case_ids: Iterable[int]) -> dict[int, list[Knowledge]]:
        result: dict[int, list[Knowledge]] = {case_id: [] for case_id in case_ids}
        with self._lock.read():
            for knowledge in self._bucket(workspace_id).values():
                if knowledge.case_id in result:
                    result[knowledge.case_id].append(clone(knowledge))
        return result

    def list_by_source_id(self, workspace_id: str, source_id: str) -> list[Knowledge]:
        with self._lock.read():
            return clone_all(k for k in self._bucket(workspace_id).values() if k.source_id == source_id)

    def list_with_pagination(self, workspace_id: str, limit: int, offset: int) -> tuple[list[Knowledge], int]:
        with self._lock.read():
            page, total = page_by_offset(newest_first(list(self._bucket(workspace_id).values())), limit, offset)
            return clone_all(page), total

    def list_page(self, workspace_id: str, limit: int, cursor: str = "") -> tuple[list[Knowledge], str]:
        with self._lock.read():
            page, next_cursor = paginate(newest_first(list(self._bucket(workspace_id).values())), limit, cursor)
            return clone_all(page), next_cursor

    def find_by_embedding(self, workspace_id: str, embedding: list[float], limit: int) -> list[Knowledge]:
        with self._lock.read():
            ranked = rank_by_similarity(
                self._bucket(workspace_id).values(), embedding, limit, dimension=self.embedding_dimension
            )
            return clone_all(ranked)

    def delete_by_case(self, workspace_id: str, case_id: int) -> int:
        with self._lock.write():
            bucket = self._bucket(workspace_id)
            doomed = [key for key, k in bucket.items() if k.case_id == case_id]
            for key in doomed:
                del bucket[key]
            return len(doomed)
