"""Document-backed Knowledge store; ``ref`` holds the owning case ID.

Similarity search loads the workspace's documents and ranks them in process
with the shared cosine engine, so results match the in-memory adapter.
"""

from __future__ import annotations

from collections.abc import Iterable

from casebook.models import Knowledge
from casebook.repository.document.base import DocumentCollection
from casebook.repository.document.store import DocumentStore
from casebook.repository.identity import resolve_id
from casebook.repository.interfaces import KnowledgeRepository
from casebook.repository.pagination import newest_first, page_by_offset, paginate
from casebook.repository.vector import rank_by_similarity


class DocumentKnowledgeRepository(DocumentCollection[Knowledge], KnowledgeRepository):
    kind = "knowledge"
    model = Knowledge

    def __init__(self, store: DocumentStore, embedding_dimension: int | None = None) -> None:
        super().__init__(store)
        self.embedding_dimension = embedding_dimension

    def create(self, workspace_id: str, knowledge: Knowledge) -> Knowledge:
        return self._insert(workspace_id, knowledge, ref=knowledge.case_id, id=resolve_id(knowledge.id))

    def get(self, workspace_id: str, knowledge_id: str) -> Knowledge:
        return self._get(workspace_id, knowledge_id)

    def update(self, workspace_id: str, knowledge: Knowledge) -> Knowledge:
        return self._replace(workspace_id, knowledge, ref=knowledge.case_id)

    def delete(self, workspace_id: str, knowledge_id: str) -> None:
        self._remove(workspace_id, knowledge_id)

    def list_by_case_id(self, workspace_id: str, case_id: int) -> list[Knowledge]:
        return self.list_by_case_ids(workspace_id, [case_id])[case_id]

    def list_by_case_ids(self, workspace_id: str, case_ids: Iterable[int]) -> dict[int, list[Knowledge]]:
        result: dict[int, list[Knowledge]] = {case_id: [] for case_id in case_ids}
        for data in self._store.scan_refs(self._coll(workspace_id), result):
            knowledge = self._load(data)
            result[knowledge.case_id].append(knowledge)
        return result

    def list_by_source_id(self, workspace_id: str, source_id: str) -> list[Knowledge]:
        return [k for k in self._all(workspace_id) if k.source_id == source_id]

    def list_with_pagination(self, workspace_id: str, limit: int, offset: int) -> tuple[list[Knowledge], int]:
        return page_by_offset(newest_first(self._all(workspace_id)), limit, offset)

    def list_page(self, workspace_id: str, limit: int, cursor: str = "") -> tuple[list[Knowledge], str]:
        return paginate(newest_first(self._all(workspace_id)), limit, cursor)

    def find_by_embedding(self, workspace_id: str, embedding: list[float], limit: int) -> list[Knowledge]:
        return rank_by_similarity(self._all(workspace_id), embedding, limit, dimension=self.embedding_dimension)

    def delete_by_case(self, workspace_id: str, case_id: int) -> int:
        return self._store.delete_refs(self._coll(workspace_id), case_id)
