"""Document-backed Source store."""

from __future__ import annotations

from casebook.models import Source
from casebook.repository.document.base import DocumentCollection
from casebook.repository.identity import resolve_id
from casebook.repository.interfaces import SourceRepository


class DocumentSourceRepository(DocumentCollection[Source], SourceRepository):
    kind = "source"
    model = Source

    def create(self, workspace_id: str, source: Source) -> Source:
        return self._insert(workspace_id, source, id=resolve_id(source.id))

    def get(self, workspace_id: str, source_id: str) -> Source:
        return self._get(workspace_id, source_id)

    def list(self, workspace_id: str) -> list[Source]:
        return self._all(workspace_id)

    def update(self, workspace_id: str, source: Source) -> Source:
        return self._replace(workspace_id, source)

    def delete(self, workspace_id: str, source_id: str) -> None:
        self._remove(workspace_id, source_id)
