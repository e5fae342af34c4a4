"""Document-backed AssistLog store; ``ref`` holds the case ID."""

from __future__ import annotations

from casebook.models import AssistLog
from casebook.repository.document.base import DocumentCollection
from casebook.repository.identity import resolve_id, utcnow
from casebook.repository.interfaces import AssistLogRepository
from casebook.repository.pagination import newest_first, page_by_offset


class DocumentAssistLogRepository(DocumentCollection[AssistLog], AssistLogRepository):
    kind = "assist_log"
    model = AssistLog

    def create(self, workspace_id: str, case_id: int, log: AssistLog) -> AssistLog:
        stored = log.model_copy(
            update={"id": resolve_id(log.id), "case_id": case_id, "created_at": utcnow()},
            deep=True,
        )
        self._store.put(self._coll(workspace_id), stored.id, self._dump(stored), ref=case_id)
        return stored

    def list(self, workspace_id: str, case_id: int, limit: int, offset: int) -> tuple[list[AssistLog], int]:
        logs = [self._load(d) for d in self._store.scan_refs(self._coll(workspace_id), [case_id])]
        return page_by_offset(newest_first(logs), limit, offset)
