"""In-memory AssistLog store."""

from __future__ import annotations

from casebook.models import AssistLog
from casebook.repository.identity import clone, clone_all, resolve_id, utcnow
from casebook.repository.interfaces import AssistLogRepository
from casebook.repository.memory.base import WorkspaceStore
from casebook.repository.pagination import newest_first, page_by_offset


class MemoryAssistLogRepository(WorkspaceStore[AssistLog], AssistLogRepository):
    kind = "assist_log"

    def create(self, workspace_id: str, case_id: int, log: AssistLog) -> AssistLog:
        stored = log.model_copy(
            update={"id": resolve_id(log.id), "case_id": case_id, "created_at": utcnow()},
            deep=True,
        )
        with self._lock.write():
            self._writable_bucket(workspace_id)[stored.id] = stored
            return clone(stored)

    def list(self, workspace_id: str, case_id: int, limit: int, offset: int) -> tuple[list[AssistLog], int]:
        with self._lock.read():
            logs = [entry for entry in self._bucket(workspace_id).values() if entry.case_id == case_id]
            page, total = page_by_offset(newest_first(logs), limit, offset)
            return clone_all(page), total
