"""In-memory Action store."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from casebook.errors import ValidationError
from casebook.models import Action
from casebook.repository.identity import clone, clone_all, stamp_new, stamp_update
from casebook.repository.interfaces import ActionRepository
from casebook.repository.memory.base import WorkspaceStore

logger = logging.getLogger(__name__)


class MemoryActionRepository(WorkspaceStore[Action], ActionRepository):
    kind = "action"

    def _ordered(self, workspace_id: str) -> list[Action]:
        return sorted(self._bucket(workspace_id).values(), key=lambda a: a.id)

    def create(self, workspace_id: str, action: Action) -> Action:
        if action.case_id <= 0:
            raise ValidationError("action requires a case_id", kind=self.kind, workspace_id=workspace_id)
        with self._lock.write():
            stored = stamp_new(action)
            stored.id = self._next_id(workspace_id)
            self._writable_bucket(workspace_id)[stored.id] = stored
            logger.debug("Created action %d (case %d) in workspace %s", stored.id, stored.case_id, workspace_id)
            return clone(stored)

    def get(self, workspace_id: str, action_id: int) -> Action:
        with self._lock.read():
            return clone(self._require(workspace_id, action_id))

    def list(self, workspace_id: str) -> list[Action]:
        with self._lock.read():
            return clone_all(self._ordered(workspace_id))

    def update(self, workspace_id: str, action: Action) -> Action:
        with self._lock.write():
            existing = self._require(workspace_id, action.id)
            stored = stamp_update(action, existing)
            self._writable_bucket(workspace_id)[action.id] = stored
            return clone(stored)

    def delete(self, workspace_id: str, action_id: int) -> None:
        with self._lock.write():
            self._pop(workspace_id, action_id)

    def get_by_case(self, workspace_id: str, case_id: int) -> list[Action]:
        with self._lock.read():
            return clone_all(a for a in self._ordered(workspace_id) if a.case_id == case_id)

    def get_by_cases(self, workspace_id: str, case_ids: Iterable[int]) -> dict[int, list[Action]]:
        result: dict[int, list[Action]] = {case_id: [] for case_id in case_ids}
        with self._lock.read():
            for action in self._ordered(workspace_id):
                if action.case_id in result:
                    result[action.case_id].append(clone(action))
        return result

    def delete_by_case(self, workspace_id: str, case_id: int) -> int:
        with self._lock.write():
            bucket = self._bucket(workspace_id)
            doomed = [key for key, a in bucket.items() if a.case_id == case_id]
            for key in doomed:
                del bucket[key]
            return len(doomed)
