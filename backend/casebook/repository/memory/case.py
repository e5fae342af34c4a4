"""In-memory Case store with cascading delete."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from casebook.models import Case
from casebook.models.types import CaseStatus, normalize_case_status
from casebook.repository.fieldvalue import count_field_values, find_invalid_field_value
from casebook.repository.identity import clone, clone_all, stamp_new, stamp_update
from casebook.repository.interfaces import (
    ActionRepository,
    CaseRepository,
    KnowledgeRepository,
    MemoryRepository,
)
from casebook.repository.memory.base import WorkspaceStore

logger = logging.getLogger(__name__)


class MemoryCaseRepository(WorkspaceStore[Case], CaseRepository):
    kind = "case"

    def __init__(
        self,
        actions: ActionRepository,
        knowledge: KnowledgeRepository,
        memories: MemoryRepository,
    ) -> None:
        super().__init__()
        self._actions = actions
        self._knowledge = knowledge
        self._memories = memories

    def _ordered(self, workspace_id: str) -> list[Case]:
        return sorted(self._bucket(workspace_id).values(), key=lambda c: c.id)

    def create(self, workspace_id: str, case: Case) -> Case:
        with self._lock.write():
            stored = stamp_new(case)
            stored.id = self._next_id(workspace_id)
            stored.status = normalize_case_status(stored.status)
            self._writable_bucket(workspace_id)[stored.id] = stored
            logger.debug("Created case %d in workspace %s", stored.id, workspace_id)
            return clone(stored)

    def get(self, workspace_id: str, case_id: int) -> Case:
        with self._lock.read():
            return clone(self._require(workspace_id, case_id))

    def list(self, workspace_id: str, status: CaseStatus | None = None) -> list[Case]:
        with self._lock.read():
            cases = self._ordered(workspace_id)
            if status is not None:
                cases = [c for c in cases if c.status == status]
            return clone_all(cases)

    def update(self, workspace_id: str, case: Case) -> Case:
        with self._lock.write():
            existing = self._require(workspace_id, case.id)
            stored = stamp_update(case, existing)
            stored.status = normalize_case_status(stored.status)
            self._writable_bucket(workspace_id)[case.id] = stored
            return clone(stored)

    def delete(self, workspace_id: str, case_id: int) -> None:
        with self._lock.write():
            self._pop(workspace_id, case_id)

        # Each dependent store takes its own lock; not atomic with the delete above.
        actions = self._actions.delete_by_case(workspace_id, case_id)
        knowledge = self._knowledge.delete_by_case(workspace_id, case_id)
        memories = self._memories.delete_by_case(workspace_id, case_id)
        logger.info(
            "Deleted case %d in workspace %s (actions=%d, knowledge=%d, memories=%d)",
            case_id, workspace_id, actions, knowledge, memories,
        )

    def get_by_slack_channel_id(self, workspace_id: str, channel_id: str) -> Case | None:
        if not channel_id:
            return None
        with self._lock.read():
            for case in self._ordered(workspace_id):
                if case.slack_channel_id == channel_id:
                    return clone(case)
        return None

    def count_field_values(
        self, workspace_id: str, field_id: str, field_type: str, valid_values: Iterable[str]
    ) -> tuple[int, int]:
        with self._lock.read():
            return count_field_values(self._ordered(workspace_id), field_id, field_type, valid_values)

    def find_case_with_invalid_field_value(
        self, workspace_id: str, field_id: str, field_type: str, valid_values: Iterable[str]
    ) -> Case | None:
        with self._lock.read():
            found = find_invalid_field_value(self._ordered(workspace_id), field_id, field_type, valid_values)
            return clone(found) if found is not None else None
