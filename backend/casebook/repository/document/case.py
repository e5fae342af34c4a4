"""Document-backed Case store with cascading delete."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from casebook.models import Case
from casebook.models.types import CaseStatus, normalize_case_status
from casebook.repository.document.base import DocumentCollection
from casebook.repository.document.store import DocumentStore
from casebook.repository.fieldvalue import count_field_values, find_invalid_field_value
from casebook.repository.interfaces import (
    ActionRepository,
    CaseRepository,
    KnowledgeRepository,
    MemoryRepository,
)

logger = logging.getLogger(__name__)


class DocumentCaseRepository(DocumentCollection[Case], CaseRepository):
    """Cases keyed by their integer ID; ``ref`` holds the Slack channel ID."""

    kind = "case"
    model = Case

    def __init__(
        self,
        store: DocumentStore,
        actions: ActionRepository,
        knowledge: KnowledgeRepository,
        memories: MemoryRepository,
    ) -> None:
        super().__init__(store)
        self._actions = actions
        self._knowledge = knowledge
        self._memories = memories

    def _ordered(self, workspace_id: str) -> list[Case]:
        return sorted(self._all(workspace_id), key=lambda c: c.id)

    def create(self, workspace_id: str, case: Case) -> Case:
        return self._insert_numbered(
            workspace_id,
            case,
            ref=case.slack_channel_id or "",
            status=normalize_case_status(case.status),
        )

    def get(self, workspace_id: str, case_id: int) -> Case:
        return self._get(workspace_id, case_id)

    def list(self, workspace_id: str, status: CaseStatus | None = None) -> list[Case]:
        cases = self._ordered(workspace_id)
        if status is not None:
            cases = [c for c in cases if c.status == status]
        return cases

    def update(self, workspace_id: str, case: Case) -> Case:
        return self._replace(
            workspace_id,
            case,
            ref=case.slack_channel_id or "",
            status=normalize_case_status(case.status),
        )

    def delete(self, workspace_id: str, case_id: int) -> None:
        self._remove(workspace_id, case_id)

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
        matches = [self._load(d) for d in self._store.scan_refs(self._coll(workspace_id), [channel_id])]
        if not matches:
            return None
        return min(matches, key=lambda c: c.id)

    def count_field_values(
        self, workspace_id: str, field_id: str, field_type: str, valid_values: Iterable[str]
    ) -> tuple[int, int]:
        return count_field_values(self._ordered(workspace_id), field_id, field_type, valid_values)

    def find_case_with_invalid_field_value(
        self, workspace_id: str, field_id: str, field_type: str, valid_values: Iterable[str]
    ) -> Case | None:
        return find_invalid_field_value(self._ordered(workspace_id), field_id, field_type, valid_values)
