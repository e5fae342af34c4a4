"""Document-backed Action store; ``ref`` holds the owning case ID."""

from __future__ import annotations

from collections.abc import Iterable

from casebook.errors import ValidationError
from casebook.models import Action
from casebook.repository.document.base import DocumentCollection
from casebook.repository.interfaces import ActionRepository


class DocumentActionRepository(DocumentCollection[Action], ActionRepository):
    kind = "action"
    model = Action

    def create(self, workspace_id: str, action: Action) -> Action:
        if action.case_id <= 0:
            raise ValidationError("action requires a case_id", kind=self.kind, workspace_id=workspace_id)
        return self._insert_numbered(workspace_id, action, ref=action.case_id)

    def get(self, workspace_id: str, action_id: int) -> Action:
        return self._get(workspace_id, action_id)

    def list(self, workspace_id: str) -> list[Action]:
        return sorted(self._all(workspace_id), key=lambda a: a.id)

    def update(self, workspace_id: str, action: Action) -> Action:
        return self._replace(workspace_id, action, ref=action.case_id)

    def delete(self, workspace_id: str, action_id: int) -> None:
        self._remove(workspace_id, action_id)

    def get_by_case(self, workspace_id: str, case_id: int) -> list[Action]:
        return self.get_by_cases(workspace_id, [case_id])[case_id]

    def get_by_cases(self, workspace_id: str, case_ids: Iterable[int]) -> dict[int, list[Action]]:
        result: dict[int, list[Action]] = {case_id: [] for case_id in case_ids}
        found = [self._load(d) for d in self._store.scan_refs(self._coll(workspace_id), result)]
        for action in sorted(found, key=lambda a: a.id):
            result[action.case_id].append(action)
        return result

    def delete_by_case(self, workspace_id: str, case_id: int) -> int:
        return self._store.delete_refs(self._coll(workspace_id), case_id)
