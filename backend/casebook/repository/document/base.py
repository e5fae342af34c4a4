"""Model <-> document mapping shared by the document-backed stores."""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from casebook.errors import BackendError, NotFoundError
from casebook.repository.document.store import DocumentStore
from casebook.repository.identity import stamp_new, stamp_update

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = logging.getLogger(__name__)


class DocumentCollection(Generic[ModelT]):
    """Base for one entity kind stored as JSON documents.

    Subclasses set ``kind`` and ``model``; the collection for a workspace is
    ``store.collection(kind, workspace_id, *scope)``.
    """

    kind: str = "entity"
    model: type[ModelT]

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def _coll(self, workspace_id: str, *scope: Any) -> str:
        return self._store.collection(self.kind, workspace_id, *scope)

    def _load(self, data: dict) -> ModelT:
        return self.model.model_validate(data)

    @staticmethod
    def _dump(model: BaseModel) -> dict:
        return model.model_dump(mode="json")

    def _get(self, workspace_id: str, key: Any, *scope: Any) -> ModelT:
        data = self._store.get(self._coll(workspace_id, *scope), str(key))
        if data is None:
            raise NotFoundError(self.kind, key, workspace_id)
        return self._load(data)

    def _all(self, workspace_id: str, *scope: Any) -> list[ModelT]:
        return [self._load(d) for d in self._store.scan(self._coll(workspace_id, *scope))]

    def _insert(self, workspace_id: str, model: ModelT, *scope: Any, ref: Any = "", **assigned: Any) -> ModelT:
        """Stamp timestamps, assign ``assigned`` fields, then write."""
        stored = stamp_new(model)
        for name, value in assigned.items():
            setattr(stored, name, value)
        self._store.put(self._coll(workspace_id, *scope), str(stored.id), self._dump(stored), ref=ref)
        logger.debug("Created %s %s in workspace %s", self.kind, stored.id, workspace_id)
        return stored

    def _insert_numbered(self, workspace_id: str, model: ModelT, ref: Any = "", **assigned: Any) -> ModelT:
        """Assign the next auto-increment ID and write, never overwriting.

        A taken ID means the counter and the collection disagree; that is
        raised rather than replacing the existing document.
        """
        coll = self._coll(workspace_id)
        stored = stamp_new(model)
        stored.id = self._store.next_id(coll)
        for name, value in assigned.items():
            setattr(stored, name, value)
        if not self._store.insert_if_absent(coll, str(stored.id), self._dump(stored), ref=ref):
            raise BackendError(
                "auto-increment id already taken",
                kind=self.kind,
                key=stored.id,
                workspace_id=workspace_id,
            )
        logger.debug("Created %s %s in workspace %s", self.kind, stored.id, workspace_id)
        return stored

    def _replace(self, workspace_id: str, model: ModelT, *scope: Any, ref: Any = None, **assigned: Any) -> ModelT:
        """Overwrite an existing document, keeping its ``created_at``."""
        def mutate(current: dict) -> dict:
            stored = stamp_update(model, self._load(current))
            for name, value in assigned.items():
                setattr(stored, name, value)
            return self._dump(stored)

        data = self._store.update(self._coll(workspace_id, *scope), str(model.id), mutate, ref=ref)
        if data is None:
            raise NotFoundError(self.kind, model.id, workspace_id)
        return self._load(data)

    def _remove(self, workspace_id: str, key: Any, *scope: Any) -> None:
        if not self._store.delete(self._coll(workspace_id, *scope), str(key)):
            raise NotFoundError(self.kind, key, workspace_id)
        logger.debug("Deleted %s %s in workspace %s", self.kind, key, workspace_id)
