"""Document-backed Risk and Response stores and their join collection."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from casebook.errors import NotFoundError
from casebook.models import Response, Risk, RiskResponse
from casebook.repository.document.base import DocumentCollection
from casebook.repository.document.store import DocumentStore
from casebook.repository.identity import utcnow
from casebook.repository.interfaces import (
    ResponseRepository,
    RiskRepository,
    RiskResponseRepository,
)

logger = logging.getLogger(__name__)


class DocumentRiskRepository(DocumentCollection[Risk], RiskRepository):
    kind = "risk"
    model = Risk

    def create(self, workspace_id: str, risk: Risk) -> Risk:
        return self._insert_numbered(workspace_id, risk)

    def get(self, workspace_id: str, risk_id: int) -> Risk:
        return self._get(workspace_id, risk_id)

    def list(self, workspace_id: str) -> list[Risk]:
        return sorted(self._all(workspace_id), key=lambda r: r.id)

    def update(self, workspace_id: str, risk: Risk) -> Risk:
        return self._replace(workspace_id, risk)

    def delete(self, workspace_id: str, risk_id: int) -> None:
        self._remove(workspace_id, risk_id)


class DocumentResponseRepository(DocumentCollection[Response], ResponseRepository):
    kind = "response"
    model = Response

    def create(self, workspace_id: str, response: Response) -> Response:
        return self._insert_numbered(workspace_id, response)

    def get(self, workspace_id: str, response_id: int) -> Response:
        return self._get(workspace_id, response_id)

    def list(self, workspace_id: str) -> list[Response]:
        return sorted(self._all(workspace_id), key=lambda r: r.id)

    def update(self, workspace_id: str, response: Response) -> Response:
        return self._replace(workspace_id, response)

    def delete(self, workspace_id: str, response_id: int) -> None:
        self._remove(workspace_id, response_id)


class DocumentRiskResponseRepository(DocumentCollection[RiskResponse], RiskResponseRepository):
    """Join documents keyed ``"{risk_id}:{response_id}"`` with ``ref`` = risk ID."""

    kind = "risk_response"
    model = RiskResponse

    def __init__(self, store: DocumentStore, risks: RiskRepository, responses: ResponseRepository) -> None:
        super().__init__(store)
        self._risks = risks
        self._responses = responses

    def link(self, workspace_id: str, risk_id: int, response_id: int) -> None:
        self._risks.get(workspace_id, risk_id)
        self._responses.get(workspace_id, response_id)
        row = RiskResponse(risk_id=risk_id, response_id=response_id, created_at=utcnow())
        self._store.insert_if_absent(self._coll(workspace_id), row.key, self._dump(row), ref=risk_id)

    def unlink(self, workspace_id: str, risk_id: int, response_id: int) -> None:
        if not self._store.delete(self._coll(workspace_id), f"{risk_id}:{response_id}"):
            raise NotFoundError(self.kind, (risk_id, response_id), workspace_id)

    def _links(self, workspace_id: str) -> list[RiskResponse]:
        return self._all(workspace_id)

    def get_responses_by_risk(self, workspace_id: str, risk_id: int) -> list[Response]:
        return self.get_responses_by_risks(workspace_id, [risk_id])[risk_id]

    def get_responses_by_risks(self, workspace_id: str, risk_ids: Iterable[int]) -> dict[int, list[Response]]:
        result: dict[int, list[Response]] = {risk_id: [] for risk_id in risk_ids}
        for data in self._store.scan_refs(self._coll(workspace_id), result):
            link = self._load(data)
            try:
                result[link.risk_id].append(self._responses.get(workspace_id, link.response_id))
            except NotFoundError:
                logger.debug("Skipping broken link risk=%d response=%d", link.risk_id, link.response_id)
        return result

    def get_risks_by_response(self, workspace_id: str, response_id: int) -> list[Risk]:
        return self.get_risks_by_responses(workspace_id, [response_id])[response_id]

    def get_risks_by_responses(self, workspace_id: str, response_ids: Iterable[int]) -> dict[int, list[Risk]]:
        result: dict[int, list[Risk]] = {response_id: [] for response_id in response_ids}
        for link in self._links(workspace_id):
            if link.response_id not in result:
                continue
            try:
                result[link.response_id].append(self._risks.get(workspace_id, link.risk_id))
            except NotFoundError:
                logger.debug("Skipping broken link risk=%d response=%d", link.risk_id, link.response_id)
        return result

    def delete_by_risk(self, workspace_id: str, risk_id: int) -> int:
        return self._store.delete_refs(self._coll(workspace_id), risk_id)

    def delete_by_response(self, workspace_id: str, response_id: int) -> int:
        return self._store.delete_where(
            self._coll(workspace_id),
            lambda data: data.get("response_id") == response_id,
        )
