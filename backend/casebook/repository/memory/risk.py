"""In-memory Risk and Response stores and the Risk-Response join table."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from casebook.errors import NotFoundError
from casebook.models import Response, Risk, RiskResponse
from casebook.repository.identity import clone, clone_all, stamp_new, stamp_update, utcnow
from casebook.repository.interfaces import (
    ResponseRepository,
    RiskRepository,
    RiskResponseRepository,
)
from casebook.repository.memory.base import WorkspaceStore

logger = logging.getLogger(__name__)


class MemoryRiskRepository(WorkspaceStore[Risk], RiskRepository):
    kind = "risk"

    def create(self, workspace_id: str, risk: Risk) -> Risk:
        with self._lock.write():
            stored = stamp_new(risk)
            stored.id = self._next_id(workspace_id)
            self._writable_bucket(workspace_id)[stored.id] = stored
            return clone(stored)

    def get(self, workspace_id: str, risk_id: int) -> Risk:
        with self._lock.read():
            return clone(self._require(workspace_id, risk_id))

    def list(self, workspace_id: str) -> list[Risk]:
        with self._lock.read():
            return clone_all(sorted(self._bucket(workspace_id).values(), key=lambda r: r.id))

    def update(self, workspace_id: str, risk: Risk) -> Risk:
        with self._lock.write():
            existing = self._require(workspace_id, risk.id)
            stored = stamp_update(risk, existing)
            self._writable_bucket(workspace_id)[risk.id] = stored
            return clone(stored)

    def delete(self, workspace_id: str, risk_id: int) -> None:
        with self._lock.write():
            self._pop(workspace_id, risk_id)


class MemoryResponseRepository(WorkspaceStore[Response], ResponseRepository):
    kind = "response"

    def create(self, workspace_id: str, response: Response) -> Response:
        with self._lock.write():
            stored = stamp_new(response)
            stored.id = self._next_id(workspace_id)
            self._writable_bucket(workspace_id)[stored.id] = stored
            return clone(stored)

    def get(self, workspace_id: str, response_id: int) -> Response:
        with self._lock.read():
            return clone(self._require(workspace_id, response_id))

    def list(self, workspace_id: str) -> list[Response]:
        with self._lock.read():
            return clone_all(sorted(self._bucket(workspace_id).values(), key=lambda r: r.id))

    def update(self, workspace_id: str, response: Response) -> Response:
        with self._lock.write():
            existing = self._require(workspace_id, response.id)
            stored = stamp_update(response, existing)
            self._writable_bucket(workspace_id)[response.id] = stored
            return clone(stored)

    def delete(self, workspace_id: str, response_id: int) -> None:
        with self._lock.write():
            self._pop(workspace_id, response_id)


class MemoryRiskResponseRepository(WorkspaceStore[RiskResponse], RiskResponseRepository):
    """Join rows keyed by ``(risk_id, response_id)``.

    Deleting a Risk or Response does not touch this table; callers invoke
    ``delete_by_risk`` / ``delete_by_response``. Until then the getters skip
    links whose target is gone.
    """

    kind = "risk_response"

    def __init__(self, risks: RiskRepository, responses: ResponseRepository) -> None:
        super().__init__()
        self._risks = risks
        self._responses = responses

    def link(self, workspace_id: str, risk_id: int, response_id: int) -> None:
        self._risks.get(workspace_id, risk_id)
        self._responses.get(workspace_id, response_id)
        with self._lock.write():
            bucket = self._writable_bucket(workspace_id)
            if (risk_id, response_id) not in bucket:
                bucket[(risk_id, response_id)] = RiskResponse(
                    risk_id=risk_id, response_id=response_id, created_at=utcnow()
                )

    def unlink(self, workspace_id: str, risk_id: int, response_id: int) -> None:
        with self._lock.write():
            self._pop(workspace_id, (risk_id, response_id))

    def _response_ids(self, workspace_id: str, risk_id: int) -> list[int]:
        with self._lock.read():
            return [resp for (risk, resp) in self._bucket(workspace_id) if risk == risk_id]

    def _risk_ids(self, workspace_id: str, response_id: int) -> list[int]:
        with self._lock.read():
            return [risk for (risk, resp) in self._bucket(workspace_id) if resp == response_id]

    def get_responses_by_risk(self, workspace_id: str, risk_id: int) -> list[Response]:
        responses = []
        for response_id in self._response_ids(workspace_id, risk_id):
            try:
                responses.append(self._responses.get(workspace_id, response_id))
            except NotFoundError:
                logger.debug("Skipping broken link risk=%d response=%d", risk_id, response_id)
        return responses

    def get_responses_by_risks(self, workspace_id: str, risk_ids: Iterable[int]) -> dict[int, list[Response]]:
        return {risk_id: self.get_responses_by_risk(workspace_id, risk_id) for risk_id in risk_ids}

    def get_risks_by_response(self, workspace_id: str, response_id: int) -> list[Risk]:
        risks = []
        for risk_id in self._risk_ids(workspace_id, response_id):
            try:
                risks.append(self._risks.get(workspace_id, risk_id))
            except NotFoundError:
                logger.debug("Skipping broken link risk=%d response=%d", risk_id, response_id)
        return risks

    def get_risks_by_responses(self, workspace_id: str, response_ids: Iterable[int]) -> dict[int, list[Risk]]:
        return {response_id: self.get_risks_by_response(workspace_id, response_id) for response_id in response_ids}

    def delete_by_risk(self, workspace_id: str, risk_id: int) -> int:
        with self._lock.write():
            bucket = self._bucket(workspace_id)
            doomed = [key for key in bucket if key[0] == risk_id]
            for key in doomed:
                del bucket[key]
            return len(doomed)

    def delete_by_response(self, workspace_id: str, response_id: int) -> int:
        with self._lock.write():
            bucket = self._bucket(workspace_id)
            doomed = [key for key in bucket if key[1] == response_id]
            for key in doomed:
                del bucket[key]
            return len(doomed)
