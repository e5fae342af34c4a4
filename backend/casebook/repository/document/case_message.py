"""Document-backed case timeline messages: one collection per (workspace, case).

Re-putting a message deletes and re-inserts it, so it sorts as the latest
insertion among messages with the same ``created_at``.
"""

from __future__ import annotations

import logging
from datetime import datetime

from casebook.models import SlackMessage
from casebook.repository.document.base import DocumentCollection
from casebook.repository.interfaces import CaseMessageRepository
from casebook.repository.pagination import newest_first, paginate

logger = logging.getLogger(__name__)


class DocumentCaseMessageRepository(DocumentCollection[SlackMessage], CaseMessageRepository):
    kind = "case_message"
    model = SlackMessage

    def put(self, workspace_id: str, case_id: int, message: SlackMessage) -> None:
        self._store.put(self._coll(workspace_id, case_id), message.id, self._dump(message), move_to_end=True)

    def list(
        self, workspace_id: str, case_id: int, limit: int, cursor: str = ""
    ) -> tuple[list[SlackMessage], str]:
        return paginate(newest_first(self._all(workspace_id, case_id)), limit, cursor)

    def prune(self, workspace_id: str, case_id: int, before: datetime) -> int:
        count = self._store.delete_where(
            self._coll(workspace_id, case_id),
            lambda data: self._load(data).created_at < before,
        )
        logger.info("Pruned %d messages of case %d in workspace %s", count, case_id, workspace_id)
        return count
