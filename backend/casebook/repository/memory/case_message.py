"""In-memory store of Slack messages mirrored into case timelines."""

from __future__ import annotations

import logging
from datetime import datetime

from casebook.models import SlackMessage
from casebook.repository.identity import clone, clone_all
from casebook.repository.interfaces import CaseMessageRepository
from casebook.repository.memory.base import WorkspaceStore
from casebook.repository.pagination import newest_first, paginate

logger = logging.getLogger(__name__)


class MemoryCaseMessageRepository(WorkspaceStore[SlackMessage], CaseMessageRepository):
    """Keys are ``(case_id, message_id)``; re-putting a message moves it to the end."""

    kind = "case_message"

    def put(self, workspace_id: str, case_id: int, message: SlackMessage) -> None:
        with self._lock.write():
            bucket = self._writable_bucket(workspace_id)
            bucket.pop((case_id, message.id), None)
            bucket[(case_id, message.id)] = clone(message)

    def list(
        self, workspace_id: str, case_id: int, limit: int, cursor: str = ""
    ) -> tuple[list[SlackMessage], str]:
        with self._lock.read():
            messages = [m for (cid, _), m in self._bucket(workspace_id).items() if cid == case_id]
            page, next_cursor = paginate(newest_first(messages), limit, cursor)
            return clone_all(page), next_cursor

    def prune(self, workspace_id: str, case_id: int, before: datetime) -> int:
        with self._lock.write():
            bucket = self._bucket(workspace_id)
            doomed = [key for key, m in bucket.items() if key[0] == case_id and m.created_at < before]
            for key in doomed:
                del bucket[key]
        logger.info("Pruned %d messages of case %d in workspace %s", len(doomed), case_id, workspace_id)
        return len(doomed)
