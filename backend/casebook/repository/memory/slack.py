"""In-memory Slack user directory and channel message history.

Both are installation-wide: Slack user and channel IDs are unique across
workspaces of one installation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from casebook.errors import NotFoundError
from casebook.models import SlackMessage, SlackUser, SlackUserMetadata
from casebook.repository.identity import clone, clone_all
from casebook.repository.interfaces import SlackMessageRepository, SlackUserRepository
from casebook.repository.memory.lock import RWLock
from casebook.repository.pagination import newest_first, paginate, within_window

logger = logging.getLogger(__name__)


class MemorySlackUserRepository(SlackUserRepository):
    def __init__(self) -> None:
        self._lock = RWLock()
        self._users: dict[str, SlackUser] = {}
        self._metadata: SlackUserMetadata | None = None

    def get_all(self) -> list[SlackUser]:
        with self._lock.read():
            return clone_all(self._users.values())

    def get_by_id(self, user_id: str) -> SlackUser:
        with self._lock.read():
            user = self._users.get(user_id)
            if user is None:
                raise NotFoundError("slack_user", user_id)
            return clone(user)

    def get_by_ids(self, user_ids: Iterable[str]) -> dict[str, SlackUser]:
        with self._lock.read():
            return {uid: clone(self._users[uid]) for uid in user_ids if uid in self._users}

    def save_many(self, users: Iterable[SlackUser]) -> None:
        batch = clone_all(users)
        with self._lock.write():
            for user in batch:
                self._users[user.id] = user
        logger.info("Saved %d Slack users", len(batch))

    def delete_all(self) -> None:
        with self._lock.write():
            count = len(self._users)
            self._users.clear()
        logger.info("Deleted %d Slack users", count)

    def get_metadata(self) -> SlackUserMetadata:
        with self._lock.read():
            if self._metadata is None:
                return SlackUserMetadata()
            return clone(self._metadata)

    def save_metadata(self, metadata: SlackUserMetadata) -> None:
        with self._lock.write():
            self._metadata = clone(metadata)


class MemorySlackMessageRepository(SlackMessageRepository):
    """Channel history keyed by ``(channel_id, message ts)``."""

    def __init__(self) -> None:
        self._lock = RWLock()
        self._messages: dict[tuple[str, str], SlackMessage] = {}

    def put_message(self, message: SlackMessage) -> None:
        with self._lock.write():
            self._messages[(message.channel_id, message.id)] = clone(message)

    def list_messages(
        self,
        channel_id: str,
        start: datetime | None,
        end: datetime | None,
        limit: int,
        cursor: str = "",
    ) -> tuple[list[SlackMessage], str]:
        with self._lock.read():
            matching = [
                m for (cid, _), m in self._messages.items()
                if cid == channel_id and within_window(m.created_at, start, end)
            ]
            page, next_cursor = paginate(newest_first(matching), limit, cursor)
            return clone_all(page), next_cursor

    def prune_messages(self, channel_id: str | None, before: datetime) -> int:
        with self._lock.write():
            doomed = [
                key for key, m in self._messages.items()
                if (channel_id is None or key[0] == channel_id) and m.created_at < before
            ]
            for key in doomed:
                del self._messages[key]
        logger.info("Pruned %d Slack messages (channel=%s)", len(doomed), channel_id or "*")
        return len(doomed)
