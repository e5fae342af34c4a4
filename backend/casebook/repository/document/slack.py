"""Document-backed Slack user directory and channel message history.

Layout (installation-wide, no workspace segment):
- ``slack_user``: one document per user
- ``slack_user_metadata``: the single ``refresh_status`` document
- ``slack_message``: one document per message, ``ref`` = channel ID
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from casebook.errors import NotFoundError
from casebook.models import SlackMessage, SlackUser, SlackUserMetadata
from casebook.repository.document.store import DocumentStore
from casebook.repository.interfaces import SlackMessageRepository, SlackUserRepository
from casebook.repository.pagination import newest_first, paginate, within_window

logger = logging.getLogger(__name__)

METADATA_DOC_ID = "refresh_status"


class DocumentSlackUserRepository(SlackUserRepository):
    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._users = store.collection("slack_user")
        self._metadata = store.collection("slack_user_metadata")

    def get_all(self) -> list[SlackUser]:
        return [SlackUser.model_validate(d) for d in self._store.scan(self._users)]

    def get_by_id(self, user_id: str) -> SlackUser:
        data = self._store.get(self._users, user_id)
        if data is None:
            raise NotFoundError("slack_user", user_id)
        return SlackUser.model_validate(data)

    def get_by_ids(self, user_ids: Iterable[str]) -> dict[str, SlackUser]:
        found = self._store.get_many(self._users, user_ids)
        return {uid: SlackUser.model_validate(data) for uid, data in found.items()}

    def save_many(self, users: Iterable[SlackUser]) -> None:
        written = self._store.put_many(self._users, ((u.id, u.model_dump(mode="json"), "") for u in users))
        logger.info("Saved %d Slack users", written)

    def delete_all(self) -> None:
        count = self._store.delete_collection(self._users)
        logger.info("Deleted %d Slack users", count)

    def get_metadata(self) -> SlackUserMetadata:
        data = self._store.get(self._metadata, METADATA_DOC_ID)
        if data is None:
            return SlackUserMetadata()
        return SlackUserMetadata.model_validate(data)

    def save_metadata(self, metadata: SlackUserMetadata) -> None:
        self._store.put(self._metadata, METADATA_DOC_ID, metadata.model_dump(mode="json"))


class DocumentSlackMessageRepository(SlackMessageRepository):
    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._messages = store.collection("slack_message")

    @staticmethod
    def _doc_id(channel_id: str, message_id: str) -> str:
        return f"{channel_id}/{message_id}"

    def put_message(self, message: SlackMessage) -> None:
        self._store.put(
            self._messages,
            self._doc_id(message.channel_id, message.id),
            message.model_dump(mode="json"),
            ref=message.channel_id,
        )

    def list_messages(
        self,
        channel_id: str,
        start: datetime | None,
        end: datetime | None,
        limit: int,
        cursor: str = "",
    ) -> tuple[list[SlackMessage], str]:
        messages = [SlackMessage.model_validate(d) for d in self._store.scan_refs(self._messages, [channel_id])]
        matching = [m for m in messages if within_window(m.created_at, start, end)]
        return paginate(newest_first(matching), limit, cursor)

    def prune_messages(self, channel_id: str | None, before: datetime) -> int:
        def expired(data: dict) -> bool:
            message = SlackMessage.model_validate(data)
            return (channel_id is None or message.channel_id == channel_id) and message.created_at < before

        count = self._store.delete_where(self._messages, expired)
        logger.info("Pruned %d Slack messages (channel=%s)", count, channel_id or "*")
        return count
