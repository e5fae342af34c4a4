"""Repository contracts implemented by the memory and document adapters.

Every store takes ``workspace_id`` first, except the Slack user directory,
Slack channel history and session tokens, which are installation-wide.
Missing entities raise ``NotFoundError``; both adapters must be
indistinguishable to callers (errors, ordering, copies).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from casebook.models import (
    Action,
    AssistLog,
    Case,
    Knowledge,
    Memory,
    Response,
    Risk,
    SlackMessage,
    SlackUser,
    SlackUserMetadata,
    Source,
    Token,
)
from casebook.models.types import CaseStatus


class CaseRepository(ABC):
    @abstractmethod
    def create(self, workspace_id: str, case: Case) -> Case: ...

    @abstractmethod
    def get(self, workspace_id: str, case_id: int) -> Case: ...

    @abstractmethod
    def list(self, workspace_id: str, status: CaseStatus | None = None) -> list[Case]:
        """All cases of the workspace in ascending ID order."""

    @abstractmethod
    def update(self, workspace_id: str, case: Case) -> Case: ...

    @abstractmethod
    def delete(self, workspace_id: str, case_id: int) -> None:
        """Delete the case, then its Actions, Knowledge and Memory."""

    @abstractmethod
    def get_by_slack_channel_id(self, workspace_id: str, channel_id: str) -> Case | None: ...

    @abstractmethod
    def count_field_values(
        self, workspace_id: str, field_id: str, field_type: str, valid_values: Iterable[str]
    ) -> tuple[int, int]: ...

    @abstractmethod
    def find_case_with_invalid_field_value(
        self, workspace_id: str, field_id: str, field_type: str, valid_values: Iterable[str]
    ) -> Case | None: ...


class ActionRepository(ABC):
    @abstractmethod
    def create(self, workspace_id: str, action: Action) -> Action: ...

    @abstractmethod
    def get(self, workspace_id: str, action_id: int) -> Action: ...

    @abstractmethod
    def list(self, workspace_id: str) -> list[Action]: ...

    @abstractmethod
    def update(self, workspace_id: str, action: Action) -> Action: ...

    @abstractmethod
    def delete(self, workspace_id: str, action_id: int) -> None: ...

    @abstractmethod
    def get_by_case(self, workspace_id: str, case_id: int) -> list[Action]: ...

    @abstractmethod
    def get_by_cases(self, workspace_id: str, case_ids: Iterable[int]) -> dict[int, list[Action]]:
        """Every requested case ID gets an entry, possibly an empty list."""

    @abstractmethod
    def delete_by_case(self, workspace_id: str, case_id: int) -> int: ...


class KnowledgeRepository(ABC):
    @abstractmethod
    def create(self, workspace_id: str, knowledge: Knowledge) -> Knowledge: ...

    @abstractmethod
    def get(self, workspace_id: str, knowledge_id: str) -> Knowledge: ...

    @abstractmethod
    def update(self, workspace_id: str, knowledge: Knowledge) -> Knowledge: ...

    @abstractmethod
    def delete(self, workspace_id: str, knowledge_id: str) -> None: ...

    @abstractmethod
    def list_by_case_id(self, workspace_id: str, case_id: int) -> list[Knowledge]: ...

    @abstractmethod
    def list_by_case_ids(self, workspace_id: str, case_ids: Iterable[int]) -> dict[int, list[Knowledge]]: ...

    @abstractmethod
    def list_by_source_id(self, workspace_id: str, source_id: str) -> list[Knowledge]: ...

    @abstractmethod
    def list_with_pagination(self, workspace_id: str, limit: int, offset: int) -> tuple[list[Knowledge], int]: ...

    @abstractmethod
    def list_page(self, workspace_id: str, limit: int, cursor: str = "") -> tuple[list[Knowledge], str]: ...

    @abstractmethod
    def find_by_embedding(self, workspace_id: str, embedding: list[float], limit: int) -> list[Knowledge]: ...

    @abstractmethod
    def delete_by_case(self, workspace_id: str, case_id: int) -> int: ...


class MemoryRepository(ABC):
    @abstractmethod
    def create(self, workspace_id: str, case_id: int, memory: Memory) -> Memory: ...

    @abstractmethod
    def get(self, workspace_id: str, case_id: int, memory_id: str) -> Memory: ...

    @abstractmethod
    def update(self, workspace_id: str, case_id: int, memory: Memory) -> Memory: ...

    @abstractmethod
    def delete(self, workspace_id: str, case_id: int, memory_id: str) -> None: ...

    @abstractmethod
    def list(self, workspace_id: str, case_id: int) -> list[Memory]:
        """Newest first."""

    @abstractmethod
    def find_by_embedding(
        self, workspace_id: str, case_id: int, embedding: list[float], limit: int
    ) -> list[Memory]: ...

    @abstractmethod
    def delete_by_case(self, workspace_id: str, case_id: int) -> int: ...


class SourceRepository(ABC):
    @abstractmethod
    def create(self, workspace_id: str, source: Source) -> Source: ...

    @abstractmethod
    def get(self, workspace_id: str, source_id: str) -> Source: ...

    @abstractmethod
    def list(self, workspace_id: str) -> list[Source]: ...

    @abstractmethod
    def update(self, workspace_id: str, source: Source) -> Source: ...

    @abstractmethod
    def delete(self, workspace_id: str, source_id: str) -> None: ...


class SlackUserRepository(ABC):
    @abstractmethod
    def get_all(self) -> list[SlackUser]: ...

    @abstractmethod
    def get_by_id(self, user_id: str) -> SlackUser: ...

    @abstractmethod
    def get_by_ids(self, user_ids: Iterable[str]) -> dict[str, SlackUser]:
        """Unknown IDs are omitted from the result."""

    @abstractmethod
    def save_many(self, users: Iterable[SlackUser]) -> None: ...

    @abstractmethod
    def delete_all(self) -> None: ...

    @abstractmethod
    def get_metadata(self) -> SlackUserMetadata:
        """A zero-value record when nothing was saved yet."""

    @abstractmethod
    def save_metadata(self, metadata: SlackUserMetadata) -> None: ...


class CaseMessageRepository(ABC):
    @abstractmethod
    def put(self, workspace_id: str, case_id: int, message: SlackMessage) -> None:
        """Upsert by message ID."""

    @abstractmethod
    def list(
        self, workspace_id: str, case_id: int, limit: int, cursor: str = ""
    ) -> tuple[list[SlackMessage], str]: ...

    @abstractmethod
    def prune(self, workspace_id: str, case_id: int, before: datetime) -> int:
        """Delete messages created before ``before``; return how many."""


class SlackMessageRepository(ABC):
    @abstractmethod
    def put_message(self, message: SlackMessage) -> None: ...

    @abstractmethod
    def list_messages(
        self,
        channel_id: str,
        start: datetime | None,
        end: datetime | None,
        limit: int,
        cursor: str = "",
    ) -> tuple[list[SlackMessage], str]: ...

    @abstractmethod
    def prune_messages(self, channel_id: str | None, before: datetime) -> int: ...


class AssistLogRepository(ABC):
    @abstractmethod
    def create(self, workspace_id: str, case_id: int, log: AssistLog) -> AssistLog: ...

    @abstractmethod
    def list(self, workspace_id: str, case_id: int, limit: int, offset: int) -> tuple[list[AssistLog], int]: ...


class RiskRepository(ABC):
    @abstractmethod
    def create(self, workspace_id: str, risk: Risk) -> Risk: ...

    @abstractmethod
    def get(self, workspace_id: str, risk_id: int) -> Risk: ...

    @abstractmethod
    def list(self, workspace_id: str) -> list[Risk]: ...

    @abstractmethod
    def update(self, workspace_id: str, risk: Risk) -> Risk: ...

    @abstractmethod
    def delete(self, workspace_id: str, risk_id: int) -> None: ...


class ResponseRepository(ABC):
    @abstractmethod
    def create(self, workspace_id: str, response: Response) -> Response: ...

    @abstractmethod
    def get(self, workspace_id: str, response_id: int) -> Response: ...

    @abstractmethod
    def list(self, workspace_id: str) -> list[Response]: ...

    @abstractmethod
    def update(self, workspace_id: str, response: Response) -> Response: ...

    @abstractmethod
    def delete(self, workspace_id: str, response_id: int) -> None: ...


class RiskResponseRepository(ABC):
    @abstractmethod
    def link(self, workspace_id: str, risk_id: int, response_id: int) -> None:
        """Idempotent. Both sides must exist."""

    @abstractmethod
    def unlink(self, workspace_id: str, risk_id: int, response_id: int) -> None: ...

    @abstractmethod
    def get_responses_by_risk(self, workspace_id: str, risk_id: int) -> list[Response]: ...

    @abstractmethod
    def get_responses_by_risks(self, workspace_id: str, risk_ids: Iterable[int]) -> dict[int, list[Response]]: ...

    @abstractmethod
    def get_risks_by_response(self, workspace_id: str, response_id: int) -> list[Risk]: ...

    @abstractmethod
    def get_risks_by_responses(self, workspace_id: str, response_ids: Iterable[int]) -> dict[int, list[Risk]]: ...

    @abstractmethod
    def delete_by_risk(self, workspace_id: str, risk_id: int) -> int: ...

    @abstractmethod
    def delete_by_response(self, workspace_id: str, response_id: int) -> int: ...


class Repository(ABC):
    """Facade with one accessor per entity store plus token persistence."""

    @abstractmethod
    def case(self) -> CaseRepository: ...

    @abstractmethod
    def action(self) -> ActionRepository: ...

    @abstractmethod
    def knowledge(self) -> KnowledgeRepository: ...

    @abstractmethod
    def memory(self) -> MemoryRepository: ...

    @abstractmethod
    def source(self) -> SourceRepository: ...

    @abstractmethod
    def slack_user(self) -> SlackUserRepository: ...

    @abstractmethod
    def slack(self) -> SlackMessageRepository: ...

    @abstractmethod
    def case_message(self) -> CaseMessageRepository: ...

    @abstractmethod
    def assist_log(self) -> AssistLogRepository: ...

    @abstractmethod
    def risk(self) -> RiskRepository: ...

    @abstractmethod
    def response(self) -> ResponseRepository: ...

    @abstractmethod
    def risk_response(self) -> RiskResponseRepository: ...

    @abstractmethod
    def put_token(self, token: Token) -> None:
        """Validate then store. Raises ValidationError for malformed tokens."""

    @abstractmethod
    def get_token(self, token_id: str) -> Token: ...

    @abstractmethod
    def delete_token(self, token_id: str) -> None: ...

    def close(self) -> None:
        """Release backend resources. No-op by default."""
