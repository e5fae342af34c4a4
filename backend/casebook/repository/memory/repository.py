"""In-process repository: one independently locked store per entity kind."""

from __future__ import annotations

from casebook.errors import NotFoundError
from casebook.models import Token
from casebook.models.token import validate_token_id
from casebook.repository.identity import clone
from casebook.repository.interfaces import Repository
from casebook.repository.memory.action import MemoryActionRepository
from casebook.repository.memory.assist_log import MemoryAssistLogRepository
from casebook.repository.memory.case import MemoryCaseRepository
from casebook.repository.memory.case_message import MemoryCaseMessageRepository
from casebook.repository.memory.knowledge import MemoryKnowledgeRepository
from casebook.repository.memory.lock import RWLock
from casebook.repository.memory.memory import MemoryMemoryRepository
from casebook.repository.memory.risk import (
    MemoryResponseRepository,
    MemoryRiskRepository,
    MemoryRiskResponseRepository,
)
from casebook.repository.memory.slack import MemorySlackMessageRepository, MemorySlackUserRepository
from casebook.repository.memory.source import MemorySourceRepository


class InMemoryRepository(Repository):
    """Map-backed repository for tests and single-process deployments.

    Usage:
        repo = InMemoryRepository()  # or InMemoryRepository(embedding_dimension=768)
        case = repo.case().create("ws1", Case(title="C1"))
    """

    def __init__(self, embedding_dimension: int | None = None) -> None:
        self._action = MemoryActionRepository()
        self._knowledge = MemoryKnowledgeRepository(embedding_dimension)
        self._memory = MemoryMemoryRepository(embedding_dimension)
        self._case = MemoryCaseRepository(self._action, self._knowledge, self._memory)
        self._source = MemorySourceRepository()
        self._slack_user = MemorySlackUserRepository()
        self._slack = MemorySlackMessageRepository()
        self._case_message = MemoryCaseMessageRepository()
        self._assist_log = MemoryAssistLogRepository()
        self._risk = MemoryRiskRepository()
        self._response = MemoryResponseRepository()
        self._risk_response = MemoryRiskResponseRepository(self._risk, self._response)

        self._token_lock = RWLock()
        self._tokens: dict[str, Token] = {}

    def case(self) -> MemoryCaseRepository:
        return self._case

    def action(self) -> MemoryActionRepository:
        return self._action

    def knowledge(self) -> MemoryKnowledgeRepository:
        return self._knowledge

    def memory(self) -> MemoryMemoryRepository:
        return self._memory

    def source(self) -> MemorySourceRepository:
        return self._source

    def slack_user(self) -> MemorySlackUserRepository:
        return self._slack_user

    def slack(self) -> MemorySlackMessageRepository:
        return self._slack

    def case_message(self) -> MemoryCaseMessageRepository:
        return self._case_message

    def assist_log(self) -> MemoryAssistLogRepository:
        return self._assist_log

    def risk(self) -> MemoryRiskRepository:
        return self._risk

    def response(self) -> MemoryResponseRepository:
        return self._response

    def risk_response(self) -> MemoryRiskResponseRepository:
        return self._risk_response

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def put_token(self, token: Token) -> None:
        token.validate_token()
        with self._token_lock.write():
            self._tokens[token.id] = clone(token)

    def get_token(self, token_id: str) -> Token:
        validate_token_id(token_id)
        with self._token_lock.read():
            token = self._tokens.get(token_id)
            if token is None:
                raise NotFoundError("token", token_id)
            return clone(token)

    def delete_token(self, token_id: str) -> None:
        validate_token_id(token_id)
        with self._token_lock.write():
            if self._tokens.pop(token_id, None) is None:
                raise NotFoundError("token", token_id)
