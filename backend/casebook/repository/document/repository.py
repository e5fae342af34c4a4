"""Document-database repository: every store shares one DocumentStore."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from casebook.errors import NotFoundError
from casebook.models import Token
from casebook.models.token import validate_token_id
from casebook.repository.document.action import DocumentActionRepository
from casebook.repository.document.assist_log import DocumentAssistLogRepository
from casebook.repository.document.case import DocumentCaseRepository
from casebook.repository.document.case_message import DocumentCaseMessageRepository
from casebook.repository.document.knowledge import DocumentKnowledgeRepository
from casebook.repository.document.memory import DocumentMemoryRepository
from casebook.repository.document.risk import (
    DocumentResponseRepository,
    DocumentRiskRepository,
    DocumentRiskResponseRepository,
)
from casebook.repository.document.slack import DocumentSlackMessageRepository, DocumentSlackUserRepository
from casebook.repository.document.source import DocumentSourceRepository
from casebook.repository.document.store import DocumentStore
from casebook.repository.interfaces import Repository


class DocumentRepository(Repository):
    """Repository persisted as JSON documents through SQLModel.

    Usage:
        engine = create_db_engine("sqlite:///data/casebook.db")
        create_db_and_tables(engine)
        repo = DocumentRepository(engine, prefix="prod")
    """

    def __init__(self, engine: Engine, prefix: str = "", embedding_dimension: int | None = None) -> None:
        self._engine = engine
        self._store = DocumentStore(engine, prefix=prefix)
        self._tokens = self._store.collection("token")

        self._action = DocumentActionRepository(self._store)
        self._knowledge = DocumentKnowledgeRepository(self._store, embedding_dimension)
        self._memory = DocumentMemoryRepository(self._store, embedding_dimension)
        self._case = DocumentCaseRepository(self._store, self._action, self._knowledge, self._memory)
        self._source = DocumentSourceRepository(self._store)
        self._slack_user = DocumentSlackUserRepository(self._store)
        self._slack = DocumentSlackMessageRepository(self._store)
        self._case_message = DocumentCaseMessageRepository(self._store)
        self._assist_log = DocumentAssistLogRepository(self._store)
        self._risk = DocumentRiskRepository(self._store)
        self._response = DocumentResponseRepository(self._store)
        self._risk_response = DocumentRiskResponseRepository(self._store, self._risk, self._response)

    @property
    def store(self) -> DocumentStore:
        return self._store

    def case(self) -> DocumentCaseRepository:
        return self._case

    def action(self) -> DocumentActionRepository:
        return self._action

    def knowledge(self) -> DocumentKnowledgeRepository:
        return self._knowledge

    def memory(self) -> DocumentMemoryRepository:
        return self._memory

    def source(self) -> DocumentSourceRepository:
        return self._source

    def slack_user(self) -> DocumentSlackUserRepository:
        return self._slack_user

    def slack(self) -> DocumentSlackMessageRepository:
        return self._slack

    def case_message(self) -> DocumentCaseMessageRepository:
        return self._case_message

    def assist_log(self) -> DocumentAssistLogRepository:
        return self._assist_log

    def risk(self) -> DocumentRiskRepository:
        return self._risk

    def response(self) -> DocumentResponseRepository:
        return self._response

    def risk_response(self) -> DocumentRiskResponseRepository:
        return self._risk_response

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def put_token(self, token: Token) -> None:
        token.validate_token()
        self._store.put(self._tokens, token.id, token.model_dump(mode="json"))

    def get_token(self, token_id: str) -> Token:
        validate_token_id(token_id)
        data = self._store.get(self._tokens, token_id)
        if data is None:
            raise NotFoundError("token", token_id)
        return Token.model_validate(data)

    def delete_token(self, token_id: str) -> None:
        validate_token_id(token_id)
        if not self._store.delete(self._tokens, token_id):
            raise NotFoundError("token", token_id)

    def close(self) -> None:
        self._engine.dispose()
