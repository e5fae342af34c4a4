"""Shared test fixtures for casebook backend tests."""

import os
import sys

import pytest

# Ensure backend is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("CASEBOOK_DATABASE_URL", "sqlite:///:memory:")

from casebook.db.database import create_db_and_tables, create_db_engine
from casebook.repository.document.repository import DocumentRepository
from casebook.repository.memory import InMemoryRepository

WS = "ws1"


@pytest.fixture
def in_memory_engine():
    engine = create_db_engine("sqlite:///:memory:")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(params=["memory", "document"])
def repo(request, in_memory_engine):
    """Every repository test runs against both adapters."""
    if request.param == "memory":
        return InMemoryRepository()
    return DocumentRepository(in_memory_engine, prefix="test")
