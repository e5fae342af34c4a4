"""Repository layer: contracts, shared algorithms and the two adapters."""

from __future__ import annotations

import logging

from casebook.config import Settings, settings as default_settings
from casebook.repository.interfaces import Repository

logger = logging.getLogger(__name__)


def create_repository(config: Settings | None = None) -> Repository:
    """Build the adapter selected by ``repository_backend``."""
    config = config or default_settings

    if config.repository_backend == "document":
        from casebook.db.database import create_db_and_tables, create_db_engine
        from casebook.repository.document.repository import DocumentRepository

        engine = create_db_engine(config.database_url)
        create_db_and_tables(engine)
        logger.info("Using document repository (prefix=%r)", config.collection_prefix)
        return DocumentRepository(
            engine,
            prefix=config.collection_prefix,
            embedding_dimension=config.embedding_dimension,
        )

    from casebook.repository.memory import InMemoryRepository

    logger.info("Using in-memory repository")
    return InMemoryRepository(embedding_dimension=config.embedding_dimension)
