"""Casebook configuration: repository backend selection and storage limits."""

from typing import Literal

from pydantic_settings import BaseSettings

RepositoryBackend = Literal["memory", "document"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Repository
    repository_backend: RepositoryBackend = "memory"
    database_url: str = "sqlite:///data/casebook.db"
    collection_prefix: str = ""  # Empty = no prefix (tests use a per-run prefix)

    # Embeddings (Knowledge and Memory share one dimension; others never match)
    embedding_dimension: int = 768

    # Pagination
    default_page_size: int = 100

    # Auth tokens
    token_ttl_hours: int = 168  # 7 days

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "CASEBOOK_",
        "extra": "ignore",
    }


settings = Settings()
