"""In-process adapter backed by per-store locked dictionaries."""

from casebook.repository.memory.repository import InMemoryRepository

__all__ = ["InMemoryRepository"]
