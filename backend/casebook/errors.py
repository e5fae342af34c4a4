"""Error taxonomy shared by every repository adapter.

- NotFoundError: missing workspace, entity, link or token (404-equivalent)
- ValidationError: malformed input such as a bad token or a field value whose
  shape does not match its declared type (400-equivalent)
- BackendError: storage transport failures (500-equivalent, never retried here)

Every error carries a ``context`` dict (entity kind, key, workspace, ...) so
callers can log it without re-deriving anything.
"""

from __future__ import annotations

from typing import Any


class CasebookError(Exception):
    """Base class for all casebook errors."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = {k: v for k, v in context.items() if v is not None}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} ({details})"


class NotFoundError(CasebookError):
    """Raised when a workspace, entity, link or token does not exist."""

    def __init__(self, kind: str, key: Any = None, workspace_id: str | None = None, **context: Any) -> None:
        self.kind = kind
        self.key = key
        self.workspace_id = workspace_id
        super().__init__(
            f"{kind} not found",
            kind=kind,
            key=key,
            workspace_id=workspace_id,
            **context,
        )


class ValidationError(CasebookError):
    """Raised for malformed input that must be rejected before persistence."""


class BackendError(CasebookError):
    """Raised when the document database fails. Not retried by this layer."""
