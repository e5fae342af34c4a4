"""Identity & copy guard shared by both adapters.

- Relational entities (Case, Action, Risk, Response) get per-workspace
  auto-increment integer IDs; the counters live in each adapter.
- Content-addressed entities (Knowledge, Memory, Source, AssistLog) get a
  uuid4 string unless the caller already supplied a non-empty ID.
- Every value crossing the adapter boundary is deep-copied, in both
  directions, so callers never alias stored state.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import TypeVar
from uuid import uuid4

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

_clock_lock = threading.Lock()
_last_now: datetime | None = None


def utcnow() -> datetime:
    """Current UTC time, strictly greater than any earlier return value.

    Two writes landing in the same clock tick still get distinct, ordered
    timestamps, so ``updated_at`` always moves forward.
    """
    global _last_now
    with _clock_lock:
        now = datetime.now(timezone.utc)
        if _last_now is not None and now <= _last_now:
            now = _last_now + timedelta(microseconds=1)
        _last_now = now
        return now


def new_id() -> str:
    return str(uuid4())


def resolve_id(candidate: str | None) -> str:
    """Keep a caller-supplied ID verbatim; otherwise generate one."""
    return candidate if candidate else new_id()


def clone(model: ModelT) -> ModelT:
    return model.model_copy(deep=True)


def clone_all(models: Iterable[ModelT]) -> list[ModelT]:
    return [m.model_copy(deep=True) for m in models]


def stamp_new(model: ModelT, now: datetime | None = None) -> ModelT:
    """Return a copy with both timestamps set to ``now``.

    Caller-supplied timestamps are discarded.
    """
    now = now or utcnow()
    updates = {"created_at": now}
    if "updated_at" in type(model).model_fields:
        updates["updated_at"] = now
    return model.model_copy(update=updates, deep=True)


def stamp_update(model: ModelT, existing: BaseModel) -> ModelT:
    """Return a copy that keeps ``existing.created_at`` and refreshes ``updated_at``."""
    return model.model_copy(
        update={"created_at": existing.created_at, "updated_at": utcnow()},
        deep=True,
    )
