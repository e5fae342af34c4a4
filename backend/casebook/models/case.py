"""Case and its dynamically-typed field values.

A Case carries a ``field_values`` mapping of caller-defined fields. Each
FieldValue is a tagged union: ``type`` is the discriminant and the validator
below rejects any ``value`` whose shape does not match it, so downstream code
never has to guess what a value holds.

    type            value shape
    text/url/user   str
    select          str (option id)
    multi-select    list[str] (option ids)
    multi-user      list[str] (user ids)
    number          float (ints are widened, bools rejected)
    date            datetime, timezone-aware (RFC 3339 strings are parsed)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from casebook.errors import ValidationError
from casebook.models.types import CaseStatus, FieldType, normalize_case_status

STRING_TYPES = frozenset({"text", "url", "user", "select"})
LIST_TYPES = frozenset({"multi-select", "multi-user"})


def _coerce_datetime(field_id: str, raw: Any) -> datetime:
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError as exc:
            raise ValidationError("date field value is not RFC 3339", field_id=field_id, value=raw) from exc
    else:
        raise ValidationError("date field value must be a datetime", field_id=field_id)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class FieldValue(BaseModel):
    """A single value of a caller-defined case field."""

    field_id: str
    type: FieldType
    value: Any

    @field_validator("value")
    @classmethod
    def _value_matches_type(cls, value: Any, info: ValidationInfo) -> Any:
        field_type = info.data.get("type")
        field_id = info.data.get("field_id", "")
        if field_type is None:
            # type failed its own validation; pydantic reports that error
            return value

        if field_type in STRING_TYPES:
            if not isinstance(value, str):
                raise ValidationError("field value must be a string", field_id=field_id, type=field_type)
            return value

        if field_type in LIST_TYPES:
            if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
                raise ValidationError("field value must be a list of strings", field_id=field_id, type=field_type)
            if not all(isinstance(v, str) for v in value):
                raise ValidationError("field value must be a list of strings", field_id=field_id, type=field_type)
            return list(value)

        if field_type == "number":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError("field value must be a number", field_id=field_id, type=field_type)
            return float(value)

        if field_type == "date":
            return _coerce_datetime(field_id, value)

        raise ValidationError("unsupported field type", field_id=field_id, type=field_type)


class Case(BaseModel):
    """A tracked case. IDs are per-workspace auto-increment integers."""

    id: int = 0
    title: str = ""
    description: str = ""
    status: CaseStatus = "OPEN"
    assignee_ids: list[str] = Field(default_factory=list)
    slack_channel_id: str | None = None
    is_private: bool = False
    channel_user_ids: list[str] = Field(default_factory=list)
    field_values: dict[str, FieldValue] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        if value is None or value == "":
            return normalize_case_status(value)
        return value

