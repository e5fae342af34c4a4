"""Enumerated value types shared by the domain models.

Status values are plain ``Literal`` aliases so they serialize as-is into the
document store. The ``parse_*`` helpers validate untrusted strings.
"""

from __future__ import annotations

from typing import Literal, get_args

from casebook.errors import ValidationError

CaseStatus = Literal["OPEN", "CLOSED"]

ActionStatus = Literal[
    "BACKLOG",
    "TODO",
    "IN_PROGRESS",
    "BLOCKED",
    "COMPLETED",
    "ABANDONED",
]

ResponseStatus = Literal[
    "backlog",
    "todo",
    "in-progress",
    "blocked",
    "completed",
    "abandoned",
]

FieldType = Literal[
    "text",
    "number",
    "select",
    "multi-select",
    "user",
    "multi-user",
    "date",
    "url",
]

SourceType = Literal["notion_db", "notion_page", "slack"]

CASE_STATUSES: tuple[str, ...] = get_args(CaseStatus)
ACTION_STATUSES: tuple[str, ...] = get_args(ActionStatus)
RESPONSE_STATUSES: tuple[str, ...] = get_args(ResponseStatus)
FIELD_TYPES: tuple[str, ...] = get_args(FieldType)
SOURCE_TYPES: tuple[str, ...] = get_args(SourceType)

DEFAULT_CASE_STATUS: CaseStatus = "OPEN"
DEFAULT_ACTION_STATUS: ActionStatus = "TODO"
DEFAULT_RESPONSE_STATUS: ResponseStatus = "backlog"


def normalize_case_status(value: str | None) -> CaseStatus:
    """Empty status means OPEN; anything else must be a known status."""
    if not value:
        return DEFAULT_CASE_STATUS
    return parse_case_status(value)


def parse_case_status(value: str) -> CaseStatus:
    normalized = value.strip().upper()
    if normalized not in CASE_STATUSES:
        raise ValidationError("invalid case status", value=value)
    return normalized  # type: ignore[return-value]


def parse_action_status(value: str) -> ActionStatus:
    normalized = value.strip().upper().replace("-", "_")
    if normalized not in ACTION_STATUSES:
        raise ValidationError("invalid action status", value=value)
    return normalized  # type: ignore[return-value]


def parse_response_status(value: str) -> ResponseStatus:
    normalized = value.strip().lower().replace("_", "-")
    if normalized not in RESPONSE_STATUSES:
        raise ValidationError("invalid response status", value=value)
    return normalized  # type: ignore[return-value]


def parse_field_type(value: str) -> FieldType:
    if value not in FIELD_TYPES:
        raise ValidationError("invalid field type", value=value)
    return value  # type: ignore[return-value]
