"""Domain models for the casebook repository layer."""

from casebook.models.action import Action
from casebook.models.assist_log import AssistLog
from casebook.models.case import Case, FieldValue
from casebook.models.field_schema import EntityLabels, FieldDefinition, FieldOption, FieldSchema
from casebook.models.knowledge import Knowledge, Memory
from casebook.models.risk import Response, Risk, RiskResponse
from casebook.models.slack import SlackMessage, SlackUser, SlackUserMetadata
from casebook.models.source import (
    NotionDBConfig,
    NotionPageConfig,
    SlackChannel,
    SlackConfig,
    Source,
    parse_notion_id,
)
from casebook.models.token import Token

__all__ = [
    "Action",
    "AssistLog",
    "Case",
    "EntityLabels",
    "FieldDefinition",
    "FieldOption",
    "FieldSchema",
    "FieldValue",
    "Knowledge",
    "Memory",
    "NotionDBConfig",
    "NotionPageConfig",
    "Response",
    "Risk",
    "RiskResponse",
    "SlackChannel",
    "SlackConfig",
    "SlackMessage",
    "SlackUser",
    "SlackUserMetadata",
    "Source",
    "Token",
    "parse_notion_id",
]
