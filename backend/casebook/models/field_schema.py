"""Workspace field schema: the caller-defined fields a Case may carry."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from casebook.models.types import FieldType


class FieldOption(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    color: str = ""  # Optional hex color code
    metadata: dict[str, Any] = Field(default_factory=dict)


class FieldDefinition(BaseModel):
    id: str
    name: str = ""
    type: FieldType
    required: bool = False
    description: str = ""
    options: list[FieldOption] = Field(default_factory=list)  # select / multi-select only

    def option_ids(self) -> set[str]:
        return {opt.id for opt in self.options}


class EntityLabels(BaseModel):
    case: str = "Case"


class FieldSchema(BaseModel):
    fields: list[FieldDefinition] = Field(default_factory=list)
    labels: EntityLabels = Field(default_factory=EntityLabels)

    def get(self, field_id: str) -> FieldDefinition | None:
        for definition in self.fields:
            if definition.id == field_id:
                return definition
        return None
