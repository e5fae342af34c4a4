"""Field-value validation against declared types and option sets.

Two entry points:

- ``is_valid(value, declared_type, valid_options)``: boolean check used by
  the repository aggregate queries. A shape mismatch is "invalid", never an
  exception.
- ``FieldValidator(schema).validate_case_fields(values)``: strict check for
  callers that own a field schema, run before they hand a Case to the
  repository (which stores field values without consulting any schema).
  Raises ValidationError naming the offending field.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from datetime import datetime
from typing import Any

from casebook.errors import ValidationError
from casebook.models.case import FieldValue
from casebook.models.field_schema import FieldDefinition, FieldSchema

_OPTION_TYPES = frozenset({"select", "multi-select"})
_STRING_TYPES = frozenset({"text", "url", "user", "select"})
_LIST_TYPES = frozenset({"multi-select", "multi-user"})


def _as_string_list(raw: Any) -> list[str] | None:
    """Decode a stored multi-value into list[str], or None if it is not one."""
    if isinstance(raw, (str, bytes)) or not isinstance(raw, (list, tuple)):
        return None
    if not all(isinstance(v, str) for v in raw):
        return None
    return list(raw)


def _shape_matches(raw: Any, declared_type: str) -> bool:
    if declared_type in _STRING_TYPES:
        return isinstance(raw, str)
    if declared_type in _LIST_TYPES:
        return _as_string_list(raw) is not None
    if declared_type == "number":
        return isinstance(raw, (int, float)) and not isinstance(raw, bool)
    if declared_type == "date":
        if isinstance(raw, datetime):
            return True
        if isinstance(raw, str):
            try:
                datetime.fromisoformat(raw)
            except ValueError:
                return False
            return True
    return False


def is_valid(
    value: FieldValue | Any,
    declared_type: str,
    valid_options: Collection[str] | None = None,
) -> bool:
    """Return True if ``value`` conforms to ``declared_type`` and options.

    ``value`` may be a FieldValue (its own type must equal ``declared_type``)
    or a bare stored value. ``valid_options`` only constrains select and
    multi-select; ``None`` skips the option check.
    """
    raw = value
    if isinstance(value, FieldValue):
        if value.type != declared_type:
            return False
        raw = value.value

    if not _shape_matches(raw, declared_type):
        return False
    if valid_options is None or declared_type not in _OPTION_TYPES:
        return True

    allowed = valid_options if isinstance(valid_options, (set, frozenset)) else set(valid_options)
    if declared_type == "select":
        return raw in allowed
    return all(item in allowed for item in _as_string_list(raw) or [])


class FieldValidator:
    """Validates a Case's field values against a workspace field schema.

    Usage:
        validator = FieldValidator(schema)
        validator.validate_case_fields(case.field_values)
    """

    def __init__(self, schema: FieldSchema) -> None:
        self._schema = schema
        self._definitions = {fd.id: fd for fd in schema.fields}

    def validate_case_fields(self, field_values: Mapping[str, FieldValue] | Iterable[FieldValue]) -> None:
        """Raise ValidationError on the first violation.

        Values for fields absent from the schema are ignored; every required
        field must be present.
        """
        values = field_values.values() if isinstance(field_values, Mapping) else field_values

        provided: set[str] = set()
        for fv in values:
            definition = self._definitions.get(fv.field_id)
            if definition is None:
                continue
            provided.add(fv.field_id)
            self._validate_value(definition, fv)

        for definition in self._schema.fields:
            if definition.required and definition.id not in provided:
                raise ValidationError("required field not provided", field_id=definition.id)

    def _validate_value(self, definition: FieldDefinition, fv: FieldValue) -> None:
        if fv.type != definition.type or not _shape_matches(fv.value, definition.type):
            raise ValidationError(
                "field value does not match declared type",
                field_id=definition.id,
                expected_type=definition.type,
                actual_type=fv.type,
            )
        if definition.type not in _OPTION_TYPES:
            return

        option_ids = definition.option_ids()
        selected = [fv.value] if definition.type == "select" else fv.value
        for option_id in selected:
            if option_id not in option_ids:
                raise ValidationError(
                    "option ID not found in field definition",
                    field_id=definition.id,
                    option_id=option_id,
                )


def validate_case_fields(schema: FieldSchema, field_values: Mapping[str, FieldValue] | Iterable[FieldValue]) -> None:
    FieldValidator(schema).validate_case_fields(field_values)
