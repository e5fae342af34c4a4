"""Aggregate field-value queries shared by both adapters.

Only cases whose stored value for ``field_id`` has exactly ``field_type`` are
considered; a different type stored under the same field ID is excluded from
both counts.
"""

from __future__ import annotations

from collections.abc import Iterable

from casebook.models.case import Case, FieldValue
from casebook.models.validator import is_valid


def _matching(cases: Iterable[Case], field_id: str, field_type: str) -> Iterable[tuple[Case, FieldValue]]:
    for case in cases:
        fv = case.field_values.get(field_id)
        if fv is None or fv.type != field_type:
            continue
        yield case, fv


def count_field_values(
    cases: Iterable[Case],
    field_id: str,
    field_type: str,
    valid_values: Iterable[str],
) -> tuple[int, int]:
    """Return (total considered, number valid)."""
    valid_set = set(valid_values)
    total = valid = 0
    for _, fv in _matching(cases, field_id, field_type):
        total += 1
        if is_valid(fv, field_type, valid_set):
            valid += 1
    return total, valid


def find_invalid_field_value(
    cases: Iterable[Case],
    field_id: str,
    field_type: str,
    valid_values: Iterable[str],
) -> Case | None:
    """First case in iteration order holding an invalid value, else None."""
    valid_set = set(valid_values)
    for case, fv in _matching(cases, field_id, field_type):
        if not is_valid(fv, field_type, valid_set):
            return case
    return None
