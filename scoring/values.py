"""Field value extraction and coercion shared by all evaluators."""

import math
from typing import Any, Optional

from scoring.protocols import DiagnosticsSink, FieldRecord
from scoring.records import Reference


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def get_field_value(
    record: FieldRecord, field_name: Optional[str], diagnostics: DiagnosticsSink
) -> Any:
    """
    Extract a single scalar from a record field.

    Multi-valued fields yield their first item, booleans become 0/1 and
    references become the target id. Returns None when the field is missing
    (reported as a warning) or empty.
    """
    if not field_name or not record.has_field(field_name):
        diagnostics.warning(
            "Record does not have field",
            record_id=record.id,
            bundle=record.bundle,
            field=field_name,
        )
        return None

    value = record.get_field(field_name)
    if is_empty(value):
        return None

    if record.is_multiple(field_name) and isinstance(value, (list, tuple)):
        value = value[0]
        if is_empty(value):
            return None

    if isinstance(value, Reference):
        return value.target_id
    if isinstance(value, FieldRecord):
        return value.id
    if isinstance(value, bool):
        return int(value)
    return value


def to_number(value: Any) -> Optional[float]:
    """Coerce a field value to a finite float, or None if it is not numeric."""
    if value is None or isinstance(value, bool):
        return None if value is None else float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def is_truthy(value: Any) -> bool:
    """Truthiness as stored form data sees it: '0', '', 0 and None are false."""
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)
