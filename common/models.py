"""
Storage model dataclasses.

Each model provides:
- from_row(): classmethod to construct from a database row tuple
- to_dict(): plain dict form
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from scoring.protocols import FieldRecord
from scoring.records import Reference

NUMERIC_FIELD_TYPES = ("decimal", "float", "integer")


@dataclass
class FieldDefinition:
    """A field a bundle defines (its storage schema, not its value)."""
    entity_type: str
    bundle: str
    field_name: str
    field_type: str
    label: Optional[str] = None
    is_multiple: bool = False

    @property
    def is_numeric(self) -> bool:
        return self.field_type in NUMERIC_FIELD_TYPES

    @classmethod
    def from_row(cls, row: tuple) -> "FieldDefinition":
        return cls(
            entity_type=row[0],
            bundle=row[1],
            field_name=row[2],
            field_type=row[3],
            label=row[4],
            is_multiple=bool(row[5]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'entity_type': self.entity_type,
            'bundle': self.bundle,
            'field_name': self.field_name,
            'field_type': self.field_type,
            'label': self.label,
            'is_multiple': self.is_multiple,
        }


@dataclass
class RecordRow:
    """Raw row of the records table, field values still JSON-decoded only."""
    entity_type: str
    id: str
    bundle: str
    fields: Dict[str, Any]
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: tuple, fields: Dict[str, Any]) -> "RecordRow":
        return cls(
            entity_type=row[0],
            id=row[1],
            bundle=row[2],
            fields=fields,
            updated_at=row[4] if len(row) > 4 else None,
        )


def encode_value(value: Any) -> Any:
    """Field value -> JSON-compatible form. References become target dicts."""
    if isinstance(value, Reference):
        return value.to_dict()
    if isinstance(value, FieldRecord):
        return {"target_id": value.id, "target_type": value.entity_type}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def decode_value(value: Any) -> Any:
    if isinstance(value, dict) and "target_id" in value:
        return Reference(value["target_id"], value.get("target_type") or "taxonomy_term")
    if isinstance(value, list):
        return [decode_value(v) for v in value]
    return value
