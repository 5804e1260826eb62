"""Dict-backed record implementation and the reference value type."""

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from scoring.protocols import FieldRecord


@dataclass(frozen=True)
class Reference:
    """Value of a reference-typed field: points at another record (a term)."""
    target_id: Any
    target_type: str = "taxonomy_term"

    def to_dict(self) -> Dict[str, Any]:
        return {"target_id": self.target_id, "target_type": self.target_type}


Resolver = Callable[[Reference], Optional[FieldRecord]]


class InMemoryRecord(FieldRecord):
    """
    Record over a plain ``{field_name: value}`` dict.

    Args:
        record_id: Identifier of the record.
        entity_type: Record type (e.g. 'node', 'taxonomy_term').
        bundle: Record subtype.
        fields: Field values. Lists are multi-valued fields, ``Reference``
            values are reference fields, ``FieldRecord`` values are
            references whose target is already loaded.
        defined_fields: Names of the fields the bundle defines. When given,
            a field may exist without a value; when omitted, the keys of
            *fields* are the defined fields.
        multiple: Names of multi-valued fields.
        resolver: Loads the target of a ``Reference``.
    """

    def __init__(
        self,
        record_id: Any,
        entity_type: str,
        bundle: str,
        fields: Optional[Dict[str, Any]] = None,
        defined_fields: Optional[Iterable[str]] = None,
        multiple: Optional[Iterable[str]] = None,
        resolver: Optional[Resolver] = None,
    ):
        self._id = record_id
        self._entity_type = entity_type
        self._bundle = bundle
        self.fields: Dict[str, Any] = dict(fields or {})
        self._defined = set(defined_fields) if defined_fields is not None else None
        self._multiple = set(multiple or ())
        self._resolver = resolver

    @property
    def id(self) -> Any:
        return self._id

    @property
    def entity_type(self) -> str:
        return self._entity_type

    @property
    def bundle(self) -> str:
        return self._bundle

    def has_field(self, name: str) -> bool:
        if not name:
            return False
        if self._defined is not None:
            return name in self._defined
        return name in self.fields

    def get_field(self, name: str) -> Any:
        return self.fields.get(name)

    def is_multiple(self, name: str) -> bool:
        return name in self._multiple or isinstance(self.fields.get(name), (list, tuple))

    def resolve_reference(self, name: str) -> Optional[FieldRecord]:
        value = self.get_field(name)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if isinstance(value, FieldRecord):
            return value
        if isinstance(value, Reference) and self._resolver is not None:
            return self._resolver(value)
        return None

    def set_field(self, name: str, value: Any) -> None:
        self.fields[name] = value

    def copy(self) -> "InMemoryRecord":
        """Snapshot with independent field values (referenced records are shared)."""
        clone = copy.copy(self)
        clone.fields = {
            k: list(v) if isinstance(v, list) else v for k, v in self.fields.items()
        }
        return clone

    def __repr__(self) -> str:
        return f"<InMemoryRecord({self._entity_type}:{self._bundle}:{self._id})>"
