"""Abstract base classes for the score engine and its collaborators."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple


class FieldRecord(ABC):
    """
    Capability interface over a content record.

    Any storage backend can implement this; the engine only ever reads field
    values, resolves references, and writes the single score field.
    """

    @property
    @abstractmethod
    def id(self) -> Any:
        ...

    @property
    @abstractmethod
    def entity_type(self) -> str:
        ...

    @property
    @abstractmethod
    def bundle(self) -> str:
        ...

    @abstractmethod
    def has_field(self, name: str) -> bool:
        ...

    @abstractmethod
    def get_field(self, name: str) -> Any:
        """Raw stored value, or None when absent."""
        ...

    @abstractmethod
    def is_multiple(self, name: str) -> bool:
        ...

    @abstractmethod
    def resolve_reference(self, name: str) -> Optional["FieldRecord"]:
        """Load the record a reference field points at, or None."""
        ...

    @abstractmethod
    def set_field(self, name: str, value: Any) -> None:
        ...


class DiagnosticsSink(ABC):
    """Receives leveled messages with structured context. Never affects control flow."""

    @abstractmethod
    def log(self, level: str, message: str, **context: Any) -> None:
        ...

    def notice(self, message: str, **context: Any) -> None:
        self.log("notice", message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.log("warning", message, **context)

    def error(self, message: str, **context: Any) -> None:
        self.log("error", message, **context)


class ComponentEvaluator(ABC):
    """Scores one component variant against a record."""

    @property
    @abstractmethod
    def component_type(self) -> str:
        """Type tag handled by this evaluator (e.g. 'list_mapping')."""
        ...

    @abstractmethod
    def evaluate(self, record: FieldRecord, component, diagnostics: DiagnosticsSink) -> float:
        """
        Compute the sub-score for *component* on *record*.

        Returns:
            Points on the fixed 15-point component scale. Unresolvable input
            yields 0.0 and a diagnostic, never an exception.
        """
        ...


class ScoreAggregator(ABC):
    """Combines (component, sub-score) pairs into final points."""

    @abstractmethod
    def totals(self, scored: Sequence[Tuple[Any, float]]) -> Tuple[float, float]:
        """Return (weighted_average, bonus_total) before clamping."""
        ...

    @abstractmethod
    def aggregate(self, scored: Sequence[Tuple[Any, float]]) -> float:
        ...


class DefinitionStore(ABC):
    """Read side of the score definition store."""

    @abstractmethod
    def get_definitions(self) -> Dict[str, Any]:
        """All definitions keyed by name, in insertion order."""
        ...

    @abstractmethod
    def get_definition(self, name: str):
        ...


class RecordSource(ABC):
    """Enumerates, loads and persists records for bulk recalculation."""

    @abstractmethod
    def find_ids(self, entity_type: str, bundle: str) -> List[Any]:
        ...

    @abstractmethod
    def load(self, entity_type: str, record_id: Any) -> Optional[FieldRecord]:
        ...

    @abstractmethod
    def save(self, record: FieldRecord) -> None:
        ...


class FieldExistenceChecker(ABC):
    """Answers whether a bundle defines a field."""

    @abstractmethod
    def field_exists(self, entity_type: str, bundle: str, field_name: str) -> bool:
        ...
