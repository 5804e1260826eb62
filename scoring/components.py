"""
Score component variants.

A definition stores its components as plain dicts (``{"type": ..., "field":
..., "weight": ...}``). ``parse_component`` turns each dict into one of the
frozen dataclasses below. Unknown type tags are preserved as
``UnknownComponent`` rather than rejected, so a definition written by a newer
release still loads and simply scores that component as 0.
"""

from dataclasses import dataclass, field as dc_field
from typing import Any, Dict, Optional

DIRECT_PERCENTAGE = "direct_percentage"
PERCENTAGE_CALCULATION = "percentage_calculation"
LIST_MAPPING = "list_mapping"
CAPPED_LINEAR = "capped_linear"
TAXONOMY_FIELD_VALUE = "taxonomy_field_value"
BOOLEAN_POINTS = "boolean_points"

DEFAULT_TYPE = DIRECT_PERCENTAGE

# Every component scores on this fixed scale so bonus points and the weighted
# average share units.
POINTS_SCALE = 15.0


def _to_float(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no")
    return bool(value)


@dataclass(frozen=True)
class Component:
    """Fields shared by every variant."""
    TYPE = ""

    weight: float = 1.0
    is_bonus: bool = False

    @property
    def type(self) -> str:
        return self.TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "weight": self.weight, "is_bonus": self.is_bonus}


@dataclass(frozen=True)
class DirectPercentage(Component):
    TYPE = DIRECT_PERCENTAGE

    field: Optional[str] = None
    max_points: float = 100.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"field": self.field, "max_points": self.max_points})
        return data


@dataclass(frozen=True)
class PercentageCalculation(Component):
    TYPE = PERCENTAGE_CALCULATION

    numerator_field: Optional[str] = None
    denominator_field: Optional[str] = None
    max_points: float = 100.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "numerator_field": self.numerator_field,
            "denominator_field": self.denominator_field,
            "max_points": self.max_points,
        })
        return data


@dataclass(frozen=True)
class ListMapping(Component):
    TYPE = LIST_MAPPING

    field: Optional[str] = None
    mappings: Dict[str, Any] = dc_field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"field": self.field, "mappings": dict(self.mappings)})
        return data


@dataclass(frozen=True)
class CappedLinear(Component):
    TYPE = CAPPED_LINEAR

    field: Optional[str] = None
    max_value: float = 25.0
    max_points: float = 100.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "field": self.field,
            "max_value": self.max_value,
            "max_points": self.max_points,
        })
        return data


@dataclass(frozen=True)
class TaxonomyFieldValue(Component):
    TYPE = TAXONOMY_FIELD_VALUE

    field: Optional[str] = None
    taxonomy_field: str = "field_score"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"field": self.field, "taxonomy_field": self.taxonomy_field})
        return data


@dataclass(frozen=True)
class BooleanPoints(Component):
    TYPE = BOOLEAN_POINTS

    field: Optional[str] = None
    points: float = 5.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"field": self.field, "points": self.points})
        return data


@dataclass(frozen=True)
class UnknownComponent(Component):
    """Component whose type tag no evaluator handles; the raw dict is kept."""
    TYPE = "unknown"

    type_name: str = ""
    raw: Dict[str, Any] = dc_field(default_factory=dict)

    @property
    def type(self) -> str:
        return self.type_name

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw)



def parse_component(data: Dict[str, Any]) -> Component:
    """Build a component from its stored dict form."""
    type_name = data.get("type") or DEFAULT_TYPE
    common = {
        "weight": _to_float(data.get("weight"), 1.0),
        "is_bonus": _to_bool(data.get("is_bonus", False)),
    }

    if type_name == DIRECT_PERCENTAGE:
        return DirectPercentage(
            field=data.get("field"),
            max_points=_to_float(data.get("max_points"), 100.0),
            **common,
        )
    if type_name == PERCENTAGE_CALCULATION:
        return PercentageCalculation(
            numerator_field=data.get("numerator_field"),
            denominator_field=data.get("denominator_field"),
            max_points=_to_float(data.get("max_points"), 100.0),
            **common,
        )
    if type_name == LIST_MAPPING:
        return ListMapping(
            field=data.get("field"),
            mappings={str(k): v for k, v in (data.get("mappings") or {}).items()},
            **common,
        )
    if type_name == CAPPED_LINEAR:
        return CappedLinear(
            field=data.get("field"),
            max_value=_to_float(data.get("max_value"), 25.0),
            max_points=_to_float(data.get("max_points"), 100.0),
            **common,
        )
    if type_name == TAXONOMY_FIELD_VALUE:
        return TaxonomyFieldValue(
            field=data.get("field"),
            taxonomy_field=data.get("taxonomy_field") or "field_score",
            **common,
        )
    if type_name == BOOLEAN_POINTS:
        return BooleanPoints(
            field=data.get("field"),
            points=_to_float(data.get("points"), 5.0),
            **common,
        )

    return UnknownComponent(type_name=str(type_name), raw=dict(data), **common)
